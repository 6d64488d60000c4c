"""boundflow - cache/network bound request state streams for async Python clients."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("boundflow")
except PackageNotFoundError:
    __version__ = "0+local"
from boundflow._transport import (
    ApiRequest,
    HttpRemoteCaller,
    RemoteCaller,
    SuccessEmpty,
    SuccessWithBody,
    TransportFailure,
    TransportOutcome,
)
from boundflow.cache import CacheStore, MemoryCacheStore
from boundflow.client import BoundflowClient
from boundflow.config import BoundflowConfig
from boundflow.connectivity import ConnectivityProbe, SocketConnectivityProbe, StaticConnectivityProbe
from boundflow.exceptions import (
    BoundflowAuthenticationError,
    BoundflowConfigError,
    BoundflowDomainError,
    BoundflowError,
    BoundflowStreamError,
    BoundflowTransportError,
)
from boundflow.jobs import Job, JobRegistry
from boundflow.models import (
    AccountProperties,
    AuthToken,
    AuthViewState,
    BlogPost,
    BlogViewState,
    Empty,
    Error,
    ErrorPresentation,
    Loading,
    RequestState,
    Success,
)
from boundflow.operations import Operation
from boundflow.resource import BoundResourceMediator, Translation
from boundflow.session import SessionManager
from boundflow.stream import StateStream

__all__ = [
    "__version__",
    "AccountProperties",
    "ApiRequest",
    "AuthToken",
    "AuthViewState",
    "BlogPost",
    "BlogViewState",
    "BoundResourceMediator",
    "BoundflowAuthenticationError",
    "BoundflowClient",
    "BoundflowConfig",
    "BoundflowConfigError",
    "BoundflowDomainError",
    "BoundflowError",
    "BoundflowStreamError",
    "BoundflowTransportError",
    "CacheStore",
    "ConnectivityProbe",
    "Empty",
    "Error",
    "ErrorPresentation",
    "HttpRemoteCaller",
    "Job",
    "JobRegistry",
    "Loading",
    "MemoryCacheStore",
    "Operation",
    "RemoteCaller",
    "RequestState",
    "SessionManager",
    "SocketConnectivityProbe",
    "StateStream",
    "StaticConnectivityProbe",
    "Success",
    "SuccessEmpty",
    "SuccessWithBody",
    "TransportFailure",
    "TransportOutcome",
    "Translation",
]
