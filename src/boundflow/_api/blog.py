"""Blog search endpoint.

Endpoint:
  - blog/list?search=<query>
"""

from __future__ import annotations

from boundflow._transport import ApiRequest
from boundflow.models.auth import AuthToken
from boundflow.models.blog import BlogListResponse, BlogPost, BlogViewState
from boundflow.resource import Translation

BLOG_LIST_ENDPOINT = "blog/list"


def blog_cache_key(query: str) -> tuple[str, str]:
    return ("blog_search", query.strip().lower())


def build_blog_search_request(query: str, token: AuthToken | None) -> ApiRequest:
    headers = {"Authorization": f"Token {token.token}"} if token is not None else None
    return ApiRequest(
        method="GET",
        path=BLOG_LIST_ENDPOINT,
        params={"search": query.strip()},
        headers=headers,
    )


def translate_blog_list(query: str, response: BlogListResponse) -> Translation[BlogViewState]:
    return Translation.success(BlogViewState(query=query, posts=list(response.results)))


def view_state_from_cache(query: str, cached: list[BlogPost] | None) -> BlogViewState | None:
    if not cached:
        return None
    return BlogViewState(query=query, posts=cached)
