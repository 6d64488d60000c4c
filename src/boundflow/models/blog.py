"""Blog post models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from boundflow.models._base import ApiBaseModel


class BlogPost(ApiBaseModel):
    pk: int
    title: str = ""
    slug: str = ""
    body: str = ""
    image: str = ""
    date_updated: str = ""
    username: str = ""


class BlogListResponse(ApiBaseModel):
    """Body of ``GET blog/list``."""

    results: list[BlogPost] = Field(default_factory=list)


class BlogViewState(BaseModel):
    model_config = ConfigDict(frozen=True)

    query: str = ""
    posts: list[BlogPost] = Field(default_factory=list)
