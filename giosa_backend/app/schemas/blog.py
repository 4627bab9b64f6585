from __future__ import annotations

from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, Field
from pydantic_core import PydanticCustomError


def _not_blank(value: str) -> str:
    if not value.strip():
        raise PydanticCustomError("blank", "can't be blank")
    return value


Title = Annotated[str, Field(min_length=5), AfterValidator(_not_blank)]
Body = Annotated[str, Field(min_length=10), AfterValidator(_not_blank)]
AuthorName = Annotated[str, Field(min_length=2), AfterValidator(_not_blank)]
CommentBody = Annotated[str, Field(min_length=5), AfterValidator(_not_blank)]


class PostCreate(BaseModel):
    title: Title
    content: Body
    published: bool = False


class PostUpdate(BaseModel):
    title: Optional[Title] = None
    content: Optional[Body] = None
    published: bool | None = None


class PostPublic(BaseModel):
    id: str
    title: str
    content: str
    published: bool
    likes: int
    comments: int = 0
    createdAt: str
    updatedAt: str

    @property
    def is_published(self) -> bool:
        return bool(self.published)

    @property
    def is_draft(self) -> bool:
        return not self.is_published

    @property
    def allows_comments(self) -> bool:
        return self.is_published


class CommentCreate(BaseModel):
    author_name: AuthorName
    content: CommentBody


class CommentPublic(BaseModel):
    id: str
    post_id: str
    author_name: str
    content: str
    createdAt: str
