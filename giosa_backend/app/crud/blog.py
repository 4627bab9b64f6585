from __future__ import annotations

import datetime as dt
import logging
from typing import Any

from fastapi import HTTPException
from pydantic import ValidationError

import app.core.runtime as runtime
from ..core.errors import FieldError, RecordInvalid
from ..schemas.blog import CommentCreate, CommentPublic, PostCreate, PostPublic, PostUpdate


logger = logging.getLogger(__name__)

POSTS_KEY = "blog:posts"


def _now_iso() -> str:
    return dt.datetime.now(dt.timezone.utc).isoformat()


def _post_key(post_id: str | int) -> str:
    return f"blog:post:{post_id}"


def _comment_key(comment_id: str | int) -> str:
    return f"blog:comment:{comment_id}"


def _post_comments_key(post_id: str | int) -> str:
    return f"blog:post:{post_id}:comments"


def validate(model: type, data: dict[str, Any]) -> Any:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise RecordInvalid.from_validation_error(exc) from exc


def matches_search(post: PostPublic, term: str | None) -> bool:
    if not term:
        return True
    needle = term.casefold()
    return needle in post.title.casefold() or needle in post.content.casefold()


def _to_post(data: dict[str, Any], comments: int) -> PostPublic:
    created_at = data.get("created_at") or _now_iso()
    return PostPublic(
        id=str(data["id"]),
        title=data.get("title", ""),
        content=data.get("content", ""),
        published=data.get("published") == "1",
        likes=int(data.get("likes") or 0),
        comments=comments,
        createdAt=created_at,
        updatedAt=data.get("updated_at") or created_at,
    )


def _to_comment(data: dict[str, Any]) -> CommentPublic:
    return CommentPublic(
        id=str(data["id"]),
        post_id=str(data.get("post_id", "")),
        author_name=data.get("author_name", ""),
        content=data.get("content", ""),
        createdAt=data.get("created_at") or _now_iso(),
    )


async def find_post(post_id: str | int) -> PostPublic | None:
    redis = runtime.require_redis()
    data = await redis.hgetall(_post_key(post_id))
    # a hash without its id is a counter left behind by a like racing a delete
    if not data or "id" not in data:
        return None
    return _to_post(data, await redis.scard(_post_comments_key(post_id)))


async def get_post(post_id: str | int) -> PostPublic:
    post = await find_post(post_id)
    if post is None:
        raise HTTPException(status_code=404, detail="Post not found")
    return post


async def list_posts(search: str | None = None) -> list[PostPublic]:
    redis = runtime.require_redis()
    ids = sorted((int(x) for x in await redis.smembers(POSTS_KEY)), reverse=True)
    items: list[PostPublic] = []
    for pid in ids:
        post = await find_post(pid)
        if post is not None and matches_search(post, search):
            items.append(post)
    # newest first; ids break ties between posts created in the same instant
    items.sort(key=lambda p: (p.createdAt, int(p.id)), reverse=True)
    return items


async def find_post_by_title(title: str) -> PostPublic | None:
    for post in await list_posts():
        if post.title == title:
            return post
    return None


async def create_post(data: dict[str, Any]) -> PostPublic:
    payload: PostCreate = validate(PostCreate, data)
    redis = runtime.require_redis()
    pid = await redis.incr("blog:post_seq")
    created_at = _now_iso()
    await redis.hset(
        _post_key(pid),
        mapping={
            "id": str(pid),
            "title": payload.title,
            "content": payload.content,
            "published": "1" if payload.published else "0",
            "likes": "0",
            "created_at": created_at,
            "updated_at": created_at,
        },
    )
    await redis.sadd(POSTS_KEY, pid)
    return await get_post(pid)


async def update_post(post_id: str | int, data: dict[str, Any]) -> PostPublic:
    await get_post(post_id)
    payload: PostUpdate = validate(PostUpdate, data)
    mapping: dict[str, Any] = {}
    if payload.title is not None:
        mapping["title"] = payload.title
    if payload.content is not None:
        mapping["content"] = payload.content
    if payload.published is not None:
        mapping["published"] = "1" if payload.published else "0"
    if mapping:
        mapping["updated_at"] = _now_iso()
        await runtime.require_redis().hset(_post_key(post_id), mapping=mapping)
    return await get_post(post_id)


async def delete_post(post_id: str | int) -> PostPublic:
    """Delete a post together with every comment attached to it."""
    post = await get_post(post_id)
    redis = runtime.require_redis()
    comment_ids = await redis.smembers(_post_comments_key(post_id))
    if comment_ids:
        await redis.delete(*(_comment_key(cid) for cid in comment_ids))
    await redis.delete(_post_comments_key(post_id), _post_key(post_id))
    await redis.srem(POSTS_KEY, post_id)
    logger.info("Deleted post %s with %d comments", post_id, len(comment_ids))
    return post


async def increment_likes(post_id: str | int) -> int:
    """Add one like; a post deleted between the check and the increment is a 404."""
    await get_post(post_id)
    redis = runtime.require_redis()
    key = _post_key(post_id)
    likes = int(await redis.hincrby(key, "likes", 1))
    if not await redis.hexists(key, "id"):
        await redis.delete(key)
        logger.info("Post %s was deleted while being liked", post_id)
        raise HTTPException(status_code=404, detail="Post not found")
    return likes


async def list_comments(post_id: str | int) -> list[CommentPublic]:
    redis = runtime.require_redis()
    items: list[CommentPublic] = []
    for cid in await redis.smembers(_post_comments_key(post_id)):
        data = await redis.hgetall(_comment_key(cid))
        if data:
            items.append(_to_comment(data))
    items.sort(key=lambda c: (c.createdAt, int(c.id)))
    return items


async def count_comments(post_id: str | int) -> int:
    return int(await runtime.require_redis().scard(_post_comments_key(post_id)))


async def get_comment(post_id: str | int, comment_id: str | int) -> CommentPublic:
    data = await runtime.require_redis().hgetall(_comment_key(comment_id))
    if not data or str(data.get("post_id")) != str(post_id):
        raise HTTPException(status_code=404, detail="Comment not found")
    return _to_comment(data)


async def create_comment(post: PostPublic, data: dict[str, Any]) -> CommentPublic:
    details: list[FieldError] = []
    try:
        payload: CommentCreate | None = CommentCreate.model_validate(data)
    except ValidationError as exc:
        payload = None
        details.extend(RecordInvalid.from_validation_error(exc).details)
    if not post.allows_comments:
        details.append(FieldError("post", "post_draft"))
    if details or payload is None:
        raise RecordInvalid(details)

    redis = runtime.require_redis()
    cid = await redis.incr("blog:comment_seq")
    await redis.hset(
        _comment_key(cid),
        mapping={
            "id": str(cid),
            "post_id": str(post.id),
            "author_name": payload.author_name,
            "content": payload.content,
            "created_at": _now_iso(),
        },
    )
    await redis.sadd(_post_comments_key(post.id), cid)
    return await get_comment(post.id, cid)


async def delete_comment(post_id: str | int, comment_id: str | int) -> CommentPublic:
    comment = await get_comment(post_id, comment_id)
    redis = runtime.require_redis()
    await redis.delete(_comment_key(comment_id))
    await redis.srem(_post_comments_key(post_id), comment_id)
    return comment
