from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Iterable, Sequence

import app.core.runtime as runtime
from ..schemas.blog import CommentPublic, PostPublic
from .rendering import StreamAction, render_fragment
from .session import RequestContext


logger = logging.getLogger(__name__)


def comments_channel(post_id: str | int) -> str:
    return f"post_{post_id}_comments"


def post_channel(post_id: str | int) -> str:
    return f"post_{post_id}"


@dataclass(frozen=True)
class Broadcast:
    channel: str
    action: StreamAction

    def encode(self) -> str:
        return json.dumps({"channel": self.channel, **self.action.to_message()})


def comment_list_action(post: PostPublic, comments: Sequence[CommentPublic], ctx: RequestContext | None = None) -> StreamAction:
    html = render_fragment("comments/_list.html", ctx, post=post, comments=comments)
    return StreamAction("replace", f"post_{post.id}_comments_list", html)


def comment_count_action(post: PostPublic, count: int, ctx: RequestContext | None = None) -> StreamAction:
    html = render_fragment("comments/_count.html", ctx, post=post, count=count)
    return StreamAction("update", f"comments_count_{post.id}", html)


def likes_action(post: PostPublic) -> StreamAction:
    return StreamAction("update", f"post_{post.id}_likes", render_fragment("posts/_likes.html", post=post))


def comment_broadcasts(post: PostPublic, comments: Sequence[CommentPublic]) -> list[Broadcast]:
    """Messages sent after a comment of ``post`` was created or destroyed."""
    channel = comments_channel(post.id)
    return [
        Broadcast(channel, comment_list_action(post, comments)),
        Broadcast(channel, comment_count_action(post, len(comments))),
    ]


def post_broadcasts(post: PostPublic) -> list[Broadcast]:
    channel = post_channel(post.id)
    return [
        Broadcast(channel, StreamAction("replace", f"post_{post.id}", render_fragment("posts/_post.html", post=post))),
        Broadcast(channel, likes_action(post)),
    ]


def likes_broadcasts(post: PostPublic) -> list[Broadcast]:
    return [Broadcast(post_channel(post.id), likes_action(post))]


async def publish(broadcasts: Iterable[Broadcast]) -> int:
    """Push each message to its channel; subscribers that are not connected miss it."""
    redis = runtime.redis_client
    if redis is None:
        logger.warning("Skipping broadcast, redis not initialized")
        return 0
    sent = 0
    for item in broadcasts:
        try:
            receivers = await redis.publish(item.channel, item.encode())
        except Exception as e:
            logger.warning("Broadcast to %s failed: %s", item.channel, e)
            continue
        logger.info("Broadcast %s %s to %s (%s receivers)", item.action.action, item.action.target, item.channel, receivers)
        sent += 1
    return sent
