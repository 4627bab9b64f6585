from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

import app.core.runtime as runtime
from ....core.broadcast import comments_channel, post_channel
from ....crud import blog


router = APIRouter()
logger = logging.getLogger(__name__)


@router.websocket("/posts/{post_id}/stream")
async def post_stream(websocket: WebSocket, post_id: str) -> None:
    """Relay every broadcast published for a post to one connected browser."""
    if runtime.redis_client is None:
        await websocket.close(code=1011)
        return
    if await blog.find_post(post_id) is None:
        await websocket.close(code=1008)
        return

    channels = (comments_channel(post_id), post_channel(post_id))
    pubsub = runtime.redis_client.pubsub()
    await pubsub.subscribe(*channels)
    await websocket.accept()
    logger.info("Subscriber joined %s", ", ".join(channels))

    async def relay() -> None:
        async for message in pubsub.listen():
            if message.get("type") != "message":
                continue
            data = message["data"]
            await websocket.send_text(data if isinstance(data, str) else data.decode())

    task = asyncio.create_task(relay())
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)
        await pubsub.unsubscribe(*channels)
        await pubsub.aclose()
        logger.info("Subscriber left %s", ", ".join(channels))
