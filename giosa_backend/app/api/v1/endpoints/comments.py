from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from ....core.broadcast import comment_broadcasts, comment_count_action, comment_list_action, publish
from ....core.errors import RecordInvalid
from ....core.notifications import ToastCategory
from ....core.params import read_params
from ....core.rendering import (
    ResponseKind,
    StreamAction,
    get_response_kind,
    json_response,
    redirect,
    render_fragment,
    render_page,
    stream_response,
    toast_action,
)
from ....core.session import RequestContext, flash, get_request_context
from ....crud import blog


router = APIRouter()
logger = logging.getLogger(__name__)

COMMENT_FIELDS = ("author_name", "content")


@router.post("/posts/{post_id}/comments")
async def create_comment(
    request: Request,
    post_id: str,
    ctx: RequestContext = Depends(get_request_context),
    kind: ResponseKind = Depends(get_response_kind),
) -> Response:
    post = await blog.get_post(post_id)
    if not post.allows_comments:
        message = ctx.t("messages.draft_comment_error")
        if kind is ResponseKind.JSON:
            return json_response({"error": message}, status_code=422)
        if kind is ResponseKind.STREAM:
            draft = render_fragment("comments/_draft_message.html", ctx, post=post)
            return stream_response(
                [StreamAction("replace", "comment_form", draft), toast_action(ctx, message, ToastCategory.WARNING)],
                status_code=422,
            )
        flash(request, "alert", message)
        return redirect(f"/posts/{post.id}")

    data = await read_params(request, "comment", COMMENT_FIELDS)
    try:
        comment = await blog.create_comment(post, data)
    except RecordInvalid as exc:
        errors = exc.messages(ctx.locale)
        if kind is ResponseKind.JSON:
            return json_response({"errors": errors}, status_code=422)
        if kind is ResponseKind.STREAM:
            form = render_fragment("comments/_form.html", ctx, post=post, values=data, errors=errors)
            return stream_response([StreamAction("replace", "comment_form", form)], status_code=422)
        comments = await blog.list_comments(post.id)
        return render_page(
            request, "posts/show.html", ctx, status_code=422,
            post=post, comments=comments, count=len(comments), values=data, errors=errors,
        )

    post = await blog.get_post(post.id)
    comments = await blog.list_comments(post.id)
    logger.info("Comment %s created on post %s", comment.id, post.id)
    await publish(comment_broadcasts(post, comments))

    message = ctx.t("messages.comment_created")
    if kind is ResponseKind.JSON:
        return json_response(comment.model_dump(), status_code=201)
    if kind is ResponseKind.STREAM:
        return stream_response([
            comment_list_action(post, comments, ctx),
            comment_count_action(post, len(comments), ctx),
            StreamAction("replace", "comment_form", render_fragment("comments/_form.html", ctx, post=post, values={}, errors={})),
            toast_action(ctx, message, ToastCategory.SUCCESS, ctx.t("messages.comment_created_title")),
        ])
    flash(request, "notice", message)
    return redirect(f"/posts/{post.id}")


@router.delete("/posts/{post_id}/comments/{comment_id}")
@router.post("/posts/{post_id}/comments/{comment_id}/delete")
async def destroy_comment(
    request: Request,
    post_id: str,
    comment_id: str,
    ctx: RequestContext = Depends(get_request_context),
    kind: ResponseKind = Depends(get_response_kind),
) -> Response:
    post = await blog.get_post(post_id)
    await blog.delete_comment(post.id, comment_id)
    post = await blog.get_post(post.id)
    comments = await blog.list_comments(post.id)
    logger.info("Comment %s removed from post %s", comment_id, post.id)
    await publish(comment_broadcasts(post, comments))

    message = ctx.t("messages.comment_deleted")
    if kind is ResponseKind.JSON:
        return json_response({"ok": True})
    if kind is ResponseKind.STREAM:
        return stream_response([
            comment_list_action(post, comments, ctx),
            comment_count_action(post, len(comments), ctx),
            toast_action(ctx, message, ToastCategory.SUCCESS, ctx.t("messages.comment_deleted_title")),
        ])
    flash(request, "notice", message)
    return redirect(f"/posts/{post.id}")
