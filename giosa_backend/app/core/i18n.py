from __future__ import annotations

import os
from typing import Any

AVAILABLE_LOCALES: tuple[str, ...] = ("es", "en")


def get_default_locale() -> str:
    locale = os.getenv("DEFAULT_LOCALE", "es")
    return locale if locale in AVAILABLE_LOCALES else "es"


MESSAGES: dict[str, dict[str, str]] = {
    "es": {
        "app.name": "GiosaApp",
        "nav.posts": "Posts",
        "nav.new_post": "Nuevo post",
        "nav.toggle_theme": "Cambiar tema",
        "nav.toggle_locale": "English",
        "posts.title": "Posts",
        "posts.search_placeholder": "Buscar posts...",
        "posts.no_results": "No se encontraron posts",
        "posts.published": "Publicado",
        "posts.draft": "Borrador",
        "posts.likes": "Me gusta",
        "posts.edit": "Editar",
        "posts.delete": "Eliminar",
        "posts.delete_confirm": "¿Seguro que quieres eliminar este post?",
        "posts.back": "Volver a los posts",
        "posts.new_title": "Nuevo post",
        "posts.edit_title": "Editar post",
        "posts.form.title": "Título",
        "posts.form.content": "Contenido",
        "posts.form.published": "Publicado",
        "posts.form.submit": "Guardar post",
        "comments.title": "Comentarios",
        "comments.empty": "Todavía no hay comentarios",
        "comments.form.author_name": "Nombre",
        "comments.form.content": "Comentario",
        "comments.form.submit": "Comentar",
        "comments.delete": "Eliminar",
        "comments.draft_message": "Este post está en borrador. Publícalo para permitir comentarios.",
        "messages.post_created": "Post creado exitosamente",
        "messages.post_updated": "Post actualizado exitosamente",
        "messages.post_deleted": "Post eliminado exitosamente",
        "messages.post_liked": "¡Te gusta este post!",
        "messages.comment_created": "Comentario creado exitosamente",
        "messages.comment_created_title": "Comentario agregado",
        "messages.comment_deleted": "Comentario eliminado exitosamente",
        "messages.comment_deleted_title": "Comentario eliminado",
        "messages.comment_error": "No se pudo crear el comentario",
        "messages.draft_comment_error": "No se pueden agregar comentarios a un post en borrador",
        "messages.new_comment": "Nuevo comentario",
        "errors.post_draft": "no permite comentarios porque está en borrador",
        "errors.blank": "no puede estar en blanco",
        "errors.too_short": "es demasiado corto (mínimo {count} caracteres)",
        "errors.invalid": "no es válido",
        "errors.not_found": "La página que buscas no existe",
        "notifications.close": "Cerrar",
    },
    "en": {
        "app.name": "GiosaApp",
        "nav.posts": "Posts",
        "nav.new_post": "New post",
        "nav.toggle_theme": "Toggle theme",
        "nav.toggle_locale": "Español",
        "posts.title": "Posts",
        "posts.search_placeholder": "Search posts...",
        "posts.no_results": "No posts found",
        "posts.published": "Published",
        "posts.draft": "Draft",
        "posts.likes": "Likes",
        "posts.edit": "Edit",
        "posts.delete": "Delete",
        "posts.delete_confirm": "Are you sure you want to delete this post?",
        "posts.back": "Back to posts",
        "posts.new_title": "New post",
        "posts.edit_title": "Edit post",
        "posts.form.title": "Title",
        "posts.form.content": "Content",
        "posts.form.published": "Published",
        "posts.form.submit": "Save post",
        "comments.title": "Comments",
        "comments.empty": "No comments yet",
        "comments.form.author_name": "Name",
        "comments.form.content": "Comment",
        "comments.form.submit": "Comment",
        "comments.delete": "Delete",
        "comments.draft_message": "This post is a draft. Publish it to allow comments.",
        "messages.post_created": "Post was successfully created",
        "messages.post_updated": "Post was successfully updated",
        "messages.post_deleted": "Post was successfully deleted",
        "messages.post_liked": "You like this post!",
        "messages.comment_created": "Comment was successfully created",
        "messages.comment_created_title": "Comment added",
        "messages.comment_deleted": "Comment was successfully deleted",
        "messages.comment_deleted_title": "Comment deleted",
        "messages.comment_error": "The comment could not be created",
        "messages.draft_comment_error": "Comments cannot be added to a draft post",
        "messages.new_comment": "New comment",
        "errors.post_draft": "does not allow comments because it is a draft",
        "errors.blank": "can't be blank",
        "errors.too_short": "is too short (minimum is {count} characters)",
        "errors.invalid": "is invalid",
        "errors.not_found": "The page you were looking for doesn't exist",
        "notifications.close": "Close",
    },
}


def translate(key: str, locale: str | None = None, **params: Any) -> str:
    catalog = MESSAGES.get(locale or "", {})
    text = catalog.get(key) or MESSAGES[get_default_locale()].get(key) or key
    return text.format(**params) if params else text


def missing_keys() -> dict[str, set[str]]:
    """Keys present in some catalog but absent from the given locale."""
    every = set().union(*(set(m) for m in MESSAGES.values()))
    return {locale: every - set(catalog) for locale, catalog in MESSAGES.items() if every - set(catalog)}
