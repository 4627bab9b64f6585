from __future__ import annotations

import logging

from .crud import blog


logger = logging.getLogger(__name__)

SAMPLE_POSTS: list[dict[str, object]] = [
    {
        "title": "Bienvenido a GiosaApp",
        "content": "Este es el primer post de nuestra aplicación.\n\nGiosaApp es una aplicación de ejemplo con posts, comentarios en tiempo real, búsqueda y likes.",
        "published": True,
    },
    {
        "title": "Comentarios en tiempo real",
        "content": "Cada comentario nuevo se envía a todos los lectores conectados del post, junto con el contador actualizado.",
        "published": True,
    },
    {
        "title": "Temas claro y oscuro",
        "content": "La preferencia de tema y de idioma se guarda en la sesión firmada del navegador.",
        "published": False,
    },
    {
        "title": "Búsqueda instantánea",
        "content": "La búsqueda filtra por título o contenido sin distinguir mayúsculas y minúsculas.",
        "published": True,
    },
]


async def seed_posts() -> int:
    """Create the sample posts that do not exist yet; returns how many were created."""
    created = 0
    for sample in SAMPLE_POSTS:
        if await blog.find_post_by_title(str(sample["title"])) is not None:
            continue
        await blog.create_post(dict(sample))
        created += 1
    logger.info("Seeded %d sample posts", created)
    return created
