from __future__ import annotations

from typing import Any

import httpx


class BlogClient:
    """Thin async client for the endpoints the browser widgets call."""

    def __init__(self, base_url: str = "http://localhost:8000", transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._http = httpx.AsyncClient(base_url=base_url, transport=transport, headers={"Accept": "application/json"})

    async def __aenter__(self) -> "BlogClient":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def like(self, post_id: str) -> int:
        resp = await self._http.patch(f"/posts/{post_id}/like")
        resp.raise_for_status()
        return int(resp.json()["likes"])

    async def search(self, term: str) -> str:
        params = {"turbo_frame": "posts_list"}
        if term:
            params["search"] = term
        resp = await self._http.get("/posts", params=params, headers={"Accept": "text/html"})
        resp.raise_for_status()
        return resp.text

    async def create_post(self, title: str, content: str, published: bool = False) -> dict[str, Any]:
        resp = await self._http.post("/posts", json={"title": title, "content": content, "published": published})
        resp.raise_for_status()
        return resp.json()

    async def delete_post(self, post_id: str) -> None:
        resp = await self._http.delete(f"/posts/{post_id}")
        resp.raise_for_status()

    async def create_comment(self, post_id: str, author_name: str, content: str) -> dict[str, Any]:
        resp = await self._http.post(f"/posts/{post_id}/comments", json={"author_name": author_name, "content": content})
        resp.raise_for_status()
        return resp.json()

    async def delete_comment(self, post_id: str, comment_id: str) -> None:
        resp = await self._http.delete(f"/posts/{post_id}/comments/{comment_id}")
        resp.raise_for_status()
