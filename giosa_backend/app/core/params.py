from __future__ import annotations

from typing import Any, Iterable

from fastapi import Request


TRUTHY = ("1", "true", "on", "yes")


def as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in TRUTHY


async def read_params(request: Request, scope: str, fields: Iterable[str]) -> dict[str, Any]:
    """Collect permitted fields from a JSON body or a form, `scope[field]` or plain `field`."""
    raw: dict[str, Any] = {}
    if request.headers.get("content-type", "").startswith("application/json"):
        body = await request.json()
        if isinstance(body, dict):
            raw = body.get(scope) if isinstance(body.get(scope), dict) else body
    else:
        form = await request.form()
        prefix = f"{scope}["
        for key, value in form.multi_items():
            name = key[len(prefix):-1] if key.startswith(prefix) and key.endswith("]") else key
            if isinstance(value, str):
                raw[name] = value
    return {name: raw[name] for name in fields if name in raw}
