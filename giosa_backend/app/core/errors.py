from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from .i18n import translate


@dataclass(frozen=True)
class FieldError:
    field: str
    code: str
    params: dict[str, Any] = field(default_factory=dict)

    def message(self, locale: str | None = None) -> str:
        return translate(f"errors.{self.code}", locale, **self.params)


class RecordInvalid(Exception):
    """Model validation failed; carries one entry per offending field."""

    def __init__(self, details: list[FieldError]) -> None:
        self.details = details
        super().__init__(", ".join(f"{d.field} {d.code}" for d in details))

    def messages(self, locale: str | None = None) -> dict[str, list[str]]:
        out: dict[str, list[str]] = {}
        for detail in self.details:
            out.setdefault(detail.field, []).append(detail.message(locale))
        return out

    def codes(self) -> dict[str, list[str]]:
        out: dict[str, list[str]] = {}
        for detail in self.details:
            out.setdefault(detail.field, []).append(detail.code)
        return out

    @classmethod
    def from_validation_error(cls, exc: ValidationError) -> "RecordInvalid":
        details: list[FieldError] = []
        for err in exc.errors():
            name = str(err["loc"][0]) if err.get("loc") else "base"
            kind = err.get("type", "")
            if kind == "string_too_short" and not str(err.get("input") or "").strip():
                details.append(FieldError(name, "blank"))
            elif kind == "string_too_short":
                details.append(FieldError(name, "too_short", {"count": err.get("ctx", {}).get("min_length", 0)}))
            elif kind in ("missing", "blank") or (kind == "string_type" and err.get("input") is None):
                details.append(FieldError(name, "blank"))
            else:
                details.append(FieldError(name, "invalid"))
        return cls(details)
