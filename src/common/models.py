"""Shared base model for decoding raw venue payloads."""

from __future__ import annotations

import json
import re
from typing import Annotated, Any, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import MessageParsingError

RawT = TypeVar("RawT", bound="RawModel")

# Unsigned integer exactly as sent on the wire; floats and numeric strings are rejected.
WireUInt = Annotated[int, Field(strict=True, ge=0)]
WireBool = Annotated[bool, Field(strict=True)]
WireStr = Annotated[str, Field(strict=True)]


def end_position(text: str) -> tuple[int, int]:
    lines = text.splitlines() or [""]
    return len(lines), len(lines[-1])


def offset_position(text: str, offset: int) -> tuple[int, int]:
    """1-based line and column of ``offset``, matching ``json.JSONDecodeError``."""

    line = text.count("\n", 0, offset) + 1
    column = offset - (text.rfind("\n", 0, offset) + 1) + 1
    return line, column


def field_position(text: str, loc: tuple[Any, ...]) -> tuple[int, int]:
    """Position of the value of the innermost named key in ``loc``.

    Keys are matched on their first occurrence in ``text``, so inside arrays
    of records the position may point at an earlier record carrying the same
    key. A key absent from ``text`` (a missing field) reports the end of the
    payload.
    """

    names = [part for part in loc if isinstance(part, str)]
    if names:
        match = re.search(r'"' + re.escape(names[-1]) + r'"\s*:\s*', text)
        if match:
            return offset_position(text, match.end())
    return end_position(text)


class RawModel(BaseModel):
    """Wire-shaped payload decoded exactly as the venue sends it.

    Unknown keys such as the ``type`` tag are ignored.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    @classmethod
    def parse(cls: Type[RawT], text: str) -> RawT:
        """Decode ``text`` into this model.

        Raises:
            MessageParsingError: With the decoder position for malformed JSON,
                the position of the offending value for a wrong-typed field,
                or the end-of-payload position for a missing field.
        """

        try:
            data: Any = json.loads(text)
        except json.JSONDecodeError as exc:
            raise MessageParsingError(exc.msg, exc.lineno, exc.colno) from exc
        return cls.from_data(data, text)

    @classmethod
    def from_data(cls: Type[RawT], data: Any, text: str = "") -> RawT:
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            first = exc.errors()[0]
            where = ".".join(str(part) for part in first["loc"]) or cls.__name__
            line, column = field_position(text, tuple(first["loc"]))
            raise MessageParsingError(f"{where}: {first['msg']}", line, column) from exc


__all__ = [
    "RawModel",
    "WireBool",
    "WireStr",
    "WireUInt",
    "end_position",
    "field_position",
    "offset_position",
]
