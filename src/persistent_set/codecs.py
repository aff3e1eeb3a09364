"""Encode/decode pairs for turning member values into stored strings."""

from __future__ import annotations

import dataclasses
import json
from typing import Any, Callable, Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


@dataclasses.dataclass(frozen=True)
class Codec(Generic[T]):
    """A pair of mutually inverse conversions between ``T`` and ``str``.

    ``decode(encode(x))`` must compare equal to ``x``; nothing checks this.
    """

    encode: Callable[[T], str]
    decode: Callable[[str], T]


def _identity(value: str) -> str:
    return value


STRING_CODEC: Codec[str] = Codec(encode=_identity, decode=_identity)


def _encode_bool(value: bool) -> str:
    return "true" if value else "false"


def _decode_bool(raw: str) -> bool:
    if raw == "true":
        return True
    if raw == "false":
        return False
    raise ValueError(f"Expected 'true' or 'false', got {raw!r}")


_SCALAR_CODECS: dict[type, Codec[Any]] = {
    str: STRING_CODEC,
    int: Codec(encode=str, decode=int),
    float: Codec(encode=repr, decode=float),
    bool: Codec(encode=_encode_bool, decode=_decode_bool),
}


def scalar_codec(tp: type[T]) -> Codec[T]:
    """Return the stock codec for ``str``, ``int``, ``float`` or ``bool``."""
    try:
        return _SCALAR_CODECS[tp]
    except KeyError:
        raise TypeError(
            f"No scalar codec for {tp.__name__}; pass encode/decode or use json_codec()/model_codec()"
        ) from None


def json_codec() -> Codec[Any]:
    """Codec for JSON values. Keys are sorted so equal dicts encode identically."""
    return Codec(
        encode=lambda value: json.dumps(value, sort_keys=True, separators=(",", ":")),
        decode=json.loads,
    )


def model_codec(model_cls: type[M]) -> Codec[M]:
    """Codec for a pydantic model, via its JSON serialization."""
    return Codec(
        encode=lambda value: value.model_dump_json(),
        decode=model_cls.model_validate_json,
    )
