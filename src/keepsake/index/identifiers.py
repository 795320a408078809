"""Deterministic document identifiers."""

from __future__ import annotations

from typing import Iterable

FNV_OFFSET_BASIS = 2166136261
FNV_PRIME = 16777619


def fnv1a_32(text: str) -> int:
    """32-bit FNV-1a over the UTF-16 code units of ``text``.

    Hashing code units rather than code points keeps ids identical to the ones
    produced for the web client, including for characters outside the BMP.
    """
    data = text.encode("utf-16-le")
    value = FNV_OFFSET_BASIS
    for offset in range(0, len(data), 2):
        value ^= int.from_bytes(data[offset : offset + 2], "little")
        value = (value * FNV_PRIME) & 0xFFFFFFFF
    return value


def make_document_id(prefix: str, key_fields: Iterable[str]) -> str:
    """Build ``{prefix}{8 hex digits}`` from the ``|``-joined key fields."""
    return f"{prefix}{fnv1a_32('|'.join(key_fields)):08x}"
