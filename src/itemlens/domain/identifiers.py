"""Canonical item identifiers.

Item ids arrive in several textual shapes: braced (``{AAAA...}``), lower or
mixed case, and the 32-digit unhyphenated form used by the live store. Every
membership test and map key in the pipeline uses the canonical shape
``XXXXXXXX-XXXX-XXXX-XXXX-XXXXXXXXXXXX`` in upper case.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

_HEX = "[0-9A-Fa-f]"

# Embedded identifiers inside free text, optionally wrapped in braces.
EMBEDDED_ID_PATTERN = re.compile(
    rf"\{{?({_HEX}{{8}}-{_HEX}{{4}}-{_HEX}{{4}}-{_HEX}{{4}}-{_HEX}{{12}})\}}?"
)

_HYPHENATED = re.compile(rf"^{_HEX}{{8}}-{_HEX}{{4}}-{_HEX}{{4}}-{_HEX}{{4}}-{_HEX}{{12}}$")
_COMPACT = re.compile(rf"^{_HEX}{{32}}$")


def canonicalize_id(value: str) -> str:
    """Return the canonical identifier for ``value`` or raise ``ValueError``."""

    text = value.strip()
    if text.startswith("{") and text.endswith("}"):
        text = text[1:-1].strip()
    if _HYPHENATED.match(text):
        return text.upper()
    if _COMPACT.match(text):
        upper = text.upper()
        return f"{upper[:8]}-{upper[8:12]}-{upper[12:16]}-{upper[16:20]}-{upper[20:]}"
    raise ValueError(f"Not an item identifier: {value!r}")


def try_canonicalize_id(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    try:
        return canonicalize_id(value)
    except ValueError:
        return None


def find_embedded_ids(text: str) -> Iterator[str]:
    """Yield canonical identifiers found in ``text`` in order of appearance."""

    for match in EMBEDDED_ID_PATTERN.finditer(text):
        yield match.group(1).upper()


def unique_ids(values: Iterable[str]) -> list[str]:
    """Canonicalize ``values`` keeping first-seen order; invalid entries are dropped."""

    seen: set[str] = set()
    ordered: list[str] = []
    for value in values:
        canonical = try_canonicalize_id(value)
        if canonical is None or canonical in seen:
            continue
        seen.add(canonical)
        ordered.append(canonical)
    return ordered


def braced(identifier: str) -> str:
    return f"{{{canonicalize_id(identifier)}}}"
