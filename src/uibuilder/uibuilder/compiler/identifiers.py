"""Variable name to JavaScript identifier translation."""

from __future__ import annotations

import re
from typing import Sequence

from uibuilder.models import Variable

_IDENTIFIER = re.compile(r"[a-zA-Z_$][a-zA-Z0-9_$]*")
_NON_IDENTIFIER_CHAR = re.compile(r"[^a-zA-Z0-9_$]")

FALLBACK_IDENTIFIER = "variable"


def to_valid_identifier(name: str) -> str:
    """Turn a display name into a valid identifier.

    Valid names are kept as-is. Others are camelCased from their
    alphanumeric words ("User Name" -> "userName"), prefixed with ``_`` when
    they start with a digit, and fall back to ``variable``.
    """
    identifier = name.strip()
    if _IDENTIFIER.fullmatch(identifier):
        return identifier

    words = [word for word in _NON_IDENTIFIER_CHAR.sub(" ", identifier).split(" ") if word]
    identifier = "".join(
        word[0].lower() + word[1:] if i == 0 else word[0].upper() + word[1:].lower()
        for i, word in enumerate(words)
    )

    if identifier and not _IDENTIFIER.match(identifier):
        identifier = "_" + identifier

    if not identifier or not _IDENTIFIER.fullmatch(identifier):
        identifier = FALLBACK_IDENTIFIER

    return identifier


def generate_variable_identifiers(variables: Sequence[Variable]) -> dict[str, str]:
    """Map each variable id to a unique identifier.

    Collisions get numeric suffixes in declaration order: ``count``,
    ``count1``, ``count2``...
    """
    identifiers: dict[str, str] = {}
    used: set[str] = set()

    for variable in variables:
        base = to_valid_identifier(variable.name)
        identifier = base
        counter = 1
        while identifier in used:
            identifier = f"{base}{counter}"
            counter += 1
        used.add(identifier)
        identifiers[variable.id] = identifier

    return identifiers
