"""Renders a tenant's names into a RegexNER mapping file.

Each line of the output is a tab separated row understood by Stanford
CoreNLP's ``regexner`` annotator::

    <token patterns> TAB <TAG> TAB <overridable tags> TAB <priority>

Token patterns are space separated, one case-insensitive regex per word of
the name. Whitespace inside a name (tabs and newlines included) only ever
separates tokens, so a name can never break the row or column structure.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from gazetteer_core.cache.models import EntityKind, NameEntry

# Row groups are emitted in this order, most specific tag first.
KIND_ORDER: tuple[EntityKind, ...] = (
    EntityKind.organization,
    EntityKind.person,
    EntityKind.equipment,
)


def token_pattern(value: str) -> str | None:
    """Turn a raw name into a RegexNER token sequence, or None if blank."""
    words = value.split()
    if not words:
        return None
    return " ".join(f"(?i){re.escape(w.lower())}" for w in words)


def render_row(kind: EntityKind, pattern: str) -> str:
    return f"{pattern}\t{kind.tag}\t{kind.overridable}\t{kind.priority}"


def render(names: Iterable[NameEntry | tuple[str, str]]) -> str:
    """Render names into mapping-file text.

    Output depends only on the set of rows, never on input order: rows are
    deduplicated, grouped by kind and sorted within each group.
    """
    rows: dict[EntityKind, set[str]] = {kind: set() for kind in KIND_ORDER}
    for item in names:
        entry = NameEntry.coerce(item)
        pattern = token_pattern(entry.value)
        if pattern is None:
            continue
        rows[entry.kind].add(render_row(entry.kind, pattern))

    lines = [row for kind in KIND_ORDER for row in sorted(rows[kind])]
    if not lines:
        return ""
    return "\n".join(lines) + "\n"
