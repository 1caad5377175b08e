"""Manifold SQL quoting helpers.

Manifold identifiers are bracketed (``[Drawing Table]``); a closing
bracket inside a name is doubled. Component references inside
``CoordSys("..." AS COMPONENT)`` are double-quoted literals; embedded
double quotes are doubled.
"""

from __future__ import annotations


def quote_identifier(name: str) -> str:
    """Bracket-quote a table or column name."""
    return "[" + str(name).replace("]", "]]") + "]"


def quote_literal(value: str) -> str:
    """Double-quote a string literal for Manifold SQL."""
    return '"' + str(value).replace('"', '""') + '"'
