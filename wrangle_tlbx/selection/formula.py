"""Small parser for the formula-like ``select``/``by`` strings used by demean and degroup.

Grammar (whitespace is ignored)::

    formula := ["~"] term ("+" term)*
    term    := name (("*" | ":") name)*

A term with more than one name is an interaction, demeaned on the product of its parts.
"""

from __future__ import annotations

import re
from collections.abc import Iterable


Term = tuple[str, ...]

_INTERACTION = re.compile(r"[*:]")


def _split_term(raw: str, text: str) -> Term:
    parts = tuple(part.strip() for part in _INTERACTION.split(raw))
    if not all(parts):
        raise ValueError(f"Malformed term `{raw.strip()}` in formula `{text}`.")
    return parts


def parse_formula(text: str) -> tuple[Term, ...]:
    """Parse ``"~ x + y*z"`` into ``(("x",), ("y", "z"))``.

    Raises:
        ValueError: If the formula is empty, has a left-hand side or contains empty terms.
    """
    body = text.strip()
    if body.startswith("~"):
        body = body[1:]
    if "~" in body:
        raise ValueError(f"Formula `{text}` must be one-sided, e.g. `~ x + y`.")
    if not body.strip():
        raise ValueError("Formula must contain at least one variable.")
    return tuple(_split_term(raw, text) for raw in body.split("+"))


def parse_terms(select: str | Iterable[str]) -> tuple[Term, ...]:
    """Normalize ``select`` of demean/degroup into terms.

    A string is parsed as a formula; each entry of a sequence is parsed as one term,
    so ``["x", "y*z"]`` and ``"~ x + y*z"`` are equivalent.
    """
    if isinstance(select, str):
        return parse_formula(select)
    terms: list[Term] = []
    for item in select:
        if not isinstance(item, str):
            raise TypeError(f"Variable names must be strings, got {item!r}.")
        terms.extend(parse_formula(item))
    if not terms:
        raise ValueError("`select` must name at least one variable.")
    return tuple(terms)


def parse_by(spec: str | Iterable[str]) -> list[str]:
    """Flatten a grouping specification into a list of names.

    ``"~ g1 + g2"``, ``"g1"`` and ``["g1", "g2"]`` are all accepted; interaction markers
    are treated as separators because grouping variables are never multiplied.
    """
    names = [name for term in parse_terms(spec) for name in term]
    return list(dict.fromkeys(names))
