"""Structured collector for recoverable conditions raised during transformations."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Literal


logger = logging.getLogger(__name__)

Level = Literal["info", "warning"]


@dataclass(frozen=True)
class Diagnostic:
    """A single recoverable condition.

    Attributes:
        level: ``"info"`` for advisories, ``"warning"`` for fallbacks that change the computation.
        message: Human-readable description.
        context: Optional context, usually the column the message refers to.
    """

    level: Level
    message: str
    context: str | None = None


@dataclass
class Diagnostics:
    """Collector passed by reference through selection and transformation calls.

    Records are appended only while ``verbose`` is True; each record is also
    forwarded to the package logger, so applications that configured logging
    see the messages without inspecting the collector.

    Example:
        >>> from wrangle_tlbx import Diagnostics, standardize
        >>> diag = Diagnostics()
        >>> _ = standardize([5, 5, 5, 5], diagnostics=diag)
        >>> diag.messages("warning")
        ['SD is 0 - variable not standardized (only centered).']
    """

    verbose: bool = True
    records: list[Diagnostic] = field(default_factory=list)

    def emit(self, level: Level, message: str, context: str | None = None) -> None:
        """Record a message (no-op when muted)."""
        if not self.verbose:
            return
        self.records.append(Diagnostic(level=level, message=message, context=context))
        log_level = logging.WARNING if level == "warning" else logging.INFO
        if context is None:
            logger.log(log_level, message)
        else:
            logger.log(log_level, "[%s] %s", context, message)

    def info(self, message: str, context: str | None = None) -> None:
        self.emit("info", message, context)

    def warning(self, message: str, context: str | None = None) -> None:
        self.emit("warning", message, context)

    def messages(self, level: Level | None = None) -> list[str]:
        """Return recorded messages, optionally filtered by level."""
        return [rec.message for rec in self.records if level is None or rec.level == level]

    def clear(self) -> None:
        self.records.clear()

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)


def resolve_diagnostics(diagnostics: Diagnostics | None, verbose: bool = True) -> Diagnostics:
    """Pick the collector for a call.

    A missing collector is replaced by a private one; ``verbose=False`` always
    yields a muted collector so the caller's collector is left untouched.
    """
    if not verbose:
        return Diagnostics(verbose=False)
    if diagnostics is None:
        return Diagnostics()
    return diagnostics


__all__ = ["Diagnostic", "Diagnostics", "resolve_diagnostics"]
