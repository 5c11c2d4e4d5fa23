from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class SideEffectWarning:
    """A side effect that failed after the main state change was committed."""

    effect: str
    message: str


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Result of a committed operation plus any side effects that did not go through.

    The operation itself succeeded whenever an Outcome is returned; failures of
    the primary transition are raised as exceptions instead.
    """

    value: T
    warnings: tuple[SideEffectWarning, ...] = field(default_factory=tuple)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)
