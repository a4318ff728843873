"""Quoted option contracts.

Prices and strikes are integer cents so strike matching is exact.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


# Integer price in the smallest currency unit
Cents = int

# Fractional or percentage float result
Percentage = float


class OptionKind(Enum):
    """Option right."""

    CALL = "call"
    PUT = "put"


@dataclass(frozen=True)
class OptionContract:
    """A single quoted option."""

    expires_at: datetime
    strike: Cents
    kind: OptionKind
    bid: Cents
    ask: Cents

    @property
    def mark(self) -> Cents:
        """Mid price, truncated to whole cents."""
        return (self.bid + self.ask) // 2

    @property
    def is_call(self) -> bool:
        return self.kind is OptionKind.CALL

    @property
    def is_put(self) -> bool:
        return self.kind is OptionKind.PUT
