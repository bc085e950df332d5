"""Reference data types shared by the bracket tables and the calculator."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class FilingStatus(str, Enum):
    """Filing status selecting the bracket table and standard deduction."""

    SINGLE = "single"
    JOINT = "joint"
    HEAD = "head"


@dataclass(frozen=True)
class TaxBracket:
    """One marginal-rate bracket.

    Attributes:
        rate: Marginal rate as a fraction (e.g., Decimal("0.22")).
        up_to: Cumulative income ceiling. None for the unbounded top bracket.
    """

    rate: Decimal
    up_to: Decimal | None = None

    @property
    def is_unbounded(self) -> bool:
        return self.up_to is None


BracketTable = dict[FilingStatus, tuple[TaxBracket, ...]]


def validate_brackets(brackets: tuple[TaxBracket, ...]) -> None:
    """Check that a bracket ladder can be walked by the tax engines.

    Args:
        brackets: Brackets in ascending ceiling order.

    Raises:
        ValueError: If the ladder is empty, has a rate outside [0, 1],
            has non-increasing ceilings, or lacks an unbounded top bracket.
    """
    if not brackets:
        raise ValueError("Bracket table must contain at least one bracket")

    prev_ceiling = Decimal("0")
    for index, bracket in enumerate(brackets):
        if not Decimal("0") <= bracket.rate <= Decimal("1"):
            raise ValueError(f"Bracket rate must be within [0, 1], got {bracket.rate}")

        is_last = index == len(brackets) - 1
        if bracket.up_to is None:
            if not is_last:
                raise ValueError("Only the top bracket may be unbounded")
            continue
        if is_last:
            raise ValueError("Top bracket must be unbounded (up_to=None)")
        if bracket.up_to <= prev_ceiling:
            raise ValueError(
                f"Bracket ceilings must be strictly increasing: {bracket.up_to} <= {prev_ceiling}"
            )
        prev_ceiling = bracket.up_to
