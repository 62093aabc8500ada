"""Unit converter - pieces <-> pack <-> carton, pure arithmetic."""

from __future__ import annotations
from enum import Enum
from numbers import Integral
from typing import Any, Dict, List, Optional, Tuple


class UnsupportedUnit(ValueError):
    """Raised when a product does not define the ratio a unit needs."""

    def __init__(self, unit: "Unit", message: Optional[str] = None):
        self.unit = unit
        super().__init__(message or f"Unit '{UNIT_LABELS[unit]}' is not available for this product")


class Unit(str, Enum):
    PIECE = "piece"
    PACK = "pack"
    CARTON = "carton"

    @classmethod
    def parse(cls, value: "str | Unit") -> "Unit":
        """
        Map a stored or legacy label to a unit.

        Examples:
            'pcs' -> Unit.PIECE
            'Box' -> Unit.CARTON  (shown as "Dus" in the UI)
        """
        if isinstance(value, Unit):
            return value
        key = str(value or "").strip().lower()
        try:
            return _ALIASES[key]
        except KeyError:
            raise ValueError(f"Unknown unit: {value!r}") from None


_ALIASES: Dict[str, Unit] = {
    "piece": Unit.PIECE,
    "pieces": Unit.PIECE,
    "pcs": Unit.PIECE,
    "pc": Unit.PIECE,
    "pack": Unit.PACK,
    "packs": Unit.PACK,
    "carton": Unit.CARTON,
    "cartons": Unit.CARTON,
    "box": Unit.CARTON,
    "dus": Unit.CARTON,
}

# Presentation only; conversion never looks at these.
UNIT_LABELS: Dict[Unit, str] = {
    Unit.PIECE: "Pcs",
    Unit.PACK: "Pack",
    Unit.CARTON: "Dus",
}


def _whole(value: Any, what: str) -> int:
    """Integer value of a count; fractions such as 2.5 are rejected, not truncated."""
    if isinstance(value, bool):
        raise ValueError(f"{what} must be a whole number.")
    if isinstance(value, Integral):
        return int(value)
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{what} must be a whole number, got {value!r}.") from None
    if not number.is_integer():
        raise ValueError(f"{what} must be a whole number, got {value!r}.")
    return int(number)


def _ratio(value: Optional[int]) -> int:
    """Normalize an optional ratio: None/0/negative all mean 'not offered'."""
    try:
        n = int(value or 0)
    except (TypeError, ValueError):
        return 0
    return n if n > 0 else 0


class UnitConverter:
    """Converts operator quantities to and from the canonical piece count."""

    @staticmethod
    def to_pieces(
        quantity: int,
        unit: "Unit | str",
        pieces_per_pack: Optional[int] = None,
        packs_per_carton: Optional[int] = None,
    ) -> int:
        """
        Convert a quantity in the given unit to pieces.

        Raises:
            UnsupportedUnit: pack/carton requested but a needed ratio is missing or zero
            ValueError: negative quantity or unknown unit
        """
        unit = Unit.parse(unit)
        qty = _whole(quantity, "Quantity")
        if qty < 0:
            raise ValueError("Quantity cannot be negative.")

        ppp = _ratio(pieces_per_pack)
        ppc = _ratio(packs_per_carton)

        if unit is Unit.PIECE:
            return qty
        if unit is Unit.PACK:
            if not ppp:
                raise UnsupportedUnit(unit)
            return qty * ppp
        if not (ppp and ppc):
            raise UnsupportedUnit(unit)
        return qty * ppc * ppp

    @staticmethod
    def from_pieces(
        pieces: int,
        pieces_per_pack: Optional[int] = None,
        packs_per_carton: Optional[int] = None,
    ) -> Dict[str, int]:
        """
        Decompose a piece count into cartons, packs and leftover pieces.

        Cartons are only used when both ratios are defined; packs only need
        pieces_per_pack.
        """
        remaining = _whole(pieces, "Pieces")
        if remaining < 0:
            raise ValueError("Pieces cannot be negative.")

        ppp = _ratio(pieces_per_pack)
        ppc = _ratio(packs_per_carton)
        cartons = packs = 0

        if ppp and ppc:
            per_carton = ppp * ppc
            cartons, remaining = divmod(remaining, per_carton)
        if ppp:
            packs, remaining = divmod(remaining, ppp)

        return {"cartons": cartons, "packs": packs, "pieces": remaining}

    @staticmethod
    def describe(
        pieces: int,
        pieces_per_pack: Optional[int] = None,
        packs_per_carton: Optional[int] = None,
    ) -> List[Tuple[int, Unit]]:
        """Non-zero terms, largest unit first. Zero stock is [(0, PIECE)]."""
        parts = UnitConverter.from_pieces(pieces, pieces_per_pack, packs_per_carton)
        terms = [
            (parts["cartons"], Unit.CARTON),
            (parts["packs"], Unit.PACK),
            (parts["pieces"], Unit.PIECE),
        ]
        terms = [(n, u) for n, u in terms if n]
        return terms or [(0, Unit.PIECE)]

    @staticmethod
    def format_quantity(
        pieces: int,
        pieces_per_pack: Optional[int] = None,
        packs_per_carton: Optional[int] = None,
    ) -> str:
        """Human readable stock, e.g. '1 Dus 2 Pack 1 Pcs'."""
        terms = UnitConverter.describe(pieces, pieces_per_pack, packs_per_carton)
        return " ".join(f"{n} {UNIT_LABELS[u]}" for n, u in terms)

    @staticmethod
    def available_units(
        pieces_per_pack: Optional[int] = None,
        packs_per_carton: Optional[int] = None,
    ) -> List[Unit]:
        """Units a product can be counted in."""
        units = [Unit.PIECE]
        if _ratio(pieces_per_pack):
            units.append(Unit.PACK)
            if _ratio(packs_per_carton):
                units.append(Unit.CARTON)
        return units
