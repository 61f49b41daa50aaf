"""Thread the Needle wheel designs.

Defines the ``WheelDesign`` dataclass for the engraved wheel types, the
catalog of the 12 standard wheels a puzzle draws its playable wheels from,
and the 4x3 table of bonus wheels selected from bomb state. Designs are
static data kept as raw symbol/hole strings; ``thread_the_needle.Pattern``
turns them into validated patterns.

Hole strings use one character per slot:

    ``.``  no hole
    ``O``  circular hole
    ``^``  triangular hole
"""

from __future__ import annotations

import dataclasses


HOLE_CHARS = ".O^"

# Bonus table dimensions: rows come from batteries minus lit indicators,
# columns from the serial number score.
BONUS_ROWS = 4
BONUS_COLUMNS = 3


# =============================================================================
# Wheel Design
# =============================================================================

@dataclasses.dataclass(frozen=True)
class WheelDesign:
    """Static definition of an engraved wheel.

    Attributes:
        design_id: Unique identifier. Standard wheels use ``"1"``-``"12"``,
            bonus wheels use ``"B<row><column>"`` (e.g. ``"B12"``).
        symbols: The characters engraved around the wheel, one per slot.
        holes: The hole string, one of ``HOLE_CHARS`` per slot.
    """
    design_id: str
    symbols: str
    holes: str

    def __post_init__(self) -> None:
        """Validate that symbols and holes line up."""
        if len(self.symbols) != len(self.holes):
            raise ValueError(
                f"Design {self.design_id!r}: {len(self.symbols)} symbols "
                f"but {len(self.holes)} holes"
            )
        bad = sorted(set(self.holes) - set(HOLE_CHARS))
        if bad:
            raise ValueError(
                f"Design {self.design_id!r}: unknown hole characters "
                f"{''.join(bad)!r}"
            )

    @property
    def circle_count(self) -> int:
        """Number of circular holes on this wheel."""
        return self.holes.count("O")

    @property
    def triangle_count(self) -> int:
        """Number of triangular holes on this wheel."""
        return self.holes.count("^")


# =============================================================================
# Standard Wheels
# =============================================================================

STANDARD_WHEELS: dict[str, WheelDesign] = {
    # ── Row 1 ─────────────────────────────────────────────────
    "1": WheelDesign("1", "+-]!<0#<", "O.^^^.OO"),
    "2": WheelDesign("2", "$)2=*/>!", "^.^.O^O."),
    "3": WheelDesign("3", "78/?(-7~", "O.O..^.^"),
    "4": WheelDesign("4", "96394?#!", "O^..^^OO"),
    # ── Row 2 ─────────────────────────────────────────────────
    "5": WheelDesign("5", "+!2#!@*@", "^^O..OO."),
    "6": WheelDesign("6", "%*&50$52", "^..O^O.."),
    "7": WheelDesign("7", "%*!%~*+$", "O^.^O.^^"),
    "8": WheelDesign("8", "[%?/1{]}", "^.^..O^^"),
    # ── Row 3 ─────────────────────────────────────────────────
    "9": WheelDesign("9", "1@3!2312", "O^..^^.O"),
    "10": WheelDesign("10", "%^O<#>^(", ".^.^OOO."),
    "11": WheelDesign("11", "->-~>@<%", ".O...^.^"),
    "12": WheelDesign("12", "{]}[%?/$", ".^..OOO."),
}


def get_wheel_design(design_id: str) -> WheelDesign:
    """Look up a standard wheel design by its ID.

    Args:
        design_id: The design identifier (``"1"``-``"12"``).

    Returns:
        The corresponding WheelDesign.

    Raises:
        ValueError: If the design_id is not in the catalog.
    """
    design = STANDARD_WHEELS.get(design_id)
    if design is None:
        raise ValueError(
            f"Unknown wheel design ID: {design_id!r}. "
            f"Valid IDs: {', '.join(STANDARD_WHEELS)}"
        )
    return design


# =============================================================================
# Bonus Wheels
# =============================================================================

# Every bonus wheel is numbered 1-8 so its offset reads directly off the
# label.
_BONUS_SYMBOLS = "12345678"

_BONUS_HOLES: tuple[tuple[str, str, str], ...] = (
    # column:  0            1            2
    ("..O..^^O", "..^O..^^", "..^^.^.O"),   # row 0: w <= 0
    ("^^.O.^^^", "....OOOO", "..^OO..."),   # row 1: w in {1, 2}
    ("^...OOOO", ".^^O..^^", "...^O^^."),   # row 2: w == 3
    (".^O^O^.O", ".O^.^.O^", "..^^.OOO"),   # row 3: w >= 4
)

BONUS_WHEELS: dict[tuple[int, int], WheelDesign] = {
    (row, column): WheelDesign(f"B{row}{column}", _BONUS_SYMBOLS, holes)
    for row, row_holes in enumerate(_BONUS_HOLES)
    for column, holes in enumerate(row_holes)
}


def get_bonus_design(row: int, column: int) -> WheelDesign:
    """Look up a bonus wheel design by its table position.

    Args:
        row: Table row (0-3), derived from batteries minus lit indicators.
        column: Table column (0-2), derived from the serial number score.

    Returns:
        The bonus WheelDesign at that position.

    Raises:
        IndexError: If row or column is outside the table.
    """
    if not (0 <= row < BONUS_ROWS and 0 <= column < BONUS_COLUMNS):
        raise IndexError(
            f"Bonus table position ({row}, {column}) out of range "
            f"(0-{BONUS_ROWS - 1}, 0-{BONUS_COLUMNS - 1})"
        )
    return BONUS_WHEELS[(row, column)]


def all_designs() -> list[WheelDesign]:
    """Return every design, standard wheels first, then the bonus table."""
    return list(STANDARD_WHEELS.values()) + list(BONUS_WHEELS.values())
