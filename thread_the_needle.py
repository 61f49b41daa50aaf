"""Thread the Needle game model.

Core classes for the Thread the Needle wheel puzzle: hole kinds, wheel
patterns, rotating wheels, the alignment check that decides a submission,
the bonus wheel chosen from bomb state, and the generator that only
hands out puzzles with at least one winning alignment.

A puzzle has five playable wheels and one bonus wheel. All wheels are
compared on a common ring of ``RING_SIZE`` slots. A submission wins when
some slot shows a circular hole on every wheel and no slot shows a
triangular hole on every wheel.
"""

from __future__ import annotations

import dataclasses
import enum
import logging
import random
from collections.abc import Sequence

import wheel_patterns

logger = logging.getLogger(__name__)

# Number of angular slots on the comparison ring. Pattern lengths must
# divide it evenly.
RING_SIZE = 8

# Playable wheels per puzzle (the bonus wheel is extra).
WHEEL_COUNT = 5

# Random alignments tried per draw before the draw is rejected.
MAX_PROBE_TRIALS = 100

# Pattern draws tried before generation gives up.
MAX_DRAWS = 1000

_ODD_DIGITS = "13579"
_VOWELS = "AEIOU"


# =============================================================================
# ANSI Color Constants
# =============================================================================

class _Colors:
    """ANSI escape codes for terminal coloring."""
    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    DIM = "\033[2m"
    BOLD = "\033[1m"
    RESET = "\033[0m"


# =============================================================================
# Errors
# =============================================================================

class InvalidPatternError(ValueError):
    """Symbols and holes cannot form a wheel pattern."""


class UnsolvableConfigError(RuntimeError):
    """The generator could not find a solvable draw.

    Raised when ``MAX_DRAWS`` draws in a row fail the solvability probe,
    which means the pattern pool or bonus wheel is misconfigured.
    """


# =============================================================================
# Enums
# =============================================================================

class HoleKind(enum.Enum):
    """What is cut out of a wheel at one slot.

    The value is the character used in design hole strings.
    """
    NONE = "."
    CIRCLE = "O"
    TRIANGLE = "^"

    @classmethod
    def from_char(cls, char: str) -> HoleKind:
        """Parse a design hole character.

        Raises:
            InvalidPatternError: If the character is not ``.``, ``O`` or ``^``.
        """
        for kind in cls:
            if kind.value == char:
                return kind
        raise InvalidPatternError(
            f"Unknown character when making hole string: {char!r}"
        )

    @property
    def display_char(self) -> str:
        """Character used in wheel dumps (space for no hole)."""
        return " " if self is HoleKind.NONE else self.value

    def ansi(self) -> str:
        """Returns the ANSI color code for this hole kind."""
        return {
            HoleKind.NONE: _Colors.DIM,
            HoleKind.CIRCLE: _Colors.GREEN,
            HoleKind.TRIANGLE: _Colors.RED,
        }[self]


# =============================================================================
# Pattern
# =============================================================================

@dataclasses.dataclass(frozen=True)
class Pattern:
    """The symbols and holes engraved around one type of wheel.

    Patterns shorter than the ring repeat around it, so a length must
    divide ``RING_SIZE`` evenly (1, 2, 4 or 8).

    Attributes:
        symbols: One character per slot, in clockwise order from slot 0.
        holes: One HoleKind per slot, aligned with ``symbols``.
    """
    symbols: tuple[str, ...]
    holes: tuple[HoleKind, ...]

    def __post_init__(self) -> None:
        """Normalize to tuples and validate the tiling invariant."""
        object.__setattr__(self, "symbols", tuple(self.symbols))
        object.__setattr__(self, "holes", tuple(self.holes))
        if len(self.symbols) != len(self.holes):
            raise InvalidPatternError(
                f"Symbols and holes have different lengths "
                f"({len(self.symbols)} vs {len(self.holes)})"
            )
        if not self.symbols or RING_SIZE % len(self.symbols) != 0:
            raise InvalidPatternError(
                f"Pattern length ought to evenly go into {RING_SIZE} "
                f"but length {len(self.symbols)} found"
            )
        for hole in self.holes:
            if not isinstance(hole, HoleKind):
                raise InvalidPatternError(f"Not a hole kind: {hole!r}")

    @classmethod
    def from_strings(cls, symbols: str, holes: str) -> Pattern:
        """Build a pattern from a symbol string and a design hole string.

        Args:
            symbols: Engraved characters, e.g. ``"+-]!<0#<"``.
            holes: Hole string using ``.``, ``O`` and ``^``, e.g.
                ``"O.^^^.OO"``.

        Raises:
            InvalidPatternError: On unknown hole characters or a bad length.
        """
        return cls(tuple(symbols), tuple(HoleKind.from_char(c) for c in holes))

    @classmethod
    def from_design(cls, design: wheel_patterns.WheelDesign) -> Pattern:
        """Build a pattern from a catalog design."""
        return cls.from_strings(design.symbols, design.holes)

    @property
    def size(self) -> int:
        """Number of slots in the pattern."""
        return len(self.symbols)

    @property
    def symbol_string(self) -> str:
        return "".join(self.symbols)

    @property
    def hole_string(self) -> str:
        """The pattern's holes as a design string."""
        return "".join(h.value for h in self.holes)

    def circle_indices(self) -> list[int]:
        """Local indices that hold a circular hole."""
        return [i for i, h in enumerate(self.holes) if h is HoleKind.CIRCLE]

    def __str__(self) -> str:
        return f"{self.symbol_string}/{self.hole_string}"


def standard_pattern_pool() -> list[Pattern]:
    """Patterns for the 12 standard wheels, in catalog order."""
    return [
        Pattern.from_design(d) for d in wheel_patterns.STANDARD_WHEELS.values()
    ]


# =============================================================================
# Wheel
# =============================================================================

@dataclasses.dataclass
class Wheel:
    """A pattern mounted at a rotational offset.

    Index 0 puts the pattern's slot 0 at the wheel's top. Rotating up
    increments the index, rotating down decrements it, both wrapping
    around the pattern.

    Attributes:
        pattern: The engraved pattern, shared between wheels.
        index: Current offset, in ``[0, pattern.size)``.
    """
    pattern: Pattern
    index: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.index < self.pattern.size:
            raise IndexError(
                f"Wheel index {self.index} out of range "
                f"(0-{self.pattern.size - 1})"
            )

    def rotate_up(self) -> None:
        self.index = (self.index + 1) % self.pattern.size

    def rotate_down(self) -> None:
        self.index = (self.index - 1) % self.pattern.size

    def hole_at(self, slot: int) -> HoleKind:
        """The hole this wheel shows at an absolute ring slot.

        The slot is shifted by the wheel's index around the ring, then
        folded onto the pattern, which repeats when shorter than the ring.

        Args:
            slot: Absolute ring slot. Any integer; the ring wraps.

        Returns:
            The HoleKind at that slot.
        """
        return self.pattern.holes[self._local(slot)]

    def symbol_at(self, slot: int) -> str:
        """The symbol this wheel shows at an absolute ring slot."""
        return self.pattern.symbols[self._local(slot)]

    @property
    def label(self) -> str:
        """The symbol at the top of the wheel."""
        return self.pattern.symbols[self.index]

    def _local(self, slot: int) -> int:
        return ((slot + self.index) % RING_SIZE) % self.pattern.size

    def __str__(self) -> str:
        size = self.pattern.size
        order = [(i + self.index) % size for i in range(size)]
        chars = "".join(self.pattern.symbols[i] for i in order)
        holes = "".join(self.pattern.holes[i].display_char for i in order)
        return f"[{chars}] [{holes}]"


# =============================================================================
# Alignment
# =============================================================================

@dataclasses.dataclass(frozen=True)
class AlignmentReport:
    """Which ring slots form full rows of one hole kind.

    Attributes:
        circle_rows: For each slot, True if every wheel shows a circle there.
        triangle_rows: For each slot, True if every wheel shows a triangle.
    """
    circle_rows: tuple[bool, ...]
    triangle_rows: tuple[bool, ...]

    @property
    def circle_row_found(self) -> bool:
        return any(self.circle_rows)

    @property
    def triangle_row_found(self) -> bool:
        return any(self.triangle_rows)

    @property
    def solved(self) -> bool:
        """A circle row exists and no triangle row exists anywhere."""
        return self.circle_row_found and not self.triangle_row_found

    @property
    def winning_slots(self) -> list[int]:
        """Slots holding a full circle row, empty unless solved."""
        if not self.solved:
            return []
        return [s for s, full in enumerate(self.circle_rows) if full]


def check_alignment(wheels: Sequence[Wheel]) -> AlignmentReport:
    """Scan every ring slot for full rows of circles or triangles.

    A slot where any wheel has no hole can be neither kind of row, so
    the remaining wheels are not examined for that slot.

    Args:
        wheels: The wheels to compare, bonus wheel included.

    Returns:
        An AlignmentReport for all ``RING_SIZE`` slots.

    Raises:
        ValueError: If no wheels are given.
    """
    if not wheels:
        raise ValueError("Cannot check alignment of zero wheels")

    circle_rows: list[bool] = []
    triangle_rows: list[bool] = []
    for slot in range(RING_SIZE):
        all_circle = True
        all_triangle = True
        for wheel in wheels:
            hole = wheel.hole_at(slot)
            if hole is HoleKind.NONE:
                all_circle = False
                all_triangle = False
                break
            if hole is not HoleKind.CIRCLE:
                all_circle = False
            if hole is not HoleKind.TRIANGLE:
                all_triangle = False
        circle_rows.append(all_circle)
        triangle_rows.append(all_triangle)
    return AlignmentReport(tuple(circle_rows), tuple(triangle_rows))


def evaluate(wheels: Sequence[Wheel]) -> bool:
    """Return True if the wheels, as currently rotated, solve the puzzle."""
    return check_alignment(wheels).solved


# =============================================================================
# Bonus Wheel
# =============================================================================

@dataclasses.dataclass(frozen=True)
class BombState:
    """The bomb readings that pick and rotate the bonus wheel.

    Attributes:
        serial: The bomb's serial number.
        battery_count: Number of batteries.
        lit_indicator_count: Number of lit indicators.
        strikes: Strikes recorded so far.
        solved_count: Modules solved so far.
    """
    serial: str
    battery_count: int = 0
    lit_indicator_count: int = 0
    strikes: int = 0
    solved_count: int = 0

    def __post_init__(self) -> None:
        for name in (
            "battery_count", "lit_indicator_count", "strikes", "solved_count",
        ):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"{name} must be non-negative, got {value}")


def serial_score(serial: str) -> int:
    """Score a serial number: 1 per odd digit, 2 per vowel."""
    score = 0
    for char in serial:
        if char in _ODD_DIGITS:
            score += 1
        elif char in _VOWELS:
            score += 2
    return score


def bonus_column(score: int) -> int:
    """Bonus table column for a serial number score."""
    if score in (1, 3):
        return 0
    if score in (2, 4, 5):
        return 1
    return 2


def bonus_row(surplus: int) -> int:
    """Bonus table row for batteries minus lit indicators."""
    if surplus <= 0:
        return 0
    if surplus <= 2:
        return 1
    if surplus == 3:
        return 2
    return 3


def bonus_start_index(strikes: int, solved_count: int) -> int:
    """Bonus wheel offset: strikes minus solves, wrapped onto the ring."""
    return (strikes - solved_count) % RING_SIZE


def select_bonus(
    serial: str,
    battery_count: int,
    lit_indicator_count: int,
    strikes: int,
    solved_count: int,
) -> tuple[Pattern, int]:
    """Pick the bonus wheel pattern and its starting offset.

    Args:
        serial: The bomb's serial number.
        battery_count: Number of batteries.
        lit_indicator_count: Number of lit indicators.
        strikes: Strikes so far.
        solved_count: Solved modules so far.

    Returns:
        A ``(pattern, initial_index)`` pair ready to build a Wheel from.
    """
    row = bonus_row(battery_count - lit_indicator_count)
    column = bonus_column(serial_score(serial))
    pattern = Pattern.from_design(wheel_patterns.get_bonus_design(row, column))
    return pattern, bonus_start_index(strikes, solved_count)


def bonus_wheel(state: BombState) -> Wheel:
    """Build the bonus wheel for a bomb state."""
    pattern, index = select_bonus(
        state.serial,
        state.battery_count,
        state.lit_indicator_count,
        state.strikes,
        state.solved_count,
    )
    return Wheel(pattern, index)


# =============================================================================
# Generation
# =============================================================================

def probe_solvable(
    patterns: Sequence[Pattern],
    rng: random.Random | None = None,
    max_trials: int = MAX_PROBE_TRIALS,
) -> bool:
    """Look for a winning alignment by random sampling.

    Each trial turns every wheel so a random one of its own circles sits
    at its top, then checks the alignment. A True result is always backed
    by a real winning configuration; False may miss one.

    Args:
        patterns: Patterns of all wheels, bonus wheel included.
        rng: Random source. Defaults to a fresh ``random.Random()``.
        max_trials: Number of random alignments to try.

    Returns:
        True if some trial solved the puzzle.
    """
    if rng is None:
        rng = random.Random()
    circles = [p.circle_indices() for p in patterns]
    if not all(circles):
        return False
    for _ in range(max_trials):
        wheels = [Wheel(p, rng.choice(c)) for p, c in zip(patterns, circles)]
        if evaluate(wheels):
            return True
    return False


def generate(
    pattern_pool: Sequence[Pattern],
    bonus: Pattern,
    rng: random.Random | None = None,
    wheel_count: int = WHEEL_COUNT,
    max_trials: int = MAX_PROBE_TRIALS,
    max_draws: int = MAX_DRAWS,
) -> list[Pattern]:
    """Draw playable wheel patterns that can be solved with the bonus wheel.

    Patterns are drawn uniformly with replacement. A draw is kept only
    when ``probe_solvable`` finds a winning alignment for it together
    with the bonus pattern.

    Args:
        pattern_pool: Patterns to draw from.
        bonus: The bonus wheel's pattern.
        rng: Random source. Defaults to a fresh ``random.Random()``.
        wheel_count: Number of playable wheels to draw.
        max_trials: Probe trials per draw.
        max_draws: Draws to try before giving up.

    Returns:
        ``wheel_count`` patterns, bonus not included.

    Raises:
        ValueError: If the pattern pool is empty.
        UnsolvableConfigError: If no draw passed the probe.
    """
    pool = list(pattern_pool)
    if not pool:
        raise ValueError("Pattern pool must not be empty")
    if rng is None:
        rng = random.Random()

    for draw in range(1, max_draws + 1):
        patterns = [rng.choice(pool) for _ in range(wheel_count)]
        if probe_solvable(patterns + [bonus], rng, max_trials):
            logger.debug("Draw %d accepted", draw)
            return patterns
        logger.debug("Draw %d has no reachable solution, redrawing", draw)

    raise UnsolvableConfigError(
        f"No solvable draw in {max_draws} attempts with bonus pattern "
        f"{bonus}; check the pattern pool"
    )


# =============================================================================
# Puzzle
# =============================================================================

@dataclasses.dataclass
class Puzzle:
    """One attempt at the puzzle: playable wheels plus a bonus wheel.

    The bonus wheel is resolved from ``bomb_state``, the snapshot taken
    when the puzzle was generated. ``submit`` can be handed live readings
    instead, in which case the bonus wheel is resolved from those.

    Attributes:
        session_id: Identifies this puzzle in log output.
        wheels: The playable wheels, in display order.
        bomb_state: Bomb readings at generation time.
        solved: True once a submission has succeeded.
        submissions: Number of submissions made.
    """
    session_id: int
    wheels: list[Wheel]
    bomb_state: BombState
    solved: bool = False
    submissions: int = 0

    def __post_init__(self) -> None:
        if not self.wheels:
            raise ValueError("A puzzle needs at least one playable wheel")

    # -----------------------------------------------------------------
    # Factory
    # -----------------------------------------------------------------

    @classmethod
    def create(
        cls,
        session_id: int,
        bomb_state: BombState,
        pattern_pool: Sequence[Pattern] | None = None,
        seed: int | None = None,
        rng: random.Random | None = None,
        wheel_count: int = WHEEL_COUNT,
    ) -> Puzzle:
        """Generate a solvable puzzle with randomly rotated wheels.

        Args:
            session_id: Identifier used in log output.
            bomb_state: Bomb readings that pick the bonus wheel.
            pattern_pool: Patterns to draw playable wheels from. Defaults
                to the 12 standard wheels.
            seed: Optional random seed for reproducibility. Ignored when
                ``rng`` is given.
            rng: Optional random source.
            wheel_count: Number of playable wheels.

        Returns:
            A new Puzzle.

        Raises:
            UnsolvableConfigError: If no solvable draw was found.
        """
        if rng is None:
            rng = random.Random(seed)
        if pattern_pool is None:
            pattern_pool = standard_pattern_pool()

        prefix = _log_prefix(session_id)
        logger.debug("%s Generating the wheel patterns...", prefix)
        bonus = bonus_wheel(bomb_state)
        patterns = generate(
            pattern_pool, bonus.pattern, rng=rng, wheel_count=wheel_count,
        )
        logger.debug("%s Wheel patterns generated!", prefix)

        wheels = [Wheel(p, rng.randrange(p.size)) for p in patterns]
        puzzle = cls(session_id=session_id, wheels=wheels, bomb_state=bomb_state)
        logger.info("%s Generated wheels", prefix)
        for line in puzzle.describe():
            logger.info("%s %s", prefix, line)
        return puzzle

    # -----------------------------------------------------------------
    # State
    # -----------------------------------------------------------------

    @property
    def bonus_wheel(self) -> Wheel:
        """The bonus wheel resolved from the generation-time snapshot."""
        return bonus_wheel(self.bomb_state)

    @property
    def patterns(self) -> list[Pattern]:
        return [w.pattern for w in self.wheels]

    @property
    def indices(self) -> list[int]:
        return [w.index for w in self.wheels]

    @property
    def labels(self) -> list[str]:
        """The symbol showing at the top of each playable wheel."""
        return [w.label for w in self.wheels]

    def all_wheels(self, bomb_state: BombState | None = None) -> list[Wheel]:
        """Playable wheels followed by the bonus wheel.

        Args:
            bomb_state: Readings to resolve the bonus wheel from. Defaults
                to the generation-time snapshot.
        """
        state = self.bomb_state if bomb_state is None else bomb_state
        return self.wheels + [bonus_wheel(state)]

    # -----------------------------------------------------------------
    # Actions
    # -----------------------------------------------------------------

    def rotate(self, wheel_index: int, up: bool = True) -> None:
        """Rotate one playable wheel by one slot.

        Args:
            wheel_index: Which playable wheel (0-based).
            up: Rotate up (increment) if True, down otherwise.

        Raises:
            IndexError: If wheel_index is out of range.
            ValueError: If the puzzle is already solved.
        """
        if not 0 <= wheel_index < len(self.wheels):
            raise IndexError(
                f"Wheel index {wheel_index} out of range "
                f"(0-{len(self.wheels) - 1})"
            )
        if self.solved:
            raise ValueError("Puzzle is already solved")
        wheel = self.wheels[wheel_index]
        if up:
            wheel.rotate_up()
        else:
            wheel.rotate_down()

    def submit(self, bomb_state: BombState | None = None) -> bool:
        """Submit the current rotation.

        Args:
            bomb_state: Live readings to resolve the bonus wheel from.
                Defaults to the generation-time snapshot.

        Returns:
            True if the submission solved the puzzle.

        Raises:
            ValueError: If the puzzle is already solved.
        """
        if self.solved:
            raise ValueError("Puzzle is already solved")

        state = self.bomb_state if bomb_state is None else bomb_state
        wheels = self.all_wheels(state)
        prefix = _log_prefix(self.session_id)
        if state != self.bomb_state and wheels[-1] != self.bonus_wheel:
            logger.warning(
                "%s Bonus wheel changed since generation: %s -> %s",
                prefix, self.bonus_wheel, wheels[-1],
            )

        self.submissions += 1
        logger.info(
            "%s Submitted wheels (%d strike%s, %d solve%s)",
            prefix,
            state.strikes, "" if state.strikes == 1 else "s",
            state.solved_count, "" if state.solved_count == 1 else "s",
        )
        for line in _describe_wheels(wheels):
            logger.info("%s %s", prefix, line)

        report = check_alignment(wheels)
        logger.info(
            "%s Row of circular holes: %s",
            prefix, "Found" if report.circle_row_found else "Not Found",
        )
        logger.info(
            "%s Row of triangular holes: %s",
            prefix, "Found" if report.triangle_row_found else "Not Found",
        )
        if report.solved:
            logger.info("%s Submission was correct, module disarmed", prefix)
            self.solved = True
        else:
            logger.info("%s Submission was incorrect, strike", prefix)
        return report.solved

    # -----------------------------------------------------------------
    # Display
    # -----------------------------------------------------------------

    def describe(self) -> list[str]:
        """One dump line per wheel, bonus wheel last."""
        return _describe_wheels(self.all_wheels())

    def __str__(self) -> str:
        return "\n".join(self.describe())


def _describe_wheels(wheels: Sequence[Wheel]) -> list[str]:
    lines = [f"Wheel #{i + 1}: {w}" for i, w in enumerate(wheels[:-1])]
    lines.append(f"Wheel #{len(wheels)} (Bonus): {wheels[-1]}")
    return lines


def _log_prefix(session_id: int) -> str:
    return f"[Thread the Needle #{session_id}]"
