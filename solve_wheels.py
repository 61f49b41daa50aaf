"""Solver for Thread the Needle.

Finds a winning rotation for a puzzle's playable wheels by exhaustive
search and turns it into the sequence of single-slot rotations that
takes the wheels there from where they currently sit.

Architecture:
    ``odometer()`` enumerates index vectors, least-significant wheel
    first. ``solve()`` walks that space against the alignment check with
    the bonus wheel held fixed. ``plan_rotations()`` then picks the short
    way round for each wheel, and ``force_solve()`` ties the steps
    together on a live ``Puzzle``.
"""

from __future__ import annotations

import dataclasses
import enum
import logging
import math
import random
from collections.abc import Iterator, Sequence

import thread_the_needle

try:
    import tqdm as _tqdm_module
except ImportError:  # pragma: no cover
    _tqdm_module = None  # type: ignore[assignment]

_C = thread_the_needle._Colors

logger = logging.getLogger(__name__)


class SolutionNotFoundError(LookupError):
    """No rotation of the playable wheels solves the puzzle.

    Only happens when the bonus wheel differs from the one the puzzle
    was generated against.
    """


# =============================================================================
# Odometer
# =============================================================================

def odometer(radices: Sequence[int]) -> Iterator[tuple[int, ...]]:
    """Count through every digit vector of a mixed-radix number.

    Digit 0 is least significant: it advances on every step and carries
    into digit 1 when it wraps, and so on. Starts at all zeros and stops
    after the vector of all maximum digits.

    Args:
        radices: Base of each digit. Every base must be at least 1.

    Yields:
        Digit tuples, ``math.prod(radices)`` of them.

    Raises:
        ValueError: If a radix is below 1.
    """
    for radix in radices:
        if radix < 1:
            raise ValueError(f"Radix must be at least 1, got {radix}")

    digits = [0] * len(radices)
    while True:
        yield tuple(digits)
        position = 0
        while position < len(digits):
            digits[position] += 1
            if digits[position] < radices[position]:
                break
            digits[position] = 0
            position += 1
        else:
            return


# =============================================================================
# Exhaustive Search
# =============================================================================

def solve(
    patterns: Sequence[thread_the_needle.Pattern],
    bonus_wheel: thread_the_needle.Wheel,
    show_progress: bool = False,
) -> list[int]:
    """Find the first winning index vector for the playable wheels.

    Every combination of playable wheel indices is tried in odometer
    order (wheel 0 fastest) while the bonus wheel stays where it is.

    Args:
        patterns: Patterns of the playable wheels.
        bonus_wheel: The bonus wheel at its resolved index.
        show_progress: If True, display a tqdm progress bar. Uses
            ``tqdm`` when installed, otherwise no bar is shown.

    Returns:
        One index per playable wheel.

    Raises:
        SolutionNotFoundError: If no combination solves the puzzle.
    """
    radices = [p.size for p in patterns]
    total = math.prod(radices)

    pbar = None
    if show_progress and _tqdm_module is not None:
        pbar = _tqdm_module.tqdm(
            total=total,
            desc="Searching",
            unit=" rotations",
            dynamic_ncols=True,
        )

    try:
        for checked, indices in enumerate(odometer(radices), start=1):
            wheels = [
                thread_the_needle.Wheel(p, i) for p, i in zip(patterns, indices)
            ]
            wheels.append(bonus_wheel)
            if pbar is not None:
                pbar.update(1)
            if thread_the_needle.evaluate(wheels):
                logger.debug(
                    "Found solution %s after %d of %d combinations",
                    list(indices), checked, total,
                )
                return list(indices)
    finally:
        if pbar is not None:
            pbar.close()

    raise SolutionNotFoundError(
        f"No winning rotation among {total} combinations with bonus "
        f"wheel {bonus_wheel}"
    )


# =============================================================================
# Rotation Planning
# =============================================================================

class Direction(enum.Enum):
    """Which way a wheel turns. UP increments the index, DOWN decrements."""
    UP = enum.auto()
    DOWN = enum.auto()


@dataclasses.dataclass(frozen=True)
class RotationStep:
    """Turn one wheel several slots in one direction.

    Attributes:
        wheel_index: Which playable wheel (0-based).
        direction: Which way to turn it.
        count: Number of single-slot rotations.
    """
    wheel_index: int
    direction: Direction
    count: int

    def __str__(self) -> str:
        return (
            f"Wheel #{self.wheel_index + 1} "
            f"{self.direction.name.lower()} x{self.count}"
        )


def rotation_distance(current: int, target: int, size: int) -> tuple[int, int]:
    """Steps from current to target going down and going up.

    Returns:
        ``(down_steps, up_steps)``, each in ``[0, size)``.
    """
    return (current - target) % size, (target - current) % size


def plan_rotations(
    current_indices: Sequence[int],
    target_indices: Sequence[int],
    sizes: Sequence[int],
    rng: random.Random | None = None,
) -> list[RotationStep]:
    """Plan the shortest rotations that bring each wheel to its target.

    Each wheel turns whichever way is shorter. When both ways are the
    same length a coin flip drawn from ``rng`` picks the direction.

    Args:
        current_indices: Where each wheel is now.
        target_indices: Where each wheel should end up.
        sizes: Pattern size of each wheel.
        rng: Random source for tie-breaks. Defaults to a fresh
            ``random.Random()``.

    Returns:
        One step per wheel that has to move, in wheel order.

    Raises:
        ValueError: If the three sequences differ in length.
    """
    if not len(current_indices) == len(target_indices) == len(sizes):
        raise ValueError(
            f"Mismatched lengths: {len(current_indices)} current, "
            f"{len(target_indices)} target, {len(sizes)} sizes"
        )
    if rng is None:
        rng = random.Random()

    plan: list[RotationStep] = []
    for wheel_index, (current, target, size) in enumerate(
        zip(current_indices, target_indices, sizes)
    ):
        down, up = rotation_distance(current, target, size)
        if down == 0:
            continue
        if down < up:
            plan.append(RotationStep(wheel_index, Direction.DOWN, down))
        elif up < down:
            plan.append(RotationStep(wheel_index, Direction.UP, up))
        else:
            direction = Direction.UP if rng.randrange(2) == 0 else Direction.DOWN
            plan.append(RotationStep(wheel_index, direction, up))
    return plan


def apply_rotation_plan(
    puzzle: thread_the_needle.Puzzle, plan: Sequence[RotationStep],
) -> None:
    """Carry out a plan one single-slot rotation at a time."""
    for step in plan:
        for _ in range(step.count):
            puzzle.rotate(step.wheel_index, up=step.direction is Direction.UP)


def force_solve(
    puzzle: thread_the_needle.Puzzle,
    rng: random.Random | None = None,
    show_progress: bool = False,
) -> bool:
    """Solve a puzzle automatically and submit it.

    Searches against the puzzle's generation-time bonus wheel, rotates
    the playable wheels into place and submits.

    Args:
        puzzle: The puzzle to solve. Its wheels are rotated in place.
        rng: Random source for rotation tie-breaks.
        show_progress: Show a progress bar during the search.

    Returns:
        The submission result.

    Raises:
        SolutionNotFoundError: If the puzzle has no solution.
    """
    targets = solve(puzzle.patterns, puzzle.bonus_wheel, show_progress)
    plan = plan_rotations(
        puzzle.indices, targets, [p.size for p in puzzle.patterns], rng,
    )
    logger.debug(
        "Forced solve plan: %s", ", ".join(str(s) for s in plan) or "none",
    )
    apply_rotation_plan(puzzle, plan)
    return puzzle.submit()


# =============================================================================
# Display
# =============================================================================

def _hole_colored(hole: thread_the_needle.HoleKind) -> str:
    """Return a colored hole glyph, '.' for no hole."""
    glyph = "." if hole is thread_the_needle.HoleKind.NONE else hole.value
    return f"{hole.ansi()}{glyph}{_C.RESET}"


def _format_wheel(name: str, wheel: thread_the_needle.Wheel) -> str:
    """Return one ring-aligned line for a wheel: symbols then holes."""
    slots = range(thread_the_needle.RING_SIZE)
    symbols = " ".join(wheel.symbol_at(s) for s in slots)
    holes = " ".join(_hole_colored(wheel.hole_at(s)) for s in slots)
    return f"  {name:<10} {_C.BOLD}{symbols}{_C.RESET}   {holes}"


def print_puzzle(puzzle: thread_the_needle.Puzzle) -> None:
    """Print every wheel aligned by ring slot, with full rows marked."""
    wheels = puzzle.all_wheels()
    print(f"{_C.BOLD}Thread the Needle #{puzzle.session_id}{_C.RESET}")
    for i, wheel in enumerate(wheels):
        name = "Bonus" if i == len(wheels) - 1 else f"Wheel #{i + 1}"
        print(_format_wheel(name, wheel))

    report = thread_the_needle.check_alignment(wheels)
    marks = []
    for circle, triangle in zip(report.circle_rows, report.triangle_rows):
        if circle:
            marks.append(f"{_C.GREEN}*{_C.RESET}")
        elif triangle:
            marks.append(f"{_C.RED}!{_C.RESET}")
        else:
            marks.append(" ")
    # Symbols column is 15 wide, plus 3 spaces before the holes.
    print(f"  {'':<10} {'':<15}   {' '.join(marks)}")
    status = (
        f"{_C.GREEN}solved{_C.RESET}" if report.solved
        else f"{_C.YELLOW}not solved{_C.RESET}"
    )
    print(f"  Labels: {' '.join(puzzle.labels)}   ({status})")


def print_solution(
    puzzle: thread_the_needle.Puzzle,
    targets: Sequence[int],
    plan: Sequence[RotationStep],
) -> None:
    """Print target indices and the rotation plan that reaches them."""
    print(f"{_C.BOLD}Solution{_C.RESET}")
    for i, (wheel, target) in enumerate(zip(puzzle.wheels, targets)):
        target_label = wheel.pattern.symbols[target]
        print(
            f"  Wheel #{i + 1}: index {wheel.index} -> {target} "
            f"(label {wheel.label} -> {target_label})"
        )
    if not plan:
        print(f"  {_C.DIM}Already in place{_C.RESET}")
    for step in plan:
        print(f"  {step}")
