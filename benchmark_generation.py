"""Benchmark puzzle generation and solving across all 12 bonus wheels.

For each bonus table position, generates seeded puzzles and records how
many pattern draws the solvability probe rejected before accepting one,
and how many combinations the exhaustive solver checked before its first
hit. Useful for checking that ``MAX_DRAWS`` leaves a wide margin.
"""

import pathlib
import random
import statistics
import sys

sys.path.insert(0, str(pathlib.Path(__file__).resolve().parent))

import solve_wheels
import thread_the_needle
import wheel_patterns


def _draws_needed(
    pool: list[thread_the_needle.Pattern],
    bonus: thread_the_needle.Pattern,
    rng: random.Random,
) -> int:
    """Count draws until one passes the probe, as ``generate`` would."""
    draws = 0
    while True:
        draws += 1
        patterns = [rng.choice(pool) for _ in range(thread_the_needle.WHEEL_COUNT)]
        if thread_the_needle.probe_solvable(patterns + [bonus], rng):
            return draws


def _search_depth(patterns: list[thread_the_needle.Pattern], solution: list[int]) -> int:
    """Position of a solution in odometer order, 1-based."""
    depth = 0
    for digit, pattern in zip(reversed(solution), reversed(patterns)):
        depth = depth * pattern.size + digit
    return depth + 1


def main() -> None:
    puzzles_per_bonus = 40
    pool = thread_the_needle.standard_pattern_pool()

    print("=" * 60)
    print(f"GENERATION BENCHMARK ({puzzles_per_bonus} puzzles per bonus wheel)")
    print("=" * 60)

    for (row, column), design in wheel_patterns.BONUS_WHEELS.items():
        bonus = thread_the_needle.Pattern.from_design(design)
        draws: list[int] = []
        depths: list[int] = []
        for i in range(puzzles_per_bonus):
            rng = random.Random(row * 1000 + column * 100 + i)
            draws.append(_draws_needed(pool, bonus, rng))

            patterns = thread_the_needle.generate(pool, bonus, rng=rng)
            bonus_wheel = thread_the_needle.Wheel(bonus, rng.randrange(bonus.size))
            solution = solve_wheels.solve(patterns, bonus_wheel)
            depths.append(_search_depth(patterns, solution))

        print(f"\n{design.design_id} ({design.holes}):")
        print(
            f"  Draws:  mean {statistics.mean(draws):6.1f}   "
            f"max {max(draws)}"
        )
        print(
            f"  Search: mean {statistics.mean(depths):8.1f}   "
            f"median {statistics.median(depths):8.1f}   max {max(depths)}"
        )


if __name__ == "__main__":
    main()
