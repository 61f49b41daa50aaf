"""Simulation script for Thread the Needle.

Generates a puzzle for a fixed bomb, shows the wheels, makes a wrong
submission, then force-solves it: exhaustive search for a winning
rotation, shortest-path rotation plan, and a final submission.
"""

import logging
import random

import solve_wheels
import thread_the_needle

# Toggle the solver's progress bar (needs tqdm installed).
SHOW_PROGRESS = False

# Toggle INFO logging of generation and submissions.
VERBOSE = True


def main() -> None:
    """Generate, inspect, and force-solve one puzzle.

    The bomb has serial KT4EA7 (odd digits 7, vowels E and A: score 5,
    column 1), 3 batteries and 1 lit indicator (surplus 2, row 1), no
    strikes and 2 solved modules (bonus offset 6). That selects the
    bonus wheel with holes ``....OOOO``.
    """
    logging.basicConfig(
        level=logging.INFO if VERBOSE else logging.WARNING,
        format="[%(asctime)s] [%(levelname)s] [%(name)s]: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    bomb = thread_the_needle.BombState(
        serial="KT4EA7",
        battery_count=3,
        lit_indicator_count=1,
        strikes=0,
        solved_count=2,
    )
    rng = random.Random(2024)

    print("=" * 60)
    print("Thread the Needle")
    print("=" * 60)
    print()

    # ── Generate ──────────────────────────────────────────────
    puzzle = thread_the_needle.Puzzle.create(session_id=1, bomb_state=bomb, rng=rng)
    solve_wheels.print_puzzle(puzzle)
    print()

    # ── Wrong submission (unless the random start happens to win) ─
    if not thread_the_needle.evaluate(puzzle.all_wheels()):
        puzzle.submit()
        print("Submitted the starting rotation: strike.")
        print()

    # ── Forced solve ──────────────────────────────────────────
    targets = solve_wheels.solve(
        puzzle.patterns, puzzle.bonus_wheel, show_progress=SHOW_PROGRESS,
    )
    plan = solve_wheels.plan_rotations(
        puzzle.indices, targets, [p.size for p in puzzle.patterns], rng,
    )
    solve_wheels.print_solution(puzzle, targets, plan)
    print()

    solve_wheels.apply_rotation_plan(puzzle, plan)
    solve_wheels.print_puzzle(puzzle)
    print()
    print("Disarmed!" if puzzle.submit() else "Still armed.")


if __name__ == "__main__":
    main()
