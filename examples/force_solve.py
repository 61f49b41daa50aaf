"""Force-solve a freshly generated puzzle with a progress bar.

Run:
    python examples/force_solve.py
"""

import logging
import random
import sys
import pathlib

sys.path.insert(0, str(pathlib.Path(__file__).resolve().parent.parent))

import solve_wheels
import thread_the_needle


def main() -> None:
    logging.basicConfig(
        level=logging.DEBUG,
        format="[%(asctime)s] [%(levelname)s] [%(name)s]: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    bomb = thread_the_needle.BombState(
        serial="UE9XA5",
        battery_count=5,
        lit_indicator_count=0,
        strikes=2,
        solved_count=7,
    )
    rng = random.Random(7)
    puzzle = thread_the_needle.Puzzle.create(
        session_id=42, bomb_state=bomb, rng=rng,
    )
    solve_wheels.print_puzzle(puzzle)
    print()

    solved = solve_wheels.force_solve(puzzle, rng=rng, show_progress=True)
    print()
    solve_wheels.print_puzzle(puzzle)
    print()
    print("Disarmed!" if solved else "Still armed.")


if __name__ == "__main__":
    main()
