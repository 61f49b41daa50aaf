"""Check a live submission before pressing the button.

Enter the bomb readings and each wheel's design and current index
below, then run:
    python examples/check_submission.py
"""

import sys
import pathlib

sys.path.insert(0, str(pathlib.Path(__file__).resolve().parent.parent))

import solve_wheels
import thread_the_needle
import wheel_patterns


def main() -> None:
    # ── Bomb readings ──────────────────────────────────────────
    bomb = thread_the_needle.BombState(
        serial="AB1CD2",
        battery_count=2,
        lit_indicator_count=0,
        strikes=1,
        solved_count=0,
    )

    # ── Wheels: (standard design ID, current index) ────────────
    wheel_setup = [
        ("1", 0),
        ("4", 6),
        ("9", 7),
        ("12", 4),
        ("5", 2),
    ]

    wheels = [
        thread_the_needle.Wheel(
            thread_the_needle.Pattern.from_design(
                wheel_patterns.get_wheel_design(design_id),
            ),
            index,
        )
        for design_id, index in wheel_setup
    ]
    puzzle = thread_the_needle.Puzzle(
        session_id=1, wheels=wheels, bomb_state=bomb,
    )

    # ── Display & check ────────────────────────────────────────
    solve_wheels.print_puzzle(puzzle)
    report = thread_the_needle.check_alignment(puzzle.all_wheels())
    print()
    if report.solved:
        print(f"Submit now: circle row at slot(s) {report.winning_slots}.")
    elif report.triangle_row_found:
        print("Do not submit: a full row of triangles is showing.")
    else:
        print("Do not submit: no full row of circles.")


if __name__ == "__main__":
    main()
