"""Unit tests for thread_the_needle game model."""

import random
import unittest

from thread_the_needle import (
    AlignmentReport,
    BombState,
    HoleKind,
    InvalidPatternError,
    Pattern,
    Puzzle,
    UnsolvableConfigError,
    Wheel,
    bonus_column,
    bonus_row,
    bonus_start_index,
    bonus_wheel,
    check_alignment,
    evaluate,
    generate,
    probe_solvable,
    select_bonus,
    serial_score,
    standard_pattern_pool,
)

# Bonus wheel "..^OO..." at index 5: circles at slots 6 and 7, triangle at 5.
_BOMB = BombState(
    serial="AEIOU1", battery_count=3, lit_indicator_count=1,
    strikes=0, solved_count=3,
)


def _pattern(holes: str) -> Pattern:
    """Pattern with letter symbols and the given hole string."""
    return Pattern.from_strings("ABCDEFGH"[:len(holes)], holes)


def _wheels(holes: str, index: int, count: int = 6) -> list[Wheel]:
    return [Wheel(_pattern(holes), index) for _ in range(count)]


class TestHoleKind(unittest.TestCase):
    """Tests for the HoleKind enum."""

    def test_from_char(self) -> None:
        self.assertIs(HoleKind.from_char("."), HoleKind.NONE)
        self.assertIs(HoleKind.from_char("O"), HoleKind.CIRCLE)
        self.assertIs(HoleKind.from_char("^"), HoleKind.TRIANGLE)

    def test_from_char_unknown(self) -> None:
        with self.assertRaises(InvalidPatternError):
            HoleKind.from_char("o")

    def test_display_char(self) -> None:
        self.assertEqual(HoleKind.NONE.display_char, " ")
        self.assertEqual(HoleKind.CIRCLE.display_char, "O")
        self.assertEqual(HoleKind.TRIANGLE.display_char, "^")


class TestPattern(unittest.TestCase):
    """Tests for Pattern construction and helpers."""

    def test_lengths_that_tile_the_ring(self) -> None:
        for length in (1, 2, 4, 8):
            pattern = _pattern("O" * length)
            self.assertEqual(pattern.size, length)

    def test_lengths_that_do_not_tile_the_ring(self) -> None:
        for length in (3, 5, 6, 7):
            with self.assertRaises(InvalidPatternError):
                Pattern.from_strings("x" * length, "O" * length)

    def test_too_long(self) -> None:
        with self.assertRaises(InvalidPatternError):
            Pattern.from_strings("x" * 16, "." * 16)

    def test_empty(self) -> None:
        with self.assertRaises(InvalidPatternError):
            Pattern((), ())

    def test_length_mismatch(self) -> None:
        with self.assertRaises(InvalidPatternError):
            Pattern.from_strings("ABCD", "O.")

    def test_error_is_value_error(self) -> None:
        with self.assertRaises(ValueError):
            Pattern.from_strings("ABCD", "O.")

    def test_unknown_hole_character(self) -> None:
        with self.assertRaises(InvalidPatternError):
            Pattern.from_strings("ABCD", "O.x.")

    def test_non_hole_kind_rejected(self) -> None:
        with self.assertRaises(InvalidPatternError):
            Pattern(("A", "B"), (HoleKind.CIRCLE, "O"))  # type: ignore[arg-type]

    def test_sequences_normalized_to_tuples(self) -> None:
        pattern = Pattern(["A", "B"], [HoleKind.CIRCLE, HoleKind.NONE])  # type: ignore[arg-type]
        self.assertEqual(pattern.symbols, ("A", "B"))
        self.assertEqual(pattern.holes, (HoleKind.CIRCLE, HoleKind.NONE))

    def test_strings_round_trip(self) -> None:
        pattern = Pattern.from_strings("+-]!<0#<", "O.^^^.OO")
        self.assertEqual(pattern.symbol_string, "+-]!<0#<")
        self.assertEqual(pattern.hole_string, "O.^^^.OO")
        self.assertEqual(str(pattern), "+-]!<0#</O.^^^.OO")

    def test_circle_indices(self) -> None:
        pattern = Pattern.from_strings("+-]!<0#<", "O.^^^.OO")
        self.assertEqual(pattern.circle_indices(), [0, 6, 7])
        self.assertEqual(_pattern("^^..").circle_indices(), [])

    def test_equality_and_hash(self) -> None:
        a = _pattern("O.^.")
        b = _pattern("O.^.")
        self.assertEqual(a, b)
        self.assertEqual(len({a, b}), 1)

    def test_frozen_immutability(self) -> None:
        pattern = _pattern("O.")
        with self.assertRaises(AttributeError):
            pattern.symbols = ("X", "Y")  # type: ignore[misc]

    def test_standard_pool(self) -> None:
        pool = standard_pattern_pool()
        self.assertEqual(len(pool), 12)
        self.assertEqual(pool[0].hole_string, "O.^^^.OO")
        self.assertTrue(all(p.size == 8 for p in pool))


class TestWheel(unittest.TestCase):
    """Tests for Wheel rotation and slot lookup."""

    def setUp(self) -> None:
        self.pattern = Pattern.from_strings("+-]!<0#<", "O.^^^.OO")

    def test_index_out_of_range(self) -> None:
        with self.assertRaises(IndexError):
            Wheel(self.pattern, 8)
        with self.assertRaises(IndexError):
            Wheel(self.pattern, -1)
        with self.assertRaises(IndexError):
            Wheel(_pattern("O."), 2)

    def test_rotate_up_wraps(self) -> None:
        wheel = Wheel(self.pattern, 7)
        wheel.rotate_up()
        self.assertEqual(wheel.index, 0)

    def test_rotate_down_wraps(self) -> None:
        wheel = Wheel(self.pattern, 0)
        wheel.rotate_down()
        self.assertEqual(wheel.index, 7)

    def test_rotations_are_inverse(self) -> None:
        for start in range(8):
            wheel = Wheel(self.pattern, start)
            wheel.rotate_up()
            wheel.rotate_down()
            self.assertEqual(wheel.index, start)
            wheel.rotate_down()
            wheel.rotate_up()
            self.assertEqual(wheel.index, start)

    def test_index_stays_in_range(self) -> None:
        wheel = Wheel(_pattern("O.^."), 0)
        for _ in range(10):
            wheel.rotate_down()
            self.assertIn(wheel.index, range(4))
        for _ in range(10):
            wheel.rotate_up()
            self.assertIn(wheel.index, range(4))

    def test_hole_at_offsets_by_index(self) -> None:
        wheel = Wheel(self.pattern, 2)
        self.assertIs(wheel.hole_at(0), HoleKind.TRIANGLE)
        self.assertIs(wheel.hole_at(3), HoleKind.NONE)
        self.assertIs(wheel.hole_at(4), HoleKind.CIRCLE)
        self.assertIs(wheel.hole_at(6), HoleKind.CIRCLE)
        self.assertIs(wheel.hole_at(7), HoleKind.NONE)

    def test_hole_at_is_periodic(self) -> None:
        for index in range(8):
            wheel = Wheel(self.pattern, index)
            for slot in range(-8, 16):
                self.assertIs(wheel.hole_at(slot), wheel.hole_at(slot + 8))

    def test_short_pattern_repeats(self) -> None:
        wheel = Wheel(_pattern("O^"), 1)
        self.assertIs(wheel.hole_at(0), HoleKind.TRIANGLE)
        self.assertIs(wheel.hole_at(1), HoleKind.CIRCLE)
        self.assertIs(wheel.hole_at(6), HoleKind.TRIANGLE)
        self.assertIs(wheel.hole_at(7), HoleKind.CIRCLE)

    def test_symbol_at_and_label(self) -> None:
        wheel = Wheel(self.pattern, 2)
        self.assertEqual(wheel.label, "]")
        self.assertEqual(wheel.symbol_at(0), "]")
        self.assertEqual(wheel.symbol_at(6), "+")

    def test_str(self) -> None:
        self.assertEqual(str(Wheel(self.pattern, 0)), "[+-]!<0#<] [O ^^^ OO]")
        self.assertEqual(str(Wheel(self.pattern, 2)), "[]!<0#<+-] [^^^ OOO ]")


class TestAlignment(unittest.TestCase):
    """Tests for check_alignment() and evaluate()."""

    def test_single_circle_row_at_slot_0(self) -> None:
        report = check_alignment(_wheels("O.......", 0))
        self.assertEqual(report.circle_rows, (True,) + (False,) * 7)
        self.assertEqual(report.triangle_rows, (False,) * 8)
        self.assertTrue(report.solved)
        self.assertEqual(report.winning_slots, [0])
        self.assertTrue(evaluate(_wheels("O.......", 0)))

    def test_rotated_wheels_move_the_row(self) -> None:
        report = check_alignment(_wheels("O.......", 3))
        self.assertEqual(report.winning_slots, [5])

    def test_misaligned_wheel_breaks_the_row(self) -> None:
        wheels = _wheels("O.......", 0)
        wheels[4].rotate_up()
        self.assertFalse(evaluate(wheels))

    def test_mixed_row_is_neither(self) -> None:
        wheels = _wheels("...O....", 0, count=5)
        wheels.append(Wheel(_pattern("^^^^^^^^"), 0))
        report = check_alignment(wheels)
        self.assertFalse(report.circle_rows[3])
        self.assertFalse(report.triangle_rows[3])
        self.assertFalse(report.circle_row_found)
        self.assertFalse(report.triangle_row_found)
        self.assertFalse(evaluate(wheels))

    def test_triangle_row_vetoes_circle_row(self) -> None:
        report = check_alignment(_wheels("O^......", 0))
        self.assertTrue(report.circle_rows[0])
        self.assertTrue(report.triangle_rows[1])
        self.assertFalse(report.solved)
        self.assertEqual(report.winning_slots, [])

    def test_triangle_row_alone(self) -> None:
        report = check_alignment(_wheels("^.......", 0))
        self.assertTrue(report.triangle_row_found)
        self.assertFalse(report.circle_row_found)
        self.assertFalse(report.solved)

    def test_no_holes_anywhere(self) -> None:
        self.assertFalse(evaluate(_wheels("........", 0)))

    def test_mixed_lengths(self) -> None:
        wheels = _wheels("O.O.O.O.", 0, count=5)
        wheels.append(Wheel(_pattern("O^"), 0))
        report = check_alignment(wheels)
        self.assertEqual(report.winning_slots, [0, 2, 4, 6])

    def test_empty(self) -> None:
        with self.assertRaises(ValueError):
            check_alignment([])

    def test_report_properties(self) -> None:
        report = AlignmentReport(
            circle_rows=(False, True) + (False,) * 6,
            triangle_rows=(False,) * 8,
        )
        self.assertTrue(report.solved)
        self.assertEqual(report.winning_slots, [1])

    def test_rotating_every_wheel_shifts_the_winning_slot(self) -> None:
        rng = random.Random(11)
        pool = standard_pattern_pool()
        bonus = Pattern.from_strings("12345678", "....OOOO")
        patterns = generate(pool, bonus, rng=rng) + [bonus]
        circles = [p.circle_indices() for p in patterns]
        while True:
            wheels = [Wheel(p, rng.choice(c)) for p, c in zip(patterns, circles)]
            if evaluate(wheels):
                break
        slots = check_alignment(wheels).winning_slots
        for shift in range(1, 8):
            shifted = [
                Wheel(w.pattern, (w.index + shift) % w.pattern.size)
                for w in wheels
            ]
            report = check_alignment(shifted)
            self.assertTrue(report.solved)
            self.assertEqual(
                report.winning_slots, sorted((s - shift) % 8 for s in slots),
            )


class TestBonusSelection(unittest.TestCase):
    """Tests for the bonus wheel rule."""

    def test_serial_score(self) -> None:
        self.assertEqual(serial_score("AEIOU1"), 11)
        self.assertEqual(serial_score("AB1CD2"), 3)
        self.assertEqual(serial_score("XYZ248"), 0)
        self.assertEqual(serial_score("13579"), 5)

    def test_serial_score_is_case_sensitive(self) -> None:
        self.assertEqual(serial_score("aeiou"), 0)

    def test_bonus_column(self) -> None:
        expected = {0: 2, 1: 0, 2: 1, 3: 0, 4: 1, 5: 1, 6: 2, 11: 2}
        for score, column in expected.items():
            self.assertEqual(bonus_column(score), column, f"score {score}")

    def test_bonus_row(self) -> None:
        expected = {-2: 0, 0: 0, 1: 1, 2: 1, 3: 2, 4: 3, 9: 3}
        for surplus, row in expected.items():
            self.assertEqual(bonus_row(surplus), row, f"surplus {surplus}")

    def test_start_index_wraps_negative(self) -> None:
        self.assertEqual(bonus_start_index(0, 3), 5)
        self.assertEqual(bonus_start_index(0, 17), 7)
        self.assertEqual(bonus_start_index(10, 0), 2)
        self.assertEqual(bonus_start_index(4, 4), 0)

    def test_select_bonus(self) -> None:
        pattern, index = select_bonus("AEIOU1", 3, 1, 0, 3)
        self.assertEqual(pattern.hole_string, "..^OO...")
        self.assertEqual(pattern.symbol_string, "12345678")
        self.assertEqual(index, 5)

    def test_select_bonus_more_lit_than_batteries(self) -> None:
        pattern, index = select_bonus("XYZ248", 1, 3, 2, 0)
        self.assertEqual(pattern.hole_string, "..^^.^.O")
        self.assertEqual(index, 2)

    def test_select_bonus_many_batteries(self) -> None:
        pattern, _ = select_bonus("AB1CD2", 6, 0, 0, 0)
        self.assertEqual(pattern.hole_string, ".^O^O^.O")

    def test_bonus_wheel_from_state(self) -> None:
        wheel = bonus_wheel(_BOMB)
        self.assertEqual(wheel.pattern.hole_string, "..^OO...")
        self.assertEqual(wheel.index, 5)
        self.assertEqual(wheel.label, "6")

    def test_bomb_state_rejects_negative_counts(self) -> None:
        with self.assertRaises(ValueError):
            BombState(serial="A", strikes=-1)
        with self.assertRaises(ValueError):
            BombState(serial="A", battery_count=-2)


class TestGeneration(unittest.TestCase):
    """Tests for probe_solvable() and generate()."""

    def test_probe_accepts_solvable(self) -> None:
        patterns = [_pattern("O.......")] * 6
        self.assertTrue(probe_solvable(patterns, random.Random(0)))

    def test_probe_rejects_triangle_veto(self) -> None:
        patterns = [_pattern("O^......")] * 6
        self.assertFalse(probe_solvable(patterns, random.Random(0)))

    def test_probe_rejects_pattern_without_circles(self) -> None:
        patterns = [_pattern("O.......")] * 5 + [_pattern("^^^^....")]
        self.assertFalse(probe_solvable(patterns, random.Random(0)))

    def test_generate_returns_wheel_count_patterns(self) -> None:
        pool = standard_pattern_pool()
        bonus = Pattern.from_strings("12345678", "....OOOO")
        patterns = generate(pool, bonus, rng=random.Random(3))
        self.assertEqual(len(patterns), 5)
        for pattern in patterns:
            self.assertIn(pattern, pool)

    def test_generate_custom_wheel_count(self) -> None:
        pool = [_pattern("O.......")]
        patterns = generate(pool, pool[0], rng=random.Random(0), wheel_count=3)
        self.assertEqual(patterns, [pool[0]] * 3)

    def test_generate_is_reproducible(self) -> None:
        pool = standard_pattern_pool()
        bonus = Pattern.from_strings("12345678", "..^^.OOO")
        a = generate(pool, bonus, rng=random.Random(99))
        b = generate(pool, bonus, rng=random.Random(99))
        self.assertEqual(a, b)

    def test_generate_gives_up(self) -> None:
        pool = [_pattern("O^......")]
        with self.assertRaises(UnsolvableConfigError):
            generate(pool, pool[0], rng=random.Random(0), max_draws=3)

    def test_generate_empty_pool(self) -> None:
        with self.assertRaises(ValueError):
            generate([], _pattern("O......."))


class TestPuzzle(unittest.TestCase):
    """Tests for the Puzzle session object."""

    def _puzzle(self, index: int) -> Puzzle:
        # Five "O......." wheels line up with the bonus circle at slot 6
        # when at index 2.
        wheels = [Wheel(_pattern("O......."), index) for _ in range(5)]
        return Puzzle(session_id=7, wheels=wheels, bomb_state=_BOMB)

    def test_requires_wheels(self) -> None:
        with self.assertRaises(ValueError):
            Puzzle(session_id=1, wheels=[], bomb_state=_BOMB)

    def test_create(self) -> None:
        puzzle = Puzzle.create(session_id=1, bomb_state=_BOMB, seed=5)
        self.assertEqual(len(puzzle.wheels), 5)
        self.assertEqual(len(puzzle.all_wheels()), 6)
        for wheel in puzzle.wheels:
            self.assertIn(wheel.index, range(wheel.pattern.size))
        self.assertFalse(puzzle.solved)

    def test_create_is_reproducible(self) -> None:
        a = Puzzle.create(session_id=1, bomb_state=_BOMB, seed=123)
        b = Puzzle.create(session_id=2, bomb_state=_BOMB, seed=123)
        self.assertEqual(a.patterns, b.patterns)
        self.assertEqual(a.indices, b.indices)

    def test_create_with_custom_pool(self) -> None:
        pool = [_pattern("....OOOO")]
        puzzle = Puzzle.create(
            session_id=1, bomb_state=_BOMB, pattern_pool=pool, seed=0,
        )
        self.assertEqual(puzzle.patterns, pool * 5)

    def test_bonus_wheel_from_snapshot(self) -> None:
        puzzle = self._puzzle(0)
        self.assertEqual(puzzle.bonus_wheel, bonus_wheel(_BOMB))

    def test_rotate(self) -> None:
        puzzle = self._puzzle(0)
        puzzle.rotate(1, up=True)
        puzzle.rotate(2, up=False)
        self.assertEqual(puzzle.indices, [0, 1, 7, 0, 0])

    def test_rotate_out_of_range(self) -> None:
        with self.assertRaises(IndexError):
            self._puzzle(0).rotate(5)

    def test_labels(self) -> None:
        self.assertEqual(self._puzzle(2).labels, ["C"] * 5)

    def test_wrong_then_right_submission(self) -> None:
        puzzle = self._puzzle(0)
        self.assertFalse(puzzle.submit())
        self.assertFalse(puzzle.solved)
        for i in range(5):
            puzzle.rotate(i)
            puzzle.rotate(i)
        self.assertTrue(puzzle.submit())
        self.assertTrue(puzzle.solved)
        self.assertEqual(puzzle.submissions, 2)

    def test_solved_puzzle_is_locked(self) -> None:
        puzzle = self._puzzle(2)
        self.assertTrue(puzzle.submit())
        with self.assertRaises(ValueError):
            puzzle.rotate(0)
        with self.assertRaises(ValueError):
            puzzle.submit()

    def test_submit_logs_verdict(self) -> None:
        puzzle = self._puzzle(2)
        with self.assertLogs("thread_the_needle", level="INFO") as logs:
            puzzle.submit()
        output = "\n".join(logs.output)
        self.assertIn("[Thread the Needle #7]", output)
        self.assertIn("Row of circular holes: Found", output)
        self.assertIn("Row of triangular holes: Not Found", output)
        self.assertIn("Submission was correct", output)

    def test_submit_with_live_state(self) -> None:
        # Strikes 2, solves 3 moves the bonus circles to slots 4 and 5.
        live = BombState(
            serial="AEIOU1", battery_count=3, lit_indicator_count=1,
            strikes=2, solved_count=3,
        )
        puzzle = self._puzzle(2)
        with self.assertLogs("thread_the_needle", level="WARNING") as logs:
            self.assertFalse(puzzle.submit(live))
        self.assertIn("Bonus wheel changed", logs.output[0])
        self.assertTrue(puzzle.submit())

    def test_str(self) -> None:
        lines = str(self._puzzle(0)).splitlines()
        self.assertEqual(len(lines), 6)
        self.assertEqual(lines[0], "Wheel #1: [ABCDEFGH] [O       ]")
        self.assertEqual(lines[5], "Wheel #6 (Bonus): [67812345] [     ^OO]")


if __name__ == "__main__":
    unittest.main()
