import itertools
import unittest

from triad_frets.exceptions import InvalidInput, UnsolvableVoicing
from triad_frets.note_types import (
    ChordRole,
    FretPosition,
    Interval,
    Note,
    ShapeName,
    StringSet,
    TriadQuality,
    Voicing,
)
from triad_frets.note_utils import parse_note
from triad_frets.shapes import anchor_string
from triad_frets.solver import (
    MAX_SPAN,
    PATTERN_TABLE,
    calculate_fret_positions,
    derive_pattern,
    fret_pattern,
    iter_all_voicings,
    lift_to_floor,
    verify_voicing,
)
from triad_frets.tuning import (
    fret_pitch_class,
    interval_for_role,
    interval_semitones,
    strings_in_set,
)


def frets_by_string(voicing):
    return {p.string: p.fret for p in voicing.positions}


class TestAllVoicings(unittest.TestCase):
    def check_voicings(self, allow_open, floor):
        voicings = list(iter_all_voicings(allow_open=allow_open))
        self.assertEqual(len(voicings), 12 * 3 * 3 * 4)

        for voicing in voicings:
            with self.subTest(voicing=str(voicing)):
                self.assertEqual(len(voicing.positions), 3)
                self.assertLessEqual(voicing.max_fret - voicing.min_fret, MAX_SPAN)
                self.assertGreaterEqual(voicing.min_fret, floor)

                expected = {interval_for_role(voicing.quality, r) for r in ChordRole}
                self.assertEqual(set(voicing.intervals), expected)
                self.assertEqual(len(set(voicing.intervals)), 3)

                for position in voicing.positions:
                    target = (
                        voicing.root.pitch_class + interval_semitones(position.interval)
                    ) % 12
                    self.assertEqual(fret_pitch_class(position.string, position.fret), target)

    def test_fretted_policy(self):
        self.check_voicings(allow_open=False, floor=1)

    def test_open_policy(self):
        self.check_voicings(allow_open=True, floor=0)

    def test_positions_ordered_by_string(self):
        for voicing in iter_all_voicings():
            strings = [p.string for p in voicing.positions]
            self.assertEqual(strings, sorted(strings_in_set(voicing.string_set)))

    def test_root_sits_on_layout_anchor(self):
        for voicing in iter_all_voicings():
            pattern = fret_pattern(voicing.shape, voicing.quality, voicing.string_set)
            root = voicing.position_for(ChordRole.ROOT)
            self.assertIs(voicing.layout, pattern.layout)
            self.assertEqual(root.interval, Interval.ROOT)
            self.assertEqual(root.string, anchor_string(voicing.string_set, voicing.layout))

    def test_deterministic(self):
        first = list(iter_all_voicings())
        second = list(iter_all_voicings())
        self.assertEqual(first, second)


class TestScenarios(unittest.TestCase):
    def test_c_major_d_shape_set_one(self):
        voicing = calculate_fret_positions("C", "Major", "D", "I")
        self.assertEqual(voicing.frets, (12, 13, 12))
        self.assertEqual(
            voicing.positions,
            (
                FretPosition(1, 12, Interval.MAJOR_THIRD),
                FretPosition(2, 13, Interval.ROOT),
                FretPosition(3, 12, Interval.PERFECT_FIFTH),
            ),
        )
        pitch_classes = {
            p.interval: fret_pitch_class(p.string, p.fret) for p in voicing.positions
        }
        self.assertEqual(
            pitch_classes,
            {Interval.ROOT: 0, Interval.MAJOR_THIRD: 4, Interval.PERFECT_FIFTH: 7},
        )

    def test_c_major_d_shape_set_one_with_open_strings(self):
        voicing = calculate_fret_positions("C", "Major", "D", "I", allow_open=True)
        self.assertEqual(voicing.frets, (0, 1, 0))

    def test_f_sharp_major_a_shape_set_two(self):
        voicing = calculate_fret_positions("F#", "Major", "A", "II")
        self.assertEqual(frets_by_string(voicing), {2: 2, 3: 3, 4: 4})
        self.assertLessEqual(voicing.span, 3)
        self.assertGreaterEqual(voicing.min_fret, 0)
        self.assertEqual(voicing.position_for(ChordRole.ROOT).string, 4)

    def test_g_diminished_d_shape_set_four(self):
        voicing = calculate_fret_positions("G", "Diminished", "D", "IV")
        self.assertEqual(frets_by_string(voicing), {4: 8, 5: 10, 6: 9})
        fifth = voicing.position_for(ChordRole.FIFTH)
        self.assertEqual(fifth.interval, Interval.DIMINISHED_FIFTH)
        self.assertEqual((fret_pitch_class(fifth.string, fifth.fret) - 7) % 12, 6)
        self.assertLessEqual(voicing.span, 3)

    def test_spellings_are_equivalent(self):
        sharp = calculate_fret_positions("C#", "Minor", "E", "III")
        flat = calculate_fret_positions("Db", "Minor", "E", "III")
        self.assertEqual(sharp, flat)
        self.assertEqual(sharp.frets, flat.frets)
        self.assertEqual(flat.root.name, "Db")

    def test_accepts_enum_and_note_inputs(self):
        by_name = calculate_fret_positions("Bb", "Minor", "E", "III")
        by_value = calculate_fret_positions(
            parse_note("A#"), TriadQuality.MINOR, ShapeName.E, StringSet.III
        )
        self.assertEqual(by_name.frets, by_value.frets)


class TestOpenStringBoundary(unittest.TestCase):
    def test_root_on_open_anchor_is_played_at_twelve(self):
        # E is the open pitch of string 1, the anchor of the E shape on set I
        voicing = calculate_fret_positions("E", "Major", "E", "I")
        self.assertEqual(frets_by_string(voicing), {1: 12, 2: 12, 3: 13})
        self.assertNotIn(0, voicing.frets)

    def test_root_on_open_anchor_with_open_strings(self):
        voicing = calculate_fret_positions("E", "Major", "E", "I", allow_open=True)
        self.assertEqual(frets_by_string(voicing), {1: 0, 2: 0, 3: 1})

    def test_open_anchor_below_floor_shifts_under_both_policies(self):
        # A on string 5 is open, but the third and fifth would need frets -2 and -3
        fretted = calculate_fret_positions("A", "Minor", "A", "III")
        open_ = calculate_fret_positions("A", "Minor", "A", "III", allow_open=True)
        self.assertEqual(frets_by_string(fretted), {3: 9, 4: 10, 5: 12})
        self.assertEqual(fretted, open_)

    def test_every_open_anchor_case(self):
        for quality, shape, string_set in itertools.product(TriadQuality, ShapeName, StringSet):
            pattern = fret_pattern(shape, quality, string_set)
            anchor = strings_in_set(string_set)[pattern.anchor]
            root = fret_pitch_class(anchor, 0)
            for allow_open, floor in ((False, 1), (True, 0)):
                voicing = calculate_fret_positions(
                    Note(root),
                    quality,
                    shape,
                    string_set,
                    allow_open=allow_open,
                )
                self.assertGreaterEqual(voicing.min_fret, floor)
                self.assertLessEqual(voicing.span, MAX_SPAN)
                if not allow_open:
                    self.assertEqual(voicing.position_for(ChordRole.ROOT).fret, 12)


class TestOctaveShift(unittest.TestCase):
    def test_lift_to_floor(self):
        self.assertEqual(lift_to_floor([-2, 0, 1]), [10, 12, 13])
        self.assertEqual(lift_to_floor([0, 1, 0], floor=0), [0, 1, 0])
        self.assertEqual(lift_to_floor([-14, -13, -12]), [10, 11, 12])
        self.assertEqual(lift_to_floor([3, 5, 4]), [3, 5, 4])

    def test_uniform_shift_keeps_invariants(self):
        for voicing in iter_all_voicings():
            up = voicing.shift_octaves(1)
            self.assertEqual(up.span, voicing.span)
            verify_voicing(up)
            self.assertEqual(up.shift_octaves(-1), voicing)

            down = voicing.shift_octaves(-1)
            self.assertEqual(down.span, voicing.span)
            for before, after in zip(voicing.positions, down.positions):
                self.assertEqual(
                    fret_pitch_class(before.string, before.fret),
                    fret_pitch_class(after.string, after.fret),
                )

    def test_shift_below_floor_is_rejected(self):
        voicing = calculate_fret_positions("F", "Major", "A", "IV")
        with self.assertRaises(UnsolvableVoicing):
            verify_voicing(voicing.shift_octaves(-1))


class TestPatternTable(unittest.TestCase):
    def test_table_size(self):
        # 3 shapes x 3 qualities x 3 topologies
        self.assertEqual(len(PATTERN_TABLE), 27)

    def test_every_pattern_fits(self):
        for pattern in PATTERN_TABLE.values():
            self.assertLessEqual(pattern.span, MAX_SPAN)
            self.assertEqual(pattern.offsets[pattern.anchor], 0)
            self.assertEqual(set(pattern.roles), set(ChordRole))

    def test_sets_three_and_four_share_patterns(self):
        for shape, quality in itertools.product(ShapeName, TriadQuality):
            self.assertIs(
                fret_pattern(shape, quality, StringSet.III),
                fret_pattern(shape, quality, StringSet.IV),
            )

    def test_known_patterns(self):
        self.assertEqual(fret_pattern("E", "Major", "I").offsets, (1, 0, 0))
        self.assertEqual(fret_pattern("A", "Major", "I").offsets, (0, 0, -2))
        self.assertEqual(fret_pattern("A", "Diminished", "II").offsets, (0, -2, -3))
        self.assertEqual(fret_pattern("D", "Minor", "III").offsets, (0, 0, -2))

    def test_root_position_diminished_borrows_d_layout_on_lower_sets(self):
        self.assertEqual(derive_pattern(ShapeName.A, TriadQuality.DIMINISHED, (5, 5)).span, 4)
        pattern = fret_pattern("A", "Diminished", "III")
        self.assertIs(pattern.layout, ShapeName.D)
        self.assertEqual(pattern.roles, (ChordRole.FIFTH, ChordRole.ROOT, ChordRole.THIRD))
        self.assertEqual(pattern.offsets, (-1, 0, -2))

    def test_only_one_family_borrows_a_layout(self):
        borrowed = [
            key for key, pattern in PATTERN_TABLE.items() if pattern.layout is not key[0]
        ]
        self.assertEqual(borrowed, [(ShapeName.A, TriadQuality.DIMINISHED, (5, 5))])

    def test_voicing_reports_borrowed_layout(self):
        for string_set in (StringSet.III, StringSet.IV):
            with self.subTest(string_set=string_set):
                voicing = calculate_fret_positions("G", "Diminished", "A", string_set)
                self.assertIs(voicing.shape, ShapeName.A)
                self.assertIs(voicing.layout, ShapeName.D)
                root = voicing.position_for(ChordRole.ROOT)
                self.assertEqual(root.string, anchor_string(string_set, ShapeName.D))
                self.assertIs(voicing.shift_octaves(1).layout, ShapeName.D)
        self.assertIs(calculate_fret_positions("G", "Diminished", "A", "II").layout, ShapeName.A)


class TestInvalidInput(unittest.TestCase):
    def test_unknown_values(self):
        cases = [
            ("H", "Major", "D", "I"),
            ("", "Major", "D", "I"),
            ("C##b", "Major", "D", "I"),
            ("C", "Augmented", "D", "I"),
            ("C", "Major", "G", "I"),
            ("C", "Major", "D", "V"),
            ("C", "Major", "D", 7),
            (None, "Major", "D", "I"),
        ]
        for args in cases:
            with self.subTest(args=args):
                with self.assertRaises(InvalidInput):
                    calculate_fret_positions(*args)

    def test_invalid_input_is_a_value_error(self):
        with self.assertRaises(ValueError):
            calculate_fret_positions("X", "Major", "D", "I")


class TestVerifyVoicing(unittest.TestCase):
    def make(self, positions):
        return Voicing(
            parse_note("C"), TriadQuality.MAJOR, ShapeName.D, StringSet.I, tuple(positions)
        )

    def test_accepts_solved_voicing(self):
        voicing = calculate_fret_positions("C", "Major", "D", "I")
        self.assertIs(verify_voicing(voicing), voicing)

    def test_rejects_root_off_layout_string(self):
        voicing = Voicing(
            parse_note("C"),
            TriadQuality.MAJOR,
            ShapeName.D,
            StringSet.I,
            calculate_fret_positions("C", "Major", "D", "I").positions,
            layout=ShapeName.A,
        )
        with self.assertRaises(UnsolvableVoicing):
            verify_voicing(voicing)

    def test_layout_defaults_to_shape(self):
        self.assertIs(self.make([]).layout, ShapeName.D)

    def test_rejects_wide_span(self):
        voicing = self.make(
            [
                FretPosition(1, 12, Interval.MAJOR_THIRD),
                FretPosition(2, 1, Interval.ROOT),
                FretPosition(3, 12, Interval.PERFECT_FIFTH),
            ]
        )
        with self.assertRaises(UnsolvableVoicing):
            verify_voicing(voicing)

    def test_rejects_wrong_pitch_class(self):
        voicing = self.make(
            [
                FretPosition(1, 11, Interval.MAJOR_THIRD),
                FretPosition(2, 13, Interval.ROOT),
                FretPosition(3, 12, Interval.PERFECT_FIFTH),
            ]
        )
        with self.assertRaises(UnsolvableVoicing):
            verify_voicing(voicing)

    def test_rejects_duplicate_roles(self):
        voicing = self.make(
            [
                FretPosition(1, 12, Interval.MAJOR_THIRD),
                FretPosition(2, 13, Interval.ROOT),
                FretPosition(3, 17, Interval.ROOT),
            ]
        )
        with self.assertRaises(UnsolvableVoicing):
            verify_voicing(voicing)

    def test_failure_is_logged(self):
        voicing = self.make(
            [
                FretPosition(1, 12, Interval.MAJOR_THIRD),
                FretPosition(2, 13, Interval.ROOT),
                FretPosition(3, 0, Interval.PERFECT_FIFTH),
            ]
        )
        with self.assertLogs("triad_frets.solver", level="ERROR"):
            with self.assertRaises(UnsolvableVoicing):
                verify_voicing(voicing)


if __name__ == "__main__":
    unittest.main()
