import unittest

from triad_atlas.fretboard import (
    STANDARD_TUNING,
    DifficultyPolicy,
    FretboardMapper,
    VoicingConstraints,
    find_note_on_fretboard,
    map_triad_to_fretboard,
    shape_id,
)
from triad_atlas.note_types import FretboardPosition
from triad_atlas.note_utils import note_from_name
from triad_atlas.triads import generate_triad


def by_shape(voicings):
    return {v.shape: v for v in voicings}


class TestFindNoteOnFretboard(unittest.TestCase):
    def test_open_string_and_octaves(self):
        positions = find_note_on_fretboard("E", 6)
        self.assertEqual([p.fret for p in positions], [0, 12, 24])
        self.assertEqual([str(p.note) for p in positions], ["E2", "E3", "E4"])

    def test_fret_ceiling(self):
        self.assertEqual([p.fret for p in find_note_on_fretboard("E", 6, 12)], [0, 12])

    def test_fretted_note(self):
        positions = find_note_on_fretboard("C", 2, 12)
        self.assertEqual(len(positions), 1)
        self.assertEqual(positions[0].fret, 1)
        self.assertEqual(str(positions[0].note), "C4")

    def test_pitch_class_integer(self):
        self.assertEqual([p.fret for p in find_note_on_fretboard(9, 6, 12)], [5])

    def test_invalid_arguments(self):
        with self.assertLogs("triad_atlas.validation", level="ERROR"):
            self.assertEqual(find_note_on_fretboard("C", 7), [])
        with self.assertLogs("triad_atlas.validation", level="ERROR"):
            self.assertEqual(find_note_on_fretboard(12, 1), [])
        with self.assertLogs("triad_atlas.validation", level="ERROR"):
            self.assertEqual(find_note_on_fretboard("C", 1, 25), [])

    def test_all_strings(self):
        mapper = FretboardMapper()
        positions = mapper.find_note_positions("A", max_fret=5)
        self.assertEqual(sorted((p.string, p.fret) for p in positions), [(1, 5), (3, 2), (5, 0), (6, 5)])


class TestTriadPositions(unittest.TestCase):
    def test_roles_and_count(self):
        triad = generate_triad("C", "major")
        positions = FretboardMapper().get_triad_positions(triad, 12)
        # Three tones per string, plus a 12th-fret repeat of each open chord tone (E, G, E)
        self.assertEqual(len(positions), 21)
        for position in positions:
            self.assertEqual(position.role, triad.role_of(position.note.pitch_class))

    def test_not_a_triad(self):
        with self.assertLogs("triad_atlas.validation", level="ERROR"):
            self.assertEqual(FretboardMapper().get_triad_positions("C"), [])


class TestMapTriadToFretboard(unittest.TestCase):
    def test_open_e_minor(self):
        voicings = by_shape(map_triad_to_fretboard(generate_triad("E", "minor"), VoicingConstraints(max_fret=5)))
        voicing = voicings["1:0-2:0-3:0"]
        self.assertEqual(voicing.neck_position, 0)
        self.assertEqual(voicing.fingering, (0, 0, 0))
        self.assertEqual(voicing.difficulty, "beginner")
        self.assertTrue(voicing.uses_open_strings)

    def test_open_c_major_shape(self):
        voicings = by_shape(map_triad_to_fretboard(generate_triad("C", "major"), VoicingConstraints(max_fret=5)))
        voicing = voicings["1:0-2:1-3:0-4:2-5:3"]
        self.assertTrue(voicing.uses_open_strings)
        self.assertEqual(voicing.neck_position, 1)
        self.assertEqual(voicing.fingering, (0, 1, 0, 2, 3))
        self.assertEqual([p.role for p in voicing.positions], ["third", "root", "fifth", "third", "root"])
        # span 2 + two extra strings, every adjacent pair consonant
        self.assertEqual(voicing.score, 4)
        self.assertEqual(voicing.difficulty, "intermediate")

    def test_voicing_invariants(self):
        triad = generate_triad("C", "major")
        constraints = VoicingConstraints(max_fret=12, max_strings=4)
        voicings = map_triad_to_fretboard(triad, constraints)
        self.assertTrue(voicings)
        self.assertEqual(len({v.shape for v in voicings}), len(voicings))

        for voicing in voicings:
            strings = voicing.strings
            self.assertEqual(len(set(strings)), len(strings))
            self.assertTrue(3 <= len(strings) <= 4)
            self.assertEqual(frozenset(p.note.pitch_class for p in voicing.positions), triad.pitch_classes)
            self.assertLessEqual(voicing.fret_span, 4)
            self.assertLessEqual(voicing.highest_fret, 12)
            fretted = [p.fret for p in voicing.positions if not p.is_open]
            self.assertEqual(voicing.neck_position, min(fretted) if fretted else 0)
            self.assertEqual(len(voicing.fingering), len(strings))
            self.assertIn(voicing.difficulty, ("beginner", "intermediate", "advanced"))

    def test_ordered_by_neck_position(self):
        voicings = map_triad_to_fretboard(generate_triad("G", "major"), VoicingConstraints(max_fret=7, max_strings=3))
        positions = [v.neck_position for v in voicings]
        self.assertEqual(positions, sorted(positions))

    def test_without_open_strings(self):
        voicings = map_triad_to_fretboard(
            generate_triad("E", "minor"), VoicingConstraints(max_fret=7, include_open_strings=False)
        )
        self.assertTrue(voicings)
        for voicing in voicings:
            self.assertFalse(voicing.uses_open_strings)
            self.assertGreaterEqual(voicing.neck_position, 1)

    def test_invalid_input(self):
        with self.assertLogs("triad_atlas.validation", level="ERROR"):
            self.assertEqual(map_triad_to_fretboard("C major"), [])
        with self.assertLogs("triad_atlas.validation", level="ERROR"):
            self.assertEqual(
                map_triad_to_fretboard(generate_triad("C", "major"), VoicingConstraints(min_strings=5, max_strings=4)),
                [],
            )


class TestDifficultyPolicy(unittest.TestCase):
    def test_classify(self):
        policy = DifficultyPolicy()
        self.assertEqual(policy.classify(0), "beginner")
        self.assertEqual(policy.classify(2), "beginner")
        self.assertEqual(policy.classify(3), "intermediate")
        self.assertEqual(policy.classify(4), "intermediate")
        self.assertEqual(policy.classify(5), "advanced")

    def test_skipped_strings_and_dissonance(self):
        mapper = FretboardMapper()
        # C on string 1, E on string 3, G on string 4: one skipped string
        positions = [
            FretboardPosition(1, 8, mapper.fretted_note(1, 8)),
            FretboardPosition(3, 9, mapper.fretted_note(3, 9)),
            FretboardPosition(4, 5, mapper.fretted_note(4, 5)),
        ]
        # span 4, skip 2, G3 up to E4 is M6 and E4 up to C5 is m6
        self.assertEqual(DifficultyPolicy().score(positions), 6)

    def test_custom_thresholds(self):
        self.assertEqual(DifficultyPolicy(beginner_max_score=0, intermediate_max_score=1).classify(2), "advanced")


class TestFretboardMapper(unittest.TestCase):
    def test_standard_tuning(self):
        mapper = FretboardMapper()
        self.assertEqual([str(n) for n in mapper.tuning], list(STANDARD_TUNING))
        self.assertEqual(mapper.fretted_note(5, 3), note_from_name("C3"))

    def test_invalid_tuning(self):
        with self.assertRaises(ValueError):
            FretboardMapper(tuning=("E4", "B3"))
        with self.assertRaises(ValueError):
            FretboardMapper(tuning=("E4", "B3", "G3", "D3", "A2", "X2"))
        with self.assertRaises(ValueError):
            FretboardMapper(max_fret=30)

    def test_drop_d_tuning(self):
        mapper = FretboardMapper(tuning=("E4", "B3", "G3", "D3", "A2", "D2"))
        self.assertEqual([p.fret for p in mapper.find_note_on_fretboard("D", 6, 12)], [0, 12])

    def test_shape_id(self):
        positions = [
            FretboardPosition(3, 0, note_from_name("G3")),
            FretboardPosition(1, 3, note_from_name("G4")),
        ]
        self.assertEqual(shape_id(positions), "1:3-3:0")


if __name__ == "__main__":
    unittest.main()
