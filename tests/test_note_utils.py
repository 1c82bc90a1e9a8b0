import unittest

from triad_atlas.note_types import Note
from triad_atlas.note_utils import (
    add_semitones,
    convert_note_notation,
    make_note,
    normalize_note_name,
    note_frequency,
    note_from_name,
    to_note,
)
from triad_atlas.validation import is_valid_note_name


class TestNoteNames(unittest.TestCase):
    def test_accepted_spellings(self):
        for name in ["C", "C#", "Db", "D", "D#", "Eb", "E", "F", "F#", "Gb", "G", "G#", "Ab", "A", "A#", "Bb", "B"]:
            self.assertTrue(is_valid_note_name(name), name)

    def test_rejected_spellings(self):
        for name in ["H", "c", "Cb", "E#", "Fb", "B#", "C##", "", None, 0]:
            self.assertFalse(is_valid_note_name(name), repr(name))

    def test_normalize_flats_to_sharps(self):
        self.assertEqual(normalize_note_name("Db"), "C#")
        self.assertEqual(normalize_note_name("Bb"), "A#")
        self.assertEqual(normalize_note_name("F#"), "F#")
        self.assertEqual(normalize_note_name("G"), "G")

    def test_normalize_is_idempotent(self):
        for name in ["Eb", "Gb", "A", "C#"]:
            once = normalize_note_name(name)
            self.assertEqual(normalize_note_name(once), once)

    def test_normalize_invalid_logs_error(self):
        with self.assertLogs("triad_atlas.validation", level="ERROR") as cm:
            self.assertIsNone(normalize_note_name("H"))
        self.assertIn("normalize_note_name", cm.output[0])


class TestNotes(unittest.TestCase):
    def test_a4_frequency(self):
        self.assertEqual(note_frequency("A", 4), 440.0)
        self.assertEqual(note_from_name("A4").frequency, 440.0)

    def test_middle_c_frequency(self):
        self.assertAlmostEqual(note_from_name("C4").frequency, 261.63, places=2)

    def test_note_without_octave(self):
        note = note_from_name("Eb")
        self.assertEqual(note, Note("D#"))
        self.assertIsNone(note.frequency)
        self.assertEqual(note.pitch_class, 3)

    def test_explicit_octave_wins(self):
        note = note_from_name("A4", octave=2)
        self.assertEqual(note.octave, 2)
        self.assertEqual(note.frequency, 110.0)

    def test_invalid_input(self):
        with self.assertLogs("triad_atlas.validation", level="ERROR"):
            self.assertIsNone(note_from_name("c4"))
        with self.assertLogs("triad_atlas.validation", level="ERROR"):
            self.assertIsNone(note_from_name("A", octave=10))
        with self.assertLogs("triad_atlas.validation", level="ERROR"):
            self.assertIsNone(to_note(3.5, "test"))

    def test_str(self):
        self.assertEqual(str(make_note(1, 4)), "C#4")
        self.assertEqual(str(make_note(11)), "B")

    def test_add_semitones_carries_octave(self):
        self.assertEqual(add_semitones(note_from_name("B3"), 1), note_from_name("C4"))
        self.assertEqual(add_semitones(note_from_name("C4"), -1), note_from_name("B3"))
        self.assertEqual(add_semitones(note_from_name("E2"), 24), note_from_name("E4"))

    def test_add_semitones_without_octave(self):
        self.assertEqual(add_semitones(Note("A"), 4), Note("C#"))


class TestNotationConversion(unittest.TestCase):
    def test_convert_to_flats(self):
        self.assertEqual(convert_note_notation("F#2", to_flats=True), "Gb2")
        self.assertEqual(convert_note_notation("C#", to_flats=True), "Db")

    def test_convert_to_sharps(self):
        self.assertEqual(convert_note_notation("Gb2"), "F#2")
        self.assertEqual(convert_note_notation("Bb"), "A#")

    def test_no_conversion_needed(self):
        self.assertEqual(convert_note_notation("E4", to_flats=True), "E4")
        self.assertEqual(convert_note_notation("not a note"), "not a note")
        self.assertEqual(convert_note_notation(""), "")


if __name__ == "__main__":
    unittest.main()
