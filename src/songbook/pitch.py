"""The twelve pitch classes and their textual spellings.

A :class:`Pitch` carries no accidental of its own; whether it prints as
``C#`` or ``Db`` is decided by the caller at formatting time.
"""

from enum import Enum

from .exceptions import InvalidPitchText

_SHARP_NAMES = ("C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B")
_FLAT_NAMES = ("C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B")

# (letter, accidental) -> semitone.  Includes the theory edge cases
# Cb, E#, Fb, B# and German H.
_LOOKUP = {
    ("C", ""): 0, ("C", "#"): 1, ("C", "b"): 11,
    ("D", ""): 2, ("D", "#"): 3, ("D", "b"): 1,
    ("E", ""): 4, ("E", "#"): 5, ("E", "b"): 3,
    ("F", ""): 5, ("F", "#"): 6, ("F", "b"): 4,
    ("G", ""): 7, ("G", "#"): 8, ("G", "b"): 6,
    ("A", ""): 9, ("A", "#"): 10, ("A", "b"): 8,
    ("B", ""): 11, ("B", "#"): 0, ("B", "b"): 10,
}


class Pitch(Enum):
    C = 0
    C_SHARP = 1
    D = 2
    D_SHARP = 3
    E = 4
    F = 5
    F_SHARP = 6
    G = 7
    G_SHARP = 8
    A = 9
    A_SHARP = 10
    B = 11

    @classmethod
    def parse(cls, text: str) -> tuple["Pitch", bool] | None:
        """Parse a note name such as ``C``, ``F#``, ``Bb`` or ``H``.

        Returns ``(pitch, was_flat_spelling)`` or ``None`` when *text* does
        not start with a note letter.  Only the first two characters are
        examined; anything after them is ignored.
        """
        text = text.strip()
        if not text:
            return None

        letter = text[0].upper()
        accidental = text[1] if len(text) > 1 else ""

        if letter == "H":
            return cls.B, False

        if accidental not in ("#", "b"):
            accidental = ""
        semitone = _LOOKUP.get((letter, accidental))
        if semitone is None:
            return None
        return cls(semitone), accidental == "b"

    @classmethod
    def from_text(cls, text: str) -> "Pitch":
        """Like :meth:`parse` but raise :class:`InvalidPitchText` on failure."""
        parsed = cls.parse(text)
        if parsed is None:
            raise InvalidPitchText(text)
        return parsed[0]

    @classmethod
    def from_semitone(cls, semitone: int) -> "Pitch":
        return cls(semitone % 12)

    def to_semitone(self) -> int:
        return self.value

    def transpose(self, semitones: int) -> "Pitch":
        # Python's % is floored, so negative shifts wrap into 0..11.
        return Pitch((self.value + semitones) % 12)

    def to_sharp_spelling(self) -> str:
        return _SHARP_NAMES[self.value]

    def to_flat_spelling(self) -> str:
        return _FLAT_NAMES[self.value]

    def spell(self, use_flats: bool) -> str:
        return self.to_flat_spelling() if use_flats else self.to_sharp_spelling()

    def __str__(self) -> str:
        return self.to_sharp_spelling()
