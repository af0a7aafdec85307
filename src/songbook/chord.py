"""Chord symbols: a root, an opaque quality suffix, and an optional bass.

Examples::

    >>> Chord.parse("Am7")
    Chord(root='A', quality='m7', bass=None)
    >>> Chord.parse("G/B").format()
    'G/B'
    >>> Chord.parse("C").transpose(1, use_flats=True).format()
    'Db'
"""

from dataclasses import dataclass

from .exceptions import InvalidChordText
from .pitch import Pitch


@dataclass(frozen=True)
class Chord:
    root: str  # as written: "C", "F#", "Bb", "H"
    quality: str = ""  # "m", "7", "maj7", "sus4", ... never interpreted
    bass: str | None = None  # slash-chord bass, e.g. "B" in "G/B"

    @classmethod
    def parse(cls, text: str) -> "Chord | None":
        """Parse a chord symbol, returning ``None`` if it has no valid root.

        Only the text after the *last* ``/`` is considered as a bass note,
        and only if it is itself a valid pitch; otherwise the slash stays in
        the quality (``"C6/9"`` has quality ``"6/9"``).
        """
        text = text.strip()
        if not text:
            return None

        main, bass = text, None
        idx = text.rfind("/")
        if idx != -1:
            bass_part = text[idx + 1:]
            if Pitch.parse(bass_part) is not None:
                main, bass = text[:idx], bass_part

        if not main:
            return None

        root_end = 2 if len(main) >= 2 and main[1] in "#b" else 1
        root = main[:root_end]
        if Pitch.parse(root) is None:
            return None

        return cls(root=root, quality=main[root_end:], bass=bass)

    @classmethod
    def from_text(cls, text: str) -> "Chord":
        """Like :meth:`parse` but raise :class:`InvalidChordText` on failure."""
        chord = cls.parse(text)
        if chord is None:
            raise InvalidChordText(text)
        return chord

    def transpose(self, semitones: int, use_flats: bool = False) -> "Chord":
        """Return a new chord shifted by *semitones*.

        Root and bass are respelled from the sharp or flat table according
        to *use_flats*; the quality is copied unchanged.
        """
        return Chord(
            root=_transpose_note(self.root, semitones, use_flats),
            quality=self.quality,
            bass=_transpose_note(self.bass, semitones, use_flats) if self.bass else None,
        )

    @property
    def root_pitch(self) -> Pitch:
        return Pitch.from_text(self.root)

    @property
    def is_minor(self) -> bool:
        return self.quality.startswith("m") and not self.quality.startswith("maj")

    def format(self) -> str:
        if self.bass:
            return f"{self.root}{self.quality}/{self.bass}"
        return f"{self.root}{self.quality}"

    def __str__(self) -> str:
        return self.format()


def _transpose_note(note: str, semitones: int, use_flats: bool) -> str:
    parsed = Pitch.parse(note)
    if parsed is None:
        return note
    return parsed[0].transpose(semitones).spell(use_flats)
