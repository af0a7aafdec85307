from dataclasses import dataclass, field
from enum import Enum

from .chord import Chord


@dataclass(frozen=True)
class PositionedChord:
    """A chord anchored above a character of a lyric line.

    ``position`` counts characters (not bytes) from the start of the lyric
    text with all chord markers removed.
    """

    position: int
    chord: Chord


@dataclass(frozen=True)
class SongLine:
    """A lyric line with its chords lifted out.

    Example: "Amazing [C]grace" is stored as text "Amazing grace" with a
    ``C`` chord at position 8.

    ``text`` is the source line with chord markers removed and trailing
    whitespace trimmed, so "Amen [G]" becomes "Amen" while the ``G`` keeps
    position 5, past the end of the text.  Leading whitespace is kept.
    """

    text: str
    chords: tuple[PositionedChord, ...] = ()

    @property
    def has_chords(self) -> bool:
        return bool(self.chords)


class SectionType(Enum):
    VERSE = "verse"
    CHORUS = "chorus"
    BRIDGE = "bridge"
    PRE_CHORUS = "pre_chorus"
    INTRO = "intro"
    OUTRO = "outro"
    INTERLUDE = "interlude"
    TAG = "tag"
    ENDING = "ending"
    OTHER = "other"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def name_ru(self) -> str:
        return _NAMES_RU[self]


_DISPLAY_NAMES = {
    SectionType.VERSE: "Verse",
    SectionType.CHORUS: "Chorus",
    SectionType.BRIDGE: "Bridge",
    SectionType.PRE_CHORUS: "Pre-Chorus",
    SectionType.INTRO: "Intro",
    SectionType.OUTRO: "Outro",
    SectionType.INTERLUDE: "Interlude",
    SectionType.TAG: "Tag",
    SectionType.ENDING: "Ending",
    SectionType.OTHER: "",
}

_NAMES_RU = {
    SectionType.VERSE: "Куплет",
    SectionType.CHORUS: "Припев",
    SectionType.BRIDGE: "Бридж",
    SectionType.PRE_CHORUS: "Предприпев",
    SectionType.INTRO: "Вступление",
    SectionType.OUTRO: "Окончание",
    SectionType.INTERLUDE: "Проигрыш",
    SectionType.TAG: "Тег",
    SectionType.ENDING: "Кода",
    SectionType.OTHER: "",
}


@dataclass(frozen=True)
class SongSection:
    """A labelled block of a song (verse, chorus, bridge, etc.)."""

    section_type: SectionType
    label: str | None = None  # "1", "2" for verses, or free text
    lines: tuple[SongLine, ...] = ()

    def heading(self, russian: bool = False) -> str:
        """Human-readable heading such as "Verse 2" or "Припев".

        Returns an empty string for untyped, unlabelled sections.
        """
        name = self.section_type.name_ru if russian else self.section_type.display_name
        return " ".join(part for part in (name, self.label) if part)


@dataclass(frozen=True)
class ParsedSong:
    """A song document after parsing: header metadata plus sections."""

    title: str | None = None
    subtitle: str | None = None
    artist: str | None = None
    composer: str | None = None
    key: str | None = None
    tempo: int | None = None
    time_signature: str | None = None
    capo: int | None = None
    sections: tuple[SongSection, ...] = field(default_factory=tuple)

    @property
    def first_line(self) -> str:
        """Text of the first non-empty lyric line, or ``""``."""
        for section in self.sections:
            for line in section.lines:
                if line.text.strip():
                    return line.text.strip()
        return ""

    @property
    def has_chords(self) -> bool:
        return any(line.has_chords for section in self.sections for line in section.lines)

    def to_dict(self) -> dict:
        """Return a JSON-serialisable dict of the song."""
        return {
            "title": self.title,
            "subtitle": self.subtitle,
            "artist": self.artist,
            "composer": self.composer,
            "key": self.key,
            "tempo": self.tempo,
            "time_signature": self.time_signature,
            "capo": self.capo,
            "sections": [
                {
                    "section_type": section.section_type.value,
                    "label": section.label,
                    "lines": [
                        {
                            "text": line.text,
                            "chords": [
                                {
                                    "position": pc.position,
                                    "chord": {
                                        "root": pc.chord.root,
                                        "quality": pc.chord.quality,
                                        "bass": pc.chord.bass,
                                    },
                                }
                                for pc in line.chords
                            ],
                        }
                        for line in section.lines
                    ],
                }
                for section in self.sections
            ],
        }
