"""ChordPro song parser.

Turns a raw song document into a :class:`~songbook.models.ParsedSong`:

  1. classify_line()        — BLANK / COMMENT / DIRECTIVE / SECTION / LYRIC
  2. parse_directive()      — ``{name: value}`` → (name, value)
  3. parse_section_heading() — ``Verse 1``, ``[Припев]`` → (type, label)
  4. parse_lyric_line()     — ``Amazing [C]grace`` → SongLine
  5. ChordProParser.parse() — full pipeline: raw text → ParsedSong

Example document::

    {title: Amazing Grace}
    {key: G}

    {start_of_verse: 1}
    A[G]mazing [G7]grace, how [C]sweet the [G]sound
    {end_of_verse}

    Припев:
    [Am]Слава [D7]Тебе

The parser never raises.  Anything it cannot make sense of is kept as
lyric text: an unknown ``{directive}`` is dropped, a ``[bracket]`` that is
not a chord stays in the lyric verbatim.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum, auto

from .chord import Chord
from .models import ParsedSong, PositionedChord, SectionType, SongLine, SongSection

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Regexes
# ---------------------------------------------------------------------------

# {name} or {name: value}
DIRECTIVE_RE = re.compile(r"^\{\s*([A-Za-z][\w-]*)\s*(?::\s*(.*?))?\s*\}$")

# Any [token] group, used for inline chords
BRACKET_RE = re.compile(r"\[([^\[\]]*)\]")

# Whole line is a single [token]
BRACKETED_LINE_RE = re.compile(r"^\[([^\[\]]+)\]$")

# Bare heading: keyword, optional number, optional trailing colon or dot.
#   "Verse 1", "Chorus:", "Pre-Chorus", "Куплет 2."
BARE_HEADING_RE = re.compile(
    r"^(?P<keyword>pre[- ]?chorus|[^\W\d_]+)(?:\s+(?P<label>\d+))?\s*[:.]?$",
    re.IGNORECASE,
)

# Bracketed heading allows a free-text label: "[Chorus x2]", "[Verse 1]"
BRACKETED_HEADING_RE = re.compile(
    r"^(?P<keyword>pre[- ]?chorus|[^\W\d_]+)(?:\s+(?P<label>.+?))?\s*:?$",
    re.IGNORECASE,
)

# ChordPro 6 section attribute: {start_of_verse: label="Verse 1"}
_LABEL_ATTR_RE = re.compile(r'^label\s*=\s*"?(.*?)"?$')

_LEADING_INT_RE = re.compile(r"^\d+")

# ---------------------------------------------------------------------------
# Keyword tables
# ---------------------------------------------------------------------------

SECTION_KEYWORDS = {
    "verse": SectionType.VERSE,
    "куплет": SectionType.VERSE,
    "chorus": SectionType.CHORUS,
    "refrain": SectionType.CHORUS,
    "припев": SectionType.CHORUS,
    "bridge": SectionType.BRIDGE,
    "бридж": SectionType.BRIDGE,
    "pre-chorus": SectionType.PRE_CHORUS,
    "prechorus": SectionType.PRE_CHORUS,
    "pre chorus": SectionType.PRE_CHORUS,
    "предприпев": SectionType.PRE_CHORUS,
    "intro": SectionType.INTRO,
    "вступление": SectionType.INTRO,
    "outro": SectionType.OUTRO,
    "окончание": SectionType.OUTRO,
    "концовка": SectionType.OUTRO,
    "interlude": SectionType.INTERLUDE,
    "instrumental": SectionType.INTERLUDE,
    "проигрыш": SectionType.INTERLUDE,
    "tag": SectionType.TAG,
    "тег": SectionType.TAG,
    "ending": SectionType.ENDING,
    "coda": SectionType.ENDING,
    "кода": SectionType.ENDING,
}

# Suffix of {start_of_X} / {end_of_X}
_DIRECTIVE_SECTIONS = {
    "verse": SectionType.VERSE,
    "chorus": SectionType.CHORUS,
    "bridge": SectionType.BRIDGE,
    "pre_chorus": SectionType.PRE_CHORUS,
    "prechorus": SectionType.PRE_CHORUS,
    "intro": SectionType.INTRO,
    "outro": SectionType.OUTRO,
    "interlude": SectionType.INTERLUDE,
    "tag": SectionType.TAG,
    "ending": SectionType.ENDING,
}

_START_SHORTHANDS = {
    "sov": SectionType.VERSE,
    "soc": SectionType.CHORUS,
    "sob": SectionType.BRIDGE,
}

_END_SHORTHANDS = {"eov", "eoc", "eob"}

# Header directive (and aliases) -> ParsedSong field
_HEADER_FIELDS = {
    "title": "title",
    "t": "title",
    "subtitle": "subtitle",
    "st": "subtitle",
    "artist": "artist",
    "composer": "composer",
    "key": "key",
    "tempo": "tempo",
    "time": "time_signature",
    "capo": "capo",
}

_INT_FIELDS = {"tempo", "capo"}


# ---------------------------------------------------------------------------
# LineType
# ---------------------------------------------------------------------------


class LineType(Enum):
    BLANK = auto()  # empty or whitespace only
    COMMENT = auto()  # "# ..." source comment
    DIRECTIVE = auto()  # {title: ...}, {start_of_verse}, ...
    SECTION = auto()  # section heading: Verse 1, [Chorus], Припев:
    LYRIC = auto()  # everything else


# ---------------------------------------------------------------------------
# Line classification
# ---------------------------------------------------------------------------


def classify_line(line: str) -> LineType:
    """Classify a single line of a song document.

    Anything that is not recognisably something else is a LYRIC line.
    """
    stripped = line.strip()
    if not stripped:
        return LineType.BLANK
    if stripped.startswith("#"):
        return LineType.COMMENT
    if DIRECTIVE_RE.match(stripped):
        return LineType.DIRECTIVE
    if parse_section_heading(stripped) is not None:
        return LineType.SECTION
    return LineType.LYRIC


# ---------------------------------------------------------------------------
# Directive / heading extraction
# ---------------------------------------------------------------------------


def parse_directive(line: str) -> tuple[str, str | None] | None:
    """Return ``(name, value)`` for a ``{name: value}`` line.

    *name* is lower-cased; *value* is ``None`` for ``{name}`` and stripped
    otherwise.  Returns ``None`` if *line* is not a directive.
    """
    m = DIRECTIVE_RE.match(line.strip())
    if not m:
        return None
    name, value = m.group(1).lower(), m.group(2)
    if value is not None:
        value = value.strip()
    return name, value


def parse_section_heading(line: str) -> tuple[SectionType, str | None] | None:
    """Return ``(section_type, label)`` if *line* is a section heading.

    Handles ``Verse 1``, ``Chorus:``, ``Куплет 2``, ``[Bridge]`` and
    ``[Chorus x2]``.  Bare headings only take a numeric label, so a lyric
    that merely starts with "Chorus" is not mistaken for a heading.
    """
    stripped = line.strip()

    m = BRACKETED_LINE_RE.match(stripped)
    if m:
        heading = BRACKETED_HEADING_RE.match(m.group(1).strip())
    else:
        heading = BARE_HEADING_RE.match(stripped)
    if not heading:
        return None

    section_type = _section_keyword(heading.group("keyword"))
    if section_type is None:
        return None
    return section_type, heading.group("label") or None


def _section_keyword(word: str) -> SectionType | None:
    key = re.sub(r"\s+", " ", word.lower())
    return SECTION_KEYWORDS.get(key)


def _directive_section(name: str) -> tuple[str, SectionType | None] | None:
    """Map a section directive name to ``("start" | "end", type)``.

    Unknown ``start_of_*`` environments (``start_of_tab``, ``start_of_grid``)
    open an OTHER section.
    """
    if name in _START_SHORTHANDS:
        return "start", _START_SHORTHANDS[name]
    if name in _END_SHORTHANDS:
        return "end", None
    if name.startswith("start_of_"):
        return "start", _DIRECTIVE_SECTIONS.get(name[len("start_of_"):], SectionType.OTHER)
    if name.startswith("end_of_"):
        return "end", None
    return None


def _section_label(value: str | None) -> str | None:
    if not value:
        return None
    m = _LABEL_ATTR_RE.match(value)
    if m:
        value = m.group(1).strip()
    return value or None


def _leading_int(value: str) -> int | None:
    m = _LEADING_INT_RE.match(value.strip())
    return int(m.group()) if m else None


# ---------------------------------------------------------------------------
# Inline chords
# ---------------------------------------------------------------------------


def parse_lyric_line(line: str) -> SongLine:
    """Lift inline ``[Chord]`` markers out of a lyric line.

    Each chord's position is the character offset it sits at in the text
    *after* all markers have been removed, so ``"Amazing [C]grace"`` gives
    text ``"Amazing grace"`` with ``C`` at position 8.  Brackets whose
    content is not a chord are left in the text.  Trailing whitespace is
    trimmed from the text; chord positions are unaffected.

    Example::

        >>> parse_lyric_line("[G]Слава [D7]Тебе").chords[1].position
        6
    """
    parts: list[str] = []
    chords: list[PositionedChord] = []
    length = 0  # characters emitted so far
    last = 0

    for m in BRACKET_RE.finditer(line):
        literal = line[last:m.start()]
        parts.append(literal)
        length += len(literal)

        chord = Chord.parse(m.group(1))
        if chord is None:
            logger.debug("Keeping non-chord bracket %r as text", m.group())
            parts.append(m.group())
            length += len(m.group())
        else:
            chords.append(PositionedChord(position=length, chord=chord))
        last = m.end()

    parts.append(line[last:])
    return SongLine(text="".join(parts).rstrip(), chords=tuple(chords))


# ---------------------------------------------------------------------------
# Full parser
# ---------------------------------------------------------------------------


@dataclass
class _OpenSection:
    section_type: SectionType
    label: str | None
    lines: list[SongLine] = field(default_factory=list)

    def freeze(self) -> SongSection:
        return SongSection(
            section_type=self.section_type, label=self.label, lines=tuple(self.lines)
        )


class ChordProParser:
    """Parse ChordPro text into a :class:`~songbook.models.ParsedSong`.

    Usage::

        from songbook.parser import ChordProParser
        song = ChordProParser.parse(Path("amazing-grace.cho").read_text())
    """

    @classmethod
    def parse(cls, content: str) -> ParsedSong:
        """Parse *content*; always returns a ParsedSong.

        Algorithm
        ---------
        1. Split *content* into lines and classify each one.
        2. DIRECTIVE lines fill header fields, or open/close sections.
        3. SECTION lines close the open section and open a new one.
        4. LYRIC lines are split into text + positioned chords and appended
           to the open section, opening an OTHER section if none is open.
        5. BLANK and COMMENT lines are skipped.
        6. End of input closes the open section.  Sections with no lines are
           dropped.
        """
        header: dict[str, object] = {}
        sections: list[SongSection] = []
        current: _OpenSection | None = None

        def close() -> None:
            nonlocal current
            if current is not None and current.lines:
                sections.append(current.freeze())
            current = None

        for raw in content.splitlines():
            lt = classify_line(raw)

            if lt in (LineType.BLANK, LineType.COMMENT):
                continue

            if lt == LineType.DIRECTIVE:
                name, value = parse_directive(raw)
                section = _directive_section(name)
                if section is not None:
                    action, section_type = section
                    close()
                    if action == "start":
                        current = _OpenSection(section_type, _section_label(value))
                        logger.debug("Opened %s section (label=%r)", section_type.value, current.label)
                    continue
                cls._apply_header(header, name, value)
                continue

            if lt == LineType.SECTION:
                section_type, label = parse_section_heading(raw)
                close()
                current = _OpenSection(section_type, label)
                logger.debug("Opened %s section (label=%r)", section_type.value, label)
                continue

            # LineType.LYRIC
            if current is None:
                current = _OpenSection(SectionType.OTHER, None)
            current.lines.append(parse_lyric_line(raw))

        close()
        return ParsedSong(sections=tuple(sections), **header)

    @staticmethod
    def _apply_header(header: dict[str, object], name: str, value: str | None) -> None:
        attr = _HEADER_FIELDS.get(name)
        if attr is None:
            logger.debug("Ignoring directive {%s}", name)
            return
        if not value or attr in header:
            return
        if attr in _INT_FIELDS:
            number = _leading_int(value)
            if number is None:
                logger.debug("Ignoring non-numeric {%s: %s}", name, value)
                return
            header[attr] = number
        else:
            header[attr] = value


def parse_song(content: str) -> ParsedSong:
    """Shorthand for :meth:`ChordProParser.parse`."""
    return ChordProParser.parse(content)
