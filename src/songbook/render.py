"""Renderers for :class:`~songbook.models.ParsedSong`.

- :func:`render_chord_line` — the chord row that sits above one lyric line
- :func:`render_text`       — whole song as fixed-width text, chords over lyrics
- :class:`ChordProFormatter` — whole song back to ChordPro (``.cho``) text

Section type → ChordPro directive mapping
-----------------------------------------

Every typed section is wrapped in ``{start_of_<type>}`` / ``{end_of_<type>}``
(``verse``, ``chorus``, ``bridge``, ``pre_chorus``, ``intro``, ``outro``,
``interlude``, ``tag``, ``ending``), with the label as directive value when
present.  OTHER sections are emitted without a wrapper.
"""

from .models import ParsedSong, SectionType, SongLine, SongSection


def render_chord_line(line: SongLine) -> str:
    """Return the chord row aligned character-for-character with *line.text*.

    Example::

        text   = "Amazing grace"
        result = "        C"

    Chords are written left to right; where two labels overlap, the later
    one wins.  Positions past the end of the text extend the row.  Trailing
    whitespace is trimmed.
    """
    row = [" "] * len(line.text)

    for pc in line.chords:
        for i, ch in enumerate(pc.chord.format()):
            pos = pc.position + i
            if pos >= len(row):
                row.extend(" " * (pos - len(row) + 1))
            row[pos] = ch

    return "".join(row).rstrip()


def render_text(song: ParsedSong, russian: bool = False) -> str:
    """Return *song* as plain fixed-width text.

    Lines with chords are preceded by their chord row.  Section headings use
    Russian names when *russian* is true.
    """
    parts: list[str] = []

    if song.title:
        parts.append(song.title)
    byline = " / ".join(v for v in (song.subtitle, song.artist, song.composer) if v)
    if byline:
        parts.append(byline)
    if song.key:
        parts.append(f"{'Тональность' if russian else 'Key'}: {song.key}")

    for section in song.sections:
        if parts:
            parts.append("")
        heading = section.heading(russian=russian)
        if heading:
            parts.append(heading)
        for line in section.lines:
            if line.has_chords:
                parts.append(render_chord_line(line))
            parts.append(line.text)

    return "\n".join(parts) + "\n"


class ChordProFormatter:
    """Render a :class:`~songbook.models.ParsedSong` to ChordPro text."""

    def render(self, song: ParsedSong) -> str:
        """Return ChordPro text for *song*.

        The returned string ends with a single newline and uses Unix line
        endings (``\\n``) throughout.
        """
        parts: list[str] = []

        # --- Metadata block ---
        for directive, value in (
            ("title", song.title),
            ("subtitle", song.subtitle),
            ("artist", song.artist),
            ("composer", song.composer),
            ("key", song.key),
            ("tempo", song.tempo),
            ("time", song.time_signature),
            ("capo", song.capo),
        ):
            if value is not None:
                parts.append(f"{{{directive}: {value}}}")

        # --- Section blocks ---
        for section in song.sections:
            if parts:
                parts.append("")  # blank line between blocks
            parts.extend(_render_section(section))

        return "\n".join(parts) + "\n"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _render_section(section: SongSection) -> list[str]:
    """Return a list of lines for one section (no trailing blank line)."""
    lines = [inline_chords(line) for line in section.lines]

    if section.section_type == SectionType.OTHER:
        return lines

    name = section.section_type.value
    if section.label:
        start_line = f"{{start_of_{name}: {section.label}}}"
    else:
        start_line = f"{{start_of_{name}}}"
    return [start_line, *lines, f"{{end_of_{name}}}"]


def inline_chords(line: SongLine) -> str:
    """Re-insert ``[Chord]`` markers into the lyric text of *line*.

    Example::

        text   = "Amazing grace"   (C at 8)
        result = "Amazing [C]grace"

    A chord positioned past the end of the text is padded out with spaces
    so that it keeps its column.
    """
    result = line.text
    inserted = 0  # total characters inserted so far (adjusts all future offsets)

    for pc in line.chords:
        bracket = f"[{pc.chord.format()}]"
        pos = pc.position + inserted
        if pos > len(result):
            result += " " * (pos - len(result))
        result = result[:pos] + bracket + result[pos:]
        inserted += len(bracket)

    return result
