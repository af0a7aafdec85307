from songbook.chord import Chord
from songbook.models import ParsedSong, PositionedChord, SectionType, SongLine, SongSection
from songbook.parser import ChordProParser, parse_lyric_line
from songbook.render import ChordProFormatter, inline_chords, render_chord_line, render_text


def _line(text: str, *chords: tuple[int, str]) -> SongLine:
    return SongLine(
        text=text,
        chords=tuple(PositionedChord(pos, Chord.parse(name)) for pos, name in chords),
    )


def _song(*sections: SongSection, **kwargs) -> ParsedSong:
    defaults = dict(title="Amazing Grace", artist="John Newton")
    defaults.update(kwargs)
    return ParsedSong(sections=tuple(sections), **defaults)


# ---------------------------------------------------------------------------
# render_chord_line
# ---------------------------------------------------------------------------


def test_chord_line_single_chord_trimmed():
    assert render_chord_line(_line("Grace", (0, "C"))) == "C"


def test_chord_line_aligned_over_lyric():
    line = parse_lyric_line("Amazing [C]grace, how [G7]sweet")
    chord_row = render_chord_line(line)
    assert chord_row == "        C          G7"
    assert chord_row.index("G7") == line.text.index("sweet")


def test_chord_line_no_chords_is_empty():
    assert render_chord_line(_line("Just words")) == ""


def test_chord_line_extends_past_text():
    assert render_chord_line(_line("Hi", (1, "Dsus4"))) == " Dsus4"


def test_chord_line_position_far_past_text_is_padded():
    assert render_chord_line(_line("", (3, "G"))) == "   G"


def test_chord_line_overlap_later_wins():
    assert render_chord_line(_line("ab", (0, "Am"), (1, "G"))) == "AG"


def test_chord_line_non_ascii_alignment():
    line = parse_lyric_line("[Am]Слава [D7]Тебе, [G]Боже")
    chord_row = render_chord_line(line)
    assert chord_row.index("D7") == line.text.index("Тебе")
    assert chord_row.index("G") == line.text.index("Боже")
    assert len(chord_row) <= len(line.text)


# ---------------------------------------------------------------------------
# inline_chords
# ---------------------------------------------------------------------------


def test_inline_chords_reinserts_markers():
    assert inline_chords(_line("Amazing grace", (8, "C"))) == "Amazing [C]grace"


def test_inline_chords_multiple():
    line = parse_lyric_line("A[G]mazing [G7]grace, how [C]sweet")
    assert inline_chords(line) == "A[G]mazing [G7]grace, how [C]sweet"


def test_inline_chords_chord_only_line_keeps_columns():
    assert inline_chords(parse_lyric_line("[G] [C] [D]")) == "[G] [C] [D]"


def test_inline_chords_trailing_chord():
    assert inline_chords(parse_lyric_line("Amen [G]")) == "Amen [G]"


# ---------------------------------------------------------------------------
# render_text
# ---------------------------------------------------------------------------


def test_render_text_layout():
    song = _song(
        SongSection(SectionType.VERSE, "1", (_line("Amazing grace", (8, "C")), _line("No chords"))),
        key="G",
    )
    assert render_text(song) == (
        "Amazing Grace\n"
        "John Newton\n"
        "Key: G\n"
        "\n"
        "Verse 1\n"
        "        C\n"
        "Amazing grace\n"
        "No chords\n"
    )


def test_render_text_russian_headings():
    song = _song(SongSection(SectionType.CHORUS, None, (_line("Слава"),)), key="Am")
    out = render_text(song, russian=True)
    assert "Тональность: Am" in out
    assert "\nПрипев\n" in out


def test_render_text_other_section_has_no_heading():
    song = ParsedSong(sections=(SongSection(SectionType.OTHER, None, (_line("Words"),)),))
    assert render_text(song) == "Words\n"


# ---------------------------------------------------------------------------
# ChordProFormatter
# ---------------------------------------------------------------------------


def _render(song: ParsedSong) -> str:
    return ChordProFormatter().render(song)


def test_formatter_metadata():
    out = _render(_song(key="G", tempo=72, time_signature="3/4", capo=2))
    assert "{title: Amazing Grace}" in out
    assert "{artist: John Newton}" in out
    assert "{key: G}" in out
    assert "{tempo: 72}" in out
    assert "{time: 3/4}" in out
    assert "{capo: 2}" in out


def test_formatter_omits_missing_metadata():
    out = _render(_song())
    assert "{key:" not in out
    assert "{capo:" not in out
    assert "{subtitle:" not in out


def test_formatter_section_wrappers():
    out = _render(_song(
        SongSection(SectionType.VERSE, "1", (_line("Amazing grace", (8, "C")),)),
        SongSection(SectionType.CHORUS, None, (_line("Sing"),)),
    ))
    assert "{start_of_verse: 1}\nAmazing [C]grace\n{end_of_verse}" in out
    assert "{start_of_chorus}\nSing\n{end_of_chorus}" in out


def test_formatter_other_section_unwrapped():
    out = _render(ParsedSong(sections=(SongSection(SectionType.OTHER, None, (_line("Words"),)),)))
    assert out == "Words\n"


def test_formatter_ends_with_single_newline():
    out = _render(_song(SongSection(SectionType.VERSE, None, (_line("x"),))))
    assert out.endswith("\n")
    assert not out.endswith("\n\n")


def test_formatter_output_parses_back_to_same_song():
    text = (
        "{title: Amazing Grace}\n{key: G}\n\n"
        "{start_of_verse: 1}\nA[G]mazing [G7]grace\n{end_of_verse}\n\n"
        "{start_of_pre_chorus}\n[Am]Слава [D7]Тебе\n{end_of_pre_chorus}\n"
    )
    song = ChordProParser.parse(text)
    assert ChordProParser.parse(_render(song)) == song
