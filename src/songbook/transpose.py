"""Whole-song transposition.

``transpose_song`` never modifies its input; it returns a new ParsedSong
with every chord shifted and every position and section left as it was.
Always transpose from the original parse rather than chaining calls on an
already-transposed song, or spellings drift.
"""

import logging
from dataclasses import replace

from .chord import Chord
from .models import ParsedSong, PositionedChord, SongLine, SongSection
from .pitch import Pitch

logger = logging.getLogger(__name__)

# Pitch classes whose key signatures are written with flats.
_FLAT_MAJOR_KEYS = frozenset({
    Pitch.F, Pitch.A_SHARP, Pitch.D_SHARP, Pitch.G_SHARP, Pitch.C_SHARP,
})
_FLAT_MINOR_KEYS = frozenset({
    Pitch.D, Pitch.G, Pitch.C, Pitch.F, Pitch.A_SHARP, Pitch.D_SHARP,
})


def normalize_semitones(semitones: int) -> int:
    """Fold any offset into 0..11 (``-1`` → ``11``, ``13`` → ``1``)."""
    return semitones % 12


def key_prefers_flats(key: str | None, semitones: int = 0) -> bool:
    """Decide flat vs sharp spelling for a song in *key* shifted by *semitones*.

    The decision is made on the target key: F major, B♭, E♭, A♭, D♭ and the
    minor keys D, G, C, F, B♭, E♭ use flats.  F♯/G♭ major is written with
    sharps unless the song is left in a key declared as ``Gb``: a key
    spelled with a flat keeps flats only when shifted by whole octaves.
    Unknown or missing keys use sharps.
    """
    if not key:
        return False
    tonic = Chord.parse(key)
    if tonic is None:
        return False
    parsed = Pitch.parse(tonic.root)
    if parsed is None:
        return False
    pitch, was_flat = parsed
    if normalize_semitones(semitones) == 0 and was_flat:
        return True
    target = pitch.transpose(semitones)
    flat_keys = _FLAT_MINOR_KEYS if tonic.is_minor else _FLAT_MAJOR_KEYS
    return target in flat_keys


def transpose_line(line: SongLine, semitones: int, use_flats: bool) -> SongLine:
    return SongLine(
        text=line.text,
        chords=tuple(
            PositionedChord(position=pc.position, chord=pc.chord.transpose(semitones, use_flats))
            for pc in line.chords
        ),
    )


def transpose_song(
    song: ParsedSong,
    semitones: int,
    use_flats: bool | None = None,
    transpose_key: bool = False,
) -> ParsedSong:
    """Return a copy of *song* with every chord moved by *semitones*.

    Args:
        song:          The song as parsed from its original content.
        semitones:     Shift, positive or negative.
        use_flats:     Spelling for the new chords.  ``None`` derives it once
                       from the song's declared key (see
                       :func:`key_prefers_flats`).
        transpose_key: Also rewrite the ``key`` header.  Off by default, so
                       the declared key still names the original key.
    """
    if use_flats is None:
        use_flats = key_prefers_flats(song.key, semitones)
    logger.debug("Transposing %r by %d (flats=%s)", song.title, semitones, use_flats)

    sections = tuple(
        SongSection(
            section_type=section.section_type,
            label=section.label,
            lines=tuple(transpose_line(line, semitones, use_flats) for line in section.lines),
        )
        for section in song.sections
    )

    key = song.key
    if transpose_key and key:
        chord = Chord.parse(key)
        if chord is not None:
            key = chord.transpose(semitones, use_flats).format()

    return replace(song, sections=sections, key=key)
