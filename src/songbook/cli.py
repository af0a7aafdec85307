import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

import click

from .client import SongApiClient
from .config import Settings
from .exceptions import ConfigError, FetchError
from .parser import ChordProParser
from .render import ChordProFormatter, render_text
from .transpose import transpose_song

@click.command()
@click.argument("source", type=click.File("r", encoding="utf-8"), required=False)
@click.option("--song-id", default=None, metavar="ID",
              help="Fetch the song from the API instead of reading SOURCE.")
@click.option("-t", "--transpose", "semitones", default=0, show_default=True,
              help="Shift every chord by N semitones (may be negative).")
@click.option("--flats", is_flag=True, default=False,
              help="Spell transposed chords with flats (Bb, Eb, ...).")
@click.option("--sharps", is_flag=True, default=False,
              help="Spell transposed chords with sharps (A#, D#, ...).")
@click.option("--server-transpose", is_flag=True, default=False,
              help="With --song-id, let the song API transpose the song.")
@click.option("--transpose-key", is_flag=True, default=False,
              help="Also rewrite the declared {key:} when transposing.")
@click.option("--format", "output_format", type=click.Choice(["text", "chordpro", "json"]),
              default="text", show_default=True, help="Output format.")
@click.option("--russian", is_flag=True, default=False,
              help="Russian section headings in text output.")
@click.option("-o", "--output", "output_path", default=None, metavar="PATH",
              help="Write to PATH instead of stdout.")
@click.option("--config", "config_path", type=click.Path(path_type=Path), default=None,
              help="Config file (default: ~/.config/songbook/config.toml).")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Debug logging to stderr.")
def main(
    source,
    song_id: str | None,
    semitones: int,
    flats: bool,
    sharps: bool,
    server_transpose: bool,
    transpose_key: bool,
    output_format: str,
    russian: bool,
    output_path: str | None,
    config_path: Path | None,
    verbose: bool,
) -> None:
    """Render a ChordPro song, optionally transposed.

    \b
    SOURCE is a .cho file, or - for stdin.  With --song-id the song is
    fetched from the song API instead.
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if flats and sharps:
        raise click.UsageError("--flats and --sharps are mutually exclusive")
    if server_transpose and song_id is None:
        raise click.UsageError("--server-transpose needs --song-id")

    try:
        settings = Settings.load(config_path)
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    # --- Read ---
    record_title = None
    remote = server_transpose and semitones != 0
    if song_id is not None:
        try:
            with SongApiClient(settings) as client:
                if remote:
                    record = client.get_transposed_song(song_id, semitones)
                else:
                    record = client.get_song(song_id)
        except FetchError as exc:
            msg = f"Error: Could not fetch {exc.url}"
            if exc.status_code:
                msg += f" (HTTP {exc.status_code})"
            click.echo(msg, err=True)
            sys.exit(1)
        content = record.get("content")
        if not content:
            click.echo(f"Error: song {song_id} has no content", err=True)
            sys.exit(1)
        record_title = record.get("title")
    elif source is not None:
        content = source.read()
    else:
        click.echo("Error: give a SOURCE file or --song-id", err=True)
        sys.exit(2)

    # --- Parse + transpose ---
    song = ChordProParser.parse(content)
    if song.title is None and record_title:
        song = replace(song, title=record_title)

    if semitones and not remote:
        if flats:
            use_flats = True
        elif sharps:
            use_flats = False
        else:
            use_flats = settings.prefer_flats
        song = transpose_song(song, semitones, use_flats=use_flats, transpose_key=transpose_key)

    # --- Render ---
    if output_format == "json":
        text = json.dumps(song.to_dict(), ensure_ascii=False, indent=2) + "\n"
    elif output_format == "chordpro":
        text = ChordProFormatter().render(song)
    else:
        text = render_text(song, russian=russian)

    # --- Output ---
    if output_path is None:
        click.echo(text, nl=False)
        return

    dest = Path(output_path)
    dest.write_text(text, encoding="utf-8")
    click.echo(f"Written to {dest}")
