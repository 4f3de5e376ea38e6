"""Arc Toolkit CLI."""

import sys
from pathlib import Path
from typing import Tuple

import click

from . import __version__
from .arc import SECTION_NAMES, ArchiveError, NotArchiveFormat


@click.group()
@click.version_option(version=__version__)
def main():
    """Arc Toolkit - Inspect the index of data.arc game archives.

    Reads the archive header and the node section, then splits the node
    section into its lookup tables:

    \b
    info:     header offsets and node section counts
    sections: offset, size and entry count of every table
    dump:     decoded entries of the tables
    """
    pass


def load_archive(archive: Path, headers_only: bool = False):
    """Parse an archive, exiting with an error message on failure."""
    from .arc import parse_file, read_headers_file

    try:
        if headers_only:
            return read_headers_file(archive)
        return parse_file(archive)
    except NotArchiveFormat:
        click.echo(f"Error: {archive} is not a data.arc file", err=True)
        sys.exit(1)
    except (ArchiveError, OSError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@main.command()
@click.argument("archive", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def info(archive: Path):
    """Show the archive header and node section counts."""
    click.echo(f"Opening: {archive}")
    parsed = load_archive(archive, headers_only=True)

    click.echo()
    click.echo("Archive header:")
    for name, value in parsed.header.to_dict().items():
        click.echo(f"  {name:<28} 0x{value:x}")

    click.echo()
    click.echo(f"Node section compressed: {'yes' if parsed.is_compressed else 'no'}")
    if parsed.is_compressed:
        probe = parsed.probe
        click.echo(f"  {'decomp_size':<28} 0x{probe.decomp_size:x}")
        click.echo(f"  {'comp_size':<28} 0x{probe.comp_size:x}")
        return

    click.echo()
    click.echo("Node header:")
    for name, value in parsed.node_header.to_dict().items():
        click.echo(f"  {name:<28} {value}")


@main.command()
@click.argument("archive", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def sections(archive: Path):
    """List the node section tables in file order."""
    parsed = load_archive(archive)

    click.echo(f"{'section':<28} {'offset':>10} {'length':>10} {'entries':>8}")
    for section in parsed.layout:
        click.echo(
            f"{section.name:<28} 0x{section.offset:08x} 0x{section.length:08x} {section.count:>8}"
        )
    click.echo()
    click.echo(f"Total: 0x{parsed.layout.consumed:x} bytes in {len(parsed.layout)} sections")


@main.command()
@click.argument("archive", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "-s",
    "--section",
    "section_names",
    multiple=True,
    type=click.Choice(SECTION_NAMES),
    help="Section to dump (repeatable, default: all)",
)
@click.option(
    "-n",
    "--limit",
    type=click.IntRange(min=0),
    default=1,
    show_default=True,
    help="Entries to decode per section",
)
@click.option(
    "--all",
    "dump_all",
    is_flag=True,
    help="Decode every entry (overrides --limit)",
)
def dump(archive: Path, section_names: Tuple[str, ...], limit: int, dump_all: bool):
    """Decode entries of the node section tables.

    By default prints the first entry of every table.
    """
    parsed = load_archive(archive)
    max_entries = None if dump_all else limit

    for section in parsed.layout:
        if section_names and section.name not in section_names:
            continue
        click.echo(f"{section.name} ({section.count} entries):")
        if section.count == 0:
            click.echo("  <empty>")
            continue
        for i, entry in enumerate(section.entries(max_entries)):
            click.echo(f"  [{i}] {entry!r}")


if __name__ == "__main__":
    main()
