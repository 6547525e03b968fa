#!/usr/bin/env python3
"""recordmap - Entry point."""
import logging
import sys

import click
from colorama import Fore, Style, init

from config import app_config
from recordmap import __version__
from recordmap.cli.commands import MappingCLI

# Initialize colorama
init(autoreset=True)


def print_banner():
    """Print application banner."""
    click.echo(f"{Fore.CYAN}{'=' * 44}")
    click.echo(f"{Fore.CYAN}║   {Fore.WHITE}recordmap{Fore.CYAN}                            ║")
    click.echo(f"{Fore.CYAN}║   {Fore.WHITE}Source record → entity field mapper{Fore.CYAN}  ║")
    click.echo(f"{Fore.CYAN}{'=' * 44}{Style.RESET_ALL}")


@click.group()
@click.version_option(version=__version__)
@click.option("--log-level", default=None, help="Logging level (default: RECORDMAP_LOG_LEVEL or WARNING)")
def cli(log_level):
    """recordmap - Map loosely structured records onto entity schemas."""
    logging.basicConfig(
        level=(log_level or app_config.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument("source_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--limit", type=int, default=None, help="Only profile the first N records")
def profile(source_file, limit):
    """Profile the fields of a source file."""
    MappingCLI().profile(source_file, limit)


@cli.command()
@click.argument("source_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("entity")
@click.option(
    "--min-confidence",
    type=click.Choice(["low", "medium", "high"]),
    default=None,
    help="Drop suggestions below this confidence",
)
@click.option("--threshold", type=click.FloatRange(0, 1), default=None, help="Confidence threshold (0-1)")
@click.option("--no-fuzzy", is_flag=True, help="Disable fuzzy name matching")
@click.option("--exclude", multiple=True, help="Source field to ignore (repeatable)")
@click.option("--no-custom-fields", is_flag=True, help="Do not fall back to customFields.<name>")
@click.option("--output", type=click.Path(dir_okay=False), default=None, help="Save mappings to this JSON file")
def suggest(source_file, entity, min_confidence, threshold, no_fuzzy, exclude, no_custom_fields, output):
    """Suggest mappings from SOURCE_FILE onto ENTITY."""
    print_banner()
    MappingCLI().suggest(
        source_file,
        entity,
        min_confidence=min_confidence,
        threshold=threshold,
        fuzzy=not no_fuzzy,
        exclude=exclude,
        include_custom_fields=not no_custom_fields,
        output=output,
    )


@cli.command()
@click.argument("source_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("mappings_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--lookup", "lookups", multiple=True, help="Lookup table as NAME=PATH[:KEY] (repeatable)")
@click.option("--output", type=click.Path(dir_okay=False), default=None, help="Results JSON file")
def apply(source_file, mappings_file, lookups, output):
    """Apply MAPPINGS_FILE to every record of SOURCE_FILE."""
    print_banner()
    failed = MappingCLI().apply(source_file, mappings_file, lookups, output)
    if failed:
        sys.exit(1)


@cli.command()
@click.argument("mappings_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("entity")
def validate(mappings_file, entity):
    """Validate MAPPINGS_FILE against ENTITY's schema."""
    if not MappingCLI().validate(mappings_file, entity):
        sys.exit(1)


@cli.command()
def entities():
    """List the known target entities."""
    MappingCLI().entities()


if __name__ == "__main__":
    cli()
