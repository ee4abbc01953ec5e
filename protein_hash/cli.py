"""
Command-line interface for the Protein Hash engine.

Provides commands for fingerprinting source files, comparing them and
grouping them by structural similarity.
"""

import sys
from pathlib import Path

import click

from protein_hash import __version__
from protein_hash.analysis import FrontendRegistry
from protein_hash.core.config import Config
from protein_hash.core.exceptions import ProteinHashError
from protein_hash.utils.logging_config import setup_logging


def _fail(ctx, error: Exception) -> None:
    click.echo(f"Error: {error}", err=True)
    if ctx.obj.get("verbose"):
        import traceback
        traceback.print_exc()
    sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output"
)
@click.option(
    "--log-file",
    type=click.Path(),
    help="Path to log file"
)
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="JSON configuration file"
)
@click.pass_context
def cli(ctx, verbose, log_file, config_path):
    """
    Protein Hash

    Structural fingerprints of source code that ignore naming and
    syntax style but follow the logic.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose

    log_level = "DEBUG" if verbose else "WARNING"
    setup_logging(level=log_level, log_file=Path(log_file) if log_file else None)

    try:
        if config_path:
            Config.load_from_file(config_path)
        Config.load_from_env()
    except (ValueError, TypeError) as e:
        _fail(ctx, e)


def _language_option(func):
    return click.option(
        "--language", "-l",
        type=str,
        default=None,
        help="Source language (detected from the file extension by default)"
    )(func)


def _format_option(func):
    return click.option(
        "--format", "-f", "output_format",
        type=click.Choice(["text", "json"]),
        default="text",
        help="Output format"
    )(func)


@cli.command(name="hash")
@click.argument("files", nargs=-1, required=True, type=click.Path())
@_language_option
@_format_option
@click.option(
    "--output", "-o",
    type=click.Path(),
    help="Write the results to this file"
)
@click.pass_context
def hash_command(ctx, files, language, output_format, output):
    """
    Fingerprint one or more source files.

    Examples:

        phash hash src/add.js

        phash hash a.py b.py -f json -o hashes.json
    """
    from protein_hash.engine import ProteinHasher
    from protein_hash.reporting.formatter import format_results

    try:
        hasher = ProteinHasher()
        results = [(path, hasher.hash_file(path, language)) for path in files]
        formatted = format_results(
            results, output_format, Path(output) if output else None
        )
    except ProteinHashError as e:
        _fail(ctx, e)
        return

    if output:
        click.echo(f"Results saved to: {output}")
    else:
        click.echo(formatted)


@cli.command()
@click.argument("first", type=click.Path())
@click.argument("second", type=click.Path())
@_language_option
@_format_option
@click.pass_context
def compare(ctx, first, second, language, output_format):
    """
    Compare two source files structurally.

    Examples:

        phash compare add_v1.js add_v2.js
    """
    from protein_hash.engine import ProteinHasher
    from protein_hash.reporting.formatter import get_formatter

    try:
        hasher = ProteinHasher()
        comparison = hasher.compare(
            hasher.hash_file(first, language),
            hasher.hash_file(second, language),
        )
    except ProteinHashError as e:
        _fail(ctx, e)
        return

    click.echo(get_formatter(output_format).format_comparison(first, second, comparison))


@cli.command()
@click.argument("files", nargs=-1, required=True, type=click.Path())
@click.option(
    "--threshold", "-t",
    type=float,
    default=None,
    help="Minimum similarity for two files to share a group (0-1)"
)
@_language_option
@_format_option
@click.pass_context
def group(ctx, files, threshold, language, output_format):
    """
    Group source files by structural similarity.

    Grouping is greedy and follows the order the files are given in.
    """
    from protein_hash.engine import ProteinHasher
    from protein_hash.reporting.formatter import get_formatter

    try:
        hasher = ProteinHasher()
        labeled = [(path, hasher.hash_file(path, language)) for path in files]
        groups = hasher.group(labeled, threshold, key=lambda pair: pair[1])
    except ProteinHashError as e:
        _fail(ctx, e)
        return

    names = [[path for path, _ in members] for members in groups]
    click.echo(get_formatter(output_format).format_groups(names))


@cli.command()
@click.option(
    "--output", "-o",
    type=click.Path(),
    default="config.json",
    help="Output path for configuration file"
)
def init(output):
    """
    Initialize configuration file.

    Creates a default configuration file that can be customized.
    """
    Config.save_to_file(output)
    click.echo(f"Configuration saved to: {output}")


@cli.command()
def list_languages():
    """List supported programming languages."""
    click.echo("Supported Languages:")
    click.echo("-" * 40)
    for lang in sorted(FrontendRegistry.list_languages()):
        extensions = FrontendRegistry.extensions_for_language(lang)
        click.echo(f"  {lang}: {', '.join(extensions)}")


def main():
    """Entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
