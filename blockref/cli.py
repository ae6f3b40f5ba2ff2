"""CLI entrypoint for blockref."""

import logging
import sys
from pathlib import Path

import click

from . import __version__
from .errors import BlockrefError


def _setup_logging(verbose: bool) -> None:
    from rich.logging import RichHandler

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )


def _registry(ctx: click.Context):
    """Build the template info registry from config on first use."""
    if "registry" not in ctx.obj:
        from .config import build_registry

        try:
            ctx.obj["registry"] = build_registry(ctx.obj["config"])
        except BlockrefError as e:
            raise click.ClickException(str(e)) from e
    return ctx.obj["registry"]


def _run(fn, *args, **kwargs) -> None:
    """Run a command implementation, turning contract errors into CLI errors."""
    try:
        exit_code = fn(*args, **kwargs)
    except BlockrefError as e:
        raise click.ClickException(str(e)) from e
    except ValueError as e:
        raise click.ClickException(f"Invalid input: {e}") from e
    sys.exit(exit_code)


@click.group()
@click.version_option(__version__, prog_name="blockref")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to blockref.toml (defaults to auto-detected blockref.toml or [tool.blockref])",
)
@click.option("--verbose", is_flag=True, help="Log analysis protocol events")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, verbose: bool) -> None:
    """blockref - Block reference analysis for templates.

    Replay recorded template walks, emit canonical analyses for the
    optimizer, and inspect serialized analyses.
    """
    from .config import find_config, load_config

    _setup_logging(verbose)
    ctx.ensure_object(dict)
    if config_path is None:
        config_path = find_config(Path.cwd())
    try:
        ctx.obj["config"] = load_config(config_path)
    except BlockrefError as e:
        raise click.ClickException(str(e)) from e


@cli.command()
@click.argument("walk", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--format",
    "output",
    type=click.Choice(["json", "yaml"]),
    default=None,
    help="Output format (default: from config, else json)",
)
@click.option("--indent", type=int, default=None, help="JSON indentation; 0 for compact canonical JSON")
@click.option(
    "--out",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the analysis to this file instead of stdout",
)
@click.option("--digest", "show_digest", is_flag=True, help="Also print the sha256 content address to stderr")
@click.pass_context
def analyze(
    ctx: click.Context,
    walk: Path,
    output: str | None,
    indent: int | None,
    out: Path | None,
    show_digest: bool,
) -> None:
    """Replay a walk script and print its serialized analysis.

    Examples:

        blockref analyze walks/app.yml

        blockref analyze walks/app.yml --indent 0 --digest
    """
    from .commands.analyze import run_analyze

    config = ctx.obj["config"]
    _run(
        run_analyze,
        walk,
        _registry(ctx),
        output=output or config.output,
        indent=config.indent if indent is None else indent,
        out=out,
        show_digest=show_digest,
    )


@cli.command()
@click.argument("walk", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def digest(ctx: click.Context, walk: Path) -> None:
    """Print the sha256 content address of a walk's analysis.

    Identical for every valid traversal order of the same template.
    """
    from .commands.analyze import run_digest

    _run(run_digest, walk, _registry(ctx))


@cli.command()
@click.option("--json", "output_json", is_flag=True, help="Output results as JSON")
@click.pass_context
def types(ctx: click.Context, output_json: bool) -> None:
    """List registered template info types."""
    from .commands.types_cmd import run_types_list

    _run(run_types_list, _registry(ctx), json_output=output_json)


@cli.command()
@click.argument("analysis", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def inspect(ctx: click.Context, analysis: Path) -> None:
    """Summarize a serialized analysis (JSON)."""
    from .commands.inspect_cmd import run_inspect

    _run(run_inspect, analysis, _registry(ctx))


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
