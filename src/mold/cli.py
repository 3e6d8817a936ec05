"""CLI interface for mold - render configuration files from templates."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import click
import yaml
from rich.markup import escape

from .context import Context, discover_context_path, load_context
from .diff import print_diff, print_diff_header
from .errors import MoldError
from .render import Mold
from .utils import console, err_console, filesystem_resolver, read_text, write_text

logger = logging.getLogger(__name__)

_path_type = click.Path(path_type=Path, dir_okay=False)

namespace_option = click.option(
    "-n", "--namespace", default=None, help="Namespace to look variables up in first."
)
context_file_option = click.option(
    "-c",
    "--context-file",
    type=_path_type,
    default=None,
    help="Context file (defaults to $MOLD_CONTEXT or mold.yaml in the app directory).",
)
show_missing_option = click.option(
    "--show-missing",
    is_flag=True,
    help=(
        "By default, if there is no value for a variable name in the context nothing "
        "will be rendered in place. This option renders the original tag instead."
    ),
)
no_diff_option = click.option(
    "--no-diff", is_flag=True, help="Do not show a diff against existing output."
)
dry_run_option = click.option(
    "--dry-run", is_flag=True, help="Show what would change without writing files."
)
max_depth_option = click.option(
    "--max-depth",
    type=click.IntRange(min=1),
    default=None,
    help="Fail when nested variables or includes go deeper than this.",
)


def _load_context(context_file: Optional[Path]) -> Context:
    path = discover_context_path(context_file)
    if path is None:
        raise SystemExit("no context file found, exiting...")
    try:
        return load_context(path)
    except MoldError as e:
        raise SystemExit(f"failed to initialize mold - {e}")


def _check_namespace(context: Context, namespace: Optional[str]) -> None:
    if namespace is not None and not context.has_namespace(namespace):
        err_console.print(
            f"Namespace {escape(namespace)} is not defined, using global variables only",
            style="yellow",
        )


def render_template(
    template: Path,
    context: Context,
    namespace: Optional[str],
    show_missing: bool,
    max_depth: Optional[int],
) -> str:
    """Render a template file; includes are relative to its directory."""
    mold = Mold(resolver=filesystem_resolver(template.parent), max_depth=max_depth)
    return mold.render_file(template.resolve(), context, namespace, show_missing)


def write_output(
    template: Path,
    output_path: Path,
    rendered: str,
    namespace: Optional[str],
    show_diff: bool,
    dry_run: bool,
) -> bool:
    """Diff and write ``rendered`` to ``output_path``.

    Returns True when the output file is new or its content changed.
    """
    previous: Optional[str] = None
    if output_path.exists():
        try:
            previous = read_text(output_path)
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("Could not read existing output %s: %s", output_path, e)

    changed = previous != rendered
    if show_diff and previous is not None and changed:
        print_diff_header(console, str(template), str(output_path), namespace)
        print_diff(console, previous, rendered)

    if dry_run:
        if changed:
            console.print(
                f"DRY-RUN: would write {escape(str(output_path))}", style="cyan", soft_wrap=True
            )
        return changed

    write_text(output_path, rendered)
    logger.debug("Wrote %s", output_path)
    return changed


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """Render configuration files from templates and a layered context."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command("render")
@click.argument("input_file", type=_path_type)
@click.argument("output_path", type=_path_type, required=False)
@namespace_option
@context_file_option
@show_missing_option
@no_diff_option
@dry_run_option
@max_depth_option
def render_cmd(
    input_file: Path,
    output_path: Optional[Path],
    namespace: Optional[str],
    context_file: Optional[Path],
    show_missing: bool,
    no_diff: bool,
    dry_run: bool,
    max_depth: Optional[int],
) -> None:
    """
    Render INPUT_FILE with variables from the context.

    Without OUTPUT_PATH the result is printed. With it, the result is
    written there, after showing a diff against its current content.
    """
    context = _load_context(context_file)
    _check_namespace(context, namespace)

    try:
        rendered = render_template(
            input_file, context, namespace, show_missing, max_depth
        )
    except (MoldError, RecursionError) as e:
        raise SystemExit(f"failed to render file `{input_file}` - {e}")

    if output_path is None:
        line = "-" * (len(str(input_file)) + 6)
        click.echo("=" * 80)
        click.echo(f"File: {input_file}\n{line}")
        click.echo(rendered)
        return

    try:
        write_output(
            input_file, output_path, rendered, namespace, not no_diff, dry_run
        )
    except OSError as e:
        raise SystemExit(f"failed to save rendered file `{input_file}` - {e}")


@cli.command("render-all")
@namespace_option
@context_file_option
@show_missing_option
@no_diff_option
@dry_run_option
@max_depth_option
@click.option(
    "--continue-on-error",
    is_flag=True,
    help="Continue rendering other templates if one fails",
)
def render_all_cmd(
    namespace: Optional[str],
    context_file: Optional[Path],
    show_missing: bool,
    no_diff: bool,
    dry_run: bool,
    max_depth: Optional[int],
    continue_on_error: bool,
) -> None:
    """Render every template listed under `renders` in the context."""
    context = _load_context(context_file)
    _check_namespace(context, namespace)

    if not context.renders:
        console.print("No renders configured.", style="yellow")
        return

    total = len(context.renders)
    failed = []
    for template, output_path in context.renders.items():
        console.print(
            f"\nRendering {escape(str(template))} -> {escape(str(output_path))}",
            style="bold blue",
            soft_wrap=True,
        )
        try:
            rendered = render_template(
                template, context, namespace, show_missing, max_depth
            )
            changed = write_output(
                template, output_path, rendered, namespace, not no_diff, dry_run
            )
        except (MoldError, RecursionError, OSError) as e:
            console.print(f"❌ {escape(str(template))}: {escape(str(e))}", style="red", soft_wrap=True)
            failed.append(template)
            if not continue_on_error:
                console.print(
                    "Use --continue-on-error to continue rendering other templates",
                    style="yellow",
                )
                sys.exit(1)
            continue
        status = "updated" if changed else "unchanged"
        console.print(f"✓ {escape(str(output_path))} {status}", style="green", soft_wrap=True)

    console.print(f"\nRendered: {total - len(failed)}/{total}", style="bold")
    if failed:
        console.print(f"Failed: {len(failed)}/{total}", style="red")
        for template in failed:
            console.print(f"  - {escape(str(template))}", style="red", soft_wrap=True)
        sys.exit(1)


@cli.command("namespaces")
@context_file_option
@click.option("--detail", "detail", is_flag=True, default=False)
@click.option("--format", "fmt", type=click.Choice(["text", "yaml"]), default="text")
def namespaces_cmd(context_file: Optional[Path], detail: bool, fmt: str) -> None:
    """
    List the namespaces defined in the context, the global one first.
    """
    context = _load_context(context_file)
    if fmt == "yaml":
        click.echo(yaml.safe_dump(context.to_dict(), sort_keys=False), nl=False)
        return
    for ns in context:
        click.echo(ns.name)
        if detail:
            for key in sorted(ns.variables):
                click.echo(f"  {key}: {ns.variables[key]}")
