"""CLI commands for inspecting plandex project state and plan files."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional

import typer

from .context import ProjectContext, initialise_context
from .plans import PlanStateError, save_current_plan
from .project import find_or_create_control_directory
from .settings import SettingsError, load_settings
from .tools.artifacts import ArtifactError, load_latest_artifact, load_latest_plan_description
from .tools.paths import InclusionPolicy, PathResolutionError, resolve_paths
from .tools.replicate import TreeCopyError, copy_tree

APP_HELP = "Plandex project context CLI."

app = typer.Typer(help=APP_HELP)


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Emit debug logging to stderr.",
    ),
) -> None:
    """Configure logging before any command runs."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def _load_context() -> ProjectContext:
    try:
        return initialise_context()
    except PlanStateError as error:
        typer.echo(f"Failed to load current plan: {error}")
        raise typer.Exit(code=1) from error


def _require_project(ctx: ProjectContext) -> Path:
    if ctx.control_dir is None:
        typer.echo("No .plandex directory found. Run `plandex init` first.")
        raise typer.Exit(code=1)
    return ctx.control_dir


@app.command()
def init() -> None:
    """Create a .plandex directory in the working directory if needed."""
    ctx = _load_context()
    try:
        control_dir, created = find_or_create_control_directory(ctx.cwd)
    except OSError as error:
        typer.echo(f"Failed to create .plandex directory: {error}")
        raise typer.Exit(code=1) from error
    if not created:
        typer.echo(f"Plandex project already initialized at {control_dir}.")
        return
    ctx = ctx.with_control_dir(control_dir)
    typer.echo(f"Initialized plandex project at {ctx.control_dir}.")
    typer.echo(f"Project root: {ctx.project_root}")


@app.command()
def current() -> None:
    """Show the current plan and its directories."""
    ctx = _load_context()
    _require_project(ctx)
    plan = ctx.plan
    if plan is None:
        typer.echo("No current plan.")
        return
    typer.echo(f"Current plan: {plan.name}")
    typer.echo(f"- results: {plan.results_dir}")
    typer.echo(f"- descriptions: {plan.descriptions_dir}")
    typer.echo(f"- conversation: {plan.conversation_dir}")
    typer.echo(f"- context: {plan.context_dir}")
    if ctx.in_plan_dir:
        typer.echo(f"Working directory is inside plan {ctx.cwd.name}.")


@app.command()
def checkout(name: str = typer.Argument(..., help="Name of the plan to select.")) -> None:
    """Select NAME as the current plan, creating its directories."""
    ctx = _load_context()
    control_dir = _require_project(ctx)
    try:
        plan = save_current_plan(control_dir, name)
        for directory in (plan.results_dir, plan.descriptions_dir, plan.conversation_dir, plan.context_dir):
            directory.mkdir(parents=True, exist_ok=True)
    except OSError as error:
        typer.echo(f"Failed to switch to plan {name}: {error}")
        raise typer.Exit(code=1) from error
    typer.echo(f"Switched to plan {plan.name}.")


@app.command()
def resolve(
    paths: List[str] = typer.Argument(..., help="Files or directories to expand."),
    recursive: bool = typer.Option(
        False,
        "--recursive",
        "-r",
        help="Descend into directories.",
    ),
    tree: bool = typer.Option(
        False,
        "--tree",
        "-t",
        help="Include directory names and descend into them.",
    ),
) -> None:
    """Expand PATHS into the files they contain."""
    ctx = _load_context()
    try:
        settings = load_settings(ctx.control_dir)
    except SettingsError as error:
        typer.echo(str(error))
        raise typer.Exit(code=1) from error

    policy = InclusionPolicy(recursive=recursive, names_only=tree)
    try:
        resolved = resolve_paths(
            paths,
            policy,
            max_workers=settings.max_workers,
            skip_dirs=settings.skip_dirs,
        )
    except PathResolutionError as error:
        typer.echo(f"Error: {error}")
        raise typer.Exit(code=1) from error

    for path in resolved:
        typer.echo(path)


@app.command()
def copy(
    source: Path = typer.Argument(..., help="Directory to copy."),
    destination: Path = typer.Argument(..., help="Directory to copy into."),
) -> None:
    """Copy every file under SOURCE into DESTINATION."""
    try:
        copy_tree(source, destination)
    except TreeCopyError as error:
        typer.echo(f"Copy failed: {error}")
        raise typer.Exit(code=1) from error
    typer.echo(f"Copied {source} to {destination}.")


@app.command()
def latest(
    directory: Optional[Path] = typer.Argument(
        None,
        help="Artifact directory; defaults to the current plan's descriptions.",
    ),
) -> None:
    """Print the newest artifact in DIRECTORY."""
    try:
        if directory is not None:
            record = load_latest_artifact(directory)
            typer.echo(f"{record.name}:")
            typer.echo(json.dumps(record.payload, indent=2))
            return

        ctx = _load_context()
        _require_project(ctx)
        if ctx.plan is None:
            typer.echo("No current plan.")
            raise typer.Exit(code=1)
        description = load_latest_plan_description(ctx.plan)
    except ArtifactError as error:
        typer.echo(f"Error: {error}")
        raise typer.Exit(code=1) from error

    typer.echo(f"Plan {ctx.plan.name}")
    typer.echo(f"- message: {description.commit_msg or '(none)'}")
    typer.echo(f"- made plan: {'yes' if description.made_plan else 'no'}")
    if description.files:
        typer.echo("- files:")
        for path in description.files:
            typer.echo(f"    {path}")


if __name__ == "__main__":
    app()
