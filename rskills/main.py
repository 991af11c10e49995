"""rskills CLI entry point using Typer."""

from __future__ import annotations

from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.markdown import Markdown
from rich.table import Table

from rskills.core.config import RSkillsConfig
from rskills.core.errors import RSkillsError, classify_error
from rskills.core.logging import log_error, setup_logging
from rskills.skills import SkillLoader, SkillRegistry, create_skill_template, lint_collection
from rskills.toolchain import cargo
from rskills.translation import compare_trees, render_markdown, write_report
from rskills.ui import console, error, info, success, warn

PASSTHROUGH = {"allow_extra_args": True, "ignore_unknown_options": True}


def _startup_callback(ctx: typer.Context) -> None:
    """Load configuration and set up logging for every command."""
    cfg = RSkillsConfig.load()
    setup_logging(log_level=cfg.log_level, logs_dir=cfg.logs_dir)
    ctx.obj = cfg


app = typer.Typer(
    name="rskills",
    help="Maintainer tooling for a Rust skill collection: skills, translation QA, cargo wrappers.",
    no_args_is_help=True,
    callback=_startup_callback,
)
skills_app = typer.Typer(help="Inspect and validate skill documents.", no_args_is_help=True)
app.add_typer(skills_app, name="skills")


def _config(ctx: typer.Context) -> RSkillsConfig:
    obj = ctx.obj
    if obj is None and ctx.parent is not None:
        obj = ctx.parent.obj
    return obj if isinstance(obj, RSkillsConfig) else RSkillsConfig.load()


def _fail(exc: BaseException) -> NoReturn:
    """Report an error and exit with its category's exit code."""
    classified = classify_error(exc)
    log_error(classified.category.value, classified.message)
    error(classified.user_message)
    if classified.policy.show_traceback:
        console.print_exception()
    raise typer.Exit(classified.exit_code)


# --- Translation ---


@app.command()
def compare(
    ctx: typer.Context,
    original_dir: Optional[Path] = typer.Argument(None, help="Tree of original documents"),
    translated_dir: Optional[Path] = typer.Argument(None, help="Tree of translated documents"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the report to this file"),
    threshold: Optional[int] = typer.Option(
        None, "--threshold", "-t", min=0, help="Line delta that triggers a warning"
    ),
) -> None:
    """Compare a translated markdown tree against the original."""
    cfg = _config(ctx)
    try:
        report = compare_trees(
            original_dir,
            translated_dir,
            line_delta_threshold=threshold if threshold is not None else cfg.translation.line_delta_threshold,
            pattern=cfg.translation.pattern,
        )
        path = write_report(report, output=output, report_dir=cfg.translation.report_dir)
    except (RSkillsError, OSError) as e:
        _fail(e)

    typer.echo("")
    typer.echo("Comparison complete!")
    typer.echo(f"Report saved to: {path}")
    typer.echo("")
    typer.echo(render_markdown(report, saved_to=path), nl=False)


# --- Cargo wrappers ---


def _runner(cfg: RSkillsConfig) -> cargo.CargoRunner:
    return cargo.CargoRunner(cargo=cfg.cargo.cargo, timeout=cfg.cargo.timeout)


@app.command(context_settings=PASSTHROUGH)
def check(ctx: typer.Context) -> None:
    """Run cargo check on all targets."""
    try:
        cargo.check(_runner(_config(ctx)), ctx.args)
    except RSkillsError as e:
        _fail(e)


@app.command("test", context_settings=PASSTHROUGH)
def run_tests(
    ctx: typer.Context,
    threads: Optional[int] = typer.Option(None, "--threads", "-j", min=1, help="Test threads (default: CPU count)"),
) -> None:
    """Run the workspace test suite in parallel."""
    cfg = _config(ctx)
    try:
        cargo.test(_runner(cfg), ctx.args, threads=threads or cfg.cargo.test_threads)
    except RSkillsError as e:
        _fail(e)


@app.command(context_settings=PASSTHROUGH)
def clippy(ctx: typer.Context) -> None:
    """Run clippy with warnings denied."""
    try:
        cargo.clippy(_runner(_config(ctx)), ctx.args)
    except RSkillsError as e:
        _fail(e)


@app.command(context_settings=PASSTHROUGH)
def fmt(ctx: typer.Context) -> None:
    """Check formatting, formatting the code if the check fails."""
    try:
        cargo.fmt(_runner(_config(ctx)), ctx.args)
    except RSkillsError as e:
        _fail(e)


# --- Skills ---


def _registry(ctx: typer.Context, skills_dir: Optional[Path]) -> SkillRegistry:
    cfg = _config(ctx)
    registry = SkillRegistry(
        skills_dir=skills_dir or cfg.skills.skills_dir,
        references_dir=cfg.skills.references_dir,
    )
    if not registry.skills_dir.is_dir():
        error(f"Skills directory not found: {registry.skills_dir}")
        raise typer.Exit(1)
    registry.discover()
    return registry


SKILLS_DIR_OPTION = typer.Option(None, "--skills-dir", "-d", help="Skills directory (overrides config)")


@skills_app.command("list")
def skills_list(ctx: typer.Context, skills_dir: Optional[Path] = SKILLS_DIR_OPTION) -> None:
    """List discovered skills."""
    registry = _registry(ctx, skills_dir)
    skills = registry.list()
    if not skills:
        info("No skills found.")
        return

    table = Table(title=f"Skills ({len(skills)})")
    table.add_column("Name", style="cyan")
    table.add_column("Description", style="green", max_width=60)
    table.add_column("Triggers", style="yellow", max_width=40)
    table.add_column("Enabled", style="dim")
    for skill in skills:
        table.add_row(
            skill.name,
            skill.description,
            ", ".join(skill.metadata.triggers),
            "yes" if skill.metadata.enabled else "no",
        )
    console.print(table)

    refs = registry.references()
    if refs:
        ref_table = Table(title="References")
        ref_table.add_column("Title", style="cyan")
        ref_table.add_column("Path", style="dim")
        for ref in refs:
            ref_table.add_row(ref.title, str(ref.path))
        console.print(ref_table)


@skills_app.command("show")
def skills_show(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Skill name"),
    related: bool = typer.Option(False, "--related", "-r", help="Include related skills"),
    raw: bool = typer.Option(False, "--raw", help="Print the prompt text without rendering"),
    skills_dir: Optional[Path] = SKILLS_DIR_OPTION,
) -> None:
    """Show a skill as it would be injected into a prompt."""
    loader = SkillLoader(_registry(ctx, skills_dir))
    try:
        skill = loader.load_skill(name)
    except RSkillsError as e:
        _fail(e)

    text = loader.build_prompt_injection([skill], include_related=related)
    if raw:
        typer.echo(text)
    else:
        console.print(Markdown(text))


@skills_app.command("match")
def skills_match(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Text to match against trigger keywords"),
    skills_dir: Optional[Path] = SKILLS_DIR_OPTION,
) -> None:
    """Show which skills a query triggers."""
    matches = _registry(ctx, skills_dir).match(query)
    if not matches:
        info("No skills triggered.")
        return

    table = Table(title="Triggered Skills")
    table.add_column("Skill", style="cyan")
    table.add_column("Hits", style="green")
    table.add_column("Triggers", style="yellow")
    table.add_column("Path", style="dim")
    for m in matches:
        table.add_row(m.skill.name, str(m.score), ", ".join(m.triggers), str(m.skill.source_path or ""))
    console.print(table)


@skills_app.command("lint")
def skills_lint(ctx: typer.Context, skills_dir: Optional[Path] = SKILLS_DIR_OPTION) -> None:
    """Check skill metadata for broken references and unclosed code blocks."""
    registry = _registry(ctx, skills_dir)
    issues = lint_collection(registry)
    errors = [i for i in issues if i.severity == "error"]

    for issue in issues:
        location = issue.path or issue.skill
        if issue.severity == "error":
            error(f"{location}: {issue.message}")
        else:
            warn(f"{location}: {issue.message}")

    if errors:
        raise typer.Exit(1)
    success(f"{len(registry.list())} skills checked, {len(issues)} warnings")


@skills_app.command("new")
def skills_new(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Skill name (lowercase, hyphen-separated)"),
    description: str = typer.Argument(..., help="One-line description"),
    trigger: list[str] = typer.Option([], "--trigger", help="Trigger keyword (repeatable)"),
    skills_dir: Optional[Path] = SKILLS_DIR_OPTION,
) -> None:
    """Scaffold a new skill document."""
    target_dir = (skills_dir or _config(ctx).skills.skills_dir) / name
    target = target_dir / "SKILL.md"
    if target.exists():
        error(f"Skill already exists: {target}")
        raise typer.Exit(1)

    target_dir.mkdir(parents=True, exist_ok=True)
    target.write_text(create_skill_template(name, description, trigger), encoding="utf-8")
    success(f"Created {target}")


# --- Configuration ---


@app.command()
def init(ctx: typer.Context) -> None:
    """Write a default configuration file."""
    cfg = _config(ctx)
    path = cfg.save()
    success(f"Configuration initialized at {path}")


@app.command()
def config(
    ctx: typer.Context,
    show: bool = typer.Option(False, "--show", "-s", help="Show current configuration"),
    path: bool = typer.Option(False, "--path", "-p", help="Show config file path"),
    get: Optional[str] = typer.Option(None, "--get", help="Print one value by dotted key"),
) -> None:
    """View configuration."""
    cfg = _config(ctx)
    if path:
        info(str(cfg.config_file))
        return
    if get:
        sentinel = object()
        value = cfg.get(get, sentinel)
        if value is sentinel:
            error(f"Configuration key not found: {get}")
            raise typer.Exit(1)
        typer.echo(str(value))
        return
    if show:
        table = Table(title="Configuration")
        table.add_column("Setting", style="cyan")
        table.add_column("Value", style="green")
        _flat_table(table, cfg.model_dump(mode="json"))
        console.print(table)
        return
    info(f"Config dir: {cfg.config_dir}")
    info(f"Config file exists: {cfg.config_file.exists()}")


def _flat_table(table: Table, data: dict, prefix: str = "") -> None:
    """Flatten nested dict into table rows."""
    for key, value in data.items():
        full_key = f"{prefix}{key}" if not prefix else f"{prefix}.{key}"
        if isinstance(value, dict):
            _flat_table(table, value, full_key)
        else:
            table.add_row(full_key, str(value))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
