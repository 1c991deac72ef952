"""CLI command implementations"""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from sqlmodel import SQLModel

from mdgarden.config import Settings, load_config
from mdgarden.core.assets import extract_image_links
from mdgarden.core.compiler import NoteCompiler
from mdgarden.core.pipeline import run_build, run_status
from mdgarden.core.vault import FileVault
from mdgarden.crud.database import init_db, make_engine


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None, verbose: bool = False) -> Settings:
    """Load config with standard CLI error handling and configure logging."""
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, settings.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )
    return settings


def _compiler(settings: Settings) -> tuple[FileVault, NoteCompiler]:
    vault_dir = Path(settings.vault_dir)
    if not vault_dir.is_dir():
        _fail(f"Vault directory not found: {vault_dir}")
    vault = FileVault(vault_dir, settings.parser_config)
    return vault, NoteCompiler(settings, vault)


def _note(vault: FileVault, path: str):
    try:
        return vault.get_note(Path(path).as_posix())
    except FileNotFoundError:
        _fail(f"Note not found in vault: {path}")


def build_cmd(
    vault: Annotated[Optional[str], typer.Argument(help="Vault directory")] = None,
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    depth: Annotated[Optional[int], typer.Option("--max-depth", help="Max nested transclusion depth")] = None,
    prune: Annotated[bool, typer.Option("--prune", help="Remove output and ledger entries of notes no longer published")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
    ):
    """Compile every note flagged for publishing and write notes + images."""
    settings = _settings(overrides={"vault_dir": vault, "output_dir": out, "max_depth": depth}, verbose=verbose)
    vault_, compiler = _compiler(settings)
    engine = make_engine(settings.db_url)
    init_db(engine)

    notes = vault_.published_notes(settings.publish_key)
    if not notes:
        typer.echo(f"No notes flagged with '{settings.publish_key}: true'.")
        raise typer.Exit(0)

    output_dir = Path(settings.output_dir)
    try:
        report = run_build(compiler, notes, output_dir, engine, prune=prune)
    except Exception as e:
        _fail("Build failed", e)

    for status, path in report.changes:
        typer.echo(f"  {status}: {path}")
    for notice in report.notices:
        typer.echo(f"  notice: {notice}", err=True)
    for path in report.pruned:
        typer.echo(f"  pruned: {path}")
    for path, error in report.failures:
        typer.echo(f"  failed: {path} ({error})", err=True)
    counts = report.counts
    typer.echo(
        f"Build complete - "
        f"{counts['created']} created, "
        f"{counts['updated']} updated, "
        f"{counts['unchanged']} unchanged, "
        f"{len(report.failures)} failed"
    )
    if report.failures:
        raise typer.Exit(1)


def compile_cmd(
    note: Annotated[str, typer.Argument(help="Vault-relative path of the note")],
    vault: Annotated[Optional[str], typer.Option("--vault", help="Vault directory")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
    ):
    """Compile a single note and print the result to stdout."""
    settings = _settings(overrides={"vault_dir": vault}, verbose=verbose)
    vault_, compiler = _compiler(settings)
    target = _note(vault_, note)
    try:
        compiled = compiler.compile(target)
    except Exception as e:
        _fail(f"Failed to compile {note}", e)
    typer.echo(compiled.text)
    for asset in compiled.assets:
        typer.echo(f"asset: {asset.path}", err=True)
    for notice in compiled.notices:
        typer.echo(f"notice: {notice}", err=True)


def images_cmd(
    note: Annotated[str, typer.Argument(help="Vault-relative path of the note")],
    vault: Annotated[Optional[str], typer.Option("--vault", help="Vault directory")] = None,
    ):
    """List the vault paths of images a note embeds."""
    settings = _settings(overrides={"vault_dir": vault})
    vault_, _ = _compiler(settings)
    for path in extract_image_links(_note(vault_, note)):
        typer.echo(path)


def status_cmd(
    vault: Annotated[Optional[str], typer.Option("--vault", help="Vault directory")] = None,
    ):
    """Show which flagged notes are unpublished, changed, published or deleted since the last build."""
    settings = _settings(overrides={"vault_dir": vault})
    vault_, compiler = _compiler(settings)
    engine = make_engine(settings.db_url)
    init_db(engine)
    status = run_status(compiler, vault_.published_notes(settings.publish_key), engine)
    for group, paths in status.items():
        typer.echo(f"{group}: {len(paths)}")
        for path in paths:
            typer.echo(f"  {path}")


def init_cmd(
    reset: Annotated[bool, typer.Option("--reset", help="Drop and recreate all tables")] = False,
    ):
    """Initialize the publish ledger. Use --reset to forget what was published."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    if reset:
        SQLModel.metadata.drop_all(engine)
        typer.echo("Existing ledger cleared.")
    init_db(engine)
    typer.echo(f"Ledger initialized at: {settings.db_url}")
