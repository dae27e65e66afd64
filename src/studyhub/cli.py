"""CLI interface for studyhub."""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.logging import RichHandler

from studyhub import __version__
from studyhub.builder.assets import AssetSyncError, sync_material_assets
from studyhub.ingest.ingestion import IngestError, run_ingest, summary_line
from studyhub.ingest.run_logger import log_ingest_configuration, log_run_summary
from studyhub.model.options import CATALOG_FILENAME, IngestOptions
from studyhub.ui.progress import ProgressReporter

app = typer.Typer(
    name="studyhub",
    help="Build the study reader catalog from a tree of course material pages.",
    no_args_is_help=True,
)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity level."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False, markup=False)],
        force=True,
    )


@app.command()
def ingest(
    root: Annotated[
        Path,
        typer.Argument(
            help="Source tree holding one directory per subject",
            exists=True,
            file_okay=False,
            dir_okay=True,
            readable=True,
        ),
    ] = Path("."),
    out_dir: Annotated[
        Path | None,
        typer.Option(
            "--out-dir",
            help="Directory for materials.json and manifest.json (default: <root>/public/data)",
        ),
    ] = None,
    ignore: Annotated[
        list[str] | None,
        typer.Option(
            "--ignore",
            help="Extra top-level directory to skip; may be repeated",
        ),
    ] = None,
    id_length: Annotated[
        int,
        typer.Option(
            "--id-length",
            help="Hex characters kept from each material fingerprint (default: 12)",
        ),
    ] = 12,
    progress: Annotated[
        bool,
        typer.Option("--progress/--no-progress", help="Show a progress display (default: yes)"),
    ] = True,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log pipeline decisions"),
    ] = False,
) -> None:
    """
    Extract course material pages into materials.json and manifest.json.

    Examples:

        # Ingest the current directory
        studyhub ingest

        # Ingest a checkout and write next to the reader app
        studyhub ingest ../site --out-dir study-hub-v2/public/data
    """
    setup_logging(verbose)

    try:
        options = IngestOptions.from_cli(
            root=root,
            out_dir=out_dir,
            extra_ignored=ignore or (),
            id_length=id_length,
        )
    except ValueError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1) from exc

    log_ingest_configuration(options)

    try:
        if progress:
            with ProgressReporter() as pr:
                result = run_ingest(options, on_progress=pr.emit)
        else:
            result = run_ingest(options)
    except IngestError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1) from exc

    log_run_summary(result.totals)
    typer.echo(summary_line(result))


@app.command("sync-assets")
def sync_assets(
    root: Annotated[
        Path,
        typer.Argument(
            help="Source tree the catalog image paths are relative to",
            exists=True,
            file_okay=False,
            dir_okay=True,
            readable=True,
        ),
    ] = Path("."),
    catalog: Annotated[
        Path | None,
        typer.Option(
            "--catalog",
            help="Catalog to read image paths from (default: <root>/public/data/materials.json)",
        ),
    ] = None,
    materials_dir: Annotated[
        Path | None,
        typer.Option(
            "--materials-dir",
            help="Directory the images are copied into (default: <root>/public/materials)",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log each missing asset"),
    ] = False,
) -> None:
    """Copy the images referenced by the catalog into the reader's materials root."""
    setup_logging(verbose)

    options = IngestOptions.from_cli(root=root, materials_dir=materials_dir)
    catalog_path = catalog if catalog is not None else options.out_dir / CATALOG_FILENAME

    try:
        result = sync_material_assets(catalog_path, options.root, options.materials_dir)
    except (AssetSyncError, OSError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1) from exc

    typer.echo(result.summary_line())


@app.command()
def version() -> None:
    """Show version information."""
    typer.echo(f"studyhub version {__version__}")


def version_callback(value: bool) -> None:
    """Version callback for --version flag."""
    if value:
        typer.echo(f"studyhub version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = None,
) -> None:
    """
    studyhub - turn a folder of course material pages into the study reader catalog.

    Each subject directory is scanned for HTML pages; images, text and exam
    paper panels are extracted into materials.json, with counts summarized in
    manifest.json. Run `studyhub sync-assets` afterwards to copy the
    referenced images next to the reader app.
    """
    pass


if __name__ == "__main__":  # pragma: no cover - executed only via `python -m`
    app()
