"""
Lexicon Backend: Translation Manager CLI
========================================

What:  Command-line access to translation reports and the servers.
How:   Typer commands over the same LanguageManagementService the API uses;
       the catalog is loaded straight from disk, no server required.
Who:   Translators and operators (`lexicon --help`).

Commands:
    lexicon stats              key counts per language and namespace
    lexicon missing            keys absent relative to the reference language
    lexicon report             stats + missing + languages + namespaces
    lexicon serve              run the API with uvicorn
    lexicon probe root|api     run a bootstrap probe server on $PORT
"""

import logging
from pathlib import Path
from typing import Optional

import typer

from lexicon.config import settings
from lexicon.exceptions import TranslationStorageError
from lexicon.services.catalog import TranslationCatalog
from lexicon.services.language_service import LanguageManagementService

logger = logging.getLogger(__name__)

app = typer.Typer(help="Translation management for the Lexicon backend", no_args_is_help=True)

LOCALES_OPTION = typer.Option(
    None,
    "--locales-dir",
    "-d",
    help="Directory holding <lang>/<namespace>.json bundles (default: LOCALES_DIR)",
)


def _load_service(locales_dir: Optional[Path]) -> LanguageManagementService:
    config = settings
    if locales_dir is not None:
        config = settings.model_copy(update={"locales_dir": str(locales_dir)})
    try:
        catalog = TranslationCatalog.from_settings(config)
    except TranslationStorageError as e:
        typer.echo(f"Error: {e.message} ({e.context.get('path', '')})", err=True)
        raise typer.Exit(1)
    return LanguageManagementService(catalog)


def _print_statistics(service: LanguageManagementService) -> None:
    typer.echo("=== Translation Statistics ===")
    for language, namespaces in service.get_statistics().items():
        typer.echo(f"\nLanguage: {language}")
        for namespace, stats in namespaces.items():
            typer.echo(f"  {namespace}: {stats.key_count} keys")


def _print_missing(service: LanguageManagementService) -> int:
    typer.echo("\n=== Missing Translations ===")
    missing = {
        language: namespaces
        for language, namespaces in service.find_missing().items()
        if namespaces
    }
    if not missing:
        typer.echo("No missing translations found!")
        return 0

    total = 0
    for language, namespaces in missing.items():
        typer.echo(f"\nLanguage: {language}")
        for namespace, keys in namespaces.items():
            typer.echo(f"  {namespace}:")
            for key in keys:
                typer.echo(f"    - {key}")
            total += len(keys)
    return total


@app.command()
def stats(locales_dir: Optional[Path] = LOCALES_OPTION) -> None:
    """Display translation statistics."""
    _print_statistics(_load_service(locales_dir))


@app.command()
def missing(
    locales_dir: Optional[Path] = LOCALES_OPTION,
    strict: bool = typer.Option(
        False, "--strict", help="Exit with status 1 when any key is missing (for CI)"
    ),
) -> None:
    """Show keys missing relative to the reference language."""
    total = _print_missing(_load_service(locales_dir))
    if strict and total:
        raise typer.Exit(1)


@app.command()
def report(locales_dir: Optional[Path] = LOCALES_OPTION) -> None:
    """Generate a full translation report."""
    service = _load_service(locales_dir)
    typer.echo("=== Translation Report ===\n")
    _print_statistics(service)
    _print_missing(service)

    typer.echo("\n=== Available Languages ===")
    for language in service.get_supported_languages():
        typer.echo(f"- {language.code}: {language.name}")

    typer.echo("\n=== Available Namespaces ===")
    for namespace in service.get_available_namespaces():
        typer.echo(f"- {namespace}")


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", "-h", help="Host to bind to"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port to bind to"),
    reload: bool = typer.Option(False, "--reload", help="Auto-reload on code changes"),
) -> None:
    """Start the translation API."""
    import uvicorn

    host = host or settings.backend_host
    port = port or settings.backend_port
    typer.echo(f"Starting Lexicon API at http://{host}:{port}")
    uvicorn.run(
        "lexicon.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


@app.command()
def probe(
    name: str = typer.Argument(..., help="Which probe to run: root or api"),
) -> None:
    """Run a bootstrap probe server on $PORT."""
    from lexicon.bootstrap import PROBES, run_probe

    if name not in PROBES:
        typer.echo(f"Unknown probe '{name}'. Choose from: {', '.join(PROBES)}", err=True)
        raise typer.Exit(2)
    run_probe(name)


if __name__ == "__main__":
    app()
