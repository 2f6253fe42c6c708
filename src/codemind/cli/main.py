"""CLI for codemind: drive the gateway from a terminal or a script."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from codemind.core.config import merge_with_defaults
from codemind.engines import ENGINES
from codemind.gateway import Gateway
from codemind.hooks import setup_logging
from codemind.models import GatewayResult

app = typer.Typer(name="codemind", help="Hardened gateway to the CodeMind code-intelligence backend")
console = Console()

_FILE_TYPES = {
    ".py": "python",
    ".lua": "lua",
    ".js": "javascript",
    ".ts": "typescript",
    ".go": "go",
    ".rs": "rust",
    ".rb": "ruby",
    ".sh": "bash",
}


def _build_gateway(base_url: Optional[str], verbose: bool) -> Gateway:
    """Build a gateway from env settings, overridden by CLI flags."""
    overrides: dict[str, Any] = {}
    if base_url:
        overrides["base_url"] = base_url
    if verbose:
        overrides["observability"] = {"log_level": "DEBUG"}
    settings = merge_with_defaults(overrides)
    setup_logging(settings.observability)
    return Gateway(settings)


def _read_code(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise typer.BadParameter(f"Cannot read {path}: {exc}") from exc


def _detect_file_type(path: Path) -> str:
    suffix = path.suffix.lower()
    return _FILE_TYPES.get(suffix, suffix.lstrip(".") or "text")


def _emit(result: GatewayResult) -> None:
    """Print a result's JSON value, or its error and exit non-zero."""
    if result.error is not None:
        console.print(f"[red]Error ({result.error.kind}):[/red] {escape(str(result.error))}")
        raise typer.Exit(code=1)
    console.print_json(data=result.value)


@app.command()
def health(
    base_url: Optional[str] = typer.Option(None, "--base-url", help="Backend base URL"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Probe the backend's /health endpoint."""
    gateway = _build_gateway(base_url, verbose)
    result = gateway.check_health_sync()
    if result.error is not None:
        console.print(f"[red]Backend unavailable:[/red] {escape(str(result.error))}")
        raise typer.Exit(code=1)
    console.print(f"[green]Backend healthy[/green] at {gateway.settings.base_url}")


@app.command()
def analyze(
    source: Path = typer.Argument(..., help="Source file to analyze"),
    file_type: Optional[str] = typer.Option(None, "--file-type", help="Language (defaults to file suffix)"),
    base_url: Optional[str] = typer.Option(None, "--base-url"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Request a code review for a source file."""
    gateway = _build_gateway(base_url, verbose)
    code = _read_code(source)
    _emit(gateway.analyze_code_sync(code, file_type or _detect_file_type(source), str(source)))


@app.command()
def optimize(
    source: Path = typer.Argument(..., help="Source file to optimize"),
    optimization_type: str = typer.Option("performance", "--type", help="Optimization focus"),
    base_url: Optional[str] = typer.Option(None, "--base-url"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Request optimization suggestions for a source file."""
    gateway = _build_gateway(base_url, verbose)
    _emit(gateway.optimize_code_sync(_read_code(source), optimization_type))


@app.command("gen-tests")
def gen_tests(
    source: Path = typer.Argument(..., help="Source file to generate tests for"),
    framework: str = typer.Option("pytest", "--framework", help="Test framework to target"),
    base_url: Optional[str] = typer.Option(None, "--base-url"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Request generated tests for a source file."""
    gateway = _build_gateway(base_url, verbose)
    _emit(gateway.generate_tests_sync(_read_code(source), framework))


@app.command()
def metrics(
    base_url: Optional[str] = typer.Option(None, "--base-url"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Fetch the backend's latest metrics."""
    gateway = _build_gateway(base_url, verbose)
    _emit(gateway.get_metrics_sync())


@app.command()
def engines() -> None:
    """List the named engines reachable through `codemind request`."""
    table = Table(title="AI Engines")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Endpoint")
    table.add_column("Description")
    for engine in ENGINES.values():
        table.add_row(engine.engine_id, engine.name, engine.endpoint, engine.description)
    console.print(table)


@app.command()
def request(
    endpoint: str = typer.Argument(..., help="Endpoint path, or an engine ID with --engine"),
    data: str = typer.Option("{}", "--data", help="JSON request body"),
    engine: bool = typer.Option(False, "--engine", help="Treat ENDPOINT as an engine ID"),
    base_url: Optional[str] = typer.Option(None, "--base-url"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """POST a JSON body to an arbitrary endpoint or named engine."""
    try:
        body = json.loads(data)
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"--data is not valid JSON: {exc}") from exc

    gateway = _build_gateway(base_url, verbose)
    if engine:
        _emit(gateway.engine_request_sync(endpoint, body))
    else:
        _emit(gateway.request_sync(endpoint, body))


if __name__ == "__main__":
    app()
