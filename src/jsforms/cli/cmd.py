"""
Command-line interface for jsforms.
Loads form trees from a Python module and prints the generated JavaScript.
"""
# typer relies on function calls used as default values
# pyright: reportCallInDefaultInitializer=false

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from jsforms.cli.helpers import LoadedForms, load_forms_from_target
from jsforms.config import EmitConfig
from jsforms.emitter import js
from jsforms.errors import JsFormsError
from jsforms.macros import DEFAULT_REGISTRY

cli = typer.Typer(
	name="jsforms",
	help="jsforms - generate JavaScript from Python-built form trees",
	no_args_is_help=True,
)


def _configure_logging(verbose: bool) -> None:
	if verbose:
		logging.basicConfig(level=logging.DEBUG)


def _load(target: str, console: Console) -> LoadedForms:
	console.log(f"📁 Loading forms from: {target}")
	try:
		return load_forms_from_target(target)
	except (FileNotFoundError, ImportError, AttributeError) as exc:
		console.log(f"❌ {exc}")
		raise typer.Exit(1) from None


@cli.command("emit")
def emit(
	target: str = typer.Argument(
		...,
		help="Forms target: 'path/to/file.py[:var]' or 'module.path[:var]' (default :forms)",
	),
	output: Path | None = typer.Option(
		None, "--output", "-o", help="Write JavaScript to this file instead of stdout"
	),
	no_dedupe: bool = typer.Option(
		False, "--no-dedupe", help="Keep repeated names in hoisted var declarations"
	),
	verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
	"""Emit JavaScript for the forms defined in TARGET."""
	_configure_logging(verbose)
	console = Console(stderr=True)
	loaded = _load(target, console)

	try:
		config = EmitConfig.from_env()
	except ValueError as exc:
		console.log(f"❌ {exc}")
		raise typer.Exit(1) from None
	if no_dedupe:
		config.dedupe_declarations = False

	try:
		code = js(*loaded.forms, config=config)
	except JsFormsError as exc:
		console.log(f"❌ {type(exc).__name__}: {exc}")
		raise typer.Exit(1) from None

	if output is None:
		typer.echo(code, nl=False)
		return
	output.parent.mkdir(parents=True, exist_ok=True)
	output.write_text(code)
	console.log(f"✅ Wrote {output}")


@cli.command("forms")
def forms(
	target: str | None = typer.Argument(
		None, help="Optional module to load first, so its custom forms are registered"
	),
):
	"""List registered custom forms."""
	console = Console()
	if target is not None:
		_load(target, console)

	names = DEFAULT_REGISTRY.names()
	if not names:
		console.print("No custom forms registered.")
		return
	table = Table(title="Custom forms")
	table.add_column("Form", style="cyan")
	table.add_column("Defined in")
	table.add_column("Description")
	for name in names:
		fn = DEFAULT_REGISTRY.get(name)
		module = getattr(fn, "__module__", "") or ""
		doc = (getattr(fn, "__doc__", None) or "").strip().splitlines()
		table.add_row(name, module, doc[0] if doc else "")
	console.print(table)


def main() -> None:
	cli()


if __name__ == "__main__":
	main()
