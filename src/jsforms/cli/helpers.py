from __future__ import annotations

import importlib
import importlib.util
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, TypedDict

from jsforms.nodes import Node

DEFAULT_FORMS_VAR = "forms"


class ParsedTarget(TypedDict):
	mode: Literal["path", "module"]
	module_name: str
	forms_var: str
	file_path: Path | None


@dataclass(slots=True)
class LoadedForms:
	target: ParsedTarget
	value: Any

	@property
	def forms(self) -> tuple[Node, ...]:
		"""Top-level forms: a list/tuple value holds several, anything else is one."""
		if isinstance(self.value, (list, tuple)):
			return tuple(self.value)  # pyright: ignore[reportUnknownArgumentType]
		return (self.value,)


def parse_target(target: str) -> ParsedTarget:
	"""Parse 'path/to/file.py[:var]' or 'package.module[:var]'."""
	spec, sep, var = target.rpartition(":")
	# No colon, or a Windows drive letter ("C:\\...")
	if not sep or (len(spec) == 1 and spec.isalpha()):
		spec, var = target, DEFAULT_FORMS_VAR
	var = var or DEFAULT_FORMS_VAR

	path = Path(spec)
	if spec.endswith(".py") or path.exists():
		if path.is_dir():
			path = path / "__init__.py"
		file_path = path.resolve()
		return {
			"mode": "path",
			"module_name": f"_jsforms_target_{file_path.stem}",
			"forms_var": var,
			"file_path": file_path,
		}
	return {
		"mode": "module",
		"module_name": spec,
		"forms_var": var,
		"file_path": None,
	}


def load_forms_from_target(target: str) -> LoadedForms:
	"""Import the target module and fetch its forms variable.

	Importing runs the module, so any custom forms it registers (for example
	with @jsmacro) are in the default registry afterwards.
	"""
	parsed = parse_target(target)
	if parsed["mode"] == "path":
		file_path = parsed["file_path"]
		assert file_path is not None
		if not file_path.exists():
			raise FileNotFoundError(f"File not found: {file_path}")
		spec = importlib.util.spec_from_file_location(parsed["module_name"], file_path)
		if spec is None or spec.loader is None:
			raise ImportError(f"Cannot import {file_path}")
		module = importlib.util.module_from_spec(spec)
		sys.modules[parsed["module_name"]] = module
		spec.loader.exec_module(module)
	else:
		module = importlib.import_module(parsed["module_name"])

	var = parsed["forms_var"]
	if not hasattr(module, var):
		raise AttributeError(f"{parsed['module_name']} has no variable '{var}'")
	return LoadedForms(target=parsed, value=getattr(module, var))
