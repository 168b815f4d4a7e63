"""Custom forms: caller-registered tree rewrites.

A custom form is a function receiving the arguments of a call-form and
returning a new node. The emitter expands it whenever the form's name shows
up as the head of a call-form, then emits the result like any other node, so
expansions may contain further custom forms.

Example:
	@jsmacro
	def square(x):
		return form("*", x, x)

	js(form("square", 4))  # -> "(4 * 4)"
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping, Sequence
from types import MappingProxyType
from typing import Any, TypeAlias, TypeVar, overload

from jsforms.errors import ExpansionError
from jsforms.nodes import Form, Node, Sym
from jsforms.template import fill

logger = logging.getLogger(__name__)

ExpansionFn: TypeAlias = Callable[..., Node]
_F = TypeVar("_F", bound=ExpansionFn)

REST_PARAM = "&rest"


class FormRegistry:
	"""Mapping from form name to expansion function.

	Reads and writes are serialized by a lock. Emission works on a
	`snapshot()`, so registering while another thread emits never changes
	an emission already in progress.
	"""

	__slots__: tuple[str, ...] = ("_forms", "_lock")
	_forms: dict[str, ExpansionFn]
	_lock: threading.Lock

	def __init__(self, forms: Mapping[str, ExpansionFn] | None = None) -> None:
		self._forms = dict(forms or {})
		self._lock = threading.Lock()

	def register(self, name: str, fn: ExpansionFn) -> None:
		"""Add or overwrite the custom form `name`."""
		with self._lock:
			if name in self._forms:
				logger.debug("Overwriting custom form %s", name)
			else:
				logger.debug("Registering custom form %s", name)
			self._forms[name] = fn

	def unregister(self, name: str) -> None:
		with self._lock:
			self._forms.pop(name, None)

	def get(self, name: str) -> ExpansionFn | None:
		with self._lock:
			return self._forms.get(name)

	def names(self) -> list[str]:
		with self._lock:
			return sorted(self._forms)

	def snapshot(self) -> Mapping[str, ExpansionFn]:
		"""Read-only copy of the current entries."""
		with self._lock:
			return MappingProxyType(dict(self._forms))

	def clear(self) -> None:
		with self._lock:
			self._forms.clear()

	def __contains__(self, name: object) -> bool:
		with self._lock:
			return name in self._forms

	def __len__(self) -> int:
		with self._lock:
			return len(self._forms)


# Process-wide registry used when no registry is passed to js()
DEFAULT_REGISTRY = FormRegistry()


def register_custom_form(
	name: str, fn: ExpansionFn, registry: FormRegistry | None = None
) -> None:
	"""Register `fn` as the expansion of `name` (in the default registry unless given)."""
	target = registry if registry is not None else DEFAULT_REGISTRY
	target.register(name, fn)


@overload
def jsmacro(arg: str, *, registry: FormRegistry | None = None) -> Callable[[_F], _F]: ...


@overload
def jsmacro(arg: _F, *, registry: FormRegistry | None = None) -> _F: ...


def jsmacro(
	arg: str | _F, *, registry: FormRegistry | None = None
) -> Callable[[_F], _F] | _F:
	"""Decorator registering a function as a custom form.

	Usage:
		@jsmacro
		def square(x): ...
	or:
		@jsmacro("not-null?")
		def not_null(x): ...

	The function is returned unchanged, so it can still be called directly
	to build trees.
	"""
	if isinstance(arg, str):
		name = arg

		def decorator(fn: _F) -> _F:
			register_custom_form(name, fn, registry)
			return fn

		return decorator
	if callable(arg):
		register_custom_form(arg.__name__, arg, registry)
		return arg
	raise TypeError("jsmacro expects a function or a form name")


def deftemplate(
	name: str,
	params: Sequence[str],
	body: Node,
	registry: FormRegistry | None = None,
) -> ExpansionFn:
	"""Register a custom form whose expansion is a template.

	Each parameter fills the named hole of the same name. A final `&rest`
	parameter collects the remaining arguments under the name that follows
	it, so ["x", "&rest", "more"] binds (f 1 2 3) as x=1, more=[2, 3].

	Example:
		deftemplate("unless", ["test", "&rest", "body"],
			form("if", form("!", hole("test")), form("do", splice("body"))))
	"""
	fixed, rest = _parse_params(params)

	def expand(*args: Node) -> Node:
		if len(args) < len(fixed) or (rest is None and len(args) > len(fixed)):
			raise ExpansionError(
				f"{name} expects {len(fixed)}{'+' if rest else ''} argument(s), got {len(args)}"
			)
		named: dict[str, Any] = dict(zip(fixed, args))
		if rest is not None:
			named[rest] = list(args[len(fixed) :])
		return fill(body, **named)

	expand.__name__ = name
	register_custom_form(name, expand, registry)
	return expand


def _parse_params(params: Sequence[str]) -> tuple[list[str], str | None]:
	fixed = list(params)
	if REST_PARAM not in fixed:
		return fixed, None
	idx = fixed.index(REST_PARAM)
	if idx != len(fixed) - 2:
		raise ValueError(f"{REST_PARAM} must be followed by exactly one parameter name")
	return fixed[:idx], fixed[idx + 1]


def custom_form_name(node: Node) -> str | None:
	"""Name of the custom form a node would invoke, if it is a call-form."""
	if isinstance(node, Form) and isinstance(node.head, Sym):
		return node.head.name
	return None


def expand_once(
	node: Node, registry: FormRegistry | Mapping[str, ExpansionFn] | None = None
) -> Node:
	"""Expand `node` once if its head is a custom form; otherwise return it unchanged."""
	forms = _lookup_table(registry)
	name = custom_form_name(node)
	if name is None:
		return node
	fn = forms.get(name)
	if fn is None:
		return node
	return fn(*node.args)


def expand(
	node: Node,
	registry: FormRegistry | Mapping[str, ExpansionFn] | None = None,
	max_depth: int = 100,
) -> Node:
	"""Expand the head of `node` until it is no longer a custom form.

	Only the outermost form is expanded; nested forms are left for emission.
	"""
	forms = _lookup_table(registry)
	for _ in range(max_depth):
		expanded = expand_once(node, forms)
		if expanded is node:
			return node
		node = expanded
	raise ExpansionError(
		f"Expansion of {custom_form_name(node)} exceeded depth {max_depth}"
	)


def _lookup_table(
	registry: FormRegistry | Mapping[str, ExpansionFn] | None,
) -> Mapping[str, ExpansionFn]:
	if registry is None:
		return DEFAULT_REGISTRY.snapshot()
	if isinstance(registry, FormRegistry):
		return registry.snapshot()
	return registry
