"""
Form tree data model.

A tree is made of:
- atoms: None, bool, int, float, Fraction, str, Sym, Keyword, re.Pattern
  (anything else passes through as str(value))
- Form: a call-form, interpreted by its head
- Vector: always an array literal
- MapLit: always an object literal

All node classes are frozen; the emitter never mutates a tree.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any, TypeAlias

Node: TypeAlias = Any


# =============================================================================
# Identifiers
# =============================================================================


def _split_ns(name: str) -> tuple[str | None, str]:
	# "core//" -> ("core", "/"), "/" -> (None, "/")
	if len(name) > 1 and "/" in name[1:]:
		ns, _, local = name.partition("/")
		if ns and local:
			return ns, local
	return None, name


@dataclass(frozen=True, slots=True)
class Sym:
	"""An identifier: x, console.log, +, .push

	`ns` is an optional namespace qualifier. Only `name` is ever emitted.
	"""

	name: str
	ns: str | None = None

	def __str__(self) -> str:
		return self.name if self.ns is None else f"{self.ns}/{self.name}"


@dataclass(frozen=True, slots=True)
class Keyword:
	"""A quoted identifier, typically used as an object key: {foo: 1}"""

	name: str
	ns: str | None = None

	def __str__(self) -> str:
		if self.ns is None:
			return f":{self.name}"
		return f":{self.ns}/{self.name}"


# =============================================================================
# Composite nodes
# =============================================================================


@dataclass(frozen=True, slots=True)
class Form:
	"""A call-form: (head arg1 arg2 ...)

	The head decides the interpretation: special form, operator, custom form,
	method shorthand or plain function call.
	"""

	items: tuple[Node, ...]

	@property
	def head(self) -> Node:
		return self.items[0] if self.items else None

	@property
	def args(self) -> tuple[Node, ...]:
		return self.items[1:]

	def __len__(self) -> int:
		return len(self.items)

	def __iter__(self) -> Iterator[Node]:
		return iter(self.items)

	def __str__(self) -> str:
		return "(" + " ".join(show(i) for i in self.items) + ")"


@dataclass(frozen=True, slots=True)
class Vector:
	"""An array literal: [a, b, c]. Never interpreted as a call."""

	items: tuple[Node, ...]

	def __len__(self) -> int:
		return len(self.items)

	def __iter__(self) -> Iterator[Node]:
		return iter(self.items)

	def __str__(self) -> str:
		return "[" + " ".join(show(i) for i in self.items) + "]"


@dataclass(frozen=True, slots=True)
class MapLit:
	"""An object literal: {k: v}. Pairs keep their insertion order."""

	pairs: tuple[tuple[Node, Node], ...]

	def __len__(self) -> int:
		return len(self.pairs)

	def __str__(self) -> str:
		return "{" + ", ".join(f"{show(k)} {show(v)}" for k, v in self.pairs) + "}"


# =============================================================================
# Builders
# =============================================================================


def sym(name: str) -> Sym:
	"""Build an identifier. "ns/name" is split into namespace and local name."""
	ns, local = _split_ns(name)
	return Sym(local, ns)


def kw(name: str) -> Keyword:
	"""Build a quoted identifier."""
	ns, local = _split_ns(name)
	return Keyword(local, ns)


def form(head: Node, *args: Node) -> Form:
	"""Build a call-form. A str head is taken as an identifier, not a string.

	Example:
		form("+", 1, 2)                         # (+ 1 2)
		form("fn", vec(sym("x")), form("return", sym("x")))
	"""
	if isinstance(head, str):
		head = sym(head)
	return Form((head, *args))


def vec(*items: Node) -> Vector:
	"""Build an array literal."""
	return Vector(tuple(items))


def obj(
	props: Mapping[Node, Node] | Iterable[tuple[Node, Node]] = (), /, **kwargs: Node
) -> MapLit:
	"""Build an object literal from a mapping, pairs, or keyword arguments.

	Keyword arguments become Keyword keys, so obj(a=1) emits {a: 1}.
	"""
	items = props.items() if isinstance(props, Mapping) else props
	pairs = [(k, v) for k, v in items]
	pairs.extend((kw(k), v) for k, v in kwargs.items())
	return MapLit(tuple(pairs))


def show(node: Node) -> str:
	"""Render a node in prefix notation, for error messages."""
	if node is None:
		return "nil"
	if isinstance(node, bool):
		return "true" if node else "false"
	if isinstance(node, str):
		return '"' + node + '"'
	if isinstance(node, re.Pattern):
		return f'#"{node.pattern}"'
	if isinstance(node, (list, tuple)):
		return "[" + " ".join(show(i) for i in node) + "]"  # pyright: ignore[reportUnknownVariableType, reportUnknownArgumentType]
	if isinstance(node, dict):
		return "{" + ", ".join(f"{show(k)} {show(v)}" for k, v in node.items()) + "}"  # pyright: ignore[reportUnknownVariableType, reportUnknownArgumentType]
	return str(node)
