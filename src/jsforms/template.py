"""
Tree templates with explicit holes.

A template is an ordinary node tree containing Hole markers. `fill` returns a
copy of the tree with each hole replaced:

	hole()          next positional value
	hole("x")       the keyword value x
	splice()        next positional value, a sequence inserted inline
	splice("body")  the keyword value body, inserted inline

Substituted values are inserted as-is and never scanned for holes, so data
that happens to contain markers stays untouched.

Example:
	tmpl = form("if", hole(), form("do", splice()))
	fill(tmpl, sym("ready"), [form("start"), form("log", "ok")])
	# (if ready (do (start) (log "ok")))
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from jsforms.errors import TemplateError
from jsforms.nodes import Form, MapLit, Node, Sym, Vector, show


@dataclass(frozen=True, slots=True)
class Hole:
	"""Placeholder marker inside a template."""

	name: str | None = None
	splat: bool = False

	def __str__(self) -> str:
		prefix = "~@" if self.splat else "~"
		return prefix + (self.name or "_")


def hole(name: str | None = None) -> Hole:
	return Hole(name)


def splice(name: str | None = None) -> Hole:
	return Hole(name, splat=True)


class _Filler:
	positional: Iterator[Any]
	named: Mapping[str, Any]
	used: int

	def __init__(self, positional: Sequence[Any], named: Mapping[str, Any]) -> None:
		self.positional = iter(positional)
		self.named = named
		self.used = 0

	def value_for(self, h: Hole) -> Any:
		if h.name is not None:
			if h.name not in self.named:
				raise TemplateError(f"No value supplied for hole {h}")
			return self.named[h.name]
		try:
			value = next(self.positional)
		except StopIteration:
			raise TemplateError(
				f"Template has more positional holes than the {self.used} value(s) supplied"
			) from None
		self.used += 1
		return value

	def walk(self, node: Node) -> Node:
		if isinstance(node, Hole):
			if node.splat:
				raise TemplateError(f"{node} can only appear inside a form or vector")
			return self.value_for(node)
		if isinstance(node, Form):
			return Form(self.walk_items(node.items))
		if isinstance(node, Vector):
			return Vector(self.walk_items(node.items))
		if isinstance(node, MapLit):
			return MapLit(tuple((self.walk(k), self.walk(v)) for k, v in node.pairs))
		if isinstance(node, list):
			return list(self.walk_items(node))  # pyright: ignore[reportUnknownArgumentType]
		if isinstance(node, tuple):
			return self.walk_items(node)  # pyright: ignore[reportUnknownArgumentType]
		if isinstance(node, dict):
			return {self.walk(k): self.walk(v) for k, v in node.items()}  # pyright: ignore[reportUnknownVariableType]
		return node

	def walk_items(self, items: Sequence[Node]) -> tuple[Node, ...]:
		out: list[Node] = []
		for item in items:
			if isinstance(item, Hole) and item.splat:
				value = self.value_for(item)
				if isinstance(value, (Form, Vector, list, tuple)):
					out.extend(value)
				else:
					raise TemplateError(
						f"{item} needs a sequence, got {type(value).__name__}: {show(value)}"
					)
			else:
				out.append(self.walk(item))
		return tuple(out)


def fill(template: Node, *values: Any, **named: Any) -> Node:
	"""Substitute template holes: unnamed holes positionally, named holes by keyword.

	Raises TemplateError when positional holes and values differ in number, or
	a named hole has no value.
	"""
	filler = _Filler(values, named)
	result = filler.walk(template)
	if filler.used != len(values):
		raise TemplateError(
			f"Template has {filler.used} positional hole(s) but {len(values)} value(s) were supplied"
		)
	return result


def fragment(*forms: Node) -> Node:
	"""An unemitted fragment: a single form as-is, several wrapped in (do ...)."""
	if len(forms) == 1:
		return forms[0]
	return Form((Sym("do"), *forms))

