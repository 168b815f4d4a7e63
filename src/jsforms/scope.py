"""Hoisted variable declarations."""

from __future__ import annotations

STATEMENT_SEPARATOR = ";\n"


class HoistingContext:
	"""Names declared with `var` (or named `fn`) inside one function body.

	Created on entry to each function body and to each top-level `js` call,
	then flushed as a single `var a, b, c;` statement at the top of that body.
	"""

	__slots__: tuple[str, ...] = ("_names", "dedupe")
	_names: list[str]
	dedupe: bool

	def __init__(self, dedupe: bool = True) -> None:
		self._names = []
		self.dedupe = dedupe

	def declare(self, name: str) -> None:
		if self.dedupe and name in self._names:
			return
		self._names.append(name)

	@property
	def names(self) -> tuple[str, ...]:
		return tuple(self._names)

	def __len__(self) -> int:
		return len(self._names)

	def declaration(self) -> str:
		"""The consolidated declaration statement, or "" if nothing was declared."""
		if not self._names:
			return ""
		return "var " + ", ".join(self._names) + STATEMENT_SEPARATOR
