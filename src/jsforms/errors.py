"""Errors raised while building or emitting form trees."""

from __future__ import annotations


class JsFormsError(Exception):
	"""Base class for all jsforms errors."""


class InvalidIdentifier(JsFormsError):
	"""An identifier or keyword does not match the JavaScript identifier grammar."""

	name: str

	def __init__(self, name: str) -> None:
		self.name = name
		super().__init__(f"{name} is not a valid javascript symbol")


class UnsupportedArity(JsFormsError):
	"""An infix operator was given the wrong number of operands."""

	op: str
	count: int

	def __init__(self, op: str, count: int) -> None:
		self.op = op
		self.count = count
		super().__init__(f"operator {op} does not support {count} argument(s)")


class MalformedForm(JsFormsError):
	"""A special form has the wrong shape."""


class MalformedTry(MalformedForm):
	"""A try form is missing catch/finally or repeats one of them."""


class UnknownForm(JsFormsError):
	"""A call-form whose head cannot be classified."""


class ExpansionError(JsFormsError):
	"""Custom-form expansion did not terminate within the configured depth."""


class TemplateError(JsFormsError):
	"""Template holes and supplied values do not line up."""
