"""Operator classification tables."""

from __future__ import annotations

INFIX_OPERATORS: frozenset[str] = frozenset(
	{
		"+",
		"+=",
		"-",
		"-=",
		"/",
		"*",
		"%",
		"==",
		"===",
		"<",
		">",
		"<=",
		">=",
		"!=",
		"<<",
		">>",
		"<<<",
		">>>",
		"!==",
		"&",
		"|",
		"&&",
		"||",
		"=",
		"not=",
		"instanceof",
	}
)

# Infix operators that accept more than two operands: (+ 1 2 3) -> (1 + 2 + 3)
CHAINABLE_OPERATORS: frozenset[str] = frozenset(
	{"+", "-", "*", "/", "&", "|", "&&", "||"}
)

PREFIX_UNARY_OPERATORS: frozenset[str] = frozenset({"!"})

SUFFIX_UNARY_OPERATORS: frozenset[str] = frozenset({"++", "--"})

# Equality aliases, rewritten at emission time
OPERATOR_SUBSTITUTIONS: dict[str, str] = {
	"=": "===",
	"!=": "!==",
	"not=": "!==",
}


def is_infix(op: str) -> bool:
	return op in INFIX_OPERATORS


def is_chainable(op: str) -> bool:
	return op in CHAINABLE_OPERATORS


def is_prefix_unary(op: str) -> bool:
	return op in PREFIX_UNARY_OPERATORS


def is_suffix_unary(op: str) -> bool:
	return op in SUFFIX_UNARY_OPERATORS


def js_operator(op: str) -> str:
	"""Return the JavaScript spelling of an infix operator."""
	return OPERATOR_SUBSTITUTIONS.get(op, op)
