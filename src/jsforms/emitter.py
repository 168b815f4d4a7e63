"""
Form tree -> JavaScript emission.

Emitter walks a tree of nodes (see jsforms.nodes) and produces JavaScript
source text. Atoms are emitted by type; call-forms are dispatched on their
head in this order:

1. `.method` shorthand: (.push arr x) -> arr.push(x)
2. custom forms from the registry snapshot (expanded, then emitted)
3. special forms (SPECIAL_FORMS)
4. infix, prefix-unary and suffix-unary operators
5. plain function call

Declarations made with `var` are collected in the HoistingContext of the
enclosing function body and emitted once, at the top of that body.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Mapping, Sequence
from fractions import Fraction
from types import GeneratorType, MappingProxyType
from typing import TypeAlias

from jsforms.config import EmitConfig
from jsforms.errors import (
	ExpansionError,
	InvalidIdentifier,
	MalformedForm,
	MalformedTry,
	TemplateError,
	UnknownForm,
	UnsupportedArity,
)
from jsforms.macros import DEFAULT_REGISTRY, ExpansionFn, FormRegistry
from jsforms.nodes import Form, Keyword, MapLit, Node, Sym, Vector, show
from jsforms.operators import (
	is_chainable,
	is_infix,
	is_prefix_unary,
	is_suffix_unary,
	js_operator,
)
from jsforms.scope import STATEMENT_SEPARATOR, HoistingContext
from jsforms.template import Hole

logger = logging.getLogger(__name__)

# ASCII only: unicode identifiers are rejected
IDENTIFIER_RE = re.compile(r"[_$A-Za-z][.\w]*", re.ASCII)

SpecialFormFn: TypeAlias = Callable[
	["Emitter", tuple[Node, ...], HoistingContext | None], str
]

# Fixed table of special forms: head name -> handler
SPECIAL_FORMS: dict[str, SpecialFormFn] = {}


def special_form(name: str) -> Callable[[SpecialFormFn], SpecialFormFn]:
	def decorator(fn: SpecialFormFn) -> SpecialFormFn:
		SPECIAL_FORMS[name] = fn
		return fn

	return decorator


def statement(text: str) -> str:
	"""Terminate `text` with `;\\n` unless it already ends with it."""
	if text.endswith(STATEMENT_SEPARATOR):
		return text
	return text + STATEMENT_SEPARATOR


def valid_identifier(name: str) -> bool:
	return IDENTIFIER_RE.fullmatch(name) is not None


class Emitter:
	"""Emit nodes as JavaScript.

	An Emitter works on a snapshot of the custom-form registry taken at
	construction, so it is meant to be created per emission (see `js`).
	The hoisting context is passed explicitly: `scope=None` means no
	function body is active and `var` is emitted inline.
	"""

	forms: Mapping[str, ExpansionFn]
	config: EmitConfig
	_expansion_depth: int

	def __init__(
		self,
		registry: FormRegistry | Mapping[str, ExpansionFn] | None = None,
		config: EmitConfig | None = None,
	) -> None:
		if registry is None:
			registry = DEFAULT_REGISTRY
		if isinstance(registry, FormRegistry):
			self.forms = registry.snapshot()
		else:
			self.forms = MappingProxyType(dict(registry))
		self.config = config or EmitConfig()
		self._expansion_depth = 0

	# --- Entrypoints ---------------------------------------------------------

	def emit_program(self, forms: Sequence[Node]) -> str:
		"""Emit top-level forms in a fresh root scope.

		A single form is emitted as-is; several are emitted as statements.
		The root scope's declaration is prepended.
		"""
		if not forms:
			return ""
		scope = self.new_scope()
		if len(forms) > 1:
			code = self.emit_do(forms, scope)
		else:
			code = self.emit(forms[0], scope)
		return scope.declaration() + code

	def new_scope(self) -> HoistingContext:
		return HoistingContext(dedupe=self.config.dedupe_declarations)

	# --- Values --------------------------------------------------------------

	def emit(self, node: Node, scope: HoistingContext | None = None) -> str:
		"""Emit any node."""
		if node is None:
			return "null"
		# bool before int: bool is a subclass of int
		if isinstance(node, bool):
			return "true" if node else "false"
		if isinstance(node, int):
			return str(node)
		if isinstance(node, (float, Fraction)):
			return str(float(node))
		if isinstance(node, str):
			return '"' + node.replace('"', '\\"') + '"'
		if isinstance(node, (Sym, Keyword)):
			return self.identifier(node)
		if isinstance(node, re.Pattern):
			return "/" + str(node.pattern) + "/"
		if isinstance(node, Form):
			return self.emit_form(node, scope)
		if isinstance(node, (Vector, list, tuple, GeneratorType)):
			return "[" + ", ".join(self.emit(i, scope) for i in node) + "]"  # pyright: ignore[reportUnknownVariableType]
		if isinstance(node, MapLit):
			return self.emit_object(node.pairs, scope)
		if isinstance(node, dict):
			return self.emit_object(node.items(), scope)  # pyright: ignore[reportUnknownArgumentType]
		if isinstance(node, Hole):
			raise TemplateError(f"Unfilled template hole {node}")
		return str(node)

	def identifier(self, ident: Sym | Keyword) -> str:
		"""Validated local name of an identifier (namespace dropped)."""
		if not valid_identifier(ident.name):
			raise InvalidIdentifier(str(ident))
		return ident.name

	def emit_object(
		self, pairs: Iterable[tuple[Node, Node]], scope: HoistingContext | None
	) -> str:
		return (
			"{"
			+ ", ".join(
				f"{self.emit(k, scope)}: {self.emit(v, scope)}" for k, v in pairs
			)
			+ "}"
		)

	# --- Call-forms ----------------------------------------------------------

	def emit_form(self, node: Form, scope: HoistingContext | None) -> str:
		"""Classify a call-form by its head and emit it."""
		if not node.items:
			raise UnknownForm("Cannot emit an empty form: ()")
		head = node.head
		args = node.args

		if isinstance(head, Sym):
			name = head.name
			if len(name) > 1 and name[0] == "." and name[1] != ".":
				if not args:
					raise MalformedForm(f"Method call needs an object: {show(node)}")
				return self.emit_method(args[0], Sym(name[1:]), args[1:], scope)

			fn = self.forms.get(name)
			if fn is not None:
				return self.emit_custom(name, fn, args, scope)

			special = SPECIAL_FORMS.get(name)
			if special is not None:
				return special(self, args, scope)

			if is_infix(name):
				return self.emit_infix(name, args, scope)
			if is_prefix_unary(name):
				_expect_operands(name, args, 1)
				return name + self.emit(args[0], scope)
			if is_suffix_unary(name):
				_expect_operands(name, args, 1)
				return self.emit(args[0], scope) + name
			return self.emit_call(head, args, scope)

		# Computed callee: ((fn [x] ...) 1) or (:key obj)
		if isinstance(head, (Form, Keyword)):
			return self.emit_call(head, args, scope)

		raise UnknownForm(f"invalid form: {show(node)}")

	def emit_custom(
		self,
		name: str,
		fn: ExpansionFn,
		args: tuple[Node, ...],
		scope: HoistingContext | None,
	) -> str:
		if self._expansion_depth >= self.config.max_expansion_depth:
			raise ExpansionError(
				f"Expansion of {name} exceeded depth {self.config.max_expansion_depth}"
			)
		logger.debug("Expanding custom form %s", name)
		expanded = fn(*args)
		self._expansion_depth += 1
		try:
			return self.emit(expanded, scope)
		finally:
			self._expansion_depth -= 1

	def emit_call(
		self, callee: Node, args: Sequence[Node], scope: HoistingContext | None
	) -> str:
		# Function literals must be wrapped to be called: (function () {...})()
		if _is_fn_literal(callee):
			target = "(" + self.emit(callee, scope) + ")"
		else:
			target = self.emit(callee, scope)
		return target + self.comma_list(args, scope)

	def emit_method(
		self,
		obj: Node,
		method: Node,
		args: Sequence[Node],
		scope: HoistingContext | None,
	) -> str:
		return (
			self.emit(obj, scope)
			+ "."
			+ self.emit(method, scope)
			+ self.comma_list(args, scope)
		)

	def emit_infix(
		self, op: str, args: Sequence[Node], scope: HoistingContext | None
	) -> str:
		count = len(args)
		if count < 2 or (count > 2 and not is_chainable(op)):
			raise UnsupportedArity(op, count)
		sep = f" {js_operator(op)} "
		return "(" + sep.join(self.emit(a, scope) for a in args) + ")"

	def comma_list(self, nodes: Iterable[Node], scope: HoistingContext | None) -> str:
		return "(" + ", ".join(self.emit(n, scope) for n in nodes) + ")"

	# --- Statements ----------------------------------------------------------

	def emit_do(self, nodes: Iterable[Node], scope: HoistingContext | None) -> str:
		"""Emit each node as a terminated statement."""
		return "".join(statement(self.emit(n, scope)) for n in nodes)

	def emit_function(
		self,
		name: Sym | None,
		params: Node,
		body: Sequence[Node],
		declaration: bool = False,
	) -> str:
		"""Emit a function literal with its own hoisting scope.

		The name only appears after `function` for declarations.
		"""
		if not isinstance(params, (Vector, list, tuple)):
			raise MalformedForm(
				f"Function parameters must be a vector, got {show(params)}"
			)
		inner = self.new_scope()
		code = self.emit_do(body, inner)
		label = self.identifier(name) if declaration and name is not None else ""
		param_list = ", ".join(self.emit_param(p) for p in params)  # pyright: ignore[reportUnknownVariableType]
		return (
			"function "
			+ label
			+ "("
			+ param_list
			+ ") {\n"
			+ inner.declaration()
			+ code
			+ " }"
		)

	def emit_param(self, param: Node) -> str:
		if not isinstance(param, (Sym, Keyword)):
			raise MalformedForm(f"Function parameter must be a symbol, got {show(param)}")
		return self.identifier(param)


def _is_fn_literal(node: Node) -> bool:
	return (
		isinstance(node, Form)
		and isinstance(node.head, Sym)
		and node.head.name == "fn"
	)


def _expect_operands(op: str, args: Sequence[Node], count: int) -> None:
	if len(args) != count:
		raise UnsupportedArity(op, len(args))


def _expect_args(form_name: str, args: Sequence[Node], count: int) -> None:
	if len(args) != count:
		raise MalformedForm(
			f"{form_name} expects {count} argument(s), got {len(args)}: "
			+ show(Form((Sym(form_name), *args)))
		)


def _raw_text(value: Node) -> str:
	if value is None:
		return ""
	if isinstance(value, bool):
		return "true" if value else "false"
	return str(value)


# =============================================================================
# Special forms
# =============================================================================


@special_form("var")
def _emit_var(em: Emitter, args: tuple[Node, ...], scope: HoistingContext | None) -> str:
	names = args[::2]
	for name in names:
		if not isinstance(name, (Sym, Keyword)):
			raise MalformedForm(f"var expects symbol names, got {show(name)}")
	idents = [em.identifier(n) for n in names]
	if scope is not None:
		for ident in idents:
			scope.declare(ident)

	prefix = "" if scope is not None else "var "
	out: list[str] = []
	for i, ident in enumerate(idents):
		value_idx = 2 * i + 1
		if value_idx < len(args):
			out.append(prefix + ident + " = " + em.emit(args[value_idx], scope))
			out.append(STATEMENT_SEPARATOR)
		elif scope is None:
			out.append("var " + ident + STATEMENT_SEPARATOR)
	return "".join(out)


@special_form("funcall")
def _emit_funcall(
	em: Emitter, args: tuple[Node, ...], scope: HoistingContext | None
) -> str:
	if not args:
		raise MalformedForm("funcall needs a callee")
	return em.emit_call(args[0], args[1:], scope)


@special_form("str")
def _emit_str(em: Emitter, args: tuple[Node, ...], scope: HoistingContext | None) -> str:
	return " + ".join(em.emit(a, scope) for a in args)


@special_form(".")
def _emit_dot(em: Emitter, args: tuple[Node, ...], scope: HoistingContext | None) -> str:
	if len(args) < 2:
		raise MalformedForm(
			"(. obj method ...) needs an object and a method: "
			+ show(Form((Sym("."), *args)))
		)
	return em.emit_method(args[0], args[1], args[2:], scope)


@special_form("..")
def _emit_dotdot(
	em: Emitter, args: tuple[Node, ...], scope: HoistingContext | None
) -> str:
	return ".".join(em.emit(a, scope) for a in args)


@special_form("if")
def _emit_if(em: Emitter, args: tuple[Node, ...], scope: HoistingContext | None) -> str:
	if len(args) not in (2, 3):
		raise MalformedForm(
			"if expects a test, a then branch and an optional else branch: "
			+ show(Form((Sym("if"), *args)))
		)
	out = "if (" + em.emit(args[0], scope) + ") { \n" + em.emit(args[1], scope) + "\n }"
	if len(args) == 3 and args[2] is not None:
		out += " else { \n" + em.emit(args[2], scope) + "\n }"
	return out


@special_form("return")
def _emit_return(
	em: Emitter, args: tuple[Node, ...], scope: HoistingContext | None
) -> str:
	if len(args) > 1:
		_expect_args("return", args, 1)
	value = args[0] if args else None
	return statement("return " + em.emit(value, scope))


@special_form("delete")
def _emit_delete(
	em: Emitter, args: tuple[Node, ...], scope: HoistingContext | None
) -> str:
	_expect_args("delete", args, 1)
	return "delete " + em.emit(args[0], scope)


@special_form("set!")
def _emit_set(em: Emitter, args: tuple[Node, ...], scope: HoistingContext | None) -> str:
	if not args or len(args) % 2:
		raise MalformedForm(
			"set! expects target/value pairs: " + show(Form((Sym("set!"), *args)))
		)
	return "".join(
		em.emit(args[i], scope) + " = " + em.emit(args[i + 1], scope) + STATEMENT_SEPARATOR
		for i in range(0, len(args), 2)
	)


@special_form("new")
def _emit_new(em: Emitter, args: tuple[Node, ...], scope: HoistingContext | None) -> str:
	if not args:
		raise MalformedForm("new needs a constructor")
	return "new " + em.emit(args[0], scope) + em.comma_list(args[1:], scope)


@special_form("aget")
def _emit_aget(em: Emitter, args: tuple[Node, ...], scope: HoistingContext | None) -> str:
	if not args:
		raise MalformedForm("aget needs a target")
	return em.emit(args[0], scope) + "".join(
		"[" + em.emit(i, scope) + "]" for i in args[1:]
	)


@special_form("inc!")
def _emit_inc_bang(
	em: Emitter, args: tuple[Node, ...], scope: HoistingContext | None
) -> str:
	_expect_args("inc!", args, 1)
	return em.emit(args[0], scope) + "++"


@special_form("dec!")
def _emit_dec_bang(
	em: Emitter, args: tuple[Node, ...], scope: HoistingContext | None
) -> str:
	_expect_args("dec!", args, 1)
	return em.emit(args[0], scope) + "--"


@special_form("inc")
def _emit_inc(em: Emitter, args: tuple[Node, ...], scope: HoistingContext | None) -> str:
	_expect_args("inc", args, 1)
	return "(" + em.emit(args[0], scope) + " + 1)"


@special_form("dec")
def _emit_dec(em: Emitter, args: tuple[Node, ...], scope: HoistingContext | None) -> str:
	_expect_args("dec", args, 1)
	return "(" + em.emit(args[0], scope) + " - 1)"


@special_form("defined?")
def _emit_defined(
	em: Emitter, args: tuple[Node, ...], scope: HoistingContext | None
) -> str:
	_expect_args("defined?", args, 1)
	target = em.emit(args[0], scope)
	return f'typeof {target} !== "undefined" && {target} !== null'


@special_form("?")
def _emit_ternary(
	em: Emitter, args: tuple[Node, ...], scope: HoistingContext | None
) -> str:
	_expect_args("?", args, 3)
	test, then, else_ = (em.emit(a, scope) for a in args)
	return f"{test} ? {then} : {else_}"


@special_form("and")
def _emit_and(em: Emitter, args: tuple[Node, ...], scope: HoistingContext | None) -> str:
	return "&&".join(em.emit(a, scope) for a in args)


@special_form("or")
def _emit_or(em: Emitter, args: tuple[Node, ...], scope: HoistingContext | None) -> str:
	return "||".join(em.emit(a, scope) for a in args)


@special_form("quote")
def _emit_quote(
	em: Emitter, args: tuple[Node, ...], scope: HoistingContext | None
) -> str:
	return "".join(_raw_text(a) for a in args)


@special_form("do")
def _emit_do(em: Emitter, args: tuple[Node, ...], scope: HoistingContext | None) -> str:
	return em.emit_do(args, scope)


@special_form("while")
def _emit_while(
	em: Emitter, args: tuple[Node, ...], scope: HoistingContext | None
) -> str:
	if not args:
		raise MalformedForm("while needs a test")
	return "while (" + em.emit(args[0], scope) + ") { \n" + em.emit_do(args[1:], scope) + "\n }"


@special_form("doseq")
def _emit_doseq(
	em: Emitter, args: tuple[Node, ...], scope: HoistingContext | None
) -> str:
	if not args or not isinstance(args[0], (Vector, list, tuple)):
		raise MalformedForm("doseq needs a binding vector")
	bindings = tuple(args[0])  # pyright: ignore[reportUnknownArgumentType]
	if not bindings or len(bindings) % 2:
		raise MalformedForm(
			f"doseq bindings must be name/iterable pairs, got {show(args[0])}"
		)
	return _emit_for_in(em, bindings, args[1:], scope)


def _emit_for_in(
	em: Emitter,
	bindings: tuple[Node, ...],
	body: tuple[Node, ...],
	scope: HoistingContext | None,
) -> str:
	name, iterable, more = bindings[0], bindings[1], bindings[2:]
	inner = _emit_for_in(em, more, body, scope) if more else em.emit_do(body, scope)
	return (
		"for ("
		+ em.emit(name, scope)
		+ " in "
		+ em.emit(iterable, scope)
		+ ") { \n"
		+ inner
		+ "\n }"
	)


@special_form("fn")
def _emit_fn(em: Emitter, args: tuple[Node, ...], scope: HoistingContext | None) -> str:
	if args and isinstance(args[0], Sym):
		name = args[0]
		if len(args) < 2:
			raise MalformedForm(f"fn {name} needs a parameter vector")
		ident = em.identifier(name)
		if scope is not None:
			scope.declare(ident)
			prefix = ""
		else:
			prefix = "var "
		return prefix + ident + " = " + em.emit_function(name, args[1], args[2:])
	if not args:
		raise MalformedForm("fn needs a parameter vector")
	return em.emit_function(None, args[0], args[1:])


@special_form("function")
def _emit_function_decl(
	em: Emitter, args: tuple[Node, ...], scope: HoistingContext | None
) -> str:
	if len(args) < 2 or not isinstance(args[0], Sym):
		raise MalformedForm("function needs a name and a parameter vector")
	return em.emit_function(args[0], args[1], args[2:], declaration=True)


def _clause_name(node: Node) -> str | None:
	if isinstance(node, Form) and isinstance(node.head, Sym):
		if node.head.name in ("catch", "finally"):
			return node.head.name
	return None


@special_form("try")
def _emit_try(em: Emitter, args: tuple[Node, ...], scope: HoistingContext | None) -> str:
	body = [a for a in args if _clause_name(a) is None]
	catches = [a for a in args if _clause_name(a) == "catch"]
	finallies = [a for a in args if _clause_name(a) == "finally"]
	expression = show(Form((Sym("try"), *args)))

	if not catches and not finallies:
		raise MalformedTry(
			"Must supply a catch or finally clause (or both) in a try statement! "
			+ expression
		)
	if len(catches) > 1:
		raise MalformedTry(
			"Multiple catch clauses in a try statement are not currently supported! "
			+ expression
		)
	if len(finallies) > 1:
		raise MalformedTry(
			"Cannot supply more than one finally clause in a try statement! "
			+ expression
		)

	out = "try{\n" + em.emit_do(body, scope) + "}\n"
	if catches:
		clause = catches[0].args
		if not clause:
			raise MalformedTry(f"catch clause needs an exception name: {expression}")
		out += (
			"catch("
			+ em.emit(clause[0], scope)
			+ "){\n"
			+ em.emit_do(clause[1:], scope)
			+ "}\n"
		)
	if finallies:
		out += "finally{\n" + em.emit_do(finallies[0].args, scope) + "}\n"
	return out


@special_form("break")
def _emit_break(
	em: Emitter, args: tuple[Node, ...], scope: HoistingContext | None
) -> str:
	return statement("break")


# =============================================================================
# Public API
# =============================================================================


def js(
	*forms: Node,
	registry: FormRegistry | Mapping[str, ExpansionFn] | None = None,
	config: EmitConfig | None = None,
) -> str:
	"""Translate one or more top-level forms into JavaScript.

	Example:
		js(form("fn", sym("foo"), vec(sym("x")), form("return", sym("x"))))
		# 'var foo;\\nfoo = function (x) {\\nreturn x;\\n }'
	"""
	return Emitter(registry, config).emit_program(forms)
