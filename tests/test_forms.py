"""
Tests for call-form dispatch: special forms, operators and function calls.
"""

import pytest
from jsforms import (
	SPECIAL_FORMS,
	MalformedForm,
	MalformedTry,
	UnknownForm,
	UnsupportedArity,
	form,
	js,
	kw,
	sym,
	vec,
)
from jsforms.nodes import Form

x = sym("x")
a = sym("a")
b = sym("b")


# =============================================================================
# Function calls and methods
# =============================================================================


class TestCalls:
	"""Test default call emission and method shorthands."""

	def test_plain_call(self):
		assert js(form("alert", "hi")) == 'alert("hi")'

	def test_call_without_args(self):
		assert js(form("foo")) == "foo()"

	def test_call_with_many_args(self):
		assert js(form("foo", 1, "two", None)) == 'foo(1, "two", null)'

	def test_dotted_callee(self):
		assert js(form("console.log", x)) == "console.log(x)"

	def test_funcall(self):
		assert js(form("funcall", sym("f"), 1, 2)) == "f(1, 2)"

	def test_fn_literal_callee_is_parenthesized(self):
		node = Form((form("fn", vec(), form("return", 1)),))
		assert js(node) == "(function () {\nreturn 1;\n })()"

	def test_computed_callee(self):
		node = Form((form("getHandler", sym("evt")), 1))
		assert js(node) == "getHandler(evt)(1)"

	def test_keyword_callee(self):
		assert js(Form((kw("fn"), x))) == "fn(x)"

	def test_namespaced_head(self):
		assert js(form(sym("my.ns/foo"), 1)) == "foo(1)"

	def test_dot_method_shorthand(self):
		assert js(form(".push", sym("arr"), 1)) == "arr.push(1)"

	def test_dot_method_without_args(self):
		assert js(form(".pop", sym("arr"))) == "arr.pop()"

	def test_dot_method_needs_object(self):
		with pytest.raises(MalformedForm):
			js(form(".pop"))

	def test_dot_special_form(self):
		assert js(form(".", sym("obj"), sym("method"), 1, 2)) == "obj.method(1, 2)"

	def test_dotdot(self):
		assert js(form("..", sym("document"), sym("body"), sym("style"))) == (
			"document.body.style"
		)

	def test_new(self):
		assert js(form("new", sym("Date"), 2020, 1)) == "new Date(2020, 1)"
		assert js(form("new", sym("Map"))) == "new Map()"


class TestUnknownForms:
	"""Test shapes that cannot be classified."""

	def test_empty_form(self):
		with pytest.raises(UnknownForm):
			js(Form(()))

	@pytest.mark.parametrize("head", [1, "str", None, vec(1), 2.5])
	def test_literal_head(self, head: object):
		with pytest.raises(UnknownForm):
			js(Form((head, 1)))


# =============================================================================
# Operators
# =============================================================================


class TestOperators:
	"""Test infix, prefix and suffix operator emission."""

	def test_binary(self):
		assert js(form("+", 1, 2)) == "(1 + 2)"
		assert js(form("<", a, b)) == "(a < b)"

	def test_chainable_three_operands(self):
		assert js(form("+", 1, 2, 3)) == "(1 + 2 + 3)"

	@pytest.mark.parametrize("op", ["+", "-", "*", "/", "&", "|", "&&", "||"])
	@pytest.mark.parametrize("count", [2, 3, 5])
	def test_chainable_parenthesized_once(self, op: str, count: int):
		operands = list(range(1, count + 1))
		code = js(form(op, *operands))
		assert code == "(" + f" {op} ".join(str(n) for n in operands) + ")"
		assert code.count("(") == 1
		assert code.count(")") == 1

	def test_non_chainable_rejects_three_operands(self):
		with pytest.raises(UnsupportedArity):
			js(form("%", 1, 2, 3))

	def test_single_operand_rejected(self):
		with pytest.raises(UnsupportedArity):
			js(form("-", x))
		with pytest.raises(UnsupportedArity):
			js(form("<", x))

	@pytest.mark.parametrize(
		("op", "expected"),
		[("=", "==="), ("!=", "!=="), ("not=", "!=="), ("==", "=="), ("===", "===")],
	)
	def test_equality_substitutions(self, op: str, expected: str):
		assert js(form(op, a, b)) == f"(a {expected} b)"

	@pytest.mark.parametrize("op", ["instanceof", "<<<", ">>>", "+=", "-=", "<="])
	def test_passthrough_operators(self, op: str):
		assert js(form(op, a, b)) == f"(a {op} b)"

	def test_nested(self):
		assert js(form("+", form("*", 2, 3), 1)) == "((2 * 3) + 1)"

	def test_prefix_unary(self):
		assert js(form("!", x)) == "!x"
		assert js(form("!", form("=", a, b))) == "!(a === b)"

	def test_suffix_unary(self):
		assert js(form("++", sym("i"))) == "i++"
		assert js(form("--", sym("i"))) == "i--"

	def test_unary_arity(self):
		with pytest.raises(UnsupportedArity):
			js(form("!", a, b))


# =============================================================================
# Expression special forms
# =============================================================================


class TestExpressionForms:
	"""Test special forms that produce expressions."""

	def test_str(self):
		assert js(form("str", "a", b, 1)) == '"a" + b + 1'

	def test_ternary(self):
		assert js(form("?", x, 1, 2)) == "x ? 1 : 2"

	def test_ternary_arity(self):
		with pytest.raises(MalformedForm):
			js(form("?", x, 1))

	def test_and_or(self):
		assert js(form("and", a, b, x)) == "a&&b&&x"
		assert js(form("or", a, b)) == "a||b"

	def test_aget(self):
		assert js(form("aget", a, 1, sym("i"))) == "a[1][i]"
		assert js(form("aget", a, "key")) == 'a["key"]'

	def test_inc_dec(self):
		assert js(form("inc!", x)) == "x++"
		assert js(form("dec!", x)) == "x--"
		assert js(form("inc", x)) == "(x + 1)"
		assert js(form("dec", x)) == "(x - 1)"

	def test_defined(self):
		assert js(form("defined?", x)) == 'typeof x !== "undefined" && x !== null'

	def test_delete(self):
		assert js(form("delete", sym("obj.key"))) == "delete obj.key"

	def test_quote_is_raw_text(self):
		assert js(form("quote", "alert(", 1, ")")) == "alert(1)"
		assert js(form("quote", sym("window"), ".x")) == "window.x"

	def test_quote_skips_validation(self):
		assert js(form("quote", "<not js identifier>")) == "<not js identifier>"


# =============================================================================
# Statement special forms
# =============================================================================


class TestStatementForms:
	"""Test special forms that produce statements and blocks."""

	def test_if(self):
		assert js(form("if", x, form("foo"))) == "if (x) { \nfoo()\n }"

	def test_if_without_else_has_no_else(self):
		code = js(form("if", form("<", a, b), form("return", a)))
		assert code == "if ((a < b)) { \nreturn a;\n\n }"
		assert "else" not in code

	def test_if_else(self):
		assert js(form("if", x, form("foo"), form("bar"))) == (
			"if (x) { \nfoo()\n } else { \nbar()\n }"
		)

	def test_if_arity(self):
		with pytest.raises(MalformedForm):
			js(form("if", x))

	def test_return(self):
		assert js(form("return", form("+", x, 1))) == "return (x + 1);\n"

	def test_bare_return(self):
		assert js(form("return")) == "return null;\n"

	def test_set(self):
		assert js(form("set!", a, 1)) == "a = 1;\n"

	def test_set_multiple_pairs(self):
		assert js(form("set!", a, 1, sym("obj.b"), "x")) == 'a = 1;\nobj.b = "x";\n'

	def test_set_odd_pairs(self):
		with pytest.raises(MalformedForm):
			js(form("set!", a, 1, b))

	def test_do(self):
		assert js(form("do", form("foo"), form("return", 1))) == "foo();\nreturn 1;\n"

	def test_do_does_not_double_terminate(self):
		assert js(form("do", form("set!", a, 1), form("break"))) == "a = 1;\nbreak;\n"

	def test_while(self):
		node = form("while", form("<", sym("i"), 10), form("inc!", sym("i")))
		assert js(node) == "while ((i < 10)) { \ni++;\n\n }"

	def test_doseq(self):
		node = form("doseq", vec(sym("k"), sym("obj")), form("log", sym("k")))
		assert js(node) == "for (k in obj) { \nlog(k);\n\n }"

	def test_doseq_nested_bindings(self):
		node = form(
			"doseq",
			vec(sym("i"), a, sym("j"), b),
			form("log", sym("i"), sym("j")),
		)
		assert js(node) == (
			"for (i in a) { \nfor (j in b) { \nlog(i, j);\n\n }\n }"
		)

	def test_doseq_odd_bindings(self):
		with pytest.raises(MalformedForm):
			js(form("doseq", vec(sym("i")), form("log", sym("i"))))

	def test_break(self):
		assert js(form("break")) == "break;\n"


# =============================================================================
# try / catch / finally
# =============================================================================


class TestTry:
	"""Test try form emission and validation."""

	def test_catch_and_finally(self):
		node = form(
			"try",
			form("foo"),
			form("catch", sym("e"), form("log", sym("e"))),
			form("finally", form("cleanup")),
		)
		assert js(node) == (
			"try{\nfoo();\n}\ncatch(e){\nlog(e);\n}\nfinally{\ncleanup();\n}\n"
		)

	def test_catch_only(self):
		node = form("try", form("foo"), form("catch", sym("err")))
		assert js(node) == "try{\nfoo();\n}\ncatch(err){\n}\n"

	def test_finally_only(self):
		node = form("try", form("foo"), form("finally", form("done")))
		assert js(node) == "try{\nfoo();\n}\nfinally{\ndone();\n}\n"

	def test_no_clauses(self):
		with pytest.raises(MalformedTry, match="catch or finally"):
			js(form("try", form("foo")))

	def test_multiple_catch(self):
		with pytest.raises(MalformedTry):
			js(
				form(
					"try",
					form("foo"),
					form("catch", sym("e")),
					form("catch", sym("f")),
				)
			)

	def test_multiple_finally(self):
		with pytest.raises(MalformedTry):
			js(form("try", form("finally"), form("finally")))

	def test_malformed_try_is_malformed_form(self):
		with pytest.raises(MalformedForm):
			js(form("try"))


def test_special_form_table_is_complete():
	expected = {
		"var",
		"funcall",
		"str",
		".",
		"..",
		"if",
		"return",
		"delete",
		"set!",
		"new",
		"aget",
		"inc!",
		"dec!",
		"inc",
		"dec",
		"defined?",
		"?",
		"and",
		"or",
		"quote",
		"do",
		"while",
		"doseq",
		"fn",
		"function",
		"try",
		"break",
	}
	assert set(SPECIAL_FORMS) == expected
