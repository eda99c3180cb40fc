"""
Built-in command tests

Tests the extraction primitives on raw text and the built-ins as run by
the interpreter, including diagnostics for FUNC_ARG and SIMPLIFY.
"""

import pytest

from docgen.lib.commands import (
    CommandRegistry,
    nextLine_extract,
    funcName_extract,
    funcRet_extract,
    nextDecl_extract,
    funcArgs_extract,
    className_extract,
    nextMacro_extract,
)
from docgen.lib.interpreter import Interpreter
from docgen.lib.textops import whitespace_simplify
from docgen.models.commands import CommandCategory
from docgen.models.source import SourceUnit, DiagnosticKind


def run(tmp_path, text, name="unit.cpp"):
    """Process text as a real source and return the interpreter"""
    interpreter = Interpreter(outputdir=tmp_path)
    interpreter.source_process(SourceUnit(text=text, name=name))
    return interpreter


class TestExtractors:
    """Test the pure extraction functions"""

    def test_next_line(self):
        """Rest of the line after a block comment"""
        text = "/* c */ int y;\nnext"
        assert nextLine_extract(text, 7) == "int y;"

    def test_next_line_after_line_comment(self):
        """After a line comment the following line is taken"""
        text = "// c\nint x = 5;\nmore"
        assert nextLine_extract(text, 4) == "int x = 5;"

    def test_func_name(self):
        """Identifier before the first '('"""
        assert funcName_extract("void foo(){}", 0) == "foo"
        assert funcName_extract("\nint *make_thing(void);", 0) == "make_thing"

    def test_func_name_operator(self):
        """operator names include the operator token"""
        assert funcName_extract(" bool operator==(const A&) const;", 0) == "operator=="

    def test_func_ret(self):
        """Everything before the function name"""
        assert funcRet_extract("\nstatic const char *name_get(int id);", 0) == "static const char *"

    def test_next_decl(self):
        """Declaration up to ; = or {, terminated with ;"""
        assert nextDecl_extract("\nint counter = 0;", 0) == "int counter;"
        assert nextDecl_extract("\nstruct Point {", 0) == "struct Point;"
        assert nextDecl_extract("\nextern int ready;", 0) == "extern int ready;"

    def test_func_args(self):
        """Verbatim parameter list, nested parens kept"""
        assert funcArgs_extract("int add(int a, int (*cb)(int));", 0) == "int a, int (*cb)(int)"

    def test_func_args_without_paren(self):
        """No '(' degrades to empty text"""
        assert funcArgs_extract("int x;", 0) == ""

    def test_class_name(self):
        """Class name before {, : or ;"""
        assert className_extract("\nclass Widget : public Base {", 0) == "Widget"
        assert className_extract("\nstruct Point {", 0) == "Point"
        assert className_extract("\nclass Fwd;", 0) == "Fwd"

    def test_next_macro(self):
        """Macro name and parameters, no replacement body"""
        text = "\n#define MAX(a, b) ((a) > (b) ? (a) : (b))"
        assert nextMacro_extract(text, 0) == "#define MAX(a, b)"

    def test_offset_is_respected(self):
        """Text before end_offset is never looked at"""
        text = "call(x); /* c */ int value;"
        assert funcName_extract(text, 16) == "value"


class TestFuncArg:
    """Test @FUNC_ARG through the interpreter"""

    SOURCE = "/* @DOC @FUNC_ARG({index}) @END */\nvoid f(x, y, z);"

    def test_negative_index(self, tmp_path):
        """-1 selects the last parameter"""
        interpreter = run(tmp_path, self.SOURCE.format(index=-1))
        assert interpreter.sections.main.strip() == "z"
        assert interpreter.diagnostics == []

    def test_first_index(self, tmp_path):
        """0 selects the first parameter"""
        interpreter = run(tmp_path, self.SOURCE.format(index=0))
        assert interpreter.sections.main.strip() == "x"

    def test_out_of_range(self, tmp_path):
        """Out of range index reports and emits nothing"""
        interpreter = run(tmp_path, self.SOURCE.format(index=5))
        assert interpreter.sections.main.strip() == ""
        assert [d.kind for d in interpreter.diagnostics] == [DiagnosticKind.INDEX]

    def test_not_an_integer(self, tmp_path):
        """Non-integer index is an index diagnostic"""
        interpreter = run(tmp_path, self.SOURCE.format(index="two"))
        assert [d.kind for d in interpreter.diagnostics] == [DiagnosticKind.INDEX]

    def test_wrong_arity(self, tmp_path):
        """FUNC_ARG needs exactly one argument"""
        interpreter = run(tmp_path, "/* @DOC @FUNC_ARG(0, 1) @FUNC_ARG @END */ void f(a);")
        assert [d.kind for d in interpreter.diagnostics] == [DiagnosticKind.ARITY, DiagnosticKind.ARITY]
        assert interpreter.sections.main.strip() == ""

    def test_end_to_end_sentence(self, tmp_path):
        """Commands and text mix inside the region"""
        interpreter = run(tmp_path, "/* @DOC @FUNC_NAME takes @FUNC_ARG(0) @END */\nint add(int a, int b)")
        assert whitespace_simplify(interpreter.sections.main) == "add takes int a"


class TestSimplify:
    """Test @SIMPLIFY, @S and the S_ prefix"""

    SOURCE = "/* @DOC {command} @END */ void f(int   a,\n\t int b);"

    def test_whitespace_simplify(self):
        """Whitespace runs collapse to one space, ends trimmed"""
        assert whitespace_simplify("  a   b\n\tc  ") == "a b c"

    def test_simplify_command(self, tmp_path):
        """SIMPLIFY(cmd) simplifies the command's output"""
        interpreter = run(tmp_path, self.SOURCE.format(command="@SIMPLIFY(FUNC_ARGS)"))
        assert interpreter.sections.main.strip() == "int a, int b"

    def test_short_alias_with_arguments(self, tmp_path):
        """S(cmd, args...) forwards the remaining arguments"""
        interpreter = run(tmp_path, self.SOURCE.format(command="@S(FUNC_ARG, 0)"))
        assert interpreter.sections.main.strip() == "int a"

    def test_prefix(self, tmp_path):
        """S_ prefix works on any command"""
        interpreter = run(tmp_path, self.SOURCE.format(command="@S_FUNC_ARGS"))
        assert interpreter.sections.main.strip() == "int a, int b"

    def test_without_arguments(self, tmp_path):
        """SIMPLIFY without a command is an arity diagnostic"""
        interpreter = run(tmp_path, self.SOURCE.format(command="@SIMPLIFY @SIMPLIFY()"))
        assert [d.kind for d in interpreter.diagnostics] == [DiagnosticKind.ARITY, DiagnosticKind.ARITY]


class TestFileName:
    """Test @FILE_NAME"""

    def test_directory_is_stripped(self, tmp_path):
        """Only the file name is emitted"""
        interpreter = run(tmp_path, "// @DOC # @FILE_NAME @END\n", name="src/util/strings.h")
        assert interpreter.sections.main.strip() == "# strings.h"


class TestRegistry:
    """Test CommandRegistry lookups"""

    def test_builtins_registered(self):
        """Every built-in resolves to a handler"""
        registry = CommandRegistry()
        for name in ["SECTION", "NEXT_LINE", "FUNC_NAME", "NEXT_DECL", "FUNC_RET",
                     "FUNC_ARGS", "FUNC_ARG", "CLASS_NAME", "NEXT_MACRO", "FILE_NAME",
                     "SIMPLIFY", "S"]:
            assert registry.get(name) is not None, name

    def test_alias_shares_spec(self):
        """S is registered as an alias of SIMPLIFY"""
        registry = CommandRegistry()
        assert registry.spec_get("S") is registry.spec_get("SIMPLIFY")

    def test_unknown_is_none(self):
        """Unknown names are not built-ins"""
        assert CommandRegistry().get("NOT_A_COMMAND") is None

    def test_list_by_category(self):
        """Aliases are not listed twice"""
        registry = CommandRegistry()
        transforms = registry.commands_listByCategory(CommandCategory.TRANSFORM)
        assert [spec.name for spec in transforms] == ["SIMPLIFY"]
        extraction = {spec.name for spec in registry.commands_listByCategory(CommandCategory.EXTRACTION)}
        assert "FUNC_ARG" in extraction
