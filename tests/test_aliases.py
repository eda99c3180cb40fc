"""
Alias expansion tests

Tests that aliases behave like their template written inline, only see
the code up to the next comment, nest, and are cut off when they recurse
too deeply.
"""

import pytest

from docgen.config import AppSettings
from docgen.lib.interpreter import Interpreter
from docgen.lib.scanner import comments_scan
from docgen.lib.textops import whitespace_simplify
from docgen.models.source import SourceUnit, CommandInvocation, DiagnosticKind, RecurseIntoUnit


class TestAliasExpansion:
    """Test alias invocation"""

    def test_alias_matches_inline_template(self, tmp_path):
        """@A emits the same text as its template written in place"""
        aliased = Interpreter(outputdir=tmp_path)
        aliased.alias_register("A", "hello @FUNC_NAME")
        aliased.source_process(SourceUnit("/* @DOC @A @END */\nvoid foo(){}", "f.cpp"))

        inline = Interpreter(outputdir=tmp_path)
        inline.source_process(SourceUnit("/* @DOC hello @FUNC_NAME @END */\nvoid foo(){}", "f.cpp"))

        assert inline.sections.main == " hello foo "
        assert aliased.sections.main.strip() == inline.sections.main.strip()

    def test_alias_unit_is_the_inline_region(self, tmp_path):
        """The synthetic unit emits exactly the inline region's text"""
        unit = SourceUnit("/* @DOC @A @END */\nvoid foo(){}", "f.cpp")
        aliased = Interpreter(outputdir=tmp_path)
        aliased.alias_register("A", "hello @FUNC_NAME")
        outcome = aliased.invocation_dispatch(
            CommandInvocation(name="A", arguments=[], comment=comments_scan(unit.text)[0], source=unit)
        )
        aliased.source_process(outcome.unit, real_source=False)

        inline = Interpreter(outputdir=tmp_path)
        inline.source_process(SourceUnit("/* @DOC hello @FUNC_NAME @END */\nvoid foo(){}", "f.cpp"))

        assert aliased.sections.main == inline.sections.main

    def test_alias_stays_on_its_line(self, tmp_path):
        """An alias inside a markdown heading does not break the line"""
        interpreter = Interpreter(outputdir=tmp_path)
        interpreter.alias_register("BRIEF", "@FUNC_NAME")
        interpreter.source_process(SourceUnit("/* @DOC ## @BRIEF @END */ void go(void);\n", "f.c"))
        assert "\n" not in interpreter.sections.main
        assert interpreter.sections.main.split() == ["##", "go"]

    def test_alias_sees_code_up_to_next_comment(self, tmp_path):
        """Code after the next comment is invisible to the alias"""
        interpreter = Interpreter(outputdir=tmp_path)
        interpreter.alias_register("NAME", "@FUNC_NAME")
        interpreter.source_process(SourceUnit(
            "/* @DOC @NAME @END */\nint x;\n// other\nvoid bar();", "f.cpp"
        ))
        assert "bar" not in interpreter.sections.main

    def test_alias_output_in_place(self, tmp_path):
        """Alias output appears between the surrounding text"""
        interpreter = Interpreter(outputdir=tmp_path)
        interpreter.alias_register("NAME", "@FUNC_NAME")
        interpreter.source_process(SourceUnit("/* @DOC [ @NAME ] @END */ int go(void);", "f.c"))
        assert whitespace_simplify(interpreter.sections.main) == "[ go ]"

    def test_nested_aliases(self, tmp_path):
        """Aliases may use other aliases"""
        interpreter = Interpreter(outputdir=tmp_path)
        interpreter.alias_register("A", "hi @FUNC_NAME")
        interpreter.alias_register("B", "@A!")
        interpreter.source_process(SourceUnit("/* @DOC @B @END */ void foo();", "f.c"))
        assert whitespace_simplify(interpreter.sections.main) == "hi foo !"

    def test_section_in_alias_persists_for_comment(self, tmp_path):
        """SECTION inside an alias applies to the rest of the invoking comment"""
        interpreter = Interpreter(outputdir=tmp_path)
        interpreter.alias_register("TO_API", "@SECTION(api)")
        interpreter.source_process(SourceUnit(
            "/* @DOC @TO_API text @END */ /* @DOC later @END */", "f.c"
        ))
        assert interpreter.sections.section_get("api").strip() == "text"
        assert whitespace_simplify(interpreter.sections.main) == "later"

    def test_redefinition_overwrites(self, tmp_path):
        """Registering an alias twice keeps the last template"""
        interpreter = Interpreter(outputdir=tmp_path)
        interpreter.alias_register("A", "one")
        interpreter.alias_register("A", "two")
        interpreter.source_process(SourceUnit("// @DOC @A @END\n", "f.c"))
        assert whitespace_simplify(interpreter.sections.main) == "two"

    def test_dispatch_returns_work_item(self, tmp_path):
        """Alias dispatch produces a synthetic unit, not text"""
        interpreter = Interpreter(outputdir=tmp_path)
        interpreter.alias_register("A", "body")
        unit = SourceUnit("/* @DOC @A @END */ int x; /* next */", "f.c")
        comment = comments_scan(unit.text)[0]
        outcome = interpreter.invocation_dispatch(
            CommandInvocation(name="A", arguments=[], comment=comment, source=unit)
        )
        assert isinstance(outcome, RecurseIntoUnit)
        assert outcome.unit.name == "f.c"
        assert outcome.unit.text == "/* @DOC body @END */ int x; "
        assert outcome.simplify is False


class TestAliasSimplify:
    """Test whitespace simplification of alias output"""

    def test_prefixed_alias(self, tmp_path):
        """@S_NAME collapses the whitespace of everything the alias emits"""
        interpreter = Interpreter(outputdir=tmp_path)
        interpreter.alias_register("A", "a    b\n\n c")
        interpreter.source_process(SourceUnit("// @DOC [@S_A] @END\n", "f.c"))
        assert interpreter.sections.main.strip() == "[a b c]"
        assert interpreter.diagnostics == []

    def test_simplify_command_on_alias(self, tmp_path):
        """@SIMPLIFY(NAME) behaves like the prefix"""
        interpreter = Interpreter(outputdir=tmp_path)
        interpreter.alias_register("A", "a    b\n\n c")
        interpreter.source_process(SourceUnit("// @DOC [@SIMPLIFY(A)] @END\n", "f.c"))
        assert interpreter.sections.main.strip() == "[a b c]"

    def test_nested_aliases_are_collected(self, tmp_path):
        """Output of aliases used inside a simplified alias is part of the block"""
        interpreter = Interpreter(outputdir=tmp_path)
        interpreter.alias_register("A", "a    b\n\n c")
        interpreter.alias_register("B", "x   @A   y")
        interpreter.source_process(SourceUnit("// @DOC [@S_B] @END\n", "f.c"))
        assert interpreter.sections.main.strip() == "[x a b c y]"

    def test_unprefixed_alias_keeps_whitespace(self, tmp_path):
        """Without the prefix alias output is written as is"""
        interpreter = Interpreter(outputdir=tmp_path)
        interpreter.alias_register("A", "a    b")
        interpreter.source_process(SourceUnit("// @DOC [@A] @END\n", "f.c"))
        assert "a    b" in interpreter.sections.main


class TestAliasDepth:
    """Test the alias recursion guard"""

    def test_self_referencing_alias_terminates(self, tmp_path):
        """Runaway recursion stops with a diagnostic"""
        interpreter = Interpreter(outputdir=tmp_path, settings=AppSettings(max_alias_depth=5))
        interpreter.alias_register("LOOP", "x @LOOP")
        interpreter.source_process(SourceUnit("// @DOC @LOOP @END\n", "f.c"))

        assert [d.kind for d in interpreter.diagnostics] == [DiagnosticKind.UNRESOLVED]
        assert whitespace_simplify(interpreter.sections.main) == " ".join(["x"] * 5)
