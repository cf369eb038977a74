"""Tests for header rewriting."""

import pytest

from codeflatten.rewriter import HeaderRewriter


@pytest.fixture
def rewriter(make_catalog):
    catalog = make_catalog([
        ("m/Foo.scala", "package m\nobject Foo"),
        ("m/sub/Deep.scala", "package m.sub\nobject Deep"),
        ("lib/Ext.scala", "package lib\nobject Ext"),
    ], external_prefixes=["lib"])
    return HeaderRewriter(catalog)


class TestPackageLines:

    def test_package_clause_removed(self, rewriter):
        assert rewriter.rewrite("package a.b\n\nobject X") == "\nobject X"

    def test_indented_and_chained_package_clauses_removed(self, rewriter):
        text = "package a\n  package b;\nobject X"
        assert rewriter.rewrite(text) == "object X"

    def test_package_object_kept(self, rewriter):
        text = "package object util {\n  val x = 1\n}"
        assert rewriter.rewrite(text) == text

    def test_identifier_starting_with_package_kept(self, rewriter):
        assert rewriter.rewrite("packageName.run()") == "packageName.run()"


class TestImportLines:

    @pytest.mark.parametrize(
        "line",
        [
            "import m.Foo",
            "import m._",
            "import m.*",
            "import m.{Foo, Unknown}",
            "  import m.sub.Deep",
            "import m.Foo // the helper",
            "import\tm.Foo",
        ],
    )
    def test_local_imports_stripped(self, rewriter, line):
        assert rewriter.rewrite(f"{line}\nobject X") == "object X"

    @pytest.mark.parametrize(
        "line",
        [
            "import scala.io.StdIn",
            "import scala.collection.mutable._",
            "import java.util.{List, Map}",
            "import lib.Ext",
            "import lib._",
        ],
    )
    def test_external_imports_kept(self, rewriter, line):
        assert rewriter.rewrite(f"{line}\nobject X") == f"{line}\nobject X"

    def test_unrecognised_import_kept(self, rewriter):
        assert rewriter.rewrite("import m\nobject X") == "import m\nobject X"

    def test_import_text_inside_string_untouched(self, rewriter):
        text = "val s = \"import m.Foo\""
        assert rewriter.rewrite(text) == text


class TestBody:

    def test_other_lines_pass_through_unchanged(self, rewriter):
        text = "object X {\n\n    def f(): Int = 1  \n}\n"
        assert rewriter.rewrite(text) == "object X {\n\n    def f(): Int = 1  \n}"

    def test_crlf_line_endings(self, rewriter):
        assert rewriter.rewrite("package m\r\nimport m.Foo\r\nobject X\r\n") == "object X\r"

    @pytest.mark.parametrize("char", ["\x0c", "\x1c", "\x85", "\u2028", "\u2029"])
    def test_line_break_characters_in_literals_kept(self, rewriter, char):
        text = f'package m\nimport m.Foo\nval s = "a{char}b"\nval t = 1'
        assert rewriter.rewrite(text) == f'val s = "a{char}b"\nval t = 1'

    def test_no_package_line_survives(self, rewriter):
        text = "package a\nimport m._\n\npackage b\nobject X"
        assert not any(line.strip().startswith("package ") for line in rewriter.rewrite(text).splitlines())
