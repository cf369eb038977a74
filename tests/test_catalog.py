"""Tests for the source catalog."""

import logging

import pytest

from codeflatten.catalog import Catalog


class TestBuild:

    def test_indexes_modules_and_symbols(self, make_catalog):
        catalog = make_catalog([
            ("src/a/Foo.scala", "package a\n\ncase class Foo(x: Int)\nobject FooOps"),
            ("src/a/Bar.scala", "package a\n\ntrait Bar"),
            ("src/Main.scala", "object Main"),
        ])

        assert len(catalog) == 3
        assert [f.path for f in catalog.module_index["a"]] == ["src/a/Foo.scala", "src/a/Bar.scala"]
        assert catalog.resolve_symbol("Foo").path == "src/a/Foo.scala"
        assert catalog.resolve_symbol("FooOps").path == "src/a/Foo.scala"
        assert catalog.resolve_symbol("Main").module is None
        assert catalog.resolve_symbol("Missing") is None

    def test_paths_are_normalised(self, make_catalog):
        catalog = make_catalog([("src\\a\\Foo.scala", "object Foo")])
        assert catalog.get("src/a/Foo.scala") is not None
        assert catalog.get("src\\a\\Foo.scala").name == "Foo.scala"

    def test_duplicate_paths_indexed_once(self, make_catalog):
        catalog = make_catalog([("A.scala", "object A"), ("A.scala", "object B")])
        assert len(catalog) == 1
        assert catalog.resolve_symbol("B") is None

    def test_collision_last_wins_and_is_logged(self, make_catalog, caplog):
        with caplog.at_level(logging.WARNING, logger="codeflatten"):
            catalog = make_catalog([
                ("one/Util.scala", "package one\nobject Util"),
                ("two/Util.scala", "package two\nobject Util"),
            ])

        assert catalog.resolve_symbol("Util").path == "two/Util.scala"
        assert catalog.collisions["Util"] == ("one/Util.scala", "two/Util.scala")
        assert "Symbol Util is defined in 2 files" in caplog.text

    def test_indexes_are_read_only(self, make_catalog):
        catalog = make_catalog([("A.scala", "object A")])
        with pytest.raises(TypeError):
            catalog.symbol_index["B"] = catalog.files[0]

    def test_empty_pool(self):
        catalog = Catalog.build([])
        assert len(catalog) == 0
        assert catalog.modules_matching("a") == ()


class TestModulesMatching:

    @pytest.fixture
    def catalog(self, make_catalog):
        return make_catalog([
            ("ab.scala", "package a.b\nobject AB"),
            ("abc.scala", "package a.b.c\nobject ABC"),
            ("ac.scala", "package a.c\nobject AC"),
            ("abx.scala", "package a.bc\nobject ABX"),
        ])

    def test_prefix_includes_descendants(self, catalog):
        assert [f.path for f in catalog.modules_matching("a.b")] == ["ab.scala", "abc.scala"]

    def test_prefix_match_is_dotted(self, catalog):
        assert "abx.scala" not in [f.path for f in catalog.modules_matching("a.b")]

    def test_root_prefix(self, catalog):
        assert len(catalog.modules_matching("a")) == 4

    def test_no_match(self, catalog):
        assert catalog.modules_matching("zzz") == ()

    def test_external_prefix_never_matches(self, make_catalog):
        catalog = make_catalog([("s.scala", "package scala.extra\nobject S")], external_prefixes=["scala"])
        assert catalog.modules_matching("scala.extra") == ()


class TestSameModuleDefiner:

    def test_finds_sibling(self, make_catalog):
        catalog = make_catalog([
            ("p/Main.scala", "package p\nobject Main"),
            ("p/Helper.scala", "package p\nobject Helper"),
        ])
        main = catalog.get("p/Main.scala")
        assert catalog.same_module_definer(main, "Helper").path == "p/Helper.scala"

    def test_ignores_other_modules(self, make_catalog):
        catalog = make_catalog([
            ("p/Main.scala", "package p\nobject Main"),
            ("q/Helper.scala", "package q\nobject Helper"),
        ])
        main = catalog.get("p/Main.scala")
        assert catalog.same_module_definer(main, "Helper") is None

    def test_never_returns_self(self, make_catalog):
        catalog = make_catalog([("p/Main.scala", "package p\nobject Main")])
        main = catalog.get("p/Main.scala")
        assert catalog.same_module_definer(main, "Main") is None

    def test_file_without_module_has_no_siblings(self, make_catalog):
        catalog = make_catalog([("Main.scala", "object Main"), ("Helper.scala", "object Helper")])
        assert catalog.same_module_definer(catalog.get("Main.scala"), "Helper") is None

    def test_last_definer_wins(self, make_catalog):
        catalog = make_catalog([
            ("p/Main.scala", "package p\nobject Main"),
            ("p/A.scala", "package p\nobject Shared"),
            ("p/B.scala", "package p\nobject Shared"),
        ])
        main = catalog.get("p/Main.scala")
        assert catalog.same_module_definer(main, "Shared").path == "p/B.scala"
