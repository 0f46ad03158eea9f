"""
Tests for builtin, user and configured source modules.
"""

import pytest

from cmdweave.cli.commands import DEFAULT_MODULE_ID, default_module
from cmdweave.cli.commands.loader import (
    as_source_module,
    discover_modules,
    load_configured_modules,
    load_module,
    load_module_spec,
    load_user_modules,
)
from cmdweave.core import (
    DiagnosticKind,
    ModuleBuilder,
    ModuleLoadError,
    SourceModule,
    build_registry,
)

VALID_MODULE = '''
from cmdweave import ModuleBuilder

module = ModuleBuilder("{id}", author="Tester")

@module.command("{id}.hello", "Say hello")
def hello(args, ctx):
    return "hello from {id}"
'''


def _write_module(root, dirname, source):
    module_dir = root / dirname
    module_dir.mkdir()
    (module_dir / "__init__.py").write_text(source)
    return module_dir / "__init__.py"


class TestModuleDiscovery:
    """Tests for module discovery."""

    def test_discover_nonexistent_dir(self, tmp_path):
        assert discover_modules(tmp_path / "nonexistent") == []

    def test_discover_empty_dir(self, tmp_path):
        assert discover_modules(tmp_path) == []

    def test_discover_sorted(self, tmp_path):
        for name in ["mod_c", "mod_a", "mod_b"]:
            _write_module(tmp_path, name, "# module")

        paths = discover_modules(tmp_path)
        assert [p.parent.name for p in paths] == ["mod_a", "mod_b", "mod_c"]

    def test_skip_hidden_and_private(self, tmp_path):
        _write_module(tmp_path, ".hidden", "# module")
        _write_module(tmp_path, "_private", "# module")
        _write_module(tmp_path, "public", "# module")

        paths = discover_modules(tmp_path)
        assert [p.parent.name for p in paths] == ["public"]

    def test_skip_dirs_without_init(self, tmp_path):
        (tmp_path / "no_init").mkdir()
        (tmp_path / "loose.py").write_text("# file")
        assert discover_modules(tmp_path) == []

    def test_path_is_file(self, tmp_path):
        path = tmp_path / "file.txt"
        path.write_text("x")
        assert discover_modules(path) == []


class TestLoadModule:
    """Tests for loading a single user module."""

    def test_load_valid_module(self, tmp_path):
        path = _write_module(tmp_path, "greet", VALID_MODULE.format(id="greet"))

        name, module, error = load_module(path, prefix="cmdweave_test_valid")
        assert name == "greet"
        assert error == ""
        assert isinstance(module, SourceModule)
        assert module.id == "greet"
        assert module.command_names() == ["greet.hello"]
        assert module.metadata == {"author": "Tester"}

    def test_missing_module_attribute(self, tmp_path):
        path = _write_module(tmp_path, "empty", "x = 1\n")

        name, module, error = load_module(path, prefix="cmdweave_test_missing")
        assert module is None
        assert "No 'module' attribute defined" in error

    def test_syntax_error(self, tmp_path):
        path = _write_module(tmp_path, "broken", "def oops(:\n")

        _, module, error = load_module(path, prefix="cmdweave_test_syntax")
        assert module is None
        assert error.startswith("Syntax error")

    def test_import_error(self, tmp_path):
        path = _write_module(tmp_path, "needs", "import cmdweave_no_such_package\n")

        _, module, error = load_module(path, prefix="cmdweave_test_import")
        assert module is None
        assert error.startswith("Import error")

    def test_wrong_module_type(self, tmp_path):
        path = _write_module(tmp_path, "wrong", "module = 42\n")

        _, module, error = load_module(path, prefix="cmdweave_test_wrong")
        assert module is None
        assert "expected SourceModule or ModuleBuilder" in error


class TestLoadUserModules:
    """Tests for loading the whole user modules directory."""

    def test_loads_good_skips_bad(self, tmp_path):
        _write_module(tmp_path, "alpha", VALID_MODULE.format(id="alpha"))
        _write_module(tmp_path, "broken", "def oops(:\n")
        _write_module(tmp_path, "beta", VALID_MODULE.format(id="beta"))

        modules = load_user_modules(tmp_path)
        assert [m.id for m in modules] == ["alpha", "beta"]

    def test_missing_dir(self, tmp_path):
        assert load_user_modules(tmp_path / "missing") == []

    def test_user_module_overrides_default(self, tmp_path):
        source = '''
from cmdweave import ModuleBuilder

module = ModuleBuilder("override")
module.add("about", lambda args, ctx: "custom about")
'''
        _write_module(tmp_path, "override", source)
        registry, diagnostics = build_registry([default_module(), *load_user_modules(tmp_path)])

        assert registry.get("about").declared_in == "override"
        assert [d.kind for d in diagnostics] == [DiagnosticKind.DUPLICATE_COMMAND_NAME]


class TestModuleSpecs:
    """Tests for "package.module:attribute" specs."""

    @pytest.mark.parametrize("spec", ["no_colon", ":attr", "pkg.mod:"])
    def test_invalid_spec(self, spec):
        with pytest.raises(ModuleLoadError, match="Invalid module spec"):
            load_module_spec(spec)

    def test_unknown_package(self):
        with pytest.raises(ModuleLoadError, match="Cannot import"):
            load_module_spec("cmdweave_no_such_package:module")

    def test_unknown_attribute(self):
        with pytest.raises(ModuleLoadError, match="has no attribute"):
            load_module_spec("cmdweave.cli.commands:no_such_attribute")

    def test_builder_attribute(self):
        module = load_module_spec("cmdweave.cli.commands.registry:default_commands")
        assert module.id == DEFAULT_MODULE_ID

    def test_factory_attribute(self):
        module = load_module_spec("cmdweave.cli.commands:default_module")
        assert module.id == DEFAULT_MODULE_ID
        assert "sys.info" in module.command_names()

    def test_module_from_path(self, tmp_path, monkeypatch):
        (tmp_path / "cmdweave_test_extra.py").write_text(VALID_MODULE.format(id="extra"))
        monkeypatch.syspath_prepend(str(tmp_path))

        module = load_module_spec("cmdweave_test_extra:module")
        assert module.command_names() == ["extra.hello"]

    def test_load_configured_skips_failures(self):
        modules = load_configured_modules([
            "cmdweave.cli.commands:default_module",
            "not a spec",
        ])
        assert [m.id for m in modules] == [DEFAULT_MODULE_ID]

    def test_default_module_twice_is_rejected(self):
        """Naming the default module as an extra module drops both copies."""
        extra = load_configured_modules(["cmdweave.cli.commands:default_module"])
        registry, diagnostics = build_registry([default_module(), *extra])

        assert len(registry) == 0
        assert "sys.info" not in registry
        assert [d.kind for d in diagnostics] == [DiagnosticKind.DUPLICATE_SOURCE_MODULE]
        assert diagnostics[0].subject == DEFAULT_MODULE_ID


class TestDefaultModule:
    """Tests for the builtin default module."""

    def test_builtin_commands(self):
        names = default_module().command_names()
        for name in [
            "about", "help", "cli.status", "cli.debug", "cli.script", "sys.info", "sys.cmd",
            "dbg.echo", "config.list", "config.get", "config.set",
            "config.unset", "config.reset",
        ]:
            assert name in names

    def test_loading_twice_is_stable(self):
        assert default_module() == default_module()

    def test_metadata(self):
        registry, diagnostics = build_registry([default_module()])
        assert diagnostics == []
        assert registry.config["name"] == "cmdweave"
        assert "dbg.echo" not in registry.visible_names()

    def test_as_source_module_rejects_other_types(self):
        with pytest.raises(ModuleLoadError):
            as_source_module("nope", "origin")

    def test_as_source_module_builds_builders(self):
        builder = ModuleBuilder("b")
        builder.add("x", lambda args, ctx: None)
        assert as_source_module(builder, "origin").command_names() == ["x"]
