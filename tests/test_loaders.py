"""Tests for file loaders."""

import importlib.util
import sys
from types import ModuleType

import pytest
from nsautoload.autoloader import Autoloader
from nsautoload.loaders import ModuleFileLoader
from nsautoload.loaders import ProbeRecorder


@pytest.mark.usefixtures("clean_modules")
class TestModuleFileLoader:
    def test_missing_file_returns_false(self, tmp_path):
        loader = ModuleFileLoader()

        assert loader.require(str(tmp_path / "Nope.py"), "nsautoload_test.Nope") is False
        assert "nsautoload_test.Nope" not in sys.modules
        assert loader.loaded == {}

    def test_directory_is_not_a_file(self, tmp_path):
        (tmp_path / "Pkg.py").mkdir()

        assert ModuleFileLoader().require(str(tmp_path / "Pkg.py")) is False

    def test_executes_file_as_named_module(self, write_source):
        path = write_source("App/User.py", "class User:\n    table = 'users'\n")
        loader = ModuleFileLoader()

        assert loader.require(path, "nsautoload_test.App.User") is True

        module = sys.modules["nsautoload_test.App.User"]
        assert module.User.table == "users"
        assert module.__file__ == path
        assert loader.loaded[path] is module

    def test_derives_module_name_from_path(self, write_source):
        path = write_source("lib/Helper.py", "VALUE = 42\n")
        loader = ModuleFileLoader()

        assert loader.require(path) is True

        name = ModuleFileLoader.module_name_for(path)
        assert name.startswith("_nsautoload_")
        assert name.endswith("_Helper")
        assert sys.modules[name].VALUE == 42

    def test_loads_non_py_extension(self, write_source):
        path = write_source("legacy/Thing.inc", "NAME = 'thing'\n")

        assert ModuleFileLoader().require(path, "nsautoload_test.Thing") is True
        assert sys.modules["nsautoload_test.Thing"].NAME == "thing"

    def test_syntax_error_propagates_and_cleans_up(self, write_source):
        path = write_source("App/Broken.py", "class Broken(:\n")
        loader = ModuleFileLoader()

        with pytest.raises(SyntaxError):
            loader.require(path, "nsautoload_test.App.Broken")

        assert "nsautoload_test.App.Broken" not in sys.modules
        assert loader.loaded == {}

    def test_runtime_error_propagates(self, write_source):
        path = write_source("App/Exploding.py", "raise RuntimeError('boom')\n")

        with pytest.raises(RuntimeError, match="boom"):
            ModuleFileLoader().require(path, "nsautoload_test.App.Exploding")
        assert "nsautoload_test.App.Exploding" not in sys.modules

    def test_failure_keeps_earlier_module_of_same_name(self, write_source):
        path = write_source("App/User.py", "raise RuntimeError('second copy')\n")
        earlier = ModuleType("nsautoload_test.App.User")
        sys.modules["nsautoload_test.App.User"] = earlier

        with pytest.raises(RuntimeError, match="second copy"):
            ModuleFileLoader().require(path, "nsautoload_test.App.User")

        assert sys.modules["nsautoload_test.App.User"] is earlier

    def test_missing_spec_raises_import_error(self, write_source, monkeypatch):
        path = write_source("App/User.py", "NAME = 'user'\n")
        monkeypatch.setattr(importlib.util, "spec_from_file_location", lambda *args, **kwargs: None)

        with pytest.raises(ImportError, match="Cannot load"):
            ModuleFileLoader().require(path, "nsautoload_test.App.User")
        assert "nsautoload_test.App.User" not in sys.modules


@pytest.mark.usefixtures("clean_modules")
class TestAutoloaderWithModuleFileLoader:
    def test_scenario_single_mapping(self, write_source, tmp_path):
        write_source("src/App/Model/User.py", "LOADS = []\nLOADS.append(1)\n")
        loader = ModuleFileLoader()
        autoloader = Autoloader(loader=loader)
        autoloader.add_namespace("App\\", tmp_path / "src" / "App")

        assert autoloader.load_class("App\\Model\\User") is True

        module = sys.modules["App.Model.User"]
        assert module.LOADS == [1]
        assert len(loader.loaded) == 1

    def test_scenario_prepended_legacy_fallback(self, write_source, tmp_path):
        write_source("src/App/User.py", "ORIGIN = 'src'\n")
        autoloader = Autoloader(loader=ModuleFileLoader())
        autoloader.add_namespace("App\\", f"{tmp_path}/src/App/")
        autoloader.add_namespace("App\\", f"{tmp_path}/legacy/", prepend=True)

        assert autoloader.load_class("App\\User") is True
        assert sys.modules["App.User"].ORIGIN == "src"

    def test_load_failure_propagates_through_autoloader(self, write_source, tmp_path):
        write_source("src/Broken.py", "def broken(:\n")
        autoloader = Autoloader(loader=ModuleFileLoader())
        autoloader.add_namespace("App", tmp_path / "src")

        with pytest.raises(SyntaxError):
            autoloader.load_class("App\\Broken")

    def test_broken_file_does_not_evict_imported_module(self, write_source, tmp_path):
        import json.decoder

        write_source("src/decoder.py", "def broken(:\n")
        autoloader = Autoloader(loader=ModuleFileLoader())
        autoloader.add_namespace("json", tmp_path / "src")

        with pytest.raises(SyntaxError):
            autoloader.load_class("json\\decoder")

        assert sys.modules["json.decoder"] is json.decoder


class TestProbeRecorder:
    def test_dry_run_checks_existence_without_executing(self, write_source, tmp_path):
        path = write_source("src/User.py", "raise RuntimeError('must not run')\n")
        recorder = ProbeRecorder()

        assert recorder.require(str(tmp_path / "src" / "Post.py")) is False
        assert recorder.require(path) is True
        assert recorder.attempts == [(str(tmp_path / "src" / "Post.py"), False), (path, True)]

    def test_forwards_to_inner_loader(self, make_loader):
        inner = make_loader(existing={"/src/User.py"})
        recorder = ProbeRecorder(inner=inner)

        assert recorder.require("/src/Post.py") is False
        assert recorder.require("/src/User.py", "App.User") is True
        assert inner.loaded == ["/src/User.py"]
        assert recorder.probed == ["/src/Post.py", "/src/User.py"]

    def test_clear(self):
        recorder = ProbeRecorder()
        recorder.require("/does/not/exist.py")
        recorder.clear()

        assert recorder.attempts == []
        assert recorder.nested == []

    def test_nested_probes_kept_apart(self, make_loader):
        inner = make_loader(existing={"/src/User.py", "/src/Base.py"})
        recorder = ProbeRecorder(inner=inner)
        original_require = inner.require

        def require(path, module_name=None):
            if path == "/src/User.py":
                recorder.require("/src/Base.py", "App.Base")
            return original_require(path, module_name)

        inner.require = require

        assert recorder.require("/src/User.py", "App.User") is True
        assert recorder.attempts == [("/src/User.py", True)]
        assert recorder.nested == [("/src/Base.py", True)]
