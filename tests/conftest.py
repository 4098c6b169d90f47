"""Pytest configuration for nsautoload tests."""

import sys

import pytest


class RecordingLoader:
    """Loader double: records probed paths and "loads" only the paths it was given."""

    def __init__(self, existing=()):
        self.existing = set(existing)
        self.probed = []
        self.loaded = []

    def require(self, path, module_name=None):
        self.probed.append(path)
        if path in self.existing:
            self.loaded.append(path)
            return True
        return False


@pytest.fixture
def make_loader():
    """Factory for RecordingLoader doubles."""
    return RecordingLoader


@pytest.fixture
def write_source(tmp_path):
    """Write a source file under tmp_path and return its path as a string."""

    def _write(relative: str, content: str = "") -> str:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return str(path)

    return _write


@pytest.fixture
def isolated_settings(tmp_path, monkeypatch):
    """Point global settings at a fake home and project settings at a fake cwd."""
    home = tmp_path / "home"
    project = tmp_path / "project"
    home.mkdir()
    project.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(project)
    return {"home": home, "project": project}


@pytest.fixture
def clean_modules():
    """Drop modules loaded during a test from sys.modules."""
    before = set(sys.modules)
    yield
    for name in set(sys.modules) - before:
        del sys.modules[name]
