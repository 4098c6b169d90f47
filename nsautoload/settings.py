r"""Settings management for nsautoload.

Scope-aware YAML settings holding namespace mappings.

Scope priority (most specific wins):
1. local (.nsautoload/settings.local.yaml) - gitignored, machine-specific
2. project (.nsautoload/settings.yaml) - committed, team-shared
3. global (~/.nsautoload/settings.yaml) - user defaults

Example settings file:

    separator: "\\"
    extension: .py
    namespaces:
      App: src/App
      'App\Tests': [tests/overrides, tests/App]
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING
from typing import Any
from typing import Literal

import yaml
from pydantic import ValidationError

from .autoloader import DEFAULT_EXTENSION
from .autoloader import DEFAULT_SEPARATOR
from .autoloader import Autoloader
from .errors import SettingsError
from .models import NamespaceMapping

if TYPE_CHECKING:
    from .hooks import ResolutionHook
    from .loaders import FileLoader

logger = logging.getLogger(__name__)

Scope = Literal["local", "project", "global"]

# Most specific first
SCOPE_ORDER: tuple[Scope, ...] = ("local", "project", "global")


@dataclass
class SettingsPaths:
    """Standard paths for settings files."""

    global_settings: Path
    project_settings: Path
    local_settings: Path

    @classmethod
    def default(cls) -> SettingsPaths:
        """Create default paths for the standard nsautoload layout."""
        return cls(
            global_settings=Path.home() / ".nsautoload" / "settings.yaml",
            project_settings=Path.cwd() / ".nsautoload" / "settings.yaml",
            local_settings=Path.cwd() / ".nsautoload" / "settings.local.yaml",
        )


class AutoloadSettings:
    """Scope-aware settings for namespace mappings.

    Usage:
        settings = AutoloadSettings()
        settings.add_namespace("App", "src/App", scope="project")
        autoloader = build_autoloader(settings)
    """

    def __init__(self, paths: SettingsPaths | None = None) -> None:
        self.paths = paths or SettingsPaths.default()

    # ----- Options -----

    def get_separator(self) -> str:
        return self._get_option("separator", DEFAULT_SEPARATOR)

    def get_extension(self) -> str:
        return self._get_option("extension", DEFAULT_EXTENSION)

    def _get_option(self, key: str, default: str) -> str:
        for scope in SCOPE_ORDER:
            value = self._read_scope(scope).get(key)
            if value:
                return str(value)
        return default

    # ----- Namespace mappings -----

    def get_namespaces(self) -> list[NamespaceMapping]:
        """Merge namespace mappings from all scopes.

        Directories for the same prefix are concatenated with the most
        specific scope first, so local overrides are probed before project
        and global directories.

        Raises:
            SettingsError: A scope has a malformed namespaces section
        """
        separator = self.get_separator()
        merged: dict[str, NamespaceMapping] = {}

        for scope in SCOPE_ORDER:
            for mapping in self.get_scope_namespaces(scope):
                key = mapping.prefix.strip(separator)
                if key in merged:
                    merged[key].directories.extend(mapping.directories)
                else:
                    merged[key] = mapping

        return list(merged.values())

    def get_scope_namespaces(self, scope: Scope) -> list[NamespaceMapping]:
        """Read the namespace mappings of a single scope."""
        section = self._read_scope(scope).get("namespaces") or {}
        path = self._get_scope_path(scope)

        if not isinstance(section, dict):
            raise SettingsError(f"'namespaces' must be a mapping of prefix to directories in {path}", path)

        mappings = []
        for prefix, directories in section.items():
            try:
                mappings.append(NamespaceMapping(prefix=str(prefix), directories=directories))
            except ValidationError as e:
                raise SettingsError(f"Invalid namespace '{prefix}' in {path}: {e}", path) from e
        return mappings

    def add_namespace(self, prefix: str, directory: str, scope: Scope = "project", prepend: bool = False) -> None:
        """Add a directory for a prefix at the specified scope.

        Raises:
            ValueError: The prefix is empty or made only of separators
        """
        separator = self.get_separator()
        if not prefix.strip(separator):
            raise ValueError(f"Namespace prefix {prefix!r} has no segments")
        settings = self._read_scope(scope)
        namespaces = settings.get("namespaces") or {}

        key = self._find_key(namespaces, prefix, separator) or prefix.strip(separator) + separator
        existing = namespaces.get(key) or []
        if isinstance(existing, str):
            existing = [existing]

        namespaces[key] = [directory, *existing] if prepend else [*existing, directory]
        settings["namespaces"] = namespaces
        self._write_scope(scope, settings)

    def remove_namespace(self, prefix: str, scope: Scope = "project") -> bool:
        """Remove all directories for a prefix at the specified scope.

        Returns:
            True if the prefix was present, False otherwise
        """
        settings = self._read_scope(scope)
        namespaces = settings.get("namespaces") or {}

        key = self._find_key(namespaces, prefix, self.get_separator())
        if key is None:
            return False

        del namespaces[key]
        if namespaces:
            settings["namespaces"] = namespaces
        else:
            settings.pop("namespaces", None)
        self._write_scope(scope, settings)
        return True

    @staticmethod
    def _find_key(namespaces: dict[str, Any], prefix: str, separator: str) -> str | None:
        wanted = prefix.strip(separator)
        for key in namespaces:
            if str(key).strip(separator) == wanted:
                return key
        return None

    # ----- Scope utilities -----

    def _get_scope_path(self, scope: Scope) -> Path:
        """Get settings file path for scope."""
        return {
            "local": self.paths.local_settings,
            "project": self.paths.project_settings,
            "global": self.paths.global_settings,
        }[scope]

    def _read_scope(self, scope: Scope) -> dict[str, Any]:
        """Read settings from a specific scope."""
        path = self._get_scope_path(scope)
        if not path.exists():
            return {}
        try:
            with open(path) as f:
                content = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            logger.warning(f"Skipping malformed settings file {path}: {e}")
            return {}
        if not isinstance(content, dict):
            logger.warning(f"Skipping settings file {path}: top level is not a mapping")
            return {}
        return content

    def _write_scope(self, scope: Scope, settings: dict[str, Any]) -> None:
        """Write settings to a specific scope."""
        path = self._get_scope_path(scope)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.safe_dump(settings, f, default_flow_style=False)


def build_autoloader(
    settings: AutoloadSettings | None = None,
    loader: FileLoader | None = None,
    hook: ResolutionHook | None = None,
) -> Autoloader:
    """Create an autoloader with every namespace mapping from settings registered."""
    settings = settings or AutoloadSettings()
    autoloader = Autoloader(
        loader=loader,
        hook=hook,
        separator=settings.get_separator(),
        extension=settings.get_extension(),
    )
    for mapping in settings.get_namespaces():
        for directory in mapping.directories:
            try:
                autoloader.add_namespace(mapping.prefix, directory)
            except ValueError as e:
                raise SettingsError(f"Invalid namespace in settings: {e}") from e

    logger.debug(f"Built autoloader with {len(autoloader.prefixes)} prefixes from settings")
    return autoloader
