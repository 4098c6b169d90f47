"""Namespace prefix autoloader.

Maps fully-qualified symbol names (``App\\Model\\User``) to source files by
walking the symbol's namespace from the deepest prefix to the shallowest and
probing every base directory registered for a matching prefix.

Resolution order (first successful load wins):
1. Deepest registered prefix (``App\\Model\\`` before ``App\\``)
2. Within a prefix, base directories in registration order
   (``prepend=True`` registrations go first)
"""

from __future__ import annotations

import logging
import os
from types import MappingProxyType
from typing import TYPE_CHECKING

from .loaders import ModuleFileLoader

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .hooks import ResolutionHook
    from .loaders import FileLoader

logger = logging.getLogger(__name__)

DEFAULT_SEPARATOR = "\\"
DEFAULT_EXTENSION = ".py"


class Autoloader:
    """Resolves symbol names to files through registered namespace prefixes.

    Usage:
        autoloader = Autoloader()
        autoloader.add_namespace("App", "/src/App")
        autoloader.register()
        autoloader.load_class("App\\Model\\User")  # loads /src/App/Model/User.py
    """

    def __init__(
        self,
        loader: FileLoader | None = None,
        hook: ResolutionHook | None = None,
        separator: str = DEFAULT_SEPARATOR,
        extension: str = DEFAULT_EXTENSION,
    ) -> None:
        """Initialize autoloader with an empty prefix table.

        Args:
            loader: File loader used to probe candidate files (default: ModuleFileLoader)
            hook: Resolution chain used by register()/unregister() (default: process-wide stack)
            separator: Namespace separator used in prefixes and symbol names
            extension: Source file extension appended to every candidate path
        """
        if not separator:
            raise ValueError("Namespace separator must be a non-empty string")

        self.loader = loader if loader is not None else ModuleFileLoader()
        self.separator = separator
        self.extension = extension if extension.startswith(".") else f".{extension}"
        self._hook = hook
        self._prefixes: dict[str, list[str]] = {}

    @property
    def hook(self) -> ResolutionHook:
        """Resolution chain this autoloader registers itself on."""
        if self._hook is None:
            from .hooks import get_default_stack

            self._hook = get_default_stack()
        return self._hook

    @property
    def prefixes(self) -> Mapping[str, tuple[str, ...]]:
        """Read-only snapshot of the prefix table."""
        return MappingProxyType({prefix: tuple(dirs) for prefix, dirs in self._prefixes.items()})

    # ----- Hook registration -----

    def register(self, prepend: bool = True) -> None:
        """Install load_class on the resolution chain, ahead of earlier loaders."""
        self.hook.register(self.load_class, prepend=prepend)

    def unregister(self) -> None:
        """Remove load_class from the resolution chain."""
        self.hook.unregister(self.load_class)

    # ----- Prefix table -----

    def add_namespace(self, prefix: str, base_directory: str | os.PathLike[str], prepend: bool = False) -> None:
        """Add a base directory for a namespace prefix.

        Args:
            prefix: Namespace prefix (leading/trailing separators are ignored)
            base_directory: Directory holding the files for the prefix
            prepend: Probe this directory before those already registered

        Raises:
            ValueError: The prefix is empty or made only of separators
        """
        prefix = self.normalize_prefix(prefix)
        base_directory = self.normalize_directory(base_directory)

        directories = self._prefixes.setdefault(prefix, [])
        if prepend:
            directories.insert(0, base_directory)
        else:
            directories.append(base_directory)

        logger.debug(f"[autoload:namespace] {prefix} -> {base_directory} (prepend={prepend})")

    def normalize_prefix(self, prefix: str) -> str:
        """Strip surrounding separators and append exactly one.

        Raises:
            ValueError: The prefix has no segments (empty or only separators)
        """
        stripped = prefix.strip(self.separator)
        if not stripped:
            raise ValueError(f"Namespace prefix {prefix!r} has no segments")
        return stripped + self.separator

    @staticmethod
    def normalize_directory(base_directory: str | os.PathLike[str]) -> str:
        """Strip trailing separators and append exactly one '/'."""
        return os.fspath(base_directory).rstrip("/\\") + "/"

    # ----- Resolution -----

    def load_class(self, symbol: str) -> bool:
        """Load the file mapped to a fully-qualified symbol name.

        Works backwards through the symbol's namespace, trying the deepest
        prefix first.

        Args:
            symbol: Fully-qualified name, e.g. ``App\\Model\\User``

        Returns:
            True if a mapped file was loaded, False otherwise
        """
        for prefix, relative_name in self._split_candidates(symbol):
            if self._load_mapped_file(prefix, relative_name, symbol):
                logger.debug(f"[autoload:resolve] {symbol} -> loaded via {prefix}")
                return True

        logger.debug(f"[autoload:resolve] {symbol} -> not found")
        return False

    def candidate_paths(self, symbol: str) -> list[tuple[str, str, str]]:
        """List (prefix, relative_name, path) in the order load_class probes them."""
        candidates = []
        for prefix, relative_name in self._split_candidates(symbol):
            for base_directory in self._prefixes.get(prefix, ()):
                candidates.append((prefix, relative_name, self._mapped_path(base_directory, relative_name)))
        return candidates

    def find_file(self, symbol: str) -> str | None:
        """Return the file load_class would load, without loading it."""
        for _prefix, _relative_name, path in self.candidate_paths(symbol):
            if os.path.isfile(path):
                return path
        return None

    def _split_candidates(self, symbol: str):
        """Yield (prefix, relative_name) pairs from the deepest prefix to the shallowest."""
        sep = self.separator
        remaining = symbol
        while (pos := remaining.rfind(sep)) != -1:
            # Keep the trailing separator in the prefix
            yield symbol[: pos + len(sep)], symbol[pos + len(sep) :]
            remaining = symbol[:pos]

    def _load_mapped_file(self, prefix: str, relative_name: str, symbol: str | None = None) -> bool:
        """Try each base directory of a prefix until one file loads.

        Args:
            prefix: Normalized namespace prefix
            relative_name: Remainder of the symbol after the prefix
            symbol: Full symbol name, passed to the loader as a module name hint

        Returns:
            True on the first successful load, False if no directory had the file
        """
        directories = self._prefixes.get(prefix)
        if not directories:
            return False

        module_name = symbol.replace(self.separator, ".") if symbol else None
        for base_directory in directories:
            path = self._mapped_path(base_directory, relative_name)
            logger.debug(f"[autoload:probe] {prefix} -> {path}")
            if self.loader.require(path, module_name):
                return True

        return False

    def _mapped_path(self, base_directory: str, relative_name: str) -> str:
        return base_directory + relative_name.replace(self.separator, "/") + self.extension

    def __repr__(self) -> str:
        return f"Autoloader({len(self._prefixes)} prefixes)"
