"""File loaders - the "load file at path" primitive used by the autoloader.

A loader gets one candidate path at a time. Missing files are an expected
outcome (returns False); errors raised while executing an existing file are
not caught here.
"""

from __future__ import annotations

import hashlib
import importlib.machinery
import importlib.util
import logging
import os
import sys
from types import ModuleType
from typing import Protocol

logger = logging.getLogger(__name__)


class FileLoader(Protocol):
    """Loads a source file if it exists."""

    def require(self, path: str, module_name: str | None = None) -> bool:
        """Load the file at path.

        Args:
            path: Candidate file path
            module_name: Optional dotted name for the loaded module

        Returns:
            True if the file existed and was loaded, False if it does not exist
        """
        ...


class ModuleFileLoader:
    """Executes existing source files as modules registered in sys.modules."""

    def __init__(self) -> None:
        self.loaded: dict[str, ModuleType] = {}

    def require(self, path: str, module_name: str | None = None) -> bool:
        if not os.path.isfile(path):
            return False

        name = module_name or self.module_name_for(path)
        # An explicit SourceFileLoader accepts any file extension
        source_loader = importlib.machinery.SourceFileLoader(name, path)
        spec = importlib.util.spec_from_file_location(name, path, loader=source_loader)
        if spec is None:
            raise ImportError(f"Cannot load {path}")
        module = importlib.util.module_from_spec(spec)

        # On failure, put back whatever held this name before
        previous = sys.modules.get(name)
        sys.modules[name] = module
        try:
            source_loader.exec_module(module)
        except BaseException:
            if previous is None:
                sys.modules.pop(name, None)
            else:
                sys.modules[name] = previous
            raise

        self.loaded[path] = module
        logger.debug(f"[autoload:load] {path} as {name}")
        return True

    @staticmethod
    def module_name_for(path: str) -> str:
        """Derive a stable module name for a file loaded without a symbol name."""
        digest = hashlib.sha256(os.path.abspath(path).encode()).hexdigest()[:12]
        stem = os.path.splitext(os.path.basename(path))[0]
        return f"_nsautoload_{digest}_{stem}"

    def __repr__(self) -> str:
        return f"ModuleFileLoader({len(self.loaded)} loaded)"


class ProbeRecorder:
    """Records every probed path.

    Without an inner loader this is a dry run: existing files count as
    loaded but nothing is executed. With an inner loader the call is
    forwarded and its result recorded.

    Only top-level probes land in attempts. A file executed by the inner
    loader may resolve other symbols through the same autoloader; those
    nested probes go to nested instead.
    """

    def __init__(self, inner: FileLoader | None = None) -> None:
        self.inner = inner
        self.attempts: list[tuple[str, bool]] = []
        self.nested: list[tuple[str, bool]] = []
        self._depth = 0

    def require(self, path: str, module_name: str | None = None) -> bool:
        depth = self._depth
        self._depth += 1
        try:
            if self.inner is None:
                result = os.path.isfile(path)
            else:
                result = self.inner.require(path, module_name)
        finally:
            self._depth = depth

        if depth == 0:
            self.attempts.append((path, result))
        else:
            self.nested.append((path, result))
        return result

    @property
    def probed(self) -> list[str]:
        return [path for path, _ in self.attempts]

    def clear(self) -> None:
        self.attempts.clear()
        self.nested.clear()
