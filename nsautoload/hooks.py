"""Resolution chain - the host side of autoloading.

The chain holds resolution callbacks and is consulted when a symbol is
referenced before it is defined. Callbacks are tried in order until one
reports that it loaded the symbol.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol

logger = logging.getLogger(__name__)

ResolveCallback = Callable[[str], bool]


class ResolutionHook(Protocol):
    """Where autoloaders install and remove their resolve callback."""

    def register(self, callback: ResolveCallback, prepend: bool = False) -> None: ...

    def unregister(self, callback: ResolveCallback) -> bool: ...


class AutoloadStack:
    """Ordered chain of resolve callbacks.

    Usage:
        stack = AutoloadStack()
        stack.register(autoloader.load_class, prepend=True)
        stack.load("App\\Model\\User")
    """

    def __init__(self) -> None:
        self._callbacks: list[ResolveCallback] = []

    @property
    def callbacks(self) -> tuple[ResolveCallback, ...]:
        """Registered callbacks in call order."""
        return tuple(self._callbacks)

    def register(self, callback: ResolveCallback, prepend: bool = False) -> None:
        """Add a callback to the chain.

        A callback that is already registered keeps its position.
        """
        if callback in self._callbacks:
            return
        if prepend:
            self._callbacks.insert(0, callback)
        else:
            self._callbacks.append(callback)
        logger.debug(f"[autoload:hook] registered {callback!r} (prepend={prepend})")

    def unregister(self, callback: ResolveCallback) -> bool:
        """Remove a callback. Returns False if it was not registered."""
        try:
            self._callbacks.remove(callback)
        except ValueError:
            return False
        logger.debug(f"[autoload:hook] unregistered {callback!r}")
        return True

    def load(self, symbol: str) -> bool:
        """Ask each callback to load symbol until one succeeds."""
        for callback in list(self._callbacks):
            if callback(symbol):
                return True
        return False

    def __len__(self) -> int:
        return len(self._callbacks)

    def __repr__(self) -> str:
        return f"AutoloadStack({len(self._callbacks)} callbacks)"


# Process-wide instance
_default_stack: AutoloadStack | None = None


def get_default_stack() -> AutoloadStack:
    """Get the process-wide resolution chain."""
    global _default_stack
    if _default_stack is None:
        _default_stack = AutoloadStack()
    return _default_stack
