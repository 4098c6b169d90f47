"""Resolution reports - which candidate files a lookup touched and which one won."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .loaders import ProbeRecorder
from .models import ProbeAttempt
from .models import Resolution

if TYPE_CHECKING:
    from .autoloader import Autoloader


def trace_resolution(autoloader: Autoloader, symbol: str, dry_run: bool = False) -> Resolution:
    """Resolve symbol and report every probe made along the way.

    Args:
        autoloader: Autoloader to resolve with
        symbol: Fully-qualified symbol name
        dry_run: Check for file existence only, never execute anything

    Returns:
        Resolution with the attempts in probe order
    """
    candidates = autoloader.candidate_paths(symbol)
    recorder = ProbeRecorder(inner=None if dry_run else autoloader.loader)

    original_loader = autoloader.loader
    autoloader.loader = recorder
    try:
        loaded = autoloader.load_class(symbol)
    finally:
        autoloader.loader = original_loader

    # Top-level probes follow candidate order and stop at the first success.
    # Lookups made by the executed file are kept out of recorder.attempts.
    attempts = [
        ProbeAttempt(prefix=prefix, relative_name=relative_name, path=path, loaded=result)
        for (prefix, relative_name, _), (path, result) in zip(candidates, recorder.attempts, strict=False)
    ]
    return Resolution(
        symbol=symbol,
        loaded=loaded,
        path=attempts[-1].path if loaded and attempts else None,
        attempts=attempts,
    )
