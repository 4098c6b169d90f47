"""nsautoload - namespace prefix autoloader.

Resolves fully-qualified symbol names to source files through registered
namespace prefixes, deepest prefix first.
"""

from .autoloader import Autoloader
from .hooks import AutoloadStack
from .hooks import ResolutionHook
from .hooks import get_default_stack
from .loaders import FileLoader
from .loaders import ModuleFileLoader
from .loaders import ProbeRecorder
from .models import NamespaceMapping
from .models import ProbeAttempt
from .models import Resolution
from .settings import AutoloadSettings
from .settings import build_autoloader
from .tracing import trace_resolution

__all__ = [
    "Autoloader",
    "AutoloadSettings",
    "AutoloadStack",
    "FileLoader",
    "ModuleFileLoader",
    "NamespaceMapping",
    "ProbeAttempt",
    "ProbeRecorder",
    "Resolution",
    "ResolutionHook",
    "build_autoloader",
    "get_default_stack",
    "trace_resolution",
]
