"""dirloader: load plugin modules and classes by walking a directory tree."""

__version__ = "0.1.0"

from dirloader.core import (  # noqa: E402
    EVENT_PROCESS_INSTANCE,
    EVENT_PROCESS_MODULE,
    ClassLoader,
    DirectoryWalker,
    FileInfo,
    FileLoader,
    FileType,
    InstanceInfo,
    ModuleInfo,
)
from dirloader.events import EventEmitter  # noqa: E402
from dirloader.exceptions import ConfigError, DirLoaderError, DiscoveryError, ModuleLoadError  # noqa: E402

__all__ = [
    "__version__",
    "ClassLoader",
    "ConfigError",
    "DirLoaderError",
    "DirectoryWalker",
    "DiscoveryError",
    "EVENT_PROCESS_INSTANCE",
    "EVENT_PROCESS_MODULE",
    "EventEmitter",
    "FileInfo",
    "FileLoader",
    "FileType",
    "InstanceInfo",
    "ModuleInfo",
    "ModuleLoadError",
]
