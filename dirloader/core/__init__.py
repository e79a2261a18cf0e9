"""
Directory walking and module/class loading for dirloader.

FileLoader walks a directory tree and imports every matching file;
ClassLoader additionally instantiates the class each module exports.
"""
from .class_loader import ClassLoader
from .loader import FileLoader
from .models import (
    EVENT_PROCESS_INSTANCE,
    EVENT_PROCESS_MODULE,
    FileInfo,
    FileType,
    InstanceInfo,
    ModuleInfo,
    WalkOptions,
)
from .walker import DirectoryWalker

__all__ = [
    "ClassLoader",
    "DirectoryWalker",
    "EVENT_PROCESS_INSTANCE",
    "EVENT_PROCESS_MODULE",
    "FileInfo",
    "FileLoader",
    "FileType",
    "InstanceInfo",
    "ModuleInfo",
    "WalkOptions",
]
