# dirloader/core/models.py
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

EVENT_PROCESS_MODULE = "process_module"
EVENT_PROCESS_INSTANCE = "process_instance"


class FileType(Enum):
    # classification of a directory entry during traversal.
    OTHER = "other"
    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class FileInfo:
    # a discovered file. dirname is relative to the scan root ("." for the root).
    absolute_path: Path
    dirname: str
    basename: str

    @property
    def relative_dir(self) -> str:
        return self.dirname

    @property
    def stem(self) -> str:
        return self.basename


@dataclass(frozen=True)
class WalkOptions:
    # per-call traversal parameters. max_depth is inclusive and never negative.
    base_path: Path
    max_depth: float


@dataclass(frozen=True)
class ModuleInfo:
    module: Any
    file: FileInfo


@dataclass(frozen=True)
class InstanceInfo:
    cls: type
    instance: Any
    file: FileInfo
