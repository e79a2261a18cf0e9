# dirloader/core/walker.py
"""
Recursive directory walker with independent file and directory filters.

Every step of the traversal is a hook: a method with a default
implementation that can be replaced per instance through a constructor
option of the same name.
"""
import os
import stat
from pathlib import Path
from typing import Any, List, Mapping, Optional, Union

import structlog

from dirloader.core.filters import (
    compile_glob_patterns_to_spec,
    is_dir_excluded,
    is_file_excluded,
    matches,
    relative_file_path,
)
from dirloader.core.models import FileInfo, FileType, WalkOptions
from dirloader.core.options import (
    apply_overrides,
    check_option_names,
    compile_filter,
    merge_options,
    normalize_depth,
)

log = structlog.get_logger(__name__)

PathLike = Union[str, os.PathLike]

WALKER_OPTIONS = (
    "cwd",
    "depth",
    "ext",
    "file_filter",
    "dir_filter",
    "follow_symlinks",
    "exclude",
    "get_files",
    "recursive_filter_files",
    "list_dir",
    "check_file_type",
    "get_dirname",
    "get_basename",
    "filter_file",
    "filter_dir",
)


class DirectoryWalker:
    OPTION_NAMES = WALKER_OPTIONS

    cwd: Optional[PathLike] = None
    # depth starts at 0 (the root's own entries); None or negative is unbounded.
    depth: Optional[float] = None
    ext = ".py"
    file_filter: Any = r".*\.py$"
    dir_filter: Any = "."
    follow_symlinks = False
    exclude: Any = ()

    def __init__(self, options: Optional[Mapping[str, Any]] = None, **kwargs: Any):
        opts = merge_options(options, kwargs)
        check_option_names(opts, type(self).OPTION_NAMES, type(self).__name__)
        self._options = opts

        apply_overrides(self, WALKER_OPTIONS, opts)

        self.file_filter = compile_filter(self.file_filter, "file_filter")
        self.dir_filter = compile_filter(self.dir_filter, "dir_filter")
        if isinstance(self.exclude, str):
            self.exclude = (self.exclude,)
        self.exclude = tuple(self.exclude or ())
        self._exclude_spec = compile_glob_patterns_to_spec(self.exclude)

    def get_files(self, path: PathLike, depth: Optional[float] = None) -> List[FileInfo]:
        if os.path.isabs(path):
            base_path = os.path.normpath(path)
        else:
            base_path = os.path.abspath(os.path.join(self.cwd or os.getcwd(), path))

        max_depth = self.depth if depth is None else depth
        opts = WalkOptions(base_path=Path(base_path), max_depth=normalize_depth(max_depth))
        log.info("file_discovery_started", base_path=base_path, max_depth=opts.max_depth)

        files: List[FileInfo] = []
        self.recursive_filter_files(opts.base_path, files, 0, opts)

        log.info("file_discovery_complete", base_path=base_path, count=len(files))
        return files

    def recursive_filter_files(self, path: Path, files: List[FileInfo], depth: int, opts: WalkOptions) -> None:
        # files of this level are collected before any subdirectory is entered.
        dirs: List[Path] = []

        for name in self.list_dir(path):
            absolute_path = path / name
            file_type = self.check_file_type(absolute_path)

            if file_type is FileType.FILE:
                dirname = self.get_dirname(absolute_path, opts.base_path)
                basename = self.get_basename(absolute_path)
                if self.filter_file(absolute_path, dirname, basename):
                    files.append(FileInfo(absolute_path=absolute_path, dirname=dirname, basename=basename))
            elif file_type is FileType.DIRECTORY:
                if self.filter_dir(absolute_path, opts.base_path):
                    dirs.append(absolute_path)
                else:
                    log.debug("directory_rejected", path=str(absolute_path))

        if depth >= opts.max_depth:
            return

        for directory in dirs:
            self.recursive_filter_files(directory, files, depth + 1, opts)

    def list_dir(self, path: Path) -> List[str]:
        # sorted so traversal order does not depend on the filesystem.
        return sorted(os.listdir(path))

    def check_file_type(self, path: Path) -> FileType:
        st = os.stat(path) if self.follow_symlinks else os.lstat(path)

        if stat.S_ISREG(st.st_mode):
            return FileType.FILE
        if stat.S_ISDIR(st.st_mode):
            return FileType.DIRECTORY
        return FileType.OTHER

    def get_dirname(self, absolute_path: Path, base_path: Path) -> str:
        return Path(os.path.relpath(absolute_path, base_path)).parent.as_posix()

    def get_basename(self, absolute_path: Path) -> str:
        name = os.path.basename(absolute_path)
        if self.ext and name.endswith(self.ext) and name != self.ext:
            return name[: -len(self.ext)]
        return name

    def filter_file(self, absolute_path: Path, dirname: str, basename: str) -> bool:
        if not matches(self.file_filter, str(absolute_path)):
            return False
        relative_path = relative_file_path(dirname, os.path.basename(absolute_path))
        return not is_file_excluded(relative_path, self._exclude_spec)

    def filter_dir(self, absolute_path: Path, base_path: Path) -> bool:
        relative_path = Path(os.path.relpath(absolute_path, base_path)).as_posix()
        if not matches(self.dir_filter, relative_path):
            return False
        return not is_dir_excluded(relative_path, self._exclude_spec)
