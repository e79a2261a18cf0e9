# dirloader/core/filters.py
from pathlib import PurePosixPath
from typing import Iterable, Optional, Pattern

import pathspec
import structlog

from dirloader.exceptions import DiscoveryError

log = structlog.get_logger(__name__)


def compile_glob_patterns_to_spec(glob_patterns: Iterable[str]) -> Optional[pathspec.PathSpec]:
    # compiles gitignore-style glob patterns into a pathspec object for matching.
    patterns = [p for p in glob_patterns if p]
    if not patterns:
        return None
    try:
        return pathspec.PathSpec.from_lines(pathspec.patterns.GitWildMatchPattern, patterns)
    except Exception as e:
        raise DiscoveryError(f"error compiling glob patterns {patterns}: {e}") from e


def relative_file_path(dirname: str, file_name: str) -> str:
    # joins a walker dirname ("." at the root) with a file name, posix style.
    if dirname in ("", "."):
        return file_name
    return str(PurePosixPath(dirname, file_name))


def is_file_excluded(relative_path: str, exclude_spec: Optional[pathspec.PathSpec]) -> bool:
    if exclude_spec is None:
        return False
    return exclude_spec.match_file(relative_path)


def is_dir_excluded(relative_path: str, exclude_spec: Optional[pathspec.PathSpec]) -> bool:
    # the trailing slash lets directory-only patterns such as "build/" apply.
    if exclude_spec is None:
        return False
    return exclude_spec.match_file(relative_path.rstrip("/") + "/")


def matches(pattern: Optional[Pattern[str]], text: str) -> bool:
    # regex filters use search semantics; a cleared filter accepts everything.
    if pattern is None:
        return True
    return pattern.search(text) is not None
