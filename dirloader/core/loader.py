# dirloader/core/loader.py
from typing import Any, List, Mapping, Optional

import structlog

from dirloader.core.importer import import_module_from_path
from dirloader.core.models import EVENT_PROCESS_MODULE, FileInfo, ModuleInfo
from dirloader.core.options import apply_overrides
from dirloader.core.walker import WALKER_OPTIONS, DirectoryWalker, PathLike
from dirloader.events import EventEmitter

log = structlog.get_logger(__name__)

LOADER_OPTIONS = (
    "load",
    "load_file",
    "import_file",
    "process_module",
    "transform",
)


class FileLoader(DirectoryWalker, EventEmitter):
    """
    Discovers files under a directory and imports each one.

    Pipeline: get_files -> load_file (import_file -> process_module) for each
    file -> transform over the list. Results that come back as None are left
    out before transform runs. Any stage can be replaced by passing a callable
    under the stage's name; replacements are called with the stage's
    arguments, without the loader.
    """

    OPTION_NAMES = WALKER_OPTIONS + LOADER_OPTIONS

    def __init__(self, options: Optional[Mapping[str, Any]] = None, **kwargs: Any):
        EventEmitter.__init__(self)
        DirectoryWalker.__init__(self, options, **kwargs)
        apply_overrides(self, LOADER_OPTIONS, self._options)

    def load(self, path: PathLike, depth: Optional[float] = None) -> Any:
        files = self.get_files(path, depth)
        results = [result for result in (self.load_file(file) for file in files) if result is not None]
        log.info("load_complete", path=str(path), discovered=len(files), loaded=len(results))
        return self.transform(results)

    def load_file(self, file: FileInfo) -> Any:
        module = self.import_file(file)
        return self.process_module(ModuleInfo(module=module, file=file))

    def import_file(self, file: FileInfo) -> Any:
        return import_module_from_path(file.absolute_path)

    def process_module(self, module_info: ModuleInfo) -> Any:
        self.emit(EVENT_PROCESS_MODULE, module_info)
        return module_info

    def transform(self, data: List[Any]) -> Any:
        return data
