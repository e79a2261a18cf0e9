# dirloader/core/importer.py
import hashlib
import importlib.machinery
import importlib.util
import re
import sys
from pathlib import Path
from types import ModuleType
from typing import Union

import structlog

from dirloader.exceptions import ModuleLoadError

log = structlog.get_logger(__name__)

MODULE_NAME_PREFIX = "_dirloader"


def module_name_for_path(absolute_path: Union[str, Path]) -> str:
    # stable per path, unique across directories that share a file name.
    path = Path(absolute_path)
    digest = hashlib.sha1(str(path).encode("utf-8")).hexdigest()[:12]
    stem = re.sub(r"\W", "_", path.name.split(".", 1)[0]) or "module"
    return f"{MODULE_NAME_PREFIX}_{digest}_{stem}"


def import_module_from_path(absolute_path: Union[str, Path]) -> ModuleType:
    """
    Executes the file at `absolute_path` as a fresh module and returns it.

    Files with a suffix importlib does not recognize are loaded as Python
    source. The module is registered in sys.modules before its body runs
    (dataclasses and pickling look it up there) and is removed again if the
    body raises. Errors from the module body propagate unchanged.
    """
    path = Path(absolute_path)
    module_name = module_name_for_path(path)

    loader = None
    if path.suffix not in importlib.machinery.all_suffixes():
        loader = importlib.machinery.SourceFileLoader(module_name, str(path))

    spec = importlib.util.spec_from_file_location(module_name, str(path), loader=loader)
    if spec is None or spec.loader is None:
        raise ModuleLoadError(f"cannot build an import spec for '{path}'")

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(module_name, None)
        raise

    log.debug("module_imported", path=str(path), module_name=module_name)
    return module
