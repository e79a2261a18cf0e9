# dirloader/core/class_loader.py
from typing import Any, Mapping, Optional

import structlog

from dirloader.core.loader import FileLoader
from dirloader.core.models import EVENT_PROCESS_INSTANCE, InstanceInfo, ModuleInfo
from dirloader.core.options import apply_overrides

log = structlog.get_logger(__name__)

CLASS_LOADER_OPTIONS = (
    "default_exported_class",
    "instantiation_opts",
    "get_class",
    "process_class",
    "instantiate",
    "process_instance",
)


class ClassLoader(FileLoader):
    """
    A FileLoader that turns every loaded module into an instance record.

    For each module the exported class is looked up (`get_class`), built
    (`process_class` / `instantiate`) and handed to `process_instance`.
    A module without the class, or whose instantiation returns something
    falsy, contributes nothing to the result.
    """

    OPTION_NAMES = FileLoader.OPTION_NAMES + CLASS_LOADER_OPTIONS

    default_exported_class: Optional[str] = "default"
    instantiation_opts: Any = None

    def __init__(self, options: Optional[Mapping[str, Any]] = None, **kwargs: Any):
        super().__init__(options, **kwargs)
        apply_overrides(self, CLASS_LOADER_OPTIONS, self._options)

    def process_module(self, module_info: ModuleInfo) -> Any:
        cls = self.get_class(module_info)
        if not cls:
            return None

        instance_info = self.process_class(cls, module_info)
        if instance_info:
            return self.process_instance(instance_info)
        return None

    def get_class(self, module_info: ModuleInfo) -> Any:
        if self.default_exported_class:
            return getattr(module_info.module, self.default_exported_class, None)
        return module_info.module

    def process_class(self, cls: Any, module_info: ModuleInfo) -> Optional[InstanceInfo]:
        instance = self.instantiate(cls)
        if not instance:
            return None
        log.debug("class_instantiated", cls=getattr(cls, "__name__", repr(cls)), path=str(module_info.file.absolute_path))
        return InstanceInfo(cls=cls, instance=instance, file=module_info.file)

    def instantiate(self, cls: Any) -> Any:
        return cls(self.instantiation_opts)

    def process_instance(self, instance_info: InstanceInfo) -> Any:
        self.emit(EVENT_PROCESS_INSTANCE, instance_info)
        return instance_info
