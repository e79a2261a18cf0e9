from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional
import structlog

log = structlog.get_logger(__name__)

DEFAULT_EXT = ".py"
DEFAULT_EXPORTED_CLASS = "default"

@dataclass
class LoaderSettings:
    # non-hook loader options as read from config files or the command line.
    # None means "not set": the loader class default applies.
    cwd: Optional[Path] = None
    depth: Optional[int] = None
    ext: Optional[str] = None
    file_filter: Optional[str] = None
    dir_filter: Optional[str] = None
    follow_symlinks: Optional[bool] = None
    exclude: List[str] = field(default_factory=list)
    default_exported_class: Optional[str] = None
    instantiation_opts: Any = None

    # keys that only apply to ClassLoader.
    CLASS_ONLY_KEYS = ("default_exported_class", "instantiation_opts")

    def to_options(self, include_class_options: bool = True) -> Dict[str, Any]:
        # builds a loader option dict holding only the values that were set.
        options: Dict[str, Any] = {}
        for f in fields(self):
            if not include_class_options and f.name in self.CLASS_ONLY_KEYS:
                continue
            value = getattr(self, f.name)
            if f.name == "exclude":
                if value:
                    options["exclude"] = tuple(value)
                continue
            if value is not None:
                options[f.name] = value
        log.debug("loader_options_built", keys=sorted(options))
        return options
