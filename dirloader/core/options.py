# dirloader/core/options.py
import math
import re
from numbers import Real
from typing import Any, Iterable, Mapping, Optional, Pattern, Union

import structlog

from dirloader.exceptions import ConfigError

log = structlog.get_logger(__name__)

FilterLike = Union[str, Pattern[str], None]


def merge_options(options: Optional[Mapping[str, Any]], overrides: Mapping[str, Any]) -> dict:
    # combines a positional options mapping with keyword overrides. keywords win.
    merged = dict(options) if options else {}
    merged.update(overrides)
    return merged


def check_option_names(options: Mapping[str, Any], allowed: Iterable[str], owner: str) -> None:
    unknown = sorted(set(options) - set(allowed))
    if unknown:
        raise ConfigError(f"unknown option(s) for {owner}: {', '.join(unknown)}")


def apply_overrides(target: Any, names: Iterable[str], options: Mapping[str, Any]) -> None:
    """
    Overlays supplied options onto `target`, one attribute per name.

    A supplied value replaces the current one, except that a falsy value is
    skipped when the current value is callable. Hook slots therefore survive
    empty configuration values while plain fields can still be cleared.
    """
    for name in names:
        if name not in options:
            continue
        value = options[name]
        if not value and callable(getattr(target, name, None)):
            log.debug("falsy_hook_override_ignored", option=name)
            continue
        setattr(target, name, value)


def compile_filter(value: FilterLike, option_name: str) -> Optional[Pattern[str]]:
    # strings compile case-insensitively; None means "match everything".
    if value is None or isinstance(value, re.Pattern):
        return value
    if isinstance(value, str):
        try:
            return re.compile(value, re.IGNORECASE)
        except re.error as e:
            raise ConfigError(f"invalid regular expression for {option_name} {value!r}: {e}") from e
    raise ConfigError(f"{option_name} must be a regex string or compiled pattern, got {type(value).__name__}")


def normalize_depth(depth: Any) -> float:
    # anything that is not a non-negative number means unbounded.
    if isinstance(depth, Real) and not isinstance(depth, bool) and depth >= 0:
        return depth
    return math.inf
