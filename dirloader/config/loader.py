# dirloader/config/loader.py
"""
Handles loading and merging loader configuration from TOML files.
"""
import toml
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
from dataclasses import fields as dataclass_fields
import structlog

from dirloader.exceptions import ConfigError

from .settings import LoaderSettings

log = structlog.get_logger(__name__)

PROJECT_CONFIG_FILENAMES = [".dirloader.toml", "dirloader.toml", "pyproject.toml"]
USER_CONFIG_DIR = Path.home() / ".config" / "dirloader"
USER_CONFIG_FILE = USER_CONFIG_DIR / "config.toml"

# expected python types per settings key; None values are always accepted.
SETTINGS_KEY_TYPES: Dict[str, tuple] = {
    "cwd": (str,),
    "depth": (int,),
    "ext": (str,),
    "file_filter": (str,),
    "dir_filter": (str,),
    "follow_symlinks": (bool,),
    "exclude": (list, str),
    "default_exported_class": (str,),
    "instantiation_opts": (object,),
}

def _load_toml_file_data(file_path: Path) -> Dict[str, Any]:
    if not file_path.is_file():
        return {}
    log.debug("loading_toml_config_file", path=str(file_path))
    try:
        data = toml.load(file_path)
    except (OSError, toml.TomlDecodeError) as e:
        log.error("config_file_load_error", path=str(file_path), error=str(e))
        return {}
    if file_path.name == "pyproject.toml":
        return data.get("tool", {}).get("dirloader", {})
    return data

def load_and_merge_configs(start_dir: Optional[Path] = None) -> Dict[str, Any]:
    # user-global config first, then the first project config found in start_dir.
    merged_toml_data: Dict[str, Any] = {}
    if USER_CONFIG_FILE.is_file():
        log.info("loading_user_global_config", path=str(USER_CONFIG_FILE))
        merged_toml_data.update(_load_toml_file_data(USER_CONFIG_FILE))

    search_dir = Path(start_dir) if start_dir else Path.cwd()
    for filename in PROJECT_CONFIG_FILENAMES:
        candidate = search_dir / filename
        if not candidate.is_file():
            continue
        project_settings = _load_toml_file_data(candidate)
        if not project_settings:
            continue
        log.info("loading_project_local_config", path=str(candidate))
        project_profiles = project_settings.pop("profiles", None)
        if project_profiles is not None:
            user_profiles = merged_toml_data.get("profiles")
            if isinstance(user_profiles, dict) and isinstance(project_profiles, dict):
                merged_toml_data["profiles"] = {**user_profiles, **project_profiles}
            else:
                merged_toml_data["profiles"] = project_profiles
        merged_toml_data.update(project_settings)
        break

    if not merged_toml_data:
        log.debug("no_configuration_files_loaded")
    return merged_toml_data

def select_profile(config_data: Mapping[str, Any], profile_name: Optional[str]) -> Dict[str, Any]:
    # top-level keys, overlaid with the named profile's keys when one is given.
    selected = {k: v for k, v in config_data.items() if k != "profiles"}
    if not profile_name:
        return selected
    profiles = config_data.get("profiles", {})
    if not isinstance(profiles, dict):
        raise ConfigError(f"'profiles' must be a table of named profiles, got {type(profiles).__name__}")
    profile_values = profiles.get(profile_name)
    if profile_values is None:
        raise ConfigError(f"profile '{profile_name}' not found in configuration files")
    if not isinstance(profile_values, dict):
        raise ConfigError(f"profile '{profile_name}' must be a table")
    log.info("applying_profile_settings", profile=profile_name)
    selected.update(profile_values)
    return selected

def settings_from_mapping(data: Mapping[str, Any]) -> LoaderSettings:
    # validates raw config values and builds LoaderSettings from them.
    # profiles are resolved by select_profile, never turned into settings.
    known = {f.name for f in dataclass_fields(LoaderSettings)}
    unknown = sorted(set(data) - known - {"profiles"})
    if unknown:
        raise ConfigError(f"unknown configuration key(s): {', '.join(unknown)}")

    kwargs: Dict[str, Any] = {}
    for key, value in data.items():
        if key == "profiles" or value is None:
            continue
        expected = SETTINGS_KEY_TYPES[key]
        # bool is an int subclass; depth must be a real integer.
        if key == "depth" and isinstance(value, bool):
            raise ConfigError("configuration key 'depth' must be an integer")
        if not isinstance(value, expected):
            names = " or ".join(t.__name__ for t in expected)
            raise ConfigError(f"configuration key '{key}' must be {names}, got {type(value).__name__}")
        if key == "cwd":
            value = Path(value)
        elif key == "exclude":
            value = [value] if isinstance(value, str) else [str(p) for p in value]
        kwargs[key] = value
    return LoaderSettings(**kwargs)
