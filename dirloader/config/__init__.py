from .loader import load_and_merge_configs, select_profile, settings_from_mapping
from .settings import LoaderSettings

__all__ = ["LoaderSettings", "load_and_merge_configs", "select_profile", "settings_from_mapping"]
