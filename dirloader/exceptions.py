class DirLoaderError(Exception):
    # base exception for all application-specific errors.
    pass

class ConfigError(DirLoaderError):
    # errors related to loader options and configuration files.
    pass

class DiscoveryError(DirLoaderError):
    # errors while preparing file discovery (bad exclude patterns).
    pass

class ModuleLoadError(DirLoaderError):
    # no import spec could be built for a discovered file.
    pass
