# dirloader/cli/interface.py
import sys
import json
from pathlib import Path
from typing import Any, Dict, List

import click
from click_option_group import optgroup
from rich.console import Console as RichConsole
from rich.table import Table
import structlog

from dirloader import __version__ as app_version
from dirloader.config.loader import load_and_merge_configs, select_profile, settings_from_mapping
from dirloader.config.settings import DEFAULT_EXPORTED_CLASS, DEFAULT_EXT, LoaderSettings
from dirloader.core import ClassLoader, FileInfo, FileLoader, InstanceInfo, ModuleInfo
from dirloader.exceptions import DirLoaderError
from dirloader.logging_setup import configure_logging, level_for_verbosity

log = structlog.get_logger(__name__)

# cli parameter name -> LoaderSettings attribute.
CLI_PARAM_TO_SETTINGS_ATTR: Dict[str, str] = {
    "depth": "depth",
    "ext": "ext",
    "file_filter": "file_filter",
    "dir_filter": "dir_filter",
    "follow_symlinks": "follow_symlinks",
    "exclude_patterns": "exclude",
    "export_key": "default_exported_class",
}

def discovery_options(cmd):
    # applies the walker option group shared by every subcommand.
    decorators = [
        optgroup.group("Discovery Options", help="Control which files and directories are walked."),
        optgroup.option("-d", "--depth", "depth", type=int, default=None, help="Maximum depth; 0 is the root only, negative is unbounded. Default: unbounded."),
        optgroup.option("-x", "--ext", "ext", default=None, help=f"Extension stripped from file names. Default: {DEFAULT_EXT}."),
        optgroup.option("--file-filter", "file_filter", default=None, metavar="REGEX", help="Regex searched in each absolute file path. Default: files ending in .py."),
        optgroup.option("--dir-filter", "dir_filter", default=None, metavar="REGEX", help="Regex searched in each directory path relative to the root. Default: match all."),
        optgroup.option("-e", "--exclude", "exclude_patterns", multiple=True, help="Gitignore-style glob patterns to skip (relative to the root)."),
        optgroup.option("-L", "--follow-symlinks/--no-follow-symlinks", "follow_symlinks", default=None, help="Classify symbolic links by their target."),
        optgroup.group("Output & Configuration", help="Result format and configuration profiles."),
        optgroup.option("--json", "as_json", is_flag=True, default=False, help="Print results as JSON."),
        optgroup.option("--config-profile", "profile_name", default=None, help="Apply a profile from the config file(s)."),
    ]
    for decorator in reversed(decorators):
        cmd = decorator(cmd)
    return cmd

def build_settings(ctx: click.Context, cli_params: Dict[str, Any]) -> LoaderSettings:
    # defaults < config files < profile < command-line flags.
    raw_config = load_and_merge_configs()
    effective = select_profile(raw_config, cli_params.get("profile_name"))

    for param_name, attr in CLI_PARAM_TO_SETTINGS_ATTR.items():
        if param_name not in cli_params:
            continue
        if ctx.get_parameter_source(param_name) != click.core.ParameterSource.COMMANDLINE:
            continue
        value = cli_params[param_name]
        effective[attr] = list(value) if param_name == "exclude_patterns" else value

    log.debug("effective_settings_resolved", settings=effective)
    return settings_from_mapping(effective)

def _file_to_dict(file: FileInfo) -> Dict[str, str]:
    return {"absolute_path": str(file.absolute_path), "relative_dir": file.relative_dir, "stem": file.stem}

def _record_to_dict(record: Any) -> Dict[str, Any]:
    if isinstance(record, InstanceInfo):
        return {
            "file": _file_to_dict(record.file),
            "class": getattr(record.cls, "__qualname__", repr(record.cls)),
            "instance": repr(record.instance),
        }
    if isinstance(record, ModuleInfo):
        return {"file": _file_to_dict(record.file), "module": getattr(record.module, "__name__", repr(record.module))}
    return {"value": repr(record)}

def _print_files_table(files: List[FileInfo], root: str) -> None:
    table = Table(title=f"Discovered files under {root}")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Relative dir", style="cyan")
    table.add_column("Stem", style="bold")
    table.add_column("Absolute path", overflow="fold")
    for i, file in enumerate(files, start=1):
        table.add_row(str(i), file.relative_dir, file.stem, str(file.absolute_path))
    RichConsole().print(table)

def _print_records_table(records: List[Any], root: str, classes: bool) -> None:
    table = Table(title=f"Loaded {'classes' if classes else 'modules'} under {root}")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Relative dir", style="cyan")
    table.add_column("Stem", style="bold")
    table.add_column("Class" if classes else "Module", style="green")
    for i, record in enumerate(records, start=1):
        row = _record_to_dict(record)
        file = row.get("file", {})
        table.add_row(str(i), file.get("relative_dir", ""), file.get("stem", ""), row.get("class") or row.get("module") or row.get("value", ""))
    RichConsole().print(table)

def _run_guarded(action) -> None:
    # maps errors to exit codes: 1 for application errors, 2 for anything else.
    try:
        action()
    except click.exceptions.Exit:
        raise
    except click.ClickException:
        raise
    except DirLoaderError as e:
        log.error("handled_application_error_in_cli", error_type=type(e).__name__, message=str(e))
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)
    except Exception as e:
        log.critical("unexpected_error_in_cli", error_type=type(e).__name__, message=str(e), exc_info=True)
        click.secho(f"Error: {type(e).__name__}: {e}", fg="red", err=True)
        sys.exit(2)


@click.group(context_settings=dict(help_option_names=["-h", "--help"]))
@click.option("--verbose", "-v", "verbosity_level", count=True, help="Verbosity: -v info, -vv debug.")
@click.option("--force-json-logs", "force_json_logs", is_flag=True, default=False, help="Emit logs as JSON.")
@click.version_option(version=app_version, package_name="dirloader", prog_name="dirloader", help="Show version and exit.")
def main_cli_group(verbosity_level: int, force_json_logs: bool):
    """dirloader: discover plugin modules under a directory and load them,
    optionally instantiating the class each one exports."""
    configure_logging(log_level_str=level_for_verbosity(verbosity_level), force_json_logs=force_json_logs)


@main_cli_group.command("scan")
@click.argument("path", type=click.Path(path_type=Path), default=Path("."))
@discovery_options
@click.pass_context
def scan_command(ctx: click.Context, path: Path, **cli_params: Any):
    """List the files a loader would import from PATH, in load order."""
    def _scan():
        settings = build_settings(ctx, cli_params)
        walker = FileLoader(settings.to_options(include_class_options=False))
        files = walker.get_files(path)
        if cli_params["as_json"]:
            click.echo(json.dumps([_file_to_dict(f) for f in files], indent=2))
        else:
            _print_files_table(files, str(path))

    _run_guarded(_scan)


@main_cli_group.command("load")
@click.argument("path", type=click.Path(path_type=Path), default=Path("."))
@discovery_options
@optgroup.group("Class Loading Options", help="Instantiate the class each module exports.")
@optgroup.option("-c", "--classes", "classes", is_flag=True, default=False, help="Instantiate exported classes instead of listing modules.")
@optgroup.option("-k", "--export-key", "export_key", default=None, help=f"Module attribute holding the class; empty string uses the module itself. Default: {DEFAULT_EXPORTED_CLASS}.")
@click.pass_context
def load_command(ctx: click.Context, path: Path, **cli_params: Any):
    """Import every matching file under PATH and report what was loaded."""
    def _load():
        settings = build_settings(ctx, cli_params)
        classes: bool = cli_params["classes"]
        if classes:
            loader: FileLoader = ClassLoader(settings.to_options())
        else:
            loader = FileLoader(settings.to_options(include_class_options=False))
        records = loader.load(path)
        if cli_params["as_json"]:
            click.echo(json.dumps([_record_to_dict(r) for r in records], indent=2))
        else:
            _print_records_table(records, str(path), classes)

    _run_guarded(_load)
