import textwrap
from pathlib import Path

import pytest

from dirloader import ClassLoader
from dirloader.config import loader as config_loader
from dirloader.config.loader import load_and_merge_configs, select_profile, settings_from_mapping
from dirloader.config.settings import LoaderSettings
from dirloader.exceptions import ConfigError


@pytest.fixture(autouse=True)
def no_user_config(tmp_path: Path, monkeypatch):
    """Keeps the real ~/.config/dirloader/config.toml out of the tests."""
    monkeypatch.setattr(config_loader, "USER_CONFIG_FILE", tmp_path / "no-user-config.toml")


def test_project_config_file_is_loaded(tmp_path: Path):
    (tmp_path / ".dirloader.toml").write_text(textwrap.dedent("""
        depth = 2
        ext = ".ext"
        exclude = ["build/"]
    """))
    data = load_and_merge_configs(tmp_path)
    assert data == {"depth": 2, "ext": ".ext", "exclude": ["build/"]}


def test_pyproject_tool_table_is_used(tmp_path: Path):
    (tmp_path / "pyproject.toml").write_text(textwrap.dedent("""
        [project]
        name = "host"

        [tool.dirloader]
        file_filter = "\\\\.plugin\\\\.py$"
    """))
    data = load_and_merge_configs(tmp_path)
    assert data == {"file_filter": "\\.plugin\\.py$"}


def test_first_project_file_wins(tmp_path: Path):
    (tmp_path / ".dirloader.toml").write_text('ext = ".a"\n')
    (tmp_path / "dirloader.toml").write_text('ext = ".b"\n')
    assert load_and_merge_configs(tmp_path)["ext"] == ".a"


def test_user_config_is_overlaid_by_project_config(tmp_path: Path, monkeypatch):
    user_file = tmp_path / "user.toml"
    user_file.write_text(textwrap.dedent("""
        depth = 1
        follow_symlinks = true

        [profiles.fast]
        depth = 0
    """))
    monkeypatch.setattr(config_loader, "USER_CONFIG_FILE", user_file)
    project = tmp_path / "project"
    project.mkdir()
    (project / "dirloader.toml").write_text(textwrap.dedent("""
        depth = 3

        [profiles.deep]
        depth = 10
    """))

    data = load_and_merge_configs(project)
    assert data["depth"] == 3
    assert data["follow_symlinks"] is True
    assert set(data["profiles"]) == {"fast", "deep"}


def test_invalid_toml_is_skipped(tmp_path: Path):
    (tmp_path / ".dirloader.toml").write_text("depth = = 1\n")
    (tmp_path / "dirloader.toml").write_text("depth = 4\n")
    assert load_and_merge_configs(tmp_path) == {"depth": 4}


def test_no_config_files(tmp_path: Path):
    assert load_and_merge_configs(tmp_path) == {}


def test_select_profile_overlays_top_level_keys():
    data = {"depth": 1, "ext": ".py", "profiles": {"fast": {"depth": 0}}}
    assert select_profile(data, None) == {"depth": 1, "ext": ".py"}
    assert select_profile(data, "fast") == {"depth": 0, "ext": ".py"}


def test_select_profile_unknown_name():
    with pytest.raises(ConfigError, match="slow"):
        select_profile({"profiles": {}}, "slow")


def test_settings_from_mapping_converts_values():
    settings = settings_from_mapping({"cwd": "/srv/app", "exclude": "tests/", "depth": 2})
    assert settings.cwd == Path("/srv/app")
    assert settings.exclude == ["tests/"]
    assert settings.depth == 2


@pytest.mark.parametrize("data, message", [
    ({"dept": 1}, "dept"),
    ({"depth": "2"}, "depth"),
    ({"depth": True}, "depth"),
    ({"follow_symlinks": "yes"}, "follow_symlinks"),
    ({"exclude": 3}, "exclude"),
])
def test_settings_from_mapping_rejects_bad_values(data, message):
    with pytest.raises(ConfigError, match=message):
        settings_from_mapping(data)


def test_to_options_only_contains_set_values():
    settings = LoaderSettings(depth=0, exclude=["build/"], default_exported_class="")
    assert settings.to_options() == {"depth": 0, "exclude": ("build/",), "default_exported_class": ""}
    assert settings.to_options(include_class_options=False) == {"depth": 0, "exclude": ("build/",)}


def test_settings_feed_a_class_loader(tmp_path: Path):
    (tmp_path / "mod.py").write_text("class Plugin:\n    def __init__(self, opts):\n        self.opts = opts\n")
    (tmp_path / ".dirloader.toml").write_text(textwrap.dedent("""
        default_exported_class = "Plugin"
        instantiation_opts = { mode = "test" }
    """))
    settings = settings_from_mapping(load_and_merge_configs(tmp_path))
    result = ClassLoader(settings.to_options()).load(tmp_path)

    assert [r.cls.__name__ for r in result] == ["Plugin"]
    assert result[0].instance.opts == {"mode": "test"}


def test_profiles_key_only_present_when_defined(tmp_path: Path, monkeypatch):
    user_file = tmp_path / "user.toml"
    user_file.write_text("follow_symlinks = true\n")
    monkeypatch.setattr(config_loader, "USER_CONFIG_FILE", user_file)
    project = tmp_path / "project"
    project.mkdir()
    (project / "dirloader.toml").write_text("depth = 1\n")

    data = load_and_merge_configs(project)
    assert "profiles" not in data
    assert settings_from_mapping(data) == LoaderSettings(depth=1, follow_symlinks=True)


def test_user_profiles_survive_a_project_file_without_profiles(tmp_path: Path, monkeypatch):
    user_file = tmp_path / "user.toml"
    user_file.write_text("[profiles.fast]\ndepth = 0\n")
    monkeypatch.setattr(config_loader, "USER_CONFIG_FILE", user_file)
    project = tmp_path / "project"
    project.mkdir()
    (project / ".dirloader.toml").write_text('ext = ".ext"\n')

    data = load_and_merge_configs(project)
    assert data["profiles"] == {"fast": {"depth": 0}}
    assert settings_from_mapping(data).ext == ".ext"
    assert select_profile(data, "fast") == {"ext": ".ext", "depth": 0}


def test_select_profile_rejects_non_table_profiles():
    with pytest.raises(ConfigError, match="profiles"):
        select_profile({"profiles": 3}, "x")
