from pathlib import Path

import pytest
import yaml

from vdb_ci.config import ConfigLoader
from vdb_ci.errors import ConfigError


def test_shipped_configuration_loads():
    config = ConfigLoader()
    settings = config.build_settings()

    assert settings.paths.root_dir == Path("/io")
    assert settings.paths.install_dir == Path("/tmp/OpenVDB")
    assert settings.hfs == Path("/io/hou")
    assert settings.jobs == 4
    assert settings.reduced_jobs == 2
    assert settings.compiler("clang").cxx == "clang++"
    assert not str(settings.paths.home_dir).startswith("~")


def test_jobs_override(config_dir):
    settings = ConfigLoader(config_dir).build_settings(jobs=16)

    assert settings.jobs == 16


def test_settings_are_immutable(config_dir):
    settings = ConfigLoader(config_dir).build_settings()

    with pytest.raises(Exception):
        settings.jobs = 8


def test_missing_file(config_dir):
    (config_dir / "variables.yaml").unlink()

    with pytest.raises(ConfigError, match="variables.yaml"):
        ConfigLoader(config_dir)


def test_invalid_yaml(config_dir):
    (config_dir / "dependencies.yaml").write_text("packages: [unterminated\n")

    with pytest.raises(ConfigError, match="Invalid YAML"):
        ConfigLoader(config_dir)


def test_non_mapping_root(config_dir):
    (config_dir / "settings.yaml").write_text("- just\n- a list\n")

    with pytest.raises(ConfigError, match="mapping"):
        ConfigLoader(config_dir)


def test_invalid_settings(config_dir):
    path = config_dir / "settings.yaml"
    data = yaml.safe_load(path.read_text())
    data["jobs"] = 0
    path.write_text(yaml.safe_dump(data))

    with pytest.raises(ConfigError, match="Invalid settings"):
        ConfigLoader(config_dir).build_settings()


def test_unknown_compiler(config_dir):
    settings = ConfigLoader(config_dir).build_settings()

    with pytest.raises(ConfigError):
        settings.compiler("icc")


def test_lookups(config_dir):
    config = ConfigLoader(config_dir)

    assert "ccache" in config.get_packages("houdini")
    assert config.get_source_config("blosc")["parallel"] is False
    assert config.get_openvdb_config()["targets"] == ["install", "test", "pytest"]
    with pytest.raises(ConfigError):
        config.get_packages("windows")
    with pytest.raises(ConfigError):
        config.get_source_config("zlib")
    with pytest.raises(ConfigError):
        config.get_variable_set("compression", "lz4")
