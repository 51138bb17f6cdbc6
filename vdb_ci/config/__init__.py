"""
Configuration management for the build matrix driver
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from vdb_ci.errors import ConfigError

DEFAULT_CONFIG_DIR = Path(__file__).parent


class PathSettings(BaseModel):
    """Fixed filesystem locations used by a run"""
    model_config = ConfigDict(frozen=True)

    home_dir: Path
    """Home directory, the compiler wrapper goes in its bin directory"""
    root_dir: Path
    """OpenVDB checkout, working directory for make"""
    install_dir: Path
    """DESTDIR for the OpenVDB install"""
    deps_dir: Path
    """Install prefix root for dependencies built from source"""
    build_dir: Path
    """Where source archives are downloaded and unpacked"""


class CompilerSettings(BaseModel):
    """Executables for one compiler toolchain"""
    model_config = ConfigDict(frozen=True)

    cc: str
    cxx: str
    path: str
    """Real C++ compiler wrapped by ccache"""


class DriverSettings(BaseModel):
    """Explicit configuration constructed once at startup and passed to every step"""
    model_config = ConfigDict(frozen=True)

    paths: PathSettings
    jobs: int = Field(default=4, ge=1)
    reduced_jobs: int = Field(default=2, ge=1)
    ccache_max_size: str = "2G"
    compilers: Dict[str, CompilerSettings]
    houdini_legacy_threshold: str = "16.5"

    @property
    def hfs(self) -> Path:
        """Houdini install root, reached through the SDK symlink"""
        return self.paths.root_dir / "hou"

    def compiler(self, name: str) -> CompilerSettings:
        if name not in self.compilers:
            raise ConfigError(f"No compiler settings for {name}")
        return self.compilers[name]


class ConfigLoader:
    """Loads and manages driver configuration"""

    FILES = ("settings.yaml", "dependencies.yaml", "variables.yaml")

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Initialize configuration loader

        Args:
            config_dir: Directory containing configuration files

        Raises:
            ConfigError: a configuration file is missing or is not a mapping
        """
        self.config_dir = Path(config_dir or DEFAULT_CONFIG_DIR)

        self.settings_config = self._load("settings.yaml")
        self.deps_config = self._load("dependencies.yaml")
        self.variables_config = self._load("variables.yaml")

    def _load(self, filename: str) -> Dict[str, Any]:
        path = self.config_dir / filename
        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        try:
            with open(path, 'r') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ConfigError(f"Configuration root must be a mapping: {path}")
        return data

    def build_settings(self, jobs: Optional[int] = None) -> DriverSettings:
        """
        Build the settings struct for this run

        Args:
            jobs: Optional override for the make parallelism

        Returns:
            Validated, immutable settings
        """
        raw = self.settings_config
        paths = dict(raw.get("paths", {}))
        if "home_dir" in paths:
            paths["home_dir"] = os.path.expanduser(str(paths["home_dir"]))

        try:
            return DriverSettings(
                paths=PathSettings(**paths),
                jobs=jobs if jobs is not None else raw.get("jobs", 4),
                reduced_jobs=raw.get("reduced_jobs", 2),
                ccache_max_size=str(raw.get("ccache", {}).get("max_size", "2G")),
                compilers=raw.get("compilers", {}),
                houdini_legacy_threshold=str(raw.get("houdini", {}).get("legacy_threshold", "16.5")),
            )
        except ValidationError as exc:
            raise ConfigError(f"Invalid settings in {self.config_dir / 'settings.yaml'}: {exc}") from exc

    def get_package_manager(self) -> Dict[str, List[str]]:
        """Get the update and install command prefixes"""
        return self.deps_config.get("package_manager", {})

    def get_packages(self, flavour: str) -> List[str]:
        """
        Get OS packages for a build flavour

        Args:
            flavour: standalone or houdini

        Returns:
            Package names
        """
        packages = self.deps_config.get("packages", {})
        if flavour not in packages:
            raise ConfigError(f"No package list for {flavour}")
        return list(packages[flavour])

    def get_source_config(self, name: str) -> Dict[str, Any]:
        """
        Get configuration for a dependency built from a source archive

        Args:
            name: Source name (blosc, cppunit)

        Returns:
            Source configuration dictionary
        """
        sources = self.deps_config.get("sources", {})
        if name not in sources:
            raise ConfigError(f"Unknown source dependency: {name}")
        return sources[name]

    def get_houdini_config(self) -> Dict[str, Any]:
        """Get the Houdini SDK layout"""
        return self.deps_config.get("houdini", {})

    def get_openvdb_config(self) -> Dict[str, Any]:
        """Get the OpenVDB directory and target names"""
        return self.deps_config.get("openvdb", {})

    def get_common_variables(self) -> Dict[str, Any]:
        return dict(self.variables_config.get("common", {}))

    def get_variable_set(self, axis: str, name: str) -> Dict[str, Any]:
        """
        Get one variable set

        Args:
            axis: platform or compression
            name: Set name within the axis

        Returns:
            Mapping of make variable name to unsubstituted value
        """
        sets = self.variables_config.get(axis, {})
        if name not in sets:
            raise ConfigError(f"Unknown {axis} variable set: {name}")
        return dict(sets[name] or {})


__all__ = ["ConfigLoader", "DriverSettings", "PathSettings", "CompilerSettings", "DEFAULT_CONFIG_DIR"]
