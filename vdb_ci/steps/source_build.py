"""
Builds a dependency from a downloaded source archive
"""

from pathlib import Path
from typing import Any, Dict

from vdb_ci.errors import ConfigError, ExternalCommandFailed

from .base_step import BaseStep


class SourceBuildStep(BaseStep):
    """Downloads, unpacks, configures, builds and installs one source archive"""

    name = "source"

    BUILD_SYSTEMS = ("cmake", "autotools")

    def __init__(self, context, source: str):
        super().__init__(context)
        self.source = source
        self.source_config: Dict[str, Any] = self.config.get_source_config(source)

        build_system = self.source_config.get("build_system")
        if build_system not in self.BUILD_SYSTEMS:
            raise ConfigError(f"Unknown build system for {source}: {build_system}")
        self.build_system = build_system

        self.build_dir = self.settings.paths.build_dir
        self.archive_path = self.build_dir / self.source_config["archive"]
        self.source_dir = self.build_dir / self.source_config["directory"]
        self.prefix = Path(self.replace_variables(self.source_config["prefix"]))

    def describe(self) -> str:
        return f"{self.name} ({self.source})"

    def download(self) -> None:
        """Fetch the archive unless an earlier run already did"""
        self.files.makedirs(self.build_dir)
        if self.archive_path.exists():
            self.logger.info(f"Using cached archive {self.archive_path}")
            return

        url = self.source_config["url"]
        self.logger.info(f"Downloading {url}")
        try:
            self.run_command(["wget", "-q", "-O", str(self.archive_path), url], cwd=self.build_dir)
        except ExternalCommandFailed:
            # wget creates the -O file before fetching
            self.logger.warning(f"Removing incomplete download {self.archive_path}")
            self.files.remove(self.archive_path)
            raise

    def unpack(self) -> None:
        self.run_command(["tar", "-xzf", str(self.archive_path), "-C", str(self.build_dir)],
                         cwd=self.build_dir)

    def configure(self) -> None:
        if self.build_system == "cmake":
            cmd = ["cmake", f"-DCMAKE_INSTALL_PREFIX={self.prefix}", "."]
        else:
            cmd = ["./configure", f"--prefix={self.prefix}"]
        self.run_command(cmd, cwd=self.source_dir)

    def build_and_install(self) -> None:
        if self.source_config.get("parallel", True):
            self.run_command(["make", f"-j{self.settings.jobs}"], cwd=self.source_dir)
            self.run_command(["make", "install"], cwd=self.source_dir)
        else:
            self.run_command(["make", "install"], cwd=self.source_dir)

    def execute(self) -> None:
        self.logger.info(f"Building {self.source} from source into {self.prefix}...")
        self.download()
        self.unpack()
        self.configure()
        self.build_and_install()
        self.logger.success(f"Installed {self.source}")
