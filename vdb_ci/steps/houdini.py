"""
Houdini SDK installation and plugin build steps
"""

from pathlib import Path
from typing import Any, Dict

from vdb_ci.platform import HoudiniEnvironment

from .base_step import BaseStep


class _HoudiniStep(BaseStep):

    def __init__(self, context):
        super().__init__(context)
        self.houdini_config: Dict[str, Any] = self.config.get_houdini_config()

    @property
    def hfs(self) -> Path:
        return self.settings.hfs


class HoudiniSdkStep(_HoudiniStep):
    """Fetches the SDK for the variant's major version and links it as hou"""

    name = "houdini-sdk"

    def describe(self) -> str:
        return f"{self.name} ({self.variant.houdini_major})"

    def execute(self) -> None:
        archive = self.root_dir / self.houdini_config.get("archive", "hou.tar.gz")
        directory = self.root_dir / self.replace_variables(
            self.houdini_config.get("directory", "houdini{houdini_major}"))
        link = self.root_dir / self.houdini_config.get("link", "hou")

        self.logger.info(f"Fetching Houdini {self.variant.houdini_major} SDK...")
        fetch = [self.replace_variables(arg) for arg in self.houdini_config["fetch_command"]]
        self.run_command(fetch)

        self.files.makedirs(directory)
        self.run_command(["tar", "-xzf", str(archive), "-C", str(directory), "--strip-components=1"])
        self.files.symlink(link, directory.name)
        self.logger.success(f"Houdini SDK unpacked to {directory}")


class LegacyLibrariesStep(_HoudiniStep):
    """Vendors system libraries into dsolib for SDKs that predate the threshold"""

    name = "houdini-legacy-libraries"

    def execute(self) -> None:
        legacy = self.houdini_config.get("legacy_libraries", {})
        destination = self.hfs / legacy.get("destination", "dsolib")
        self.logger.info(f"Houdini {self.variant.houdini_major} predates "
                         f"{self.settings.houdini_legacy_threshold}, vendoring libraries into {destination}")
        copied = self.files.copy_matching(Path(legacy["source_dir"]), legacy.get("patterns", []), destination)
        self.logger.debug(f"Vendored {len(copied)} file(s)")


class HoudiniBuildStep(_HoudiniStep):
    """Builds the core library and the Houdini plugin against the SDK"""

    name = "houdini-build"

    def patch_makefile(self) -> None:
        """Stop hcustom tagging the DSO with a timestamp so ccache hits survive"""
        makefile = self.houdini_config["makefile"]
        self.files.patch(self.root_dir / makefile["path"], makefile["pattern"], makefile["replacement"])

    def relocate_headers(self) -> None:
        headers = self.houdini_config.get("headers", {})
        source_dir = self.root_dir / headers["source_dir"]
        destination = Path(self.replace_variables(headers["destination"]))
        for header in headers.get("files", []):
            self.files.copy(source_dir / header, destination)

    def relocate_library(self) -> None:
        library = self.houdini_config["library"]
        self.files.copy(self.root_dir / library["file"],
                        Path(self.replace_variables(library["destination"])))

    def execute(self) -> None:
        openvdb = self.config.get_openvdb_config()
        jobs = self.settings.jobs

        environment = HoudiniEnvironment(self.hfs, self.houdini_config.get("setup_script", "houdini_setup_bash"))
        env = environment.setup_environment(self.runner, base=self.context.env)

        self.patch_makefile()

        self.logger.info("Building OpenVDB core library...")
        self.make(openvdb.get("core_dir", "openvdb"),
                  [openvdb.get("houdini_core_target", "install_lib")], jobs, env=env)
        self.relocate_headers()

        self.logger.info("Building OpenVDB Houdini library...")
        self.make(openvdb.get("houdini_dir", "openvdb_houdini"),
                  [openvdb.get("houdini_plugin_target", "houdinilib")], jobs, env=env)
        self.relocate_library()
        self.logger.success("Houdini build complete")
