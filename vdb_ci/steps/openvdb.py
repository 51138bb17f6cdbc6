"""
Standalone OpenVDB build and test step
"""

from .base_step import BaseStep


class StandaloneBuildStep(BaseStep):
    """Installs and tests OpenVDB, or runs the header hygiene check"""

    name = "openvdb"

    @property
    def reduced_prebuild(self) -> bool:
        """gcc release builds of the binaries need less parallelism to stay in memory"""
        return self.variant.compiler == "gcc" and self.variant.mode == "release"

    def describe(self) -> str:
        return f"{self.name} ({self.variant.mode})"

    def execute(self) -> None:
        openvdb = self.config.get_openvdb_config()
        core_dir = openvdb.get("core_dir", "openvdb")
        jobs = self.settings.jobs

        if self.variant.mode == "header":
            self.logger.info("Checking header includes...")
            self.make(core_dir, [openvdb.get("header_target", "header_test")], jobs)
            self.logger.success("Header check passed")
            return

        if self.reduced_prebuild:
            for target in openvdb.get("reduced_targets", []):
                self.logger.info(f"Building {target} with -j{self.settings.reduced_jobs}...")
                self.make(core_dir, [target], self.settings.reduced_jobs)

        for target in openvdb.get("targets", ["install", "test", "pytest"]):
            self.logger.info(f"Running make {target}...")
            self.make(core_dir, [target], jobs)
        self.logger.success("OpenVDB built and tested")
