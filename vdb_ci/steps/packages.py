"""
OS package installation step
"""

from .base_step import BaseStep


class PackageInstallStep(BaseStep):
    """Installs the fixed package list for a build flavour"""

    name = "packages"

    def __init__(self, context, flavour: str):
        super().__init__(context)
        self.flavour = flavour

    def describe(self) -> str:
        return f"{self.name} ({self.flavour})"

    def execute(self) -> None:
        manager = self.config.get_package_manager()
        packages = self.config.get_packages(self.flavour)

        self.logger.info(f"Installing {len(packages)} {self.flavour} packages...")
        update = manager.get("update")
        if update:
            self.run_command(update)
        self.run_command(list(manager.get("install", ["apt-get", "install", "-y"])) + packages)
