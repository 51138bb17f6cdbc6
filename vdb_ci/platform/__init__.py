"""
Houdini SDK environment handling
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

from vdb_ci.config import DriverSettings
from vdb_ci.variant import BuildVariant, parse_version


def needs_legacy_libraries(variant: BuildVariant, settings: DriverSettings) -> bool:
    """
    Whether the SDK for this variant predates the legacy threshold

    Comparison is numeric per component, so 16.5 itself does not qualify
    and 16.10 is newer than 16.5.
    """
    if not variant.houdini_enabled:
        return False
    return variant.houdini_version < parse_version(settings.houdini_legacy_threshold)


class HoudiniEnvironment:
    """Captures the environment that Houdini's setup script exports"""

    def __init__(self, hfs: Path, setup_script: str = "houdini_setup_bash"):
        """
        Initialize Houdini environment manager

        Args:
            hfs: Houdini install root
            setup_script: Script sourced from ``hfs`` to set HFS, PATH and friends
        """
        self.hfs = Path(hfs)
        self.setup_script = setup_script

    def capture_command(self) -> list:
        """bash command printing the environment after sourcing the setup script"""
        return ["bash", "-c", f"source ./{self.setup_script} > /dev/null && env -0"]

    @staticmethod
    def parse(output: str) -> Dict[str, str]:
        """Parse NUL separated ``env -0`` output"""
        env = {}
        for entry in output.split("\0"):
            if "=" in entry:
                key, value = entry.split("=", 1)
                env[key] = value
        return env

    def setup_environment(self, runner: Any, base: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        """
        Get environment variables after sourcing the setup script

        Args:
            runner: Command runner used to spawn bash
            base: Environment to start from, defaults to the current process

        Returns:
            Dictionary of environment variables
        """
        env = dict(base if base is not None else os.environ)
        result = runner.run(self.capture_command(), cwd=self.hfs, env=env, capture_output=True)
        env.update(self.parse(result.stdout or ""))
        env.setdefault("HFS", str(self.hfs))
        return env


__all__ = ["HoudiniEnvironment", "needs_legacy_libraries"]
