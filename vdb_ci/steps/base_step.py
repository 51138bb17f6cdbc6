"""
Base step class that all install and script steps inherit from
"""

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from vdb_ci.config import ConfigLoader, DriverSettings
from vdb_ci.variables import build_variables, make_arguments, placeholders, substitute
from vdb_ci.variant import BuildVariant


@dataclass
class StepContext:
    """Everything a step needs, built once per run"""

    variant: BuildVariant
    settings: DriverSettings
    config: ConfigLoader
    runner: Any
    files: Any
    logger: Any
    env: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if not self.env:
            self.env = self._default_environment()

    def _default_environment(self) -> Dict[str, str]:
        """Inherited environment with the compiler wrapper first on PATH"""
        env = os.environ.copy()
        wrapper_dir = str(self.settings.paths.home_dir / "bin")
        path = env.get("PATH", "")
        if wrapper_dir not in path.split(os.pathsep):
            env["PATH"] = wrapper_dir + (os.pathsep + path if path else "")
        compiler = self.settings.compiler(self.variant.compiler)
        env["CC"] = compiler.cc
        env["CXX"] = compiler.cxx
        return env


class BaseStep(ABC):
    """Abstract base class for all steps"""

    name = "step"

    def __init__(self, context: StepContext):
        """
        Initialize base step

        Args:
            context: Shared run context
        """
        self.context = context
        self.variant = context.variant
        self.settings = context.settings
        self.config = context.config
        self.runner = context.runner
        self.files = context.files
        self.logger = context.logger

    @property
    def root_dir(self) -> Path:
        return self.settings.paths.root_dir

    def replace_variables(self, text: str) -> str:
        """Replace {name} references in configuration strings"""
        return substitute(str(text), placeholders(self.variant, self.settings))

    def run_command(self,
                    cmd: Sequence[Any],
                    cwd: Optional[Path] = None,
                    env: Optional[Dict[str, str]] = None,
                    capture_output: bool = False):
        """Run a command in the root directory with the run environment by default"""
        return self.runner.run(
            cmd,
            cwd=cwd if cwd is not None else self.root_dir,
            env=env if env is not None else self.context.env,
            capture_output=capture_output,
        )

    def make_variables(self) -> Dict[str, str]:
        return build_variables(self.variant, self.config, self.settings)

    def make(self,
             directory: str,
             targets: Sequence[str],
             jobs: int,
             env: Optional[Dict[str, str]] = None):
        """Invoke make in ``directory`` with the variant's variables"""
        cmd: List[str] = ["make", "-C", directory]
        cmd.extend(make_arguments(self.make_variables()))
        cmd.extend(targets)
        cmd.append(f"-j{jobs}")
        return self.run_command(cmd, env=env)

    @abstractmethod
    def execute(self) -> None:
        """Run the step, raising on the first failure"""

    def describe(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.describe()})"
