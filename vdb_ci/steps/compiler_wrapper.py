"""
ccache compiler wrapper and cache statistics steps
"""

from pathlib import Path

from .base_step import BaseStep

WRAPPER_TEMPLATE = """#!/bin/sh
export CCACHE_MAXSIZE={max_size}
exec ccache {compiler} "$@"
"""


class CompilerWrapperStep(BaseStep):
    """Writes ~/bin/<cxx> so every compile goes through ccache"""

    name = "compiler-wrapper"

    @property
    def wrapper_path(self) -> Path:
        compiler = self.settings.compiler(self.variant.compiler)
        return self.settings.paths.home_dir / "bin" / compiler.cxx

    def render(self) -> str:
        compiler = self.settings.compiler(self.variant.compiler)
        return WRAPPER_TEMPLATE.format(max_size=self.settings.ccache_max_size,
                                       compiler=compiler.path)

    def execute(self) -> None:
        self.logger.info(f"Installing ccache wrapper at {self.wrapper_path}")
        self.files.write_executable(self.wrapper_path, self.render())


class CacheStatsStep(BaseStep):
    """Reports ccache statistics, observability only"""

    name = "cache-stats"

    def __init__(self, context, when: str):
        super().__init__(context)
        self.when = when

    def describe(self) -> str:
        return f"{self.name} ({self.when})"

    def execute(self) -> None:
        self.logger.info(f"ccache statistics {self.when} build:")
        self.run_command(["ccache", "-s"])
