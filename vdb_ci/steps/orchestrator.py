"""
Step orchestrator that turns a variant into an ordered list of steps
"""

from typing import List

from vdb_ci.platform import needs_legacy_libraries

from .base_step import BaseStep, StepContext
from .compiler_wrapper import CacheStatsStep, CompilerWrapperStep
from .houdini import HoudiniBuildStep, HoudiniSdkStep, LegacyLibrariesStep
from .openvdb import StandaloneBuildStep
from .packages import PackageInstallStep
from .source_build import SourceBuildStep


class StepOrchestrator:
    """Plans and runs the steps for one variant"""

    def __init__(self, context: StepContext):
        """
        Initialize step orchestrator

        Args:
            context: Shared run context
        """
        self.context = context
        self.variant = context.variant
        self.logger = context.logger

    def plan(self) -> List[BaseStep]:
        """
        Get the ordered steps for the variant

        Returns:
            Step instances, not yet executed
        """
        if self.variant.task == "install":
            return self._install_plan()
        return self._script_plan()

    def _install_plan(self) -> List[BaseStep]:
        ctx = self.context
        steps: List[BaseStep] = [CompilerWrapperStep(ctx)]

        if not self.variant.houdini_enabled:
            steps.append(PackageInstallStep(ctx, "standalone"))
            if self.variant.blosc_enabled:
                steps.append(SourceBuildStep(ctx, "blosc"))
            if self.variant.mode != "header":
                steps.append(SourceBuildStep(ctx, "cppunit"))
        else:
            steps.append(PackageInstallStep(ctx, "houdini"))
            steps.append(HoudiniSdkStep(ctx))
            if needs_legacy_libraries(self.variant, ctx.settings):
                steps.append(LegacyLibrariesStep(ctx))
        return steps

    def _script_plan(self) -> List[BaseStep]:
        ctx = self.context
        if not self.variant.houdini_enabled:
            build: BaseStep = StandaloneBuildStep(ctx)
        else:
            build = HoudiniBuildStep(ctx)
        return [CacheStatsStep(ctx, "before"), build, CacheStatsStep(ctx, "after")]

    def run(self) -> None:
        """Execute every step in order; the first exception aborts the run"""
        steps = self.plan()
        self.logger.info(f"Plan: {' -> '.join(step.describe() for step in steps)}")

        for index, step in enumerate(steps, start=1):
            with self.logger.step(step.describe()):
                self.logger.info(f"step {index}/{len(steps)}")
                step.execute()
