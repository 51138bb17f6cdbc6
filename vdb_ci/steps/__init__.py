"""
Install and script steps for the build matrix
"""

from .base_step import BaseStep, StepContext
from .compiler_wrapper import CacheStatsStep, CompilerWrapperStep
from .houdini import HoudiniBuildStep, HoudiniSdkStep, LegacyLibrariesStep
from .openvdb import StandaloneBuildStep
from .orchestrator import StepOrchestrator
from .packages import PackageInstallStep
from .source_build import SourceBuildStep

__all__ = [
    "BaseStep",
    "StepContext",
    "CacheStatsStep",
    "CompilerWrapperStep",
    "HoudiniBuildStep",
    "HoudiniSdkStep",
    "LegacyLibrariesStep",
    "PackageInstallStep",
    "SourceBuildStep",
    "StandaloneBuildStep",
    "StepOrchestrator",
]
