"""Contains the model describing one cell of the build matrix"""

from typing import Annotated, Literal, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from vdb_ci.errors import InvalidVariant

NO_HOUDINI = "none"
"""Sentinel passed instead of a Houdini major version for standalone builds"""

FIELD_ORDER = ("task", "abi", "blosc", "mode", "houdini_major", "compiler")
"""Order of the positional command line values"""

TaskType = Annotated[
    Literal["install", "script"],
    Field(description="Install dependencies, or build and test OpenVDB.")
]
"""Task, install or script"""

AbiType = Annotated[
    str,
    Field(description="OpenVDB ABI version passed to make as abi=.",
          pattern=r"^[1-9][0-9]*$",
          json_schema_extra={"example": "5"})
]
"""ABI version, a positive integer"""

FlagType = Annotated[
    Literal["yes", "no"],
    Field(description="Whether Blosc compression support is built.")
]
"""yes or no"""

ModeType = Annotated[
    Literal["release", "debug", "header"],
    Field(description="Release build, debug build, or header hygiene check.")
]
"""Build mode"""

HoudiniMajorType = Annotated[
    str,
    Field(description="Houdini major version to build the plugin against, or none.",
          pattern=r"^(none|[0-9]+(\.[0-9]+)*)$",
          json_schema_extra={"example": "16.5"})
]
"""Houdini major version or none"""

CompilerType = Annotated[
    Literal["gcc", "clang"],
    Field(description="Compiler toolchain.")
]
"""Compiler, gcc or clang"""


def parse_version(version: str) -> Tuple[int, ...]:
    """Splits a dotted version string into a tuple of integers

    Trailing zero components are dropped so "17" and "17.0" compare equal.
    """
    parts = [int(part) for part in version.split(".")]
    while len(parts) > 1 and parts[-1] == 0:
        parts.pop()
    return tuple(parts)


class BuildVariant(BaseModel):
    """One point in the CI build matrix"""
    model_config = ConfigDict(frozen=True, extra="forbid")

    task: TaskType
    """install or script"""
    abi: AbiType
    """OpenVDB ABI version"""
    blosc: FlagType
    """yes to build with Blosc compression"""
    mode: ModeType
    """release, debug or header"""
    houdini_major: HoudiniMajorType
    """Houdini major version, or none for a standalone build"""
    compiler: CompilerType
    """gcc or clang"""

    @classmethod
    def from_args(cls, args: Sequence[str]) -> "BuildVariant":
        """Builds a variant from the six positional command line values

        Raises:
            InvalidVariant: the count is wrong or a value is not recognised
        """
        if len(args) != len(FIELD_ORDER):
            raise InvalidVariant(
                f"Expected {len(FIELD_ORDER)} positional values "
                f"({' '.join(FIELD_ORDER)}), got {len(args)}")
        try:
            return cls.model_validate(dict(zip(FIELD_ORDER, args)))
        except ValidationError as exc:
            problems = "; ".join(
                f"{'.'.join(str(loc) for loc in error['loc'])}: {error['msg']}"
                for error in exc.errors())
            raise InvalidVariant(f"Invalid build variant: {problems}") from exc

    @property
    def blosc_enabled(self) -> bool:
        return self.blosc == "yes"

    @property
    def houdini_enabled(self) -> bool:
        return self.houdini_major != NO_HOUDINI

    @property
    def houdini_version(self) -> Tuple[int, ...]:
        """Parsed Houdini version, only valid when Houdini is enabled"""
        if not self.houdini_enabled:
            raise InvalidVariant("Standalone variant has no Houdini version")
        return parse_version(self.houdini_major)

    @property
    def debug(self) -> bool:
        """Only release builds are optimised; debug and header checks build with debug=yes"""
        return self.mode != "release"

    def label(self) -> str:
        """Short human readable description used in log output"""
        return " ".join(f"{name}={getattr(self, name)}" for name in FIELD_ORDER)
