"""Selects the make variable sets for a variant and renders them as arguments"""

import shlex
from typing import Dict, List, Tuple

from vdb_ci.config import ConfigLoader, DriverSettings
from vdb_ci.errors import ConfigError
from vdb_ci.variant import BuildVariant


def select_variable_sets(variant: BuildVariant) -> Tuple[str, str]:
    """Returns the (platform, compression) set names that apply to a variant"""
    platform = "houdini" if variant.houdini_enabled else "standalone"
    if not variant.blosc_enabled:
        compression = "no_blosc"
    else:
        compression = f"{platform}_blosc"
    return platform, compression


def placeholders(variant: BuildVariant, settings: DriverSettings) -> Dict[str, str]:
    """Values available to {name} references in configuration strings"""
    compiler = settings.compiler(variant.compiler)
    paths = settings.paths
    return {
        "home_dir": str(paths.home_dir),
        "root_dir": str(paths.root_dir),
        "install_dir": str(paths.install_dir),
        "deps_dir": str(paths.deps_dir),
        "build_dir": str(paths.build_dir),
        "hfs": str(settings.hfs),
        "abi": variant.abi,
        "debug": "yes" if variant.debug else "no",
        "cc": compiler.cc,
        "cxx": compiler.cxx,
        "houdini_major": variant.houdini_major,
        "jobs": str(settings.jobs),
    }


def substitute(text: str, values: Dict[str, str]) -> str:
    """Replace {name} references, leaving unknown braces untouched"""
    for key, value in values.items():
        text = text.replace("{" + key + "}", value)
    return text


def build_variables(variant: BuildVariant,
                    config: ConfigLoader,
                    settings: DriverSettings) -> Dict[str, str]:
    """
    Build the make variable mapping for a variant

    The result is the union of the common set and the one matching set on
    each axis.

    Raises:
        ConfigError: two selected sets define the same variable
    """
    platform, compression = select_variable_sets(variant)
    selected = [
        ("common", config.get_common_variables()),
        (platform, config.get_variable_set("platform", platform)),
        (compression, config.get_variable_set("compression", compression)),
    ]

    values = placeholders(variant, settings)
    variables: Dict[str, str] = {}
    origin: Dict[str, str] = {}
    for set_name, variable_set in selected:
        for key, value in variable_set.items():
            if key in variables:
                raise ConfigError(
                    f"Variable {key} is defined by both {origin[key]} and {set_name}")
            variables[key] = substitute("" if value is None else str(value), values)
            origin[key] = set_name
    return variables


def make_arguments(variables: Dict[str, str]) -> List[str]:
    """KEY=VALUE arguments in definition order"""
    return [f"{key}={value}" for key, value in variables.items()]


def render_arguments(variables: Dict[str, str]) -> str:
    """Shell-quoted argument string, for log output"""
    return shlex.join(make_arguments(variables))


__all__ = ["select_variable_sets", "placeholders", "substitute",
           "build_variables", "make_arguments", "render_arguments"]
