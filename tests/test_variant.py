import pytest

from vdb_ci.errors import InvalidVariant
from vdb_ci.variant import BuildVariant, parse_version


def test_from_args_maps_positional_values():
    variant = BuildVariant.from_args(["script", "5", "yes", "debug", "16.5", "clang"])

    assert variant.task == "script"
    assert variant.abi == "5"
    assert variant.blosc_enabled is True
    assert variant.mode == "debug"
    assert variant.houdini_enabled is True
    assert variant.houdini_version == (16, 5)
    assert variant.compiler == "clang"


def test_standalone_variant_has_no_houdini_version():
    variant = BuildVariant.from_args(["install", "4", "no", "release", "none", "gcc"])

    assert variant.houdini_enabled is False
    assert variant.blosc_enabled is False
    with pytest.raises(InvalidVariant):
        variant.houdini_version


@pytest.mark.parametrize("index, value", [
    (0, "build"),
    (1, "five"),
    (1, "0"),
    (2, "true"),
    (3, "profile"),
    (4, "latest"),
    (4, "16.5beta"),
    (5, "msvc"),
    (5, ""),
])
def test_unrecognised_values_are_rejected(index, value):
    args = ["install", "5", "yes", "release", "none", "gcc"]
    args[index] = value

    with pytest.raises(InvalidVariant):
        BuildVariant.from_args(args)


def test_wrong_argument_count_is_rejected():
    with pytest.raises(InvalidVariant, match="Expected 6"):
        BuildVariant.from_args(["install", "5", "yes", "release", "none"])


def test_invalid_variant_is_a_value_error():
    with pytest.raises(ValueError):
        BuildVariant.from_args(["install", "5", "maybe", "release", "none", "gcc"])


def test_variant_is_immutable():
    variant = BuildVariant.from_args(["install", "5", "yes", "release", "none", "gcc"])

    with pytest.raises(Exception):
        variant.mode = "debug"


@pytest.mark.parametrize("mode, debug", [("release", False), ("debug", True), ("header", True)])
def test_only_release_disables_debug(mode, debug):
    variant = BuildVariant.from_args(["script", "5", "no", mode, "none", "gcc"])

    assert variant.debug is debug


def test_parse_version_ignores_trailing_zeros():
    assert parse_version("17") == parse_version("17.0")
    assert parse_version("16.5") < parse_version("16.10")
    assert parse_version("15.5") < parse_version("16")
