"""Shared test fixtures."""

import shutil
import sys
from pathlib import Path
from typing import Callable, Optional

import pytest
import yaml

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from vdb_ci.config import DEFAULT_CONFIG_DIR
from vdb_ci.main import BuildMatrixDriver
from vdb_ci.utils import FileOperations, Logger, RecordingRunner
from vdb_ci.variant import BuildVariant


@pytest.fixture
def logger() -> Logger:
    return Logger(verbose=True, name="vdb_ci.tests")


@pytest.fixture
def system_lib_dir(tmp_path: Path) -> Path:
    """Stand-in for /usr/lib/x86_64-linux-gnu with the legacy libraries"""
    lib_dir = tmp_path / "system-lib"
    lib_dir.mkdir()
    for name in ("libboost_iostreams.so.1.58.0", "libboost_system.so.1.58.0", "libunrelated.so"):
        (lib_dir / name).write_text(name)
    return lib_dir


@pytest.fixture
def config_dir(tmp_path: Path, system_lib_dir: Path) -> Path:
    """Copy of the shipped configuration with every path inside tmp_path"""
    target = tmp_path / "config"
    target.mkdir()
    shutil.copy(DEFAULT_CONFIG_DIR / "variables.yaml", target / "variables.yaml")

    with open(DEFAULT_CONFIG_DIR / "settings.yaml") as f:
        settings = yaml.safe_load(f)
    settings["paths"] = {
        "home_dir": str(tmp_path / "home"),
        "root_dir": str(tmp_path / "io"),
        "install_dir": str(tmp_path / "install"),
        "deps_dir": str(tmp_path / "deps"),
        "build_dir": str(tmp_path / "build"),
    }
    with open(target / "settings.yaml", "w") as f:
        yaml.safe_dump(settings, f)

    with open(DEFAULT_CONFIG_DIR / "dependencies.yaml") as f:
        dependencies = yaml.safe_load(f)
    dependencies["houdini"]["legacy_libraries"]["source_dir"] = str(system_lib_dir)
    with open(target / "dependencies.yaml", "w") as f:
        yaml.safe_dump(dependencies, f)

    (tmp_path / "io").mkdir(exist_ok=True)
    return target


@pytest.fixture
def runner(logger: Logger) -> RecordingRunner:
    return RecordingRunner(logger)


@pytest.fixture
def make_driver(config_dir: Path, logger: Logger, runner: RecordingRunner) -> Callable[..., BuildMatrixDriver]:
    """Factory building a driver that records commands and touches only tmp_path"""

    def factory(*args: str, jobs: Optional[int] = None) -> BuildMatrixDriver:
        return BuildMatrixDriver(
            BuildVariant.from_args(args),
            config_dir=config_dir,
            jobs=jobs,
            logger=logger,
            runner=runner,
            files=FileOperations(logger),
        )

    return factory


@pytest.fixture
def houdini_tree(config_dir: Path, tmp_path: Path) -> Path:
    """Checkout and SDK layout the Houdini script task expects"""
    root = tmp_path / "io"

    sdk = root / "houdini16.5"
    (sdk / "dsolib").mkdir(parents=True)
    (sdk / "toolkit" / "include").mkdir(parents=True)
    (sdk / "houdini_setup_bash").write_text("export HFS=$PWD\n")
    (root / "hou").symlink_to("houdini16.5")

    plugin = root / "openvdb_houdini"
    (plugin / "houdini").mkdir(parents=True)
    (plugin / "Makefile").write_text(
        "HCUSTOM := $(HFS)/bin/hcustom\n"
        "houdinilib:\n"
        "\t$(HFS)/bin/hcustom -i $(DST) SOP_OpenVDB.C\n"
    )
    for header in ("GEO_PrimVDB.h", "GU_PrimVDB.h", "UT_VDBUtils.h"):
        (plugin / "houdini" / header).write_text(f"// {header}\n")
    (plugin / "libopenvdb_houdini.so").write_text("elf")
    return root
