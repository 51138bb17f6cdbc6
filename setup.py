"""
setup.py for the OpenVDB CI build matrix driver

Runtime Requirements (on the CI machine, not installed by pip):
- apt-get, wget, tar
- make, cmake and a C++ compiler (gcc/clang)
- ccache

Usage:
- pip install -e .
- vdb-ci install 5 yes release none gcc
- vdb-ci script 5 yes release none gcc
"""

from pathlib import Path

from setuptools import find_packages, setup

# Read README for long description
readme_path = Path("README.md")
long_description = ""
if readme_path.exists():
    with open(readme_path, "r", encoding="utf-8") as f:
        long_description = f.read()

setup(
    name="vdb-ci",
    version="1.0.0",
    description="CI build matrix driver for OpenVDB standalone and Houdini builds",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["vdb_ci", "vdb_ci.*"]),
    package_data={
        "vdb_ci": [
            "config/*.yaml",
        ]
    },
    include_package_data=True,
    entry_points={
        "console_scripts": [
            "vdb-ci=vdb_ci.main:main",
        ],
    },
    zip_safe=False,
    python_requires=">=3.10",
    install_requires=[
        "pydantic>=2",
        "PyYAML",
    ],
    extras_require={
        "dev": [
            "pytest",
            "pytest-cov",
            "black",
            "flake8",
            "mypy",
        ]
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Operating System :: POSIX :: Linux",
        "Topic :: Software Development :: Build Tools",
    ],
)
