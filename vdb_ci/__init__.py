"""
OpenVDB CI Build Matrix Driver
Installs dependencies and builds OpenVDB for one cell of the CI build matrix
Supports standalone and Houdini builds on Debian-based Linux
"""

__version__ = "1.0.0"
__supported_tasks__ = ["install", "script"]

from .main import BuildMatrixDriver

__all__ = ["BuildMatrixDriver", "__version__", "__supported_tasks__"]
