"""Filesystem side effects of the driver, honouring dry-run mode"""

import glob
import os
import re
import shutil
import stat
from pathlib import Path
from typing import Any, Iterable, List

from vdb_ci.errors import ConfigError


class FileOperations:
    """Writes, links, copies and patches files with logging"""

    def __init__(self, logger: Any, dry_run: bool = False):
        """
        Initialize file operations

        Args:
            logger: Logger instance
            dry_run: If True, log operations without touching the filesystem
        """
        self.logger = logger
        self.dry_run = dry_run

    def makedirs(self, path: Path) -> None:
        self.logger.debug(f"Creating directory: {path}")
        if not self.dry_run:
            Path(path).mkdir(parents=True, exist_ok=True)

    def write_executable(self, path: Path, content: str) -> None:
        """Write a script and mark it executable"""
        path = Path(path)
        self.logger.debug(f"Writing executable: {path}")
        if self.dry_run:
            self.logger.info(f"[DRY RUN] Would write {path}")
            return

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        mode = path.stat().st_mode
        path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)

    def remove(self, path: Path) -> None:
        """Delete a file if it exists"""
        path = Path(path)
        self.logger.debug(f"Removing {path}")
        if not self.dry_run and (path.is_symlink() or path.is_file()):
            path.unlink()

    def symlink(self, link: Path, target: Path) -> None:
        """Point ``link`` at ``target``, replacing an existing link"""
        link = Path(link)
        self.logger.info(f"Linking {link} to {target}")
        if self.dry_run:
            return

        if link.is_symlink() or link.is_file():
            link.unlink()
        elif link.exists():
            raise ConfigError(f"Cannot replace directory {link} with a symlink")
        os.symlink(str(target), str(link))

    def copy(self, source: Path, destination_dir: Path) -> Path:
        """Copy one file into a directory, creating it if needed"""
        source = Path(source)
        destination = Path(destination_dir) / source.name
        self.logger.debug(f"Copying {source} to {destination}")
        if self.dry_run:
            return destination

        if not source.is_file():
            raise ConfigError(f"File to copy not found: {source}")
        destination.parent.mkdir(parents=True, exist_ok=True)
        # copy2 recreates symlinks with os.symlink, which will not overwrite
        if destination.is_symlink() or destination.is_file():
            destination.unlink()
        shutil.copy2(source, destination, follow_symlinks=False)
        return destination

    def copy_matching(self, source_dir: Path, patterns: Iterable[str], destination_dir: Path) -> List[Path]:
        """
        Copy every file matching any of the glob patterns

        Raises:
            ConfigError: a pattern matched nothing
        """
        copied = []
        for pattern in patterns:
            matches = sorted(glob.glob(os.path.join(str(source_dir), pattern)))
            if not matches and not self.dry_run:
                raise ConfigError(f"No files match {pattern} in {source_dir}")
            for match in matches:
                copied.append(self.copy(Path(match), destination_dir))
        return copied

    def patch(self, path: Path, pattern: str, replacement: str, backup_suffix: str = ".bak") -> int:
        """
        Apply a regular expression substitution to a file in place

        The original is kept next to it with ``backup_suffix`` the first time
        the file is patched.

        Returns:
            Number of substitutions made
        """
        path = Path(path)
        self.logger.info(f"Patching {path}")
        if self.dry_run:
            return 0

        if not path.is_file():
            raise ConfigError(f"File to patch not found: {path}")

        text = path.read_text()
        patched, count = re.subn(pattern, replacement, text)
        if count == 0:
            self.logger.debug(f"  {path} already patched")
            return 0

        backup = path.with_name(path.name + backup_suffix)
        if not backup.exists():
            shutil.copy2(path, backup)
        path.write_text(patched)
        self.logger.debug(f"  {count} substitution(s)")
        return count


__all__ = ["FileOperations"]
