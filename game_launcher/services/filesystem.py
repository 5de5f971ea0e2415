"""File system service for launcher-managed directories."""

import os
import shutil
from pathlib import Path

import structlog

log = structlog.stdlib.get_logger()


class FileSystemService:
    """Service for directory checks with error handling and logging."""

    def ensure_directory(self, path: Path) -> None:
        """Ensure that a directory exists, creating it if necessary.

        Args:
            path: Directory path to ensure exists

        Raises:
            OSError: If the path exists as a file or cannot be created
        """
        try:
            if path.exists():
                if not path.is_dir():
                    log.error("Path exists but is not a directory", path=str(path))
                    raise NotADirectoryError(f"Path exists but is not a directory: {path}")
                return

            log.debug("Creating directory", path=str(path))
            path.mkdir(parents=True, exist_ok=True)
            log.info("Directory created successfully", path=str(path))

        except OSError as e:
            log.error("Failed to create directory", path=str(path), error=str(e))
            raise

    def ensure_writable_directory(self, path: Path) -> None:
        """Ensure that ``path`` is an existing, writable directory.

        Raises:
            OSError: If the directory cannot be created
            PermissionError: If the directory is not writable
        """
        self.ensure_directory(path)
        if not self.check_write_permission(path):
            log.error("Directory is not writable", path=str(path))
            raise PermissionError(f"Directory is not writable: {path}")

    def validate_existing_directory(self, path: Path) -> None:
        """Check that ``path`` already exists as a writable directory, without creating it.

        Raises:
            FileNotFoundError: If the path does not exist
            NotADirectoryError: If the path is not a directory
            PermissionError: If the directory is not writable
        """
        if not path.exists():
            raise FileNotFoundError(f"Directory not found: {path}")
        if not path.is_dir():
            raise NotADirectoryError(f"Path is not a directory: {path}")
        if not self.check_write_permission(path):
            raise PermissionError(f"Directory is not writable: {path}")

    def check_write_permission(self, path: Path) -> bool:
        """Check if we have write permission for the given path.

        Args:
            path: Path to check (file or directory, existing or not)

        Returns:
            True if we have write permission, False otherwise
        """
        try:
            if path.exists():
                target = path if path.is_dir() else path.parent
                return os.access(target, os.W_OK)

            # Check the closest existing parent for new paths
            parent = path.parent
            while not parent.exists() and parent != parent.parent:
                parent = parent.parent
            has_permission = os.access(parent, os.W_OK)
            log.debug("Checked write permission", path=str(path), parent=str(parent), has_permission=has_permission)
            return has_permission

        except OSError as e:
            log.warning("Failed to check write permission", path=str(path), error=str(e))
            return False

    def remove_tree(self, path: Path) -> None:
        """Delete a directory tree if it exists.

        Raises:
            OSError: If the tree exists but cannot be removed
        """
        if not path.exists():
            return
        log.debug("Removing directory tree", path=str(path))
        shutil.rmtree(path)
