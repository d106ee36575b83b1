"""Filesystem predicates and executable lookup."""

import os
import shutil
from pathlib import Path


class PathTools:
    """Filesystem probe and search-path lookup used by the resolvers.

    Every predicate answers "no" instead of raising: a missing file, an
    unreadable directory or an unresolvable command are ordinary outcomes
    of a probe, not failures.

    Args:
        search_path: os.pathsep-separated directories for which(); None
            means the PATH of the current process at call time.
    """

    def __init__(self, search_path: str | None = None) -> None:
        self.search_path = search_path

    def file_exists(self, path: Path | str) -> bool:
        """Return True if path is an existing regular file (symlinks followed)."""
        try:
            return Path(path).is_file()
        except OSError:
            return False

    def directory_exists(self, path: Path | str) -> bool:
        """Return True if path is an existing, readable directory."""
        try:
            return Path(path).is_dir() and os.access(path, os.R_OK)
        except OSError:
            return False

    def parent_of(self, path: Path | str) -> Path:
        """
        Return the parent directory of path.

        At the filesystem root (or for a bare relative name) the path itself
        is returned, which callers use as the stop condition when ascending.
        """
        return Path(path).parent

    def join_path(self, *segments: Path | str) -> Path:
        """
        Join segments with the platform separator.

        This is a plain join: ".." is kept as-is and an absolute later
        segment does not discard the earlier ones.
        """
        parts = [str(segment) for segment in segments]
        if not parts:
            return Path()
        joined = parts[0]
        for part in parts[1:]:
            joined = joined.rstrip(os.sep) + os.sep + part
        return Path(joined)

    def which(self, command: str) -> Path | None:
        """
        Resolve a command name to an executable on the search path.

        Args:
            command: Bare command name (e.g., "python3")

        Returns:
            Absolute path to the executable, or None if not found
        """
        if not command:
            return None
        found = shutil.which(command, path=self.search_path)
        return Path(found) if found else None
