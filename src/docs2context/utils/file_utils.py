"""File system utilities."""

import os
from collections.abc import Iterable
from pathlib import Path
from typing import Generator


def walk_directory(
    directory: Path,
    max_depth: int = 5,
    ignore_dirs: Iterable[str] = (),
) -> Generator[Path, None, None]:
    """
    Walk through nested folders and yield all files.

    Directories named in ``ignore_dirs`` are not entered, and recursion
    stops ``max_depth`` levels below ``directory``. Symlinked directories
    are not followed.

    Args:
        directory: Root directory to walk
        max_depth: Deepest level to descend to (root is depth 0)
        ignore_dirs: Directory names to skip

    Yields:
        Path objects for each file found, in sorted order per directory
    """
    if not directory.is_dir():
        return

    ignored = set(ignore_dirs)
    root_depth = len(directory.parts)

    for root, dirs, files in os.walk(directory):
        depth = len(Path(root).parts) - root_depth

        if depth >= max_depth:
            dirs[:] = []
        else:
            dirs[:] = sorted(d for d in dirs if d not in ignored)

        for filename in sorted(files):
            yield Path(root) / filename


def get_file_size_mb(file_path: Path) -> float:
    """
    Get file size in megabytes.

    Args:
        file_path: Path to the file

    Returns:
        File size in MB
    """
    return file_path.stat().st_size / (1024 * 1024)
