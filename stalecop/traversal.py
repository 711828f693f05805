"""
File system traversal: walk directories and collect Ruby source files.

Typical usage:
    from pathlib import Path
    from stalecop.traversal import find_ruby_files

    # All .rb and .rake files under a Rails app
    files = find_ruby_files(Path("./app"))

    # Custom ignore patterns
    files = find_ruby_files(Path("."), ignore_dirs={"vendor", "db"})
"""

import logging
from pathlib import Path
from typing import Callable, Optional, Set

logger = logging.getLogger(__name__)

RUBY_SUFFIXES: Set[str] = {".rb", ".rake"}

# Default directories to ignore during traversal
DEFAULT_IGNORE_DIRS: Set[str] = {
    # Bundled and vendored gems
    "vendor",
    ".bundle",
    "node_modules",

    # Rails runtime output
    "tmp",
    "log",
    "coverage",
    "public",

    # Version control
    ".git",
    ".svn",
    ".hg",

    # IDE and editor directories
    ".vscode",
    ".idea",

    # Cache directories
    ".cache",
    "__pycache__",
}


def is_ruby_file(path: Path) -> bool:
    """
    Check if a file is Ruby source (.rb or .rake).

    Examples:
        >>> is_ruby_file(Path("app/models/user.rb"))
        True
        >>> is_ruby_file(Path("lib/tasks/cleanup.rake"))
        True
        >>> is_ruby_file(Path("Gemfile.lock"))
        False
    """
    return path.suffix.lower() in RUBY_SUFFIXES


def should_ignore_directory(dir_path: Path, ignore_dirs: Set[str]) -> bool:
    """
    Check if a directory should be skipped. Only the directory name is
    compared (case-sensitive), not the full path.

    Examples:
        >>> should_ignore_directory(Path("vendor"), {"vendor", "tmp"})
        True
        >>> should_ignore_directory(Path("app"), {"vendor", "tmp"})
        False
    """
    return dir_path.name in ignore_dirs


def find_ruby_files(
    root: Path,
    ignore_dirs: Optional[Set[str]] = None,
    follow_symlinks: bool = False,
    filter_fn: Optional[Callable[[Path], bool]] = None,
) -> list[Path]:
    """
    Recursively find all Ruby files in a directory tree.

    Args:
        root: Root directory to start traversal from.
        ignore_dirs: Directory names to skip. If None, uses DEFAULT_IGNORE_DIRS.
        follow_symlinks: If True, follow symbolic links; skipped by default.
        filter_fn: Optional extra filter; only files for which it returns
                   True are included.

    Returns:
        Paths of all matching files, sorted for deterministic ordering.

    Raises:
        FileNotFoundError: If root does not exist.
        NotADirectoryError: If root is not a directory.

    Permission errors on subdirectories are logged and do not stop traversal.
    """
    if ignore_dirs is None:
        ignore_dirs = DEFAULT_IGNORE_DIRS

    root = root.resolve()

    if not root.exists():
        logger.error("Root directory does not exist: %s", root)
        raise FileNotFoundError(f"Root directory does not exist: {root}")

    if not root.is_dir():
        logger.error("Root path is not a directory: %s", root)
        raise NotADirectoryError(f"Root path is not a directory: {root}")

    logger.info("Starting traversal from: %s", root)
    logger.debug(
        "Traversal config: follow_symlinks=%s, ignore_dirs=%s",
        follow_symlinks,
        ignore_dirs,
    )

    collected_files: list[Path] = []

    def _walk_directory(current_dir: Path) -> None:
        try:
            for entry in current_dir.iterdir():
                if entry.is_symlink() and not follow_symlinks:
                    logger.debug("Skipping symlink: %s", entry)
                    continue

                if entry.is_dir():
                    if should_ignore_directory(entry, ignore_dirs):
                        logger.debug("Ignoring directory: %s", entry)
                        continue
                    _walk_directory(entry)

                elif entry.is_file() and is_ruby_file(entry):
                    if filter_fn is not None and not filter_fn(entry):
                        logger.debug("Filtered out by custom filter: %s", entry)
                        continue
                    logger.debug("Found Ruby file: %s", entry)
                    collected_files.append(entry)

        except PermissionError as e:
            logger.warning("Permission denied accessing directory %s: %s", current_dir, e)
        except OSError as e:
            logger.warning("Error accessing directory %s: %s", current_dir, e)

    _walk_directory(root)
    collected_files.sort()

    logger.info(
        "Traversal complete: found %d Ruby file(s) in %s",
        len(collected_files),
        root,
    )
    return collected_files
