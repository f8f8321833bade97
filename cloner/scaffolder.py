"""Foundry project scaffolding for cloned contracts."""
import logging
import os
import subprocess
from pathlib import Path
from typing import List

from cloner.config import CloneConfig, EXAMPLE_DIRS, PLACEHOLDER_TOKEN, forge_init_command
from cloner.errors import FilesystemError, ScaffoldError

logger = logging.getLogger(__name__)


def ensure_absent(path: Path) -> None:
    """Refuse to work on a path that already exists."""
    if path.exists():
        raise FilesystemError(f"Path {path} already exists")


def create_project_dir(path: Path) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.mkdir()
    except OSError as e:
        raise FilesystemError(f"Failed to create directory {path}: {e}") from e
    logger.info(f"Created directory: {path}")


def init_project(path: Path) -> None:
    """
    Run `forge init` inside a freshly created directory.

    Args:
        path: Project directory (must already exist and be empty)
    """
    cmd = forge_init_command(path)
    logger.debug(f"Running: {' '.join(cmd)}")
    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except OSError as e:
        raise ScaffoldError(f"Failed to run {cmd[0]}: {e}. Is Foundry installed and in PATH?") from e

    if result.returncode != 0:
        output = (result.stderr or result.stdout or "").strip()
        raise ScaffoldError(f"Failed to initialize forge project: {output}")
    logger.info("Initialized forge project")


def remove_placeholders(directory: Path, token: str = PLACEHOLDER_TOKEN) -> List[Path]:
    """
    Delete every file under `directory` whose name contains `token`.

    Traversal errors are logged and skipped; the walk carries on.

    Args:
        directory: Root of the walk
        token: Substring marking generated example files

    Returns:
        Paths of removed files
    """
    logger.info(f"Searching for {token} files in: {directory}")

    def _on_error(err: OSError) -> None:
        logger.error(f"Error walking directory: {err}")

    removed: List[Path] = []
    for root, _dirs, files in os.walk(directory, onerror=_on_error):
        for name in files:
            if token not in name:
                continue
            file_path = Path(root) / name
            logger.info(f"Removing {token} file: {file_path}")
            try:
                file_path.unlink()
            except OSError as e:
                raise FilesystemError(f"Failed to remove {file_path}: {e}") from e
            removed.append(file_path)
    return removed


def scaffold_project(config: CloneConfig) -> List[Path]:
    """
    Create the project directory, initialize it and strip placeholders.

    Returns:
        Paths of removed placeholder files
    """
    ensure_absent(config.path)
    create_project_dir(config.path)
    init_project(config.path)

    removed = remove_placeholders(config.src_dir)
    if config.purge_examples:
        for name in EXAMPLE_DIRS:
            removed.extend(remove_placeholders(config.path / name))
    return removed
