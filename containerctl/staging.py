import logging
from pathlib import Path
from typing import Iterable, List

from containerctl.errors import FilesystemError, StagingError
from containerctl.utils.fs import copy_file, delete_file

logger = logging.getLogger(__name__)


def staged_path(entry: Path, ext_lib_dir: Path) -> Path:
    return ext_lib_dir / entry.name


def stage_extra_classpath(entries: Iterable[Path], ext_lib_dir: Path) -> List[Path]:
    """Copy each entry into ``ext_lib_dir``.

    Stops at the first failure. Files staged before it are left in place.
    """
    staged: List[Path] = []

    for entry in entries:
        destination = staged_path(entry, ext_lib_dir)
        if not entry.is_file():
            raise StagingError(
                f"Extra classpath entry not found: {entry}"
            )
        try:
            copy_file(entry, destination)
        except FilesystemError as exc:
            raise StagingError(
                f"Failed to stage {entry} into {ext_lib_dir}: {exc}"
            ) from exc

        logger.debug("Staged %s", destination)
        staged.append(destination)

    return staged


def unstage_extra_classpath(entries: Iterable[Path], ext_lib_dir: Path) -> List[Path]:
    """Delete the staged copy of each entry; missing copies are skipped.

    Every entry is attempted. Failures are collected and raised together as
    a single :class:`StagingError` at the end.
    """
    removed: List[Path] = []
    failures: List[str] = []

    for entry in entries:
        destination = staged_path(entry, ext_lib_dir)
        try:
            if delete_file(destination):
                removed.append(destination)
                logger.debug("Unstaged %s", destination)
        except FilesystemError as exc:
            failures.append(str(exc))

    if failures:
        raise StagingError(
            "Failed to unstage extra classpath entries:\n" + "\n".join(failures)
        )

    return removed
