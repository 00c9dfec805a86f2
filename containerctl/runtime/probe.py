import logging
from pathlib import Path

from containerctl.errors import AmbiguousLayoutError, NotFoundError
from containerctl.utils.fs import list_children

logger = logging.getLogger(__name__)


def resolve_single_subdirectory(directory: Path, *, level: str = "entry") -> Path:
    """Return the only child of ``directory``.

    ``level`` names what the child is expected to be (OS name, processor
    type) and is only used in error messages.
    """
    if not directory.is_dir():
        raise NotFoundError(f"Directory {directory} does not exist")

    children = list_children(directory)
    if len(children) != 1:
        raise AmbiguousLayoutError(
            f"Directory {directory} is supposed to have only one sub-folder "
            f"(with the {level}), found {len(children)}"
        )

    return children[0]


def resolve_native_library_dir(native_root: Path) -> Path:
    os_dir = resolve_single_subdirectory(native_root, level="OS name")
    arch_dir = resolve_single_subdirectory(os_dir, level="processor type")

    logger.debug("Resolved native library directory: %s", arch_dir)
    return arch_dir.absolute()
