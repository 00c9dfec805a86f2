import os
import shutil
from pathlib import Path
from typing import List

from containerctl.errors import FilesystemError


def ensure_dir(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FilesystemError(
            f"Failed to create directory: {path}"
        ) from exc


def list_children(path: Path) -> List[Path]:
    try:
        return sorted(path.iterdir())
    except OSError as exc:
        raise FilesystemError(
            f"Failed to list directory: {path}"
        ) from exc


def copy_file(source: Path, destination: Path) -> None:
    tmp_path = destination.with_name(destination.name + ".tmp")

    try:
        shutil.copy2(source, tmp_path)
        os.replace(tmp_path, destination)
    except OSError as exc:
        tmp_path.unlink(missing_ok=True)
        raise FilesystemError(
            f"Failed to copy {source} to {destination}"
        ) from exc


def delete_file(path: Path) -> bool:
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    except OSError as exc:
        raise FilesystemError(
            f"Failed to delete file: {path}"
        ) from exc
    return True


def to_forward_slashes(path: Path) -> str:
    return str(path.absolute()).replace(os.sep, "/")
