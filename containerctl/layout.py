from dataclasses import dataclass
from pathlib import Path

from containerctl.errors import NotFoundError, PreconditionError


@dataclass(frozen=True)
class InstallationLayout:
    """On-disk view of one installed container.

    ``home_dir`` is the container installation, ``config_home_dir`` the
    server profile it runs, and ``runtime_home_dir`` the Java home used to
    launch it. All three are made absolute against the current directory on
    construction, since the launched process runs from the profile directory.
    Nothing here touches the filesystem except :meth:`validate`.
    """

    home_dir: Path
    config_home_dir: Path
    runtime_home_dir: Path
    native_library_relative: Path = Path("lib/native")
    ext_library_relative: Path = Path("lib/ext")

    def __post_init__(self) -> None:
        for name in ("home_dir", "config_home_dir", "runtime_home_dir"):
            object.__setattr__(self, name, Path(getattr(self, name)).absolute())

    @property
    def native_library_root(self) -> Path:
        return self.home_dir / self.native_library_relative

    @property
    def ext_library_dir(self) -> Path:
        return self.home_dir / self.ext_library_relative

    @property
    def config_dir(self) -> Path:
        return self.config_home_dir / "config"

    def required_dirs(self) -> list[Path]:
        return [
            self.home_dir,
            self.config_home_dir,
            self.runtime_home_dir,
        ]

    def validate(self) -> None:
        for directory in self.required_dirs():
            if not directory.exists():
                raise NotFoundError(
                    f"Directory {directory} does not exist"
                )
            if not directory.is_dir():
                raise PreconditionError(
                    f"Path {directory} is not a directory"
                )
