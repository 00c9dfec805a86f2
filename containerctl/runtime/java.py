from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from containerctl.errors import NotFoundError, PreconditionError


class JavaRuntime(BaseModel):
    platform: Literal["posix", "windows"] = Field(
        ...,
        description="Platform of the discovered runtime",
    )

    home: Path = Field(
        ...,
        description="Root of the Java runtime (JAVA_HOME)",
    )

    java_executable: Path = Field(
        ...,
        description="Path to the java launcher binary",
    )

    tools_jar: Optional[Path] = Field(
        default=None,
        description="Path to the bundled tooling archive (if present)",
    )

    @field_validator("home")
    @classmethod
    def validate_home(cls, value: Path) -> Path:
        if not value.exists():
            raise NotFoundError(
                f"Java home does not exist: {value}"
            )
        if not value.is_dir():
            raise PreconditionError(
                f"Java home is not a directory: {value}"
            )
        return value

    @field_validator("java_executable")
    @classmethod
    def validate_java_executable(cls, value: Path) -> Path:
        if not value.exists():
            raise NotFoundError(
                f"Java executable does not exist: {value}"
            )
        if not value.is_file():
            raise PreconditionError(
                f"Java executable is not a file: {value}"
            )
        return value

    @field_validator("tools_jar")
    @classmethod
    def validate_tools_jar(
        cls, value: Optional[Path]
    ) -> Optional[Path]:
        if value is None:
            return value

        if not value.is_file():
            raise NotFoundError(
                f"Tools archive not found: {value}"
            )
        return value

    @property
    def is_windows(self) -> bool:
        return self.platform == "windows"

    class Config:
        frozen = True
