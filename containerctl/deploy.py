import logging
from pathlib import Path
from typing import Optional, Protocol

from pydantic import BaseModel, Field, field_validator

from containerctl.errors import ConfigError, ContainerError, DeploymentError
from containerctl.utils.fs import copy_file, ensure_dir

logger = logging.getLogger(__name__)


class Deployable(BaseModel):
    path: Path = Field(
        ...,
        description="Application archive or exploded directory to deploy",
        examples=["target/app.war"],
    )

    name: Optional[str] = Field(
        default=None,
        description="File name to deploy under (defaults to the source name)",
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        if not value or "/" in value or "\\" in value:
            raise ConfigError(
                f"Deployable name must be a plain file name: {value!r}"
            )
        return value

    @property
    def file_name(self) -> str:
        return self.name or self.path.name

    class Config:
        frozen = True


class Deployer(Protocol):
    def redeploy(self, deployable: Deployable) -> None:
        ...


class MonitoredDirectoryDeployer:
    """Deploys by dropping archives into a directory the server watches.

    An artifact that is already present is replaced, which the server picks
    up as an update.
    """

    def __init__(self, target_dir: Path):
        self.target_dir = target_dir

    def redeploy(self, deployable: Deployable) -> None:
        source = deployable.path
        if not source.is_file():
            raise DeploymentError(
                f"Deployable not found: {source}",
                artifact=deployable,
            )

        destination = self.target_dir / deployable.file_name
        replacing = destination.exists()

        try:
            ensure_dir(self.target_dir)
            copy_file(source, destination)
        except ContainerError as exc:
            raise DeploymentError(
                f"Failed to deploy {source}: {exc}",
                artifact=deployable,
            ) from exc

        logger.info(
            "%s %s in %s",
            "Redeployed" if replacing else "Deployed",
            deployable.file_name,
            self.target_dir,
        )
