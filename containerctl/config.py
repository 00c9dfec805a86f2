from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from containerctl.deploy import Deployable
from containerctl.errors import ConfigError


class ContainerConfig(BaseModel):
    container_id: str = Field(
        default="websphere85x",
        description="Vendor profile used to start and stop the container",
    )

    home: Path = Field(
        ...,
        description="Container installation directory",
        examples=["/opt/IBM/WebSphere/AppServer"],
    )

    config_home: Path = Field(
        ...,
        description="Server profile directory the container runs",
        examples=["/opt/IBM/WebSphere/AppServer/profiles/AppSrv01"],
    )

    runtime_home: Optional[Path] = Field(
        default=None,
        description="Java home; discovered from JAVA_HOME or PATH when unset",
    )

    extra_classpath: List[Path] = Field(
        default_factory=list,
        description="Archives staged into the container's lib/ext before start",
    )

    properties: Dict[str, str] = Field(
        default_factory=dict,
        description="Named values (cell, node, server, ...) used in launch arguments",
        examples=[{"cell": "cell1", "node": "node1", "server": "server1"}],
    )

    deployables: List[Deployable] = Field(
        default_factory=list,
        description="Artifacts redeployed, in order, after a successful start",
    )

    jvm_arguments: List[str] = Field(
        default_factory=list,
        description="Extra options passed to the JVM before the main class",
    )

    timeout: Optional[float] = Field(
        default=None,
        description="Seconds to wait for a start or stop process before terminating it",
    )

    @field_validator("extra_classpath")
    @classmethod
    def validate_extra_classpath(cls, value: List[Path]) -> List[Path]:
        names = set()
        for entry in value:
            if not entry.name:
                raise ConfigError(
                    f"Extra classpath entry has no file name: {entry}"
                )
            if entry.name in names:
                raise ConfigError(
                    f"Extra classpath entries share the file name {entry.name!r}"
                )
            names.add(entry.name)
        return value

    @field_validator("properties")
    @classmethod
    def validate_properties(cls, value: Dict[str, str]) -> Dict[str, str]:
        for key in value:
            if not key.isidentifier():
                raise ConfigError(
                    f"Property name must be an identifier: {key!r}"
                )
        return value

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and value <= 0:
            raise ConfigError("Timeout must be a positive number of seconds")
        return value

    class Config:
        frozen = True
