from pathlib import Path
from typing import Dict, List, Literal, Mapping

from pydantic import BaseModel, Field, field_validator

from containerctl.errors import ConfigError


class PropertyTemplate(BaseModel):
    name: str = Field(
        ...,
        description="System property name",
    )

    relative_path: str = Field(
        ...,
        description="File location relative to the configuration home",
    )

    kind: Literal["url", "path"] = Field(
        default="url",
        description="Render the location as a file: URL or as an absolute path",
    )

    def render(self, config_home: Path) -> str:
        location = (config_home / self.relative_path).absolute()
        if self.kind == "url":
            return location.as_uri()
        return str(location)

    class Config:
        frozen = True


class CommandTemplate(BaseModel):
    main_class: str = Field(
        ...,
        description="Fully qualified main entry of the launched process",
    )

    arguments: List[str] = Field(
        default_factory=list,
        description="Positional argument templates, formatted with "
        "{config_dir} and the configured properties",
        examples=[["{config_dir}", "{cell}", "{node}", "{server}"]],
    )

    properties: List[PropertyTemplate] = Field(
        default_factory=list,
        description="Operation-specific system properties",
    )

    @field_validator("main_class")
    @classmethod
    def validate_main_class(cls, value: str) -> str:
        if not value.strip():
            raise ConfigError("Main class cannot be empty")
        return value

    def render_arguments(
        self,
        config_dir: str,
        properties: Mapping[str, str],
    ) -> List[str]:
        values: Dict[str, str] = dict(properties)
        values["config_dir"] = config_dir

        rendered = []
        for template in self.arguments:
            try:
                rendered.append(template.format_map(values))
            except KeyError as exc:
                raise ConfigError(
                    f"Property {exc.args[0]!r} is required by argument "
                    f"template {template!r} but is not configured"
                ) from exc
        return rendered

    class Config:
        frozen = True


class VendorProfile(BaseModel):
    """Everything that differs between container vendors.

    A single lifecycle controller is driven by one of these records instead
    of a subclass per vendor.
    """

    id: str
    name: str

    native_library_root: Path = Path("lib/native")
    ext_library_dir: Path = Path("lib/ext")
    endorsed_dir: Path = Path("endorsed_apis")
    runtime_endorsed_dir: Path = Path("lib/endorsed")

    native_library_property: str = "java.library.path"
    endorsed_dirs_property: str = "java.endorsed.dirs"
    install_root_properties: List[str] = Field(default_factory=list)
    user_install_root_property: str

    config_classpath: List[Path] = Field(
        default_factory=lambda: [Path("properties")],
        description="Classpath entries relative to the configuration home",
    )
    home_classpath: List[Path] = Field(
        default_factory=lambda: [Path("properties")],
        description="Classpath entries relative to the installation home",
    )
    required_jars: List[Path] = Field(
        default_factory=list,
        description="Archives relative to the installation home that must exist",
    )

    deploy_dir: str = Field(
        default="monitoredDeployableApps/servers/{server}",
        description="Monitored deployment directory relative to the configuration home",
    )

    start: CommandTemplate
    stop: CommandTemplate

    def command(self, operation: str) -> CommandTemplate:
        if operation == "start":
            return self.start
        if operation == "stop":
            return self.stop
        raise ConfigError(f"Unknown lifecycle operation: {operation}")

    class Config:
        frozen = True


_WEBSPHERE_POSITIONAL = ["{config_dir}", "{cell}", "{node}", "{server}"]

WEBSPHERE_85X = VendorProfile(
    id="websphere85x",
    name="WebSphere 8.5",
    install_root_properties=["was.install.root", "WAS_HOME"],
    user_install_root_property="user.install.root",
    required_jars=[
        Path("lib/startup.jar"),
        Path("lib/bootstrap.jar"),
        Path("lib/lmproxy.jar"),
        Path("lib/urlprotocols.jar"),
        Path("deploytool/itp/batchboot.jar"),
        Path("deploytool/itp/batch2.jar"),
    ],
    start=CommandTemplate(
        main_class="com.ibm.ws.bootstrap.WSLauncher",
        arguments=[
            "com.ibm.ws.management.tools.WsServerLauncher",
            *_WEBSPHERE_POSITIONAL,
        ],
        properties=[
            PropertyTemplate(
                name="com.ibm.CORBA.ConfigURL",
                relative_path="properties/sas.client.props",
            ),
            PropertyTemplate(
                name="com.ibm.SSL.ConfigURL",
                relative_path="properties/ssl.client.props",
            ),
        ],
    ),
    stop=CommandTemplate(
        main_class="com.ibm.wsspi.bootstrap.WSPreLauncher",
        arguments=[
            "-nosplash",
            "-application",
            "com.ibm.ws.bootstrap.WSLauncher",
            "com.ibm.ws.admin.services.WsServerStop",
            *_WEBSPHERE_POSITIONAL,
        ],
        properties=[
            PropertyTemplate(
                name="com.ibm.SOAP.ConfigURL",
                relative_path="properties/soap.client.props",
            ),
            PropertyTemplate(
                name="com.ibm.CORBA.ConfigURL",
                relative_path="properties/sas.client.props",
            ),
            PropertyTemplate(
                name="com.ibm.SSL.ConfigURL",
                relative_path="properties/ssl.client.props",
            ),
            PropertyTemplate(
                name="java.security.auth.login.config",
                relative_path="properties/wsjaas_client.conf",
                kind="path",
            ),
        ],
    ),
)

PROFILES: Dict[str, VendorProfile] = {
    WEBSPHERE_85X.id: WEBSPHERE_85X,
}


def get_profile(container_id: str) -> VendorProfile:
    try:
        return PROFILES[container_id]
    except KeyError:
        raise ConfigError(
            f"Unsupported container {container_id!r} "
            f"(supported: {', '.join(sorted(PROFILES))})"
        ) from None
