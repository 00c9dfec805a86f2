"""
Pytest configuration and shared fixtures.

Builds a fake WebSphere installation, profile and Java home under
``tmp_path`` and provides stand-ins for the process executor and deployer.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from containerctl.config import ContainerConfig
from containerctl.controller import ContainerLifecycleController
from containerctl.deploy import Deployable
from containerctl.profiles import WEBSPHERE_85X
from containerctl.runtime.launcher import LaunchSpec

# ===================================================================
# Fake installation
# ===================================================================

@dataclass
class Installation:
    home: Path
    config_home: Path
    runtime_home: Path
    native_dir: Path

    @property
    def ext_dir(self) -> Path:
        return self.home / "lib" / "ext"


def touch(path: Path, content: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


def build_installation(root: Path, *, tools_jar: bool = True) -> Installation:
    home = root / "was"
    config_home = root / "profiles" / "server1"
    runtime_home = root / "java"

    native_dir = home / "lib" / "native" / "linux" / "x86_64"
    native_dir.mkdir(parents=True)
    (home / "lib" / "ext").mkdir(parents=True)
    (home / "properties").mkdir(parents=True)
    (home / "endorsed_apis").mkdir(parents=True)
    for jar in WEBSPHERE_85X.required_jars:
        touch(home / jar)

    (config_home / "config").mkdir(parents=True)
    (config_home / "properties").mkdir(parents=True)

    touch(runtime_home / "bin" / "java")
    (runtime_home / "lib" / "endorsed").mkdir(parents=True)
    if tools_jar:
        touch(runtime_home / "lib" / "tools.jar")

    return Installation(home, config_home, runtime_home, native_dir)


@pytest.fixture
def installation(tmp_path) -> Installation:
    return build_installation(tmp_path)


# ===================================================================
# Process environment
# ===================================================================

@pytest.fixture
def env_values(installation) -> Dict[str, str]:
    return {
        "PATH": os.pathsep.join(["/usr/bin", str(installation.native_dir), "/bin"]),
        "HOME": "/home/tester",
        "LANG": "C.UTF-8",
    }


@pytest.fixture
def environ(env_values):
    return env_values


# ===================================================================
# Collaborator stand-ins
# ===================================================================

@dataclass
class FakeExecutor:
    exit_codes: List[int] = field(default_factory=list)
    calls: List[LaunchSpec] = field(default_factory=list)
    operations: List[str] = field(default_factory=list)
    timeouts: List[Optional[float]] = field(default_factory=list)
    cancelled: bool = False

    def execute(self, spec, *, operation="launch", timeout=None) -> int:
        self.calls.append(spec)
        self.operations.append(operation)
        self.timeouts.append(timeout)
        return self.exit_codes.pop(0) if self.exit_codes else 0

    def cancel(self) -> bool:
        self.cancelled = True
        return True


@dataclass
class RecordingDeployer:
    fail_on: Optional[str] = None
    redeployed: List[Deployable] = field(default_factory=list)

    def redeploy(self, deployable: Deployable) -> None:
        if deployable.file_name == self.fail_on:
            raise RuntimeError(f"cannot deploy {deployable.file_name}")
        self.redeployed.append(deployable)


@pytest.fixture
def executor() -> FakeExecutor:
    return FakeExecutor()


@pytest.fixture
def deployer() -> RecordingDeployer:
    return RecordingDeployer()


def make_config(installation: Installation, **overrides) -> ContainerConfig:
    values = dict(
        home=installation.home,
        config_home=installation.config_home,
        runtime_home=installation.runtime_home,
        properties={"cell": "cell1", "node": "node1", "server": "server1"},
    )
    values.update(overrides)
    return ContainerConfig(**values)


@pytest.fixture
def make_controller(installation, executor, deployer, environ):
    def factory(**config_overrides) -> ContainerLifecycleController:
        return ContainerLifecycleController(
            make_config(installation, **config_overrides),
            executor=executor,
            deployer=deployer,
            environ=environ,
        )

    return factory
