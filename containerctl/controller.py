import logging
import os
import threading
from enum import Enum
from typing import Optional, Protocol, Tuple

from containerctl.config import ContainerConfig
from containerctl.deploy import Deployer, MonitoredDirectoryDeployer
from containerctl.errors import (
    ConfigError,
    DeploymentError,
    StagingError,
    StartFailedError,
    StopFailedError,
)
from containerctl.layout import InstallationLayout
from containerctl.profiles import VendorProfile, get_profile
from containerctl.runtime.discover import Environ, discover_java_runtime
from containerctl.runtime.env import build_launch_spec
from containerctl.runtime.java import JavaRuntime
from containerctl.runtime.launcher import LaunchSpec, ProcessExecutor
from containerctl.staging import stage_extra_classpath, unstage_extra_classpath

logger = logging.getLogger(__name__)


class LifecycleState(str, Enum):
    IDLE = "idle"
    STAGING = "staging"
    PREPARING = "preparing"
    EXECUTING = "executing"
    VERIFYING = "verifying"
    DEPLOYING = "deploying"
    ROLLING_BACK = "rolling_back"


class Executor(Protocol):
    def execute(
        self,
        spec: LaunchSpec,
        *,
        operation: str = ...,
        timeout: Optional[float] = ...,
    ) -> int:
        ...

    def cancel(self) -> bool:
        ...


class ContainerLifecycleController:
    """Starts and stops one locally installed container.

    One controller owns one installation. ``start`` and ``stop`` block until
    the launched process exits and never run concurrently on the same
    instance; ``cancel`` may be called from another thread to terminate the
    process of an operation in flight.

    Start: stage extra classpath, prepare, execute, verify the exit code,
    redeploy every configured artifact. Stop: prepare, execute, verify, then
    unstage the extra classpath. A failed stop leaves the staged files alone.
    """

    def __init__(
        self,
        config: ContainerConfig,
        *,
        profile: Optional[VendorProfile] = None,
        executor: Optional[Executor] = None,
        deployer: Optional[Deployer] = None,
        environ: Environ = os.environ,
    ):
        self.config = config
        self.profile = profile or get_profile(config.container_id)
        self.executor = executor or ProcessExecutor()
        self.environ = environ
        self._deployer = deployer
        self._state = LifecycleState.IDLE
        self._lock = threading.Lock()

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def deployer(self) -> Deployer:
        if self._deployer is None:
            self._deployer = self._default_deployer()
        return self._deployer

    def start(self, *, timeout: Optional[float] = None) -> None:
        timeout = self._effective_timeout(timeout)
        with self._lock:
            try:
                self._start(timeout)
            finally:
                self._transition(LifecycleState.IDLE)

    def stop(self, *, timeout: Optional[float] = None) -> None:
        timeout = self._effective_timeout(timeout)
        with self._lock:
            try:
                self._stop(timeout)
            finally:
                self._transition(LifecycleState.IDLE)

    def cancel(self) -> bool:
        cancelled = self.executor.cancel()
        if cancelled:
            logger.warning("Cancelled %s process", self.profile.name)
        return cancelled

    def create_launch_spec(self) -> LaunchSpec:
        """Launch spec with the container environment and no main class."""
        return self._prepare(None, *self._resolve())

    def _start(self, timeout: Optional[float]) -> None:
        logger.info("Starting %s", self.profile.name)

        self._transition(LifecycleState.STAGING)
        runtime, layout = self._resolve()
        stage_extra_classpath(self.config.extra_classpath, layout.ext_library_dir)

        self._transition(LifecycleState.PREPARING)
        spec = self._prepare("start", runtime, layout)

        self._transition(LifecycleState.EXECUTING)
        exit_code = self.executor.execute(spec, operation="start", timeout=timeout)

        self._transition(LifecycleState.VERIFYING)
        if exit_code != 0:
            raise StartFailedError(exit_code)

        logger.info("%s started", self.profile.name)

        self._transition(LifecycleState.DEPLOYING)
        for deployable in self.config.deployables:
            try:
                self.deployer.redeploy(deployable)
            except DeploymentError:
                raise
            except Exception as exc:
                raise DeploymentError(
                    f"Failed to redeploy {deployable.path}: {exc}",
                    artifact=deployable,
                ) from exc

    def _stop(self, timeout: Optional[float]) -> None:
        logger.info("Stopping %s", self.profile.name)

        self._transition(LifecycleState.PREPARING)
        runtime, layout = self._resolve()
        spec = self._prepare("stop", runtime, layout)

        self._transition(LifecycleState.EXECUTING)
        exit_code = self.executor.execute(spec, operation="stop", timeout=timeout)

        self._transition(LifecycleState.VERIFYING)
        if exit_code != 0:
            raise StopFailedError(exit_code)

        logger.info("%s stopped", self.profile.name)

        self._transition(LifecycleState.ROLLING_BACK)
        try:
            unstage_extra_classpath(self.config.extra_classpath, layout.ext_library_dir)
        except StagingError as exc:
            logger.warning("Ignoring cleanup failure after stop: %s", exc)

    def _prepare(
        self,
        operation: Optional[str],
        runtime: JavaRuntime,
        layout: InstallationLayout,
    ) -> LaunchSpec:
        layout.validate()

        return build_launch_spec(
            self.config,
            layout,
            runtime,
            self.profile,
            operation,
            environ=self.environ,
        )

    def _resolve(self) -> Tuple[JavaRuntime, InstallationLayout]:
        runtime = discover_java_runtime(
            self.config.runtime_home,
            environ=self.environ,
        )
        layout = InstallationLayout(
            home_dir=self.config.home,
            config_home_dir=self.config.config_home,
            runtime_home_dir=runtime.home,
            native_library_relative=self.profile.native_library_root,
            ext_library_relative=self.profile.ext_library_dir,
        )
        return runtime, layout

    def _effective_timeout(self, timeout: Optional[float]) -> Optional[float]:
        if timeout is None:
            return self.config.timeout
        if timeout <= 0:
            raise ConfigError("Timeout must be a positive number of seconds")
        return timeout

    def _default_deployer(self) -> Deployer:
        try:
            relative = self.profile.deploy_dir.format_map(self.config.properties)
        except KeyError as exc:
            raise ConfigError(
                f"Property {exc.args[0]!r} is required to locate the deploy "
                f"directory but is not configured"
            ) from exc
        return MonitoredDirectoryDeployer(self.config.config_home.absolute() / relative)

    def _transition(self, state: LifecycleState) -> None:
        if state is not self._state:
            logger.debug("%s: %s -> %s", self.profile.id, self._state.value, state.value)
        self._state = state
