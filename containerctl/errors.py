class ContainerError(Exception):
    exit_code: int = 1

    def __init__(self, message: str):
        super().__init__(message)

class ConfigError(ContainerError):
    exit_code = 2


class PreconditionError(ContainerError):
    exit_code = 10


class NotFoundError(PreconditionError):
    exit_code = 11


class AmbiguousLayoutError(PreconditionError):
    exit_code = 12

class EnvironmentValidationError(ContainerError):
    exit_code = 13


class FilesystemError(ContainerError):
    exit_code = 14


class StagingError(ContainerError):
    exit_code = 15

class LaunchError(ContainerError):
    exit_code = 20


class ProcessTimeoutError(LaunchError):
    exit_code = 21

    def __init__(self, operation: str, timeout: float):
        self.operation = operation
        self.timeout = timeout
        super().__init__(
            f"Container {operation} did not finish within {timeout:g}s; process terminated"
        )


class ProcessLaunchFailedError(ContainerError):
    exit_code = 30

    def __init__(self, operation: str, exit_code: int):
        self.operation = operation
        self.process_exit_code = exit_code
        super().__init__(
            f"Container cannot be {_PAST_TENSE.get(operation, operation)}: "
            f"return code was {exit_code}"
        )


class StartFailedError(ProcessLaunchFailedError):
    exit_code = 31

    def __init__(self, exit_code: int):
        super().__init__("start", exit_code)


class StopFailedError(ProcessLaunchFailedError):
    exit_code = 32

    def __init__(self, exit_code: int):
        super().__init__("stop", exit_code)

class DeploymentError(ContainerError):
    exit_code = 40

    def __init__(self, message: str, artifact=None):
        self.artifact = artifact
        super().__init__(message)


_PAST_TENSE = {"start": "started", "stop": "stopped"}
