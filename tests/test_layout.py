"""Tests for the installation layout, error types and logging setup."""

import io
import logging
from pathlib import Path

import pytest

from containerctl.errors import (
    ContainerError,
    NotFoundError,
    PreconditionError,
    StartFailedError,
    StopFailedError,
)
from containerctl.layout import InstallationLayout
from containerctl.logger import PACKAGE_LOGGER, setup_logger


class TestInstallationLayout:
    """Derived locations and the all-directories-exist invariant."""

    def test_derived_paths(self, installation):
        layout = InstallationLayout(
            installation.home, installation.config_home, installation.runtime_home
        )

        assert layout.native_library_root == installation.home / "lib" / "native"
        assert layout.ext_library_dir == installation.ext_dir
        assert layout.config_dir == installation.config_home / "config"

    def test_relative_paths_are_made_absolute(self, installation, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        layout = InstallationLayout(Path("was"), Path("profiles/server1"), Path("java"))

        assert layout.home_dir == installation.home
        assert layout.config_home_dir == installation.config_home
        assert layout.runtime_home_dir == installation.runtime_home
        assert layout.ext_library_dir == installation.ext_dir

    def test_validate_passes(self, installation):
        InstallationLayout(
            installation.home, installation.config_home, installation.runtime_home
        ).validate()

    def test_missing_runtime_home(self, installation, tmp_path):
        layout = InstallationLayout(installation.home, installation.config_home, tmp_path / "jre")

        with pytest.raises(NotFoundError, match="jre"):
            layout.validate()

    def test_file_instead_of_directory(self, installation, tmp_path):
        not_a_dir = tmp_path / "home.txt"
        not_a_dir.write_text("")
        layout = InstallationLayout(not_a_dir, installation.config_home, installation.runtime_home)

        with pytest.raises(PreconditionError, match="not a directory"):
            layout.validate()


class TestErrors:
    """Launch failures carry the operation and the observed exit code."""

    def test_start_failed(self):
        error = StartFailedError(3)

        assert error.operation == "start"
        assert error.process_exit_code == 3
        assert str(error) == "Container cannot be started: return code was 3"

    def test_stop_failed(self):
        error = StopFailedError(255)

        assert "cannot be stopped" in str(error)
        assert isinstance(error, ContainerError)
        assert error.exit_code == 32


class TestSetupLogger:
    """Handler installation on the package logger."""

    @pytest.fixture(autouse=True)
    def restore_logger(self):
        logger = logging.getLogger(PACKAGE_LOGGER)
        handlers, level = list(logger.handlers), logger.level
        logger.handlers.clear()
        yield
        logger.handlers[:] = handlers
        logger.setLevel(level)

    def test_writes_formatted_records(self):
        stream = io.StringIO()
        setup_logger(verbose=True, stream=stream)

        logging.getLogger("containerctl.controller").debug("hello")

        assert stream.getvalue() == "[DEBUG] containerctl.controller: hello\n"

    def test_is_idempotent(self):
        setup_logger(stream=io.StringIO())
        logger = setup_logger(verbose=True, stream=io.StringIO())

        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG

    def test_leaves_root_logger_alone(self):
        root = logging.getLogger()
        before = list(root.handlers)

        setup_logger(stream=io.StringIO())

        assert root.handlers == before
