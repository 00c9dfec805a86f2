"""Tests for the monitored-directory deployer."""

import pytest

from containerctl.deploy import Deployable, MonitoredDirectoryDeployer
from containerctl.errors import DeploymentError


@pytest.fixture
def war(tmp_path):
    path = tmp_path / "target" / "shop.war"
    path.parent.mkdir()
    path.write_text("v1")
    return path


class TestMonitoredDirectoryDeployer:
    """Replace-if-present copies into the watched directory."""

    def test_creates_target_directory(self, tmp_path, war):
        target = tmp_path / "monitored" / "servers" / "server1"

        MonitoredDirectoryDeployer(target).redeploy(Deployable(path=war))

        assert (target / "shop.war").read_text() == "v1"

    def test_replaces_existing_copy(self, tmp_path, war):
        target = tmp_path / "monitored"
        deployer = MonitoredDirectoryDeployer(target)
        deployer.redeploy(Deployable(path=war))
        war.write_text("v2")

        deployer.redeploy(Deployable(path=war))

        assert (target / "shop.war").read_text() == "v2"
        assert [p.name for p in target.iterdir()] == ["shop.war"]

    def test_custom_name(self, tmp_path, war):
        target = tmp_path / "monitored"

        MonitoredDirectoryDeployer(target).redeploy(Deployable(path=war, name="store.war"))

        assert (target / "store.war").exists()

    def test_missing_artifact(self, tmp_path):
        deployable = Deployable(path=tmp_path / "absent.war")

        with pytest.raises(DeploymentError, match="absent.war") as info:
            MonitoredDirectoryDeployer(tmp_path / "monitored").redeploy(deployable)

        assert info.value.artifact is deployable

    def test_unwritable_target(self, tmp_path, war):
        blocker = tmp_path / "monitored"
        blocker.write_text("not a directory")

        with pytest.raises(DeploymentError, match="Failed to deploy"):
            MonitoredDirectoryDeployer(blocker / "servers").redeploy(Deployable(path=war))
