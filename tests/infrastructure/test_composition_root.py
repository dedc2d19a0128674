"""Tests for composition root DI container."""

from stagehand.composition_root import StagehandContainer, create_container
from stagehand.domain.value_objects.credentials import Credentials
from stagehand.infrastructure.config import SSHConfig, StagehandConfig

CREDENTIALS = Credentials(username="CORP\\deploy", secret="s3cret")


class TestCompositionRoot:
    def test_create_container(self):
        container = create_container(StagehandConfig(), CREDENTIALS)

        assert isinstance(container, StagehandContainer)
        assert container.fabric_adapter is not None
        assert container.operator is not None
        assert container.run_update is not None
        assert container.summarize_log is not None

    def test_run_update_uses_fabric_and_console(self):
        container = create_container(StagehandConfig(), CREDENTIALS)

        assert container.run_update.remote_executor is container.fabric_adapter
        assert container.run_update.operator is container.operator
        assert container.run_update.config is container.config

    def test_ssh_settings_reach_adapter(self):
        config = StagehandConfig(ssh=SSHConfig(port=2222, connect_timeout=5))
        container = create_container(config, CREDENTIALS)

        assert container.fabric_adapter.port == 2222
        assert container.fabric_adapter.connect_timeout == 5

    def test_no_connection_opened_at_wiring(self):
        container = create_container(StagehandConfig(), CREDENTIALS)
        assert container.fabric_adapter._connections == {}
