"""Client configuration, summary and logging tests."""

import logging
from pathlib import Path

import sys

import pytest
import structlog
from pydantic import ValidationError
from structlog.testing import capture_logs

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from snowflakes import (
    DEFAULT_EPOCH,
    DEFAULT_NODE_ID,
    Client,
    ClientConfig,
    flake_summary,
    format_flake_summary,
    read_flake,
)
from snowflakes.logging import setup_logging

NESTED = "test_nested_child_c626af0f9a0ae7f704f4173764d48d4ce7732f4f6f7ff0a060f0f361"


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("SNOWFLAKES_NODE_ID", "SNOWFLAKES_EPOCH", "SNOWFLAKES_SIGNING_KEY"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    structlog.reset_defaults()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestClientConfig:
    """Test configuration defaults, environment loading and masking."""

    def test_defaults(self, clean_env):
        config = ClientConfig()

        assert config.node_id == DEFAULT_NODE_ID == 1023
        assert config.epoch == DEFAULT_EPOCH == 1618868000000
        assert config.key == ""

    def test_client_default_ignores_environment(self, clean_env):
        clean_env.setenv("SNOWFLAKES_NODE_ID", "17")
        clean_env.setenv("SNOWFLAKES_SIGNING_KEY", "env-secret")

        client = Client()
        assert client.config.node_id == DEFAULT_NODE_ID
        assert client.config.key == ""

    def test_from_environment(self, clean_env):
        clean_env.setenv("SNOWFLAKES_NODE_ID", "17")
        clean_env.setenv("SNOWFLAKES_SIGNING_KEY", "env-secret")

        client = Client.from_settings()
        assert client.config.node_id == 17
        assert client.config.key == "env-secret"

    def test_explicit_overrides_environment(self, clean_env):
        clean_env.setenv("SNOWFLAKES_NODE_ID", "17")

        assert Client.from_settings(node_id=3).config.node_id == 3

    def test_signing_key_hidden(self, clean_env):
        config = ClientConfig(signing_key="very-secret")
        client = Client(config)

        assert "very-secret" not in repr(config)
        assert "very-secret" not in repr(client)

    def test_wide_node_id_masked_with_warning(self, clean_env):
        with capture_logs() as logs:
            config = ClientConfig(node_id=4000)

        assert config.effective_node_id == 4000 & 1023
        assert any(entry["event"] == "node_id_masked" for entry in logs)

    def test_masked_node_ids_collide(self, clean_env):
        clock = lambda: DEFAULT_EPOCH + 150_000_000_000
        wide = Client(ClientConfig(node_id=1024 + 9), clock=clock)
        narrow = Client(ClientConfig(node_id=9), clock=clock)

        assert wide.gen_base() == narrow.gen_base()

    def test_negative_node_id_rejected(self, clean_env):
        with pytest.raises(ValidationError):
            ClientConfig(node_id=-1)

    def test_config_is_immutable(self, clean_env):
        config = ClientConfig()
        with pytest.raises(ValidationError):
            config.node_id = 5


class TestSummary:
    """Test human-readable summaries of decoded flakes."""

    def test_flake_summary(self):
        summary = flake_summary(read_flake(NESTED, epoch=DEFAULT_EPOCH))

        assert summary["flake_type"] == "test_nested_child"
        assert summary["depth"] == 2
        assert summary["sequence"] == 3
        assert summary["parents"] == ["6fa7474d3ff002", "6fa7474c3ff001"]
        assert summary["issued_at"].startswith("2021-")

    def test_format_flake_summary(self):
        line = format_flake_summary(read_flake(NESTED, epoch=DEFAULT_EPOCH))

        assert line.startswith("test_nested_child (2021-")
        assert "| seq 3 |" in line
        assert "| 2 ancestors |" in line
        assert line.endswith("6fa7474d...")

    def test_record_to_dict(self):
        record = read_flake(NESTED)

        assert record.to_dict()["parents"] == ["6fa7474d3ff002", "6fa7474c3ff001"]
        assert record.to_dict()["data"] == "6fa7474d7ff003"


class TestSetupLogging:
    """Test structlog configuration."""

    def test_console(self, restore_logging):
        setup_logging("debug")

        root = logging.getLogger()
        assert structlog.is_configured()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, structlog.stdlib.ProcessorFormatter)

    def test_json_unknown_level_defaults_to_info(self, restore_logging):
        setup_logging("verbose", fmt="json")

        assert logging.getLogger().level == logging.INFO
