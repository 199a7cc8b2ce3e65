import dataclasses

import pytest
from conftest import CONTRACT

from evrelay.core.config import RelayConfig, parse_bind_addr
from evrelay.core.errors import ConfigError


def valid_config(**overrides) -> RelayConfig:
    base = dict(
        event_name="Transfer",
        rpc_url="http://localhost:8545",
        address=CONTRACT,
        webhook_url="http://localhost:8080/hook",
    )
    base.update(overrides)
    return RelayConfig(**base)


def test_defaults() -> None:
    config = valid_config().validate()

    assert config.poll_interval_s == 10
    assert config.chunk_size == 100
    assert config.start_block == 0
    assert str(config.checkpoint_path) == "block.txt"
    assert str(config.abi_path) == "abi.json"
    assert config.webhook_timeout_s == 30


def test_is_immutable() -> None:
    with pytest.raises(dataclasses.FrozenInstanceError):
        valid_config().chunk_size = 5  # type: ignore[misc]


@pytest.mark.parametrize("missing", ["event_name", "rpc_url", "address", "webhook_url"])
def test_missing_required(missing: str) -> None:
    with pytest.raises(ConfigError, match="please specify"):
        valid_config(**{missing: ""}).validate()


@pytest.mark.parametrize(
    "overrides",
    [
        {"address": "0x1234"},
        {"address": "abi.json"},
        {"poll_interval_s": 0},
        {"chunk_size": 0},
        {"start_block": -1},
        {"liveness_addr": "9000"},
        {"webhook_url": "hook.test/events"},
        {"webhook_url": "ftp://hook.test/events"},
        {"webhook_url": "http://"},
    ],
)
def test_invalid_values(overrides: dict) -> None:
    with pytest.raises(ConfigError):
        valid_config(**overrides).validate()


def test_parse_bind_addr() -> None:
    assert parse_bind_addr(":9000") == ("0.0.0.0", 9000)
    assert parse_bind_addr("127.0.0.1:8081") == ("127.0.0.1", 8081)


def test_https_webhook_is_accepted() -> None:
    assert valid_config(webhook_url="https://hook.test/events").validate().webhook_url == "https://hook.test/events"


def test_schemeless_webhook_names_the_setting() -> None:
    with pytest.raises(ConfigError, match="webhook url"):
        valid_config(webhook_url="localhost:8080/hook").validate()
