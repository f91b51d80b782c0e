import json

import pytest

from ecwidkit.config import (
    DEFAULT_BASE_URL,
    DEFAULT_LOG_LEVEL,
    DEFAULT_OUTPUT,
    Config,
    ConfigError,
)


def test_validate_accepts_minimal_config():
    cfg = Config(store_id="12345", token="token")
    cfg.validate()
    assert cfg.store_id == "12345"


def test_validate_missing_required_fields():
    with pytest.raises(ConfigError) as exc:
        Config().validate()
    message = str(exc.value)
    assert message.startswith("config validation: ")
    assert "store_id is required" in message
    assert "token is required" in message
    assert exc.value.problems == ["store_id is required", "token is required"]


def test_validate_invalid_output():
    with pytest.raises(ConfigError) as exc:
        Config(store_id="1", token="token", output="xml").validate()
    assert "(must be json or table)" in str(exc.value)
    assert '"xml"' in str(exc.value)


def test_validate_invalid_log_level():
    with pytest.raises(ConfigError) as exc:
        Config(store_id="1", token="token", log_level="verbose").validate()
    assert "(must be debug, info, warn, or error)" in str(exc.value)


def test_validate_negative_retries():
    with pytest.raises(ConfigError) as exc:
        Config(store_id="1", token="token", max_retries=-1).validate()
    assert exc.value.problems == ["max_retries must be >= 0"]


@pytest.mark.parametrize("level", ["debug", "info", "warn", "error", ""])
def test_validate_accepts_known_levels(level):
    cfg = Config(store_id="1", token="token", log_level=level, output="table")
    cfg.validate()
    assert cfg.log_level == level


def test_with_defaults_fills_empty_fields():
    cfg = Config(store_id="1", token="token").with_defaults()
    assert cfg.base_url == DEFAULT_BASE_URL
    assert cfg.output == DEFAULT_OUTPUT
    assert cfg.log_level == DEFAULT_LOG_LEVEL


def test_with_defaults_keeps_set_values_and_original():
    original = Config(store_id="1", token="token", output="table", log_level="warn")
    updated = original.with_defaults()
    assert updated.output == "table"
    assert updated.log_level == "warn"
    assert original.base_url == ""


def test_redacted_token_short():
    assert Config(token="abcd").redacted_token() == "****"
    assert Config(token="").redacted_token() == "****"


def test_redacted_token_long_keeps_last_four():
    token = "secret_test"
    redacted = Config(token=token).redacted_token()
    assert len(redacted) == len(token)
    assert redacted.endswith(token[-4:])
    assert set(redacted[:-4]) == {"*"}


def test_to_json_redacts_token():
    cfg = Config(store_id="12345", token="secret_test")
    data = json.loads(cfg.to_json())
    assert data["token"] == cfg.redacted_token()
    assert "secret_test" not in cfg.to_json()
    assert data["store_id"] == "12345"


def test_to_dict_omits_empty_optional_fields():
    data = Config(store_id="1", token="token").to_dict()
    assert set(data) == {"store_id", "token"}
    full = Config(store_id="1", token="token", max_retries=3).with_defaults().to_dict()
    assert full["max_retries"] == 3
    assert full["base_url"] == DEFAULT_BASE_URL