"""Tests for YAML configuration loading and get_active_config()."""

import pytest
import yaml

from fulfillment_config import (
    CONFIG_PATH_ENV,
    DATABASE_URL_ENV,
    DEFAULT_CONFIG_PATH,
    get_active_config,
)
from fulfillment_config.bridges import status_labels
from fulfillment_config.loader import load_config, parse_config
from fulfillment_config.schema import MatcherConfig
from fulfillment_kernel.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.delenv(CONFIG_PATH_ENV, raising=False)
    monkeypatch.delenv(DATABASE_URL_ENV, raising=False)


def _write(tmp_path, data) -> str:
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return str(path)


class TestPackagedDefault:
    def test_default_matches_schema_defaults(self):
        config = load_config(DEFAULT_CONFIG_PATH)

        assert config.matcher == MatcherConfig()
        assert config.database.url == "sqlite:///fulfillment.db"
        assert config.logging.level == "INFO"

    def test_get_active_config_uses_default(self, captured_logs):
        config = get_active_config()

        assert config.source == str(DEFAULT_CONFIG_PATH)
        traces = [r for r in captured_logs() if r["message"] == "FULFILLMENT_CONFIG_TRACE"]
        assert traces[0]["page_size"] == 1000


class TestOverrides:
    def test_env_path(self, tmp_path, monkeypatch):
        monkeypatch.setenv(CONFIG_PATH_ENV, _write(tmp_path, {"matcher": {"page_size": 50}}))

        assert get_active_config().matcher.page_size == 50

    def test_explicit_path_beats_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv(CONFIG_PATH_ENV, str(tmp_path / "missing.yaml"))
        path = _write(tmp_path, {"matcher": {"shipment_prefix": "S-"}})

        assert get_active_config(path).matcher.shipment_prefix == "S-"

    def test_database_url_env(self, monkeypatch):
        monkeypatch.setenv(DATABASE_URL_ENV, "postgresql://u@localhost/fulfillment")

        assert get_active_config().database.url == "postgresql://u@localhost/fulfillment"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            get_active_config(tmp_path / "nope.yaml")


class TestValidation:
    @pytest.mark.parametrize(
        "data,key",
        [
            ({"matcher": {"page_size": 0}}, "matcher.page_size"),
            ({"matcher": {"page_size": "ten"}}, "matcher.page_size"),
            ({"matcher": {"shipment_prefix": ""}}, "matcher.shipment_prefix"),
            ({"matcher": {"tag_labels": ["N"]}}, "matcher.tag_labels"),
            ({"matcher": {"colour": "red"}}, "matcher.colour"),
            ({"database": {"echo": "yes"}}, "database.echo"),
            ({"logging": {"level": "LOUD"}}, "logging.level"),
            ({"metrics": {}}, "metrics"),
        ],
    )
    def test_invalid_values(self, data, key):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_config(data)

        assert exc_info.value.key == key

    def test_empty_document_uses_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")

        assert load_config(path).matcher == MatcherConfig()

    def test_non_mapping_document(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_level_is_normalized(self):
        assert parse_config({"logging": {"level": "debug"}}).logging.level == "DEBUG"


def test_status_labels_bridge():
    labels = status_labels(
        parse_config({"matcher": {"shipped_label": "Sent", "tag_labels": {"N": "New!"}}}).matcher
    )

    assert labels.shipped == "Sent"
    assert labels.tag_label("N") == "New!"
    assert labels.tag_label("P") == "P"
