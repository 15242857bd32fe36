# pyright: reportAny=false
from datetime import timedelta
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from pacer.config import (
    LogFormat,
    LogLevel,
    config_from_dict,
    deep_merge,
    load_config,
    parse_env_vars,
    parse_string_value,
    read_toml_file,
    set_nested_key,
)
from pacer.exceptions import ConfigLoadError, ConfigValidationError

if TYPE_CHECKING:
    from pyfakefs.fake_filesystem import FakeFilesystem


class TestReadTomlFile:
    def test_reads_valid_file(self, fs: "FakeFilesystem") -> None:
        path = Path("/cfg/pacer.toml")
        fs.create_file(path, contents='[backoff]\nfactor = 3.0\n')

        assert read_toml_file(path) == {"backoff": {"factor": 3.0}}

    def test_raises_file_not_found(self, fs: "FakeFilesystem") -> None:
        with pytest.raises(FileNotFoundError):
            _ = read_toml_file(Path("/cfg/missing.toml"))

    def test_raises_load_error_for_invalid_toml(self, fs: "FakeFilesystem") -> None:
        path = Path("/cfg/broken.toml")
        fs.create_file(path, contents='[backoff\nfactor = 2\n')

        with pytest.raises(ConfigLoadError) as exc_info:
            _ = read_toml_file(path)

        assert exc_info.value.path == path


class TestDeepMerge:
    def test_override_wins_and_nested_dicts_merge(self) -> None:
        base = {"backoff": {"factor": 2.0, "jitter": False}, "logging": {"level": "info"}}
        override = {"backoff": {"jitter": True}}

        merged = deep_merge(base, override)

        assert merged == {
            "backoff": {"factor": 2.0, "jitter": True},
            "logging": {"level": "info"},
        }

    def test_inputs_are_not_modified(self) -> None:
        base = {"backoff": {"factor": 2.0}}
        override = {"backoff": {"factor": 4.0}}

        merged = deep_merge(base, override)
        merged["backoff"]["factor"] = 8.0

        assert base == {"backoff": {"factor": 2.0}}
        assert override == {"backoff": {"factor": 4.0}}


class TestParseStringValue:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("true", True),
            ("FALSE", False),
            ("1", 1),
            ("0", 0),
            ("42", 42),
            ("0.25", 0.25),
            ("1e3", 1000.0),
            ("[1, 2]", [1, 2]),
            ('{"a": 1}', {"a": 1}),
            ("PT1S", "PT1S"),
            ("debug", "debug"),
        ],
    )
    def test_infers_types(self, raw: str, expected: object) -> None:
        assert parse_string_value(raw) == expected


class TestSetNestedKey:
    def test_creates_intermediate_dicts(self) -> None:
        d: dict[str, object] = {}

        set_nested_key(d, "backoff.min", 0.5)

        assert d == {"backoff": {"min": 0.5}}

    def test_replaces_non_dict_intermediate(self) -> None:
        d: dict[str, object] = {"backoff": 3}

        set_nested_key(d, "backoff.max", 2)

        assert d == {"backoff": {"max": 2}}


class TestParseEnvVars:
    def test_maps_prefixed_variables(self) -> None:
        environ = {
            "PACER_BACKOFF__FACTOR": "3.0",
            "PACER_BACKOFF__JITTER": "true",
            "PACER_LOGGING__LEVEL": "debug",
            "OTHER_VALUE": "ignored",
        }

        assert parse_env_vars(environ=environ) == {
            "backoff": {"factor": 3.0, "jitter": True},
            "logging": {"level": "debug"},
        }

    def test_reads_os_environ_by_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PACER_BACKOFF__MAX", "30")

        assert parse_env_vars()["backoff"]["max"] == 30

    def test_ignores_bare_prefix(self) -> None:
        assert parse_env_vars(environ={"PACER_": "x"}) == {}


class TestConfigFromDict:
    def test_empty_dict_gives_defaults(self) -> None:
        config = config_from_dict({})

        assert config.backoff.min == timedelta(milliseconds=100)
        assert config.backoff.max == timedelta(seconds=10)
        assert config.backoff.factor == 2.0
        assert config.backoff.jitter is False
        assert config.logging.level is LogLevel.INFO
        assert config.logging.format is LogFormat.TEXT

    def test_numbers_are_seconds(self) -> None:
        config = config_from_dict({"backoff": {"min": 0.5, "max": 30}})

        assert config.backoff.min == timedelta(milliseconds=500)
        assert config.backoff.max == timedelta(seconds=30)

    def test_iso_durations(self) -> None:
        config = config_from_dict({"backoff": {"min": "PT0.25S", "max": "PT1M"}})

        assert config.backoff.min == timedelta(milliseconds=250)
        assert config.backoff.max == timedelta(minutes=1)

    def test_unknown_keys_are_ignored(self) -> None:
        config = config_from_dict({"backoff": {"retries": 5}, "extra": {"x": 1}})

        assert config.backoff.factor == 2.0

    def test_rejects_non_positive_factor(self) -> None:
        with pytest.raises(ConfigValidationError) as exc_info:
            _ = config_from_dict({"backoff": {"factor": 0}})

        assert exc_info.value.key == "backoff.factor"
        assert exc_info.value.value == 0

    def test_rejects_negative_duration(self) -> None:
        with pytest.raises(ConfigValidationError) as exc_info:
            _ = config_from_dict({"backoff": {"min": -1}})

        assert exc_info.value.key == "backoff.min"

    def test_rejects_min_greater_than_max(self) -> None:
        with pytest.raises(ConfigValidationError) as exc_info:
            _ = config_from_dict({"backoff": {"min": 20, "max": 10}})

        assert exc_info.value.key == "backoff"
        assert "must not exceed" in str(exc_info.value)

    def test_rejects_unknown_log_level(self) -> None:
        with pytest.raises(ConfigValidationError) as exc_info:
            _ = config_from_dict({"logging": {"level": "loud"}}, source="test")

        assert exc_info.value.key == "logging.level"
        assert exc_info.value.source == "test"


class TestLoadConfig:
    def test_defaults_without_sources(self) -> None:
        config = load_config(include_env=False)

        assert config.backoff.factor == 2.0

    def test_loads_file(self, fs: "FakeFilesystem") -> None:
        path = Path("/cfg/pacer.toml")
        fs.create_file(
            path,
            contents=(
                "[backoff]\n"
                "min = 0.2\n"
                "max = 5\n"
                "factor = 1.5\n"
                "jitter = true\n"
                "\n"
                "[logging]\n"
                'level = "debug"\n'
                'format = "json"\n'
            ),
        )

        config = load_config(path, include_env=False)

        assert config.backoff.min == timedelta(milliseconds=200)
        assert config.backoff.max == timedelta(seconds=5)
        assert config.backoff.factor == 1.5
        assert config.backoff.jitter is True
        assert config.logging.level is LogLevel.DEBUG
        assert config.logging.format is LogFormat.JSON

    def test_env_overrides_file(self, fs: "FakeFilesystem") -> None:
        path = Path("/cfg/pacer.toml")
        fs.create_file(path, contents="[backoff]\nfactor = 1.5\njitter = true\n")

        config = load_config(path, environ={"PACER_BACKOFF__FACTOR": "4.0"})

        assert config.backoff.factor == 4.0
        assert config.backoff.jitter is True

    def test_overrides_win_over_env(self) -> None:
        config = load_config(
            environ={"PACER_BACKOFF__FACTOR": "4.0"},
            overrides={"backoff": {"factor": 5.0}},
        )

        assert config.backoff.factor == 5.0

    def test_validation_error_names_sources(self, fs: "FakeFilesystem") -> None:
        path = Path("/cfg/pacer.toml")
        fs.create_file(path, contents="[backoff]\nfactor = -1.0\n")

        with pytest.raises(ConfigValidationError) as exc_info:
            _ = load_config(path, include_env=False)

        assert exc_info.value.source == "/cfg/pacer.toml"

    def test_missing_file_raises(self, fs: "FakeFilesystem") -> None:
        with pytest.raises(FileNotFoundError):
            _ = load_config(Path("/cfg/missing.toml"), include_env=False)
