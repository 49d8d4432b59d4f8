import json

import pytest

from collections_etl.config import ConfigurationError, PipelineSettings, load_configuration, load_settings


def test_load_json_configuration(tmp_path):
    path = tmp_path / "pipeline.json"
    path.write_text(
        json.dumps(
            {
                "dialer_actor": "ROBOT",
                "concurrent": True,
                "max_workers": "4",
                "columns": {"events": {"event_date": "Fecha"}},
            }
        ),
        encoding="utf-8",
    )

    settings = load_settings(path)

    assert settings.dialer_actor == "ROBOT"
    assert settings.promise_outcome == "PAYMENT_PROMISE"
    assert settings.concurrent is True
    assert settings.max_workers == 4
    assert settings.event_columns == {"event_date": "Fecha"}
    assert settings.assignment_columns == {}


def test_load_yaml_configuration(tmp_path):
    pytest.importorskip("yaml")
    path = tmp_path / "pipeline.yaml"
    path.write_text("promise_outcome: PROMESA\nfollow_up_days: 14\n", encoding="utf-8")

    settings = load_settings(path)

    assert settings.promise_outcome == "PROMESA"
    assert settings.follow_up_days == 14


def test_defaults_without_configuration_file():
    assert load_settings(None) == PipelineSettings()


def test_missing_configuration_file(tmp_path):
    with pytest.raises(ConfigurationError):
        load_configuration(tmp_path / "missing.json")


def test_unsupported_configuration_extension(tmp_path):
    path = tmp_path / "pipeline.toml"
    path.write_text("", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_configuration(path)


def test_non_mapping_configuration_is_rejected(tmp_path):
    path = tmp_path / "pipeline.json"
    path.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_configuration(path)


def test_invalid_values_raise_configuration_error():
    with pytest.raises(ConfigurationError):
        PipelineSettings.from_mapping({"max_workers": "many"})
    with pytest.raises(ConfigurationError):
        PipelineSettings.from_mapping({"columns": ["events"]})


@pytest.mark.parametrize(
    ("value", "expected"),
    [(True, True), (False, False), ("false", False), ("False", False), ("no", False), ("0", False), ("yes", True), ("TRUE", True), (1, True), (0, False)],
)
def test_concurrent_flag_parses_boolean_values(value, expected):
    assert PipelineSettings.from_mapping({"concurrent": value}).concurrent is expected


def test_concurrent_flag_rejects_ambiguous_values():
    with pytest.raises(ConfigurationError, match="maybe"):
        PipelineSettings.from_mapping({"concurrent": "maybe"})
    with pytest.raises(ConfigurationError):
        PipelineSettings.from_mapping({"concurrent": 2})
