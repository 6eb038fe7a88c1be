"""Tests for runtime configuration."""

from pathlib import Path

import pytest

from sop_writer.config import DEFAULT_GEMINI_MODEL, Settings, load_settings
from sop_writer.errors import ConfigurationError


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("GEMINI_API_KEY", "OPENROUTER_API_KEY", "SOP_BASE_DIR", "SOP_PROMPTS_DIR", "GEMINI_TEMPERATURE"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_paths_derive_from_base_dir(tmp_path):
    settings = Settings(gemini_api_key="g", openrouter_api_key="o", base_dir=tmp_path, _env_file=None)

    assert settings.data_dir == tmp_path / "data"
    assert settings.csv_file == tmp_path / "data" / "applications.csv"
    assert settings.prompts_dir == tmp_path / "prompts"
    assert settings.resumes_dir == tmp_path / "resume"
    assert settings.sops_dir == tmp_path / "sops"


def test_explicit_paths_win(tmp_path):
    settings = Settings(
        gemini_api_key="g",
        openrouter_api_key="o",
        base_dir=tmp_path,
        prompts_dir=tmp_path / "elsewhere",
        _env_file=None,
    )
    assert settings.prompts_dir == tmp_path / "elsewhere"
    assert settings.sops_dir == tmp_path / "sops"


def test_environment_values_are_read(clean_env, tmp_path):
    clean_env.setenv("GEMINI_API_KEY", "env-g")
    clean_env.setenv("OPENROUTER_API_KEY", "env-o")
    clean_env.setenv("SOP_BASE_DIR", str(tmp_path))
    clean_env.setenv("GEMINI_TEMPERATURE", "0.8")

    settings = load_settings(_env_file=None)

    assert settings.gemini_api_key == "env-g"
    assert settings.openrouter_api_key == "env-o"
    assert settings.base_dir == Path(tmp_path)
    assert settings.gemini_temperature == 0.8
    assert settings.gemini_model == DEFAULT_GEMINI_MODEL


def test_missing_keys_raise_configuration_error(clean_env):
    with pytest.raises(ConfigurationError) as exc_info:
        load_settings(_env_file=None)

    assert "GEMINI_API_KEY environment variable not set" in str(exc_info.value)
    assert "OPENROUTER_API_KEY environment variable not set" in str(exc_info.value)


def test_blank_key_is_rejected(clean_env):
    with pytest.raises(ConfigurationError, match="gemini_api_key"):
        load_settings(gemini_api_key="   ", openrouter_api_key="o", _env_file=None)


def test_generation_config_and_secrets(settings):
    assert settings.generation_config() == {
        "temperature": 0.4,
        "topK": 1,
        "topP": 1.0,
        "maxOutputTokens": 2048,
    }
    assert settings.secret_values() == ["test-gemini-key", "test-openrouter-key"]
