"""Tests for YAML configuration loading, overrides and validation."""

from pathlib import Path

import pytest
import yaml

from core.config import ChangelogDigestConfig, get_config, reload_config
from digest.errors import ConfigurationError


def test_defaults_without_config_file():
    config = ChangelogDigestConfig.load()
    assert config.ollama.model == "llama3"
    assert config.ollama.endpoint == "http://localhost:11434"
    assert config.git.since == "7 days ago"
    assert config.digest.audience == "general"
    assert config.export.default_format == "markdown"


def test_discovers_config_in_working_directory(isolated_environment):
    (isolated_environment / "changelog-digest.yaml").write_text(
        "ollama:\n  model: mistral\ngit:\n  since: 2 weeks ago\n", encoding="utf-8"
    )
    config = ChangelogDigestConfig.load()
    assert config.ollama.model == "mistral"
    assert config.git.since == "2 weeks ago"
    assert config.ollama.timeout == 120


def test_explicit_missing_path_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        ChangelogDigestConfig.load(tmp_path / "nope.yaml")


def test_invalid_yaml_raises_configuration_error(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("ollama: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigurationError, match="Invalid YAML"):
        ChangelogDigestConfig.load(path)


def test_unknown_field_raises_configuration_error(tmp_path):
    path = tmp_path / "extra.yaml"
    path.write_text("ollama:\n  temperature: 0.2\n", encoding="utf-8")
    with pytest.raises(ConfigurationError, match="invalid fields"):
        ChangelogDigestConfig.load(path)


@pytest.mark.parametrize("body", ["git: '7 days ago'\n", "ollama:\n  - llama3\n"])
def test_non_mapping_section_raises_configuration_error(tmp_path, body):
    path = tmp_path / "flat.yaml"
    path.write_text(body, encoding="utf-8")
    with pytest.raises(ConfigurationError, match="must be a mapping"):
        ChangelogDigestConfig.load(path)


def test_environment_overrides_apply_without_file(monkeypatch):
    monkeypatch.setenv("CHANGELOG_DIGEST_MODEL", "qwen2")
    monkeypatch.setenv("CHANGELOG_DIGEST_OLLAMA_ENDPOINT", "http://gpu-box:11434")
    monkeypatch.setenv("CHANGELOG_DIGEST_AUDIENCE", "sales")
    monkeypatch.setenv("OLLAMA_API_KEY", "secret")

    config = ChangelogDigestConfig.load()

    assert config.ollama.model == "qwen2"
    assert config.ollama.endpoint == "http://gpu-box:11434"
    assert config.digest.audience == "sales"
    assert config.ollama.api_key == "secret"


def test_environment_overrides_file_values(tmp_path, monkeypatch):
    path = tmp_path / "config.yaml"
    path.write_text("git:\n  since: yesterday\n", encoding="utf-8")
    monkeypatch.setenv("CHANGELOG_DIGEST_SINCE", "monthly")
    monkeypatch.setenv("CHANGELOG_DIGEST_API_KEY", "primary")
    monkeypatch.setenv("OLLAMA_API_KEY", "fallback")

    config = ChangelogDigestConfig.load(path)

    assert config.git.since == "monthly"
    assert config.ollama.api_key == "primary"


def test_validate_accepts_defaults():
    ChangelogDigestConfig().validate()


def test_validate_requires_api_key_when_configured():
    config = ChangelogDigestConfig()
    config.ollama.require_api_key = True
    with pytest.raises(ConfigurationError, match="API key"):
        config.validate()

    config.ollama.api_key = "token"
    config.validate()


def test_validate_rejects_empty_model_and_bad_format():
    config = ChangelogDigestConfig()
    config.ollama.model = "  "
    with pytest.raises(ConfigurationError, match="model"):
        config.validate()

    config = ChangelogDigestConfig()
    config.export.default_format = "pdf"
    with pytest.raises(ConfigurationError, match="pdf"):
        config.validate()


def test_save_round_trips_through_yaml(tmp_path):
    config = ChangelogDigestConfig()
    config.ollama.model = "mistral"
    path = config.save(tmp_path / "nested" / "config.yaml")

    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    assert data["ollama"]["model"] == "mistral"
    assert ChangelogDigestConfig.load(path).ollama.model == "mistral"


def test_save_defaults_to_user_config_dir(isolated_environment):
    path = ChangelogDigestConfig().save()
    assert path == Path.home() / ".config" / "changelog-digest" / "config.yaml"
    assert path.exists()


def test_global_config_is_cached_until_reloaded(tmp_path):
    first = get_config()
    assert get_config() is first

    path = tmp_path / "config.yaml"
    path.write_text("digest:\n  audience: ops\n", encoding="utf-8")
    reloaded = reload_config(path)
    assert reloaded is get_config()
    assert reloaded.digest.audience == "ops"


def test_expanded_repo_path(isolated_environment):
    config = ChangelogDigestConfig()
    assert config.get_expanded_repo_path() == isolated_environment.resolve()
    config.git.repo_path = "~/src/app"
    assert config.get_expanded_repo_path() == (Path.home() / "src" / "app").resolve()
