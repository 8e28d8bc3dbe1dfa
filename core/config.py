"""
Configuration management system for changelog-digest.

Provides YAML-based configuration with environment variable overrides,
automatic config file discovery, and sensible defaults.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Optional, Dict, Any

import yaml

from core.types import OutputFormat
from digest.errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass
class OllamaConfig:
    """
    Configuration for the Ollama summarization service.

    Attributes:
        model: Model name to use (e.g., "llama3")
        endpoint: Ollama server endpoint URL
        timeout: Request timeout in seconds
        api_key: Bearer token for hosted endpoints
        require_api_key: Fail before any work when no api_key is set
        json_mode: Ask the server to constrain output to JSON
    """
    model: str = "llama3"
    endpoint: str = "http://localhost:11434"
    timeout: int = 120
    api_key: Optional[str] = None
    require_api_key: bool = False
    json_mode: bool = True


@dataclass
class GitConfig:
    """
    Configuration for commit collection.

    Attributes:
        repo_path: Repository to read history from
        since: git --since expression or window keyword (today, weekly, monthly)
        until: Optional git --until expression
    """
    repo_path: str = "."
    since: str = "7 days ago"
    until: Optional[str] = None


@dataclass
class DigestConfig:
    """
    Configuration for digest content.

    Attributes:
        audience: Target audience (general, sales, ops, cx)
    """
    audience: str = "general"


@dataclass
class ExportConfig:
    """
    Configuration for rendering digests.

    Attributes:
        default_format: Default output format (markdown, html, json)
        title: Document title
    """
    default_format: str = "markdown"
    title: str = "Changelog Digest"


@dataclass
class ChangelogDigestConfig:
    """
    Complete changelog-digest configuration.

    Aggregates all configuration sections and provides methods for
    loading, saving, and validating configuration files.
    """
    ollama: OllamaConfig = field(default_factory=OllamaConfig)
    git: GitConfig = field(default_factory=GitConfig)
    digest: DigestConfig = field(default_factory=DigestConfig)
    export: ExportConfig = field(default_factory=ExportConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> ChangelogDigestConfig:
        """
        Load configuration from a YAML file or discover default config file.

        Environment overrides are applied in every case.

        Args:
            config_path: Explicit path to config file. If None, searches default locations.

        Returns:
            ChangelogDigestConfig instance with loaded settings

        Raises:
            FileNotFoundError: If explicit config_path is provided but doesn't exist
            ConfigurationError: If the file is not valid YAML or has unknown fields
        """
        if config_path is not None:
            config_path = Path(config_path)
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            logger.info(f"Loading configuration from: {config_path}")
            return cls._load_from_file(config_path)

        found_config = cls._find_config_file()
        if found_config:
            logger.info(f"Found configuration file: {found_config}")
            return cls._load_from_file(found_config)

        logger.info("No configuration file found, using defaults")
        return cls._from_dict(cls._apply_env_overrides({}))

    @classmethod
    def _find_config_file(cls) -> Optional[Path]:
        """
        Search for configuration file in default locations.

        Search order:
            1. ./changelog-digest.yaml
            2. ./.changelog-digest.yaml
            3. ~/.config/changelog-digest/config.yaml

        Returns:
            Path to first found config file, or None
        """
        search_paths = [
            Path.cwd() / "changelog-digest.yaml",
            Path.cwd() / ".changelog-digest.yaml",
            Path.home() / ".config" / "changelog-digest" / "config.yaml",
        ]

        for path in search_paths:
            if path.exists() and path.is_file():
                logger.debug(f"Found config file at: {path}")
                return path

        logger.debug("No config file found in default locations")
        return None

    @classmethod
    def _load_from_file(cls, config_path: Path) -> ChangelogDigestConfig:
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            logger.error(f"Failed to parse YAML config: {e}")
            raise ConfigurationError(f"Invalid YAML configuration: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file must contain a mapping: {config_path}")

        for section in ('ollama', 'git', 'digest', 'export'):
            value = data.get(section)
            if value is not None and not isinstance(value, dict):
                raise ConfigurationError(
                    f"Configuration section '{section}' must be a mapping, got {type(value).__name__}"
                )

        logger.debug(f"Loaded configuration sections: {sorted(data)}")
        config = cls._from_dict(cls._apply_env_overrides(data))
        logger.info("Configuration loaded successfully")
        return config

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> ChangelogDigestConfig:
        try:
            return cls(
                ollama=OllamaConfig(**(data.get('ollama') or {})),
                git=GitConfig(**(data.get('git') or {})),
                digest=DigestConfig(**(data.get('digest') or {})),
                export=ExportConfig(**(data.get('export') or {})),
            )
        except TypeError as e:
            logger.error(f"Invalid configuration structure: {e}")
            raise ConfigurationError(f"Configuration has invalid fields: {e}") from e

    @classmethod
    def _apply_env_overrides(cls, data: dict) -> dict:
        """
        Override configuration values with environment variables.

        Supported environment variables:
            - CHANGELOG_DIGEST_MODEL: Overrides ollama.model
            - CHANGELOG_DIGEST_OLLAMA_ENDPOINT: Overrides ollama.endpoint
            - CHANGELOG_DIGEST_API_KEY (or OLLAMA_API_KEY): Overrides ollama.api_key
            - CHANGELOG_DIGEST_AUDIENCE: Overrides digest.audience
            - CHANGELOG_DIGEST_SINCE: Overrides git.since
        """
        for section in ('ollama', 'git', 'digest', 'export'):
            data[section] = dict(data.get(section) or {})

        overrides = [
            ('CHANGELOG_DIGEST_MODEL', 'ollama', 'model'),
            ('CHANGELOG_DIGEST_OLLAMA_ENDPOINT', 'ollama', 'endpoint'),
            ('CHANGELOG_DIGEST_AUDIENCE', 'digest', 'audience'),
            ('CHANGELOG_DIGEST_SINCE', 'git', 'since'),
        ]
        for env_name, section, key in overrides:
            if env_name in os.environ:
                data[section][key] = os.environ[env_name]
                logger.debug(f"Applied {env_name} override: {os.environ[env_name]}")

        api_key = os.environ.get('CHANGELOG_DIGEST_API_KEY') or os.environ.get('OLLAMA_API_KEY')
        if api_key:
            data['ollama']['api_key'] = api_key
            logger.debug("Applied API key override from environment")

        return data

    def validate(self) -> None:
        """
        Check that the configuration can be used for a run.

        Raises:
            ConfigurationError: On a missing model, a missing required API key,
                or an unsupported output format
        """
        if not (self.ollama.model or "").strip():
            raise ConfigurationError("No model configured. Set ollama.model or CHANGELOG_DIGEST_MODEL.")

        if self.ollama.require_api_key and not self.ollama.api_key:
            raise ConfigurationError(
                "Missing API key for the summarization service.\n"
                "Set it in your .env file or export it in your shell:\n"
                "  export CHANGELOG_DIGEST_API_KEY=your-api-key-here"
            )

        try:
            OutputFormat.parse(self.export.default_format)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

    def save(self, config_path: Optional[Path] = None) -> Path:
        """
        Save configuration to a YAML file.

        Args:
            config_path: Path to save config file. If None, saves to
                ~/.config/changelog-digest/config.yaml

        Returns:
            Path the configuration was written to
        """
        if config_path is None:
            config_path = Path.home() / ".config" / "changelog-digest" / "config.yaml"

        config_path = Path(config_path)
        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = asdict(self)

        try:
            with open(config_path, 'w', encoding='utf-8') as f:
                yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)

            logger.info(f"Configuration saved to: {config_path}")

        except Exception as e:
            logger.error(f"Failed to save configuration: {e}", exc_info=True)
            raise

        return config_path

    def get_expanded_repo_path(self) -> Path:
        """
        Get the repository path with ~ expansion, resolved to an absolute path.

        Returns:
            Fully expanded Path object
        """
        return Path(os.path.expanduser(self.git.repo_path)).resolve()


# Global configuration instance
_global_config: Optional[ChangelogDigestConfig] = None


def get_config() -> ChangelogDigestConfig:
    """
    Get or create the global configuration instance.

    Returns:
        Global ChangelogDigestConfig instance
    """
    global _global_config

    if _global_config is None:
        logger.debug("Initializing global configuration")
        _global_config = ChangelogDigestConfig.load()

    return _global_config


def reload_config(config_path: Optional[Path] = None) -> ChangelogDigestConfig:
    """
    Reload the global configuration from file.

    Args:
        config_path: Optional explicit path to config file

    Returns:
        Reloaded ChangelogDigestConfig instance
    """
    global _global_config

    logger.info("Reloading configuration")
    _global_config = ChangelogDigestConfig.load(config_path)

    return _global_config


def reset_config() -> ChangelogDigestConfig:
    """
    Reset the global configuration to defaults.

    Returns:
        New ChangelogDigestConfig instance with default values
    """
    global _global_config

    logger.info("Resetting configuration to defaults")
    _global_config = ChangelogDigestConfig()

    return _global_config
