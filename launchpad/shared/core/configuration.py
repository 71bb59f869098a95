"""
Configuration Management for Launchpad

Centralized configuration with a 3-tier precedence hierarchy:
environment → user → system defaults.
"""

import os
import yaml
from pathlib import Path
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field, ConfigDict, ValidationError
from enum import Enum

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parents[3]
DEFAULT_SETTINGS_DIR = Path(__file__).resolve().parent.parent / "config" / "settings"


def resolve_path(path: str) -> Path:
    """Resolve a configured relative path against the project root."""
    resolved = Path(path)
    return resolved if resolved.is_absolute() else PROJECT_ROOT / resolved


class ValidationLevel(Enum):
    """Configuration validation strictness levels"""
    STRICT = "strict"      # Fail fast on validation errors
    LENIENT = "lenient"    # Log warnings, use defaults


class ApiConfig(BaseModel):
    """Remote API configuration"""
    model_config = ConfigDict(extra='forbid')

    base_url: str = Field(default="https://crud.teamrabbil.com/api/v1", description="API base URL")
    connect_timeout: float = Field(default=30.0, ge=1.0, le=300.0, description="Connect timeout (seconds)")
    receive_timeout: float = Field(default=30.0, ge=1.0, le=300.0, description="Read timeout (seconds)")
    refresh_path: str = Field(default="/auth/refresh_token/", description="Token refresh endpoint path")
    verify_tls: bool = Field(default=True, description="Verify server certificates")


class NavigationConfig(BaseModel):
    """Startup navigation configuration"""
    model_config = ConfigDict(extra='forbid')

    splash_delay: float = Field(default=0.5, ge=0.0, le=10.0, description="Splash screen delay (seconds)")


class StorageConfig(BaseModel):
    """Session store configuration"""
    model_config = ConfigDict(extra='forbid')

    session_file: str = Field(default="data/session.json", description="Session store file path")


class UIConfig(BaseModel):
    """UI Configuration"""
    model_config = ConfigDict(extra='forbid')

    flet_web_mode: bool = Field(default=False, description="Run in web mode")
    flet_port: int = Field(default=8550, ge=1024, le=65535, description="Web server port")
    theme_mode: str = Field(default="dark", description="UI theme mode")


class LoggingConfig(BaseModel):
    """Logging Configuration"""
    model_config = ConfigDict(extra='forbid')

    level: str = Field(default="DEBUG", description="File log level")
    log_dir: str = Field(default="data/logs", description="Log directory")


class SystemConfig(BaseModel):
    """Complete system configuration"""
    model_config = ConfigDict(extra='forbid')

    api: ApiConfig = Field(default_factory=ApiConfig)
    navigation: NavigationConfig = Field(default_factory=NavigationConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    ui: UIConfig = Field(default_factory=UIConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    schema_version: int = Field(default=1, description="Configuration schema version")


# env var -> (section, key, type)
ENV_OVERRIDES: Dict[str, tuple[str, str, type]] = {
    'API_BASE_URL': ('api', 'base_url', str),
    'API_CONNECT_TIMEOUT': ('api', 'connect_timeout', float),
    'API_RECEIVE_TIMEOUT': ('api', 'receive_timeout', float),
    'API_VERIFY_TLS': ('api', 'verify_tls', bool),
    'SPLASH_DELAY': ('navigation', 'splash_delay', float),
    'SESSION_FILE': ('storage', 'session_file', str),
    'FLET_WEB_MODE': ('ui', 'flet_web_mode', bool),
    'FLET_PORT': ('ui', 'flet_port', int),
    'LOG_LEVEL': ('logging', 'level', str),
    'LOG_DIR': ('logging', 'log_dir', str),
}


class ConfigManager:
    """Configuration manager merging YAML settings files with the environment"""

    def __init__(self, config_dir: Optional[Path] = None, env_file: Optional[Path] = None):
        self.config_dir = config_dir or DEFAULT_SETTINGS_DIR
        self._system_config: Optional[SystemConfig] = None
        self._user_config: Optional[Dict[str, Any]] = None

        if env_file is not None and env_file.exists():
            load_dotenv(dotenv_path=env_file)

    def _load_yaml_file(self, file_path: Path) -> Dict[str, Any]:
        """Load YAML configuration file"""
        if not file_path.exists():
            return {}

        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                return yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            print(f"Warning: Failed to load {file_path}: {e}")
            return {}

    def _save_yaml_file(self, file_path: Path, data: Dict[str, Any]) -> bool:
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(file_path, 'w', encoding='utf-8') as f:
                yaml.dump(data, f, default_flow_style=False, sort_keys=False, indent=2)
            return True
        except OSError as e:
            print(f"Error: Failed to save {file_path}: {e}")
            return False

    def _load_system_defaults(self) -> SystemConfig:
        if self._system_config is None:
            defaults_dict = self._load_yaml_file(self.config_dir / "defaults.yaml")
            try:
                self._system_config = SystemConfig(**defaults_dict)
            except ValidationError as e:
                print(f"Warning: System defaults validation failed: {e}")
                self._system_config = SystemConfig()

        return self._system_config

    def _load_user_config(self) -> Dict[str, Any]:
        if self._user_config is None:
            self._user_config = self._load_yaml_file(self.config_dir / "user.yaml")
        return self._user_config

    def _merge_configs(self) -> Dict[str, Any]:
        """Merge configurations with precedence: env → user → system"""
        merged = self._load_system_defaults().model_dump()
        self._deep_merge(merged, self._load_user_config())
        self._deep_merge(merged, self._get_env_overrides())
        return merged

    def _deep_merge(self, base: Dict[str, Any], updates: Dict[str, Any]) -> None:
        for key, value in updates.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def _get_env_overrides(self) -> Dict[str, Any]:
        """Extract configuration overrides from environment variables"""
        overrides: Dict[str, Any] = {}
        for env_key, (section, config_key, kind) in ENV_OVERRIDES.items():
            value = os.getenv(env_key)
            if value is None:
                continue

            if kind is bool:
                converted: Any = value.lower() in ('true', '1', 'yes', 'on')
            elif kind in (int, float):
                try:
                    converted = kind(value)
                except ValueError:
                    continue
            else:
                converted = value
            overrides.setdefault(section, {})[config_key] = converted

        return overrides

    def get_config(self, validation_level: ValidationLevel = ValidationLevel.STRICT) -> SystemConfig:
        """Get merged configuration with validation"""
        merged_config = self._merge_configs()

        try:
            return SystemConfig(**merged_config)
        except ValidationError as e:
            if validation_level == ValidationLevel.STRICT:
                raise ValueError(f"Configuration validation failed: {e}")
            print(f"Warning: Configuration validation failed, using defaults: {e}")
            return SystemConfig()

    def save_user_config(self, config_updates: Dict[str, Any]) -> bool:
        """Persist user-level overrides (e.g. from a settings screen)"""
        user_path = self.config_dir / "user.yaml"
        existing_config = self._load_yaml_file(user_path)
        self._deep_merge(existing_config, config_updates)

        success = self._save_yaml_file(user_path, existing_config)
        if success:
            self._user_config = None
        return success

    def reload_config(self) -> None:
        """Clear cached configurations and reload from files"""
        self._system_config = None
        self._user_config = None


# Global instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager(config_dir: Optional[Path] = None) -> ConfigManager:
    """Get global configuration manager instance"""
    global _config_manager
    if _config_manager is None or config_dir is not None:
        _config_manager = ConfigManager(config_dir)
    return _config_manager


def get_config(validation_level: ValidationLevel = ValidationLevel.STRICT) -> SystemConfig:
    """Get current system configuration"""
    return get_config_manager().get_config(validation_level)
