"""
Hetzner Robot Client - Configuration Loader

This module loads webservice credentials with cascading priority:
environment variables → config file. Credentials are never logged.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from .exceptions import ConfigurationError
from .models import RobotConfig

logger = logging.getLogger("hrobot")

TRUE_VALUES = ("true", "1", "yes")


class ConfigLoader:
    """
    Configuration loader for Robot webservice credentials.

    Priority order for credential sources:
    1. Environment variables (highest priority) - for CI/CD and containers
    2. Config file (~/.hrobot/config.json) - for multiple profiles

    The config file is expected to be readable by its owner only (0600);
    looser permissions are reported and tightened where possible.
    """

    DEFAULT_CONFIG_DIR = Path.home() / ".hrobot"
    DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.json"
    REQUIRED_FILE_PERMISSIONS = 0o600

    @classmethod
    def load(cls, profile: str = "default", config_file: Optional[Path] = None) -> RobotConfig:
        """
        Load configuration for the specified profile.

        Args:
            profile: Profile name to load (default: "default")
            config_file: Override for the config file location

        Returns:
            RobotConfig object with credentials

        Raises:
            ConfigurationError: If no credentials found or configuration invalid
        """
        logger.debug(f"Loading configuration for profile: {profile}")

        config = cls._load_from_env()
        if config:
            logger.info("Loaded configuration from environment variables")
            return config

        config = cls._load_from_config_file(profile, config_file or cls.DEFAULT_CONFIG_FILE)
        if config:
            logger.info(f"Loaded configuration for profile '{profile}' from config file")
            return config

        raise ConfigurationError(
            f"No credentials found for profile '{profile}'. "
            f"Set HROBOT_USERNAME and HROBOT_PASSWORD or add the profile to {cls.DEFAULT_CONFIG_FILE}"
        )

    @classmethod
    def _load_from_env(cls) -> Optional[RobotConfig]:
        """Load configuration from environment variables."""
        username = os.getenv("HROBOT_USERNAME")
        password = os.getenv("HROBOT_PASSWORD")

        if not (username and password):
            return None

        values: Dict[str, Any] = {"username": username, "password": password}
        if os.getenv("HROBOT_URL"):
            values["url"] = os.getenv("HROBOT_URL")
        if os.getenv("HROBOT_VERIFY_SSL"):
            values["verify_ssl"] = os.getenv("HROBOT_VERIFY_SSL", "true").lower() in TRUE_VALUES
        if os.getenv("HROBOT_TIMEZONE"):
            values["timezone"] = os.getenv("HROBOT_TIMEZONE")

        try:
            return RobotConfig(**values)
        except ValidationError as e:
            logger.error(f"Invalid configuration in environment variables: {e}")
            raise ConfigurationError(f"Invalid configuration in environment variables: {e}")

    @classmethod
    def _read_config_file(cls, config_file: Path) -> Dict[str, Any]:
        cls._verify_file_permissions(config_file)
        try:
            with open(config_file, 'r') as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in config file: {e}")
            raise ConfigurationError(f"Invalid JSON in config file: {e}")
        except OSError as e:
            logger.error(f"Error reading config file: {e}")
            raise ConfigurationError(f"Error reading config file: {e}")

    @classmethod
    def _load_from_config_file(cls, profile: str, config_file: Path) -> Optional[RobotConfig]:
        """Load configuration from config file."""
        if not config_file.exists():
            logger.debug(f"Config file not found: {config_file}")
            return None

        config_data = cls._read_config_file(config_file)
        if profile not in config_data:
            logger.debug(f"Profile '{profile}' not found in config file")
            return None

        try:
            return RobotConfig(**config_data[profile])
        except ValidationError as e:
            logger.error(f"Invalid profile '{profile}' in config file: {e}")
            raise ConfigurationError(f"Invalid profile '{profile}' in config file: {e}")

    @classmethod
    def list_profiles(cls, config_file: Optional[Path] = None) -> List[str]:
        """
        List all configured profiles.

        Returns:
            List of profile names
        """
        config_file = config_file or cls.DEFAULT_CONFIG_FILE
        if not config_file.exists():
            return []
        return list(cls._read_config_file(config_file).keys())

    @classmethod
    def _set_secure_permissions(cls, file_path: Path) -> None:
        """Set secure file permissions (0600 - owner read/write only)."""
        try:
            os.chmod(file_path, cls.REQUIRED_FILE_PERMISSIONS)
            logger.debug(f"Set secure permissions on {file_path}")
        except OSError as e:
            logger.warning(f"Could not set secure permissions on {file_path}: {e}")

    @classmethod
    def _verify_file_permissions(cls, file_path: Path) -> None:
        """Verify file has secure permissions and warn if not."""
        try:
            current_perms = os.stat(file_path).st_mode & 0o777
        except OSError as e:
            logger.debug(f"Could not verify file permissions: {e}")
            return

        if current_perms != cls.REQUIRED_FILE_PERMISSIONS:
            logger.warning(
                f"Config file {file_path} has insecure permissions {oct(current_perms)}. "
                f"Recommended: {oct(cls.REQUIRED_FILE_PERMISSIONS)}"
            )
            cls._set_secure_permissions(file_path)
