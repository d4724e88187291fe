"""Configuration for signing URLs and serving signed resources."""

import logging
import os
import secrets
from dataclasses import dataclass
from pathlib import Path

import yaml
from mashumaro import DataClassDictMixin

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.yaml"
DEFAULT_CONFIG_DIR = "config"


@dataclass
class SignerConfig(DataClassDictMixin):
    """Settings shared by the CLI and the server."""

    host: str = "0.0.0.0"
    port: int = 8080
    base_url: str = "http://localhost:8080/"
    """Public URL that request paths are resolved against before verification."""

    secret_key: str = ""
    default_expiration: int | None = None
    """Lifetime in seconds of URLs signed without an explicit expiration."""

    @property
    def key(self) -> bytes:
        """The secret key as bytes."""
        return self.secret_key.encode("utf-8")

    @classmethod
    def load(cls, config_dir: str | Path | None = None) -> "SignerConfig":
        """Load config from `config.yaml`, then apply environment overrides.

        The config file is never written. When no secret key is configured a random
        one is generated in memory, so URLs signed with it do not survive a restart.
        """
        if config_dir is None:
            config_dir = os.getenv("SIGNEDURL_CONFIG_DIR", DEFAULT_CONFIG_DIR)
        config_file = Path(config_dir) / CONFIG_FILE_NAME

        data = {}
        if config_file.exists():
            logger.info(f"Loading config from {config_file}")
            with open(config_file) as f:
                data = yaml.safe_load(f) or {}
        config = cls.from_dict(data)

        if secret_key := os.getenv("SIGNEDURL_SECRET_KEY"):
            config.secret_key = secret_key
        if base_url := os.getenv("SIGNEDURL_BASE_URL"):
            config.base_url = base_url
        if host := os.getenv("SIGNEDURL_HOST"):
            config.host = host
        if port := os.getenv("SIGNEDURL_PORT"):
            config.port = int(port)
        if default_expiration := os.getenv("SIGNEDURL_DEFAULT_EXPIRATION"):
            config.default_expiration = int(default_expiration)

        if not config.secret_key:
            logger.warning("No secret key configured, generating a temporary one")
            config.secret_key = secrets.token_hex(32)
        return config
