"""
Configuration settings for the Finicity client
"""
import os
import logging
from datetime import timedelta
from typing import Dict
from dotenv import load_dotenv

from .models import Credentials

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.finicity.com/aggregation"
DEFAULT_TOKEN_LIFETIME_MINUTES = 90
DEFAULT_TIMEOUT_SECONDS = 30


class ConfigurationError(Exception):
    """Raised when configuration is invalid or incomplete"""
    pass


def _key(name: str, suffix: str) -> str:
    """Environment variable name for an optional credential-set suffix"""
    return f"{name}_{suffix}" if suffix else name


def _number(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}")


class Config:
    """Finicity Configuration"""

    def __init__(self, suffix: str = ""):
        self.suffix = suffix

        # Partner credentials, one set per suffix
        self.app_key = os.getenv(_key('FINICITY_APP_KEY', suffix))
        self.partner_id = os.getenv(_key('FINICITY_PARTNER_ID', suffix))
        self.partner_secret = os.getenv(_key('FINICITY_PARTNER_SECRET', suffix))

        # API endpoint and client-side policy
        self.base_url = os.getenv('FINICITY_BASE_URL', DEFAULT_BASE_URL).rstrip('/')
        self.token_lifetime = timedelta(
            minutes=_number('FINICITY_TOKEN_LIFETIME_MINUTES', DEFAULT_TOKEN_LIFETIME_MINUTES)
        )
        self.timeout = _number('FINICITY_TIMEOUT', DEFAULT_TIMEOUT_SECONDS)

    def validate(self):
        """Validate required configuration"""
        if not self.app_key:
            raise ConfigurationError(f"{_key('FINICITY_APP_KEY', self.suffix)} not set")
        if not self.partner_id:
            raise ConfigurationError(f"{_key('FINICITY_PARTNER_ID', self.suffix)} not set")
        if not self.partner_secret:
            raise ConfigurationError(f"{_key('FINICITY_PARTNER_SECRET', self.suffix)} not set")
        if self.token_lifetime <= timedelta(0):
            raise ConfigurationError("FINICITY_TOKEN_LIFETIME_MINUTES must be positive")
        if self.timeout <= 0:
            raise ConfigurationError("FINICITY_TIMEOUT must be positive")

    def credentials(self) -> Credentials:
        """Validated partner credentials for this configuration"""
        self.validate()
        return Credentials(
            app_key=self.app_key,
            partner_id=self.partner_id,
            partner_secret=self.partner_secret,
        )


# One configuration instance per credential-set suffix
_config: Dict[str, Config] = {}


def get_config(suffix: str = "") -> Config:
    """Get the configuration instance for a credential-set suffix"""
    if suffix not in _config:
        _config[suffix] = Config(suffix)
    return _config[suffix]
