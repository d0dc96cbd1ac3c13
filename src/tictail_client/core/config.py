"""Configuration management for the Tictail API client.

The client itself only takes a ``Config`` object. Environment variables,
``.env`` files and YAML profiles are read by the helpers on this class,
which the command-line front end uses.
"""

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional, Dict, Any, List

import httpx
import yaml
from dotenv import load_dotenv

from .. import __version__
from .exceptions import ConfigurationError
from .logging import get_logger

logger = get_logger('config')

EXPIRY_EXPIRED = 'expired'
EXPIRY_NEVER = 'never'
EXPIRY_POLICIES = (EXPIRY_EXPIRED, EXPIRY_NEVER)

# field name -> environment variable
ENV_VARS = {
    'client_id': 'TICTAIL_CLIENT_ID',
    'client_secret': 'TICTAIL_CLIENT_SECRET',
    'access_token': 'TICTAIL_ACCESS_TOKEN',
    'auth_url': 'TICTAIL_AUTH_URL',
    'api_url': 'TICTAIL_API_URL',
    'connect_timeout': 'TICTAIL_CONNECT_TIMEOUT',
    'request_timeout': 'TICTAIL_REQUEST_TIMEOUT',
    'max_redirects': 'TICTAIL_MAX_REDIRECTS',
    'verify_ssl': 'TICTAIL_VERIFY_SSL',
    'missing_expiry': 'TICTAIL_MISSING_EXPIRY',
    'user_agent': 'TICTAIL_USER_AGENT',
    'log_level': 'LOG_LEVEL',
}

_TRUE_VALUES = ('1', 'true', 'yes', 'on')
_FALSE_VALUES = ('0', 'false', 'no', 'off')


def _parse_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"Invalid boolean for {name}: {value!r}", {'field': name})


def _parse_number(name: str, value: Any, kind=float):
    try:
        return kind(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Invalid number for {name}: {value!r}", {'field': name})


@dataclass
class Config:
    """Configuration for the Tictail API client.

    Values are resolved in priority order when loaded through the helpers:
    1. Command-line arguments (applied by the CLI)
    2. Environment variables
    3. .env file
    4. Configuration file (~/.tictail-client.yml)
    5. Default values
    """

    # Credentials
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    access_token: Optional[str] = None

    # Endpoints
    auth_url: str = 'https://tictail.com/oauth/'
    api_url: str = 'https://api.tictail.com'

    # Transport
    connect_timeout: float = 30.0
    request_timeout: float = 30.0
    max_redirects: int = 3
    verify_ssl: bool = True
    user_agent: str = field(default_factory=lambda: f'tictail-client/{__version__}')

    # What a token set without an explicit expiry means: 'expired' or 'never'
    missing_expiry: str = EXPIRY_EXPIRED

    log_level: str = 'INFO'

    # Profile management
    profile: str = 'default'
    config_file: Optional[Path] = None

    def __post_init__(self):
        """Normalize types and reject invalid values."""
        self.connect_timeout = _parse_number('connect_timeout', self.connect_timeout)
        self.request_timeout = _parse_number('request_timeout', self.request_timeout)
        self.max_redirects = _parse_number('max_redirects', self.max_redirects, int)
        self.verify_ssl = _parse_bool('verify_ssl', self.verify_ssl)

        if self.connect_timeout <= 0 or self.request_timeout <= 0:
            raise ConfigurationError("Timeouts must be positive")
        if self.max_redirects < 0:
            raise ConfigurationError("max_redirects cannot be negative")

        self.missing_expiry = str(self.missing_expiry).lower()
        if self.missing_expiry not in EXPIRY_POLICIES:
            raise ConfigurationError(
                f"Invalid missing_expiry: {self.missing_expiry!r} "
                f"(expected one of {', '.join(EXPIRY_POLICIES)})",
                {'field': 'missing_expiry'}
            )

        for name in ('auth_url', 'api_url'):
            if not isinstance(getattr(self, name), str) or not getattr(self, name):
                raise ConfigurationError(f"{name} must be a non-empty URL string", {'field': name})

        if not self.auth_url.endswith('/'):
            self.auth_url += '/'
        self.api_url = self.api_url.rstrip('/')

    @staticmethod
    def _env_values() -> Dict[str, str]:
        """Collect configuration values present in the environment."""
        values = {}
        for name, env_var in ENV_VARS.items():
            value = os.getenv(env_var)
            if value is not None and value.strip() != '':
                values[name] = value.strip()
        return values

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> 'Config':
        """Create config from environment variables and optional .env file.

        Args:
            env_file: Path to .env file (default: looks for .env in current dir)

        Returns:
            Config instance with loaded values
        """
        if env_file:
            if env_file.exists():
                load_dotenv(env_file)
        elif Path('.env').exists():
            load_dotenv()

        return cls(**cls._env_values())

    @classmethod
    def from_file(cls, config_file: Path, profile: str = 'default') -> 'Config':
        """Load configuration from YAML file.

        The file holds a ``defaults`` mapping and a ``profiles`` mapping of
        named overrides. Environment variables still take precedence.

        Args:
            config_file: Path to YAML configuration file
            profile: Profile name to load

        Returns:
            Config instance with loaded values

        Raises:
            ConfigurationError: If file doesn't exist or is invalid
        """
        if not config_file.exists():
            raise ConfigurationError(f"Configuration file not found: {config_file}")

        try:
            with open(config_file, 'r') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in config file: {e}")

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file must contain a mapping: {config_file}")

        profiles = data.get('profiles') or {}
        if profile != 'default' and profile not in profiles:
            raise ConfigurationError(f"Profile not found in {config_file}: {profile}")

        config_data = {**(data.get('defaults') or {}), **(profiles.get(profile) or {})}

        known = {f.name for f in fields(cls)} - {'profile', 'config_file'}
        values = {}
        for key, value in config_data.items():
            if key not in known:
                logger.warning(f"Ignoring unknown config key '{key}' in {config_file}")
                continue
            # Expand environment variables in config values
            if isinstance(value, str) and '${' in value:
                value = os.path.expandvars(value)
            values[key] = value

        values.update(cls._env_values())
        return cls(profile=profile, config_file=config_file, **values)

    def validate(self) -> List[str]:
        """Validate configuration and return list of warnings.

        Returns:
            List of warning messages (empty if all valid)
        """
        warnings = []

        if not self.client_id:
            warnings.append("No client id configured (set TICTAIL_CLIENT_ID)")
        if not self.client_secret:
            warnings.append("No client secret configured (set TICTAIL_CLIENT_SECRET)")

        for name in ('auth_url', 'api_url'):
            url = getattr(self, name)
            if not url.startswith(('http://', 'https://')):
                warnings.append(f"Invalid {name} format: {url}")

        if not self.verify_ssl:
            warnings.append("TLS certificate verification is disabled")

        return warnings

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary.

        Returns:
            Dictionary representation of configuration with secrets masked
        """
        return {
            'client_id': self.client_id,
            'client_secret': '***' if self.client_secret else None,
            'access_token': '***' if self.access_token else None,
            'auth_url': self.auth_url,
            'api_url': self.api_url,
            'connect_timeout': self.connect_timeout,
            'request_timeout': self.request_timeout,
            'max_redirects': self.max_redirects,
            'verify_ssl': self.verify_ssl,
            'missing_expiry': self.missing_expiry,
            'user_agent': self.user_agent,
            'log_level': self.log_level,
            'profile': self.profile,
        }

    def get_timeout(self) -> httpx.Timeout:
        """Per-phase timeouts for the httpx client.

        The total budget of a request is enforced separately by the client
        while it reads the response body.
        """
        return httpx.Timeout(self.request_timeout, connect=self.connect_timeout)

    def get_headers(self) -> Dict[str, str]:
        """Get default headers for every request."""
        return {
            'User-Agent': self.user_agent,
            'Accept': 'application/json',
        }

    def __repr__(self) -> str:
        """String representation of config."""
        return f"Config(profile={self.profile}, api_url={self.api_url})"
