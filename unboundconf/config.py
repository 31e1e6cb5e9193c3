"""Configuration module for the Unbound blocklist configurator.

Loads and validates environment variables.
"""

import logging
import os
from dataclasses import dataclass
from typing import List

from unboundconf.models.provider import get_provider_data
from unboundconf.models.settings import Settings
from unboundconf.utils.validation import is_valid_hostname, is_valid_ip_or_network


logger = logging.getLogger(__name__)

TRUE_VALUES = ("on", "true", "yes", "1")
FALSE_VALUES = ("off", "false", "no", "0")


@dataclass
class Config:
    """Application configuration loaded from environment variables."""

    # Unbound Configuration
    listening_port: int
    caching: bool
    verbosity_level: int
    validation_log_level: int
    ipv4: bool
    ipv6: bool
    providers: List[str]

    # Blocking Configuration
    block_malicious: bool
    block_ads: bool
    block_surveillance: bool
    blocked_hostnames: List[str]
    blocked_ips: List[str]
    allowed_hostnames: List[str]

    # Operational Configuration
    unbound_dir: str
    username: str
    http_timeout: int
    verbose: bool
    check_unbound: bool

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables.

        Raises:
            ValueError: If variables are invalid.

        Returns:
            Config: Validated configuration instance.
        """
        # Unbound Configuration
        listening_port = cls._get_int_env("LISTENING_PORT", "53", 1, 65535)
        caching = cls._get_bool_env("CACHING", "on")
        verbosity_level = cls._get_int_env("VERBOSITY", "1", 0, 5)
        validation_log_level = cls._get_int_env("VALIDATION_LOGLEVEL", "0", 0, 2)
        ipv4 = cls._get_bool_env("IPV4", "on")
        ipv6 = cls._get_bool_env("IPV6", "off")

        providers_str = os.getenv("PROVIDERS")
        if not providers_str and os.getenv("PROVIDER"):
            logger.warning(
                "You are using the old environment variable PROVIDER, "
                "please consider changing it to PROVIDERS"
            )
            providers_str = os.getenv("PROVIDER")
        providers = cls._split_list(providers_str or "cloudflare")
        if not providers:
            raise ValueError("PROVIDERS must contain at least one provider")
        # Raises UnknownProviderError, a ValueError, on unsupported names
        for provider in providers:
            get_provider_data(provider)
        providers = [provider.lower() for provider in providers]

        # Blocking Configuration
        block_malicious = cls._get_bool_env("BLOCK_MALICIOUS", "on")
        block_ads = cls._get_bool_env("BLOCK_ADS", "off")
        block_surveillance = cls._get_bool_env("BLOCK_SURVEILLANCE", "off")

        blocked_hostnames = cls._split_list(os.getenv("BLOCK_HOSTNAMES", ""))
        for hostname in blocked_hostnames:
            if not is_valid_hostname(hostname):
                raise ValueError(
                    f"BLOCK_HOSTNAMES contains invalid hostname {hostname!r}"
                )

        blocked_ips = cls._split_list(os.getenv("BLOCK_IPS", ""))
        for ip in blocked_ips:
            if not is_valid_ip_or_network(ip):
                raise ValueError(f"BLOCK_IPS contains invalid IP or CIDR {ip!r}")

        allowed_hostnames = cls._split_list(os.getenv("UNBLOCK", ""))
        for hostname in allowed_hostnames:
            if not is_valid_hostname(hostname):
                raise ValueError(f"UNBLOCK contains invalid hostname {hostname!r}")

        # Operational Configuration
        unbound_dir = os.getenv("UNBOUND_DIR", "/unbound")
        if not unbound_dir:
            raise ValueError("UNBOUND_DIR cannot be empty")
        username = os.getenv("UNBOUND_USER", "nonrootuser")
        if not username:
            raise ValueError("UNBOUND_USER cannot be empty")
        http_timeout = cls._get_int_env("HTTP_TIMEOUT", "30", 1, 600)
        verbose = cls._get_bool_env("VERBOSE", "false")
        check_unbound = cls._get_bool_env("CHECK_UNBOUND", "off")

        return cls(
            listening_port=listening_port,
            caching=caching,
            verbosity_level=verbosity_level,
            validation_log_level=validation_log_level,
            ipv4=ipv4,
            ipv6=ipv6,
            providers=providers,
            block_malicious=block_malicious,
            block_ads=block_ads,
            block_surveillance=block_surveillance,
            blocked_hostnames=blocked_hostnames,
            blocked_ips=blocked_ips,
            allowed_hostnames=allowed_hostnames,
            unbound_dir=unbound_dir,
            username=username,
            http_timeout=http_timeout,
            verbose=verbose,
            check_unbound=check_unbound,
        )

    @staticmethod
    def _split_list(value: str) -> List[str]:
        return [item.strip() for item in value.split(",") if item.strip()]

    @staticmethod
    def _get_bool_env(key: str, default: str) -> bool:
        """Get boolean environment variable.

        Args:
            key: Environment variable name.
            default: Value used when the variable is unset.

        Returns:
            bool: Parsed value.

        Raises:
            ValueError: If the value is not a recognized boolean.
        """
        value = os.getenv(key, default).strip().lower()
        if value in TRUE_VALUES:
            return True
        if value in FALSE_VALUES:
            return False
        raise ValueError(
            f"{key} must be one of: on, off, true, false, yes, no, 1, 0"
        )

    @staticmethod
    def _get_int_env(key: str, default: str, minimum: int, maximum: int) -> int:
        """Get integer environment variable within a range.

        Raises:
            ValueError: If the value is not an integer or is out of range.
        """
        value = os.getenv(key, default)
        try:
            number = int(value)
        except ValueError:
            raise ValueError(f"{key} must be an integer, got {value!r}") from None
        if not minimum <= number <= maximum:
            raise ValueError(f"{key} must be between {minimum} and {maximum}")
        return number

    def to_settings(self) -> Settings:
        """Build the immutable settings for the configuration generation.

        Returns:
            Settings: Settings snapshot of this configuration.
        """
        return Settings(
            listening_port=self.listening_port,
            caching=self.caching,
            verbosity_level=self.verbosity_level,
            validation_log_level=self.validation_log_level,
            ipv4=self.ipv4,
            ipv6=self.ipv6,
            providers=tuple(self.providers),
            block_malicious=self.block_malicious,
            block_ads=self.block_ads,
            block_surveillance=self.block_surveillance,
            blocked_hostnames=tuple(self.blocked_hostnames),
            blocked_ips=tuple(self.blocked_ips),
            allowed_hostnames=tuple(self.allowed_hostnames),
        )
