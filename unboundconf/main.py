"""Main entry point for the Unbound blocklist configurator."""

import logging
import sys
import time

from unboundconf.config import Config
from unboundconf.services.blocklist import build_blocked
from unboundconf.services.fetcher import build_session
from unboundconf.services.logger import (
    setup_logging,
    log_build_summary,
    log_fetch_error,
)
from unboundconf.services.writer import ensure_include_conf, write_unbound_conf
from unboundconf.utils.context import FetchContext
from unboundconf.utils.dns_check import wait_for_dns


logger = logging.getLogger(__name__)


def generate(config: Config) -> str:
    """Fetch the blocklists and write the Unbound configuration.

    Failed list fetches are logged and the configuration is written with the
    entries that could be gathered.

    Args:
        config: Application configuration.

    Returns:
        str: Path of the written configuration file.
    """
    start_time = time.time()
    settings = config.to_settings()

    # Bounds the whole build, retries included
    ctx = FetchContext.with_timeout(2 * config.http_timeout)
    with build_session(config.http_timeout) as session:
        hostname_lines, ip_lines, errors = build_blocked(
            ctx,
            session,
            settings.block_malicious,
            settings.block_ads,
            settings.block_surveillance,
            list(settings.blocked_hostnames),
            list(settings.blocked_ips),
            list(settings.allowed_hostnames),
        )

    for error in errors:
        log_fetch_error(error)

    ensure_include_conf(config.unbound_dir)
    path = write_unbound_conf(
        settings, hostname_lines, ip_lines, config.unbound_dir, config.username
    )

    log_build_summary(
        hostname_lines=len(hostname_lines),
        ip_lines=len(ip_lines),
        fetch_errors=len(errors),
        providers=list(settings.providers),
        config_path=str(path),
        duration_sec=time.time() - start_time,
    )
    return str(path)


def check_unbound(config: Config) -> None:
    """Wait until the local Unbound answers on the listening port.

    Raises:
        DNSNotWorkingError: If Unbound did not answer after every try.
    """
    logger.info(f"Checking Unbound answers on port {config.listening_port}")
    wait_for_dns(FetchContext(), port=config.listening_port)


def main() -> int:
    """Main execution function.

    Returns:
        int: Exit code (0 for success, 1 for fatal error).
    """
    setup_logging()
    logger.info("Starting Unbound blocklist configurator")

    try:
        config = Config.from_env()
        setup_logging(verbose=config.verbose)
        logger.info(
            f"Configuration loaded: {len(config.providers)} provider(s), "
            f"{len(config.blocked_hostnames)} blocked hostname(s), "
            f"{len(config.blocked_ips)} blocked IP(s), "
            f"{len(config.allowed_hostnames)} allowed hostname(s)"
        )

        generate(config)
        if config.check_unbound:
            check_unbound(config)
        return 0

    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
