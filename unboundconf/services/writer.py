"""Writes the rendered Unbound configuration to disk."""

import logging
from pathlib import Path

from unboundconf.models.settings import Settings
from unboundconf.services.renderer import INCLUDE_CONF_FILENAME, generate_unbound_conf


logger = logging.getLogger(__name__)

UNBOUND_CONF_FILENAME = "unbound.conf"


def write_unbound_conf(
    settings: Settings,
    hostname_lines: list[str],
    ip_lines: list[str],
    unbound_dir: str,
    username: str,
) -> Path:
    """Render the configuration and write it to unbound.conf.

    Any previous content of the file is replaced.

    Args:
        settings: Resolver settings.
        hostname_lines: Sorted local-zone lines.
        ip_lines: Sorted private-address lines.
        unbound_dir: Directory to write unbound.conf into.
        username: User Unbound drops privileges to.

    Returns:
        Path: Path of the written file.

    Raises:
        OSError: If the file cannot be written.
    """
    path = Path(unbound_dir) / UNBOUND_CONF_FILENAME
    lines = generate_unbound_conf(
        settings, hostname_lines, ip_lines, unbound_dir, username
    )
    with open(path, "w", encoding="utf-8") as f:
        f.write("\n".join(lines))

    logger.info(f"Wrote {len(lines)} lines to {path}")
    return path


def ensure_include_conf(unbound_dir: str) -> Path:
    """Create an empty include.conf if it does not exist yet.

    The server section includes this file, and Unbound refuses to start when
    an included file is missing. Existing content is left untouched.

    Returns:
        Path: Path of the include file.
    """
    path = Path(unbound_dir) / INCLUDE_CONF_FILENAME
    path.touch(exist_ok=True)
    return path
