"""Contract tests for reproducible configuration output.

Generating twice from the same inputs must write byte-identical files, so the
configuration can be diffed between runs.
"""

import random

from unboundconf.models.blocklist import Category, HOSTNAMES_URLS
from unboundconf.models.settings import Settings
from unboundconf.services.blocklist import build_blocked
from unboundconf.services.writer import write_unbound_conf
from unboundconf.utils.context import FetchContext


def test_same_inputs_write_identical_files(
    tmp_path, session_factory, response_factory
):
    """Verify repeated generations produce identical files.

    Test Steps:
    1. Build the blocklists twice, with list bodies shuffled between runs
    2. Write each result to the same path, keeping the bytes of each run
    3. Verify both runs wrote identical bytes
    """
    entries = [f"host{i}.example.org" for i in range(200)]
    settings = Settings(
        providers=("quad9", "cloudflare"),
        block_ads=True,
        blocked_hostnames=("user.example.net",),
        blocked_ips=("203.0.113.0/24",),
    )

    contents = []
    for run in range(2):
        shuffled = entries[:]
        random.Random(run).shuffle(shuffled)
        half = len(shuffled) // 2
        session = session_factory(
            {
                HOSTNAMES_URLS[Category.MALICIOUS]: response_factory(
                    "\n".join(shuffled[:half]).encode()
                ),
                HOSTNAMES_URLS[Category.ADS]: response_factory(
                    "\n".join(shuffled[half:]).encode()
                ),
            }
        )

        hostname_lines, ip_lines, _ = build_blocked(
            FetchContext(),
            session,
            settings.block_malicious,
            settings.block_ads,
            settings.block_surveillance,
            list(settings.blocked_hostnames),
            list(settings.blocked_ips),
            list(settings.allowed_hostnames),
        )

        path = write_unbound_conf(
            settings, hostname_lines, ip_lines, str(tmp_path), "nonrootuser"
        )
        contents.append(path.read_bytes())

    assert contents[0] == contents[1]
    assert contents[0].count(b"local-zone:") == 201
