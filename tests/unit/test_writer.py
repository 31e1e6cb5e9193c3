"""Unit tests for the configuration writer."""

import pytest

from unboundconf.services.writer import ensure_include_conf, write_unbound_conf


def test_write_unbound_conf_writes_joined_lines(tmp_path, default_settings):
    """Test that the rendered lines are written newline-joined."""
    path = write_unbound_conf(
        default_settings,
        ['  local-zone: "evil.com" static'],
        ["  private-address: 1.2.3.4"],
        str(tmp_path),
        "nonrootuser",
    )

    assert path == tmp_path / "unbound.conf"
    content = path.read_text(encoding="utf-8")
    assert content.startswith("server:\n")
    assert '  local-zone: "evil.com" static\n  private-address: 1.2.3.4\n' in content
    assert not content.endswith("\n")


def test_write_unbound_conf_replaces_previous_content(tmp_path, default_settings):
    """Test that a previous, longer configuration is fully replaced."""
    (tmp_path / "unbound.conf").write_text("x" * 100_000, encoding="utf-8")

    path = write_unbound_conf(default_settings, [], [], str(tmp_path), "user")

    content = path.read_text(encoding="utf-8")
    assert content.startswith("server:")
    assert "xxxx" not in content


def test_write_unbound_conf_missing_directory_raises(tmp_path, default_settings):
    with pytest.raises(OSError):
        write_unbound_conf(
            default_settings, [], [], str(tmp_path / "missing"), "user"
        )


def test_ensure_include_conf_creates_empty_file(tmp_path):
    path = ensure_include_conf(str(tmp_path))

    assert path == tmp_path / "include.conf"
    assert path.read_text() == ""


def test_ensure_include_conf_keeps_existing_content(tmp_path):
    """Test that user additions to include.conf are preserved."""
    (tmp_path / "include.conf").write_text("local-data: \"a.lan A 10.0.0.1\"\n")

    path = ensure_include_conf(str(tmp_path))

    assert path.read_text() == "local-data: \"a.lan A 10.0.0.1\"\n"
