"""Git-like configuration: read .git/config (INI format) and core.abbrev."""

from __future__ import annotations

import configparser
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from .constants import ABBREV_AUTO, ABBREV_FULL, MIN_ABBREV, SHA1_HEX_LEN
from .errors import UsageError
from .util import read_text_safe

if TYPE_CHECKING:
    from .repo import Repository

CONFIG_FILENAME = "config"

_FALSE_VALUES = {"no", "false", "off"}


def _config_path(repo: "Repository") -> Path:
    return repo.git_dir / CONFIG_FILENAME


def _parse_key(key: str) -> tuple[str, str]:
    """Return (section, option). Raises ValueError if key is not section.option."""
    parts = key.split(".")
    if len(parts) != 2 or not parts[0].strip() or not parts[1].strip():
        raise ValueError(f"invalid config key: {key!r} (expected section.option)")
    return parts[0].strip(), parts[1].strip()


def read_config(repo: "Repository") -> configparser.ConfigParser:
    """Read .git/config. Return empty parser if file missing or unparsable. Does not raise."""
    cfg = configparser.ConfigParser(strict=False, interpolation=None)
    content = read_text_safe(_config_path(repo))
    if content:
        try:
            cfg.read_string(content)
        except configparser.Error:
            return configparser.ConfigParser(interpolation=None)
    return cfg


def get_value(repo: "Repository", key: str) -> Optional[str]:
    """Get config value for key (section.option). Return None if missing."""
    section, option = _parse_key(key)
    cfg = read_config(repo)
    if cfg.has_section(section) and cfg.has_option(section, option):
        return cfg.get(section, option).strip()
    return None


def clamp_abbrev(n: int) -> int:
    """Clamp an explicit digit count: 0 means full hash, otherwise 4..40."""
    if n == ABBREV_FULL:
        return ABBREV_FULL
    if n < MIN_ABBREV:
        return MIN_ABBREV
    return min(n, SHA1_HEX_LEN)


def parse_abbrev(value: str) -> int:
    """Parse an --abbrev/--hash digit count. Raises UsageError on non-numbers."""
    try:
        n = int(value, 10)
    except ValueError:
        raise UsageError(f"expects a numerical value: {value!r}") from None
    return clamp_abbrev(n)


def default_abbrev(repo: "Repository") -> int:
    """Abbreviation used by a bare --abbrev: core.abbrev, or auto when unset/invalid."""
    value = get_value(repo, "core.abbrev")
    if value is None or value.lower() == "auto":
        return ABBREV_AUTO
    if value.lower() in _FALSE_VALUES:
        return ABBREV_FULL
    try:
        return parse_abbrev(value)
    except UsageError:
        return ABBREV_AUTO
