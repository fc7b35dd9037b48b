"""
1.0 Configuration Module
Loads and validates xml-sitemap-config.ini.

The file is looked up in the working directory first, then in its parent.
Settings live in a [sitemap] section; a file without any section header is
read as if everything belonged to [sitemap].
"""

import configparser
import logging
import os
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Set

from xml_sitemap.exceptions import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "xml-sitemap-config.ini"
SAMPLE_CONFIG_FILE_NAME = "xml-sitemap-config-sample.ini"
CONFIG_SECTION = "sitemap"
REPLACEMENTS_SECTION = "replacements"

# Always ignored, on top of whatever the config lists
CURRENT_DIR_MARKER = "."
PARENT_DIR_MARKER = ".."

EXPIRE_TIME_PLACEHOLDER = "$expire_time"


@dataclass
class SitemapConfig:
    """2.0 Settings consumed by the scanner, cache gate and response headers."""

    directory: str
    directory_url: str = ""
    filetypes: List[str] = field(default_factory=list)
    ignore: Set[str] = field(default_factory=set)
    recursive: bool = True
    changefreq: str = ""
    priority: float = 0.0
    replacements: Dict[str, str] = field(default_factory=dict)
    replacelatestmod: Set[str] = field(default_factory=set)
    xsl: str = ""
    cache_control: str = "public, max-age=" + EXPIRE_TIME_PLACEHOLDER
    expire_time: int = 0
    localcache: bool = False
    localcache_file: str = ""
    localcache_expire: int = 0
    source_path: Optional[str] = None

    def with_base_url(self, base_url: str) -> "SitemapConfig":
        """Return a copy whose directory_url is base_url (used when the config leaves it empty)."""
        return replace(self, directory_url=_ensure_trailing_slash(base_url))


def find_config_file(path: Optional[str] = None) -> str:
    """
    3.1 Locate the configuration file.

    Args:
        path: Explicit path. When given, no other location is tried.

    Returns:
        Path of an existing config file.

    Raises:
        ConfigError: nothing found.
    """
    if path:
        if os.path.isfile(path):
            return path
        raise ConfigError(f"Error: unable to load {path}, file does not exist.")

    for candidate in (os.path.join(".", CONFIG_FILE_NAME), os.path.join("..", CONFIG_FILE_NAME)):
        if os.path.isfile(candidate):
            return candidate

    raise ConfigError(
        f"Error: unable to load {CONFIG_FILE_NAME}, please copy "
        f"{SAMPLE_CONFIG_FILE_NAME} to {CONFIG_FILE_NAME} and adjust."
    )


def load_config(path: Optional[str] = None) -> SitemapConfig:
    """
    3.2 Load, parse and validate the configuration.

    Raises:
        ConfigError: the file is missing, unreadable or holds invalid values.
    """
    config_path = find_config_file(path)

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            raw = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Error: unable to read {config_path}: {e}") from e

    parser = _new_parser()
    try:
        try:
            parser.read_string(raw, source=config_path)
        except configparser.MissingSectionHeaderError:
            parser = _new_parser()
            parser.read_string(f"[{CONFIG_SECTION}]\n{raw}", source=config_path)
    except configparser.Error as e:
        raise ConfigError(f"Error decoding {config_path}: {e}") from e

    config = parse_config(parser, source_path=config_path)
    logger.info(f"Successfully loaded configuration from {config_path}")
    return config


def parse_config(parser: configparser.ConfigParser, source_path: Optional[str] = None) -> SitemapConfig:
    """
    3.3 Build a SitemapConfig from an already-read parser.

    Raises:
        ConfigError: missing section or invalid values.
    """
    if not parser.has_section(CONFIG_SECTION):
        raise ConfigError(f"Section [{CONFIG_SECTION}] is missing from {source_path or 'config'}.")

    section = parser[CONFIG_SECTION]

    try:
        priority = section.getfloat("priority", fallback=0.0)
        recursive = section.getboolean("recursive", fallback=True)
        expire_time = section.getint("expire_time", fallback=0)
        localcache = section.getboolean("localcache", fallback=False)
        localcache_expire = section.getint("localcache_expire", fallback=0)
    except ValueError as e:
        raise ConfigError(f"Invalid value in {source_path or 'config'}: {e}") from e

    replacements = _parse_pairs(section.get("replacements", ""))
    if parser.has_section(REPLACEMENTS_SECTION):
        replacements.update(parser[REPLACEMENTS_SECTION])

    ignore = set(_parse_list(section.get("ignore", "")))
    ignore.update([CURRENT_DIR_MARKER, PARENT_DIR_MARKER, CONFIG_FILE_NAME])

    directory_url = section.get("directory_url", "").strip()

    config = SitemapConfig(
        directory=section.get("directory", "").strip(),
        directory_url=_ensure_trailing_slash(directory_url) if directory_url else "",
        filetypes=[ext.lstrip(".") for ext in _parse_list(section.get("filetypes", ""))],
        ignore=ignore,
        recursive=recursive,
        changefreq=section.get("changefreq", "").strip(),
        priority=priority,
        replacements=replacements,
        replacelatestmod=set(_parse_list(section.get("replacelatestmod", ""))),
        xsl=section.get("xsl", "").strip(),
        cache_control=section.get("cache_control", SitemapConfig.cache_control).strip(),
        expire_time=expire_time,
        localcache=localcache,
        localcache_file=section.get("localcache_file", "").strip(),
        localcache_expire=localcache_expire,
        source_path=source_path,
    )
    validate_config(config)
    return config


def validate_config(config: SitemapConfig) -> None:
    """
    3.4 Validate the content of the configuration.

    Raises:
        ConfigError: the first problem found.
    """
    if not config.directory:
        raise ConfigError("'directory' is missing or empty in config.")

    if not config.filetypes:
        logger.warning("'filetypes' is empty. The sitemap will not contain any URLs.")

    if config.priority and not 0 < config.priority <= 1:
        logger.warning(f"'priority' {config.priority} is outside (0, 1] and will not be emitted.")

    if config.expire_time < 0:
        raise ConfigError(f"'expire_time' must not be negative, got {config.expire_time}.")

    if config.localcache:
        if not config.localcache_file:
            raise ConfigError("'localcache' is enabled but 'localcache_file' is empty.")
        if config.localcache_expire < 0:
            raise ConfigError(f"'localcache_expire' must not be negative, got {config.localcache_expire}.")
        config.ignore.add(os.path.basename(config.localcache_file))

    logger.debug("Configuration validation successful.")


def _new_parser() -> configparser.ConfigParser:
    # No interpolation: cache_control carries a literal "$expire_time"
    parser = configparser.ConfigParser(interpolation=None)
    parser.optionxform = str
    return parser


def _parse_list(value: str) -> List[str]:
    """Split a comma and/or newline separated value, dropping blanks and quotes."""
    items = []
    for line in value.splitlines():
        for item in line.split(","):
            item = item.strip().strip('"').strip("'")
            if item:
                items.append(item)
    return items


def _parse_pairs(value: str) -> Dict[str, str]:
    """Parse 'name = replacement' lines of a multi-line value."""
    pairs = {}
    for line in value.splitlines():
        line = line.strip()
        if not line:
            continue
        if "=" not in line:
            raise ConfigError(f"Invalid replacement '{line}', expected 'name = replacement'.")
        name, replacement = line.split("=", 1)
        pairs[name.strip().strip('"')] = replacement.strip().strip('"')
    return pairs


def _ensure_trailing_slash(url: str) -> str:
    return url if url.endswith("/") else url + "/"
