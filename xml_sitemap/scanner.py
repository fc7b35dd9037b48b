"""
1.0 Directory Scanner Module
Walks a directory tree and collects the files that belong in the sitemap.

Key features:
- Recursive traversal in filesystem order (no sorting)
- Ignore list matched against both the entry name and its full path
- Extension filter
- Per-name/per-path URL replacements
- Tree-wide latest modification time, including entries the sitemap skips
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Collection, List, Mapping, Optional, Union
from urllib.parse import quote

from xml_sitemap.config import SitemapConfig
from xml_sitemap.exceptions import ScanError
from xml_sitemap.text import normalize_name

logger = logging.getLogger(__name__)


# =============================================================================
# 2.0 DATA MODEL
# =============================================================================

@dataclass(frozen=True)
class FixedTime:
    """A concrete modification time, in seconds since the epoch."""

    timestamp: float


class _DeferredLatest:
    """Placeholder for the tree-wide latest modification time, known only after the scan."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "DEFERRED_LATEST"


DEFERRED_LATEST = _DeferredLatest()

LastModified = Union[FixedTime, _DeferredLatest]


@dataclass(frozen=True)
class SitemapEntry:
    """One <url> element of the sitemap."""

    location: str
    last_modified: LastModified
    change_frequency: Optional[str] = None
    priority: Optional[float] = None


@dataclass
class TraversalState:
    """
    Running maximum of modification times seen during one scan.

    Passed explicitly through the recursion so a scanner holds no state
    between scans.
    """

    latest_mod_time: Optional[float] = None

    def observe(self, mod_time: Optional[float]) -> None:
        if mod_time is None:
            return
        if self.latest_mod_time is None or mod_time > self.latest_mod_time:
            self.latest_mod_time = mod_time


@dataclass
class ScanResult:
    entries: List[SitemapEntry] = field(default_factory=list)
    latest_mod_time: float = 0.0


# =============================================================================
# 3.0 SCANNER
# =============================================================================

class DirectoryScanner:
    """
    3.0 DirectoryScanner Class
    Produces SitemapEntry values for every qualifying file under a root directory.
    """

    def __init__(
        self,
        filetypes: Collection[str],
        ignore: Collection[str] = (".", ".."),
        recursive: bool = True,
        changefreq: str = "",
        priority: float = 0.0,
        replacements: Optional[Mapping[str, str]] = None,
        replacelatestmod: Collection[str] = (),
    ):
        """
        3.1 Initialize the scanner.

        Args:
            filetypes: Accepted extensions, without the leading dot.
            ignore: Names or paths skipped entirely (callers seed '.' and '..').
            recursive: Descend into subdirectories.
            changefreq: Value for <changefreq>; empty omits the element.
            priority: Value for <priority>; emitted only when 0 < priority <= 1.
            replacements: Name or path -> filename used in the URL instead.
            replacelatestmod: Names or paths whose lastmod is the tree-wide latest.
        """
        self.filetypes = set(filetypes)
        self.ignore = set(ignore)
        self.recursive = recursive
        self.changefreq = changefreq or None
        self.priority = priority if 0 < priority <= 1 else None
        self.replacements = dict(replacements or {})
        self.replacelatestmod = set(replacelatestmod)

    @classmethod
    def from_config(cls, config: SitemapConfig) -> "DirectoryScanner":
        """Build a scanner from a SitemapConfig."""
        return cls(
            filetypes=config.filetypes,
            ignore=config.ignore,
            recursive=config.recursive,
            changefreq=config.changefreq,
            priority=config.priority,
            replacements=config.replacements,
            replacelatestmod=config.replacelatestmod,
        )

    def scan(self, directory: str, base_url: str) -> ScanResult:
        """
        3.2 Scan a directory tree.

        Args:
            directory: Root directory to walk.
            base_url: URL corresponding to the root directory, ending in '/'.

        Returns:
            ScanResult with entries in traversal order and the latest
            modification time over every non-ignored entry (0 if none).

        Raises:
            ScanError: a directory in the tree cannot be read.
        """
        entries: List[SitemapEntry] = []
        state = TraversalState()

        self._parse_dir(directory, base_url, entries, state)

        latest = state.latest_mod_time if state.latest_mod_time is not None else 0.0
        logger.info(f"Scanned {directory}: {len(entries)} sitemap entries, latest modification {latest}")
        return ScanResult(entries=entries, latest_mod_time=latest)

    def _parse_dir(self, directory: str, url: str, entries: List[SitemapEntry], state: TraversalState) -> None:
        """3.3 Process one directory level, recursing into subdirectories."""
        try:
            names = os.listdir(directory)
        except OSError as e:
            raise ScanError(f"Unable to read directory {directory}: {e}") from e

        for name in names:
            path = os.path.join(directory, name)
            clean_name = normalize_name(name)
            clean_path = normalize_name(path)

            # 3.3.1 Ignored entries count for nothing
            if clean_path in self.ignore or clean_name in self.ignore:
                logger.debug(f"Ignoring {path}")
                continue

            # 3.3.2 Descend before handling the entry itself
            is_dir = os.path.isdir(path)
            if self.recursive and is_dir:
                self._parse_dir(path, url + percent_encode(name) + "/", entries, state)

            # 3.3.3 Every visited entry feeds the tree-wide latest time
            mod_time = get_mod_time(path)
            state.observe(mod_time)
            if is_dir:
                continue

            # 3.3.4 Extension filter
            extension = get_extension(name)
            if not extension or extension not in self.filetypes:
                continue

            if clean_path in self.replacelatestmod or clean_name in self.replacelatestmod:
                last_modified: LastModified = DEFERRED_LATEST
            else:
                # No readable time: dated at the epoch
                last_modified = FixedTime(mod_time if mod_time is not None else 0.0)

            # 3.3.5 Name replacement takes precedence over the path key
            if clean_name in self.replacements:
                file_name = self.replacements[clean_name]
            elif clean_path in self.replacements:
                file_name = self.replacements[clean_path]
            else:
                file_name = name

            entries.append(SitemapEntry(
                location=url + percent_encode(file_name),
                last_modified=last_modified,
                change_frequency=self.changefreq,
                priority=self.priority,
            ))


# =============================================================================
# 4.0 HELPERS
# =============================================================================

def get_mod_time(path: str) -> Optional[float]:
    """
    4.1 Modification time of path, falling back to the status change time.

    Returns None when neither is available.
    """
    try:
        st = os.stat(path)
    except OSError as e:
        logger.debug(f"Cannot stat {path}: {e}")
        return None

    if st.st_mtime:
        return st.st_mtime
    if st.st_ctime:
        return st.st_ctime
    return None


def get_extension(name: str) -> str:
    """4.2 Text after the last dot of name, '' when there is none."""
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[1]


def percent_encode(name: str) -> str:
    """4.3 Percent-encode a filename for use as the last URL segment (RFC 3986)."""
    return quote(name, safe="", errors="surrogateescape")

