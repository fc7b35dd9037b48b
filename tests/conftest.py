import os
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from xml_sitemap.config import SitemapConfig  # noqa: E402

# Fixed modification times for the sample tree: T0 < T1 < T2 < T3
T0 = 1_500_000_000
T1 = 1_600_000_000
T2 = 1_600_000_100
T3 = 1_600_000_200

BASE_URL = "https://example.com/"


def touch(path: Path, mod_time: float, content: str = "") -> Path:
    path.write_text(content)
    os.utime(path, (mod_time, mod_time))
    return path


@pytest.fixture
def site(tmp_path) -> Path:
    """
    site/
        a.html      (T1)
        b.jpg       (T2)
        sub/        (T0)
            c.html  (T3)
    """
    root = tmp_path / "site"
    root.mkdir()
    touch(root / "a.html", T1, "<html>a</html>")
    touch(root / "b.jpg", T2, "jpg")
    sub = root / "sub"
    sub.mkdir()
    touch(sub / "c.html", T3, "<html>c</html>")
    os.utime(sub, (T0, T0))
    return root


@pytest.fixture
def site_config(site) -> SitemapConfig:
    return SitemapConfig(
        directory=str(site),
        directory_url=BASE_URL,
        filetypes=["html"],
        ignore={".", ".."},
        recursive=True,
        changefreq="weekly",
        priority=0.5,
    )
