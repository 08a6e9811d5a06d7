"""Optional PyPI lookups used to enrich remedies for unresolved dependencies."""
from __future__ import annotations

import logging
from typing import Optional

from packaging.utils import canonicalize_name

from constants import Constants
from common.http_client import get_json

logger = logging.getLogger(__name__)

HEADERS_JSON = {"Accept": "application/json"}


def latest_on_index(name: str, url: str = Constants.REGISTRY_URL_PYPI) -> Optional[str]:
    """Return the latest version published on the index, or None.

    None covers both "not published" and "index unreachable"; hints are
    best-effort and never block startup.
    """
    fullurl = f"{url}{canonicalize_name(name)}/json"
    status_code, _, data = get_json(fullurl, headers=HEADERS_JSON)
    if status_code != 200 or not isinstance(data, dict):
        logger.debug("No index data for %s (status %s)", name, status_code)
        return None
    info = data.get("info") or {}
    version = info.get("version")
    return str(version) if version else None


def install_hint(name: str) -> Optional[str]:
    """Remedy line suggesting an install when the index knows the package."""
    latest = latest_on_index(name)
    if latest is None:
        return None
    return f"'{name}' is available on PyPI (latest {latest}): install it with pip install {name}"
