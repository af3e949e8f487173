"""Resolution of scheme aliases and partial identifiers to canonical GUIDs."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from .logger import logger

if TYPE_CHECKING:
    from .powercfg import PowercfgService

# Loose identifier shape; only the first match in the query report is used
GUID_PATTERN = re.compile(r"(\w{8}-\w{4}-\w{4}-\w{4}-\w{12})", re.IGNORECASE)


def extract_guid(report: str) -> str | None:
    """Return the first identifier-shaped substring of a powercfg report, if any."""
    match = GUID_PATTERN.search(report)
    return match.group(1) if match else None


def resolve(powercfg: PowercfgService, alias_or_guid: str) -> str | None:
    """Resolve an alias or identifier to the canonical GUID powercfg reports for it.

    Args:
        powercfg: Service used to run ``powercfg -query``.
        alias_or_guid: A powercfg alias such as ``scheme_current`` or a scheme GUID.

    Returns:
        The GUID, or None when the query fails or its output contains no GUID.
    """
    result = powercfg.run("-query", alias_or_guid)
    if not result.ok:
        logger.debug("Query for %s failed with status %d", alias_or_guid, result.returncode)
        return None

    guid = extract_guid(result.stdout)
    if guid is None:
        logger.debug("Query for %s returned no scheme GUID", alias_or_guid)
    return guid
