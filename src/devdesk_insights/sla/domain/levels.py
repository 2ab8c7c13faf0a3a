"""
SLA Levels
==========

Customer SLA tiers (Gold, Silver, Bronze) and how a project declares one.

Projects carry their tier as free text in the project description, in any of
these forms (case-insensitive):
- ``SLA: Gold``
- ``sla=gold``
- ``SLA Level: Gold``
"""

import re
from typing import Any, Optional

from devdesk_insights.config import SLALevel

DEFAULT_SLA_LEVEL = SLALevel.BRONZE

_LEVEL_PATTERN = re.compile(
    r"\bsla(?:\s+level)?\s*[:=]\s*(gold|silver|bronze)\b",
    re.IGNORECASE
)


def parse_sla_level(description: Optional[str]) -> Optional[SLALevel]:
    """Find the SLA tier declared in a project description, or None."""
    if not description:
        return None
    match = _LEVEL_PATTERN.search(description)
    if match is None:
        return None
    return SLALevel(match.group(1).capitalize())


def coerce_sla_level(value: Any) -> Optional[SLALevel]:
    """Accept a level, a bare level name ("gold") or a project description."""
    if isinstance(value, SLALevel):
        return value
    if not isinstance(value, str):
        return None
    try:
        return SLALevel(value.strip().capitalize())
    except ValueError:
        return parse_sla_level(value)
