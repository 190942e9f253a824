# condo_core/common/spectacular_hooks.py
from __future__ import annotations

PRIMARY_PREFIX = "/api/v1/"
ALIAS_PREFIX = "/api/"


def drop_api_alias(endpoints):
    """
    Every route is mounted twice (/api/v1/ and the /api/ alias). Only the
    versioned copy goes into the schema, otherwise operation ids collide.
    """
    return [
        endpoint
        for endpoint in endpoints
        if endpoint[0].startswith(PRIMARY_PREFIX) or not endpoint[0].startswith(ALIAS_PREFIX)
    ]
