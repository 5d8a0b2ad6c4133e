# -*- coding: utf-8 -*-
"""Location: ./toontodo/utils/ids.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Identity and timestamp providers for new records.

Examples:
    >>> import uuid
    >>> uuid.UUID(generate_id()).version
    4
    >>> ts = now_iso()
    >>> ts.endswith("Z") and "T" in ts
    True
"""

# Standard
from datetime import datetime, timezone
import time
import uuid


def generate_id() -> str:
    """Return a random UUID4 string.

    Returns:
        str: Canonical hyphenated UUID.
    """
    return str(uuid.uuid4())


def now_iso() -> str:
    """Return the current UTC time as ISO-8601 with millisecond precision.

    Returns:
        str: Timestamp such as ``2025-11-20T10:00:00.000Z``.
    """
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def now_millis() -> int:
    """Return the current Unix time in milliseconds.

    Returns:
        int: Milliseconds since the epoch.
    """
    return int(time.time() * 1000)
