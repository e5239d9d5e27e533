"""
Record signatures.

A signature identifies the extracted content of a record; it is stable for
equal content regardless of key order and changes when any value changes.
"""

import hashlib
import json
from typing import Any


def canonical_json(data: Any) -> str:
    """Serialize data with sorted keys and without ASCII escaping."""
    return json.dumps(data, sort_keys=True, ensure_ascii=False, default=str)


def record_signature(record: dict[str, Any]) -> str:
    """
    Uppercase MD5 hex digest of the canonical JSON form of a record.

    Args:
        record: Record without the meta block

    Returns:
        32 character uppercase hex string
    """
    return hashlib.md5(canonical_json(record).encode("utf-8")).hexdigest().upper()
