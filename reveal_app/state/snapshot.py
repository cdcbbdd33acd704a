"""
Snapshot codec for persisted application state.

The snapshot is an opaque orjson-encoded JSON object consumed only by this
package; decoding never builds a state record by itself, it only yields the
mapping that ``state_from_snapshot`` merges over the defaults.
"""

from typing import Any

import orjson

from ..errors import SnapshotDecodeError
from .models import ApplicationState


def encode_snapshot(state: ApplicationState) -> bytes:
    """Serialize the full state record."""
    return orjson.dumps(state.to_dict())


def decode_snapshot(raw: bytes) -> dict[str, Any]:
    """
    Parse a stored snapshot into a mapping.

    Args:
        raw: Bytes previously produced by encode_snapshot

    Returns:
        Decoded mapping

    Raises:
        SnapshotDecodeError: If the payload is not a JSON object
    """
    try:
        data = orjson.loads(raw)
    except orjson.JSONDecodeError as e:
        raise SnapshotDecodeError(
            f"Invalid snapshot JSON: {e}",
            raw_data=raw,
            expected_format="json-object"
        ) from e

    if not isinstance(data, dict):
        raise SnapshotDecodeError(
            f"Snapshot must be a JSON object, got {type(data).__name__}",
            raw_data=raw,
            expected_format="json-object"
        )

    return data
