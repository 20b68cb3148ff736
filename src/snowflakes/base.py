"""
Base value packing for snowflakes.

A base value is a 70-bit integer rendered as unpadded lowercase hex:

    | 48 bits elapsed ms since epoch | 10 bits node id | 12 bits sequence |

CRITICAL: the packing MUST match the other implementations bit for bit.
Fields are rendered as zero-padded binary strings and concatenated, so a
field wider than its slot (sequence 4096) widens the whole value instead
of being truncated.
"""

import re
import time

from .config import NODE_ID_BITS, NODE_ID_MASK
from .errors import ConfigurationError, MalformedFlakeError

TIMESTAMP_BITS = 48
SEQUENCE_BITS = 12
BASE_BITS = TIMESTAMP_BITS + NODE_ID_BITS + SEQUENCE_BITS

_HEX_RE = re.compile(r"[0-9a-f]+")


def is_hex(value: str) -> bool:
    """True for a non-empty lowercase hex string."""
    return isinstance(value, str) and _HEX_RE.fullmatch(value) is not None


def current_millis() -> int:
    """Wall-clock time in ms since the Unix epoch."""
    return time.time_ns() // 1_000_000


def generate_base(now_ms: int, epoch: int, node_id: int, sequence: int) -> str:
    """
    Pack time, node and sequence into a hex base value.

    Args:
        now_ms: Current time in ms since the Unix epoch
        epoch: Reference instant in ms since the Unix epoch
        node_id: Node id, masked to 10 bits
        sequence: Sequence value for this issuance

    Returns:
        Lowercase hex string without padding

    Raises:
        ConfigurationError: If now_ms lies before the epoch
    """
    elapsed = now_ms - epoch
    if elapsed < 0:
        raise ConfigurationError(
            "Clock is behind the configured epoch",
            details={"now_ms": now_ms, "epoch": epoch},
        )
    if sequence < 0:
        raise ConfigurationError("Sequence must not be negative", details={"sequence": sequence})

    bits = (
        format(elapsed, f"0{TIMESTAMP_BITS}b")
        + format(node_id & NODE_ID_MASK, f"0{NODE_ID_BITS}b")
        + format(sequence, f"0{SEQUENCE_BITS}b")
    )
    return format(int(bits, 2), "x")


def parse_data(data: str, epoch: int = 0) -> tuple[int, int]:
    """
    Recover timestamp and sequence from a base value.

    The node id field is decoded positionally but not returned.

    Args:
        data: Hex base value
        epoch: Reference instant added to the elapsed ms

    Returns:
        (timestamp in ms since the Unix epoch, sequence)

    Raises:
        MalformedFlakeError: If data is not hex
    """
    if not is_hex(data):
        raise MalformedFlakeError("Payload is not valid hex", details={"data": data})
    num = int(data, 16)

    bits = format(num, f"0{BASE_BITS}b")
    elapsed = int(bits[:TIMESTAMP_BITS], 2)
    sequence = int(bits[TIMESTAMP_BITS + NODE_ID_BITS:], 2)
    return elapsed + epoch, sequence
