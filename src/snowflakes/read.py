"""
Flake decoding for snowflakes.

Splits a digit stream back into signature, payload and ancestor slots.

The slot count is ``len(stream) // MAX_GROUP_WIDTH``. It is not recorded
in the flake, so decoding is only exact while that division yields the
real group width (2 + ancestor count). That holds for 14 and 15 digit
payloads at the depths issued in practice; the depth ceiling is enforced
when children are issued.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from .base import is_hex, parse_data
from .errors import MalformedFlakeError
from .sign import obfuscate

MAX_ANCESTOR_DEPTH = 12
# Signature slot + payload slot + one slot per ancestor.
MAX_GROUP_WIDTH = 2 + MAX_ANCESTOR_DEPTH


def slots_recoverable(data_length: int, depth: int) -> bool:
    """True if a flake with this payload length and depth decodes into the right slots."""
    width = 2 + depth
    return (data_length * width) // MAX_GROUP_WIDTH == width


def to_datetime(timestamp_ms: int) -> datetime:
    """
    UTC datetime for a timestamp in ms since the Unix epoch.

    Raises:
        MalformedFlakeError: If the timestamp is outside the datetime range
    """
    try:
        return datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)
    except (OverflowError, ValueError, OSError):
        raise MalformedFlakeError(
            "Timestamp is out of range",
            details={"timestamp_ms": timestamp_ms},
        )


@dataclass(frozen=True)
class FlakeRecord:
    """A decoded flake. Nothing in it is trusted until verified."""
    flake_type: str
    signature: str
    data: str
    timestamp_ms: int
    sequence: int
    parents: tuple[str, ...] = field(default_factory=tuple)

    @property
    def timestamp(self) -> datetime:
        return to_datetime(self.timestamp_ms)

    @property
    def depth(self) -> int:
        """Number of ancestors carried by the flake."""
        return len(self.parents)

    def to_dict(self) -> dict[str, Any]:
        return {
            "flake_type": self.flake_type,
            "signature": self.signature,
            "data": self.data,
            "timestamp_ms": self.timestamp_ms,
            "sequence": self.sequence,
            "parents": list(self.parents),
        }


def split_flake(flake: str) -> tuple[str, str]:
    """
    Split a flake into (flake_type, digit stream) on its last underscore.

    Raises:
        MalformedFlakeError: If there is no underscore or the stream is not hex
    """
    if not isinstance(flake, str) or "_" not in flake:
        raise MalformedFlakeError("Flake has no type separator", details={"flake": flake})

    flake_type, stream = flake.rsplit("_", 1)
    if not is_hex(stream):
        raise MalformedFlakeError("Digit stream is not lowercase hex", details={"flake": flake})
    return flake_type, stream


def read_flake(flake: str, epoch: int = 0) -> FlakeRecord:
    """
    Decode a flake without checking its signature.

    Args:
        flake: "<flake_type>_<digit stream>"
        epoch: Reference instant used to turn elapsed ms into a timestamp

    Returns:
        FlakeRecord with ancestors restored to their original form

    Raises:
        MalformedFlakeError: If the flake cannot be split into slots or its
            timestamp cannot be represented
    """
    flake_type, stream = split_flake(flake)

    slot_count = len(stream) // MAX_GROUP_WIDTH
    if slot_count < 2:
        raise MalformedFlakeError(
            "Digit stream too short to hold a signature and payload",
            details={"length": len(stream)},
        )
    if len(stream) % slot_count != 0:
        raise MalformedFlakeError(
            "Digit stream length is not a multiple of its slot count",
            details={"length": len(stream), "slots": slot_count},
        )

    slots = [stream[i::slot_count] for i in range(slot_count)]
    signature, data, hidden = slots[0], slots[1], slots[2:]

    timestamp_ms, sequence = parse_data(data, epoch)
    # Rejects timestamps a datetime cannot hold.
    to_datetime(timestamp_ms)
    return FlakeRecord(
        flake_type=flake_type,
        signature=signature,
        data=data,
        timestamp_ms=timestamp_ms,
        sequence=sequence,
        parents=tuple(obfuscate(hidden)),
    )
