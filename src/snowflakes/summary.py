"""
Flake summary utilities for human-readable inspection.

Extracts key metadata from decoded flakes without re-verifying them.
"""

from typing import Any

from .read import FlakeRecord


def flake_summary(record: FlakeRecord) -> dict[str, Any]:
    """
    Extract a JSON-friendly summary from a decoded flake.

    Args:
        record: A decoded flake

    Returns:
        Dict with flake_type, issued_at, sequence, depth, data and parents
    """
    return {
        "flake_type": record.flake_type,
        "issued_at": record.timestamp.isoformat(),
        "sequence": record.sequence,
        "depth": record.depth,
        "data": record.data,
        "parents": list(record.parents),
    }


def format_flake_summary(record: FlakeRecord) -> str:
    """
    Format a decoded flake as a single-line human-readable string.

    Args:
        record: A decoded flake

    Returns:
        String like "order (2023-01-01T00:00:00+00:00) | seq 3 | 2 ancestors | 1a2b3c..."
    """
    s = flake_summary(record)
    data_short = s["data"][:8] + "..." if len(s["data"]) > 8 else s["data"]
    noun = "ancestor" if s["depth"] == 1 else "ancestors"
    return f"{s['flake_type']} ({s['issued_at']}) | seq {s['sequence']} | {s['depth']} {noun} | {data_short}"
