"""
Flake signing for snowflakes.

A flake interleaves three things column by column: a SHA-256 digest keyed
with the shared signing key, the base payload, and every ancestor payload.
Reading column ``i`` of a flake therefore yields ``digest[i]``, ``data[i]``
and ``ancestor_k[i]`` for each ancestor in order.

CRITICAL: the digest input and the column layout MUST match the other
implementations exactly, or descendants issued elsewhere cannot be walked.

SECURITY: the signing key MUST be stored in a secrets manager. It never
appears in the flake itself.
"""

import hashlib

from .base import is_hex
from .errors import MalformedFlakeError

# Length of a hex SHA-256 digest; payloads longer than this cannot be signed.
DIGEST_LENGTH = 64


def obfuscate(parents: list[str]) -> list[str]:
    """
    Reverse every ancestor at an even index.

    The transform is its own inverse, so decoding applies it again.
    Returns a new list; the input is left untouched.
    """
    return [p[::-1] if idx % 2 == 0 else p for idx, p in enumerate(parents)]


def compute_digest(flake_type: str, data: str, parents: list[str], signing_key: str) -> str:
    """
    SHA-256 over ``data + parents... + signing_key + flake_type``.

    Args:
        flake_type: Type prefix of the flake being signed
        data: Hex base payload
        parents: Ancestor payloads exactly as they should be hashed
        signing_key: Shared secret

    Returns:
        64 lowercase hex digits
    """
    signature_payload = data + "".join(parents) + signing_key + flake_type
    return hashlib.sha256(signature_payload.encode("utf-8")).hexdigest()


def interleave(rows: list[str], width: int) -> str:
    """Emit column ``i`` of every row in turn, for each ``i`` below ``width``."""
    return "".join(row[i] for i in range(width) for row in rows)


def sign_flake(flake_type: str, data: str, parents: list[str], signing_key: str) -> str:
    """
    Sign a payload and its ancestor chain into a flake string.

    Args:
        flake_type: Type prefix, may itself contain underscores
        data: Hex base payload
        parents: Ancestor payloads, immediate parent first
        signing_key: Shared secret

    Returns:
        "<flake_type>_<digit stream>"

    Raises:
        MalformedFlakeError: If a payload is not hex, data is longer than
            the digest, or an ancestor is shorter than data
    """
    if not is_hex(data):
        raise MalformedFlakeError("Payload is not valid hex", details={"data": data})

    if len(data) > DIGEST_LENGTH:
        raise MalformedFlakeError(
            f"Payload longer than {DIGEST_LENGTH} digits cannot be signed",
            details={"length": len(data)},
        )

    for idx, parent in enumerate(parents):
        if not is_hex(parent):
            raise MalformedFlakeError(
                f"Ancestor {idx} is not valid hex",
                details={"index": idx, "ancestor": parent},
            )
        if len(parent) < len(data):
            raise MalformedFlakeError(
                f"Ancestor {idx} is shorter than the payload",
                details={"index": idx, "ancestor_length": len(parent), "data_length": len(data)},
            )

    hidden = obfuscate(parents)
    digest = compute_digest(flake_type, data, hidden, signing_key)
    return f"{flake_type}_{interleave([digest, data, *hidden], len(data))}"
