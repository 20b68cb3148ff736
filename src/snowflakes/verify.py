"""
Offline flake verification for snowflakes.

Recomputes the keyed digest from a decoded flake and checks that the
embedded signature is a prefix of it.

CRITICAL: the embedded signature is only ``len(data)`` digits long, so the
check is a prefix match, never a full-digest comparison. The digest is
recomputed over the ancestors as decoded (already restored), matching the
other implementations.
"""

import hmac

import structlog

from .errors import ErrorCode, MalformedFlakeError, VerificationError, VerificationResult
from .read import FlakeRecord, read_flake
from .sign import compute_digest

logger = structlog.get_logger()


def _safe_prefix(digest: str, prefix: str) -> bool:
    """
    Constant-time prefix check to prevent timing side-channel attacks.
    """
    if len(prefix) > len(digest):
        return False
    return hmac.compare_digest(digest[:len(prefix)].encode("utf-8"), prefix.encode("utf-8"))


def verify_record(record: FlakeRecord, signing_key: str) -> VerificationResult:
    """
    Verify the signature of an already decoded flake.
    """
    digest = compute_digest(record.flake_type, record.data, list(record.parents), signing_key)

    if not _safe_prefix(digest, record.signature):
        logger.warning(
            "flake_signature_mismatch",
            flake_type=record.flake_type,
            depth=record.depth,
        )
        return VerificationResult(
            valid=False,
            errors=[VerificationError(
                code=ErrorCode.SIGNATURE_MISMATCH,
                message="Embedded signature does not match computed digest",
                details={"flake_type": record.flake_type, "signature": record.signature},
            )],
            record=record,
        )

    return VerificationResult(valid=True, errors=[], record=record)


def verify_flake(flake: str, signing_key: str, epoch: int = 0) -> VerificationResult:
    """
    Decode and verify a flake.

    Args:
        flake: "<flake_type>_<digit stream>"
        signing_key: Shared secret the flake was signed with
        epoch: Reference instant for the decoded timestamp

    Returns:
        VerificationResult; ``record`` is set unless the flake is malformed
    """
    try:
        record = read_flake(flake, epoch)
    except MalformedFlakeError as exc:
        logger.warning("flake_malformed", reason=exc.message)
        return VerificationResult(valid=False, errors=[exc.to_error()])

    return verify_record(record, signing_key)
