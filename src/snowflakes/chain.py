"""
Lineage navigation for snowflakes.

Signing is a deterministic function of (type, payload, ancestors, key), so
an ancestor flake can be rebuilt byte for byte from any descendant, given
the ancestor's type. Types are not carried in the chain; callers must know
them.
"""

import structlog

from .errors import ChainDepthError, ConfigurationError, ErrorCode, MalformedFlakeError
from .read import MAX_ANCESTOR_DEPTH, read_flake, slots_recoverable
from .sign import sign_flake

logger = structlog.get_logger()


def root_flake(flake_type: str, data: str, signing_key: str) -> str:
    """
    Sign a payload with no ancestors.

    Raises:
        ConfigurationError: If the payload is too short to be split back
            into its slots, which happens when the clock is close to the epoch
    """
    if not slots_recoverable(len(data), 0):
        raise ConfigurationError(
            "Payload too short to decode; clock is too close to the epoch",
            details={"data_length": len(data)},
        )

    flake = sign_flake(flake_type, data, [], signing_key)
    logger.debug("flake_issued", flake_type=flake_type, depth=0)
    return flake


def child_flake(
    child_type: str,
    data: str,
    parent: str,
    signing_key: str,
    epoch: int = 0,
) -> str:
    """
    Sign a payload as the child of ``parent``.

    The child carries the parent's payload followed by the parent's own
    ancestors, one level deeper than the parent.

    Raises:
        MalformedFlakeError: If the parent cannot be decoded
        ChainDepthError: If the chain would exceed MAX_ANCESTOR_DEPTH or
            could not be split back into its slots
    """
    record = read_flake(parent, epoch)
    parents = [record.data, *record.parents]

    if len(parents) > MAX_ANCESTOR_DEPTH:
        raise ChainDepthError(
            f"Ancestor chain limited to {MAX_ANCESTOR_DEPTH} levels",
            details={"depth": len(parents), "parent_type": record.flake_type},
        )
    if not slots_recoverable(len(data), len(parents)):
        raise ChainDepthError(
            "Payload length and chain depth would not decode into their own slots",
            details={"depth": len(parents), "data_length": len(data)},
        )

    flake = sign_flake(child_type, data, parents, signing_key)
    logger.debug("flake_issued", flake_type=child_type, depth=len(parents))
    return flake


def parent_flake(flake: str, parent_type: str, signing_key: str, epoch: int = 0) -> str:
    """
    Rebuild the immediate parent of ``flake``.

    Args:
        flake: Descendant flake
        parent_type: The parent's original flake type
        signing_key: Key the lineage was signed with
        epoch: Reference instant used while decoding

    Returns:
        The parent flake, identical to the one originally issued

    Raises:
        MalformedFlakeError: If the flake cannot be decoded or has no ancestors
    """
    record = read_flake(flake, epoch)
    if not record.parents:
        raise MalformedFlakeError(
            "Flake has no ancestors",
            code=ErrorCode.MISSING_ANCESTOR,
            details={"flake_type": record.flake_type},
        )

    data, *rest = record.parents
    return sign_flake(parent_type, data, rest, signing_key)


def lineage(
    flake: str,
    parent_types: list[str],
    signing_key: str,
    epoch: int = 0,
) -> list[str]:
    """
    Rebuild successive ancestors of ``flake``.

    ``parent_types`` names one type per level to walk, immediate parent
    first. Returns the rebuilt flakes in the same order.
    """
    ancestors: list[str] = []
    current = flake
    for parent_type in parent_types:
        current = parent_flake(current, parent_type, signing_key, epoch)
        ancestors.append(current)
    return ancestors
