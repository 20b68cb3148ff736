"""
snowflakes: time-ordered, tamper-evident identifiers with embedded lineage.

A descendant flake carries the payloads of all its ancestors, so any
ancestor can be rebuilt and checked offline from the descendant alone.
Output MUST stay byte-identical to the Go, JavaScript and Elixir
implementations; fixture vector tests pin cross-language consistency.
"""

from .base import current_millis, generate_base, parse_data
from .client import Client
from .config import ClientConfig, DEFAULT_EPOCH, DEFAULT_NODE_ID
from .chain import child_flake, lineage, parent_flake, root_flake
from .errors import (
    ChainDepthError,
    ConfigurationError,
    ErrorCode,
    FlakeError,
    MalformedFlakeError,
    SignatureMismatchError,
    VerificationError,
    VerificationResult,
)
from .read import MAX_ANCESTOR_DEPTH, MAX_GROUP_WIDTH, FlakeRecord, read_flake
from .sequence import SEQUENCE_MAX, SequenceCounter
from .sign import compute_digest, obfuscate, sign_flake
from .summary import flake_summary, format_flake_summary
from .verify import verify_flake, verify_record

__version__ = "1.0.0"
__all__ = [
    # Client
    "Client",
    "ClientConfig",
    "DEFAULT_EPOCH",
    "DEFAULT_NODE_ID",
    # Base values
    "current_millis",
    "generate_base",
    "parse_data",
    "SequenceCounter",
    "SEQUENCE_MAX",
    # Signing
    "compute_digest",
    "obfuscate",
    "sign_flake",
    # Decoding
    "FlakeRecord",
    "read_flake",
    "MAX_ANCESTOR_DEPTH",
    "MAX_GROUP_WIDTH",
    # Verification
    "verify_flake",
    "verify_record",
    # Lineage
    "root_flake",
    "child_flake",
    "parent_flake",
    "lineage",
    # Summary
    "flake_summary",
    "format_flake_summary",
    # Errors
    "ErrorCode",
    "FlakeError",
    "MalformedFlakeError",
    "ChainDepthError",
    "ConfigurationError",
    "SignatureMismatchError",
    "VerificationError",
    "VerificationResult",
]
