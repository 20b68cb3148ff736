"""
Issuing client for snowflakes.

A ``Client`` owns its configuration, its sequence counter and its clock.
Create one per issuing process or tenant and share it by reference; it is
safe to use from several threads.
"""

from typing import Any, Callable

from .base import current_millis, generate_base
from .chain import child_flake, lineage, parent_flake, root_flake
from .config import ClientConfig
from .errors import SignatureMismatchError, VerificationResult
from .read import FlakeRecord, read_flake
from .sequence import SequenceCounter
from .verify import verify_flake, verify_record


class Client:
    """
    Issues, reads and verifies flakes for one node.

    Args:
        config: Node id, epoch and signing key. When omitted the built-in
            defaults are used (node 1023, epoch 1618868000000, empty key);
            the environment is only read by ``from_settings``
        clock: Returns the current time in ms since the Unix epoch
        sequence: Counter to draw sequence values from
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        clock: Callable[[], int] = current_millis,
        sequence: SequenceCounter | None = None,
    ) -> None:
        self.config = config or ClientConfig.defaults()
        self._clock = clock
        self._sequence = sequence or SequenceCounter()

    @classmethod
    def from_settings(cls, **overrides: Any) -> "Client":
        """Build a client from ``SNOWFLAKES_*`` environment variables."""
        return cls(ClientConfig(**overrides))

    def __repr__(self) -> str:
        return f"Client(node_id={self.config.node_id}, epoch={self.config.epoch})"

    def gen_base(self) -> str:
        """Draw the next base payload for this node."""
        seq = self._sequence.advance()
        return generate_base(self._clock(), self.config.epoch, self.config.effective_node_id, seq)

    def gen(self, flake_type: str) -> str:
        """Issue a root flake."""
        return root_flake(flake_type, self.gen_base(), self.config.key)

    def gen_child(self, flake_type: str, parent: str) -> str:
        """Issue a flake carrying ``parent`` and its lineage."""
        return child_flake(flake_type, self.gen_base(), parent, self.config.key, self.config.epoch)

    def gen_parent(self, flake: str, parent_type: str) -> str:
        """Rebuild the immediate parent of ``flake``."""
        return parent_flake(flake, parent_type, self.config.key, self.config.epoch)

    def lineage(self, flake: str, parent_types: list[str]) -> list[str]:
        """Rebuild ancestors of ``flake``, immediate parent first."""
        return lineage(flake, parent_types, self.config.key, self.config.epoch)

    def read(self, flake: str) -> FlakeRecord:
        """Decode ``flake`` without checking its signature."""
        return read_flake(flake, self.config.epoch)

    def verify(self, flake: str, strict: bool = False) -> VerificationResult:
        """
        Verify ``flake`` against this client's signing key.

        With ``strict=True`` a signature mismatch raises
        ``SignatureMismatchError`` (carrying the decoded record) and
        malformed input raises ``MalformedFlakeError``.
        """
        if not strict:
            return verify_flake(flake, self.config.key, self.config.epoch)

        result = verify_record(self.read(flake), self.config.key)
        if not result.valid:
            error = result.errors[0]
            raise SignatureMismatchError(error.message, record=result.record, details=error.details)
        return result
