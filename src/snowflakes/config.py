"""
Client configuration for snowflakes.

Node id, epoch and signing key are provisioned by the deployment. They can
be passed explicitly or loaded from ``SNOWFLAKES_*`` environment variables:

    SNOWFLAKES_NODE_ID=17
    SNOWFLAKES_EPOCH=1618868000000
    SNOWFLAKES_SIGNING_KEY=...

SECURITY: the signing key MUST be stored in a secrets manager. It is held as
a ``SecretStr`` so it never shows up in reprs or logs.
"""

import structlog
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = structlog.get_logger()

# Reference instant (ms since Unix epoch) shared by every implementation.
DEFAULT_EPOCH = 1618868000000
DEFAULT_NODE_ID = 1023

NODE_ID_BITS = 10
NODE_ID_MASK = (1 << NODE_ID_BITS) - 1


class ClientConfig(BaseSettings):
    """
    Issuing-process configuration.

    A node id wider than 10 bits is masked when packed, not rejected.
    Two nodes whose ids agree in their low 10 bits will issue colliding
    flakes, so masking is logged as a warning.
    """

    model_config = SettingsConfigDict(
        env_prefix="SNOWFLAKES_",
        extra="ignore",
        frozen=True,
    )

    node_id: int = Field(default=DEFAULT_NODE_ID, ge=0)
    epoch: int = Field(default=DEFAULT_EPOCH, ge=0)
    signing_key: SecretStr = SecretStr("")

    @field_validator("node_id")
    @classmethod
    def _warn_on_wide_node_id(cls, value: int) -> int:
        if value > NODE_ID_MASK:
            logger.warning(
                "node_id_masked",
                node_id=value,
                effective_node_id=value & NODE_ID_MASK,
            )
        return value

    @classmethod
    def defaults(cls) -> "ClientConfig":
        """Built-in defaults, ignoring ``SNOWFLAKES_*`` environment variables."""
        return cls.model_construct()

    @property
    def effective_node_id(self) -> int:
        """Node id as it is packed into the base value."""
        return self.node_id & NODE_ID_MASK

    @property
    def key(self) -> str:
        return self.signing_key.get_secret_value()
