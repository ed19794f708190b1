"""Application configuration using pydantic-settings.

Settings are read from environment variables and an optional .env file.
"""

from decimal import Decimal
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ======================
    # Environment
    # ======================
    environment: str = Field(default="development", description="Runtime environment")
    debug: bool = Field(default=False, description="Enable debug logging")

    # ======================
    # Node
    # ======================
    rpc_url: str = Field(default="https://eth.llamarpc.com", description="EVM JSON-RPC URL")
    router_address: Optional[str] = Field(
        default=None, description="Router override (defaults to the network's V2 router)"
    )

    # ======================
    # Account
    # ======================
    private_key: Optional[str] = Field(default=None, description="Hex private key used for signing")
    wallet_seed_phrase: Optional[str] = Field(
        default=None, description="12/24 word seed phrase (BIP-44 derivation)"
    )
    account_index: int = Field(default=0, description="BIP-44 address index for the seed phrase")
    account_address: Optional[str] = Field(
        default=None, description="Watch-only address used when no key is configured"
    )

    # ======================
    # Refresh / notifications
    # ======================
    poll_interval: float = Field(default=10.0, gt=0, description="Seconds between polling ticks")
    notification_ttl: float = Field(
        default=10.0, gt=0, description="Seconds before a notification is dismissed"
    )

    # ======================
    # Transactions
    # ======================
    dry_run: bool = Field(default=True, description="Validate and log removals without submitting")
    tx_deadline_seconds: int = Field(
        default=200000, description="Router deadline offset from now, in seconds"
    )
    tx_receipt_timeout: float = Field(
        default=120.0, description="Seconds to wait for a transaction receipt"
    )
    removal_slippage: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        lt=1,
        description="Minimum-output tolerance (0.01 = 1%, 0 = no minimum)",
    )

    # ======================
    # Token list
    # ======================
    token_list_url: Optional[str] = Field(
        default=None, description="Token-list JSON merged into the network defaults"
    )

    @property
    def has_signer(self) -> bool:
        """Check if a signing key or seed phrase is configured."""
        if self.private_key:
            return True
        return bool(self.wallet_seed_phrase and len(self.wallet_seed_phrase.split()) >= 12)

    def get_safe_dict(self) -> dict:
        """Return settings dict with secrets redacted."""
        return {
            "environment": self.environment,
            "debug": self.debug,
            "dry_run": self.dry_run,
            "rpc_url": self.rpc_url,
            "router_address": self.router_address or "(network default)",
            "private_key": "***" if self.private_key else "(not set)",
            "wallet_seed_phrase": "***" if self.wallet_seed_phrase else "(not set)",
            "account_address": self.account_address or "(not set)",
            "poll_interval": self.poll_interval,
            "removal_slippage": str(self.removal_slippage),
            "token_list_url": self.token_list_url or "(not set)",
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
