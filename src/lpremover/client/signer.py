"""Signing account loader.

Loads the EVM account from a hex private key or derives it from a BIP-39
seed phrase along m/44'/60'/0'/0/{index}.
"""

import logging
from typing import Optional

from eth_account import Account
from eth_account.signers.local import LocalAccount

from lpremover.config import Settings

logger = logging.getLogger(__name__)


def derive_private_key(seed_phrase: str, index: int = 0) -> bytes:
    """Derive an EVM private key from a seed phrase."""
    from bip_utils import Bip39SeedGenerator, Bip44, Bip44Changes, Bip44Coins

    seed = Bip39SeedGenerator(seed_phrase).Generate()
    bip44 = Bip44.FromSeed(seed, Bip44Coins.ETHEREUM)
    account = bip44.Purpose().Coin().Account(0).Change(Bip44Changes.CHAIN_EXT)
    return account.AddressIndex(index).PrivateKey().Raw().ToBytes()


def load_account(settings: Settings) -> Optional[LocalAccount]:
    """Load the signing account configured in settings.

    A private key takes precedence over a seed phrase. Returns None when
    neither is configured (watch-only operation).
    """
    if settings.private_key:
        account = Account.from_key(settings.private_key)
        logger.info(f"Loaded signing account {account.address[:10]}... from private key")
        return account

    if settings.has_signer and settings.wallet_seed_phrase:
        key = derive_private_key(settings.wallet_seed_phrase, settings.account_index)
        account = Account.from_key(key)
        logger.info(
            f"Derived signing account {account.address[:10]}... "
            f"(index {settings.account_index})"
        )
        return account

    logger.info("No signing key configured - running watch-only")
    return None
