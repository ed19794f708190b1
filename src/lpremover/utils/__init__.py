"""Utility helpers."""

from lpremover.utils.locks import LockTimeoutError, account_tx_lock, get_account_lock

__all__ = ["LockTimeoutError", "account_tx_lock", "get_account_lock"]
