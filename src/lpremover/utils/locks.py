"""Per-account serialisation of transaction submission.

Two removals signed by the same account would race for the same nonce,
so submissions for one account run one at a time, across every remover
instance in the process.
"""

import asyncio
import logging
import weakref
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

logger = logging.getLogger(__name__)

# Lowercase account address -> lock. Entries disappear once no submission
# holds or awaits the lock.
_account_locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()


class LockTimeoutError(Exception):
    """The account's submission lock was not released in time."""


def get_account_lock(account: str) -> asyncio.Lock:
    """Lock shared by every submission for `account` (case-insensitive)."""
    key = account.lower()
    lock = _account_locks.get(key)
    if lock is None:
        lock = asyncio.Lock()
        _account_locks[key] = lock
    return lock


@asynccontextmanager
async def account_tx_lock(
    account: str,
    timeout: Optional[float] = 30.0,
    operation: str = "transaction",
) -> AsyncIterator[None]:
    """Hold the account's submission lock for the duration of the block.

    Raises:
        LockTimeoutError: another submission kept the lock past `timeout`
    """
    lock = get_account_lock(account)
    try:
        await asyncio.wait_for(lock.acquire(), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning(f"{operation} for {account} waited {timeout}s for a pending submission")
        raise LockTimeoutError(f"Another transaction for {account} is still pending")

    logger.debug(f"{operation} for {account}: lock held")
    try:
        yield
    finally:
        lock.release()


def clear_account_locks() -> None:
    _account_locks.clear()
