"""Liquidity removal dispatch."""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from eth_utils import to_hex

from lpremover.models import RemoverState
from lpremover.notifications.notifier import Notifier
from lpremover.pool_math import apply_slippage
from lpremover.remover.session import SessionState
from lpremover.remover.validation import can_remove, parse_amount
from lpremover.utils.locks import account_tx_lock

logger = logging.getLogger(__name__)

ERROR_AUTO_HIDE_SECONDS = 10.0


@dataclass
class RemovalResult:
    """Outcome of a submitted (or simulated) removal."""

    success: bool
    receipt: Optional[dict] = None
    error: Optional[str] = None
    simulated: bool = False

    @property
    def tx_hash(self) -> Optional[str]:
        if not self.receipt:
            return None
        tx_hash = self.receipt.get("transactionHash")
        if isinstance(tx_hash, (bytes, bytearray)):
            return to_hex(tx_hash)
        return tx_hash


class ActionDispatcher:
    """Validates and submits liquidity removals."""

    def __init__(
        self,
        state: RemoverState,
        session: SessionState,
        notifier: Notifier,
        dry_run: bool = True,
        slippage: Decimal = Decimal("0"),
        lock_timeout: Optional[float] = 30.0,
    ):
        """Initialize dispatcher.

        Args:
            state: Shared remover state
            session: Session providing account, handles and client
            notifier: Receives success/failure notifications
            dry_run: Log the removal instead of submitting it
            slippage: Tolerance for minimum outputs when none are given
            lock_timeout: Seconds to wait for the account's transaction lock
        """
        self.state = state
        self.session = session
        self.notifier = notifier
        self.dry_run = dry_run
        self.slippage = slippage
        self.lock_timeout = lock_timeout

    async def remove(
        self,
        min_first: Optional[Decimal] = None,
        min_second: Optional[Decimal] = None,
    ) -> Optional[RemovalResult]:
        """Remove the entered amount of liquidity.

        Returns:
            RemovalResult, or None if removal is not enabled
        """
        state = self.state
        if not can_remove(state):
            logger.info("Removal not enabled - nothing submitted")
            return None

        session = self.session.session
        if not session.is_ready:
            logger.warning("Removal blocked: session is not resolved on a supported network")
            return None

        amount = parse_amount(state.amount_input)
        first = state.first.address
        second = state.second.address
        logger.info(f"Attempting to remove {amount} LP of {first} / {second}...")

        state.loading = True
        try:
            async with account_tx_lock(
                session.account, timeout=self.lock_timeout, operation="remove_liquidity"
            ):
                min_a, min_b = await self._minimums(amount, min_first, min_second)

                if self.dry_run:
                    logger.info(
                        f"DRY RUN: removeLiquidity({first}, {second}, {amount}, "
                        f"{min_a}, {min_b}) via router {session.router.address}"
                    )
                    self.notifier.success("Removal simulated (dry run)")
                    return RemovalResult(success=True, simulated=True)

                receipt = await self.session.client.remove_liquidity(
                    first,
                    second,
                    amount,
                    min_a,
                    min_b,
                    session.router,
                    session.account,
                    session.factory,
                )

        except Exception as e:
            logger.error(f"Liquidity removal failed: {e}")
            self.notifier.error(f"Removal Failed ({e})", ERROR_AUTO_HIDE_SECONDS)
            return RemovalResult(success=False, error=str(e))

        finally:
            state.loading = False

        state.amount_input = ""
        self.notifier.success("Removal Successful")
        return RemovalResult(success=True, receipt=receipt)

    async def _minimums(
        self,
        amount: Decimal,
        min_first: Optional[Decimal],
        min_second: Optional[Decimal],
    ) -> tuple[Decimal, Decimal]:
        """Minimum outputs: explicit values, else slippage on a fresh quote, else zero."""
        if min_first is not None or min_second is not None:
            minimums = (min_first or Decimal("0"), min_second or Decimal("0"))
            for value in minimums:
                if not value.is_finite() or value < 0:
                    raise ValueError(f"Invalid minimum output: {value}")
            return minimums

        if self.slippage <= 0:
            return Decimal("0"), Decimal("0")

        session = self.session.session
        quote = await self.session.client.quote_remove_liquidity(
            self.state.first.address,
            self.state.second.address,
            amount,
            session.factory,
        )
        return (
            apply_slippage(quote.amount_out_first, self.slippage),
            apply_slippage(quote.amount_out_second, self.slippage),
        )
