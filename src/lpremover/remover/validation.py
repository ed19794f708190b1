"""Removal enablement predicate."""

from decimal import Decimal, InvalidOperation
from typing import Optional

from lpremover.models import RemoverState


def parse_amount(text: Optional[str]) -> Optional[Decimal]:
    """Parse user input as a finite decimal, or None if it is not one."""
    if text is None:
        return None
    try:
        value = Decimal(text.strip())
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value


def can_remove(state: RemoverState) -> bool:
    """Whether a removal may be previewed or submitted right now.

    Requires both tokens, a finite amount above zero that does not exceed
    the displayed LP balance, and no removal already in flight. Evaluate it
    at the moment of use; balance and account change between calls.
    """
    if state.loading:
        return False
    if not state.pair_selected:
        return False

    amount = parse_amount(state.amount_input)
    if amount is None or amount <= 0:
        return False

    return amount <= state.position.total_tokens_owned
