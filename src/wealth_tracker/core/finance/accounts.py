"""Account aggregation.

An auto-derived account has no balance of its own: it mirrors the total
invested value, expressed in the account's currency. Every auto-derived
account receives the full invested total; the total is not split between
them, so two such accounts count the investments twice.
"""

from decimal import Decimal

from ..models import Account, AccountBalance
from ..records import to_decimal, to_rate
from .currency import CurrencyConverter


def resolve_account(
    account: Account,
    invested_anchor: Decimal,
    converter: CurrencyConverter,
) -> AccountBalance:
    rate = to_rate(account.fx_to_anchor)
    if account.auto_derived:
        amount = invested_anchor / rate
    else:
        amount = to_decimal(account.balance)
    amount_anchor = amount * rate
    return AccountBalance(
        account=account,
        amount=amount,
        amount_anchor=amount_anchor,
        amount_base=converter.to_base(amount_anchor),
    )


def resolve_accounts(
    accounts: list[Account],
    invested_anchor: Decimal,
    converter: CurrencyConverter,
) -> list[AccountBalance]:
    return [resolve_account(a, invested_anchor, converter) for a in accounts]
