"""Repository for cash and brokerage accounts."""

from typing import Any, Optional

from ...core.exceptions import AccountNotFoundError
from ...core.models import Account
from ...core.records import new_account, next_id, patch_account
from ..codec import RecordCodec
from ..seed import seed_accounts
from .list_repo import RecordListRepository


class AccountsRepository(RecordListRepository[Account]):
    _key = "accounts"
    _codec = RecordCodec(Account)
    _seed = seed_accounts
    _not_found = AccountNotFoundError

    def create(self, display_name: str, **fields: Any) -> Account:
        return self._append(
            lambda records: new_account(next_id(a.id for a in records), display_name, **fields)
        )

    def update(self, account_id: int, changes: dict) -> Optional[Account]:
        return self._replace(account_id, lambda a: patch_account(a, changes))
