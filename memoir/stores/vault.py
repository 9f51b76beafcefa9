"""
Shared vault store.

Two balances (CNY, IDR) and the most recent transactions, newest first.
Only MAX_VAULT_TRANSACTIONS are kept; older ones fall off on each new
transaction. Balances are adjusted in place, there is no ledger replay.
"""

import math
from typing import Any, Optional

import structlog
from pydantic import ValidationError

from memoir.models.journal import (
    MAX_VAULT_TRANSACTIONS,
    Currency,
    TransactionType,
    VaultBalance,
    VaultData,
    VaultTransaction,
)
from memoir.models.storage import VAULT_KEY
from memoir.stores.base import DomainStore, validate_items
from memoir.stores.errors import InsufficientFundsError, InvalidAmountError


logger = structlog.get_logger(__name__)


def _valid_amount(value: float) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


class VaultStore(DomainStore[VaultData]):

    default_key = VAULT_KEY

    def default(self) -> VaultData:
        return VaultData()

    def parse(self, raw: Any) -> VaultData:
        """Repair partial data: missing balances are 0, bad transactions dropped."""
        if not isinstance(raw, dict):
            return VaultData()
        try:
            balance = VaultBalance.model_validate(raw.get("balance") or {})
        except ValidationError:
            logger.warning("invalid_vault_balance", key=self.key)
            balance = VaultBalance()
        transactions = validate_items(VaultTransaction, raw.get("transactions"), self.key)
        return VaultData(balance=balance, transactions=transactions[:MAX_VAULT_TRANSACTIONS])

    def dump(self, value: VaultData) -> dict:
        return value.to_json()

    async def _record(
        self,
        kind: TransactionType,
        amount: float,
        currency: Currency,
        description: Optional[str],
    ) -> VaultData:
        if not _valid_amount(amount) or amount <= 0:
            raise InvalidAmountError(f"Amount must be a positive number, got {amount!r}")

        currency = Currency(currency)
        vault = await self.load()
        balance = getattr(vault.balance, currency.value)

        if kind == TransactionType.WITHDRAW:
            if balance < amount:
                raise InsufficientFundsError(currency.value, balance, amount)
            balance -= amount
        else:
            balance += amount

        transaction = VaultTransaction(
            amount=amount,
            type=kind,
            currency=currency,
            description=description or kind.value.capitalize(),
        )
        updated = VaultData(
            balance=vault.balance.model_copy(update={currency.value: balance}),
            transactions=[transaction, *vault.transactions][:MAX_VAULT_TRANSACTIONS],
        )
        return await self.save(updated)

    async def deposit(self, amount: float, currency: Currency, description: Optional[str] = None) -> VaultData:
        return await self._record(TransactionType.DEPOSIT, amount, currency, description)

    async def withdraw(self, amount: float, currency: Currency, description: Optional[str] = None) -> VaultData:
        """
        Take money out of the vault.

        Raises:
            InvalidAmountError: If amount is not positive
            InsufficientFundsError: If the balance is smaller than amount
        """
        return await self._record(TransactionType.WITHDRAW, amount, currency, description)

    async def set_balance(self, cny: float, idr: float) -> VaultData:
        """Overwrite both balances. Transactions are kept."""
        for value in (cny, idr):
            if not _valid_amount(value) or value < 0:
                raise InvalidAmountError(f"Balance must be a non-negative number, got {value!r}")
        vault = await self.load()
        vault.balance = VaultBalance(CNY=cny, IDR=idr)
        return await self.save(vault)
