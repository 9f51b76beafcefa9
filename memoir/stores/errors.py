"""Exceptions raised by domain stores for invalid input."""


class DomainValidationError(ValueError):
    """Base exception for rejected domain operations."""
    pass


class EntryNotFoundError(DomainValidationError):
    """No entry with the given id."""

    def __init__(self, kind: str, entry_id: str):
        self.kind = kind
        self.entry_id = entry_id
        super().__init__(f"{kind} not found: {entry_id}")


class InvalidAmountError(DomainValidationError):
    """Amount is not a positive number (or a negative balance)."""
    pass


class InsufficientFundsError(DomainValidationError):
    """Withdrawal larger than the balance."""

    def __init__(self, currency: str, balance: float, amount: float):
        self.currency = currency
        self.balance = balance
        self.amount = amount
        super().__init__(
            f"Insufficient {currency} funds: balance {balance}, requested {amount}"
        )


class PhotoTooLargeError(DomainValidationError):
    """Image exceeds the upload size limit."""

    def __init__(self, size_bytes: int, limit_bytes: int):
        self.size_bytes = size_bytes
        self.limit_bytes = limit_bytes
        super().__init__(
            f"Image is {size_bytes} bytes, limit is {limit_bytes} bytes"
        )
