from __future__ import annotations

from dataclasses import dataclass

DEFAULT_CURRENCY = "INR"


@dataclass(frozen=True)
class Money:
    amount_minor: int
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        if self.amount_minor < 0:
            raise ValueError("amount_minor must be >= 0")
        if len(self.currency) != 3 or not self.currency.isalpha() or not self.currency.isupper():
            raise ValueError("currency must be a 3-letter uppercase code")

    def __add__(self, other: Money) -> Money:
        self._ensure_same_currency(other)
        return Money(amount_minor=self.amount_minor + other.amount_minor, currency=self.currency)

    def times(self, quantity: int) -> Money:
        return Money(amount_minor=self.amount_minor * quantity, currency=self.currency)

    def format(self) -> str:
        """Render as major units with two decimals, e.g. ``₹500.00``."""
        symbol = "₹" if self.currency == "INR" else f"{self.currency} "
        major, minor = divmod(self.amount_minor, 100)
        return f"{symbol}{major}.{minor:02d}"

    def _ensure_same_currency(self, other: Money) -> None:
        if other.currency != self.currency:
            raise ValueError("cannot combine amounts in different currencies")

    @classmethod
    def zero(cls, currency: str = DEFAULT_CURRENCY) -> Money:
        return cls(amount_minor=0, currency=currency)
