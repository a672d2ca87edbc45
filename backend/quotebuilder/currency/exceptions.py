"""Exceptions of the currency module."""


class CurrencyDomainException(Exception):
    """Base class for currency exceptions."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ExchangeRateFetchException(CurrencyDomainException):
    """The exchange-rate provider could not be reached or answered with an error."""
    def __init__(self, detail: str):
        super().__init__(f"Could not fetch the exchange rate: {detail}")
        self.detail = detail
