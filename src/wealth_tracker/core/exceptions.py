"""Custom exceptions for the wealth tracker."""


class WealthTrackerError(Exception):
    """Base exception."""
    pass


class PositionNotFoundError(WealthTrackerError):
    pass


class AccountNotFoundError(WealthTrackerError):
    pass


class UnknownFieldError(WealthTrackerError):
    """A patch tried to set a field that is not editable."""
    pass


class PriceFetchError(WealthTrackerError):
    pass


class MalformedStateError(WealthTrackerError):
    """Persisted state could not be decoded."""
    pass
