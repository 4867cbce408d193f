"""Errors raised by the scheduling layer."""


class InvalidConfigurationError(ValueError):
    """Working-day configuration cannot produce a meaningful schedule."""


class InvalidScheduleRequestError(ValueError):
    """Request is well-formed but cannot be scheduled as given."""
