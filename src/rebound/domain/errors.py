"""Errors raised by backoff and jitter construction."""


class InvalidConfiguration(ValueError):
    """Backoff or jitter parameters are invalid.

    Raised synchronously by the factories, never by ``evaluate``.
    """

    pass
