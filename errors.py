# errors.py
"""Checkout failures. All of them are recovered by the product page and shown inline."""


class CheckoutError(RuntimeError):
    """Base class for a failed checkout attempt."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(CheckoutError):
    """Raised when the payment integration is not configured."""


class CheckoutSessionError(CheckoutError):
    """Raised when the checkout-session endpoint fails or answers without a session id."""


class ClientInitError(CheckoutError):
    """Raised when no payment client can be created."""


class RedirectError(CheckoutError):
    """Raised when the payment provider reports a redirect failure."""
