"""Custom error classes."""


class SimpleTaxError(Exception):
    """Base exception for the simple tax application."""
    pass


class TaxResolverRegistrationError(SimpleTaxError):
    """Error raised when a tax resolver cannot be registered."""
    pass
