"""Typed failures raised by boxcox_ep operators."""


class InvalidInput(ValueError):
    """Precondition violation (e.g. non-positive observation under a logarithm)."""


class UnsupportedRequest(LookupError):
    """No operator is registered for the requested (factor kind, target role)."""
