class AccountValidationError(Exception):
    """Raised when sign-in input is rejected."""
