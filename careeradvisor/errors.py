"""Exception types shared by the account, store and web layers.

Advisor failures have no exception here: the resolver turns them into a
:class:`~careeradvisor.advisor.schemas.LiveAdviceResult` and never raises.
"""


class CareerAdvisorError(Exception):
    """Base exception for the application."""


class ConfigurationError(CareerAdvisorError):
    """Raised when the environment cannot produce a usable configuration."""


class ValidationFailure(CareerAdvisorError):
    """A form submission was rejected; the message is safe to show the user."""


class DuplicateKeyError(CareerAdvisorError):
    """A store already holds a record with the same unique key."""

    def __init__(self, key: str, value: str):
        self.key = key
        self.value = value
        super().__init__(f"Duplicate {key}: {value!r}")


class AuthFailure(CareerAdvisorError):
    """Bad credentials, or a missing/expired session."""

    def __init__(self, message: str = "Invalid email or password."):
        super().__init__(message)


class PersistenceFailure(CareerAdvisorError):
    """The backing store could not be read or written."""
