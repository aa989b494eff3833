"""
Registry error taxonomy. Every failure maps to a short human-readable message.
"""


class RegistryError(Exception):
    """Base class for failures shown to staff as a message"""

    default_message = "The registry could not complete the request."

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class SyncFailure(RegistryError):
    """The remote store was unreachable or rejected a read or write"""

    default_message = "Database connection interrupted. Check your cloud configuration."


class ValidationFailure(RegistryError):
    """Local validation failed; no remote call was made"""

    default_message = "Please fill in all required fields."


class AuthFailure(RegistryError):
    """Credentials did not match"""

    default_message = "Verification failed. Invalid ID or PIN."


class InvalidCredentials(AuthFailure):
    """Unknown user or wrong password, deliberately indistinguishable"""


class AuthorizationDenial(RegistryError):
    """The role lacks clearance for the requested action"""

    default_message = "Your current profile does not have clearance for this module."
