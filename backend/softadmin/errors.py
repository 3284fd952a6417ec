"""
Domain errors for the software registry.

Every error carries the envelope ``code`` it is reported with. Handlers in
``softadmin.main`` turn them into ``{"code": ..., "msg": ...}`` bodies with
HTTP 200, so callers only ever branch on ``code``.
"""


class RegistryError(Exception):
    """Base exception for all registry errors."""

    code = -1

    def __init__(self, message: str, code: int | None = None):
        self.message = message
        if code is not None:
            self.code = code
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert error to the response envelope."""
        return {"code": self.code, "msg": self.message}


class MissingField(RegistryError):
    """A required input field is absent or empty."""


class InvalidCredentials(RegistryError):
    def __init__(self, message: str = "invalid username or password"):
        super().__init__(message)


class DuplicateUser(RegistryError):
    def __init__(self, username: str):
        self.username = username
        super().__init__("username already exists")


class NotFound(RegistryError):
    def __init__(self, software_id: int):
        self.software_id = software_id
        super().__init__("software not found")


class MissingKeyword(RegistryError):
    def __init__(self, message: str = "please enter a software id or name"):
        super().__init__(message)


class Unauthenticated(RegistryError):
    code = -2

    def __init__(self, message: str = "please log in first"):
        super().__init__(message)


class Forbidden(RegistryError):
    code = -3

    def __init__(self, message: str = "admin only"):
        super().__init__(message)


class BlobStoreError(RegistryError):
    """An uploaded file could not be stored or removed."""


class PersistenceFailure(Exception):
    """The stored registry document could not be decoded.

    Never reaches a caller: ``RegistryStore.load`` recovers by substituting
    the default document.
    """
