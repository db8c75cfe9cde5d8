# mystack_controller/core/errors.py

# -----------------------------
# Base Errors
# -----------------------------

class MystackError(Exception):
    """Base class for all controller errors."""

    code = "OFF-001"
    status_code = 500


class WrappedError(MystackError):
    """
    Error that carries a short classification plus the original cause.

    str() returns the cause's own text unchanged so callers can match on it;
    the classification is kept in ``message``.
    """

    def __init__(self, message: str, cause: Exception | str):
        super().__init__(str(cause))
        self.message = message
        self.cause = cause


# -----------------------------
# Specification Errors
# -----------------------------

class SpecError(WrappedError):
    """Stack specification could not be parsed or rendered."""

    status_code = 422


# -----------------------------
# Platform Errors
# -----------------------------

class PlatformError(WrappedError):
    """A cluster platform API call failed."""
    pass


class PlatformConflictError(PlatformError):
    """The platform refused a create because the object already exists."""

    status_code = 409


class PlatformNotFoundError(PlatformError):
    """The platform object (or its namespace) does not exist."""

    status_code = 404


# -----------------------------
# Namespace Errors
# -----------------------------

class NamespaceConflictError(MystackError):
    status_code = 409

    def __init__(self, username: str):
        super().__init__(f"namespace for user '{username}' already exists")
        self.username = username


class NamespaceNotFoundError(MystackError):
    status_code = 404

    def __init__(self, username: str):
        super().__init__(f"namespace for user '{username}' not found")
        self.username = username


# -----------------------------
# Storage Errors
# -----------------------------

class ConfigNotFoundError(MystackError):
    """No stack specification stored under the requested name."""

    status_code = 422


class ConfigAlreadyExistsError(MystackError):
    status_code = 409


# -----------------------------
# Readiness Errors
# -----------------------------

class ReadinessError(MystackError):
    pass


class ReadinessTimeoutError(ReadinessError):
    pass


class ReadinessFailedError(ReadinessError):
    """Target reached a terminal failed state while waiting."""
    pass


class ReadinessCancelledError(ReadinessError):
    pass
