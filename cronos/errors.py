# cronos/errors.py


class CronosError(Exception):
    """Base class for every error raised by the booking core."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CronosError):
    # malformed input, e.g. end <= start
    status_code = 422


class ConflictError(CronosError):
    status_code = 409

    def __init__(self, message: str, conflicting_ids=None):
        super().__init__(message)
        self.conflicting_ids = list(conflicting_ids or [])


class ConfigurationError(CronosError):
    # weekly template is missing a weekday
    status_code = 500


class PersistenceError(CronosError):
    status_code = 503


class NotFoundError(CronosError):
    status_code = 404
