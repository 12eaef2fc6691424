class HillPulseError(Exception):
    """Base error; ``status_code`` is what the HTTP layer answers with."""

    status_code = 500


class UnauthorizedError(HillPulseError):
    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class MissingInputError(HillPulseError):
    status_code = 400

    def __init__(self, message: str = "Missing tweet text"):
        super().__init__(message)


class SummarizationError(HillPulseError):
    """Raised once every summarization attempt has failed."""

    def __init__(self, message: str, last_error: Exception | None = None):
        super().__init__(message)
        self.last_error = last_error


class NotConfiguredError(HillPulseError):
    pass


class PersistenceError(HillPulseError):
    pass
