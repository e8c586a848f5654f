class ValidationError(ValueError):
    """Bad input from the client. `error` is a short machine-readable code."""

    def __init__(self, error, message=None):
        super().__init__(message or error)
        self.error = error
        self.message = message


class AIServiceError(RuntimeError):
    """The generative-language API could not produce a usable answer."""

    def __init__(self, error, message=None, status=502):
        super().__init__(message or error)
        self.error = error
        self.message = message
        self.status = status
