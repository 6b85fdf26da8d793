class ValidationError(Exception):
    """
    A required field is missing or a value is out of range.
    Surfaced to clients as a 400 response.
    """

    def __init__(self, message: str, fields: list[str] | None = None):
        super().__init__(message)
        self.message = message
        self.fields = fields or []

    @classmethod
    def missing(cls, fields: list[str]) -> "ValidationError":
        return cls(f"Missing required fields: {', '.join(fields)}", fields)


class StoreUnavailable(Exception):
    """The document store could not be reached or rejected the query."""
