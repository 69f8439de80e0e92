class InvariantViolationError(AssertionError):
    """Error raised when a caller breaks the calling contract of an operation.

    These are programming errors, like inserting text over a non-collapsed selection. They are
    never recovered from or retried.
    """


class UnknownEntityError(KeyError):
    """Error raised when an entity key is not present in the entity map."""

    def __init__(self, key: str):
        self.key = key
        self.message = f"Unknown DraftEntity key: {key!r}."
        super().__init__(self.message)
