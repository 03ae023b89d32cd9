class ValidationError(ValueError):
    """Malformed input rejected before it reaches the scheduler or aggregation code.

    `errors` is a list of (field, message) pairs; str() joins the messages.
    """

    def __init__(self, errors: list[tuple[str, str]]):
        self.errors = list(errors)
        super().__init__("; ".join(msg for _, msg in self.errors))

    @property
    def fields(self) -> list[str]:
        return [field for field, _ in self.errors]
