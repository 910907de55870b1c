class ValidationError(ValueError):
    """Structural problem with the dataset or options; aborts the whole run."""

    def __init__(self, check: str, message: str) -> None:
        self.check = check
        super().__init__(message)
