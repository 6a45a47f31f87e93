class ConfigError(ValueError):
    """Raised when track or format parameters are invalid. Carries the offending field name."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"{field}: {message}")
