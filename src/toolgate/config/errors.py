"""Error types for the configuration layer."""


class ConfigError(Exception):
    """Base error for all configuration failures."""


class ConfigReadError(ConfigError):
    """A configuration document exists but could not be read or decoded."""

    def __init__(self, path: object, detail: str = "") -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Cannot read config {path}" + (f": {detail}" if detail else ""))


class ConfigValidationError(ConfigError):
    """A configuration document does not match the expected schema."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__("Invalid config document" + (f": {detail}" if detail else ""))


class ConfigWriteError(ConfigError):
    """A configuration document (or its backup) could not be written."""

    def __init__(self, path: object, detail: str = "") -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Cannot write config {path}" + (f": {detail}" if detail else ""))
