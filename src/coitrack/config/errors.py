"""Configuration error definitions."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """A configuration value is unusable (bad folder, out-of-range threshold, ...)."""


class MissingConfigurationError(ConfigurationError):
    """Required environment variables are absent or blank."""

    def __init__(self, names: list[str]) -> None:
        self.names = sorted(names)
        super().__init__(f"Missing configuration for: {', '.join(self.names)}")


class InvalidConfigurationValueError(ConfigurationError):
    def __init__(self, name: str, value: str, reason: str) -> None:
        self.name = name
        self.value = value
        super().__init__(f"{name}={value!r} {reason}")
