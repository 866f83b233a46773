"""
ZenSoul error types.
"""

from typing import Any, Optional


class ZenSoulError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class ExerciseError(ZenSoulError):
    def __init__(self, message: str, code: str = "invalid_exercise", details: Optional[dict[str, Any]] = None):
        super().__init__(code, message, details)


class SessionError(ZenSoulError):
    def __init__(self, message: str, code: str = "session_error", details: Optional[dict[str, Any]] = None):
        super().__init__(code, message, details)


class OracleError(ZenSoulError):
    def __init__(self, message: str, code: str = "oracle_error", details: Optional[dict[str, Any]] = None):
        super().__init__(code, message, details)


class ConfigError(ZenSoulError):
    def __init__(self, message: str):
        super().__init__("config_error", message)
