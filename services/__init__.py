# services/__init__.py

from .error_handler import ConfigError, ErrorCodes, ErrorHandler, MonitorError

__all__ = ["ConfigError", "ErrorCodes", "ErrorHandler", "MonitorError"]
