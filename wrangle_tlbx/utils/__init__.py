from .config import DEFAULT_CFG, TransformConfig
from .diagnostics import Diagnostic, Diagnostics, resolve_diagnostics
from .logging_setup import configure_logging, get_logger


__all__ = [
    "DEFAULT_CFG",
    "Diagnostic",
    "Diagnostics",
    "TransformConfig",
    "configure_logging",
    "get_logger",
    "resolve_diagnostics",
]
