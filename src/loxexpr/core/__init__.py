"""Core pipeline: diagnostics, configuration, IR and the expression language."""

from .errors import Diagnostic, DiagnosticKind, Diagnostics, LoxError, LoxRuntimeError
from .pipeline import RunResult, run_source
from .settings import LoxConfig, load_config

__all__ = [
    "Diagnostic",
    "DiagnosticKind",
    "Diagnostics",
    "LoxConfig",
    "LoxError",
    "LoxRuntimeError",
    "RunResult",
    "load_config",
    "run_source",
]
