"""Core result materialization.

- result.py: Result handle and the row materialization strategies
- config.py: ResultConfig settings object
"""

from resultspec.core.config import ResultConfig
from resultspec.core.result import MaterializationKind, Result, resolve_materialization

__all__ = ("MaterializationKind", "Result", "ResultConfig", "resolve_materialization")
