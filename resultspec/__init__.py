"""resultspec: turn the rows of an executed statement into mappings, objects or models."""

from resultspec import adapters, core, events, exceptions, factory, model, protocols, typing, utils
from resultspec.__metadata__ import __version__
from resultspec.core import MaterializationKind, Result, ResultConfig
from resultspec.events import AfterQueryEventParam, EventMixin, EventParam, ModelEvents, listen
from resultspec.exceptions import (
    ExecutionFailedError,
    ImproperConfigurationError,
    ResultSpecError,
    SchemaConversionError,
)
from resultspec.factory import new_instance
from resultspec.model import Model
from resultspec.protocols import EventTargetProtocol, FetchMode, StatementProtocol

__all__ = (
    "AfterQueryEventParam",
    "EventMixin",
    "EventParam",
    "EventTargetProtocol",
    "ExecutionFailedError",
    "FetchMode",
    "ImproperConfigurationError",
    "MaterializationKind",
    "Model",
    "ModelEvents",
    "Result",
    "ResultConfig",
    "ResultSpecError",
    "SchemaConversionError",
    "StatementProtocol",
    "__version__",
    "adapters",
    "core",
    "events",
    "exceptions",
    "factory",
    "listen",
    "model",
    "new_instance",
    "protocols",
    "typing",
    "utils",
)
