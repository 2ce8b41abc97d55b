"""Statement handles for concrete database drivers."""

from resultspec.adapters.dbapi import DBAPIStatement

__all__ = ("DBAPIStatement",)
