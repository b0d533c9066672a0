"""Data transfer objects shared across the realm client."""

from .connection_params import ConnectionParams

__all__ = ["ConnectionParams"]
