"""Synchronization between the block registry and the schema document."""

from .controller import SchemaSyncController

__all__ = ["SchemaSyncController"]
