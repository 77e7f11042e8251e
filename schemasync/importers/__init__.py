"""Importers for saved projects."""

from .base import BaseImporter
from .project import ProjectImporter, export_payload

__all__ = ["BaseImporter", "ProjectImporter", "export_payload"]
