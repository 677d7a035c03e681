"""Shared building blocks: object model, configuration and utilities."""

from .config import DEFAULT_OUTPUT_NAME, MergeSettings
from .model import Dictionary, Name, ObjectId, Reference, Stream, String

__all__ = [
    "MergeSettings",
    "DEFAULT_OUTPUT_NAME",
    "ObjectId",
    "Name",
    "String",
    "Reference",
    "Dictionary",
    "Stream",
]
