"""
Source Discovery Module

Supplies (document_id, source_text) pairs to the search orchestrator.
"""

from .discovery import (
    DEFAULT_EXTENSIONS,
    DEFAULT_EXCLUDE_DIRS,
    ARTIFACT_SOURCES,
    iter_source_files,
    source_for_artifact,
    load_documents,
    discover_documents,
)

__all__ = [
    "DEFAULT_EXTENSIONS",
    "DEFAULT_EXCLUDE_DIRS",
    "ARTIFACT_SOURCES",
    "iter_source_files",
    "source_for_artifact",
    "load_documents",
    "discover_documents",
]
