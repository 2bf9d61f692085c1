"""Coordinated sharing dataset preprocessing package."""

from .config import CANONICAL_FIELDS, PlatformTag
from .detection import detection_message, identify_platform
from .mapping import apply_mapping, run_mapping_pipeline
from .models import CanonicalRecord, ColumnMapping, ProcessingResult, ProcessingSummary
from .pipeline import CsvPipeline, process_csv
from .transforms import default_sources, get_transformer

__all__ = [
    "CANONICAL_FIELDS",
    "PlatformTag",
    "CanonicalRecord",
    "ColumnMapping",
    "ProcessingResult",
    "ProcessingSummary",
    "CsvPipeline",
    "process_csv",
    "apply_mapping",
    "run_mapping_pipeline",
    "identify_platform",
    "detection_message",
    "get_transformer",
    "default_sources",
]
