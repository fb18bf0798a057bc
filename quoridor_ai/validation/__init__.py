"""Structural checks for persisted search data."""

from .cache_checks import CACHE_FORMAT_VERSION, TABLE_NAMES, TranspositionDataError, validate_tables

__all__ = ["CACHE_FORMAT_VERSION", "TABLE_NAMES", "TranspositionDataError", "validate_tables"]
