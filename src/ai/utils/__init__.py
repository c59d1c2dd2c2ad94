"""Utilitários de IA: datas em português, JSON do modelo e sanitização."""

from ai.utils._json_extractor import extract_json_object
from ai.utils.date_extraction import (
    DateRange,
    extract_date_range,
    extract_single_date,
    extract_time,
)
from ai.utils.sanitizer import contains_pii, mask_history, mask_phone, sanitize_pii

__all__ = [
    "DateRange",
    "contains_pii",
    "extract_date_range",
    "extract_json_object",
    "extract_single_date",
    "extract_time",
    "mask_history",
    "mask_phone",
    "sanitize_pii",
]
