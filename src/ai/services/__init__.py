"""Serviços determinísticos do módulo AI."""

from ai.services.message_extractor import (
    ClientData,
    extract_amenities,
    extract_city,
    extract_client_data,
    extract_guests,
    extract_ordinal,
)

__all__ = [
    "ClientData",
    "extract_amenities",
    "extract_city",
    "extract_client_data",
    "extract_guests",
    "extract_ordinal",
]
