"""Modelos de domínio do agente de locação."""

from app.domain.booking import Client, Reservation, Visit
from app.domain.function_call import (
    FunctionCallRequest,
    FunctionCallResult,
    FunctionCallStatus,
)
from app.domain.lead import LeadClassification, LeadSignal, LeadTemperature
from app.domain.pricing import PriceQuote, format_brl, format_date_br
from app.domain.property import Property, PropertyPricing
from app.domain.transaction import Transaction, TransactionStatus

__all__ = [
    "Client",
    "FunctionCallRequest",
    "FunctionCallResult",
    "FunctionCallStatus",
    "LeadClassification",
    "LeadSignal",
    "LeadTemperature",
    "PriceQuote",
    "Property",
    "PropertyPricing",
    "Reservation",
    "Transaction",
    "TransactionStatus",
    "Visit",
    "format_brl",
    "format_date_br",
]
