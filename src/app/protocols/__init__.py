"""Protocolos e contratos do core da aplicação."""

from .context_store import ContextBackendProtocol
from .domain_services import (
    ClientRepositoryProtocol,
    DomainServices,
    LeadTaggerProtocol,
    MediaSenderProtocol,
    PropertyCatalogProtocol,
    ReservationRepositoryProtocol,
    TransactionRepositoryProtocol,
    VisitSchedulerProtocol,
)

__all__ = [
    "ClientRepositoryProtocol",
    "ContextBackendProtocol",
    "DomainServices",
    "LeadTaggerProtocol",
    "MediaSenderProtocol",
    "PropertyCatalogProtocol",
    "ReservationRepositoryProtocol",
    "TransactionRepositoryProtocol",
    "VisitSchedulerProtocol",
]
