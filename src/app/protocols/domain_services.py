"""Contratos dos serviços de domínio consumidos pelos handlers de função.

Cada colaborador expõe operações simples de leitura/criação/atualização
chaveadas por tenant. Implementações reais (document store, gateway de
pagamento, canal de mensagens) ficam fora do agente; as de memória em
``app.infra.stores.memory_domain_stores`` servem para dev e testes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import date, datetime

    from app.domain.booking import Client, Reservation, Visit
    from app.domain.lead import LeadClassification
    from app.domain.property import Property
    from app.domain.transaction import Transaction


@runtime_checkable
class PropertyCatalogProtocol(Protocol):
    """Consulta ao catálogo de imóveis do tenant."""

    async def search(
        self,
        tenant_id: str,
        city: str,
        *,
        guests: int | None = None,
        amenities: Sequence[str] = (),
    ) -> list[Property]:
        """Retorna imóveis ativos na cidade que comportam os hóspedes."""
        ...

    async def get(self, tenant_id: str, property_id: str) -> Property | None:
        """Busca imóvel por id e retorna None se não existir."""
        ...


@runtime_checkable
class ClientRepositoryProtocol(Protocol):
    async def upsert(
        self,
        tenant_id: str,
        *,
        name: str,
        document: str,
        email: str,
        phone: str,
    ) -> Client:
        """Cria o cliente ou atualiza o existente com o mesmo documento."""
        ...

    async def get(self, tenant_id: str, client_id: str) -> Client | None: ...


@runtime_checkable
class ReservationRepositoryProtocol(Protocol):
    async def create(
        self,
        tenant_id: str,
        *,
        property_id: str,
        client_id: str,
        check_in: date,
        check_out: date,
        guests: int,
        total_amount: int,
    ) -> Reservation: ...

    async def overlapping(
        self,
        tenant_id: str,
        property_id: str,
        check_in: date,
        check_out: date,
    ) -> list[Reservation]:
        """Reservas ativas (pending ou confirmed) que ocupam alguma noite do período."""
        ...


@runtime_checkable
class TransactionRepositoryProtocol(Protocol):
    async def get(self, tenant_id: str, transaction_id: str) -> Transaction | None: ...

    async def update(self, transaction: Transaction) -> Transaction:
        """Grava a transação inteira (status e notas)."""
        ...


@runtime_checkable
class VisitSchedulerProtocol(Protocol):
    async def schedule(
        self,
        tenant_id: str,
        *,
        property_id: str,
        client_phone: str,
        scheduled_for: datetime,
    ) -> Visit: ...

    async def scheduled_on(self, tenant_id: str, day: date) -> list[Visit]:
        """Visitas não canceladas do tenant no dia (qualquer imóvel)."""
        ...


@runtime_checkable
class MediaSenderProtocol(Protocol):
    """Envio de mídia pelo canal de mensagens."""

    async def send_media(
        self,
        tenant_id: str,
        customer_phone: str,
        urls: Sequence[str],
        caption: str = "",
    ) -> int:
        """Envia as mídias e retorna quantas foram enviadas."""
        ...


@runtime_checkable
class LeadTaggerProtocol(Protocol):
    """Marcação de lead no CRM (ex: quente para acompanhamento humano)."""

    async def tag_lead(
        self,
        tenant_id: str,
        customer_phone: str,
        classification: LeadClassification,
    ) -> None: ...


@dataclass(frozen=True, slots=True)
class DomainServices:
    """Colaboradores injetados nos handlers de função."""

    catalog: PropertyCatalogProtocol
    clients: ClientRepositoryProtocol
    reservations: ReservationRepositoryProtocol
    transactions: TransactionRepositoryProtocol
    visits: VisitSchedulerProtocol
    media: MediaSenderProtocol
