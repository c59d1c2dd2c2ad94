"""Colaboradores de domínio em memória: desenvolvimento e testes.

Substituem o document store, o gateway de pagamento e o canal de
mensagens. Todos são particionados por tenant.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import UTC, date, datetime

from app.domain.booking import Client, Reservation, Visit
from app.domain.lead import LeadClassification
from app.domain.property import Property, PropertyPricing
from app.domain.transaction import Transaction
from app.sessions.context_store import hash_phone
from utils.text import normalize_text

logger = logging.getLogger(__name__)


def _new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


class MemoryPropertyCatalog:
    """Catálogo de imóveis em memória."""

    def __init__(self, properties: Iterable[Property] = ()) -> None:
        self._properties: dict[tuple[str, str], Property] = {}
        for item in properties:
            self.add(item)

    def add(self, item: Property) -> None:
        self._properties[(item.tenant_id, item.id)] = item

    async def search(
        self,
        tenant_id: str,
        city: str,
        *,
        guests: int | None = None,
        amenities: Sequence[str] = (),
    ) -> list[Property]:
        wanted_city = normalize_text(city)
        wanted_amenities = {normalize_text(a) for a in amenities if a}
        results = []
        for (owner, _), item in self._properties.items():
            if owner != tenant_id or not item.active:
                continue
            if normalize_text(item.city) != wanted_city:
                continue
            if guests is not None and guests > item.max_guests:
                continue
            available = {normalize_text(a) for a in item.amenities}
            if not wanted_amenities <= available:
                continue
            results.append(item)
        return sorted(results, key=lambda p: p.pricing.base_nightly)

    async def get(self, tenant_id: str, property_id: str) -> Property | None:
        return self._properties.get((tenant_id, property_id))


class MemoryClientRepository:
    def __init__(self) -> None:
        self._clients: dict[str, Client] = {}

    async def upsert(
        self,
        tenant_id: str,
        *,
        name: str,
        document: str,
        email: str,
        phone: str,
    ) -> Client:
        for client in self._clients.values():
            if client.tenant_id == tenant_id and client.document == document:
                updated = client.model_copy(update={"name": name, "email": email, "phone": phone})
                self._clients[client.id] = updated
                return updated
        client = Client(
            id=_new_id("cli"),
            tenant_id=tenant_id,
            name=name,
            document=document,
            email=email,
            phone=phone,
            created_at=datetime.now(UTC),
        )
        self._clients[client.id] = client
        return client

    async def get(self, tenant_id: str, client_id: str) -> Client | None:
        client = self._clients.get(client_id)
        return client if client and client.tenant_id == tenant_id else None


class MemoryReservationRepository:
    def __init__(self) -> None:
        self.reservations: list[Reservation] = []

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
    ) -> Reservation:
        reservation = Reservation(
            id=_new_id("res"),
            tenant_id=tenant_id,
            property_id=property_id,
            client_id=client_id,
            check_in=check_in,
            check_out=check_out,
            guests=guests,
            total_amount=total_amount,
            created_at=datetime.now(UTC),
        )
        self.reservations.append(reservation)
        return reservation

    async def overlapping(
        self,
        tenant_id: str,
        property_id: str,
        check_in: date,
        check_out: date,
    ) -> list[Reservation]:
        return [
            r
            for r in self.reservations
            if r.tenant_id == tenant_id
            and r.property_id == property_id
            and r.status != "cancelled"
            and r.check_in < check_out
            and r.check_out > check_in
        ]


class MemoryTransactionRepository:
    def __init__(self, transactions: Iterable[Transaction] = ()) -> None:
        self._transactions: dict[tuple[str, str], Transaction] = {
            (t.tenant_id, t.id): t for t in transactions
        }

    async def get(self, tenant_id: str, transaction_id: str) -> Transaction | None:
        return self._transactions.get((tenant_id, transaction_id))

    async def update(self, transaction: Transaction) -> Transaction:
        self._transactions[(transaction.tenant_id, transaction.id)] = transaction
        return transaction


class MemoryVisitScheduler:
    def __init__(self) -> None:
        self.visits: list[Visit] = []

    async def schedule(
        self,
        tenant_id: str,
        *,
        property_id: str,
        client_phone: str,
        scheduled_for: datetime,
    ) -> Visit:
        visit = Visit(
            id=_new_id("vis"),
            tenant_id=tenant_id,
            property_id=property_id,
            client_phone=client_phone,
            scheduled_for=scheduled_for,
        )
        self.visits.append(visit)
        return visit

    async def scheduled_on(self, tenant_id: str, day: date) -> list[Visit]:
        return [
            v
            for v in self.visits
            if v.tenant_id == tenant_id
            and v.status == "scheduled"
            and v.scheduled_for.date() == day
        ]


@dataclass(frozen=True, slots=True)
class SentMedia:
    tenant_id: str
    customer_phone: str
    urls: tuple[str, ...]
    caption: str


class RecordingMediaSender:
    """Registra as mídias "enviadas" em vez de chamar o canal."""

    def __init__(self) -> None:
        self.sent: list[SentMedia] = []

    async def send_media(
        self,
        tenant_id: str,
        customer_phone: str,
        urls: Sequence[str],
        caption: str = "",
    ) -> int:
        self.sent.append(SentMedia(tenant_id, customer_phone, tuple(urls), caption))
        logger.info(
            "media_sent",
            extra={
                "tenant_id": tenant_id,
                "phone_hash": hash_phone(customer_phone)[:8],
                "count": len(urls),
            },
        )
        return len(urls)


class MemoryLeadTagger:
    """Guarda a última classificação marcada por conversa."""

    def __init__(self) -> None:
        self.tags: dict[tuple[str, str], LeadClassification] = {}

    async def tag_lead(
        self,
        tenant_id: str,
        customer_phone: str,
        classification: LeadClassification,
    ) -> None:
        self.tags[(tenant_id, customer_phone)] = classification


def demo_properties(tenant_id: str) -> list[Property]:
    """Catálogo de demonstração usado em desenvolvimento."""
    return [
        Property(
            id="prop-floripa-lagoa",
            tenant_id=tenant_id,
            title="Casa na Lagoa da Conceição",
            city="Florianópolis",
            neighborhood="Lagoa da Conceição",
            bedrooms=2,
            bathrooms=1,
            max_guests=4,
            amenities=["wifi", "piscina", "churrasqueira"],
            photos=[
                "https://cdn.example.com/lagoa/sala.jpg",
                "https://cdn.example.com/lagoa/quarto.jpg",
            ],
            videos=["https://cdn.example.com/lagoa/tour.mp4"],
            pricing=PropertyPricing(
                base_nightly=35000,
                cleaning_fee=12000,
                extra_guest_fee=5000,
                included_guests=2,
                minimum_nights=2,
            ),
        ),
        Property(
            id="prop-floripa-jurere",
            tenant_id=tenant_id,
            title="Apartamento em Jurerê Internacional",
            city="Florianópolis",
            neighborhood="Jurerê",
            bedrooms=3,
            bathrooms=2,
            max_guests=6,
            amenities=["wifi", "ar condicionado", "garagem"],
            photos=["https://cdn.example.com/jurere/vista.jpg"],
            pricing=PropertyPricing(
                base_nightly=52000,
                cleaning_fee=15000,
                extra_guest_fee=7000,
                included_guests=4,
                minimum_nights=3,
            ),
        ),
        Property(
            id="prop-sp-pinheiros",
            tenant_id=tenant_id,
            title="Studio em Pinheiros",
            city="São Paulo",
            neighborhood="Pinheiros",
            bedrooms=1,
            bathrooms=1,
            max_guests=2,
            amenities=["wifi", "ar condicionado"],
            photos=["https://cdn.example.com/pinheiros/studio.jpg"],
            pricing=PropertyPricing(base_nightly=22000, cleaning_fee=8000),
        ),
    ]
