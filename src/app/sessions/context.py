"""Contexto persistido de uma conversa (tenant, telefone).

O contexto guarda o que o agente precisa lembrar entre turnos: histórico,
imóveis em exibição, última cotação, cliente cadastrado e chamadas
recentes para o loop guard. Só o ContextStore altera ``turns`` e
``recent_function_calls``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from app.domain.pricing import PriceQuote
from app.sessions.history import Turn


def _parse_dt(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


@dataclass(frozen=True, slots=True)
class PropertySummary:
    """Resumo de imóvel em exibição (para "o primeiro", "a segunda opção")."""

    property_id: str
    title: str
    city: str
    nightly_rate: int
    max_guests: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "property_id": self.property_id,
            "title": self.title,
            "city": self.city,
            "nightly_rate": self.nightly_rate,
            "max_guests": self.max_guests,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PropertySummary:
        return cls(
            property_id=data["property_id"],
            title=data.get("title", ""),
            city=data.get("city", ""),
            nightly_rate=int(data.get("nightly_rate", 0)),
            max_guests=int(data.get("max_guests", 0)),
        )


@dataclass(frozen=True, slots=True)
class SearchCriteria:
    """Critérios da última busca (fonte implícita de hóspedes)."""

    city: str
    guests: int | None = None
    amenities: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {"city": self.city, "guests": self.guests, "amenities": list(self.amenities)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SearchCriteria:
        return cls(
            city=data.get("city", ""),
            guests=data.get("guests"),
            amenities=tuple(data.get("amenities") or ()),
        )


@dataclass(frozen=True, slots=True)
class RegisteredClient:
    """Identidade capturada na conversa."""

    client_id: str
    name: str
    document: str
    email: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "client_id": self.client_id,
            "name": self.name,
            "document": self.document,
            "email": self.email,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RegisteredClient:
        return cls(
            client_id=data["client_id"],
            name=data.get("name", ""),
            document=data.get("document", ""),
            email=data.get("email", ""),
        )


@dataclass(frozen=True, slots=True)
class FunctionCallRecord:
    """Chamada executada, mantida na janela do loop guard."""

    function_name: str
    argument_hash: str
    executed_at: datetime
    result_summary: str = ""
    side_effecting: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "function_name": self.function_name,
            "argument_hash": self.argument_hash,
            "executed_at": self.executed_at.isoformat(),
            "result_summary": self.result_summary,
            "side_effecting": self.side_effecting,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FunctionCallRecord:
        return cls(
            function_name=data["function_name"],
            argument_hash=data["argument_hash"],
            executed_at=datetime.fromisoformat(data["executed_at"]),
            result_summary=data.get("result_summary", ""),
            side_effecting=bool(data.get("side_effecting", False)),
        )


@dataclass(slots=True)
class ConversationContext:
    """Estado de uma conversa, chaveado por (tenant_id, customer_phone)."""

    tenant_id: str
    customer_phone: str
    turns: list[Turn] = field(default_factory=list)
    candidate_properties: list[PropertySummary] = field(default_factory=list)
    search_criteria: SearchCriteria | None = None
    pending_quote: PriceQuote | None = None
    registered_client: RegisteredClient | None = None
    recent_function_calls: list[FunctionCallRecord] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    last_activity_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    expires_at: datetime | None = None

    @property
    def key(self) -> tuple[str, str]:
        return (self.tenant_id, self.customer_phone)

    def is_expired(self, now: datetime | None = None) -> bool:
        if self.expires_at is None:
            return False
        return (now or datetime.now(UTC)) >= self.expires_at

    def to_dict(self) -> dict[str, Any]:
        return {
            "tenant_id": self.tenant_id,
            "customer_phone": self.customer_phone,
            "turns": [turn.to_dict() for turn in self.turns],
            "candidate_properties": [p.to_dict() for p in self.candidate_properties],
            "search_criteria": (
                self.search_criteria.to_dict() if self.search_criteria else None
            ),
            "pending_quote": self.pending_quote.to_dict() if self.pending_quote else None,
            "registered_client": (
                self.registered_client.to_dict() if self.registered_client else None
            ),
            "recent_function_calls": [c.to_dict() for c in self.recent_function_calls],
            "created_at": self.created_at.isoformat(),
            "last_activity_at": self.last_activity_at.isoformat(),
            "expires_at": self.expires_at.isoformat() if self.expires_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ConversationContext:
        search = data.get("search_criteria")
        quote = data.get("pending_quote")
        client = data.get("registered_client")
        now = datetime.now(UTC)
        return cls(
            tenant_id=data["tenant_id"],
            customer_phone=data["customer_phone"],
            turns=[Turn.from_dict(t) for t in data.get("turns", [])],
            candidate_properties=[
                PropertySummary.from_dict(p) for p in data.get("candidate_properties", [])
            ],
            search_criteria=SearchCriteria.from_dict(search) if search else None,
            pending_quote=PriceQuote.from_dict(quote) if quote else None,
            registered_client=RegisteredClient.from_dict(client) if client else None,
            recent_function_calls=[
                FunctionCallRecord.from_dict(c)
                for c in data.get("recent_function_calls", [])
            ],
            created_at=_parse_dt(data.get("created_at")) or now,
            last_activity_at=_parse_dt(data.get("last_activity_at")) or now,
            expires_at=_parse_dt(data.get("expires_at")),
        )
