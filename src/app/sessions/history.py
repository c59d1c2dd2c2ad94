"""Tipos do histórico de turnos da conversa."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class TurnRole(Enum):
    """Autor da mensagem no histórico."""

    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True, slots=True)
class Turn:
    """Mensagem do histórico (texto já como recebido/enviado)."""

    role: TurnRole
    text: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, Any]:
        return {
            "role": self.role.value,
            "text": self.text,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Turn:
        return cls(
            role=TurnRole(data.get("role", "user")),
            text=data.get("text", ""),
            timestamp=(
                datetime.fromisoformat(data["timestamp"])
                if "timestamp" in data
                else datetime.now(UTC)
            ),
        )

    def __str__(self) -> str:
        """Representação usada em prompts."""
        prefix = "Cliente" if self.role == TurnRole.USER else "Assistente"
        return f"{prefix}: {self.text}"
