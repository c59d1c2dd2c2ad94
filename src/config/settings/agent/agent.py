"""Settings do orquestrador do agente."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

ModelBackend = Literal["openai", "heuristic"]


@dataclass(frozen=True, slots=True)
class AgentSettings:
    """Configurações do turno do agente.

    Attributes:
        agent_name: Nome da assistente apresentado ao cliente
        turn_timeout_seconds: Prazo máximo de um turno (fail closed ao estourar)
        model_backend: Capacidade de linguagem usada (openai | heuristic)
        compose_timeout_seconds: Prazo da segunda passada de composição de resposta
    """

    agent_name: str = "Sofia"
    turn_timeout_seconds: float = 25.0
    model_backend: ModelBackend = "heuristic"
    compose_timeout_seconds: float = 8.0

    def validate(self) -> list[str]:
        errors: list[str] = []

        if not self.agent_name:
            errors.append("AGENT_NAME não pode ser vazio")

        if self.turn_timeout_seconds <= 0:
            errors.append("AGENT_TURN_TIMEOUT_SECONDS deve ser > 0")

        if self.compose_timeout_seconds <= 0:
            errors.append("AGENT_COMPOSE_TIMEOUT_SECONDS deve ser > 0")

        if self.compose_timeout_seconds >= self.turn_timeout_seconds:
            errors.append(
                "AGENT_COMPOSE_TIMEOUT_SECONDS deve ser menor que "
                "AGENT_TURN_TIMEOUT_SECONDS"
            )

        if self.model_backend not in ("openai", "heuristic"):
            errors.append(f"AGENT_MODEL_BACKEND inválido: {self.model_backend}")

        return errors


def _load_agent_from_env() -> AgentSettings:
    """Carrega AgentSettings de variáveis de ambiente."""
    backend_str = os.getenv("AGENT_MODEL_BACKEND", "heuristic").lower()
    backend: ModelBackend = "openai" if backend_str == "openai" else "heuristic"
    return AgentSettings(
        agent_name=os.getenv("AGENT_NAME", "Sofia"),
        turn_timeout_seconds=float(os.getenv("AGENT_TURN_TIMEOUT_SECONDS", "25")),
        model_backend=backend,
        compose_timeout_seconds=float(os.getenv("AGENT_COMPOSE_TIMEOUT_SECONDS", "8")),
    )


@lru_cache(maxsize=1)
def get_agent_settings() -> AgentSettings:
    """Retorna instância cacheada de AgentSettings."""
    return _load_agent_from_env()
