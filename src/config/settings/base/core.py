"""Settings base do agente Sofia.

Configurações comuns ao serviço inteiro.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

Environment = Literal["development", "test", "staging", "production"]

VALID_ENVIRONMENTS = frozenset({"development", "test", "staging", "production"})

_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})
_REDIS_SCHEMES = ("redis://", "rediss://", "unix://")


@dataclass(frozen=True, slots=True)
class BaseSettings:
    """Configurações base do sistema.

    Attributes:
        environment: Ambiente de execução
        service_name: Nome do serviço para logs
        log_level: Nível de log raiz
        redis_url: URL de conexão Redis (backend de contexto)
    """

    environment: Environment = "development"
    service_name: str = "sofia_agent"
    log_level: str = "INFO"
    redis_url: str = ""

    @property
    def is_development(self) -> bool:
        """True em development e test (stores em memória permitidos)."""
        return self.environment in ("development", "test")

    def validate(self) -> list[str]:
        """Valida configurações base.

        Returns:
            Lista de erros (vazia = OK).
        """
        errors: list[str] = []

        if self.environment not in VALID_ENVIRONMENTS:
            errors.append(f"ENVIRONMENT inválido: {self.environment}")

        if not self.service_name:
            errors.append("SERVICE_NAME não pode ser vazio")

        if self.log_level not in _LOG_LEVELS:
            errors.append(f"LOG_LEVEL inválido: {self.log_level}")

        if self.redis_url and not self.redis_url.startswith(_REDIS_SCHEMES):
            errors.append(f"REDIS_URL com esquema inválido: {self.redis_url.split(':', 1)[0]}")

        return errors


def _parse_environment(env_str: str) -> Environment:
    env_lower = env_str.lower()
    if env_lower in ("production", "prod"):
        return "production"
    if env_lower in ("staging", "stage"):
        return "staging"
    if env_lower in ("test", "testing"):
        return "test"
    return "development"


def _load_base_from_env() -> BaseSettings:
    """Carrega BaseSettings de variáveis de ambiente."""
    return BaseSettings(
        environment=_parse_environment(os.getenv("ENVIRONMENT", "development")),
        service_name=os.getenv("SERVICE_NAME", "sofia_agent"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        redis_url=os.getenv("REDIS_URL", ""),
    )


@lru_cache(maxsize=1)
def get_base_settings() -> BaseSettings:
    """Retorna instância cacheada de BaseSettings."""
    return _load_base_from_env()
