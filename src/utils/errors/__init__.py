"""Exceções compartilhadas."""

from .exceptions import (
    AgentError,
    InfrastructureError,
    ModelUnavailableError,
    PreconditionError,
    RedisConnectionError,
    TransientInfrastructureError,
    UnknownFunctionError,
    ValidationError,
)

__all__ = [
    "AgentError",
    "InfrastructureError",
    "ModelUnavailableError",
    "PreconditionError",
    "RedisConnectionError",
    "TransientInfrastructureError",
    "UnknownFunctionError",
    "ValidationError",
]
