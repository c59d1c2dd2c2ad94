"""Núcleo do módulo AI: contrato e cliente determinístico."""

from ai.core.heuristic_client import HeuristicModelClient
from ai.core.model_client import ModelClientProtocol

__all__ = ["HeuristicModelClient", "ModelClientProtocol"]
