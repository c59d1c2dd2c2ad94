"""Modelos de dados do módulo AI."""

from ai.models.agent_decision import CallOutcome, ModelDecision, ModelRequest, ProposedCall

__all__ = ["CallOutcome", "ModelDecision", "ModelRequest", "ProposedCall"]
