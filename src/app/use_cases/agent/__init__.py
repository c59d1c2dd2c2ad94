"""Caso de uso principal: turno do agente de locação."""

from app.use_cases.agent.handle_message import AgentOrchestrator, TurnResult

__all__ = ["AgentOrchestrator", "TurnResult"]
