"""Implementações concretas de IO para a capacidade de linguagem."""

from app.infra.ai.openai_model_client import OpenAIModelClient

__all__ = ["OpenAIModelClient"]
