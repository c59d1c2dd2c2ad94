"""Rotas HTTP do agente."""
