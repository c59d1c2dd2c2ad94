"""Camada HTTP (FastAPI) sobre o orquestrador do agente."""
