"""Módulo AI do agente Sofia.

Contrato com o modelo (``ModelClientProtocol``), cliente heurístico
determinístico, classificador de lead, extração de datas e assets de
prompt em YAML. A execução das funções fica em ``app.services``.
"""
