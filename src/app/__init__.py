"""App: orquestração do agente, casos de uso e infraestrutura.

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- use_cases/: turno do agente (handle_message, clear_context)
- services/: registry de funções, loop guard, validação, locks
- infra/: implementações concretas de IO (stores, OpenAI)
- protocols/: contratos/interfaces
- sessions/: contexto de conversa e seu store
- domain/: modelos de domínio
- observability/: correlation id e métricas

Padrão: app executa; api adapta; ai decide; fsm governa; utils apoia.
"""
