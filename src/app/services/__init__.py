"""Serviços de aplicação do agente (sem IO direto).

Implementações concretas de IO ficam em app/infra/.
"""

from app.services.function_registry import FunctionRegistry, HandlerEnv
from app.services.functions import SIDE_EFFECTING_FUNCTIONS, build_function_registry
from app.services.keyed_lock import KeyedLock
from app.services.loop_guard import GuardResult, LoopGuard, argument_hash

__all__ = [
    "SIDE_EFFECTING_FUNCTIONS",
    "FunctionRegistry",
    "GuardResult",
    "HandlerEnv",
    "KeyedLock",
    "LoopGuard",
    "argument_hash",
    "build_function_registry",
]
