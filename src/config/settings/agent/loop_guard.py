"""Settings do loop guard (supressão de chamadas repetidas).

A janela padrão vale para todas as funções com efeito colateral e pode
ser sobrescrita por função via LOOP_GUARD_OVERRIDES, no formato
``nome=chamadas:segundos`` separado por vírgula::

    LOOP_GUARD_OVERRIDES="send_property_media=3:60,create_reservation=5:600"
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True, slots=True)
class LoopWindow:
    """Janela deslizante: últimas ``calls`` chamadas E últimos ``seconds`` segundos."""

    calls: int = 3
    seconds: float = 60.0


@dataclass(frozen=True, slots=True)
class LoopGuardSettings:
    """Configurações do loop guard.

    Attributes:
        default_window: Janela aplicada quando não há override
        overrides: Pares (função, janela) específicos
    """

    default_window: LoopWindow = LoopWindow()
    overrides: tuple[tuple[str, LoopWindow], ...] = ()

    def window_for(self, function_name: str) -> LoopWindow:
        """Retorna a janela efetiva para a função."""
        for name, window in self.overrides:
            if name == function_name:
                return window
        return self.default_window

    @property
    def max_window_calls(self) -> int:
        """Maior janela por contagem entre padrão e overrides."""
        return max(
            [self.default_window.calls, *(window.calls for _, window in self.overrides)]
        )

    def validate(self) -> list[str]:
        errors: list[str] = []
        windows = [("default", self.default_window), *self.overrides]
        for name, window in windows:
            if window.calls < 1:
                errors.append(f"Janela de {name}: chamadas deve ser >= 1")
            if window.seconds <= 0:
                errors.append(f"Janela de {name}: segundos deve ser > 0")
        return errors


def parse_overrides(raw: str) -> tuple[tuple[str, LoopWindow], ...]:
    """Converte ``nome=chamadas:segundos,...`` em overrides.

    Raises:
        ValueError: Se algum item estiver malformado.
    """
    overrides: list[tuple[str, LoopWindow]] = []
    for item in raw.split(","):
        item = item.strip()
        if not item:
            continue
        name, sep, window_str = item.partition("=")
        calls_str, colon, seconds_str = window_str.partition(":")
        if not sep or not colon or not name.strip():
            msg = f"LOOP_GUARD_OVERRIDES malformado: {item!r}"
            raise ValueError(msg)
        overrides.append(
            (name.strip(), LoopWindow(calls=int(calls_str), seconds=float(seconds_str)))
        )
    return tuple(overrides)


def _load_loop_guard_from_env() -> LoopGuardSettings:
    """Carrega LoopGuardSettings de variáveis de ambiente."""
    return LoopGuardSettings(
        default_window=LoopWindow(
            calls=int(os.getenv("LOOP_GUARD_WINDOW_CALLS", "3")),
            seconds=float(os.getenv("LOOP_GUARD_WINDOW_SECONDS", "60")),
        ),
        overrides=parse_overrides(os.getenv("LOOP_GUARD_OVERRIDES", "")),
    )


@lru_cache(maxsize=1)
def get_loop_guard_settings() -> LoopGuardSettings:
    """Retorna instância cacheada de LoopGuardSettings."""
    return _load_loop_guard_from_env()
