"""Testes das respostas determinísticas (ai/rules/fallbacks.py)."""

from __future__ import annotations

import pytest

from ai.rules.fallbacks import (
    default_reply,
    duplicate_ack,
    empty_input_reply,
    greeting_reply,
    turn_failed_reply,
    unknown_function_reply,
)


class TestReplies:
    def test_greeting_uses_agent_name(self) -> None:
        assert "Clara" in greeting_reply("Clara")
        assert "{agent_name}" not in greeting_reply()

    @pytest.mark.parametrize(
        "reply",
        [empty_input_reply, turn_failed_reply, unknown_function_reply, default_reply],
    )
    def test_fixed_replies_are_not_blank(self, reply) -> None:
        text = reply()
        assert text
        assert text == text.strip()

    def test_turn_failed_asks_to_resend(self) -> None:
        assert "de novo" in turn_failed_reply()


class TestDuplicateAck:
    def test_function_specific_ack(self) -> None:
        assert "mídias" in duplicate_ack("send_property_media")

    def test_unknown_function_uses_default(self) -> None:
        assert duplicate_ack("search_properties") == duplicate_ack("qualquer_coisa")
        assert duplicate_ack("qualquer_coisa") == "Já cuidei disso agora há pouco ✅"
