"""Testes de extração de datas e horários em português."""

from __future__ import annotations

from datetime import date

import pytest

from ai.utils.date_extraction import (
    DateRange,
    extract_date_range,
    extract_single_date,
    extract_time,
)

TODAY = date(2025, 6, 1)  # domingo


class TestExtractDateRange:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("do dia 10 ao dia 15 de julho", DateRange(date(2025, 7, 10), date(2025, 7, 15))),
            ("de 10/07 a 15/07", DateRange(date(2025, 7, 10), date(2025, 7, 15))),
            ("2025-07-10 a 2025-07-15", DateRange(date(2025, 7, 10), date(2025, 7, 15))),
            (
                "do dia 1 ao dia 5 de janeiro de 2026",
                DateRange(date(2026, 1, 1), date(2026, 1, 5)),
            ),
        ],
    )
    def test_common_formats(self, text: str, expected: DateRange) -> None:
        assert extract_date_range(text, TODAY) == expected

    def test_year_turnover(self) -> None:
        result = extract_date_range("de 30 de dezembro a 3 de janeiro", TODAY)
        assert result == DateRange(date(2025, 12, 30), date(2026, 1, 3))

    def test_past_month_moves_to_next_year(self) -> None:
        result = extract_date_range("dia 10 a 15 de maio", TODAY)
        assert result == DateRange(date(2026, 5, 10), date(2026, 5, 15))

    def test_inverted_range_is_kept_for_validation(self) -> None:
        result = extract_date_range("do dia 15 ao dia 10 de julho", TODAY)
        assert result == DateRange(date(2025, 7, 15), date(2025, 7, 10))

    def test_accents_and_case_ignored(self) -> None:
        result = extract_date_range("Do dia 2 até o dia 4 de Março", TODAY)
        assert result == DateRange(date(2026, 3, 2), date(2026, 3, 4))

    def test_no_range(self) -> None:
        assert extract_date_range("quero uma casa com piscina", TODAY) is None

    def test_invalid_calendar_day(self) -> None:
        assert extract_date_range("de 30/02 a 03/03", TODAY) is None


class TestExtractSingleDate:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("pode ser hoje?", date(2025, 6, 1)),
            ("amanhã de manhã", date(2025, 6, 2)),
            ("depois de amanhã", date(2025, 6, 3)),
            ("no dia 12 de agosto", date(2025, 8, 12)),
            ("dia 12/05", date(2026, 5, 12)),
            ("em 2025-09-20", date(2025, 9, 20)),
            ("no sábado", date(2025, 6, 7)),
            ("segunda-feira", date(2025, 6, 2)),
            ("domingo que vem", date(2025, 6, 8)),
        ],
    )
    def test_recognized(self, text: str, expected: date) -> None:
        assert extract_single_date(text, TODAY) == expected

    def test_nothing_found(self) -> None:
        assert extract_single_date("quero visitar o imóvel", TODAY) is None


class TestExtractTime:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("às 14h", "14:00"),
            ("14h30", "14:30"),
            ("pode ser 15:30?", "15:30"),
            ("as 9h", "09:00"),
        ],
    )
    def test_recognized(self, text: str, expected: str) -> None:
        assert extract_time(text) == expected

    def test_without_time(self) -> None:
        assert extract_time("qualquer horário serve") is None
