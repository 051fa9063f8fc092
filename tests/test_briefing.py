"""Tests for AI briefing parsing, replacement and the generate endpoint."""

import asyncio

import pytest

from impoot.config_manager import config_manager
from impoot.errors import ExternalServiceError
from impoot.services import briefing_service
from impoot.services.briefing_service import parse_briefing_text

GEMINI_TEXT = """오늘의 부동산 뉴스
금리: 기준금리 동결로 대출 수요 회복 기대
전세: 수도권 전세가 3주 연속 상승
청약: 강남 신규 분양 경쟁률 120대 1
공급: 하반기 입주 물량 감소 전망
"""


class TestParse:

    def test_keeps_colon_lines_up_to_three(self):
        entries = parse_briefing_text(GEMINI_TEXT)
        assert [e["highlight"] for e in entries] == ["금리", "전세", "청약"]
        assert entries[0]["text"] == "금리: 기준금리 동결로 대출 수요 회복 기대"

    def test_no_colon_lines(self):
        assert parse_briefing_text("요약할 뉴스가 없습니다") == []
        assert parse_briefing_text("") == []


class TestGenerate:

    async def test_replace_orders_entries(self, db):
        briefings = await briefing_service.replace_briefings([
            {"highlight": "A", "text": "A: one"},
            {"highlight": "B", "text": "B: two"},
        ])
        assert [b["sortOrder"] for b in briefings] == [1, 2]

        briefings = await briefing_service.replace_briefings([{"highlight": "C", "text": "C: three"}])
        assert [b["highlight"] for b in briefings] == ["C"]

    async def test_generate_stores_parsed_lines(self, db, monkeypatch):
        async def fake_request(prompt):
            return GEMINI_TEXT

        monkeypatch.setattr(briefing_service, "request_gemini", fake_request)
        briefings = await briefing_service.generate_briefings()
        assert len(briefings) == 3
        assert await briefing_service.list_briefings() == briefings

    async def test_generate_without_usable_lines(self, db, monkeypatch):
        async def fake_request(prompt):
            return "형식이 맞지 않는 응답"

        monkeypatch.setattr(briefing_service, "request_gemini", fake_request)
        with pytest.raises(ExternalServiceError):
            await briefing_service.generate_briefings()

    async def test_missing_api_key(self, monkeypatch):
        monkeypatch.setattr(config_manager.ai, "gemini_api_key", "")
        with pytest.raises(ExternalServiceError) as exc_info:
            await briefing_service.request_gemini("prompt")
        assert exc_info.value.message == "AI 요청 실패 (API Key 확인 필요)"

    async def test_timeout_reported_as_service_error(self, monkeypatch):
        class TimedOutSession:
            def __init__(self, *args, **kwargs):
                pass

            async def __aenter__(self):
                raise asyncio.TimeoutError()

            async def __aexit__(self, *exc):
                return False

        monkeypatch.setattr(config_manager.ai, "gemini_api_key", "test-key")
        monkeypatch.setattr(briefing_service.aiohttp, "ClientSession", TimedOutSession)
        with pytest.raises(ExternalServiceError) as exc_info:
            await briefing_service.request_gemini("prompt")
        assert exc_info.value.status_code == 502

    async def test_generate_endpoint_reports_failure(self, client, make_user, monkeypatch):
        _, admin_headers = await make_user("관리자", roles=["super_admin"])
        monkeypatch.setattr(config_manager.ai, "gemini_api_key", "")

        res = await client.post("/api/admin/briefings/generate", headers=admin_headers)
        assert res.status_code == 502
        assert res.json()["detail"] == "AI 요청 실패 (API Key 확인 필요)"

    async def test_public_briefings(self, client, monkeypatch, make_user):
        _, admin_headers = await make_user("관리자", roles=["super_admin"])

        async def fake_request(prompt):
            return GEMINI_TEXT

        monkeypatch.setattr(briefing_service, "request_gemini", fake_request)
        res = await client.post("/api/admin/briefings/generate", headers=admin_headers)
        assert res.status_code == 200

        res = await client.get("/api/briefings")
        assert [b["highlight"] for b in res.json()["briefings"]] == ["금리", "전세", "청약"]
