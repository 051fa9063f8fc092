"""
데일리 브리핑 서비스
- 활성 브리핑 조회 / 전체 교체
- Gemini generateContent 호출로 부동산 뉴스 3줄 요약 생성
"""

import asyncio
import logging
from typing import Dict, Any, List
import aiohttp
from sqlalchemy import select, delete

from ..database.connection import get_session
from ..models.marketplace import Briefing
from ..config_manager import config_manager
from ..errors import ExternalServiceError
from config import BRIEFING_PROMPT, BRIEFING_MAX_ITEMS, GEMINI_BASE_URL

logger = logging.getLogger(__name__)

AI_FAILURE_MESSAGE = "AI 요청 실패 (API Key 확인 필요)"

def parse_briefing_text(text: str, limit: int = BRIEFING_MAX_ITEMS) -> List[Dict[str, str]]:
    """'키워드: 내용' 형식 줄만 골라 브리핑 항목으로 변환"""
    entries = []
    for line in (text or "").splitlines():
        line = line.strip()
        if ":" not in line:
            continue
        entries.append({"highlight": line.split(":")[0].strip(), "text": line})
        if len(entries) >= limit:
            break
    return entries

async def list_briefings() -> List[Dict[str, Any]]:
    async with get_session() as session:
        result = await session.execute(
            select(Briefing).where(Briefing.is_active == True)  # noqa: E712
            .order_by(Briefing.sort_order.asc(), Briefing.id.asc())
        )
        return [b.to_dict() for b in result.scalars().all()]

async def replace_briefings(entries: List[Dict[str, str]]) -> List[Dict[str, Any]]:
    """브리핑 전체 교체 (순서대로 sort_order 1..n)"""
    async with get_session() as session:
        await session.execute(delete(Briefing))
        for index, entry in enumerate(entries):
            session.add(Briefing(
                highlight=entry["highlight"],
                text=entry["text"],
                sort_order=index + 1,
                is_active=True,
            ))
    logger.info(f"📰 브리핑 교체 완료: {len(entries)}건")
    return await list_briefings()

async def request_gemini(prompt: str) -> str:
    """Gemini REST API 호출 후 응답 텍스트 반환"""
    api_key = config_manager.ai.gemini_api_key
    if not api_key:
        logger.error("❌ GEMINI_API_KEY 미설정")
        raise ExternalServiceError(AI_FAILURE_MESSAGE)

    url = f"{GEMINI_BASE_URL}/models/{config_manager.ai.gemini_model}:generateContent"
    payload = {"contents": [{"parts": [{"text": prompt}]}]}
    timeout = aiohttp.ClientTimeout(total=config_manager.ai.request_timeout)

    try:
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.post(url, params={"key": api_key}, json=payload) as response:
                if response.status != 200:
                    error_text = await response.text()
                    logger.error(f"❌ Gemini API 오류 ({response.status}): {error_text}")
                    raise ExternalServiceError(AI_FAILURE_MESSAGE)

                data = await response.json()
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        logger.error(f"❌ Gemini API 연결 실패: {str(e)}")
        raise ExternalServiceError(AI_FAILURE_MESSAGE)

    candidates = data.get("candidates") or []
    if not candidates:
        raise ExternalServiceError(AI_FAILURE_MESSAGE)
    parts = (candidates[0].get("content") or {}).get("parts") or []
    return "".join(part.get("text", "") for part in parts)

async def generate_briefings() -> List[Dict[str, Any]]:
    """AI 뉴스 요약 생성 후 저장"""
    text = await request_gemini(BRIEFING_PROMPT)
    entries = parse_briefing_text(text)
    if not entries:
        logger.warning("⚠️ AI 응답에서 브리핑 항목을 찾지 못함")
        raise ExternalServiceError(AI_FAILURE_MESSAGE)

    logger.info(f"🤖 AI 뉴스 요약 완료: {len(entries)}건")
    return await replace_briefings(entries)
