"""
설정 서비스
- key/value 설정 조회/저장
- 수수료율, 슬로건, 마이페이지 배너
"""

import logging
from typing import Optional

from ..database.connection import get_session
from ..models.marketplace import Setting
from ..config_manager import config_manager
from ..errors import InvalidRequestError
from config import DEFAULT_TAGLINE, DEFAULT_MYPAGE_BANNER

logger = logging.getLogger(__name__)

COMMISSION_RATE_KEY = "commission_rate"
TAGLINE_KEY = "tagline"
MYPAGE_BANNER_KEY = "mypage_banner"

async def get_setting(key: str) -> Optional[str]:
    """설정값 조회 (없으면 None)"""
    async with get_session() as session:
        setting = await session.get(Setting, key)
        return setting.value if setting else None

async def set_setting(key: str, value: str) -> None:
    """설정값 저장 (upsert)"""
    async with get_session() as session:
        setting = await session.get(Setting, key)
        if setting:
            setting.value = value
        else:
            session.add(Setting(key=key, value=value))
    logger.info(f"⚙️ 설정 저장: {key}")

async def get_commission_rate() -> int:
    """수수료율(%) 조회 - 저장값이 없거나 잘못되면 기본값"""
    value = await get_setting(COMMISSION_RATE_KEY)
    if value is None:
        return config_manager.marketplace.default_commission_rate
    try:
        return int(value)
    except ValueError:
        logger.warning(f"⚠️ 잘못된 수수료율 설정값: {value} (기본값 사용)")
        return config_manager.marketplace.default_commission_rate

async def set_commission_rate(rate: int) -> int:
    if not 0 <= rate <= 100:
        raise InvalidRequestError("수수료율은 0~100 사이여야 합니다")
    await set_setting(COMMISSION_RATE_KEY, str(rate))
    logger.info(f"💰 수수료율 변경: {rate}%")
    return rate

async def get_tagline() -> str:
    return await get_setting(TAGLINE_KEY) or DEFAULT_TAGLINE

async def get_mypage_banner() -> str:
    return await get_setting(MYPAGE_BANNER_KEY) or DEFAULT_MYPAGE_BANNER
