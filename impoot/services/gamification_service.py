"""
경험치/레벨 서비스

XP = 찜 x 10 + (신청 + 열람) x 50 + 리뷰 x 30
"""

import logging
from sqlalchemy import select, func

from ..database.connection import get_session
from ..models.marketplace import UserLike, UserUnlock, Application, Review
from ..models.settlement import LevelInfo

logger = logging.getLogger(__name__)

LIKE_XP = 10
APPLY_XP = 50
UNLOCK_XP = 50
REVIEW_XP = 30

# (레벨, 등급명, 아이콘, 최소 XP, 다음 구간 XP, 다음 등급명)
LEVELS = [
    (1, "임린이", "🐣", 0, 300, "임대장"),
    (2, "임대장", "👣", 300, 1000, "부동산 고수"),
    (3, "부동산 고수", "👑", 1000, 3000, "마스터"),
]

def calculate_xp(likes: int, applications: int, unlocks: int, reviews: int) -> int:
    return likes * LIKE_XP + applications * APPLY_XP + unlocks * UNLOCK_XP + reviews * REVIEW_XP

def level_for_xp(total_xp: int) -> LevelInfo:
    """총 경험치로 레벨 정보 계산"""
    level, rank_name, icon, min_xp, max_xp, next_rank_name = LEVELS[0]
    for candidate in LEVELS:
        if total_xp >= candidate[3]:
            level, rank_name, icon, min_xp, max_xp, next_rank_name = candidate

    progress = (total_xp - min_xp) / (max_xp - min_xp) * 100
    return LevelInfo(
        total_xp=total_xp,
        level=level,
        rank_name=rank_name,
        next_rank_name=next_rank_name,
        icon=icon,
        min_xp=min_xp,
        max_xp=max_xp,
        progress_percent=round(min(100.0, max(0.0, progress)), 1),
        remaining_xp=max(0, max_xp - total_xp),
    )

async def _count(session, model, user_id: int) -> int:
    result = await session.execute(select(func.count()).select_from(model).where(model.user_id == user_id))
    return int(result.scalar() or 0)

async def get_user_level(user_id: int) -> LevelInfo:
    """사용자 활동 집계 후 레벨 정보 반환"""
    async with get_session() as session:
        likes = await _count(session, UserLike, user_id)
        applications = await _count(session, Application, user_id)
        unlocks = await _count(session, UserUnlock, user_id)
        reviews = await _count(session, Review, user_id)

    info = level_for_xp(calculate_xp(likes, applications, unlocks, reviews))
    info.breakdown = {
        "likes": likes,
        "applications": applications,
        "unlocks": unlocks,
        "reviews": reviews,
    }
    return info
