"""
홈/디자인 콘텐츠 서비스
- 슬라이드, 공지 배너 CRUD
- 카테고리 헤더/상세 이미지 upsert
- 홈 화면 전역 데이터 묶음
- 관리자 대시보드 통계
"""

import logging
from typing import Dict, Any, List, Optional, Type
from sqlalchemy import select, func

from ..database.connection import get_session
from ..models.marketplace import Slide, Notice, CategoryHeader, CategoryDetailImage, Item
from ..auth.models import User
from ..errors import NotFoundError
from .settings_service import get_tagline
from .briefing_service import list_briefings
from .item_service import item_to_view

logger = logging.getLogger(__name__)

SLIDE_FIELDS = {"title": "title", "desc": "description", "img": "img", "sortOrder": "sort_order", "isActive": "is_active"}
NOTICE_FIELDS = {"message": "message", "linkUrl": "link_url", "isActive": "is_active", "sortOrder": "sort_order"}

def _columns(payload: Dict[str, Any], fields: Dict[str, str]) -> Dict[str, Any]:
    return {column: payload[key] for key, column in fields.items() if key in payload and payload[key] is not None}

async def _next_sort_order(session, model: Type) -> int:
    result = await session.execute(select(func.max(model.sort_order)))
    return int(result.scalar() or 0) + 1

# === 슬라이드 ===

async def list_slides(active_only: bool = False) -> List[Dict[str, Any]]:
    async with get_session() as session:
        query = select(Slide).order_by(Slide.sort_order.asc(), Slide.id.asc())
        if active_only:
            query = query.where(Slide.is_active == True)  # noqa: E712
        result = await session.execute(query)
        return [s.to_dict() for s in result.scalars().all()]

async def create_slide(payload: Dict[str, Any]) -> Dict[str, Any]:
    async with get_session() as session:
        columns = _columns(payload, SLIDE_FIELDS)
        if "sort_order" not in columns:
            columns["sort_order"] = await _next_sort_order(session, Slide)
        slide = Slide(**columns)
        session.add(slide)
        await session.flush()
        logger.info(f"🖼️ 슬라이드 추가: slide_id={slide.id}")
        return slide.to_dict()

async def update_slide(slide_id: int, payload: Dict[str, Any]) -> Dict[str, Any]:
    async with get_session() as session:
        slide = await session.get(Slide, slide_id)
        if not slide:
            raise NotFoundError("슬라이드를 찾을 수 없습니다")
        for column, value in _columns(payload, SLIDE_FIELDS).items():
            setattr(slide, column, value)
        return slide.to_dict()

async def delete_slide(slide_id: int) -> None:
    async with get_session() as session:
        slide = await session.get(Slide, slide_id)
        if not slide:
            raise NotFoundError("슬라이드를 찾을 수 없습니다")
        await session.delete(slide)
        logger.info(f"🗑️ 슬라이드 삭제: slide_id={slide_id}")

# === 공지 배너 ===

async def list_notices(active_only: bool = False) -> List[Dict[str, Any]]:
    async with get_session() as session:
        query = select(Notice).order_by(Notice.sort_order.asc(), Notice.id.asc())
        if active_only:
            query = query.where(Notice.is_active == True)  # noqa: E712
        result = await session.execute(query)
        return [n.to_dict() for n in result.scalars().all()]

async def create_notice(payload: Dict[str, Any]) -> Dict[str, Any]:
    async with get_session() as session:
        columns = _columns(payload, NOTICE_FIELDS)
        if "sort_order" not in columns:
            columns["sort_order"] = await _next_sort_order(session, Notice)
        notice = Notice(**columns)
        session.add(notice)
        await session.flush()
        logger.info(f"📢 공지 추가: notice_id={notice.id}")
        return notice.to_dict()

async def update_notice(notice_id: int, payload: Dict[str, Any]) -> Dict[str, Any]:
    async with get_session() as session:
        notice = await session.get(Notice, notice_id)
        if not notice:
            raise NotFoundError("공지를 찾을 수 없습니다")
        for column, value in _columns(payload, NOTICE_FIELDS).items():
            setattr(notice, column, value)
        return notice.to_dict()

async def delete_notice(notice_id: int) -> None:
    async with get_session() as session:
        notice = await session.get(Notice, notice_id)
        if not notice:
            raise NotFoundError("공지를 찾을 수 없습니다")
        await session.delete(notice)
        logger.info(f"🗑️ 공지 삭제: notice_id={notice_id}")

# === 카테고리 헤더 / 상세 이미지 ===

async def get_category_headers() -> Dict[str, Dict[str, Optional[str]]]:
    async with get_session() as session:
        result = await session.execute(select(CategoryHeader))
        return {
            h.category_type: {"title": h.title, "description": h.description}
            for h in result.scalars().all()
        }

async def update_category_header(category: str, title: str, description: Optional[str]) -> None:
    async with get_session() as session:
        result = await session.execute(select(CategoryHeader).where(CategoryHeader.category_type == category))
        header = result.scalar_one_or_none()
        if header:
            header.title = title
            header.description = description
        else:
            session.add(CategoryHeader(category_type=category, title=title, description=description))
    logger.info(f"🏷️ 카테고리 헤더 저장: {category}")

async def get_detail_images() -> Dict[str, str]:
    async with get_session() as session:
        result = await session.execute(select(CategoryDetailImage))
        return {img.category_type: img.image_url for img in result.scalars().all()}

async def update_detail_image(category: str, image_url: str) -> None:
    async with get_session() as session:
        result = await session.execute(
            select(CategoryDetailImage).where(CategoryDetailImage.category_type == category)
        )
        image = result.scalar_one_or_none()
        if image:
            image.image_url = image_url
        else:
            session.add(CategoryDetailImage(category_type=category, image_url=image_url))
    logger.info(f"🖼️ 카테고리 상세 이미지 저장: {category}")

# === 묶음 조회 ===

async def load_global_data() -> Dict[str, Any]:
    """홈 화면 전역 데이터"""
    return {
        "slides": await list_slides(active_only=True),
        "notices": await list_notices(active_only=True),
        "headers": await get_category_headers(),
        "detailImages": await get_detail_images(),
        "tagline": await get_tagline(),
        "briefings": await list_briefings(),
    }

async def get_dashboard_stats() -> Dict[str, Any]:
    """관리자 대시보드 통계"""
    async with get_session() as session:
        users = (await session.execute(select(func.count()).select_from(User))).scalar() or 0
        items = (await session.execute(select(func.count()).select_from(Item))).scalar() or 0
        ended = (await session.execute(
            select(func.count()).select_from(Item).where(Item.status == "ended")
        )).scalar() or 0
        notices = (await session.execute(select(func.count()).select_from(Notice))).scalar() or 0
        recent = await session.execute(select(Item).order_by(Item.created_at.desc(), Item.id.desc()).limit(5))

        return {
            "users": int(users),
            "items": int(items),
            "ended_items": int(ended),
            "notices": int(notices),
            "recent_items": [item_to_view(item) for item in recent.scalars().all()],
        }
