"""
콘텐츠 서비스
- DB 행 <-> 카테고리별 뷰 모델 매핑
- 카테고리/유형 필터
- 콘텐츠 CRUD (개설 권한, 미납 수수료 차단 포함)
"""

import logging
from typing import Dict, Any, List, Optional
from sqlalchemy import select, delete

from ..database.connection import get_session
from ..models.marketplace import Item, Application, UserLike, UserUnlock, Review
from ..auth.role_system import can_manage_category, is_super_admin
from ..errors import InvalidRequestError, NotFoundError, PermissionDeniedError, SettlementBlockedError
from .settlement_service import ensure_can_create_content, format_price
from config import CATEGORIES, DEFAULT_ITEM_IMAGE

logger = logging.getLogger(__name__)

# 공통 필드: 뷰 키 -> 컬럼
BASE_FIELDS = {
    "title": "title",
    "img": "img",
    "author": "author",
    "views": "views",
    "comments": "comments",
    "desc": "description",
    "date": "event_date",
    "price": "price",
    "loc": "location",
    "status": "status",
    "settlementStatus": "settlement_status",
    "hostBankInfo": "host_bank_info",
    "kakaoChatUrl": "kakao_chat_url",
    "hostDescription": "host_description",
    "hostIntroImage": "host_intro_image",
}

# 카테고리별 필드: 뷰 키 -> 컬럼
CATEGORY_FIELDS = {
    "networking": {
        "type": "networking_type",
        "curriculum": "curriculum",
        "currentParticipants": "current_participants",
        "maxParticipants": "max_participants",
        "groupPhoto": "group_photo",
    },
    "minddate": {
        "type": "minddate_type",
        "target": "target_audience",
        "matchedCouples": "matched_couples",
        "bankInfo": "bank_info",
        "refundPolicy": "refund_policy",
    },
    "crew": {
        "type": "crew_type",
        "leader": "leader",
        "leaderProfile": "leader_profile",
        "level": "crew_level",
        "course": "course",
        "gallery": "gallery",
        "reportContent": "report_content",
        "relatedRecruitTitle": "related_recruit_title",
        "purchaseCount": "purchase_count",
    },
    "lecture": {
        "format": "lecture_format",
        "teacher": "teacher",
        "teacherProfile": "teacher_profile",
        "curriculum": "curriculum",
    },
}

VALID_STATUSES = {"open", "closed", "ended"}

def item_to_view(item: Item) -> Dict[str, Any]:
    """DB 행 -> 카테고리별 뷰 모델"""
    view = {"id": item.id, "authorId": item.author_id, "reviews": []}
    for key, column in BASE_FIELDS.items():
        view[key] = getattr(item, column)
    view["createdAt"] = item.created_at.isoformat() if item.created_at else None

    category = item.category_type
    fields = CATEGORY_FIELDS.get(category)
    if fields is None:
        return view

    view["categoryType"] = category
    for key, column in fields.items():
        view[key] = getattr(item, column)

    if category == "minddate":
        if item.gender_ratio_male is not None and item.gender_ratio_female is not None:
            view["genderRatio"] = {"male": item.gender_ratio_male, "female": item.gender_ratio_female}
        else:
            view["genderRatio"] = None

    return view

def view_to_columns(payload: Dict[str, Any], category: Optional[str] = None) -> Dict[str, Any]:
    """뷰 모델 -> 컬럼 dict (payload 에 있는 키만, 현재 카테고리 컬럼만)"""
    category = category or payload.get("categoryType")
    columns: Dict[str, Any] = {}

    for key, column in BASE_FIELDS.items():
        if key in payload:
            columns[column] = payload[key]

    for key, column in CATEGORY_FIELDS.get(category, {}).items():
        if key in payload:
            columns[column] = payload[key]

    if category == "minddate" and payload.get("genderRatio"):
        ratio = payload["genderRatio"]
        columns["gender_ratio_male"] = ratio.get("male")
        columns["gender_ratio_female"] = ratio.get("female")

    if category:
        columns["category_type"] = category
    return columns

def matches_filter(view: Dict[str, Any], filter_value: str) -> bool:
    """카테고리 화면 필터 ('all' 또는 유형/포맷)"""
    if not filter_value or filter_value == "all":
        return True
    if view.get("categoryType") == "lecture":
        return view.get("format") == filter_value
    return view.get("type") == filter_value

def filter_items(views: List[Dict[str, Any]], filter_value: str = "all") -> List[Dict[str, Any]]:
    """필터 적용 (임장 리포트는 구매수 내림차순)"""
    filtered = [v for v in views if matches_filter(v, filter_value)]
    if filter_value == "report":
        filtered.sort(key=lambda v: v.get("purchaseCount") or 0, reverse=True)
    return filtered

def _apply_create_defaults(columns: Dict[str, Any], category: str, user: Dict[str, Any]):
    """신규 콘텐츠 기본값"""
    columns.setdefault("status", "open")
    columns["settlement_status"] = "pending"
    columns["views"] = 0
    columns["comments"] = 0
    columns["img"] = columns.get("img") or DEFAULT_ITEM_IMAGE
    columns["author"] = user.get("name")
    columns["author_id"] = user.get("id")

    if category == "crew":
        columns.setdefault("crew_type", "recruit")
        columns["leader"] = columns.get("leader") or user.get("name")
        columns["purchase_count"] = 0
    elif category == "networking":
        columns.setdefault("networking_type", "social")
        columns["current_participants"] = 0
    else:
        columns["current_participants"] = 0
        columns["purchase_count"] = 0

def _ensure_item_owner(item: Item, user: Dict[str, Any]):
    if item.author_id != user.get("id") and not is_super_admin(user):
        raise PermissionDeniedError("콘텐츠 수정 권한이 없습니다")

class ItemService:
    """콘텐츠 관련 서비스"""

    @classmethod
    async def list_items(cls, category: Optional[str] = None, filter_value: str = "all") -> List[Dict[str, Any]]:
        """콘텐츠 목록 (최신순)"""
        async with get_session() as session:
            query = select(Item).order_by(Item.created_at.desc(), Item.id.desc())
            if category:
                query = query.where(Item.category_type == category)
            result = await session.execute(query)
            views = [item_to_view(item) for item in result.scalars().all()]

        return filter_items(views, filter_value)

    @classmethod
    async def get_item(cls, item_id: int, count_view: bool = True) -> Dict[str, Any]:
        """콘텐츠 상세 (조회수 증가)"""
        async with get_session() as session:
            item = await session.get(Item, item_id)
            if not item:
                raise NotFoundError("콘텐츠를 찾을 수 없습니다")
            if count_view:
                item.views = (item.views or 0) + 1
            return item_to_view(item)

    @classmethod
    async def list_by_author(cls, author_id: int) -> List[Dict[str, Any]]:
        """내가 개설한 콘텐츠"""
        async with get_session() as session:
            result = await session.execute(
                select(Item).where(Item.author_id == author_id).order_by(Item.created_at.desc(), Item.id.desc())
            )
            return [item_to_view(item) for item in result.scalars().all()]

    @classmethod
    async def create_item(cls, payload: Dict[str, Any], user: Dict[str, Any]) -> Dict[str, Any]:
        """콘텐츠 개설"""
        category = payload.get("categoryType")
        if category not in CATEGORIES:
            raise InvalidRequestError(f"알 수 없는 카테고리입니다: {category}")

        if not can_manage_category(user, category):
            raise PermissionDeniedError(f"'{category}' 카테고리 개설 권한이 없습니다")

        # 관리자는 정산 차단 대상이 아님
        if not is_super_admin(user):
            await ensure_can_create_content(user["id"])

        columns = view_to_columns(payload, category)
        raw_price = payload.get("rawPrice")
        if raw_price is not None:
            columns["price"] = format_price(int(raw_price))
        _apply_create_defaults(columns, category, user)
        if columns["status"] not in VALID_STATUSES:
            raise InvalidRequestError(f"알 수 없는 콘텐츠 상태입니다: {columns['status']}")

        async with get_session() as session:
            item = Item(**columns)
            session.add(item)
            await session.flush()
            logger.info(f"✅ 콘텐츠 개설 완료: item_id={item.id}, category={category}, author_id={user.get('id')}")
            return item_to_view(item)

    @classmethod
    async def update_item(cls, item_id: int, payload: Dict[str, Any], user: Dict[str, Any]) -> Dict[str, Any]:
        """콘텐츠 수정 (작성자 또는 관리자)"""
        async with get_session() as session:
            item = await session.get(Item, item_id)
            if not item:
                raise NotFoundError("콘텐츠를 찾을 수 없습니다")
            _ensure_item_owner(item, user)

            columns = view_to_columns(payload, item.category_type)
            columns.pop("category_type", None)
            if "status" in columns and columns["status"] not in VALID_STATUSES:
                raise InvalidRequestError(f"알 수 없는 콘텐츠 상태입니다: {columns['status']}")
            # 정산 상태, 작성자, 판매 집계는 관리자만 변경
            if not is_super_admin(user):
                for column in ("settlement_status", "author", "current_participants", "purchase_count"):
                    columns.pop(column, None)
                reopening = columns.get("status", item.status) != "ended"
                if item.status == "ended" and item.settlement_status == "pending" and reopening:
                    raise SettlementBlockedError("정산이 완료되지 않은 종료 콘텐츠는 상태를 변경할 수 없습니다")

            for column, value in columns.items():
                setattr(item, column, value)

            logger.info(f"✏️ 콘텐츠 수정 완료: item_id={item_id}, fields={list(columns.keys())}")
            return item_to_view(item)

    @classmethod
    async def delete_item(cls, item_id: int, user: Dict[str, Any]) -> None:
        """콘텐츠 삭제 (작성자 또는 관리자)"""
        async with get_session() as session:
            item = await session.get(Item, item_id)
            if not item:
                raise NotFoundError("콘텐츠를 찾을 수 없습니다")
            _ensure_item_owner(item, user)

            for model in (Application, UserLike, UserUnlock, Review):
                await session.execute(delete(model).where(model.item_id == item_id))
            await session.delete(item)

            logger.info(f"🗑️ 콘텐츠 삭제 완료: item_id={item_id}")
