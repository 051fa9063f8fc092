"""
리뷰 서비스
- 콘텐츠별/카테고리별 리뷰 조회
- 작성 가능 콘텐츠 (입금완료/참여확정 + 종료 + 미작성)
- 작성/수정(24시간 제한)/삭제
"""

import logging
from datetime import datetime, timedelta
from typing import Dict, Any, List, Optional
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from ..database.connection import get_session
from ..models.marketplace import Review, Item, Application
from ..auth.models import User
from ..auth.role_system import is_super_admin
from ..config_manager import config_manager
from ..errors import ConflictError, InvalidRequestError, NotFoundError, PermissionDeniedError, ReviewPolicyError
from .item_service import item_to_view

logger = logging.getLogger(__name__)

MIN_REVIEW_LENGTH = 10
REVIEWABLE_STATUSES = ("paid", "checked-in")

def validate_review(text: Optional[str], rating: Optional[int]):
    if text is not None and len(text.strip()) < MIN_REVIEW_LENGTH:
        raise InvalidRequestError(f"리뷰는 {MIN_REVIEW_LENGTH}자 이상 작성해주세요")
    if rating is not None and not 1 <= rating <= 5:
        raise InvalidRequestError("별점은 1~5 사이여야 합니다")

def is_edit_window_open(created_at: datetime, now: Optional[datetime] = None) -> bool:
    """작성 후 수정 가능 시간 이내인지"""
    now = now or datetime.utcnow()
    window = timedelta(hours=config_manager.marketplace.review_edit_window_hours)
    return now - created_at <= window

class ReviewService:
    """리뷰 관련 서비스"""

    @classmethod
    async def list_by_item(cls, item_id: int) -> List[Dict[str, Any]]:
        async with get_session() as session:
            result = await session.execute(
                select(Review).where(Review.item_id == item_id).order_by(Review.created_at.desc(), Review.id.desc())
            )
            return [r.to_dict() for r in result.scalars().all()]

    @classmethod
    async def list_by_category(cls, category: str) -> List[Dict[str, Any]]:
        async with get_session() as session:
            result = await session.execute(
                select(Review).join(Item, Item.id == Review.item_id)
                .where(Item.category_type == category)
                .order_by(Review.created_at.desc(), Review.id.desc())
            )
            return [r.to_dict() for r in result.scalars().all()]

    @classmethod
    async def get_reviewable_items(cls, user_id: int) -> List[Dict[str, Any]]:
        """리뷰 작성 가능한 콘텐츠 목록"""
        async with get_session() as session:
            reviewed = select(Review.item_id).where(Review.user_id == user_id)
            result = await session.execute(
                select(Item).join(Application, Application.item_id == Item.id)
                .where(Application.user_id == user_id)
                .where(Application.status.in_(REVIEWABLE_STATUSES))
                .where(Item.status == "ended")
                .where(Item.id.not_in(reviewed))
                .order_by(Item.id.desc())
            )
            return [item_to_view(item) for item in result.scalars().unique().all()]

    @classmethod
    async def create_review(cls, user_id: int, item_id: int, text: str, rating: int) -> Dict[str, Any]:
        """리뷰 작성"""
        validate_review(text, rating)

        reviewable_ids = {item["id"] for item in await cls.get_reviewable_items(user_id)}
        if item_id not in reviewable_ids:
            raise ReviewPolicyError("참여가 확정된 종료 콘텐츠에만 리뷰를 작성할 수 있습니다")

        async with get_session() as session:
            user = await session.get(User, user_id)
            if not user:
                raise NotFoundError("사용자를 찾을 수 없습니다")

            now = datetime.utcnow()
            review = Review(
                item_id=item_id,
                user_id=user_id,
                user=user.name,
                avatar=user.to_dict()["avatar"],
                text=text.strip(),
                rating=rating,
                date=now.strftime("%Y. %m. %d."),
                created_at=now,
            )
            session.add(review)
            try:
                await session.flush()
            except IntegrityError:
                raise ConflictError("이미 리뷰를 작성한 콘텐츠입니다")

            logger.info(f"⭐ 리뷰 작성 완료: user_id={user_id}, item_id={item_id}, rating={rating}")
            return review.to_dict()

    @classmethod
    async def update_review(cls, review_id: int, actor: Dict[str, Any],
                            text: Optional[str] = None, rating: Optional[int] = None) -> Dict[str, Any]:
        """리뷰 수정 (작성자는 24시간 이내, 관리자는 언제나)"""
        validate_review(text, rating)

        async with get_session() as session:
            review = await session.get(Review, review_id)
            if not review:
                raise NotFoundError("리뷰를 찾을 수 없습니다")

            admin = is_super_admin(actor)
            if not admin:
                if review.user_id != actor.get("id"):
                    raise PermissionDeniedError("본인 리뷰만 수정할 수 있습니다")
                if not is_edit_window_open(review.created_at):
                    raise ReviewPolicyError("리뷰 작성 후 24시간이 지나 수정할 수 없습니다.")

            if text is not None:
                review.text = text.strip()
            if rating is not None:
                review.rating = rating
            review.updated_at = datetime.utcnow()

            logger.info(f"✏️ 리뷰 수정 완료: review_id={review_id}, admin={admin}")
            return review.to_dict()

    @classmethod
    async def delete_review(cls, review_id: int, actor: Dict[str, Any]) -> None:
        async with get_session() as session:
            review = await session.get(Review, review_id)
            if not review:
                raise NotFoundError("리뷰를 찾을 수 없습니다")
            if review.user_id != actor.get("id") and not is_super_admin(actor):
                raise PermissionDeniedError("본인 리뷰만 삭제할 수 있습니다")

            await session.delete(review)
            logger.info(f"🗑️ 리뷰 삭제 완료: review_id={review_id}")
