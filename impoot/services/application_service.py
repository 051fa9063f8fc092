"""
참여 신청 서비스
- 신청 상태 전이 검증 (applied → confirmed/paid → checked-in, 환불 흐름)
- 상태 변경 부수효과: 승인 알림, 참여 인원 증감
- 신청/취소(환불 요청), 신청자 목록
"""

import logging
from typing import Dict, Any, List, Optional
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from ..database.connection import get_session
from ..models.marketplace import Application, Item, UserNotification
from ..auth.models import User
from ..auth.auth_service import is_valid_phone
from ..auth.role_system import is_super_admin
from ..errors import (
    ApplicationStatusError, ConflictError, InvalidRequestError, NotFoundError, PermissionDeniedError
)

logger = logging.getLogger(__name__)

APPLIED = "applied"
CONFIRMED = "confirmed"
PAID = "paid"
CHECKED_IN = "checked-in"
REFUND_REQUESTED = "refund-requested"
REFUND_COMPLETED = "refund-completed"
CANCELLED = "cancelled"

STATUS_LABELS = {
    APPLIED: "신청대기",
    CONFIRMED: "신청완료 (입금대기)",
    PAID: "입금완료",
    CHECKED_IN: "참여확정",
    REFUND_REQUESTED: "환불요청중",
    REFUND_COMPLETED: "환불완료",
    CANCELLED: "취소됨",
}

ALLOWED_TRANSITIONS = {
    APPLIED: {CONFIRMED, PAID, REFUND_REQUESTED, CANCELLED},
    CONFIRMED: {PAID, REFUND_REQUESTED, CANCELLED},
    PAID: {CHECKED_IN, REFUND_REQUESTED},
    REFUND_REQUESTED: {REFUND_COMPLETED, CANCELLED},
    CHECKED_IN: set(),
    REFUND_COMPLETED: set(),
    CANCELLED: set(),
}

# 참여 인원에 반영되는 상태 / 좌석을 반납하는 상태
SEAT_STATUSES = {PAID, CHECKED_IN}
SEAT_RELEASE_STATUSES = {REFUND_COMPLETED, CANCELLED}
CANCELLABLE_STATUSES = {APPLIED, CONFIRMED, PAID}

def can_transition(current: str, new: str) -> bool:
    return new in ALLOWED_TRANSITIONS.get(current, set())

def validate_transition(current: str, new: str) -> None:
    """허용되지 않은 상태 전이면 ApplicationStatusError"""
    if new not in STATUS_LABELS:
        raise ApplicationStatusError(f"알 수 없는 신청 상태입니다: {new}")
    if not can_transition(current, new):
        raise ApplicationStatusError(
            f"'{STATUS_LABELS.get(current, current)}' 상태에서 '{STATUS_LABELS[new]}' 상태로 변경할 수 없습니다"
        )

def status_label(status: str) -> str:
    return STATUS_LABELS.get(status, status)

def _ensure_item_manager(item: Item, actor: Dict[str, Any]):
    if item.author_id != actor.get("id") and not is_super_admin(actor):
        raise PermissionDeniedError("해당 콘텐츠의 신청자를 관리할 권한이 없습니다")

class ApplicationService:
    """참여 신청 관련 서비스"""

    @classmethod
    async def apply(cls, user_id: int, item_id: int, refund_account: Optional[str] = None,
                    user_name: Optional[str] = None, user_phone: Optional[str] = None) -> Dict[str, Any]:
        """참여 신청"""
        async with get_session() as session:
            item = await session.get(Item, item_id)
            if not item:
                raise NotFoundError("콘텐츠를 찾을 수 없습니다")

            if item.status in ("ended", "closed"):
                raise InvalidRequestError("모집이 마감된 콘텐츠입니다")

            if (item.category_type == "networking" and item.max_participants
                    and (item.current_participants or 0) >= item.max_participants):
                raise InvalidRequestError("정원이 가득 찼습니다")

            existing = await session.execute(
                select(Application.id).where(Application.user_id == user_id).where(Application.item_id == item_id)
            )
            if existing.first():
                raise ConflictError("이미 신청한 콘텐츠입니다")

            user = await session.get(User, user_id)
            name = user_name or (user.name if user else None)
            phone = user_phone or (user.phone if user else None)
            if phone and not is_valid_phone(phone):
                raise InvalidRequestError("연락처 형식이 올바르지 않습니다 (010-XXXX-XXXX)")

            application = Application(
                user_id=user_id,
                item_id=item_id,
                status=APPLIED,
                refund_account=refund_account,
                user_name=name,
                user_phone=phone,
            )
            session.add(application)
            try:
                await session.flush()
            except IntegrityError:
                raise ConflictError("이미 신청한 콘텐츠입니다")

            logger.info(f"📝 참여 신청 완료: user_id={user_id}, item_id={item_id}")
            return application.to_dict()

    @classmethod
    async def change_status(cls, application_id: int, new_status: str, actor: Dict[str, Any]) -> Dict[str, Any]:
        """
        신청 상태 변경 (호스트/관리자)

        부수효과는 같은 트랜잭션에서 처리되며 실패 시 상태 변경도 롤백된다.
        - confirmed 진입: 신청자에게 승인 알림
        - paid 진입: 참여 인원 +1 (seat_held 표시)
        - seat_held 상태에서 refund-completed / cancelled: 참여 인원 -1
        """
        async with get_session() as session:
            application = await session.get(Application, application_id)
            if not application:
                raise NotFoundError("신청 내역을 찾을 수 없습니다")

            item = await session.get(Item, application.item_id)
            if not item:
                raise NotFoundError("콘텐츠를 찾을 수 없습니다")

            _ensure_item_manager(item, actor)

            previous = application.status
            validate_transition(previous, new_status)

            application.status = new_status

            if new_status == CONFIRMED:
                session.add(UserNotification(
                    user_id=application.user_id,
                    title="신청 완료 알림",
                    message=f"축하합니다! [{item.title}] 모임 신청이 승인되었습니다.",
                    is_read=False,
                ))
                logger.info(f"🔔 승인 알림 생성: user_id={application.user_id}, item_id={item.id}")

            if new_status in SEAT_STATUSES and not application.seat_held:
                application.seat_held = True
                item.current_participants = (item.current_participants or 0) + 1

            if new_status in SEAT_RELEASE_STATUSES and application.seat_held:
                application.seat_held = False
                item.current_participants = max(0, (item.current_participants or 0) - 1)

            logger.info(
                f"🔄 신청 상태 변경: application_id={application_id}, "
                f"{previous} → {new_status} (by user_id={actor.get('id')})"
            )
            return application.to_dict()

    @classmethod
    async def cancel(cls, user_id: int, item_id: int, reason: str, account: str) -> Dict[str, Any]:
        """신청 취소 (환불 요청)"""
        async with get_session() as session:
            result = await session.execute(
                select(Application).where(Application.user_id == user_id).where(Application.item_id == item_id)
            )
            application = result.scalar_one_or_none()
            if not application:
                raise NotFoundError("신청 내역을 찾을 수 없습니다")

            if application.status not in CANCELLABLE_STATUSES:
                raise ApplicationStatusError(
                    f"'{status_label(application.status)}' 상태에서는 취소할 수 없습니다"
                )

            application.status = REFUND_REQUESTED
            application.refund_reason = reason
            application.refund_account = account

            logger.info(f"↩️ 환불 요청 접수: user_id={user_id}, item_id={item_id}")
            return application.to_dict()

    @classmethod
    async def get_my_applications(cls, user_id: int) -> List[Dict[str, Any]]:
        async with get_session() as session:
            result = await session.execute(
                select(Application).where(Application.user_id == user_id)
                .order_by(Application.created_at.desc(), Application.id.desc())
            )
            return [app.to_dict() for app in result.scalars().all()]

    @classmethod
    async def get_applied_item_ids(cls, user_id: int) -> List[int]:
        async with get_session() as session:
            result = await session.execute(select(Application.item_id).where(Application.user_id == user_id))
            return [row[0] for row in result.all()]

    @classmethod
    async def get_item_applicants(cls, item_id: int, actor: Dict[str, Any]) -> List[Dict[str, Any]]:
        """콘텐츠 신청자 목록 (호스트/관리자)"""
        async with get_session() as session:
            item = await session.get(Item, item_id)
            if not item:
                raise NotFoundError("콘텐츠를 찾을 수 없습니다")
            _ensure_item_manager(item, actor)

            result = await session.execute(
                select(Application, User.name, User.phone)
                .join(User, User.id == Application.user_id, isouter=True)
                .where(Application.item_id == item_id)
                .order_by(Application.created_at.desc(), Application.id.desc())
            )

            applicants = []
            for application, name, phone in result.all():
                data = application.to_dict()
                data["userName"] = application.user_name or name
                data["userPhone"] = application.user_phone or phone
                data["statusLabel"] = status_label(application.status)
                applicants.append(data)
            return applicants
