"""
정산 서비스
- 가격 문자열 파싱, 판매 수량 산정
- 콘텐츠별 매출/수수료/지급액 계산
- 파트너 정산 요약 (납부할 수수료 / 받을 정산금 / 개설 차단 여부)
- 관리자 정산 현황 및 정산 완료 처리

수수료는 항상 내림: fee = revenue * rate // 100
마인드데이트는 플랫폼이 입금을 받으므로 호스트에게 지급할 금액이 생기고,
그 외 카테고리는 호스트가 직접 받으므로 수수료를 플랫폼에 납부해야 한다.
"""

import re
import logging
from typing import Iterable, List, Dict, Any
from sqlalchemy import select

from ..database.connection import get_session
from ..models.marketplace import Item
from ..models.settlement import SettlementLine, SettlementSummary
from ..errors import NotFoundError, SettlementBlockedError
from .settings_service import get_commission_rate

logger = logging.getLogger(__name__)

FEE_BLOCK_MESSAGE = "미납된 수수료가 있습니다. 정산 후 콘텐츠 개설이 가능합니다."

_NON_DIGIT = re.compile(r"[^0-9]")

def parse_price(price) -> int:
    """'30,000원' -> 30000 (숫자가 없으면 0)"""
    if price is None:
        return 0
    if isinstance(price, int):
        return max(price, 0)
    digits = _NON_DIGIT.sub("", str(price))
    return int(digits) if digits else 0

def format_price(amount: int) -> str:
    """30000 -> '30,000원'"""
    return f"{amount:,}원"

def sales_count(item: Item) -> int:
    """카테고리별 판매 수량"""
    participants = item.current_participants or 0
    purchases = item.purchase_count or 0

    if item.category_type == "networking":
        return participants
    if item.category_type == "crew":
        return purchases
    return participants or purchases

def calculate_fee(revenue: int, commission_rate: int) -> int:
    return revenue * commission_rate // 100

def settlement_line(item: Item, commission_rate: int) -> SettlementLine:
    """콘텐츠 한 건 정산 내역 계산"""
    unit_price = parse_price(item.price)
    count = sales_count(item)
    revenue = unit_price * count
    fee = calculate_fee(revenue, commission_rate)

    return SettlementLine(
        item_id=item.id,
        title=item.title,
        category_type=item.category_type,
        unit_price=unit_price,
        sales_count=count,
        revenue=revenue,
        fee=fee,
        payout=revenue - fee,
        status=item.status or "open",
        settlement_status=item.settlement_status or "pending",
    )

def summarize(items: Iterable[Item], commission_rate: int) -> SettlementSummary:
    """파트너 보유 콘텐츠 전체 정산 요약"""
    summary = SettlementSummary(commission_rate=commission_rate)

    for item in items:
        line = settlement_line(item, commission_rate)
        summary.lines.append(line)
        summary.total_sales += line.revenue
        summary.total_fees += line.fee
        summary.net_profit += line.payout

        if not line.is_settlement_due:
            continue

        if line.category_type == "minddate":
            summary.payout_to_receive += line.payout
        elif line.fee > 0:
            summary.fees_to_pay += line.fee
            summary.blocked_by_fee = True

    return summary

async def get_partner_summary(user_id: int) -> SettlementSummary:
    """파트너 정산 요약 조회"""
    commission_rate = await get_commission_rate()
    async with get_session() as session:
        result = await session.execute(
            select(Item).where(Item.author_id == user_id).order_by(Item.created_at.desc(), Item.id.desc())
        )
        items = result.scalars().all()

    return summarize(items, commission_rate)

async def ensure_can_create_content(user_id: int) -> None:
    """미납 수수료가 있으면 개설 차단"""
    summary = await get_partner_summary(user_id)
    if summary.blocked_by_fee:
        logger.warning(f"⛔ 미납 수수료로 개설 차단: user_id={user_id}, 미납={summary.fees_to_pay}")
        raise SettlementBlockedError(FEE_BLOCK_MESSAGE)

async def get_admin_overview() -> Dict[str, Any]:
    """관리자용 콘텐츠별 예상 정산 현황 (판매 실적이 있는 콘텐츠만)"""
    commission_rate = await get_commission_rate()
    async with get_session() as session:
        result = await session.execute(select(Item).order_by(Item.created_at.desc(), Item.id.desc()))
        items = result.scalars().all()

    lines: List[SettlementLine] = [
        line for line in (settlement_line(item, commission_rate) for item in items)
        if line.sales_count > 0
    ]

    return {
        "commission_rate": commission_rate,
        "lines": [line.to_dict() for line in lines],
        "total_revenue": sum(line.revenue for line in lines),
        "total_fees": sum(line.fee for line in lines),
        "total_payout": sum(line.payout for line in lines),
    }

async def complete_settlement(item_id: int) -> Dict[str, Any]:
    """콘텐츠 정산 완료 처리"""
    async with get_session() as session:
        item = await session.get(Item, item_id)
        if not item:
            raise NotFoundError("콘텐츠를 찾을 수 없습니다")

        item.settlement_status = "completed"
        logger.info(f"✅ 정산 완료 처리: item_id={item_id}, title={item.title}")
        return {"item_id": item.id, "settlement_status": item.settlement_status}
