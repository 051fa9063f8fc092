"""정산/경험치 계산 결과 데이터 모델"""

from dataclasses import dataclass, field, asdict
from typing import List, Optional

@dataclass
class SettlementLine:
    """콘텐츠 한 건의 정산 내역"""
    item_id: int
    title: str
    category_type: str
    unit_price: int
    sales_count: int
    revenue: int
    fee: int
    payout: int
    status: str = "open"
    settlement_status: str = "pending"

    @property
    def is_settlement_due(self) -> bool:
        """종료되었지만 아직 정산되지 않은 콘텐츠"""
        return self.status == "ended" and self.settlement_status == "pending"

    def to_dict(self):
        return asdict(self)

@dataclass
class SettlementSummary:
    """파트너 정산 요약"""
    commission_rate: int
    total_sales: int = 0
    total_fees: int = 0
    net_profit: int = 0
    fees_to_pay: int = 0  # 호스트가 플랫폼에 납부할 수수료
    payout_to_receive: int = 0  # 플랫폼이 호스트에게 지급할 금액 (마인드데이트)
    blocked_by_fee: bool = False
    lines: List[SettlementLine] = field(default_factory=list)

    def to_dict(self):
        data = asdict(self)
        data["lines"] = [line.to_dict() for line in self.lines]
        return data

@dataclass
class LevelInfo:
    """경험치/레벨 정보"""
    total_xp: int
    level: int
    rank_name: str
    next_rank_name: str
    icon: str
    min_xp: int
    max_xp: int
    progress_percent: float
    remaining_xp: int
    breakdown: Optional[dict] = None

    def to_dict(self):
        return asdict(self)
