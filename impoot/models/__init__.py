"""데이터 모델 모듈"""

from .marketplace import (
    Item, Application, UserLike, UserUnlock, Review, UserNotification,
    Slide, Notice, Briefing, CategoryHeader, CategoryDetailImage, Setting,
)
from .settlement import SettlementLine, SettlementSummary, LevelInfo

__all__ = [
    'Item', 'Application', 'UserLike', 'UserUnlock', 'Review', 'UserNotification',
    'Slide', 'Notice', 'Briefing', 'CategoryHeader', 'CategoryDetailImage', 'Setting',
    'SettlementLine', 'SettlementSummary', 'LevelInfo',
]
