"""비즈니스 서비스 모듈"""

from .application_service import ApplicationService
from .item_service import ItemService
from .review_service import ReviewService

__all__ = ['ApplicationService', 'ItemService', 'ReviewService']
