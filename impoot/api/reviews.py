"""리뷰 API 라우터"""

import logging
from typing import Optional, Dict
from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel, Field

from ..auth.middleware import require_auth
from ..errors import MarketplaceError
from ..services.review_service import ReviewService

logger = logging.getLogger(__name__)
router = APIRouter()

class ReviewCreate(BaseModel):
    item_id: int
    text: str
    rating: int = Field(..., ge=1, le=5)

class ReviewUpdate(BaseModel):
    text: Optional[str] = None
    rating: Optional[int] = Field(None, ge=1, le=5)

@router.get("/api/items/{item_id}/reviews")
async def get_item_reviews(item_id: int):
    try:
        return {"success": True, "reviews": await ReviewService.list_by_item(item_id)}
    except Exception as e:
        logger.error(f"리뷰 조회 실패: {str(e)}")
        raise HTTPException(status_code=500, detail="리뷰 조회에 실패했습니다")

@router.get("/api/reviews")
async def get_category_reviews(category: str):
    """카테고리 리뷰 (최신순)"""
    try:
        return {"success": True, "reviews": await ReviewService.list_by_category(category)}
    except Exception as e:
        logger.error(f"카테고리 리뷰 조회 실패: {str(e)}")
        raise HTTPException(status_code=500, detail="리뷰 조회에 실패했습니다")

@router.get("/api/reviews/reviewable")
async def get_reviewable_items(user: Dict = Depends(require_auth)):
    """리뷰 작성 가능한 콘텐츠"""
    try:
        return {"success": True, "items": await ReviewService.get_reviewable_items(user["id"])}
    except Exception as e:
        logger.error(f"리뷰 작성 가능 콘텐츠 조회 실패: {str(e)}")
        raise HTTPException(status_code=500, detail="리뷰 작성 가능 콘텐츠 조회에 실패했습니다")

@router.post("/api/reviews")
async def create_review(request: ReviewCreate, user: Dict = Depends(require_auth)):
    try:
        review = await ReviewService.create_review(user["id"], request.item_id, request.text, request.rating)
        return {"success": True, "message": "리뷰가 등록되었습니다", "review": review}
    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        logger.error(f"리뷰 작성 실패: {str(e)}")
        raise HTTPException(status_code=500, detail="리뷰 작성에 실패했습니다")

@router.put("/api/reviews/{review_id}")
async def update_review(review_id: int, request: ReviewUpdate, user: Dict = Depends(require_auth)):
    try:
        review = await ReviewService.update_review(review_id, user, text=request.text, rating=request.rating)
        return {"success": True, "message": "리뷰가 수정되었습니다", "review": review}
    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        logger.error(f"리뷰 수정 실패: {str(e)}")
        raise HTTPException(status_code=500, detail="리뷰 수정에 실패했습니다")

@router.delete("/api/reviews/{review_id}")
async def delete_review(review_id: int, user: Dict = Depends(require_auth)):
    try:
        await ReviewService.delete_review(review_id, user)
        return {"success": True, "message": "리뷰가 삭제되었습니다"}
    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        logger.error(f"리뷰 삭제 실패: {str(e)}")
        raise HTTPException(status_code=500, detail="리뷰 삭제에 실패했습니다")
