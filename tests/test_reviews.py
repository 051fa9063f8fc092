"""
Tests for review eligibility and the edit window.

Covers:
  • reviewable items: paid / checked-in applications on ended items, once
  • text length and rating bounds
  • owner edits within 24h, admin edits any time
"""

from datetime import datetime, timedelta

import pytest

from impoot.database import get_session
from impoot.errors import ConflictError, InvalidRequestError, PermissionDeniedError, ReviewPolicyError
from impoot.models import Application, Review
from impoot.services.review_service import ReviewService, is_edit_window_open

REVIEW_TEXT = "호스트가 친절하고 유익한 시간이었습니다"


async def _attend(user_id: int, item_id: int, status: str = "paid"):
    async with get_session() as session:
        session.add(Application(user_id=user_id, item_id=item_id, status=status))


async def _age_review(review_id: int, hours: int):
    async with get_session() as session:
        review = await session.get(Review, review_id)
        review.created_at = datetime.utcnow() - timedelta(hours=hours)


class TestEditWindow:

    def test_window(self):
        now = datetime(2024, 5, 2, 12, 0)
        assert is_edit_window_open(now - timedelta(hours=23), now)
        assert is_edit_window_open(now - timedelta(hours=24), now)
        assert not is_edit_window_open(now - timedelta(hours=24, minutes=1), now)


class TestReviewService:

    async def test_reviewable_items(self, make_user, make_item):
        member, _ = await make_user("참가자")
        ended = await make_item("networking", status="ended")
        still_open = await make_item("networking", status="open")
        applied_only = await make_item("networking", status="ended")

        await _attend(member["id"], ended, "checked-in")
        await _attend(member["id"], still_open, "paid")
        await _attend(member["id"], applied_only, "applied")

        reviewable = await ReviewService.get_reviewable_items(member["id"])
        assert [item["id"] for item in reviewable] == [ended]

        await ReviewService.create_review(member["id"], ended, REVIEW_TEXT, 5)
        assert await ReviewService.get_reviewable_items(member["id"]) == []

    async def test_create_copies_profile(self, make_user, make_item):
        member, _ = await make_user("김후기")
        item_id = await make_item("lecture", status="ended")
        await _attend(member["id"], item_id)

        review = await ReviewService.create_review(member["id"], item_id, REVIEW_TEXT, 4)
        assert review["user"] == "김후기"
        assert review["avatar"] == member["avatar"]
        assert review["rating"] == 4
        assert review["date"].endswith(".")

    async def test_cannot_review_without_attending(self, make_user, make_item):
        member, _ = await make_user("참가자")
        item_id = await make_item("lecture", status="ended")

        with pytest.raises(ReviewPolicyError):
            await ReviewService.create_review(member["id"], item_id, REVIEW_TEXT, 5)

    @pytest.mark.parametrize("text,rating", [("짧아요", 5), (REVIEW_TEXT, 0), (REVIEW_TEXT, 6)])
    async def test_validation(self, make_user, make_item, text, rating):
        member, _ = await make_user("참가자")
        item_id = await make_item("lecture", status="ended")
        await _attend(member["id"], item_id)

        with pytest.raises(InvalidRequestError):
            await ReviewService.create_review(member["id"], item_id, text, rating)

    async def test_owner_edit_window(self, make_user, make_item):
        member, _ = await make_user("참가자")
        item_id = await make_item("lecture", status="ended")
        await _attend(member["id"], item_id)
        review = await ReviewService.create_review(member["id"], item_id, REVIEW_TEXT, 5)

        updated = await ReviewService.update_review(review["id"], member, rating=3)
        assert updated["rating"] == 3
        assert updated["updatedAt"] is not None

        await _age_review(review["id"], hours=25)
        with pytest.raises(ReviewPolicyError) as exc_info:
            await ReviewService.update_review(review["id"], member, rating=2)
        assert exc_info.value.message == "리뷰 작성 후 24시간이 지나 수정할 수 없습니다."

    async def test_admin_edits_any_time(self, make_user, make_item):
        member, _ = await make_user("참가자")
        admin, _ = await make_user("관리자", roles=["super_admin"])
        item_id = await make_item("lecture", status="ended")
        await _attend(member["id"], item_id)
        review = await ReviewService.create_review(member["id"], item_id, REVIEW_TEXT, 5)

        await _age_review(review["id"], hours=24 * 30)
        updated = await ReviewService.update_review(review["id"], admin, text="관리자가 정리한 후기 내용입니다")
        assert updated["text"] == "관리자가 정리한 후기 내용입니다"

    async def test_other_user_cannot_edit(self, make_user, make_item):
        member, _ = await make_user("참가자")
        stranger, _ = await make_user("타인")
        item_id = await make_item("lecture", status="ended")
        await _attend(member["id"], item_id)
        review = await ReviewService.create_review(member["id"], item_id, REVIEW_TEXT, 5)

        with pytest.raises(PermissionDeniedError):
            await ReviewService.update_review(review["id"], stranger, rating=1)
        with pytest.raises(PermissionDeniedError):
            await ReviewService.delete_review(review["id"], stranger)

    async def test_duplicate_insert_is_conflict(self, make_user, make_item, monkeypatch):
        member, _ = await make_user("참가자")
        item_id = await make_item("lecture", status="ended")
        await _attend(member["id"], item_id)

        async def stale_reviewable(cls, user_id):
            return [{"id": item_id}]

        monkeypatch.setattr(ReviewService, "get_reviewable_items", classmethod(stale_reviewable))
        await ReviewService.create_review(member["id"], item_id, REVIEW_TEXT, 5)
        with pytest.raises(ConflictError):
            await ReviewService.create_review(member["id"], item_id, REVIEW_TEXT, 4)
        assert len(await ReviewService.list_by_item(item_id)) == 1


class TestReviewApi:

    async def test_flow(self, client, make_user, make_item):
        member, headers = await make_user("참가자")
        item_id = await make_item("minddate", status="ended")
        await _attend(member["id"], item_id, "checked-in")

        res = await client.get("/api/reviews/reviewable", headers=headers)
        assert [item["id"] for item in res.json()["items"]] == [item_id]

        res = await client.post("/api/reviews", json={"item_id": item_id, "text": REVIEW_TEXT, "rating": 5},
                                headers=headers)
        assert res.status_code == 200
        review_id = res.json()["review"]["id"]

        res = await client.get(f"/api/items/{item_id}/reviews")
        assert [r["id"] for r in res.json()["reviews"]] == [review_id]

        res = await client.get("/api/reviews", params={"category": "minddate"})
        assert len(res.json()["reviews"]) == 1
        res = await client.get("/api/reviews", params={"category": "lecture"})
        assert res.json()["reviews"] == []

        await _age_review(review_id, hours=48)
        res = await client.put(f"/api/reviews/{review_id}", json={"rating": 1}, headers=headers)
        assert res.status_code == 403

        res = await client.delete(f"/api/reviews/{review_id}", headers=headers)
        assert res.status_code == 200

    async def test_duplicate_review_rejected(self, client, make_user, make_item):
        member, headers = await make_user("참가자")
        item_id = await make_item("lecture", status="ended")
        await _attend(member["id"], item_id)

        payload = {"item_id": item_id, "text": REVIEW_TEXT, "rating": 5}
        assert (await client.post("/api/reviews", json=payload, headers=headers)).status_code == 200
        assert (await client.post("/api/reviews", json=payload, headers=headers)).status_code == 403
