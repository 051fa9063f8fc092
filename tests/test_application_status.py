"""
Tests for the application status workflow.

Covers:
  • transition table (allowed / rejected / terminal states)
  • confirmed → notification for the applicant
  • paid / checked-in → participant count held once
  • refund-completed / cancelled → seat released, never below zero
  • apply guards: duplicate, ended item, full networking item, phone format
  • host-only management of applicants
"""

import pytest

from impoot.database import get_session
from impoot.errors import (
    ApplicationStatusError, ConflictError, InvalidRequestError, PermissionDeniedError
)
from impoot.models import Item
from impoot.services import interaction_service
from impoot.services.application_service import (
    ApplicationService,
    ALLOWED_TRANSITIONS,
    STATUS_LABELS,
    can_transition,
    validate_transition,
    status_label,
)


# ---------------------------------------------------------------------------
# Transition table
# ---------------------------------------------------------------------------

class TestTransitions:

    @pytest.mark.parametrize("current,new", [
        ("applied", "confirmed"),
        ("applied", "paid"),
        ("confirmed", "paid"),
        ("paid", "checked-in"),
        ("paid", "refund-requested"),
        ("refund-requested", "refund-completed"),
        ("refund-requested", "cancelled"),
    ])
    def test_allowed(self, current, new):
        assert can_transition(current, new)
        validate_transition(current, new)

    @pytest.mark.parametrize("current,new", [
        ("checked-in", "refund-requested"),
        ("refund-completed", "paid"),
        ("cancelled", "applied"),
        ("paid", "applied"),
        ("applied", "checked-in"),
    ])
    def test_rejected(self, current, new):
        assert not can_transition(current, new)
        with pytest.raises(ApplicationStatusError):
            validate_transition(current, new)

    def test_unknown_status_rejected(self):
        with pytest.raises(ApplicationStatusError):
            validate_transition("applied", "approved")

    def test_terminal_states_have_no_exits(self):
        for status in ("checked-in", "refund-completed", "cancelled"):
            assert ALLOWED_TRANSITIONS[status] == set()

    def test_every_status_has_label(self):
        assert set(ALLOWED_TRANSITIONS) == set(STATUS_LABELS)
        assert status_label("paid") == "입금완료"
        assert status_label("mystery") == "mystery"


# ---------------------------------------------------------------------------
# Service flow
# ---------------------------------------------------------------------------

class TestStatusSideEffects:

    async def test_confirm_creates_notification(self, make_user, make_item):
        host, _ = await make_user("호스트", roles=["networking_manager"])
        member, _ = await make_user("참가자")
        item_id = await make_item("networking", title="강남 모임", author_id=host["id"])

        app = await ApplicationService.apply(member["id"], item_id)
        updated = await ApplicationService.change_status(app["id"], "confirmed", host)

        assert updated["status"] == "confirmed"
        notifications = await interaction_service.get_unread_notifications(member["id"])
        assert len(notifications) == 1
        assert notifications[0]["title"] == "신청 완료 알림"
        assert "[강남 모임]" in notifications[0]["message"]

    async def test_paid_and_checkin_count_once(self, make_user, make_item, fetch_item):
        host, _ = await make_user("호스트", roles=["networking_manager"])
        member, _ = await make_user("참가자")
        item_id = await make_item("networking", author_id=host["id"], max_participants=10)

        app = await ApplicationService.apply(member["id"], item_id)
        await ApplicationService.change_status(app["id"], "paid", host)
        assert (await fetch_item(item_id)).current_participants == 1

        await ApplicationService.change_status(app["id"], "checked-in", host)
        assert (await fetch_item(item_id)).current_participants == 1

    async def test_refund_releases_seat(self, make_user, make_item, fetch_item):
        host, _ = await make_user("호스트", roles=["networking_manager"])
        member, _ = await make_user("참가자")
        item_id = await make_item("networking", author_id=host["id"])

        app = await ApplicationService.apply(member["id"], item_id)
        await ApplicationService.change_status(app["id"], "paid", host)
        await ApplicationService.change_status(app["id"], "refund-requested", host)
        assert (await fetch_item(item_id)).current_participants == 1

        await ApplicationService.change_status(app["id"], "refund-completed", host)
        assert (await fetch_item(item_id)).current_participants == 0

    async def test_cancel_without_seat_keeps_count(self, make_user, make_item, fetch_item):
        host, _ = await make_user("호스트", roles=["networking_manager"])
        member, _ = await make_user("참가자")
        item_id = await make_item("networking", author_id=host["id"], current_participants=3)

        app = await ApplicationService.apply(member["id"], item_id)
        await ApplicationService.change_status(app["id"], "cancelled", host)
        assert (await fetch_item(item_id)).current_participants == 3

    async def test_release_never_goes_negative(self, make_user, make_item, fetch_item):
        host, _ = await make_user("호스트", roles=["networking_manager"])
        member, _ = await make_user("참가자")
        item_id = await make_item("networking", author_id=host["id"])

        app = await ApplicationService.apply(member["id"], item_id)
        await ApplicationService.change_status(app["id"], "paid", host)

        assert (await fetch_item(item_id)).current_participants == 1
        # 다른 경로로 인원이 0 으로 초기화된 경우
        async with get_session() as session:
            (await session.get(Item, item_id)).current_participants = 0

        await ApplicationService.change_status(app["id"], "refund-requested", host)
        await ApplicationService.change_status(app["id"], "refund-completed", host)
        assert (await fetch_item(item_id)).current_participants == 0

    async def test_illegal_transition_leaves_status(self, make_user, make_item):
        host, _ = await make_user("호스트", roles=["networking_manager"])
        member, _ = await make_user("참가자")
        item_id = await make_item("networking", author_id=host["id"])

        app = await ApplicationService.apply(member["id"], item_id)
        with pytest.raises(ApplicationStatusError):
            await ApplicationService.change_status(app["id"], "checked-in", host)

        applicants = await ApplicationService.get_item_applicants(item_id, host)
        assert applicants[0]["status"] == "applied"
        assert applicants[0]["statusLabel"] == "신청대기"

    async def test_only_host_or_admin_can_change(self, make_user, make_item):
        host, _ = await make_user("호스트", roles=["networking_manager"])
        other, _ = await make_user("다른 호스트", roles=["networking_manager"])
        admin, _ = await make_user("관리자", roles=["super_admin"])
        member, _ = await make_user("참가자")
        item_id = await make_item("networking", author_id=host["id"])

        app = await ApplicationService.apply(member["id"], item_id)
        with pytest.raises(PermissionDeniedError):
            await ApplicationService.change_status(app["id"], "confirmed", other)

        updated = await ApplicationService.change_status(app["id"], "confirmed", admin)
        assert updated["status"] == "confirmed"


class TestApplyGuards:

    async def test_duplicate_apply(self, make_user, make_item):
        member, _ = await make_user("참가자")
        item_id = await make_item("lecture")

        await ApplicationService.apply(member["id"], item_id)
        with pytest.raises(ConflictError):
            await ApplicationService.apply(member["id"], item_id)

    async def test_ended_item_rejected(self, make_user, make_item):
        member, _ = await make_user("참가자")
        item_id = await make_item("lecture", status="ended")

        with pytest.raises(InvalidRequestError):
            await ApplicationService.apply(member["id"], item_id)

    async def test_full_networking_rejected(self, make_user, make_item):
        member, _ = await make_user("참가자")
        item_id = await make_item("networking", current_participants=5, max_participants=5)

        with pytest.raises(InvalidRequestError):
            await ApplicationService.apply(member["id"], item_id)

    async def test_invalid_phone_rejected(self, make_user, make_item):
        member, _ = await make_user("참가자", phone=None)
        item_id = await make_item("minddate")

        with pytest.raises(InvalidRequestError):
            await ApplicationService.apply(member["id"], item_id, user_phone="02-123-4567")

    async def test_profile_defaults_used(self, make_user, make_item):
        member, _ = await make_user("김임풋", phone="01099998888")
        item_id = await make_item("minddate")

        app = await ApplicationService.apply(member["id"], item_id, refund_account="국민 123")
        assert app["userName"] == "김임풋"
        assert app["userPhone"] == "01099998888"
        assert app["status"] == "applied"

    async def test_cancel_becomes_refund_request(self, make_user, make_item):
        member, _ = await make_user("참가자")
        item_id = await make_item("networking")

        await ApplicationService.apply(member["id"], item_id)
        cancelled = await ApplicationService.cancel(member["id"], item_id, "일정 변경", "신한 110-000")
        assert cancelled["status"] == "refund-requested"
        assert cancelled["refundReason"] == "일정 변경"

        with pytest.raises(ApplicationStatusError):
            await ApplicationService.cancel(member["id"], item_id, "다시", "신한 110-000")


class TestApplicationApi:

    async def test_apply_confirm_pay_flow(self, client, make_user, make_item):
        host, host_headers = await make_user("호스트", roles=["networking_manager"])
        member, member_headers = await make_user("참가자")
        item_id = await make_item("networking", author_id=host["id"], max_participants=2)

        res = await client.post(f"/api/items/{item_id}/apply", json={}, headers=member_headers)
        assert res.status_code == 200
        application_id = res.json()["application"]["id"]

        res = await client.post(f"/api/items/{item_id}/apply", json={}, headers=member_headers)
        assert res.status_code == 409

        res = await client.patch(f"/api/applications/{application_id}/status",
                                 json={"status": "confirmed"}, headers=host_headers)
        assert res.status_code == 200

        res = await client.get("/api/notifications/me", headers=member_headers)
        notifications = res.json()["notifications"]
        assert len(notifications) == 1

        res = await client.post(f"/api/notifications/{notifications[0]['id']}/read", headers=member_headers)
        assert res.status_code == 200
        res = await client.get("/api/notifications/me", headers=member_headers)
        assert res.json()["notifications"] == []

        res = await client.patch(f"/api/applications/{application_id}/status",
                                 json={"status": "paid"}, headers=host_headers)
        assert res.status_code == 200

        res = await client.get(f"/api/items/{item_id}")
        assert res.json()["item"]["currentParticipants"] == 1

    async def test_illegal_transition_returns_400(self, client, make_user, make_item):
        host, host_headers = await make_user("호스트", roles=["networking_manager"])
        member, member_headers = await make_user("참가자")
        item_id = await make_item("networking", author_id=host["id"])

        res = await client.post(f"/api/items/{item_id}/apply", json={}, headers=member_headers)
        application_id = res.json()["application"]["id"]

        res = await client.patch(f"/api/applications/{application_id}/status",
                                 json={"status": "refund-completed"}, headers=host_headers)
        assert res.status_code == 400

    async def test_member_cannot_list_applicants(self, client, make_user, make_item):
        host, _ = await make_user("호스트", roles=["networking_manager"])
        member, member_headers = await make_user("참가자")
        item_id = await make_item("networking", author_id=host["id"])

        res = await client.get(f"/api/items/{item_id}/applicants", headers=member_headers)
        assert res.status_code == 403

    async def test_apply_requires_login(self, client, make_item):
        item_id = await make_item("networking")
        res = await client.post(f"/api/items/{item_id}/apply", json={})
        assert res.status_code == 401
