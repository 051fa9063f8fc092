"""
Tests for settlement math and the unpaid-fee creation block.

Covers:
  • price parsing / formatting
  • sales count per category
  • fee floor rounding and per-item payout
  • partner summary: fees owed vs. minddate payouts, completed items excluded
  • admin overview and completing a settlement
  • item creation blocked while a fee is unpaid, never for super admins
  • partners cannot reopen unsettled items or rewrite their sales counts
"""

from types import SimpleNamespace

import pytest

from impoot.errors import SettlementBlockedError
from impoot.services import settlement_service
from impoot.services.settings_service import set_commission_rate, get_commission_rate
from impoot.services.settlement_service import (
    parse_price,
    format_price,
    sales_count,
    calculate_fee,
    settlement_line,
    summarize,
)


def _item(
    item_id: int = 1,
    category_type: str = "networking",
    price="30,000원",
    current_participants: int = 0,
    purchase_count: int = 0,
    status: str = "ended",
    settlement_status: str = "pending",
):
    return SimpleNamespace(
        id=item_id,
        title=f"item-{item_id}",
        category_type=category_type,
        price=price,
        current_participants=current_participants,
        purchase_count=purchase_count,
        status=status,
        settlement_status=settlement_status,
    )


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------

class TestPriceHelpers:

    @pytest.mark.parametrize("raw,expected", [
        ("30,000원", 30000),
        ("무료", 0),
        ("", 0),
        (None, 0),
        ("₩ 1,250,000", 1250000),
        (15000, 15000),
    ])
    def test_parse_price(self, raw, expected):
        assert parse_price(raw) == expected

    def test_format_price(self):
        assert format_price(30000) == "30,000원"
        assert format_price(0) == "0원"


class TestSalesCount:

    def test_networking_uses_participants(self):
        assert sales_count(_item(category_type="networking", current_participants=4, purchase_count=9)) == 4

    def test_crew_uses_purchases(self):
        assert sales_count(_item(category_type="crew", current_participants=4, purchase_count=9)) == 9

    def test_lecture_falls_back_to_purchases(self):
        assert sales_count(_item(category_type="lecture", current_participants=0, purchase_count=7)) == 7
        assert sales_count(_item(category_type="lecture", current_participants=2, purchase_count=7)) == 2

    def test_missing_counters_are_zero(self):
        assert sales_count(_item(category_type="minddate", current_participants=None, purchase_count=None)) == 0


class TestFeeMath:

    def test_fee_is_floored(self):
        # 33,333 * 15% = 4999.95
        assert calculate_fee(33333, 15) == 4999

    def test_line(self):
        line = settlement_line(_item(price="30,000원", current_participants=10), 15)
        assert line.revenue == 300000
        assert line.fee == 45000
        assert line.payout == 255000
        assert line.is_settlement_due

    def test_zero_rate(self):
        line = settlement_line(_item(price="10,000원", current_participants=3), 0)
        assert line.fee == 0
        assert line.payout == 30000


class TestSummary:

    def test_host_owes_fee_on_ended_item(self):
        summary = summarize([_item(price="20,000원", current_participants=5)], 10)
        assert summary.total_sales == 100000
        assert summary.total_fees == 10000
        assert summary.net_profit == 90000
        assert summary.fees_to_pay == 10000
        assert summary.payout_to_receive == 0
        assert summary.blocked_by_fee is True

    def test_minddate_is_payout_not_fee(self):
        summary = summarize([_item(category_type="minddate", price="50,000원", current_participants=4)], 15)
        assert summary.fees_to_pay == 0
        assert summary.payout_to_receive == 170000
        assert summary.blocked_by_fee is False

    def test_open_and_completed_items_not_due(self):
        items = [
            _item(1, current_participants=5, status="open"),
            _item(2, current_participants=5, settlement_status="completed"),
        ]
        summary = summarize(items, 15)
        assert summary.total_sales == 300000
        assert summary.fees_to_pay == 0
        assert summary.blocked_by_fee is False

    def test_ended_item_without_sales_does_not_block(self):
        summary = summarize([_item(current_participants=0)], 15)
        assert summary.blocked_by_fee is False

    def test_to_dict_includes_lines(self):
        data = summarize([_item(current_participants=1)], 15).to_dict()
        assert data["lines"][0]["item_id"] == 1
        assert data["commission_rate"] == 15


# ---------------------------------------------------------------------------
# Database-backed flows
# ---------------------------------------------------------------------------

class TestSettlementService:

    async def test_commission_rate_default_and_update(self, db):
        assert await get_commission_rate() == 15
        assert await set_commission_rate(20) == 20
        assert await get_commission_rate() == 20

    async def test_partner_summary_uses_current_rate(self, make_user, make_item):
        host, _ = await make_user("호스트", roles=["lecture_manager"])
        await make_item("lecture", price="10,000원", current_participants=10, status="ended", author_id=host["id"])
        await set_commission_rate(10)

        summary = await settlement_service.get_partner_summary(host["id"])
        assert summary.commission_rate == 10
        assert summary.fees_to_pay == 10000

    async def test_blocked_partner_cannot_create(self, make_user, make_item):
        host, _ = await make_user("호스트", roles=["lecture_manager"])
        await make_item("lecture", price="10,000원", current_participants=2, status="ended", author_id=host["id"])

        with pytest.raises(SettlementBlockedError):
            await settlement_service.ensure_can_create_content(host["id"])

    async def test_completed_settlement_unblocks(self, make_user, make_item):
        host, _ = await make_user("호스트", roles=["lecture_manager"])
        item_id = await make_item("lecture", price="10,000원", current_participants=2,
                                  status="ended", author_id=host["id"])

        result = await settlement_service.complete_settlement(item_id)
        assert result["settlement_status"] == "completed"
        await settlement_service.ensure_can_create_content(host["id"])

    async def test_admin_overview_skips_unsold(self, make_item):
        await make_item("networking", price="10,000원", current_participants=3)
        await make_item("networking", price="10,000원", current_participants=0)

        overview = await settlement_service.get_admin_overview()
        assert len(overview["lines"]) == 1
        assert overview["total_revenue"] == 30000
        assert overview["total_fees"] == 4500
        assert overview["total_payout"] == 25500


class TestSettlementApi:

    async def test_fee_block_on_create(self, client, make_user, make_item):
        host, headers = await make_user("호스트", roles=["lecture_manager"])
        await make_item("lecture", price="10,000원", current_participants=2, status="ended", author_id=host["id"])

        res = await client.post("/api/items", json={"categoryType": "lecture", "title": "새 강의"}, headers=headers)
        assert res.status_code == 403
        assert res.json()["detail"] == "미납된 수수료가 있습니다. 정산 후 콘텐츠 개설이 가능합니다."

    async def test_admin_completes_then_partner_creates(self, client, make_user, make_item):
        host, headers = await make_user("호스트", roles=["lecture_manager"])
        _, admin_headers = await make_user("관리자", roles=["super_admin"])
        item_id = await make_item("lecture", price="10,000원", current_participants=2,
                                  status="ended", author_id=host["id"])

        res = await client.get("/api/users/me/settlement", headers=headers)
        assert res.json()["settlement"]["blocked_by_fee"] is True

        res = await client.post(f"/api/admin/items/{item_id}/settle", headers=admin_headers)
        assert res.status_code == 200

        res = await client.post("/api/items", json={"categoryType": "lecture", "title": "새 강의",
                                                     "rawPrice": 45000}, headers=headers)
        assert res.status_code == 200
        assert res.json()["item"]["price"] == "45,000원"

    async def test_commission_endpoint_validates_range(self, client, make_user):
        _, admin_headers = await make_user("관리자", roles=["super_admin"])

        res = await client.put("/api/admin/commission", json={"rate": 120}, headers=admin_headers)
        assert res.status_code == 422

        res = await client.put("/api/admin/commission", json={"rate": 12}, headers=admin_headers)
        assert res.json()["rate"] == 12

    async def test_settlement_requires_partner(self, client, make_user):
        _, headers = await make_user("일반회원")
        res = await client.get("/api/users/me/settlement", headers=headers)
        assert res.status_code == 403

    async def test_super_admin_never_blocked(self, client, make_user, make_item):
        admin, admin_headers = await make_user("관리자", roles=["super_admin"])
        await make_item("lecture", price="10,000원", current_participants=2, status="ended", author_id=admin["id"])

        res = await client.post("/api/items", json={"categoryType": "lecture", "title": "관리자 강의"},
                                headers=admin_headers)
        assert res.status_code == 200


class TestSettlementTamper:

    async def test_partner_cannot_reopen_unsettled_item(self, client, make_user, make_item):
        host, headers = await make_user("리더", roles=["crew_manager"])
        item_id = await make_item("crew", crew_type="report", price="10,000원", purchase_count=10,
                                  status="ended", author_id=host["id"])

        res = await client.put(f"/api/items/{item_id}", json={"status": "open"}, headers=headers)
        assert res.status_code == 403

        res = await client.post("/api/items", json={"categoryType": "crew", "title": "새 크루"}, headers=headers)
        assert res.status_code == 403

    async def test_partner_cannot_rewrite_sales(self, client, make_user, make_item, fetch_item):
        host, headers = await make_user("리더", roles=["crew_manager"])
        item_id = await make_item("crew", crew_type="report", price="10,000원", purchase_count=10,
                                  status="ended", author_id=host["id"])

        res = await client.put(f"/api/items/{item_id}", json={"purchaseCount": 0, "title": "수정"}, headers=headers)
        assert res.status_code == 200
        assert (await fetch_item(item_id)).purchase_count == 10

        res = await client.get("/api/users/me/settlement", headers=headers)
        settlement = res.json()["settlement"]
        assert settlement["blocked_by_fee"] is True
        assert settlement["fees_to_pay"] == 15000

    async def test_admin_can_correct_sales(self, client, make_user, make_item, fetch_item):
        host, _ = await make_user("호스트", roles=["networking_manager"])
        _, admin_headers = await make_user("관리자", roles=["super_admin"])
        item_id = await make_item("networking", current_participants=3, status="ended", author_id=host["id"])

        res = await client.put(f"/api/items/{item_id}", json={"currentParticipants": 2, "status": "open"},
                               headers=admin_headers)
        assert res.status_code == 200
        item = await fetch_item(item_id)
        assert item.current_participants == 2
        assert item.status == "open"
