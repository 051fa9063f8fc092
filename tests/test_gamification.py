"""Tests for XP totals and level thresholds."""

import pytest

from impoot.services import gamification_service, interaction_service
from impoot.services.application_service import ApplicationService
from impoot.services.gamification_service import calculate_xp, level_for_xp


class TestLevelMath:

    def test_xp_weights(self):
        assert calculate_xp(likes=3, applications=2, unlocks=1, reviews=1) == 30 + 100 + 50 + 30

    @pytest.mark.parametrize("xp,level,rank", [
        (0, 1, "임린이"),
        (299, 1, "임린이"),
        (300, 2, "임대장"),
        (999, 2, "임대장"),
        (1000, 3, "부동산 고수"),
        (5000, 3, "부동산 고수"),
    ])
    def test_thresholds(self, xp, level, rank):
        info = level_for_xp(xp)
        assert info.level == level
        assert info.rank_name == rank

    def test_progress_within_band(self):
        info = level_for_xp(650)
        assert info.min_xp == 300
        assert info.max_xp == 1000
        assert info.progress_percent == 50.0
        assert info.remaining_xp == 350
        assert info.next_rank_name == "부동산 고수"

    def test_progress_capped_at_top(self):
        info = level_for_xp(9999)
        assert info.progress_percent == 100.0
        assert info.remaining_xp == 0
        assert info.icon == "👑"


class TestUserLevel:

    async def test_activity_is_counted(self, make_user, make_item):
        member, _ = await make_user("참가자")
        first = await make_item("networking")
        second = await make_item("crew", crew_type="report")

        await interaction_service.toggle_like(member["id"], first)
        await interaction_service.toggle_like(member["id"], second)
        await ApplicationService.apply(member["id"], first)
        await interaction_service.unlock_report(member["id"], second)

        info = await gamification_service.get_user_level(member["id"])
        assert info.total_xp == 20 + 50 + 50
        assert info.breakdown == {"likes": 2, "applications": 1, "unlocks": 1, "reviews": 0}

    async def test_level_endpoint(self, client, make_user):
        _, headers = await make_user("참가자")
        res = await client.get("/api/users/me/level", headers=headers)
        assert res.status_code == 200
        assert res.json()["level"]["rank_name"] == "임린이"
