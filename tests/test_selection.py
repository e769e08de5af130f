from __future__ import annotations

import random
from datetime import UTC, datetime

import pytest

from vpclaunch.core.exceptions import SelectionError
from vpclaunch.selection import select_ami, select_zone
from vpclaunch.types import ImageCandidate

pytestmark = [pytest.mark.unit, pytest.mark.xdist_group("unit")]


def image(image_id: str, day: str, *codes: str) -> ImageCandidate:
    return ImageCandidate(
        id=image_id,
        created_at=datetime.fromisoformat(day).replace(tzinfo=UTC),
        product_codes=codes,
    )


class TestSelectAmi:
    def test_newest_non_marketplace_wins(self):
        candidates = [
            image("i1", "2023-01-01"),
            image("i2", "2023-06-01"),
            image("i3", "2023-12-01", "marketplace"),
        ]
        assert select_ami(candidates) == "i2"

    def test_never_returns_marketplace_image(self):
        candidates = [
            image("paid-new", "2024-05-01", "code-1"),
            image("free", "2020-01-01"),
            image("paid-old", "2019-01-01", "code-2", "code-3"),
        ]
        assert select_ami(candidates) == "free"

    def test_result_is_newest_survivor(self):
        candidates = [image(f"ami-{i}", f"2023-0{i}-15") for i in (3, 9, 1, 7, 5)]
        assert select_ami(candidates) == "ami-9"

    def test_ties_keep_discovery_order(self):
        candidates = [
            image("first", "2023-06-01"),
            image("second", "2023-06-01"),
            image("older", "2023-01-01"),
        ]
        assert select_ami(candidates) == "first"

    def test_compares_instants_not_strings(self):
        early = ImageCandidate("early", datetime.fromisoformat("2023-06-01T10:00:00+02:00"))
        late = ImageCandidate("late", datetime.fromisoformat("2023-06-01T09:00:00+00:00"))
        assert select_ami([early, late]) == "late"

    def test_empty_input_raises(self):
        with pytest.raises(SelectionError, match="No eligible image among 0"):
            select_ami([])

    def test_all_marketplace_raises(self):
        candidates = [image("a", "2023-01-01", "x"), image("b", "2023-02-01", "y")]
        with pytest.raises(SelectionError, match="marketplace"):
            select_ami(candidates)


class TestSelectZone:
    def test_reference_policy_never_picks_last_zone(self):
        rng = random.Random(42)
        picks = {select_zone(["A", "B", "C"], rng=rng) for _ in range(200)}
        assert picks == {"A", "B"}

    def test_reference_policy_with_two_zones_always_picks_first(self):
        rng = random.Random(1)
        assert {select_zone(["A", "B"], rng=rng) for _ in range(20)} == {"A"}

    @pytest.mark.parametrize("zones", [[], ["A"]])
    def test_reference_policy_needs_two_zones(self, zones):
        with pytest.raises(SelectionError, match="at least 2 zones"):
            select_zone(zones)

    def test_uniform_policy_covers_every_zone(self):
        rng = random.Random(42)
        picks = {select_zone(["A", "B", "C"], "uniform", rng) for _ in range(200)}
        assert picks == {"A", "B", "C"}

    def test_uniform_policy_accepts_single_zone(self):
        assert select_zone(["A"], "uniform") == "A"

    def test_uniform_policy_rejects_empty_list(self):
        with pytest.raises(SelectionError, match="No availability zones"):
            select_zone([], "uniform")

    def test_unknown_policy_raises(self):
        with pytest.raises(SelectionError, match="Unknown zone policy"):
            select_zone(["A", "B"], "round-robin")  # type: ignore[arg-type]

    def test_same_seed_same_choice(self):
        zones = [f"zone-{i}" for i in range(6)]
        assert select_zone(zones, rng=random.Random(3)) == select_zone(zones, rng=random.Random(3))
