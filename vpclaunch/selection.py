"""Candidate selection for image and availability zone.

Both selectors are pure functions over provider output so they can be
tested without touching a provider.
"""

from __future__ import annotations

import random
from collections.abc import Sequence

from vpclaunch.config import ZonePolicy
from vpclaunch.core.exceptions import SelectionError
from vpclaunch.types import ImageCandidate


def select_ami(candidates: Sequence[ImageCandidate]) -> str:
    """Pick the newest image that carries no marketplace product code.

    Candidates with product codes are paid or third-party images and never
    qualify. Equal creation times keep discovery order (``sorted`` is stable).

    Args:
        candidates: Images in discovery order.

    Returns:
        Image ID of the newest eligible candidate.

    Raises:
        SelectionError: If no candidate survives filtering.
    """
    eligible = [c for c in candidates if not c.has_marketplace_code]
    if not eligible:
        raise SelectionError(
            f"No eligible image among {len(candidates)} candidate(s): "
            "all were empty or carried marketplace product codes"
        )

    newest_first = sorted(eligible, key=lambda c: c.created_at, reverse=True)
    return newest_first[0].id


def select_zone(
    zones: Sequence[str],
    policy: ZonePolicy = "exclude-last",
    rng: random.Random | None = None,
) -> str:
    """Draw one availability zone uniformly at random.

    Under ``exclude-last`` the draw covers indices ``[0, len - 1)``, so the last
    zone the provider reported is never chosen and at least two zones are
    required. ``uniform`` draws over the whole list.

    Raises:
        SelectionError: If the list is too short for the policy.
    """
    rng = rng or random.Random()

    match policy:
        case "exclude-last":
            if len(zones) < 2:
                raise SelectionError(
                    f"Zone policy 'exclude-last' needs at least 2 zones, got {len(zones)}"
                )
            return zones[rng.randrange(len(zones) - 1)]
        case "uniform":
            if not zones:
                raise SelectionError("No availability zones to choose from")
            return zones[rng.randrange(len(zones))]
        case _:
            raise SelectionError(f"Unknown zone policy '{policy}'")
