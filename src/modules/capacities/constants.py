"""Capacity tier choices and their sort rank."""

from django.db import models


class CapacityTier(models.TextChoices):
    TEN_G = "TEN_G", "10G"
    HUNDRED_G = "HUNDRED_G", "100G"
    FOUR_HUNDRED_G = "FOUR_HUNDRED_G", "400G"


# Tiers sort by bandwidth, not alphabetically.
TIER_RANK: dict[str, int] = {
    CapacityTier.TEN_G: 0,
    CapacityTier.HUNDRED_G: 1,
    CapacityTier.FOUR_HUNDRED_G: 2,
}
