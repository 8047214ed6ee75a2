"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class Category(StrEnum):
    """Entity collections of the catalog, in merge and serialization order."""

    WEAPONS = "weapons"
    GADGETS = "gadgets"
    SPECIALIZATIONS = "specializations"


class PlayerClass(StrEnum):
    LIGHT = "Light"
    MEDIUM = "Medium"
    HEAVY = "Heavy"
    ALL = "All"

    @classmethod
    def parse(cls, value: str) -> PlayerClass:
        """Return the class named by ``value`` (case-insensitive)."""

        wanted = value.strip().casefold()
        for member in cls:
            if member.value.casefold() == wanted:
                return member
        raise ValueError(f"unknown player class: {value!r}")
