"""Recovery level table and lookups.

A level unlocks once the streak reaches its `required_days`. The table must
stay sorted by `required_days`, starting at 0 so every streak has a level.
"""

from __future__ import annotations

LEVELS: list[dict] = [
    {
        "id": 1,
        "name": "Awakening",
        "required_days": 0,
        "description": "The moment you choose to take control of your life.",
        "color": "#FF6B6B",
    },
    {
        "id": 2,
        "name": "Resolve",
        "required_days": 3,
        "description": "Your determination grows stronger each day.",
        "color": "#00B4D8",
    },
    {
        "id": 3,
        "name": "Willpower",
        "required_days": 7,
        "description": "Your inner strength begins to shine.",
        "color": "#4ECB71",
    },
    {
        "id": 4,
        "name": "No Gooner Spotted",
        "required_days": 10,
        "description": "Breaking free from old patterns.",
        "color": "#FF9500",
    },
    {
        "id": 5,
        "name": "Iron Will",
        "required_days": 14,
        "description": "Your resolve becomes unshakeable.",
        "color": "#9747FF",
    },
    {
        "id": 6,
        "name": "Break The Loop",
        "required_days": 21,
        "description": "Master of your thoughts and actions.",
        "color": "#FF1493",
    },
    {
        "id": 7,
        "name": "Soul Guardian",
        "required_days": 30,
        "description": "Protector of your inner peace and values.",
        "color": "#4ECB71",
    },
    {
        "id": 8,
        "name": "Rewired",
        "required_days": 45,
        "description": "Your brain has formed new, healthier pathways.",
        "color": "#C0C0C0",
    },
    {
        "id": 9,
        "name": "Direction",
        "required_days": 60,
        "description": "Fierce and unstoppable in your journey.",
        "color": "#FFD700",
    },
    {
        "id": 10,
        "name": "It's Going Places",
        "required_days": 72,
        "description": "Your transformation inspires greatness.",
        "color": "#FF9500",
    },
    {
        "id": 11,
        "name": "The 1%",
        "required_days": 90,
        "description": "You've joined the elite few who dare to change.",
        "color": "#00B4D8",
    },
]

# Thresholds for the "next milestone" countdown; past the last one the target stays at 180.
MILESTONES: tuple[int, ...] = (7, 14, 30, 90)
FINAL_MILESTONE = 180


def get_current_level(days: int) -> dict:
    """Last level whose threshold has been reached. Negative days map to level 1."""
    current = LEVELS[0]
    for level in LEVELS:
        if days >= level["required_days"]:
            current = level
    return current


def get_next_level(days: int) -> dict | None:
    """First level not yet reached, or None at the top level."""
    for level in LEVELS:
        if days < level["required_days"]:
            return level
    return None


def get_level_progress(days: int) -> float:
    """Fraction of the way from the current level to the next one (1.0 at max level)."""
    current = get_current_level(days)
    next_level = get_next_level(days)
    if next_level is None:
        return 1.0

    days_into_level = max(0, days - current["required_days"])
    days_for_level = next_level["required_days"] - current["required_days"]
    return min(days_into_level / days_for_level, 1.0)


def next_milestone(days: int) -> int:
    """Next milestone day count the user is working towards."""
    for milestone in MILESTONES:
        if days < milestone:
            return milestone
    return FINAL_MILESTONE
