import random
from typing import List, Optional

INTERVIEW_COVERS: List[str] = [
    "/adobe.png",
    "/amazon.png",
    "/facebook.png",
    "/hostinger.png",
    "/pinterest.png",
    "/quora.png",
    "/reddit.png",
    "/skype.png",
    "/spotify.png",
    "/telegram.png",
    "/tiktok.png",
    "/yahoo.png",
]


def get_random_interview_cover(rng: Optional[random.Random] = None) -> str:
    """Pick a cover image path for an interview card."""
    chooser = rng or random
    return f"/covers{chooser.choice(INTERVIEW_COVERS)}"


def split_techstack(techstack: str) -> List[str]:
    """
    Split a comma-separated tech stack into its items.

    Order is preserved and each item is whitespace-trimmed; nothing is dropped,
    so "React,,Go" yields an empty middle entry.
    """
    return [item.strip() for item in techstack.split(",")]
