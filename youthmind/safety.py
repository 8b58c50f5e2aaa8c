"""
Crisis keyword gate.

A blunt substring blocklist checked before any user-authored free text is sent
to the generative model. A match replaces the normal flow with a static safety
resource dialog.
"""

import logging

from .models import CrisisResources, Helpline

logger = logging.getLogger(__name__)

CRISIS_KEYWORDS: tuple[str, ...] = (
    "suicidal",
    "self-harm",
    "can't go on",
    "end my life",
    "kill myself",
)

CRISIS_RESOURCES = CrisisResources(
    title="It's okay to ask for help",
    message=(
        "It sounds like you're going through a lot right now. Please know that "
        "support is available and you don't have to go through this alone."
    ),
    helplines=[
        Helpline(name="India Helpline", number="9152987821"),
        Helpline(name="KIRAN", number="1800-599-0019"),
    ],
    emergency_note=(
        "If you are in immediate danger, please call your local emergency services."
    ),
)


def is_crisis(text: str) -> bool:
    """Return True if the text contains any crisis keyword (case-insensitive)."""
    lowered = text.lower()
    matched = any(keyword in lowered for keyword in CRISIS_KEYWORDS)
    if matched:
        # Never log the text itself.
        logger.info("Crisis keyword matched; suppressing AI call")
    return matched
