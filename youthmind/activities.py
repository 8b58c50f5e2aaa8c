"""
Registry of mood activities (mini-games) the game suggestion can point at.

Each activity is an independent, swappable module on the client; this
registry only describes them.
"""

from dataclasses import dataclass

from .schemas import GameId


@dataclass(frozen=True)
class Activity:
    game_id: GameId
    title: str
    description: str
    moods: tuple[str, ...]


ACTIVITIES: dict[str, Activity] = {
    activity.game_id: activity
    for activity in (
        Activity("breathing", "Guided Breathing", "A guided breathing exercise.", ("anxious", "stressed")),
        Activity("gratitude", "Gratitude Wall", "Write down things you are grateful for.", ("sad", "low")),
        Activity("shooter", "Target Practice", "A fast-paced target shooting game.", ("angry", "stressed")),
        Activity("balloon", "Balloon Pop", "A gentle balloon popping game.", ("sad", "bored")),
        Activity("reaction", "Reaction Test", "A simple reaction time test.", ("tired", "unfocused")),
        Activity("memory", "Memory Match", "A classic card matching game.", ("happy", "calm", "neutral")),
    )
}


def activity_for(game_id: str) -> Activity | None:
    return ACTIVITIES.get(game_id)


def activities_for_mood(mood: str) -> list[Activity]:
    """Activities listed as helpful for ``mood``, in registry order."""
    mood = mood.lower()
    return [activity for activity in ACTIVITIES.values() if mood in activity.moods]
