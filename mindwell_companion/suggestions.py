"""
Coping suggestions keyed by mood band.
"""

SUGGESTION_COUNT = 3

LOW_MOOD_SUGGESTIONS = (
    "Try a 5-minute breathing exercise",
    "Write in your thought journal",
    "Take a short walk outside",
    "Listen to calming music",
    "Practice gratitude - list 3 things you're thankful for",
)

NEUTRAL_MOOD_SUGGESTIONS = (
    "Try a mindfulness meditation",
    "Do some light stretching",
    "Connect with a friend",
    "Practice progressive muscle relaxation",
    "Set a small achievable goal for today",
)

HIGH_MOOD_SUGGESTIONS = (
    "Share your positive energy with others",
    "Try a new creative activity",
    "Plan something fun for later",
    "Document this good moment in your journal",
    "Use this energy for physical activity",
)


def select_suggestions(rating: int) -> list[str]:
    """Return the first three suggestions of the catalog matching the rating."""
    if rating <= 2:
        catalog = LOW_MOOD_SUGGESTIONS
    elif rating >= 4:
        catalog = HIGH_MOOD_SUGGESTIONS
    else:
        catalog = NEUTRAL_MOOD_SUGGESTIONS

    return list(catalog[:SUGGESTION_COUNT])
