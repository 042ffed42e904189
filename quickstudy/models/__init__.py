"""
Database entities. Single import surface for the ORM models.

- User (with profile aggregate columns), LearningActivity
- Mode content stores: Quiz, FlashcardDeck, ComicStory, Brief, GameSet
"""

from quickstudy.models.models import (
    User,
    LearningActivity,
    Quiz,
    FlashcardDeck,
    ComicStory,
    Brief,
    GameSet,
)

__all__ = [
    "User",
    "LearningActivity",
    "Quiz",
    "FlashcardDeck",
    "ComicStory",
    "Brief",
    "GameSet",
]
