"""
Mode adapters and their registry.

Example:
    from learning.modes import get_adapter
    adapter = get_adapter(Mode.QUIZ)
"""

from __future__ import annotations

from typing import Callable, Dict

from learning.modes.base import ModeAdapter, Navigation
from learning.modes.brief import BriefAdapter
from learning.modes.comic import ComicAdapter
from learning.modes.flashcards import FlashcardsAdapter
from learning.modes.game import GameAdapter
from learning.modes.quiz import QuizAdapter
from learning.payloads import Mode


class ModeRegistry:
    def __init__(self):
        self._factories: Dict[Mode, Callable[[], ModeAdapter]] = {}

    def register(self, mode: Mode, factory: Callable[[], ModeAdapter]) -> None:
        if mode in self._factories:
            raise ValueError(f"Mode {mode.value} already registered")
        self._factories[mode] = factory

    def get(self, mode: Mode) -> ModeAdapter:
        if mode not in self._factories:
            raise ValueError(f"Mode {mode.value} not registered")
        return self._factories[mode]()

    def list_modes(self) -> list[Mode]:
        return list(self._factories.keys())


def build_registry() -> ModeRegistry:
    registry = ModeRegistry()
    registry.register(Mode.QUIZ, QuizAdapter)
    registry.register(Mode.FLASHCARDS, FlashcardsAdapter)
    registry.register(Mode.COMIC, ComicAdapter)
    registry.register(Mode.BRIEF, BriefAdapter)
    registry.register(Mode.GAME, GameAdapter)
    return registry


_registry = build_registry()


def get_adapter(mode: Mode) -> ModeAdapter:
    return _registry.get(mode)


__all__ = [
    "ModeAdapter",
    "Navigation",
    "ModeRegistry",
    "QuizAdapter",
    "FlashcardsAdapter",
    "ComicAdapter",
    "BriefAdapter",
    "GameAdapter",
    "build_registry",
    "get_adapter",
]
