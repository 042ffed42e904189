"""
Pytest configuration and shared fixtures for the test suite.
Ensures proper Python path and provides common fixtures for unit and integration tests.
"""
import os
import random
import sys
import tempfile
from pathlib import Path

import pytest

# Add project root and src to Python path for imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))
src_path = project_root / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

# Settings are read at import time: keep tests off the real database and log directory.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "quickstudy-test-logs"))
os.environ.setdefault("CONTENT_BACKEND", "http")
os.environ.setdefault("CONTENT_SERVICE_URL", "http://content.test/generate")


class FakeClock:
    """Monotonic clock the tests move by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def rng():
    return random.Random(7)


# ----- Raw content service payloads, one per mode -----


@pytest.fixture
def quiz_raw():
    return {
        "questions": [
            {
                "question": f"Question {i}?",
                "options": ["A", "B", "C", "D"],
                "correctIndex": i % 4,
                "explanation": f"Because {i}.",
            }
            for i in range(5)
        ]
    }


@pytest.fixture
def flashcards_raw():
    return {"cards": [{"front": f"Term {i}", "back": f"Definition {i}"} for i in range(4)]}


@pytest.fixture
def comic_raw():
    return {
        "panels": [
            {"title": "Intro", "content": "Welcome to class.", "character": "professor", "emotion": "happy"},
            {"title": "Question", "content": "But why?", "character": "student", "emotion": "confused"},
            {"title": "Answer", "content": "Here is why.", "character": "narrator", "emotion": "explaining"},
        ]
    }


@pytest.fixture
def brief_raw():
    return {
        "title": "Photosynthesis",
        "summary": "How plants turn light into sugar.",
        "keyPoints": [
            "Light is captured by chlorophyll. It sits in the chloroplasts.",
            "Water is split. Oxygen is released.",
            "Sugar is built in the Calvin cycle. It uses CO2.",
        ],
        "funFact": "Plants produce most of the oxygen we breathe.",
        "difficulty": "beginner",
    }


@pytest.fixture
def games_raw():
    return {
        "games": [
            {"type": "fill_blank", "question": "The ____ is the powerhouse of the cell.", "answer": "Mitochondria", "hint": "Starts with M"},
            {"type": "true_false", "question": "Plants need light.", "answer": "true"},
            {"type": "word_scramble", "question": "Unscramble this organelle", "answer": "nucleus"},
            {"type": "speed_match", "question": "Which makes proteins?", "answer": "ribosome", "options": ["ribosome", "nucleus", "vacuole", "lysosome"]},
        ]
    }


@pytest.fixture
def raw_by_mode(quiz_raw, flashcards_raw, comic_raw, brief_raw, games_raw):
    from learning.payloads import Mode
    return {
        Mode.QUIZ: quiz_raw,
        Mode.FLASHCARDS: flashcards_raw,
        Mode.COMIC: comic_raw,
        Mode.BRIEF: brief_raw,
        Mode.GAME: games_raw,
    }
