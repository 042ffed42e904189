from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict

from learning.modes.base import ModeAdapter, Navigation
from learning.payloads import Mode, Panel
from learning.rewards import COMIC_POINTS
from learning.state import Outcome, Reward

if TYPE_CHECKING:
    from learning.engine import SessionEngine

FALLBACK_GLYPH = "\U0001F3AD"  # performing arts mask

CHARACTER_GLYPHS: Dict[str, Dict[str, str]] = {
    "professor": {
        "happy": "\U0001F9D1\u200d\U0001F3EB",
        "thinking": "\U0001F914",
        "excited": "\U0001F929",
        "explaining": "\U0001F468\u200d\U0001F52C",
    },
    "student": {
        "confused": "\U0001F615",
        "curious": "\U0001F9D0",
        "understanding": "\U0001F60A",
        "amazed": "\U0001F62E",
    },
    "narrator": {
        "default": "\U0001F4D6",
        "important": "\u26a1",
        "conclusion": "\U0001F3AF",
    },
}


def emotion_glyph(character: str, emotion: str) -> str:
    """
    Glyph for a raw (character, emotion) pair. Validated panels always carry a known
    character; unknown ones fall back to the narrator table for callers passing raw strings.
    Unknown emotions use the table default or the mask.
    """
    table = CHARACTER_GLYPHS.get((character or "").lower(), CHARACTER_GLYPHS["narrator"])
    return table.get((emotion or "").lower()) or table.get("default") or FALLBACK_GLYPH


class ComicAdapter(ModeAdapter):
    """Linear panel story with free navigation. Only advancing off the last panel finishes."""

    mode = Mode.COMIC
    activity_type = "comic_read"
    navigation = Navigation.FREE

    def can_advance_from_active(self, engine: "SessionEngine") -> bool:
        return True

    def on_leave(self, engine: "SessionEngine", index: int) -> None:
        engine.outcomes[index] = Outcome.READ

    def reward(self, engine: "SessionEngine") -> Reward:
        return Reward(
            points=COMIC_POINTS,
            score=engine.count(Outcome.READ),
            total=engine.total,
            metadata={"panels": engine.total},
        )

    def render(self, engine: "SessionEngine") -> Dict[str, Any]:
        panel: Panel = engine.current_item
        return {
            "title": panel.title,
            "content": panel.content,
            "character": panel.character,
            "emotion": panel.emotion,
            "glyph": emotion_glyph(panel.character, panel.emotion),
            "position": engine.current_index + 1,
            "dots": [i == engine.current_index for i in range(engine.total)],
            "can_go_back": engine.current_index > 0,
        }
