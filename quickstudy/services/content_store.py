"""
Mode-specific content stores: one row per generated session.

Rows are written when content arrives and marked when the session completes.
The recent-activity feed merges the newest rows across every store.
"""

import logging
from datetime import datetime
from typing import Callable, Dict, List, Type

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from learning.context import LearnerContext
from learning.payloads import BriefContent, ComicContent, ContentPayload, FlashcardsContent, GameContent, Mode, QuizContent
from learning.state import Completion
from quickstudy.models.models import Brief, ComicStory, FlashcardDeck, GameSet, Quiz
from quickstudy.schemas.profile_schemas import ContentRecordView

logger = logging.getLogger("quickstudy.content")

RECENT_LIMIT = 5

STORE_MODELS: Dict[Mode, Type] = {
    Mode.QUIZ: Quiz,
    Mode.FLASHCARDS: FlashcardDeck,
    Mode.COMIC: ComicStory,
    Mode.BRIEF: Brief,
    Mode.GAME: GameSet,
}


def _dump(items: list) -> list:
    return [item.model_dump(by_alias=True, exclude_none=True) for item in items]


def _quiz_row(payload: QuizContent) -> dict:
    return {"questions": _dump(payload.questions), "total_questions": len(payload.questions)}


def _flashcards_row(payload: FlashcardsContent) -> dict:
    return {"cards": _dump(payload.cards)}


def _comic_row(payload: ComicContent) -> dict:
    return {"panels": _dump(payload.panels)}


def _brief_row(payload: BriefContent) -> dict:
    return {"content": payload.model_dump(by_alias=True), "difficulty": payload.difficulty}


def _game_row(payload: GameContent) -> dict:
    return {"challenges": _dump(payload.games)}


_ROW_BUILDERS: Dict[Mode, Callable[..., dict]] = {
    Mode.QUIZ: _quiz_row,
    Mode.FLASHCARDS: _flashcards_row,
    Mode.COMIC: _comic_row,
    Mode.BRIEF: _brief_row,
    Mode.GAME: _game_row,
}


def save_content(db: Session, context: LearnerContext, content_id: str, topic: str, payload: ContentPayload) -> None:
    model = STORE_MODELS[payload.mode]
    row = model(
        id=content_id,
        user_id=context.user_id,
        topic_name=topic,
        **_ROW_BUILDERS[payload.mode](payload),
    )
    db.add(row)


def mark_completed(db: Session, completion: Completion, now: datetime) -> bool:
    """Update the content row behind a completed session. False when the row is missing."""
    if not completion.content_id:
        return False
    model = STORE_MODELS[Mode(completion.mode)]
    row = db.query(model).filter(model.id == completion.content_id).first()
    if row is None:
        return False
    if isinstance(row, (Quiz, GameSet)):
        row.score = completion.score
        row.completed_at = now
    elif isinstance(row, FlashcardDeck):
        row.times_reviewed = (row.times_reviewed or 0) + 1
        row.last_reviewed_at = now
    elif isinstance(row, ComicStory):
        row.read_at = now
    elif isinstance(row, Brief):
        row.completed_at = now
    return True


def _view(mode: Mode, row) -> ContentRecordView:
    if mode is Mode.QUIZ:
        completed, score, total = row.completed_at is not None, row.score, row.total_questions
    elif mode is Mode.FLASHCARDS:
        completed, score, total = (row.times_reviewed or 0) > 0, None, len(row.cards or [])
    elif mode is Mode.COMIC:
        completed, score, total = row.read_at is not None, None, len(row.panels or [])
    elif mode is Mode.BRIEF:
        completed, score, total = row.completed_at is not None, None, len((row.content or {}).get("keyPoints", []))
    else:
        completed, score, total = row.completed_at is not None, row.score, len(row.challenges or [])
    return ContentRecordView(
        id=row.id,
        mode=mode.value,
        topic_name=row.topic_name,
        created_at=row.created_at,
        completed=completed,
        score=score,
        total=total,
    )


def recent_content(db: Session, user_id: int, limit: int = RECENT_LIMIT) -> List[ContentRecordView]:
    """Newest `limit` rows per store, merged and re-sorted by creation time."""
    merged: List[ContentRecordView] = []
    for mode, model in STORE_MODELS.items():
        rows = (
            db.query(model)
            .filter(model.user_id == user_id)
            .order_by(model.created_at.desc())
            .limit(limit)
            .all()
        )
        merged.extend(_view(mode, row) for row in rows)
    merged.sort(key=lambda r: r.created_at, reverse=True)
    return merged[:limit]


def store_generated_content(
    session_factory: sessionmaker,
    context: LearnerContext,
    content_id: str,
    topic: str,
    payload: ContentPayload,
) -> None:
    """Keep a copy of generated content. Failures are logged only."""
    db = session_factory()
    try:
        save_content(db, context, content_id, topic, payload)
        db.commit()
        logger.info("content stored user=%s mode=%s content_id=%s", context.user_id, payload.mode.value, content_id)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("content store failed user=%s mode=%s content_id=%s", context.user_id, payload.mode.value, content_id)
    finally:
        db.close()
