"""
Completion bookkeeping: activity record, profile points and streak, content row.

All three writes share one transaction, and the profile is read inside it, so points
and streak always derive from the same snapshot. Runs after the response as a
background job; failures are logged and never reach the learner.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable
from uuid import uuid4

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from learning.context import LearnerContext
from learning.errors import PersistenceFailure
from learning.rewards import apply_completion
from learning.state import Completion
from quickstudy.models.models import LearningActivity, User as DbUser
from quickstudy.services.content_store import mark_completed

logger = logging.getLogger("quickstudy.activity")


class ActivityRecorder:
    def __init__(self, session_factory: sessionmaker, today: Callable[[], date] = date.today):
        self.session_factory = session_factory
        self.today = today

    def record(self, context: LearnerContext, completion: Completion) -> str:
        """Persist one completion. Returns the new activity id or raises PersistenceFailure."""
        activity_id = str(uuid4())
        db = self.session_factory()
        try:
            user = (
                db.query(DbUser)
                .filter(DbUser.id == context.user_id)
                .with_for_update()
                .first()
            )
            if user is None:
                raise PersistenceFailure(f"user {context.user_id} not found")

            activity = LearningActivity(
                id=activity_id,
                user_id=context.user_id,
                activity_type=completion.activity_type,
                points_earned=completion.points,
                topic_name=completion.topic,
                activity_metadata=dict(completion.metadata),
            )
            db.add(activity)

            update = apply_completion(
                total_points=user.total_points,
                current_streak=user.current_streak,
                longest_streak=user.longest_streak,
                last_activity_date=user.last_activity_date,
                points=completion.points,
                today=self.today(),
            )
            user.total_points = update.total_points
            user.current_streak = update.current_streak
            user.longest_streak = update.longest_streak
            user.last_activity_date = update.last_activity_date
            user.updated_at = datetime.utcnow()

            if completion.content_id and not mark_completed(db, completion, datetime.utcnow()):
                logger.warning("content row missing content_id=%s mode=%s", completion.content_id, completion.mode)

            streak = update.current_streak
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            raise PersistenceFailure(str(e)) from e
        except PersistenceFailure:
            db.rollback()
            raise
        finally:
            db.close()

        logger.info(
            "activity recorded user=%s type=%s points=%s streak=%s",
            context.user_id, completion.activity_type, completion.points, streak,
        )
        return activity_id


def record_completion(recorder: ActivityRecorder, context: LearnerContext, completion: Completion) -> None:
    """Background entry point: the learner has already seen the results screen."""
    try:
        recorder.record(context, completion)
    except PersistenceFailure:
        logger.exception(
            "activity recording failed user=%s session=%s type=%s",
            context.user_id, completion.session_id, completion.activity_type,
        )
