from quickstudy.config import Base
from sqlalchemy import Column, Integer, String, JSON, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    display_name = Column(String, nullable=True)

    # Profile aggregate: mutated once per completed session (points + day streak).
    total_points = Column(Integer, default=0, nullable=False)
    current_streak = Column(Integer, default=0, nullable=False)
    longest_streak = Column(Integer, default=0, nullable=False)
    last_activity_date = Column(Date, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    activities = relationship("LearningActivity", backref="user", cascade="all, delete-orphan")


class LearningActivity(Base):
    """Append-only record of a completed session."""
    __tablename__ = "learning_activities"
    id = Column(String, primary_key=True, index=True)  # uuid
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    activity_type = Column(String, nullable=False)  # quiz_completed|flashcards_reviewed|comic_read|brief_completed|game_completed
    points_earned = Column(Integer, default=0, nullable=False)
    topic_name = Column(String, nullable=False)
    activity_metadata = Column("metadata", JSON, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)


# ----- Mode-specific content stores: one row per generated session -----


class Quiz(Base):
    __tablename__ = "quizzes"
    id = Column(String, primary_key=True, index=True)  # uuid
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    topic_name = Column(String, nullable=False)
    questions = Column(JSON, nullable=False)
    total_questions = Column(Integer, nullable=False)
    score = Column(Integer, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)


class FlashcardDeck(Base):
    __tablename__ = "flashcard_decks"
    id = Column(String, primary_key=True, index=True)  # uuid
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    topic_name = Column(String, nullable=False)
    cards = Column(JSON, nullable=False)
    times_reviewed = Column(Integer, default=0, nullable=False)
    last_reviewed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)


class ComicStory(Base):
    __tablename__ = "comic_stories"
    id = Column(String, primary_key=True, index=True)  # uuid
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    topic_name = Column(String, nullable=False)
    panels = Column(JSON, nullable=False)
    read_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)


class Brief(Base):
    __tablename__ = "briefs"
    id = Column(String, primary_key=True, index=True)  # uuid
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    topic_name = Column(String, nullable=False)
    content = Column(JSON, nullable=False)
    difficulty = Column(String, nullable=False)  # beginner|intermediate|advanced
    completed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)


class GameSet(Base):
    __tablename__ = "game_sets"
    id = Column(String, primary_key=True, index=True)  # uuid
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    topic_name = Column(String, nullable=False)
    challenges = Column(JSON, nullable=False)
    score = Column(Integer, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
