"""Unit tests for the five mode adapters driven through the engine."""
import copy

import pytest

from learning.modes import build_registry, get_adapter
from learning.modes.brief import headline
from learning.modes.comic import FALLBACK_GLYPH, emotion_glyph
from learning.modes.game import is_correct, scramble
from learning.payloads import Challenge, Mode
from learning.state import Outcome, SessionStatus


def _answer_all(engine, pick):
    for i in range(engine.total):
        engine.submit_answer(pick(i))
        engine.advance()


@pytest.mark.unit
class TestRegistry:
    def test_all_modes_registered(self):
        assert set(build_registry().list_modes()) == set(Mode)

    def test_duplicate_registration_rejected(self):
        registry = build_registry()
        with pytest.raises(ValueError):
            registry.register(Mode.QUIZ, lambda: None)

    def test_activity_types(self):
        assert get_adapter(Mode.QUIZ).activity_type == "quiz_completed"
        assert get_adapter(Mode.FLASHCARDS).activity_type == "flashcards_reviewed"
        assert get_adapter(Mode.COMIC).activity_type == "comic_read"
        assert get_adapter(Mode.BRIEF).activity_type == "brief_completed"
        assert get_adapter(Mode.GAME).activity_type == "game_completed"


@pytest.mark.unit
class TestQuiz:
    def test_all_correct_scores_fifteen(self, make_engine, quiz_raw):
        engine = make_engine(Mode.QUIZ)
        correct = [q["correctIndex"] for q in quiz_raw["questions"]]
        _answer_all(engine, lambda i: correct[i])
        completion = engine.completion
        assert completion.score == 5
        assert completion.points == 15

    def test_one_wrong_scores_ten(self, make_engine, quiz_raw):
        engine = make_engine(Mode.QUIZ)
        correct = [q["correctIndex"] for q in quiz_raw["questions"]]
        _answer_all(engine, lambda i: (correct[i] + 1) % 4 if i == 2 else correct[i])
        assert engine.completion.score == 4
        assert engine.completion.points == 10

    @pytest.mark.parametrize("picks", [[0, 1, 2, 3, 0], [0, 0, 0, 0, 0], [3, 2, 1, 0, 3], [0, 1, 2, 3, 1]])
    def test_score_bounded_and_perfect_iff_all_correct(self, make_engine, quiz_raw, picks):
        engine = make_engine(Mode.QUIZ)
        correct = [q["correctIndex"] for q in quiz_raw["questions"]]
        _answer_all(engine, lambda i: picks[i])
        score = engine.completion.score
        assert 0 <= score <= 5
        assert (score == 5) == (picks == correct)

    def test_revealed_markers(self, make_engine):
        engine = make_engine(Mode.QUIZ)
        engine.submit_answer(2)
        item = engine.snapshot()["item"]
        assert item["markers"] == ["correct", None, "incorrect", None]
        assert item["explanation"] == "Because 0."
        assert item["is_correct"] is False

    def test_bool_is_not_an_index(self, make_engine):
        from learning.errors import InvalidAnswer
        engine = make_engine(Mode.QUIZ)
        with pytest.raises(InvalidAnswer):
            engine.submit_answer(True)


@pytest.mark.unit
class TestFlashcards:
    @pytest.fixture
    def eight_cards(self):
        return {"cards": [{"front": f"F{i}", "back": f"B{i}"} for i in range(8)]}

    @pytest.mark.parametrize("known", [0, 3, 8])
    def test_reward_is_flat_five(self, make_engine, eight_cards, known):
        engine = make_engine(Mode.FLASHCARDS, raw=eight_cards)
        _answer_all(engine, lambda i: "known" if i < known else "learning")
        assert engine.completion.points == 5
        assert engine.completion.metadata["known"] == known
        assert engine.completion.metadata["learning"] == 8 - known

    def test_flip_is_a_display_toggle(self, make_engine):
        engine = make_engine(Mode.FLASHCARDS)
        assert engine.flip() is True
        assert engine.snapshot()["item"]["side"] == "back"
        assert engine.outcome(0) is Outcome.UNANSWERED
        assert engine.flip() is True
        assert engine.snapshot()["item"]["text"] == "Term 0"

    def test_self_report_without_flip(self, make_engine):
        engine = make_engine(Mode.FLASHCARDS)
        assert engine.submit_answer("known") is True
        assert engine.outcome(0) is Outcome.KNOWN

    def test_flip_resets_on_next_card(self, make_engine):
        engine = make_engine(Mode.FLASHCARDS)
        engine.flip()
        engine.submit_answer("learning")
        engine.advance()
        assert engine.flipped is False
        assert engine.snapshot()["item"]["side"] == "front"

    def test_advance_from_active_after_flip(self, make_engine):
        engine = make_engine(Mode.FLASHCARDS)
        assert engine.advance() is False
        engine.flip()
        assert engine.advance() is True
        assert engine.current_index == 1

    def test_unknown_report_rejected(self, make_engine):
        from learning.errors import InvalidAnswer
        engine = make_engine(Mode.FLASHCARDS)
        with pytest.raises(InvalidAnswer):
            engine.submit_answer("maybe")


@pytest.mark.unit
class TestComic:
    def test_full_traversal_scores_fifteen(self, make_engine):
        engine = make_engine(Mode.COMIC)
        while not engine.is_terminal:
            assert engine.advance() is True
        assert engine.completion.points == 15
        assert engine.completion.score == 3

    def test_back_and_dots(self, make_engine):
        engine = make_engine(Mode.COMIC)
        assert engine.back() is False
        engine.advance()
        item = engine.snapshot()["item"]
        assert item["position"] == 2
        assert item["dots"] == [False, True, False]
        assert item["can_go_back"] is True
        assert engine.back() is True
        assert engine.current_index == 0

    def test_jump_does_not_mark_read(self, make_engine):
        engine = make_engine(Mode.COMIC)
        assert engine.jump(2) is True
        assert engine.outcome(1) is Outcome.UNANSWERED
        assert not engine.is_terminal

    def test_only_advance_off_last_panel_finishes(self, make_engine):
        engine = make_engine(Mode.COMIC)
        engine.jump(2)
        assert engine.completion is None
        assert engine.advance() is True
        assert engine.is_terminal

    def test_glyph_fallbacks(self):
        assert emotion_glyph("narrator", "unknown") == emotion_glyph("narrator", "default")
        assert emotion_glyph("dragon", "important") == emotion_glyph("narrator", "important")
        assert emotion_glyph("student", "happy") == FALLBACK_GLYPH
        assert emotion_glyph("Professor", "THINKING") == "\U0001F914"


@pytest.mark.unit
class TestBrief:
    def test_reexpand_is_idempotent(self, make_engine):
        engine = make_engine(Mode.BRIEF)
        engine.expand(1)
        read = engine.snapshot()["item"]["read_count"]
        assert engine.expand(1) is False
        engine.collapse(1)
        engine.expand(1)
        assert engine.snapshot()["item"]["read_count"] == read == 1

    def test_collapse_keeps_read(self, make_engine):
        engine = make_engine(Mode.BRIEF)
        engine.expand(0)
        assert engine.collapse(0) is True
        assert engine.outcome(0) is Outcome.READ
        assert engine.collapse(0) is False

    def test_completion_gated_on_all_read(self, make_engine):
        engine = make_engine(Mode.BRIEF)
        engine.expand(0)
        engine.expand(2)
        assert engine.complete() is False
        assert engine.snapshot()["item"]["can_complete"] is False
        engine.expand(1)
        assert engine.complete() is True
        assert engine.completion.points == 8
        assert engine.completion.metadata["difficulty"] == "beginner"

    def test_advance_walks_read_points(self, make_engine):
        engine = make_engine(Mode.BRIEF)
        assert engine.advance() is False
        for i in range(engine.total):
            engine.expand(i)
            assert engine.advance() is True
        assert engine.is_terminal

    def test_render_headlines_and_extras(self, make_engine):
        engine = make_engine(Mode.BRIEF)
        item = engine.snapshot()["item"]
        assert item["title"] == "Photosynthesis"
        assert item["key_points"][0]["headline"] == "Light is captured by chlorophyll"
        assert item["key_points"][0]["text"] is None

    def test_headline(self):
        assert headline("One. Two.") == "One"
        assert headline("No period") == "No period"


@pytest.mark.unit
class TestGame:
    def test_item_points_with_time_and_streak(self, make_engine, clock):
        engine = make_engine(Mode.GAME)
        # Build a streak of 2 on the first two items.
        engine.submit_answer("mitochondria")
        engine.advance()
        engine.submit_answer("TRUE ")
        engine.advance()
        assert engine.streak == 2
        clock.advance(6.5)
        engine.submit_answer("nucleus")
        # 15 - 6 = 9 left: 10 + 9 // 3 + min(2, 5)
        assert engine.points_by_item[2] == 15

    def test_wrong_answer_resets_streak(self, make_engine):
        engine = make_engine(Mode.GAME)
        engine.submit_answer("mitochondria")
        engine.advance()
        engine.submit_answer("false")
        assert engine.streak == 0
        assert engine.points_by_item[1] == 0
        assert engine.snapshot()["item"]["message"] == "Not quite"

    def test_timeout_is_incorrect(self, make_engine, clock):
        engine = make_engine(Mode.GAME)
        clock.advance(15)
        assert engine.expire(0) is True
        assert engine.outcome(0) is Outcome.INCORRECT
        assert engine.answers[0] is None
        assert engine.status is SessionStatus.REVEALED

    def test_stale_timeout_ignored(self, make_engine):
        engine = make_engine(Mode.GAME)
        engine.submit_answer("mitochondria")
        engine.advance()
        assert engine.expire(0) is False
        assert engine.outcome(1) is Outcome.UNANSWERED

    def test_timeout_after_reveal_ignored(self, make_engine):
        engine = make_engine(Mode.GAME)
        engine.submit_answer("mitochondria")
        assert engine.expire(0) is False
        assert engine.outcome(0) is Outcome.CORRECT

    def test_late_submit_counts_as_timeout(self, make_engine, clock):
        engine = make_engine(Mode.GAME)
        clock.advance(20)
        engine.submit_answer("mitochondria")
        assert engine.outcome(0) is Outcome.INCORRECT

    def test_countdown_rearmed_per_item(self, make_engine, clock):
        engine = make_engine(Mode.GAME)
        clock.advance(10)
        assert engine.time_left == 5
        engine.submit_answer("x")
        engine.advance()
        assert engine.time_left == 15

    def test_multiple_choice_must_be_an_option(self):
        challenge = Challenge(type="speed_match", question="?", answer="ribosome", options=["Ribosome", "nucleus"])
        assert is_correct(challenge, " RIBOSOME ") is True
        assert is_correct(challenge, "vacuole") is False
        assert is_correct(challenge, None) is False

    def test_free_text_exact_match(self):
        challenge = Challenge(type="fill_blank", question="?", answer="Mitochondria")
        assert is_correct(challenge, "mitochondria") is True
        assert is_correct(challenge, "mitochondrion") is False

    def test_scramble_is_a_permutation(self, rng):
        assert sorted(scramble("nucleus", rng)) == sorted("nucleus")

    def test_render_hides_hint_after_reveal(self, make_engine):
        engine = make_engine(Mode.GAME)
        assert engine.snapshot()["item"]["hint"] == "Starts with M"
        engine.submit_answer("mitochondria")
        item = engine.snapshot()["item"]
        assert "hint" not in item
        assert item["message"] == "Correct!"
        assert item["time_left"] is None

    def test_true_false_options(self, make_engine):
        engine = make_engine(Mode.GAME)
        engine.submit_answer("x")
        engine.advance()
        assert engine.snapshot()["item"]["options"] == ["true", "false"]

    def test_completion_metadata(self, make_engine, games_raw):
        engine = make_engine(Mode.GAME)
        answers = [g["answer"] for g in games_raw["games"]]
        _answer_all(engine, lambda i: answers[i])
        completion = engine.completion
        # No time passed: 15 left each, streak bonus 0, 1, 2, 3.
        assert completion.points == completion.score == 4 * 15 + 6
        assert completion.metadata["correct"] == 4
        assert completion.metadata["max_streak"] == 4
        assert completion.metadata["accuracy"] == 110

    def test_non_text_answer_rejected(self, make_engine):
        from learning.errors import InvalidAnswer
        engine = make_engine(Mode.GAME)
        with pytest.raises(InvalidAnswer):
            engine.submit_answer(3)
