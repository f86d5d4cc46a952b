import pytest
from pydantic import TypeAdapter, ValidationError

from app.core.constants import QuestionTypeEnum
from app.models.option import Option
from app.models.question import Question
from app.schemas.answer import AnswerBase
from app.services.scoring import (
    AnswerKey,
    McqAnswerKey,
    ShortAnswerKey,
    answer_key_for,
    grade_mcq,
    grade_question,
    grade_short_answer,
    grade_submission,
    round_half_up,
)

ACID = ["atomic", "consistency", "isolation", "durability"]


def text(question_id, value):
    return AnswerBase(question_id=question_id, text_answer=value)


def choice(question_id, option_id):
    return AnswerBase(question_id=question_id, selected_option_id=option_id)


class TestMcq:
    def test_correct_option_earns_full_points(self):
        key = McqAnswerKey(question_id=1, points=7, correct_option_id=42)
        result = grade_mcq(key, choice(1, 42))
        assert result.earned == 7
        assert result.is_correct
        assert result.answered

    @pytest.mark.parametrize("selected", [41, 43, None])
    def test_any_other_selection_earns_nothing(self, selected):
        key = McqAnswerKey(question_id=1, points=7, correct_option_id=42)
        result = grade_mcq(key, choice(1, selected))
        assert result.earned == 0
        assert not result.is_correct
        assert result.answered is (selected is not None)

    def test_missing_answer_earns_nothing(self):
        key = McqAnswerKey(question_id=1, points=7, correct_option_id=42)
        result = grade_mcq(key, None)
        assert result.earned == 0
        assert not result.answered


class TestShortAnswer:
    def test_partial_credit_by_keyword_ratio(self):
        key = ShortAnswerKey(question_id=1, points=8, keywords=ACID)
        result = grade_short_answer(key, text(1, "It must be ATOMIC and guarantee Durability."))
        assert result.earned == 4
        assert not result.is_correct

    def test_all_keywords_is_correct(self):
        key = ShortAnswerKey(question_id=1, points=8, keywords=ACID)
        result = grade_short_answer(key, text(1, "atomicity, consistency, isolation, durability"))
        assert result.earned == 8
        assert result.is_correct

    def test_keywords_match_as_substrings(self):
        key = ShortAnswerKey(question_id=1, points=10, keywords=["mass"])
        assert grade_short_answer(key, text(1, "Massive objects attract")).earned == 10

    def test_no_keywords_gives_full_credit_for_any_text(self):
        key = ShortAnswerKey(question_id=1, points=5, keywords=[])
        result = grade_short_answer(key, text(1, "anything at all"))
        assert result.earned == 5
        assert result.is_correct

    @pytest.mark.parametrize("value", [None, "", "   \n"])
    def test_blank_answer_earns_nothing(self, value):
        for keywords in ([], ACID):
            key = ShortAnswerKey(question_id=1, points=5, keywords=keywords)
            result = grade_short_answer(key, text(1, value))
            assert result.earned == 0
            assert not result.answered

    def test_duplicate_keywords_count_once(self):
        key = ShortAnswerKey(question_id=1, points=10, keywords=["Gravity", "gravity ", "mass"])
        assert grade_short_answer(key, text(1, "gravity only")).earned == 5

    def test_earned_rounds_half_up(self):
        key = ShortAnswerKey(question_id=1, points=3, keywords=["a1", "b2"])
        # 3 * 1/2 = 1.5
        assert grade_short_answer(key, text(1, "a1")).earned == 2

    def test_zero_points_question(self):
        key = ShortAnswerKey(question_id=1, points=0, keywords=["x"])
        result = grade_short_answer(key, text(1, "x"))
        assert result.earned == 0
        assert result.possible == 0


class TestSubmission:
    def test_aggregate_percentage(self):
        keys = [
            McqAnswerKey(question_id=1, points=10, correct_option_id=11),
            ShortAnswerKey(question_id=2, points=10, keywords=["a1", "b2"]),
        ]
        result = grade_submission(keys, [choice(1, 11), text(2, "only a1 here")])
        assert result.earned_points == 15
        assert result.total_points == 20
        assert result.score == 75

    def test_gravity_scenario_full_marks(self):
        keys = [
            McqAnswerKey(question_id=1, points=10, correct_option_id=100),
            ShortAnswerKey(question_id=2, points=10, keywords=["gravity", "mass"]),
        ]
        result = grade_submission(keys, [choice(1, 100), text(2, "Gravity is related to mass")])
        assert result.score == 100

    def test_gravity_scenario_zero(self):
        keys = [
            McqAnswerKey(question_id=1, points=10, correct_option_id=100),
            ShortAnswerKey(question_id=2, points=10, keywords=["gravity", "mass"]),
        ]
        result = grade_submission(keys, [choice(1, 101), text(2, "")])
        assert result.score == 0
        assert [q.earned for q in result.questions] == [0, 0]

    def test_exam_without_points_scores_zero(self):
        result = grade_submission([], [])
        assert result.score == 0
        assert result.total_points == 0

        keys = [ShortAnswerKey(question_id=1, points=0)]
        assert grade_submission(keys, [text(1, "hello")]).score == 0

    def test_first_answer_for_a_question_wins(self):
        keys = [McqAnswerKey(question_id=1, points=4, correct_option_id=9)]
        result = grade_submission(keys, [choice(1, 9), choice(1, 8)])
        assert result.score == 100

    def test_answers_for_unknown_questions_are_ignored(self):
        keys = [McqAnswerKey(question_id=1, points=4, correct_option_id=9)]
        result = grade_submission(keys, [choice(99, 9)])
        assert result.score == 0
        assert result.for_question(99) is None
        assert not result.for_question(1).answered

    def test_unanswered_questions_count_toward_total(self):
        keys = [
            McqAnswerKey(question_id=1, points=1, correct_option_id=9),
            McqAnswerKey(question_id=2, points=2, correct_option_id=10),
        ]
        result = grade_submission(keys, [choice(1, 9)])
        # 100 * 1/3 = 33.33
        assert result.score == 33

    def test_score_rounds_half_up(self):
        keys = [
            McqAnswerKey(question_id=1, points=1, correct_option_id=9),
            McqAnswerKey(question_id=2, points=7, correct_option_id=10),
        ]
        # 100 * 1/8 = 12.5
        assert grade_submission(keys, [choice(1, 9)]).score == 13


class TestAnswerKeys:
    def test_round_half_up(self):
        assert round_half_up(1, 2) == 1
        assert round_half_up(5, 2) == 3
        assert round_half_up(1, 3) == 0
        assert round_half_up(2, 3) == 1

    def test_answer_key_from_mcq_question(self):
        question = Question(
            id=3, type=QuestionTypeEnum.MCQ, points=6,
            options=[Option(id=30, is_correct=False), Option(id=31, is_correct=True)]
        )
        key = answer_key_for(question)
        assert isinstance(key, McqAnswerKey)
        assert key.correct_option_id == 31
        assert key.points == 6

    def test_answer_key_from_short_answer_question(self):
        question = Question(id=4, type=QuestionTypeEnum.SHORT_ANSWER, points=2, keywords=None)
        key = answer_key_for(question)
        assert isinstance(key, ShortAnswerKey)
        assert key.keywords == []

    def test_answer_keys_are_a_tagged_union(self):
        adapter = TypeAdapter(AnswerKey)
        key = adapter.validate_python({"type": QuestionTypeEnum.SHORT_ANSWER, "question_id": 1, "points": 3, "keywords": ["x"]})
        assert isinstance(key, ShortAnswerKey)
        with pytest.raises(ValidationError):
            adapter.validate_python({"type": "ESSAY", "question_id": 1, "points": 3})

    def test_unknown_key_type_is_rejected(self):
        with pytest.raises(TypeError):
            grade_question(object(), None)
