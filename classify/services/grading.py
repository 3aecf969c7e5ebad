"""Scoring of a submitted answer set against an exam's answer key.

Kept free of database and request objects so it can be exercised directly.
"""
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Tuple


@dataclass(frozen=True)
class AnswerKeyEntry:
    correct_option: str
    marks: float = 1.0


@dataclass
class GradeResult:
    score: float
    percentage: float
    is_passed: bool
    correctness: Dict[int, bool] = field(default_factory=dict)


def grade_answers(
    answers: Mapping[int, Optional[str]],
    answer_key: Mapping[int, AnswerKeyEntry],
    total_marks: float,
    pass_mark: float,
) -> GradeResult:
    """Grade ``answers`` (question id -> selected letter or None).

    Every answered question earns its marks when the selection matches the
    key. Blank answers earn nothing and there is no negative marking.
    ``is_passed`` compares the unrounded percentage against ``pass_mark``.
    """
    if total_marks is None or total_marks <= 0:
        raise ValueError("total_marks must be greater than zero")

    score = 0.0
    correctness: Dict[int, bool] = {}
    for question_id, selected in answers.items():
        entry = answer_key.get(question_id)
        if entry is None:
            raise ValueError(f"Question {question_id} is not part of this exam")
        is_correct = selected is not None and selected.upper() == entry.correct_option.upper()
        correctness[question_id] = is_correct
        if is_correct:
            score += entry.marks

    raw_percentage = 100.0 * score / total_marks
    return GradeResult(
        score=score,
        percentage=round(raw_percentage, 2),
        is_passed=raw_percentage >= pass_mark,
        correctness=correctness,
    )


def build_answer_key(questions) -> Dict[int, AnswerKeyEntry]:
    return {
        q.id: AnswerKeyEntry(correct_option=q.correct_option, marks=q.marks or 0.0)
        for q in questions
    }


def split_submission(submission) -> Tuple[Dict[int, Optional[str]], list]:
    """Map an answer list to ``{question_id: selected}`` and report repeated ids."""
    answers: Dict[int, Optional[str]] = {}
    duplicates = []
    for item in submission:
        if item.question_id in answers:
            duplicates.append(item.question_id)
            continue
        selected = item.selected
        answers[item.question_id] = getattr(selected, "value", selected)
    return answers, duplicates
