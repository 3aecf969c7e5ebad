import pytest

from classify.services.written_exam import letter_grade


@pytest.mark.parametrize("score,total,expected", [
    (70, 100, "A"),
    (69.99, 100, "B"),
    (60, 100, "B"),
    (50, 100, "C"),
    (45, 100, "D"),
    (44.9, 100, "F"),
    (0, 100, "F"),
    (35, 50, "A"),
    (10, 0, "F"),
])
def test_letter_grade_bands(score, total, expected):
    assert letter_grade(score, total) == expected
