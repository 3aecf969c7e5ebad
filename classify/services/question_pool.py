import random
from typing import List, Optional, Sequence


def select_question_ids(
    eligible_ids: Sequence[int],
    num_questions: Optional[int],
    rng: Optional[random.Random] = None,
) -> List[int]:
    """Pick ``min(num_questions, len(eligible_ids))`` distinct ids uniformly without replacement.

    A missing or non-positive ``num_questions`` yields an empty selection.
    """
    unique_ids = list(dict.fromkeys(eligible_ids))
    if not num_questions or num_questions <= 0 or not unique_ids:
        return []
    rng = rng or random.Random()
    return rng.sample(unique_ids, min(num_questions, len(unique_ids)))
