from typing import List, Sequence, Tuple


def first_token(key_point: str) -> str:
    tokens = str(key_point).split()
    return tokens[0].lower() if tokens else ""


def keyword_coverage(answer: str, expected_key_points: Sequence[str]) -> Tuple[List[str], List[str]]:
    """
    Split key points into (covered, missed).

    A key point is covered when its first whitespace-delimited token, lower-cased,
    is a substring of the lower-cased answer. No stemming or semantic matching.
    """
    answer_lower = (answer or "").lower()
    covered, missed = [], []
    for point in expected_key_points:
        token = first_token(point)
        if token and token in answer_lower:
            covered.append(str(point))
        else:
            missed.append(str(point))
    return covered, missed
