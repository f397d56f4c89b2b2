"""
Set-overlap similarity shared by every dictionary-derived attribute.
"""

from typing import Iterable, List, Optional


def categorical_similarity(values1: Optional[Iterable[str]],
                           values2: Optional[Iterable[str]]) -> float:
    """
    Jaccard similarity of two attribute lists.

    Both empty means the descriptions agree by absence (1.0); only one
    empty means no evidence of agreement (0.0).
    """
    a = set(values1 or ())
    b = set(values2 or ())
    if not a and not b:
        return 1.0
    if not a or not b:
        return 0.0
    return len(a & b) / len(a | b)


def shared_values(values1: Optional[Iterable[str]],
                  values2: Optional[Iterable[str]]) -> List[str]:
    """Values present in both lists, in the order of the first."""
    other = set(values2 or ())
    shared = []
    for value in values1 or ():
        if value in other and value not in shared:
            shared.append(value)
    return shared
