"""
Helpers shared by the field extractors.

Every extractor is an ordered list of strategy functions, most trustworthy first.
A strategy takes the page and returns a value or None; the first accepted value wins.
"""
from typing import Callable, Iterable, List, Optional, Sequence

from ..content_cleaner import clean_text
from ..utils import logger


def first_result(strategies: Sequence[Callable], *args, validate: Optional[Callable] = None):
    """Run strategies in order and return the first non-empty, validated result."""
    for strategy in strategies:
        value = strategy(*args)
        if not value:
            continue
        if validate is not None:
            value = validate(value)
            if not value:
                continue
        logger.debug(f"{strategy.__name__} produced a value")
        return value
    return None


def unique(values: Iterable[str], limit: Optional[int] = None, key: Callable[[str], str] = None) -> List[str]:
    """Order-preserving dedup of cleaned, non-empty strings (case-insensitive by default)."""
    key = key or (lambda v: v.lower())
    seen = set()
    result = []
    for value in values:
        value = clean_text(value)
        if not value:
            continue
        k = key(value)
        if k in seen:
            continue
        seen.add(k)
        result.append(value)
        if limit is not None and len(result) >= limit:
            break
    return result
