"""
Fuzzy matching of time-clock names against the employee roster.

Imported attendance rows often carry slightly different spellings
("Minsu  Jeon", "jeon minsu"). thefuzz.token_sort_ratio maps them to the
roster entry so reports group by one canonical name.
"""

import logging
import re

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from thefuzz import fuzz

from facility_ops.core.config import settings
from facility_ops.db.models import Employee

logger = logging.getLogger(__name__)

_ws_re = re.compile(r"\s+")


def clean_name(raw: str) -> str:
    return _ws_re.sub(" ", raw.strip())


def best_match(name: str, roster: list[Employee]) -> tuple[Employee | None, int]:
    best_score = 0
    best: Employee | None = None
    for emp in roster:
        score = fuzz.token_sort_ratio(name, emp.name)
        if score > best_score:
            best_score = score
            best = emp
    return best, best_score


async def load_roster(db: AsyncSession) -> list[Employee]:
    result = await db.execute(select(Employee))
    return list(result.scalars().all())


def match_employee(
    raw_name: str,
    roster: list[Employee],
    _cache: dict[str, Employee | None] | None = None,
) -> Employee | None:
    """
    Return the roster employee for ``raw_name`` or None when nobody scores
    at least FUZZY_MATCH_THRESHOLD.
    """
    cleaned = clean_name(raw_name)
    if _cache is not None and cleaned in _cache:
        return _cache[cleaned]

    emp, score = best_match(cleaned, roster)
    if emp is not None and score >= settings.FUZZY_MATCH_THRESHOLD:
        logger.debug(
            "Matched '%s' -> '%s' (score=%d, threshold=%d)",
            cleaned, emp.name, score, settings.FUZZY_MATCH_THRESHOLD,
        )
    else:
        logger.info(
            "No roster match for '%s' (best score=%d < %d)",
            cleaned, score, settings.FUZZY_MATCH_THRESHOLD,
        )
        emp = None

    if _cache is not None:
        _cache[cleaned] = emp
    return emp


def search_employees(query: str, roster: list[Employee]) -> list[Employee]:
    """Name/department search tolerant to typos, best matches first."""
    needle = clean_name(query).lower()
    if not needle:
        return roster
    scored = []
    for emp in roster:
        score = max(
            fuzz.partial_ratio(needle, emp.name.lower()),
            fuzz.partial_ratio(needle, (emp.department or "").lower()),
        )
        if score >= settings.FUZZY_MATCH_THRESHOLD - 20:
            scored.append((score, emp.name, emp))
    scored.sort(key=lambda item: (-item[0], item[1]))
    return [emp for _, _, emp in scored]
