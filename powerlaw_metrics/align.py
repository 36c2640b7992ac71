"""
Calendar-day alignment of two differently sampled series.
"""

import logging
from datetime import timezone, tzinfo
from typing import List

from .epoch import day_key
from .errors import EmptySeries
from .models import AlignedPair, Series

logger = logging.getLogger(__name__)


def align(primary: Series, secondary: Series, tz: tzinfo = timezone.utc) -> List[AlignedPair]:
    """
    Pair observations of ``primary`` and ``secondary`` that fall on the same
    calendar day in ``tz``. Sources sample at different times of day, so
    exact timestamps are never compared. The first secondary observation of a
    day wins; unmatched points are dropped. Output follows primary order.
    """
    if not primary or not secondary:
        raise EmptySeries("cannot align an empty series")

    by_day = {}
    for o in secondary:
        by_day.setdefault(day_key(o.timestamp, tz), o)

    pairs = []
    for o in primary:
        match = by_day.get(day_key(o.timestamp, tz))
        if match is not None:
            pairs.append(AlignedPair(o.timestamp, o.value, match.value))

    logger.debug("aligned %d of %d primary points (%d secondary days)",
                 len(pairs), len(primary), len(by_day))
    return pairs
