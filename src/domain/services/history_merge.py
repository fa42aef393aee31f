"""
History Merge

Pure helpers combining a cached history record with freshly fetched samples.

A cached record is reused only for the same ``hours_to_show``. The samples
still relevant to the new window are kept, with the last sample preceding the
window moved onto the window start so the first bucket has a value. Fetching
then resumes just before the record's ``last_fetched`` instant and only
samples newer than the cached tail are appended, which keeps the merge
idempotent.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional, Sequence

from src.domain.entities.chart import StateMap
from src.domain.entities.time_series import CacheRecord, Sample, parse_numeric
from src.shared import get_logger

logger = get_logger(__name__)

FETCH_OVERLAP = timedelta(milliseconds=1)


@dataclass(slots=True)
class MergePlan:
    """Cached samples to start from and the fetch request to complete them."""

    data: List[Sample] = field(default_factory=list)
    fetch_start: Optional[datetime] = None
    skip_initial_state: bool = False


def plan_from_cache(
    record: Optional[CacheRecord], hours_to_show: float, start: datetime
) -> MergePlan:
    """
    Decide which cached samples survive for a window starting at ``start``.

    Records that are absent or were built for a different ``hours_to_show``
    are ignored and the whole window gets fetched.
    """
    plan = MergePlan(fetch_start=start)
    if record is None or not record.is_valid_for(hours_to_show):
        return plan

    data = list(record.data)
    current = next(
        (index for index, sample in enumerate(data) if sample.timestamp > start),
        None,
    )
    if current is None:
        plan.data = []
    else:
        if current > 0:
            current -= 1
            data[current] = data[current].at(start)
        plan.data = data[current:]
        plan.skip_initial_state = True

    if record.last_fetched > start:
        plan.fetch_start = record.last_fetched - FETCH_OVERLAP
    return plan


def prepare_fetched(
    samples: Sequence[Sample], state_map: Optional[StateMap] = None
) -> List[Sample]:
    """
    Normalise fetched samples before they are cached.

    Raw states found in ``state_map`` are replaced by their index; anything
    still not numeric afterwards is dropped.
    """
    prepared: List[Sample] = []
    for sample in samples:
        if state_map is not None and len(state_map) > 0:
            index = state_map.index_of(str(sample.value))
            if index is not None:
                sample = Sample(timestamp=sample.timestamp, value=str(index))
            else:
                logger.debug("state_map.convert.miss", value=sample.value)
        if parse_numeric(sample.value) is not None:
            prepared.append(sample)
    return prepared


def append_samples(cached: Sequence[Sample], fetched: Sequence[Sample]) -> List[Sample]:
    """Append the fetched samples newer than the cached tail, keeping time order."""
    merged = list(cached)
    tail = merged[-1].timestamp if merged else None
    merged.extend(
        sample
        for sample in sorted(fetched, key=lambda item: item.timestamp)
        if tail is None or sample.timestamp > tail
    )
    return merged
