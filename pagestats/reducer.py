from typing import Iterable

from .models import LogicalLoadEvent, StatsRecord


def reduce_stats(events: Iterable[LogicalLoadEvent]) -> StatsRecord:
    number_requested = 0
    number_not_found = 0
    total_size = 0  # 字节
    for event in events:
        number_requested += 1
        if event.status == 404:
            number_not_found += 1
        total_size += event.size
    return StatsRecord(number_requested, number_not_found, total_size)
