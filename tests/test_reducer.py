import pytest

from pagestats.models import LogicalLoadEvent, StatsRecord
from pagestats.reducer import reduce_stats


def load(request_id, status=200, size=0):
    return LogicalLoadEvent(request_id, "https://example.com/", status, "Script", size=size)


class TestReduceStats:
    def test_empty(self):
        assert reduce_stats([]) == StatsRecord(0, 0, 0)

    def test_counts_and_sums(self):
        events = [load("1", size=100), load("2", status=404, size=5), load("3", size=0)]
        assert reduce_stats(events) == StatsRecord(3, 1, 105)

    def test_unresolved_sizes_contribute_zero(self):
        events = [load(str(i)) for i in range(4)]
        record = reduce_stats(events)
        assert record.total_size == 0
        assert record.number_requested == 4

    def test_not_found_only_counts_404(self):
        events = [load("1", 404), load("2", 500), load("3", 403), load("4", 404)]
        assert reduce_stats(events).number_not_found == 2

    def test_order_independent(self):
        events = [load("1", size=1), load("2", 404, 2), load("3", size=3)]
        assert reduce_stats(events) == reduce_stats(list(reversed(events)))


class TestStatsRecord:
    def test_immutable(self):
        record = StatsRecord(1, 0, 10)
        with pytest.raises(AttributeError):
            record.total_size = 20

    def test_to_dict_uses_wire_names(self):
        assert StatsRecord(1, 2, 3).to_dict() == {"numberRequested": 1, "numberNotFound": 2, "totalSize": 3}
