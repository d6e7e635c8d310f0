# ==============================================================================
# HELPER TESTS
# ==============================================================================
# Millisecond clock and UTC normalization
# ==============================================================================

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

from dualstore.utils.helpers import MillisecondClock, as_utc, utc_now


class TestMillisecondClock:
    """Tests for the stamp clock used by both adapters."""

    def test_millisecond_precision(self):
        stamp = utc_now()

        assert stamp.tzinfo is not None
        assert stamp.microsecond % 1000 == 0

    def test_same_millisecond_calls_still_increase(self):
        clock = MillisecondClock()

        stamps = [clock.now() for _ in range(1000)]

        assert all(later > earlier for earlier, later in zip(stamps, stamps[1:]))

    def test_wall_clock_stepping_back(self):
        clock = MillisecondClock()
        fixed = datetime(2024, 1, 1, 12, 0, 0, 500000, tzinfo=timezone.utc)

        with patch("dualstore.utils.helpers.datetime") as mocked:
            mocked.now.return_value = fixed
            first = clock.now()
            mocked.now.return_value = fixed - timedelta(seconds=5)
            second = clock.now()

        assert first == fixed
        assert second == fixed + timedelta(milliseconds=1)


class TestAsUtc:
    def test_naive_gets_utc(self):
        assert as_utc(datetime(2024, 1, 1)).tzinfo == timezone.utc

    def test_aware_converted(self):
        plus_two = timezone(timedelta(hours=2))
        value = datetime(2024, 1, 1, 14, 0, tzinfo=plus_two)

        assert as_utc(value) == datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
