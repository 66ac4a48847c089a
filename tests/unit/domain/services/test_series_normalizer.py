"""Unit tests for SeriesNormalizer service."""

import pytest

from sentinel.domain.services.series_normalizer import SeriesNormalizer


class TestSeriesNormalizer:
    """Tests for SeriesNormalizer service."""

    @pytest.fixture
    def normalizer(self):
        return SeriesNormalizer()

    @pytest.fixture
    def newest_first(self, make_sample):
        """Five samples in wire order (newest first)."""
        return [make_sample(minute=minute) for minute in range(4, -1, -1)]

    def test_reverses_newest_first_batch(self, normalizer, newest_first):
        result = normalizer.normalize(newest_first)

        assert len(result) == len(newest_first)
        assert result == newest_first[::-1]
        assert [s.observed_at for s in result] == sorted(
            s.observed_at for s in newest_first
        )

    def test_empty_sequence(self, normalizer):
        assert normalizer.normalize([]) == []

    def test_single_element_is_copied(self, normalizer, make_sample):
        raw = [make_sample()]
        result = normalizer.normalize(raw)

        assert result == raw
        assert result is not raw

    def test_input_not_mutated(self, normalizer, newest_first):
        original = list(newest_first)
        normalizer.normalize(newest_first)
        assert newest_first == original

    def test_accepts_tuples(self, normalizer, newest_first):
        raw = tuple(newest_first)
        assert normalizer.normalize(raw) == newest_first[::-1]

    def test_not_idempotent_on_own_output(self, normalizer, newest_first):
        once = normalizer.normalize(newest_first)
        twice = normalizer.normalize(once)

        assert twice != once
        assert twice == newest_first

    def test_ascending_marker_keeps_order(self, normalizer, newest_first):
        chronological = newest_first[::-1]
        result = normalizer.normalize(chronological, ascending=True)

        assert result == chronological
        assert result is not chronological
        assert normalizer.normalize(result, ascending=True) == chronological
