"""Series normalizer.

The feed delivers each site's history newest-first. Computation and the
rendering layer both work oldest-to-newest (left-to-right), so every raw
batch is reversed exactly once on its way into a Snapshot.
"""

from collections.abc import Sequence

from sentinel.domain.entities.sample import Sample


class SeriesNormalizer:
    """Puts a site's sample history into chronological ascending order.

    normalize() is not idempotent: applying it to its own output
    restores the wire order. The ingestion pipeline only ever normalizes
    freshly decoded FeedPayload batches, never a published Snapshot.
    """

    def normalize(
        self, raw_samples: Sequence[Sample], ascending: bool = False
    ) -> list[Sample]:
        """Return a new chronological list built from a raw batch.

        Args:
            raw_samples: Samples as received (newest-first)
            ascending: Set when the input is already known to be oldest-first;
                the content is then copied without reordering

        Returns:
            New list of samples, oldest first. The input is left untouched.
        """
        if ascending:
            return list(raw_samples)
        return list(reversed(raw_samples))
