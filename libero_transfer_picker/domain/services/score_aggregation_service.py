"""Score aggregation service.

Folds per-round scoring events into a ScoreMap for a closed range of rounds.
"""

from typing import Any, Dict, Iterable, Mapping, Tuple, Union

from loguru import logger
from pydantic import ValidationError

from ..models.player import ScoreEvent
from ..models.score import ScoreMap

RawEvent = Union[ScoreEvent, Mapping[str, Any]]


class ScoreAggregationService:
    """Sums scoring events over an inclusive round range."""

    def aggregate(
        self, events: Iterable[RawEvent], round_range: Tuple[int, int]
    ) -> ScoreMap:
        """Sum points per player over rounds ``start..end`` (both inclusive).

        Args:
            events: ScoreEvent objects or raw mappings with ``playerId``,
                ``roundNumber`` and optional ``points`` (missing points count 0)
            round_range: (start, end) inclusive round numbers

        Returns:
            ScoreMap of player ID to summed points. Players without events in
            the range are absent (and therefore read as 0).

        Raises:
            ValueError: if start is greater than end
        """
        start, end = round_range
        if start > end:
            raise ValueError(f"Round range start {start} is after end {end}")

        totals: Dict[str, int] = {}
        skipped = 0
        for raw in events:
            event = self._coerce_event(raw)
            if event is None:
                skipped += 1
                continue
            if start <= event.round_number <= end:
                totals[event.player_id] = totals.get(event.player_id, 0) + event.points

        if skipped:
            logger.debug(f"Skipped {skipped} malformed score events")
        logger.debug(
            f"Aggregated rounds {start}-{end}: {len(totals)} players with scores"
        )
        return ScoreMap(totals)

    @staticmethod
    def _coerce_event(raw: RawEvent):
        if isinstance(raw, ScoreEvent):
            return raw
        if not isinstance(raw, Mapping):
            return None
        try:
            return ScoreEvent.model_validate(raw)
        except ValidationError:
            return None
