"""Score map: points per player accumulated over a period."""

from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Tuple


class ScoreMap(Mapping):
    """Read-only mapping from player ID to integer points.

    Unknown IDs read as 0 through both ``map[id]`` and ``map.get(id)``;
    ``id in map`` still reports whether the player actually scored.
    """

    __slots__ = ("_points",)

    def __init__(self, points: Optional[Mapping[str, int]] = None):
        self._points = MappingProxyType(dict(points or {}))

    def __getitem__(self, player_id: str) -> int:
        return self._points.get(player_id, 0)

    def get(self, player_id: str, default: int = 0) -> int:
        return self._points.get(player_id, default)

    def __contains__(self, player_id: object) -> bool:
        return player_id in self._points

    def __iter__(self) -> Iterator[str]:
        return iter(self._points)

    def __len__(self) -> int:
        return len(self._points)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ScoreMap):
            return dict(self._points) == dict(other._points)
        if isinstance(other, Mapping):
            return dict(self._points) == dict(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(frozenset(self._points.items()))

    def __repr__(self) -> str:
        return f"ScoreMap({dict(self._points)!r})"

    def to_dict(self) -> Dict[str, int]:
        return dict(self._points)

    def top(self, n: int) -> List[Tuple[str, int]]:
        """Top ``n`` scorers, highest first, ties broken by ascending ID."""
        ranked = sorted(self._points.items(), key=lambda item: (-item[1], item[0]))
        return ranked[:n]
