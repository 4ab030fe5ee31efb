"""JSON file repository implementations.

Persisted provider data is read from disk:
- players: a JSON array of player records, or JSON Lines
- matchdays: one file per round named ``...NN.json`` holding an array of
  ``{"playerId": ..., "points": ...}`` entries
- roster: a JSON array of player IDs
"""

import json
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from loguru import logger
from pydantic import ValidationError

from libero_transfer_picker.config import config
from libero_transfer_picker.domain.common.result import DomainError, Result
from libero_transfer_picker.domain.models.formation import Roster
from libero_transfer_picker.domain.models.player import PlayerDomain, ScoreEvent
from libero_transfer_picker.domain.repositories.player_repository import (
    MatchdayScoreProvider,
    PlayerMetadataProvider,
    RosterStore,
)

MATCHDAY_FILE_PATTERN = re.compile(r"(\d{2})\.json$")

PathLike = Union[str, Path]


def _read_records(path: Path) -> List[Any]:
    """Read a JSON array, a single JSON object or JSON Lines."""
    text = path.read_text(encoding="utf-8")
    stripped = text.strip()
    if not stripped:
        return []
    try:
        document = json.loads(stripped)
    except json.JSONDecodeError:
        # Not a single document, try JSON Lines
        return [json.loads(line) for line in stripped.splitlines() if line.strip()]
    if isinstance(document, list):
        return document
    return [document]


class JsonPlayerRepository(PlayerMetadataProvider):
    """Player metadata from a persisted JSON or JSON Lines file."""

    def __init__(self, path: Optional[PathLike] = None):
        self.path = Path(path) if path is not None else config.data.players_path

    def get_players(self) -> Result[List[PlayerDomain]]:
        if not self.path.exists():
            return Result.failure(
                DomainError.data_not_found(
                    f"Player file not found: {self.path}", {"path": str(self.path)}
                )
            )

        try:
            records = _read_records(self.path)
        except (OSError, json.JSONDecodeError) as e:
            return Result.failure(
                DomainError.data_access_error(
                    f"Cannot read player file {self.path}: {e}",
                    {"path": str(self.path)},
                )
            )

        players: List[PlayerDomain] = []
        skipped = 0
        for record in records:
            if not isinstance(record, dict):
                skipped += 1
                continue
            try:
                players.append(PlayerDomain.model_validate(record))
            except ValidationError as e:
                skipped += 1
                logger.debug(f"Skipping invalid player record: {e.errors()[0]['msg']}")

        if skipped:
            logger.debug(f"Skipped {skipped} invalid player records in {self.path}")
        logger.info(f"✅ Loaded {len(players)} players from {self.path}")
        return Result.success(players)


class JsonMatchdayScoreRepository(MatchdayScoreProvider):
    """Per-round scoring events from a directory of matchday files."""

    def __init__(self, directory: Optional[PathLike] = None):
        self.directory = (
            Path(directory) if directory is not None else config.data.matchday_dir
        )

    def matchday_files(self) -> Dict[int, Path]:
        """Round number to file, taken from the ``NN.json`` suffix."""
        files: Dict[int, Path] = {}
        for path in sorted(self.directory.glob("*.json")):
            match = MATCHDAY_FILE_PATTERN.search(path.name)
            if match is None:
                logger.debug(f"Ignoring {path.name}: no round number in file name")
                continue
            files[int(match.group(1))] = path
        return files

    def get_score_events(
        self, round_range: Tuple[int, int]
    ) -> Result[List[ScoreEvent]]:
        start, end = round_range
        if start > end:
            return Result.failure(
                DomainError.malformed_input(
                    f"Round range start {start} is after end {end}",
                    {"round_range": [start, end]},
                )
            )
        if not self.directory.is_dir():
            return Result.failure(
                DomainError.data_not_found(
                    f"Matchday directory not found: {self.directory}",
                    {"path": str(self.directory)},
                )
            )

        files = self.matchday_files()
        events: List[ScoreEvent] = []
        missing: List[int] = []
        for round_number in range(start, end + 1):
            path = files.get(round_number)
            if path is None:
                missing.append(round_number)
                continue
            try:
                entries = _read_records(path)
            except (OSError, json.JSONDecodeError) as e:
                return Result.failure(
                    DomainError.data_access_error(
                        f"Cannot read matchday file {path}: {e}",
                        {"path": str(path), "round": round_number},
                    )
                )
            events.extend(self._entries_to_events(entries, round_number))

        if missing:
            logger.debug(f"No matchday data for rounds {missing}, skipped")
        logger.info(
            f"📊 Loaded {len(events)} score events for rounds {start}-{end}"
        )
        return Result.success(events)

    @staticmethod
    def _entries_to_events(entries: List[Any], round_number: int) -> List[ScoreEvent]:
        events: List[ScoreEvent] = []
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            try:
                events.append(
                    ScoreEvent.model_validate({**entry, "round_number": round_number})
                )
            except ValidationError:
                logger.debug(f"Skipping malformed score entry in round {round_number}")
        return events


class JsonRosterStore(RosterStore):
    """Current roster from a JSON array of player IDs."""

    def __init__(self, path: Optional[PathLike] = None):
        self.path = Path(path) if path is not None else config.data.roster_path

    def load_roster(self) -> Result[Roster]:
        if not self.path.exists():
            return Result.failure(
                DomainError.data_not_found(
                    f"Roster file not found: {self.path}", {"path": str(self.path)}
                )
            )

        try:
            ids = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            return Result.failure(
                DomainError.data_access_error(
                    f"Cannot read roster file {self.path}: {e}",
                    {"path": str(self.path)},
                )
            )

        if not isinstance(ids, list):
            return Result.failure(
                DomainError.malformed_input(
                    f"Roster file {self.path} must hold a JSON array of player IDs"
                )
            )

        try:
            roster = Roster(player_ids=ids)
        except ValidationError as e:
            return Result.failure(
                DomainError.malformed_input(
                    f"Invalid roster in {self.path}: {e.errors()[0]['msg']}",
                    {"path": str(self.path)},
                )
            )

        logger.info(f"✅ Loaded roster of {len(roster)} players from {self.path}")
        return Result.success(roster)
