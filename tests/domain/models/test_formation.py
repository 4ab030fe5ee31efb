"""Tests for Formation and Roster models."""

import pytest
from pydantic import ValidationError

from libero_transfer_picker.domain.models.formation import Formation, Roster
from libero_transfer_picker.domain.models.player import PlayerDomain, Position


class TestFormation:
    """Test Formation validation and parsing."""

    def test_from_label(self):
        formation = Formation.from_label("4-4-2")

        assert formation.defenders == 4
        assert formation.midfielders == 4
        assert formation.forwards == 2
        assert formation.label == "4-4-2"
        assert formation.quotas() == {
            Position.DEFENDER: 4,
            Position.MIDFIELDER: 4,
            Position.FORWARD: 2,
        }

    def test_quotas_must_fill_eleven(self):
        """Test MalformedInput: quotas plus goalkeeper must equal 11."""
        with pytest.raises(ValidationError):
            Formation(defenders=4, midfielders=4, forwards=3)

    def test_negative_quota_rejected(self):
        with pytest.raises(ValidationError):
            Formation(defenders=-1, midfielders=6, forwards=5)

    @pytest.mark.parametrize("label", ["4-4", "four-four-two", "4-4-2-0", ""])
    def test_bad_labels_rejected(self, label):
        with pytest.raises(ValueError):
            Formation.from_label(label)

    def test_zero_quota_allowed(self):
        formation = Formation.from_label("5-5-0")

        assert formation.forwards == 0


class TestRoster:
    """Test Roster uniqueness and budget."""

    def test_duplicate_ids_rejected(self):
        """Test MalformedInput: duplicate roster IDs."""
        with pytest.raises(ValidationError, match="Duplicate"):
            Roster(player_ids=["a", "b", "a"])

    def test_order_preserved(self):
        roster = Roster.coerce(["c", "a", "b"])

        assert roster.player_ids == ("c", "a", "b")
        assert "a" in roster
        assert "z" not in roster
        assert len(roster) == 3

    def test_coerce_keeps_existing_roster(self):
        roster = Roster(player_ids=["a"])

        assert Roster.coerce(roster) is roster

    def test_budget_counts_eligible_members_only(self):
        players = {
            "a": PlayerDomain(player_id="a", position=Position.DEFENDER, market_value=10),
            "b": PlayerDomain(player_id="b", position=Position.FORWARD, market_value=None),
        }
        roster = Roster(player_ids=["a", "b", "unknown"])

        assert roster.budget(players) == 10
        assert [p.player_id for p in roster.members(players)] == ["a", "b"]
