"""Tests for lobby.py — the lobby screen state machine."""

from bgmi_stats.config import EngineConfig
from bgmi_stats.lobby import LobbyLine, LobbyParser, LobbyState, parse_lobby


def _rosters(text: str, config: EngineConfig = EngineConfig()) -> dict:
    return {slot: roster.players for slot, roster in parse_lobby(text, config).items()}


# ---------------------------------------------------------------------------
# Slot detection
# ---------------------------------------------------------------------------

class TestSlotLines:
    """Tests for bare and prefixed slot numbers."""

    def test_bare_slot_then_players(self, lobby_text: str) -> None:
        """A bare number opens a slot; suffixed lines fill it."""
        assert _rosters(lobby_text) == {5: ["Alpha", "Bravo"]}

    def test_slot_merged_with_first_player(self) -> None:
        """'06 Name /0 Eliminations' opens slot 6 and adds the name."""
        text = "06 REharshOG /0 Eliminations\nKiller /0 Eliminations"
        assert _rosters(text) == {6: ["REharshOG", "Killer"]}

    def test_slot_with_only_suffix(self) -> None:
        """A slot line with no usable name still creates an empty roster."""
        assert _rosters("08 /0 Eliminations") == {8: []}

    def test_single_character_name_rejected(self) -> None:
        """A one-character trailing name is not a player."""
        assert _rosters("09 A") == {9: []}

    def test_out_of_range_bare_number_ignored(self) -> None:
        """75 is not a slot, so the following name has nowhere to go."""
        assert _rosters("75\nAlpha") == {}

    def test_out_of_range_prefix_falls_through(self) -> None:
        """'99 Name /0 Eliminations' is a player line for the active slot."""
        assert _rosters("02\n99 Alpha /0 Eliminations") == {2: ["Alpha"]}

    def test_revisiting_slot_keeps_roster(self) -> None:
        """A slot number seen twice continues the same roster."""
        text = "03\nAlpha /0 Eliminations\n04\nBravo\n03\nCharlie /0 Eliminations"
        assert _rosters(text) == {3: ["Alpha", "Charlie"], 4: ["Bravo"]}


# ---------------------------------------------------------------------------
# Player lines
# ---------------------------------------------------------------------------

class TestPlayerLines:
    """Tests for suffixed names, bare names and noise."""

    def test_lines_before_first_slot_dropped(self) -> None:
        """Players seen before any slot number are discarded."""
        assert _rosters("Ghost /0 Eliminations\n03\nAlpha") == {3: ["Alpha"]}

    def test_noise_lines_skipped(self) -> None:
        """UI text does not become player names."""
        text = "04\nTeam 4\n45 Remaining\nStage 2\nMatch start\nAlpha /0 Eliminations"
        assert _rosters(text) == {4: ["Alpha"]}

    def test_bare_name_too_long(self) -> None:
        """Long unsuffixed lines are not taken as names."""
        assert _rosters("01\n" + "x" * 40) == {1: []}

    def test_bare_elimination_word_rejected(self) -> None:
        """An unsuffixed line mentioning eliminations is not a name."""
        assert _rosters("01\nEliminated") == {1: []}

    def test_duplicate_names_suppressed(self) -> None:
        """Names equal after normalization are added once."""
        text = "07\nAlpha /0 Eliminations\nALPHA. /0 Eliminations\nal-pha"
        assert _rosters(text) == {7: ["Alpha"]}

    def test_roster_capped_at_six(self) -> None:
        """Only the first six distinct names are kept."""
        names = [f"Player{c}" for c in "ABCDEFGH"]
        text = "10\n" + "\n".join(f"{n} /0 Eliminations" for n in names)
        assert _rosters(text) == {10: names[:6]}


# ---------------------------------------------------------------------------
# Boundary marker and state
# ---------------------------------------------------------------------------

class TestBoundary:
    """Tests for image boundaries and parser state."""

    TEXT = "02\nAlpha /0 Eliminations\n---IMAGE BREAK---\nBravo /0 Eliminations"

    def test_state_persists_across_boundary(self) -> None:
        """By default the active slot carries into the next image."""
        assert _rosters(self.TEXT) == {2: ["Alpha", "Bravo"]}

    def test_state_reset_at_boundary(self) -> None:
        """With reset enabled, the next image starts with no active slot."""
        config = EngineConfig(reset_state_on_boundary=True)
        assert _rosters(self.TEXT, config) == {2: ["Alpha"]}

    def test_state_transitions(self) -> None:
        """The parser moves from no active slot to an active one."""
        parser = LobbyParser()
        assert parser.state is LobbyState.NO_ACTIVE_SLOT

        parser.feed("12")

        assert parser.state is LobbyState.ACTIVE_SLOT
        assert parser.current_slot == 12

    def test_classify_line_kinds(self) -> None:
        """Each line pattern maps to its line kind."""
        parser = LobbyParser()
        assert parser.classify_line("---IMAGE BREAK---")[0] is LobbyLine.BOUNDARY
        assert parser.classify_line("Team 3")[0] is LobbyLine.NOISE
        assert parser.classify_line("07")[:2] == (LobbyLine.SLOT, 7)
        assert parser.classify_line("07 Alpha") == (LobbyLine.SLOT_WITH_PLAYER, 7, "Alpha")
        assert parser.classify_line("Bravo /0 Eliminations") == (LobbyLine.PLAYER, None, "Bravo")
        assert parser.classify_line("Bravo") == (LobbyLine.BARE_NAME, None, "Bravo")
        assert parser.classify_line("123")[0] is LobbyLine.OTHER

    def test_empty_text(self) -> None:
        """Empty input yields no slots."""
        assert _rosters("") == {}


# ---------------------------------------------------------------------------
# Noise words inside player names
# ---------------------------------------------------------------------------

class TestNoiseWordsInNames:
    """Tests for player names that contain UI words."""

    def test_slot_line_name_with_noise_word(self) -> None:
        """'05 BackstageBoy' still opens slot 5."""
        text = "03\nAlpha /0 Eliminations\n05 BackstageBoy\nBravo /0 Eliminations"
        assert _rosters(text) == {3: ["Alpha"], 5: ["BackstageBoy", "Bravo"]}

    def test_suffixed_name_with_noise_word(self) -> None:
        """A suffixed player line is read even when the name starts with 'Stage'."""
        text = "04\nStageKing /0 Eliminations\nTeamRemaining /0 Eliminations"
        assert _rosters(text) == {4: ["StageKing", "TeamRemaining"]}

    def test_bare_name_with_noise_word(self) -> None:
        """Noise phrases only match whole UI lines, not parts of names."""
        assert _rosters("06\nMyTeam 7\nRemainingHero") == {6: ["MyTeam 7", "RemainingHero"]}
