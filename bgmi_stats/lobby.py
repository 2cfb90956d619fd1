"""Lobby screen parser: OCR text -> ``{slot: SlotRoster}``.

The lobby lists each team as a slot number followed by up to six player
lines of the form ``"<name> /0 Eliminations"``. OCR merges the slot number
with the first player, drops the suffix, or splits a slot across two
screenshots, so the text is scanned as a two-state machine:

    NO_ACTIVE_SLOT --slot number--> ACTIVE_SLOT(n) --slot number--> ACTIVE_SLOT(m)

Player lines only count while a slot is active. Nothing here raises on bad
input; unreadable lines are skipped.
"""

import logging
import re
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .config import DEFAULT_CONFIG, EngineConfig
from .models import SlotRoster
from .validators import clean_player_name, has_elim_suffix, strip_elim_suffix

logger = logging.getLogger(__name__)

BARE_ID_RE = re.compile(r"^(\d{1,2})$")
ID_PREFIX_RE = re.compile(r"^(\d{1,2})\s+(.*)$")
ELIM_WORD_RE = re.compile(r"eliminat", re.IGNORECASE)


class LobbyState(Enum):
    NO_ACTIVE_SLOT = "no_active_slot"
    ACTIVE_SLOT = "active_slot"


class LobbyLine(Enum):
    BOUNDARY = "boundary"
    NOISE = "noise"
    SLOT = "slot"
    SLOT_WITH_PLAYER = "slot_with_player"
    PLAYER = "player"
    BARE_NAME = "bare_name"
    OTHER = "other"


def split_lines(text: str) -> List[str]:
    return [l.strip() for l in (text or "").splitlines() if l.strip()]


class LobbyParser:
    """Stateful scan of lobby text. One instance per parse; see ``parse_lobby``."""

    def __init__(self, config: EngineConfig = DEFAULT_CONFIG):
        self.config = config
        self.slots: Dict[int, SlotRoster] = {}
        self.current_slot: Optional[int] = None
        self._noise = [re.compile(p, re.IGNORECASE) for p in config.lobby_noise]
        # (state, line kind) -> handler; pairs not listed leave the state alone
        self._transitions = {
            (LobbyState.NO_ACTIVE_SLOT, LobbyLine.SLOT): self._open_slot,
            (LobbyState.ACTIVE_SLOT, LobbyLine.SLOT): self._open_slot,
            (LobbyState.NO_ACTIVE_SLOT, LobbyLine.SLOT_WITH_PLAYER): self._open_slot,
            (LobbyState.ACTIVE_SLOT, LobbyLine.SLOT_WITH_PLAYER): self._open_slot,
            (LobbyState.ACTIVE_SLOT, LobbyLine.PLAYER): self._add_player,
            (LobbyState.ACTIVE_SLOT, LobbyLine.BARE_NAME): self._add_player,
            (LobbyState.ACTIVE_SLOT, LobbyLine.BOUNDARY): self._boundary,
        }

    @property
    def state(self) -> LobbyState:
        if self.current_slot is None:
            return LobbyState.NO_ACTIVE_SLOT
        return LobbyState.ACTIVE_SLOT

    def classify_line(self, line: str) -> Tuple[LobbyLine, Optional[int], Optional[str]]:
        """Return ``(kind, slot, player)`` for one trimmed, non-empty line."""
        if self.config.boundary_marker in line:
            return LobbyLine.BOUNDARY, None, None
        if not has_elim_suffix(line) and any(p.search(line) for p in self._noise):
            return LobbyLine.NOISE, None, None

        m = BARE_ID_RE.match(line)
        if m and self.config.in_range(int(m.group(1))):
            return LobbyLine.SLOT, int(m.group(1)), None

        m = ID_PREFIX_RE.match(line)
        if m and self.config.in_range(int(m.group(1))):
            rest = m.group(2)
            name = clean_player_name(strip_elim_suffix(rest))
            if len(name) <= 1 or ELIM_WORD_RE.match(rest):
                name = None
            return LobbyLine.SLOT_WITH_PLAYER, int(m.group(1)), name

        if has_elim_suffix(line):
            return LobbyLine.PLAYER, None, clean_player_name(line)

        name = clean_player_name(line)
        if (1 < len(name) < self.config.max_bare_name_length
                and not name.isdigit()
                and not ELIM_WORD_RE.search(name)):
            return LobbyLine.BARE_NAME, None, name
        return LobbyLine.OTHER, None, None

    def feed(self, line: str) -> None:
        kind, slot, name = self.classify_line(line)
        handler = self._transitions.get((self.state, kind))
        if handler is None:
            logger.debug(f"lobby: skipped {kind.value} line {line!r} in {self.state.value}")
            return
        handler(slot, name)

    def _open_slot(self, slot, name):
        self.current_slot = slot
        if slot not in self.slots:
            self.slots[slot] = SlotRoster(slot=slot)
        if name:
            self._add_player(None, name)

    def _add_player(self, _slot, name):
        if not name or len(name) <= 1:
            return
        roster = self.slots[self.current_slot]
        if not roster.add_player(name, self.config.max_roster):
            logger.debug(f"lobby: slot {self.current_slot} ignored {name!r} (full or duplicate)")

    def _boundary(self, _slot, _name):
        if self.config.reset_state_on_boundary:
            self.current_slot = None

    def parse(self, text: str) -> Dict[int, SlotRoster]:
        for line in split_lines(text):
            self.feed(line)
        return self.slots


def parse_lobby(text: str, config: EngineConfig = DEFAULT_CONFIG) -> Dict[int, SlotRoster]:
    slots = LobbyParser(config).parse(text)
    logger.debug(f"lobby: {len(slots)} slots parsed")
    return slots
