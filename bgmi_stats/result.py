"""Result screen parser: OCR text -> ``{rank: RankEntry}``.

Each finishing team is a bare rank number followed by ``"<name> <n> finishes"``
lines. The winning team's panel carries no rank label, so kill lines read
before any rank number belong to rank 1.
"""

import logging
import re
from enum import Enum
from typing import Dict, Optional, Tuple

from .config import DEFAULT_CONFIG, EngineConfig
from .lobby import BARE_ID_RE, split_lines
from .models import RankEntry
from .validators import clean_player_name

logger = logging.getLogger(__name__)

# "Name 5 finishes" / "5 finishes Name" / "0 finishes"
KILL_AFTER_RE = re.compile(r"^(.+?)\s+(\d+)\s+finish(?:es)?", re.IGNORECASE)
KILL_BEFORE_RE = re.compile(r"^(\d+)\s+finish(?:es)?\s+(.+)$", re.IGNORECASE)
KILL_ONLY_RE = re.compile(r"^(\d+)\s+finish(?:es)?$", re.IGNORECASE)


class ResultState(Enum):
    NO_ACTIVE_RANK = "no_active_rank"
    ACTIVE_RANK = "active_rank"


class ResultLine(Enum):
    BOUNDARY = "boundary"
    NOISE = "noise"
    RANK = "rank"
    KILL = "kill"
    KILL_NO_NAME = "kill_no_name"
    OTHER = "other"


def _match_kill(line: str) -> Optional[Tuple[str, int]]:
    m = KILL_ONLY_RE.match(line)
    if m:
        return "", int(m.group(1))
    m = KILL_AFTER_RE.match(line)
    if m:
        return clean_player_name(m.group(1)), int(m.group(2))
    m = KILL_BEFORE_RE.match(line)
    if m:
        return clean_player_name(m.group(2)), int(m.group(1))
    return None


class ResultParser:
    """Stateful scan of result text. One instance per parse; see ``parse_result``."""

    def __init__(self, config: EngineConfig = DEFAULT_CONFIG):
        self.config = config
        self.ranks: Dict[int, RankEntry] = {}
        self.current_rank: Optional[int] = None
        self.rank_one_seen = False
        self._noise = [re.compile(p, re.IGNORECASE) for p in config.result_noise]
        self._transitions = {
            (ResultState.NO_ACTIVE_RANK, ResultLine.RANK): self._open_rank,
            (ResultState.ACTIVE_RANK, ResultLine.RANK): self._open_rank,
            (ResultState.NO_ACTIVE_RANK, ResultLine.KILL): self._implicit_rank_one,
            (ResultState.ACTIVE_RANK, ResultLine.KILL): self._record,
            (ResultState.ACTIVE_RANK, ResultLine.BOUNDARY): self._boundary,
        }

    @property
    def state(self) -> ResultState:
        if self.current_rank is None:
            return ResultState.NO_ACTIVE_RANK
        return ResultState.ACTIVE_RANK

    def classify_line(self, line: str):
        """Return ``(kind, rank, (player, kills))`` for one trimmed, non-empty line."""
        if self.config.boundary_marker in line:
            return ResultLine.BOUNDARY, None, None

        m = BARE_ID_RE.match(line)
        if m and self.config.in_range(int(m.group(1))):
            return ResultLine.RANK, int(m.group(1)), None

        kill = _match_kill(line)
        if kill is not None:
            player, _ = kill
            # nothing left to tie the count to once the name is gone
            if not player or player.isdigit():
                return ResultLine.KILL_NO_NAME, None, kill
            return ResultLine.KILL, None, kill

        if any(p.search(line) for p in self._noise):
            return ResultLine.NOISE, None, None
        return ResultLine.OTHER, None, None

    def feed(self, line: str) -> None:
        kind, rank, kill = self.classify_line(line)
        handler = self._transitions.get((self.state, kind))
        if handler is None:
            logger.debug(f"result: skipped {kind.value} line {line!r} in {self.state.value}")
            return
        handler(rank, kill)

    def _ensure(self, rank: int) -> RankEntry:
        if rank not in self.ranks:
            self.ranks[rank] = RankEntry(rank=rank)
        return self.ranks[rank]

    def _open_rank(self, rank, _kill):
        self.current_rank = rank
        self._ensure(rank)
        if rank == 1:
            self.rank_one_seen = True

    def _implicit_rank_one(self, _rank, kill):
        if self.rank_one_seen:
            logger.debug(f"result: kill line {kill!r} has no active rank, discarded")
            return
        self._open_rank(1, None)
        self._record(None, kill)

    def _record(self, _rank, kill):
        player, kills = kill
        self._ensure(self.current_rank).record(player, kills)

    def _boundary(self, _rank, _kill):
        if self.config.reset_state_on_boundary:
            self.current_rank = None

    def parse(self, text: str) -> Dict[int, RankEntry]:
        for line in split_lines(text):
            self.feed(line)
        return self.ranks


def parse_result(text: str, config: EngineConfig = DEFAULT_CONFIG) -> Dict[int, RankEntry]:
    ranks = ResultParser(config).parse(text)
    logger.debug(f"result: {len(ranks)} rank groups parsed")
    return ranks
