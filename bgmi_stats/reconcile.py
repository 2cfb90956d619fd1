import logging
from typing import Dict, List

from .config import DEFAULT_CONFIG, EngineConfig
from .models import RankEntry, ReconciledSlot, SlotRoster
from .validators import best_match_index, match_score

logger = logging.getLogger(__name__)


def pick_rank(players: List[str], ranks: Dict[int, RankEntry], used: set,
              config: EngineConfig = DEFAULT_CONFIG):
    # ascending scan, strictly-greater keeps the lowest rank on ties
    best_rank, best_score = None, 0
    for rank in sorted(ranks):
        if rank in used:
            continue
        score = match_score(players, ranks[rank].players, config.thresholds.candidate,
                            config.similarity_metric, config.fold_confusables)
        if score > best_score:
            best_rank, best_score = rank, score
    return best_rank, best_score


def player_kills(players: List[str], entry: RankEntry, config: EngineConfig = DEFAULT_CONFIG):
    # each roster name is looked up on its own; two names may land on the same result row
    kills = []
    for name in players:
        idx = best_match_index(name, entry.players, config.thresholds.assign,
                               config.similarity_metric, config.fold_confusables)
        kills.append(entry.kills[idx] if idx is not None else None)
    return kills


def cross_reference(slots: Dict[int, SlotRoster], ranks: Dict[int, RankEntry],
                    config: EngineConfig = DEFAULT_CONFIG) -> List[ReconciledSlot]:
    """Link every lobby slot to at most one result rank by player-name overlap.

    Covers the full range between the lowest and highest slot seen; slots
    missing from the lobby text come back as empty placeholders. Slots are
    served in ascending order and each rank is handed out once, so an early
    slot with a weak match can take a rank a later slot would have matched
    better.

    Returns:
        One ``ReconciledSlot`` per slot number, sorted. Empty when no slot
        was parsed at all.
    """
    if not slots:
        return []

    out = []
    used = set()
    for slot in range(min(slots), max(slots) + 1):
        roster = slots.get(slot)
        if roster is None or not roster.players:
            out.append(ReconciledSlot(slot=slot))
            continue

        players = list(roster.players)
        rank, score = pick_rank(players, ranks, used, config)
        if rank is None:
            logger.info(f"Slot {slot}: no result rank matched {len(players)} players")
            out.append(ReconciledSlot(slot=slot, players=players))
            continue

        used.add(rank)
        kills = player_kills(players, ranks[rank], config)
        team = sum(k for k in kills if k is not None)
        logger.debug(f"Slot {slot} -> rank {rank} (score {score}, team kills {team})")
        out.append(ReconciledSlot(slot=slot, rank=rank, teamKills=team,
                                  players=players, playerKills=kills))
    return out
