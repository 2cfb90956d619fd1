"""Flatten reconciled slots into the five paste-ready columns.

Blocks 1-3 have one row per slot (slot, rank, team kills). Blocks 4-5 have
``rows_per_slot`` rows per slot (player name, player kills), padded with the
empty sentinel. Unknown values and zero kills both render as the sentinel.
"""

from typing import List, Optional, Sequence

from .config import DEFAULT_CONFIG, EngineConfig
from .models import MatchOutput, MatchSummary, ReconciledSlot


def cell(value, sentinel: str) -> str:
    if value is None or value == 0 or value == "":
        return sentinel
    return str(value)


def serialize(reconciled: Sequence[ReconciledSlot], config: EngineConfig = DEFAULT_CONFIG,
              generated_at: Optional[str] = None) -> MatchOutput:
    empty = config.empty_sentinel
    rows = config.rows_per_slot
    b1: List[str] = []
    b2: List[str] = []
    b3: List[str] = []
    b4: List[str] = []
    b5: List[str] = []
    complete = 0

    for d in sorted(reconciled, key=lambda r: r.slot):
        if d.complete:
            complete += 1
        b1.append(str(d.slot))
        b2.append(cell(d.rank, empty))
        b3.append(cell(d.teamKills, empty))

        players = d.players[:rows]
        kills = d.playerKills[:rows]
        for r in range(rows):
            b4.append(cell(players[r], empty) if r < len(players) else empty)
            b5.append(cell(kills[r], empty) if r < len(kills) else empty)

    n = len(b1)
    summary = MatchSummary(
        slots=n,
        complete=complete,
        missing=n - complete,
        blocks123Lines=n,
        blocks45Lines=n * rows,
        generatedAt=generated_at or "",
    )
    return MatchOutput(slots=b1, ranks=b2, teamKills=b3, players=b4, playerKills=b5,
                       summary=summary)


def summary_line(summary: MatchSummary) -> str:
    return (
        f"Processed {summary.slots} slots  ·  Blocks 1–3: {summary.blocks123Lines} lines  ·  "
        f"Blocks 4–5: {summary.blocks45Lines} lines  ·  {summary.complete} complete  ·  "
        f"{summary.missing} missing"
    )
