from pydantic import BaseModel, Field, model_validator
from typing import Optional, Dict, List

from .config import ID_MAX, ID_MIN, ROSTER_MAX
from .validators import normalize_username


class SlotRoster(BaseModel):
    slot: int = Field(ge=ID_MIN, le=ID_MAX)
    players: List[str] = Field(default_factory=list, max_length=ROSTER_MAX)

    def add_player(self, name: str, max_roster: int = ROSTER_MAX) -> bool:
        # no-op when full or when the normalized name is already on the roster
        if len(self.players) >= min(max_roster, ROSTER_MAX):
            return False
        key = normalize_username(name)
        if any(normalize_username(p) == key for p in self.players):
            return False
        self.players.append(name)
        return True


class RankEntry(BaseModel):
    rank: int = Field(ge=ID_MIN, le=ID_MAX)
    players: List[str] = []
    kills: List[int] = []

    @model_validator(mode="after")
    def _aligned(self):
        if len(self.players) != len(self.kills):
            raise ValueError("players and kills must have equal length")
        if any(k < 0 for k in self.kills):
            raise ValueError("kills must be >= 0")
        return self

    def record(self, player: str, kills: int) -> None:
        if kills < 0:
            raise ValueError("kills must be >= 0")
        self.players.append(player)
        self.kills.append(kills)


class ReconciledSlot(BaseModel):
    slot: int = Field(ge=ID_MIN, le=ID_MAX)
    rank: Optional[int] = Field(None, ge=ID_MIN, le=ID_MAX)
    teamKills: Optional[int] = None
    players: List[str] = []
    playerKills: List[Optional[int]] = []

    @property
    def complete(self) -> bool:
        return self.rank is not None


class MatchSummary(BaseModel):
    slots: int
    complete: int
    missing: int
    blocks123Lines: int
    blocks45Lines: int
    generatedAt: str


class MatchOutput(BaseModel):
    slots: List[str]
    ranks: List[str]
    teamKills: List[str]
    players: List[str]
    playerKills: List[str]
    summary: MatchSummary

    def blocks(self) -> Dict[str, str]:
        return {
            "block1": "\n".join(self.slots),
            "block2": "\n".join(self.ranks),
            "block3": "\n".join(self.teamKills),
            "block4": "\n".join(self.players),
            "block5": "\n".join(self.playerKills),
        }


class ParseTextRequest(BaseModel):
    lobbyText: str = ""
    resultText: str = ""


class ExtractResponse(BaseModel):
    game: str = "bgmi"
    output: MatchOutput
    blocks: Dict[str, str]
    reconciled: List[ReconciledSlot]
    raw: Dict[str, str]
    droppedImages: List[int] = []


class ClassifiedImage(BaseModel):
    index: int
    filename: Optional[str] = None
    label: str
    counts: Dict[str, int]


class ClassifyResponse(BaseModel):
    images: List[ClassifiedImage]
