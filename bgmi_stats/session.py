"""Per-request state for one lobby/result extraction.

A ``MatchSession`` collects OCR text per image, then runs
parse -> cross-reference -> serialize. Nothing is kept between sessions.
"""

import logging
from datetime import datetime
from typing import List, Optional

from .classify import LOBBY, RESULT
from .config import DEFAULT_CONFIG, EngineConfig
from .exceptions import NoSlotsDetectedError
from .lobby import parse_lobby
from .models import MatchOutput, ReconciledSlot
from .output import serialize, summary_line
from .reconcile import cross_reference
from .result import parse_result

logger = logging.getLogger(__name__)


class MatchSession:

    def __init__(self, config: EngineConfig = DEFAULT_CONFIG):
        self.config = config
        self.lobby_texts: List[str] = []
        self.result_texts: List[str] = []
        self.dropped: List[int] = []
        self.reconciled: List[ReconciledSlot] = []
        self.output: Optional[MatchOutput] = None
        self._lobby_override: Optional[str] = None
        self._result_override: Optional[str] = None

    @classmethod
    def from_text(cls, lobby_text: str, result_text: str, config: EngineConfig = DEFAULT_CONFIG):
        # re-parse path: the caller already holds joined (possibly hand-edited) text
        session = cls(config)
        session._lobby_override = lobby_text or ""
        session._result_override = result_text or ""
        return session

    def add_text(self, text: str, label: str) -> None:
        """Add one image's OCR text under its tag; unknown-tagged text is ignored."""
        if label == LOBBY:
            self.lobby_texts.append(text)
        elif label == RESULT:
            self.result_texts.append(text)
        else:
            logger.warning(f"Ignoring OCR text with label {label!r}")

    @property
    def lobby_text(self) -> str:
        if self._lobby_override is not None:
            return self._lobby_override
        return self.config.boundary_separator.join(self.lobby_texts)

    @property
    def result_text(self) -> str:
        if self._result_override is not None:
            return self._result_override
        return self.config.boundary_separator.join(self.result_texts)

    def run(self, generated_at: Optional[str] = None) -> MatchOutput:
        """Parse both streams, reconcile and serialize.

        Raises:
            NoSlotsDetectedError: The lobby text held no slot number at all.
        """
        lobby_text, result_text = self.lobby_text, self.result_text

        slots = parse_lobby(lobby_text, self.config)
        ranks = parse_result(result_text, self.config)
        logger.info(f"Parsed {len(slots)} lobby slots and {len(ranks)} result ranks")

        self.reconciled = cross_reference(slots, ranks, self.config)
        if not self.reconciled:
            raise NoSlotsDetectedError(lobby_text, result_text)

        stamp = generated_at or datetime.now().strftime("%d/%b · %I:%M %p")
        self.output = serialize(self.reconciled, self.config, stamp)
        logger.info(summary_line(self.output.summary))
        return self.output
