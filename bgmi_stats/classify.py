"""Tag one image's OCR text as lobby, result or unknown, and group tagged texts.

The tag comes from keyword frequency: lobby screens repeat "/0 Eliminations"
under every player, result screens repeat "N finishes".
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from .config import DEFAULT_CONFIG, EngineConfig

logger = logging.getLogger(__name__)

LOBBY = "lobby"
RESULT = "result"
UNKNOWN = "unknown"


def keyword_counts(text: str, config: EngineConfig = DEFAULT_CONFIG) -> Dict[str, int]:
    low = (text or "").lower()
    return {
        family: sum(low.count(k.lower()) for k in words)
        for family, words in config.keywords.items()
    }


def classify_text(text: str, config: EngineConfig = DEFAULT_CONFIG) -> str:
    counts = keyword_counts(text, config)
    elim = counts.get("elimination", 0)
    fin = counts.get("finish", 0)

    if elim and fin:
        # ties go to lobby
        return LOBBY if elim >= fin else RESULT
    if elim:
        return LOBBY
    if fin:
        return RESULT
    # "N remaining" only shows on the lobby screen
    if counts.get("remaining", 0):
        return LOBBY
    return UNKNOWN


def group_texts(texts: Sequence[str], labels: Optional[Sequence[str]] = None,
                config: EngineConfig = DEFAULT_CONFIG) -> Tuple[str, str, List[int]]:
    """Join per-image texts into one lobby stream and one result stream.

    Images keep their submission order inside each stream and are separated
    by the boundary marker. Texts labelled unknown are left out; their
    indices are returned so the caller can report them.

    Args:
        texts: OCR text per image, in submission order.
        labels: Pre-computed tags; computed with ``classify_text`` when omitted.

    Returns:
        ``(lobby_text, result_text, dropped_indices)``.
    """
    if labels is None:
        labels = [classify_text(t, config) for t in texts]
    lobby, result, dropped = [], [], []
    for i, (text, label) in enumerate(zip(texts, labels)):
        if label == LOBBY:
            lobby.append(text)
        elif label == RESULT:
            result.append(text)
        else:
            dropped.append(i)
            logger.warning(f"Image {i} matched neither lobby nor result keywords, skipped")

    sep = config.boundary_separator
    return sep.join(lobby), sep.join(result), dropped
