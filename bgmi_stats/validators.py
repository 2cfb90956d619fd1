import re
from collections import Counter
from typing import List, Optional

from Levenshtein import ratio as lev_ratio

# "/0 Eliminations", "/O Elimination", "/o Elims" ...
ELIM_SUFFIX_RE = re.compile(r"/\s*[0oO]\s*Elim[a-z]*", re.IGNORECASE)
LEADING_ID_RE = re.compile(r"^\s*\d{1,2}\s+")
MULTI_SPACE_RE = re.compile(r"\s{2,}")

# characters OCR swaps for letters inside in-game names
CONFUSABLES = str.maketrans({"0": "o", "1": "l", "5": "s"})


def normalize_username(name: str):
    return re.sub(r"[^a-z0-9]", "", (name or "").lower())


def fold_confusables(normalized: str):
    return normalized.translate(CONFUSABLES)


def clean_player_name(name: str):
    # strip elimination suffix, a leading slot/rank number and doubled spaces
    name = ELIM_SUFFIX_RE.sub("", name or "")
    name = LEADING_ID_RE.sub("", name)
    return MULTI_SPACE_RE.sub(" ", name).strip()


def strip_elim_suffix(text: str):
    return ELIM_SUFFIX_RE.sub("", text or "").strip()


def has_elim_suffix(text: str):
    return ELIM_SUFFIX_RE.search(text or "") is not None


def _bigrams(s: str):
    return Counter(s[i:i + 2] for i in range(len(s) - 1))


def dice_similarity(a: str, b: str) -> float:
    """Dice coefficient over the multisets of overlapping bigrams of *a* and *b*.

    Inputs are expected to be normalized already. Strings shorter than two
    characters have no bigrams, so they only ever match themselves exactly.
    """
    if a == b:
        return 1.0
    if len(a) < 2 or len(b) < 2:
        return 0.0
    shared = sum((_bigrams(a) & _bigrams(b)).values())
    return (2.0 * shared) / ((len(a) - 1) + (len(b) - 1))


def levenshtein_similarity(a: str, b: str) -> float:
    if a == b:
        return 1.0
    if len(a) < 2 or len(b) < 2:
        return 0.0
    return lev_ratio(a, b)


METRICS = {
    "dice": dice_similarity,
    "levenshtein": levenshtein_similarity,
}


def name_similarity(a: str, b: str, metric: str = "dice", fold: bool = True) -> float:
    na, nb = normalize_username(a), normalize_username(b)
    if fold:
        na, nb = fold_confusables(na), fold_confusables(nb)
    # names with nothing left after normalization (symbols, non-latin) carry no identity
    if not na or not nb:
        return 0.0
    return METRICS[metric](na, nb)


def best_match_index(name: str, candidates: List[str], threshold: float,
                     metric: str = "dice", fold: bool = True) -> Optional[int]:
    # first candidate with the strictly highest score above threshold wins
    best_idx, best_sim = None, threshold
    for i, cand in enumerate(candidates):
        s = name_similarity(name, cand, metric, fold)
        if s > best_sim:
            best_idx, best_sim = i, s
    return best_idx


def match_score(roster: List[str], rank_players: List[str], threshold: float,
                metric: str = "dice", fold: bool = True) -> int:
    # how many roster names plausibly appear in the rank group
    score = 0
    for name in roster:
        if any(name_similarity(name, rp, metric, fold) > threshold for rp in rank_players):
            score += 1
    return score
