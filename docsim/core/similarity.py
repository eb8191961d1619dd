from rapidfuzz.distance import JaroWinkler


def jaro_winkler_similarity(first: str, second: str) -> float:
    """
    Jaro-Winkler similarity of two normalized strings, in [0.0, 1.0].

    Shared prefixes and characters in the same order score higher than
    raw edit distance would suggest. A single empty input scores 0.0.
    """
    if not first or not second:
        return 1.0 if first == second else 0.0
    return float(JaroWinkler.similarity(first, second, prefix_weight=0.1))
