"""Ratio helper shared by the calculators."""


def calculate_ratio(numerator: float, denominator: float) -> float:
    """
    Divide, resolving a zero denominator to a sentinel instead of raising.

    Returns:
        inf (signed like the numerator) when the denominator is 0, nan when
        both are 0
    """
    if denominator == 0:
        if numerator == 0:
            return float("nan")
        return float("inf") if numerator > 0 else float("-inf")
    return numerator / denominator
