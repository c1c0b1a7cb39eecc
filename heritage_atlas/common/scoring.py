"""Fuzzy address scoring between a survey row and a heritage candidate."""

from __future__ import annotations

from heritage_atlas.common.address import address_tokens, extract_house_number, normalize_address

DEFAULT_WEIGHTS = {
    "house_number": 4,
    "token_overlap": 1,
    "substring": 4,
}


def token_overlap(left: set[str], right: set[str]) -> int:
    return len(left & right)


def score_candidate(
    source_address: str,
    source_name: str,
    candidate_address_norm: str,
    candidate_site_name_norm: str,
    *,
    weights: dict | None = None,
) -> tuple[int, dict]:
    """Score one candidate. Candidate strings are expected to be normalised already.

    Three signals accumulate independently: equal house numbers, shared tokens
    across address and name, and one normalised address containing the other.
    """
    weights = {**DEFAULT_WEIGHTS, **(weights or {})}
    address_a = normalize_address(source_address)
    name_a = normalize_address(source_name)
    address_b = candidate_address_norm
    name_b = candidate_site_name_norm

    score = 0
    applied_signals: list[str] = []

    number_a = extract_house_number(address_a)
    number_b = extract_house_number(address_b)
    if number_a and number_b and number_a == number_b:
        score += int(weights["house_number"])
        applied_signals.append("house_number")

    shared = token_overlap(
        address_tokens(address_a) | address_tokens(name_a),
        address_tokens(address_b) | address_tokens(name_b),
    )
    if shared:
        score += shared * int(weights["token_overlap"])
        applied_signals.append("token_overlap")

    if address_a and address_b and (address_a in address_b or address_b in address_a):
        score += int(weights["substring"])
        applied_signals.append("substring")

    explanation = {
        "applied_signals": applied_signals,
        "shared_tokens": shared,
        "score": score,
    }
    return score, explanation
