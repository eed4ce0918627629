"""Sponsor matching - pairs an application with the best-fitting third-party funder"""

import re
from typing import Iterable, List, Optional, Tuple
from techscale_underwriting.domain.models import LoanApplication, Sponsor, SponsorMatch
from techscale_underwriting.utils.numbers import parse_amount

MATCH_FLOOR = 50

FIELD_POINTS = 30
COUNTRY_POINTS = 25
FUNDING_RANGE_POINTS = 20
CAREER_FOCUS_POINTS = 15
CAPACITY_POINTS = 10


def _requested_amount(application: LoanApplication) -> float:
    """Requested loan amount, falling back to the programme's total cost; 0 when neither parses"""
    amount = parse_amount(application.loan_type_request.amount)
    if amount is None:
        amount = parse_amount(application.program_info.total_cost)
    return amount or 0.0


def _matches_field(application: LoanApplication, sponsor: Sponsor) -> bool:
    program = application.program_info
    subjects = [s.lower() for s in (program.program_name, program.field_of_study) if s.strip()]
    for tag in sponsor.expertise:
        tag = tag.strip().lower()
        if not tag:
            continue
        # Whole words only, so "art" does not match "startups"
        pattern = re.compile(rf"\b{re.escape(tag)}\b")
        if any(pattern.search(subject) for subject in subjects):
            return True
    return False


def _matches_country(application: LoanApplication, sponsor: Sponsor) -> bool:
    program = application.program_info
    country = program.country.strip().lower()
    institution = program.institution.strip().lower()
    for supported in sponsor.countries_supported:
        supported = supported.strip().lower()
        if not supported:
            continue
        if supported == country or (institution and supported in institution):
            return True
    return False


def _matches_career_focus(application: LoanApplication, sponsor: Sponsor) -> bool:
    purpose = application.loan_type_request.purpose.lower()
    return bool(purpose) and any(
        focus.strip() and focus.strip().lower() in purpose for focus in sponsor.career_focus
    )


def score_sponsor(application: LoanApplication, sponsor: Sponsor) -> Tuple[int, List[str]]:
    """
    Score a sponsor against an application, out of 100.

    Criteria:
    - 30: programme / field of study in the sponsor's expertise
    - 25: destination country (or institution) supported
    - 20: requested amount within [min_funding, max_funding]
    - 15: loan purpose mentions one of the sponsor's career focuses
    - 10: sponsor has remaining capacity

    Returns: (score, reasons)
    """
    score = 0
    reasons = []

    if _matches_field(application, sponsor):
        score += FIELD_POINTS
        reasons.append("field of study")

    if _matches_country(application, sponsor):
        score += COUNTRY_POINTS
        reasons.append("destination country")

    amount = _requested_amount(application)
    if sponsor.min_funding <= amount <= sponsor.max_funding:
        score += FUNDING_RANGE_POINTS
        reasons.append("funding range")

    if _matches_career_focus(application, sponsor):
        score += CAREER_FOCUS_POINTS
        reasons.append("career goals")

    if sponsor.current_capacity > 0:
        score += CAPACITY_POINTS
        reasons.append("available capacity")

    return min(score, 100), reasons


def find_best_match(
    application: LoanApplication, candidates: Iterable[Sponsor]
) -> Optional[SponsorMatch]:
    """
    Pick the highest-scoring active sponsor with capacity.

    Ties keep input order. A best score under 50 is treated as no match and
    returns None; so does an empty or fully ineligible candidate list.
    """
    scored = []
    for sponsor in candidates:
        if not sponsor.active or sponsor.current_capacity <= 0:
            continue
        score, reasons = score_sponsor(application, sponsor)
        scored.append((score, reasons, sponsor))

    if not scored:
        return None

    # sorted() is stable, so equal scores stay in database order
    best_score, reasons, best = sorted(scored, key=lambda item: item[0], reverse=True)[0]
    if best_score < MATCH_FLOOR:
        return None

    return SponsorMatch(
        sponsor_id=best.sponsor_id,
        sponsor_name=best.name,
        match_score=best_score,
        reason=f"Matched on {', '.join(reasons)}",
        funding_available=best.max_funding,
        expertise=list(best.expertise),
    )
