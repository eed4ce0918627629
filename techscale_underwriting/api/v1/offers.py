"""GET /v1/offers/{offer_id} and POST /v1/offers/{offer_id}/status"""

import uuid
import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from techscale_underwriting.api.v1.schemas import OfferSchema, OfferStatusRequest, offer_schema_from_record
from techscale_underwriting.infrastructure.database.session import get_db
from techscale_underwriting.infrastructure.database.repositories import OfferRepository
from techscale_underwriting.infrastructure.database.models import LoanOfferRecord
from techscale_underwriting.domain.exceptions import OfferStatusError
from techscale_underwriting.domain.models import OfferStatus
from techscale_underwriting.domain.offers import effective_offer_status, transition_offer_status
from techscale_underwriting.utils.date_utils import utc_now

router = APIRouter()


def _load_offer(offer_id: str, repo: OfferRepository) -> LoanOfferRecord:
    try:
        offer_uuid = uuid.UUID(offer_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid offer ID format")

    offer = repo.get_offer_by_id(offer_uuid)
    if not offer:
        raise HTTPException(status_code=404, detail="Offer not found")
    return offer


@router.get("/offers/{offer_id}", response_model=OfferSchema)
def get_offer(offer_id: str, db: Session = Depends(get_db)):
    """
    Retrieve an offer with its repayment schedule and terms.

    Pending offers past their 14-day window are reported as expired.
    """
    offer = _load_offer(offer_id, OfferRepository(db))
    status = effective_offer_status(OfferStatus(offer.status), offer.offer_valid_until)
    return offer_schema_from_record(offer).model_copy(update={"status": status.value})


@router.post("/offers/{offer_id}/status", response_model=OfferSchema)
def update_offer_status(offer_id: str, request_body: OfferStatusRequest, db: Session = Depends(get_db)):
    """Accept or decline a pending offer"""
    repo = OfferRepository(db)
    offer = _load_offer(offer_id, repo)
    now = utc_now()

    try:
        new_status = transition_offer_status(
            OfferStatus(offer.status),
            OfferStatus(request_body.status),
            offer.offer_valid_until,
            now,
        )
    except OfferStatusError as e:
        logging.warning(f"Offer status change refused: {e}", extra={"offer_id": offer_id})
        raise HTTPException(status_code=409, detail=str(e))

    repo.update_status(offer, new_status, now)
    db.commit()
    return offer_schema_from_record(offer)
