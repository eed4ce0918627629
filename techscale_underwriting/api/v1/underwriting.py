"""POST /v1/underwriting - risk assessment and offer generation endpoint"""

import time
import logging
from fastapi import APIRouter, Depends, HTTPException, BackgroundTasks, Request
from sqlalchemy.orm import Session

from techscale_underwriting.api.v1.schemas import (
    AssessmentSchema,
    UnderwritingRequest,
    UnderwritingResponse,
    offer_schema_from_record,
    score_detail_schema,
)
from techscale_underwriting.api.dependencies import get_notification_client, get_request_id
from techscale_underwriting.infrastructure.database.session import get_db
from techscale_underwriting.infrastructure.database.repositories import (
    AssessmentRepository,
    OfferRepository,
    RuleRepository,
)
from techscale_underwriting.infrastructure.clients.notifications import NotificationClient
from techscale_underwriting.domain import notifications
from techscale_underwriting.domain.exceptions import UnderwritingConfigurationError
from techscale_underwriting.domain.offers import generate_offer
from techscale_underwriting.domain.underwriting import UnderwritingEngine, application_status_for
from techscale_underwriting.infrastructure.observability.metrics import record_underwriting
from techscale_underwriting.infrastructure.observability.logging import log_underwriting_outcome

router = APIRouter()


@router.post("/underwriting", response_model=UnderwritingResponse)
def run_underwriting(
    request_body: UnderwritingRequest,
    background_tasks: BackgroundTasks,
    request: Request,
    db: Session = Depends(get_db),
    notification_client: NotificationClient = Depends(get_notification_client),
):
    """
    Assess a submitted application and price an offer.

    Flow:
    1. Load active underwriting rules (none → 503)
    2. Compute risk assessment
    3. Generate offer unless declined
    4. Persist assessment + offer
    5. Queue status-change and offer notifications
    6. Return assessment and offer
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        # 1-2. Rules gate the engine; assessment itself never fails
        engine = UnderwritingEngine(RuleRepository(db).get_active_rules())
        assessment = engine.assess(request_body.application)

        # 3. Offer (None when declined)
        offer = generate_offer(request_body.application, assessment)

        # 4. Persist
        db_assessment = AssessmentRepository(db).create_assessment(
            application_id=request_body.application_id,
            user_id=request_body.user_id,
            assessment=assessment,
        )
        db_offer = None
        if offer is not None:
            db_offer = OfferRepository(db).create_offer(
                assessment_id=db_assessment.id,
                application_id=request_body.application_id,
                user_id=request_body.user_id,
                offer=offer,
            )

        db.commit()

        # 5. Notifications go out only after the records are committed
        new_status = application_status_for(assessment.decision)
        background_tasks.add_task(
            notification_client.send,
            notifications.application_status_change(
                request_body.user_id, request_body.application_id, new_status.value
            ),
        )
        if db_offer is not None:
            background_tasks.add_task(
                notification_client.send,
                notifications.offer_available(request_body.user_id, str(db_offer.id), offer),
            )

        duration_ms = (time.time() - start_time) * 1000
        offer_type = offer.offer_type.value if offer is not None else None
        record_underwriting(assessment.decision.value, assessment.risk_tier.value, offer_type)
        log_underwriting_outcome(
            request_id,
            request_body.application_id,
            assessment.risk_score,
            assessment.risk_tier.value,
            assessment.decision.value,
            offer_type,
            duration_ms,
        )

        return UnderwritingResponse(
            application_id=request_body.application_id,
            application_status=new_status.value,
            assessment=AssessmentSchema(
                assessment_id=str(db_assessment.id),
                risk_score=assessment.risk_score,
                risk_tier=assessment.risk_tier.value,
                decision=assessment.decision.value,
                affordability=score_detail_schema(assessment.affordability),
                education=score_detail_schema(assessment.education),
                employment=score_detail_schema(assessment.employment),
                sponsor=score_detail_schema(assessment.sponsor),
                factors=assessment.factors,
                rules_applied=assessment.rules_applied,
            ),
            offer=offer_schema_from_record(db_offer) if db_offer is not None else None,
        )

    except UnderwritingConfigurationError as e:
        db.rollback()
        logging.warning(f"Underwriting not configured: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail=str(e))

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")
