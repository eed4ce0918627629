"""POST /v1/sponsor-match - match an application to a third-party sponsor"""

import logging
from dataclasses import asdict
from fastapi import APIRouter, BackgroundTasks, Depends

from techscale_underwriting.api.v1.schemas import SponsorMatchRequest, SponsorMatchResponse, SponsorMatchSchema
from techscale_underwriting.api.dependencies import get_notification_client
from techscale_underwriting.infrastructure.clients.notifications import NotificationClient
from techscale_underwriting.domain import notifications
from techscale_underwriting.domain.sponsors import find_best_match
from techscale_underwriting.infrastructure.observability.metrics import record_sponsor_match

router = APIRouter()


@router.post("/sponsor-match", response_model=SponsorMatchResponse)
def sponsor_match(
    request_body: SponsorMatchRequest,
    background_tasks: BackgroundTasks,
    notification_client: NotificationClient = Depends(get_notification_client),
):
    """
    Pick the best sponsor among the supplied candidates.

    A null match is a normal outcome (no sponsor scored 50+). Capacity is not
    decremented here; the assignment routine owns that.
    """
    match = find_best_match(request_body.application, request_body.sponsors)
    record_sponsor_match(match is not None)

    if match is None:
        logging.info("No sponsor match", extra={"application_id": request_body.application_id})
        return SponsorMatchResponse(match=None)

    if request_body.user_id and request_body.application_id:
        background_tasks.add_task(
            notification_client.send,
            notifications.application_status_change(
                request_body.user_id,
                request_body.application_id,
                "sponsor-matched",
                notes=f"Matched with {match.sponsor_name} ({match.match_score}/100)",
            ),
        )

    return SponsorMatchResponse(match=SponsorMatchSchema(**asdict(match)))
