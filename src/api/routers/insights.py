"""Automated insights and notification endpoints."""

from fastapi import APIRouter, Depends

from src.api.dependencies import get_client, get_notifications
from src.api.models import NotificationResponse
from src.services.insights.client import InsightsClient
from src.services.insights.models import AutomatedInsight
from src.services.notifications.center import NotificationCenter

router = APIRouter()


@router.get("/insights", response_model=list[AutomatedInsight])
async def list_insights(
    client: InsightsClient = Depends(get_client),
) -> list[AutomatedInsight]:
    """Fetch automated insights."""
    return await client.fetch_automated_insights()


@router.get("/notifications", response_model=list[NotificationResponse])
async def list_notifications(
    notifications: NotificationCenter = Depends(get_notifications),
) -> list[NotificationResponse]:
    """Active (not yet expired) notifications."""
    return [
        NotificationResponse(id=n.id, type=n.type, message=n.message, duration=n.duration)
        for n in notifications.active()
    ]


@router.delete("/notifications/{notification_id}", status_code=204)
async def dismiss_notification(
    notification_id: str,
    notifications: NotificationCenter = Depends(get_notifications),
) -> None:
    """Dismiss a notification."""
    notifications.dismiss(notification_id)
