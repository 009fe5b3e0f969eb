from fastapi import APIRouter, Depends, HTTPException, status, Request, Header
from sqlalchemy.orm import Session
from typing import Optional
import logging

from ..database import get_db
from ..services.notifications import NotificationDispatcher, get_notification_dispatcher
from ..services.payment_webhook import PaymentWebhookHandler, WebhookSignatureError
from ..utils.rate_limiter import limiter, get_rate_limit

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/payments", tags=["Payments"])


@router.post("/webhook")
@limiter.limit(get_rate_limit("webhook"))
async def payment_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(None, alias="Stripe-Signature"),
    db: Session = Depends(get_db),
    notifier: NotificationDispatcher = Depends(get_notification_dispatcher)
):
    """Payment processor events; the raw body is needed for the signature"""
    body = await request.body()
    handler = PaymentWebhookHandler(db, notifier=notifier)
    try:
        return handler.handle(body, stripe_signature)
    except WebhookSignatureError as e:
        logger.warning(f"Rejected payment webhook: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
