"""Subscription activation for successful plan payments."""

import calendar
import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models import Payment, Subscription
from app.models.base import utcnow
from app.domain.settlement.enums import SubscriptionStatus

logger = logging.getLogger(__name__)

DEFAULT_PLAN = "Growth"


def add_one_month(moment: datetime) -> datetime:
    year = moment.year + (1 if moment.month == 12 else 0)
    month = moment.month % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def activate_subscription(db: Session, payment: Payment) -> Subscription | None:
    """
    Upsert the paying user's subscription as active for one month.

    Runs inside the reconciliation unit; does not commit. Quick payments
    without a user are skipped.
    """
    if payment.user_id is None:
        logger.info(f"Payment {payment.reference} has no user; skipping subscription upgrade")
        return None

    plan = (payment.details or {}).get("plan_name") or DEFAULT_PLAN
    renewal = add_one_month(utcnow())

    subscription = db.execute(
        select(Subscription).where(Subscription.user_id == payment.user_id)
    ).scalars().first()

    if subscription is None:
        subscription = Subscription(user_id=payment.user_id, plan=plan)
        db.add(subscription)

    subscription.plan = plan
    subscription.status = SubscriptionStatus.ACTIVE
    subscription.billing_cycle = "monthly"
    subscription.renewal_date = renewal
    db.flush()

    logger.info(f"Subscription for user {payment.user_id} active on plan {plan} until {renewal:%Y-%m-%d}")
    return subscription
