from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, status
from sqlalchemy.orm import Session

from studio_api.core.config import settings
from studio_api.core.database import get_db
from studio_api.core.deps import get_clock, get_dispatcher
from studio_api.services.business_time import BusinessClock
from studio_api.services.notifications import NotificationDispatcher
from studio_api.services.reminders import run_daily_reminder


router = APIRouter()


@router.post("/daily-reminders")
def daily_reminders(
    dry_run: bool = Query(False),
    x_cron_secret: Optional[str] = Header(None),
    db: Session = Depends(get_db),
    clock: BusinessClock = Depends(get_clock),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    if not settings.cron_secret or x_cron_secret != settings.cron_secret:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")

    result = run_daily_reminder(db, clock, dispatcher, dry_run=dry_run)
    return {"ok": True, **result}
