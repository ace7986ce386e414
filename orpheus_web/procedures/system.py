"""Liveness and owner notification procedures."""

from typing import Optional

from pydantic import Field

from orpheus_common.logging import get_logger
from orpheus_web.rpc import Access, CallContext, ProcedureRouter
from orpheus_web.schemas import RpcInput

logger = get_logger(__name__)

router = ProcedureRouter()


class HealthInput(RpcInput):
    timestamp: Optional[float] = Field(default=None, ge=0)


class NotifyOwnerInput(RpcInput):
    title: str = Field(min_length=1)
    content: str = Field(min_length=1)


@router.query("health", Access.PUBLIC, input=HealthInput)
async def health(ctx: CallContext, payload: HealthInput):
    return {"ok": True}


@router.mutation("notifyOwner", Access.ADMIN, input=NotifyOwnerInput)
async def notify_owner(ctx: CallContext, payload: NotifyOwnerInput):
    # No mail or webhook transport is configured; the notification is only logged
    logger.info("owner_notification", title=payload.title, content=payload.content, user_id=ctx.user.id)
    return {"success": True, "message": "Notification logged (email service not configured)"}
