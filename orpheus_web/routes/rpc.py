"""HTTP transport for RPC procedures."""

import json
from typing import Any, Optional

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from orpheus_common.config import Settings
from orpheus_common.errors import BadRequestError
from orpheus_common.storage import ObjectStorage
from orpheus_web.dependencies import (
    get_db_session,
    get_procedures,
    get_session_service,
    get_settings_state,
    get_storage,
)
from orpheus_web.rpc import CallContext, ProcedureRouter, dispatch
from orpheus_web.services.sessions import SessionService

router = APIRouter(prefix="/api/rpc", tags=["rpc"])


def _decode_input(raw: Optional[str | bytes], procedure: str) -> Any:
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError as exc:
        error = BadRequestError("Input is not valid JSON")
        error.procedure = procedure
        raise error from exc


def _context(
    request: Request,
    response: Response,
    session: Optional[AsyncSession] = Depends(get_db_session),
    settings: Settings = Depends(get_settings_state),
    sessions: SessionService = Depends(get_session_service),
    storage: ObjectStorage = Depends(get_storage),
) -> CallContext:
    return CallContext(
        request=request,
        response=response,
        session=session,
        settings=settings,
        sessions=sessions,
        storage=storage,
    )


@router.get("/{procedure}")
async def call_query(
    procedure: str,
    input: Optional[str] = None,
    ctx: CallContext = Depends(_context),
    procedures: ProcedureRouter = Depends(get_procedures),
):
    """Query procedures; input is JSON in the `input` query parameter."""
    result = await dispatch(procedures, procedure, _decode_input(input, procedure), ctx, method="GET")
    return {"result": result}


@router.post("/{procedure}")
async def call_procedure(
    procedure: str,
    request: Request,
    ctx: CallContext = Depends(_context),
    procedures: ProcedureRouter = Depends(get_procedures),
):
    """Any procedure; input is the JSON request body."""
    result = await dispatch(
        procedures,
        procedure,
        _decode_input(await request.body(), procedure),
        ctx,
        method="POST",
    )
    return {"result": result}
