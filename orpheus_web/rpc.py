"""
Procedure registry, authorization gate and dispatcher for the RPC surface.

A procedure is a named async handler with an access level and an optional
pydantic input model. Every call goes through ``dispatch``:

    access check -> input validation -> handler

so no handler (and no repository behind it) runs for a caller that is not
allowed to make the call.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Literal, Optional

from fastapi import Request, Response
from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from orpheus_common.config import Settings
from orpheus_common.errors import (
    NOT_ADMIN_ERR_MSG,
    UNAUTHED_ERR_MSG,
    BadRequestError,
    ForbiddenError,
    HttpError,
    InternalError,
    MethodNotAllowedError,
    NotFoundError,
    StorageUnavailableError,
    UnauthorizedError,
)
from orpheus_common.logging import get_logger
from orpheus_common.models.user import User
from orpheus_common.storage import ObjectStorage
from orpheus_web.services.sessions import SessionService
from orpheus_web.services.users import authenticate

logger = get_logger(__name__)

ProcedureKind = Literal["query", "mutation"]


class Access(str, enum.Enum):
    PUBLIC = "public"
    PROTECTED = "protected"
    ADMIN = "admin"


@dataclass
class CallContext:
    """Everything a handler may touch during one call."""

    request: Request
    response: Response
    session: Optional[AsyncSession]
    settings: Settings
    sessions: SessionService
    storage: ObjectStorage
    user: Optional[User] = None


Handler = Callable[[CallContext, Any], Awaitable[Any]]


@dataclass(frozen=True)
class Procedure:
    name: str
    access: Access
    handler: Handler
    input_model: Optional[type[BaseModel]] = None
    kind: ProcedureKind = "query"


@dataclass
class ProcedureRouter:
    """Flat registry of procedures keyed by dotted name."""

    procedures: dict[str, Procedure] = field(default_factory=dict)

    def procedure(
        self,
        name: str,
        access: Access,
        *,
        input: Optional[type[BaseModel]] = None,
        kind: ProcedureKind = "query",
    ) -> Callable[[Handler], Handler]:
        def decorator(handler: Handler) -> Handler:
            if name in self.procedures:
                raise ValueError(f"Procedure already registered: {name}")
            self.procedures[name] = Procedure(name, access, handler, input, kind)
            return handler

        return decorator

    def query(self, name: str, access: Access, **kwargs) -> Callable[[Handler], Handler]:
        return self.procedure(name, access, kind="query", **kwargs)

    def mutation(self, name: str, access: Access, **kwargs) -> Callable[[Handler], Handler]:
        return self.procedure(name, access, kind="mutation", **kwargs)

    def include(self, prefix: str, other: "ProcedureRouter") -> None:
        """Mount another router's procedures under `prefix.`."""
        for name, proc in other.procedures.items():
            full_name = f"{prefix}.{name}"
            if full_name in self.procedures:
                raise ValueError(f"Procedure already registered: {full_name}")
            self.procedures[full_name] = Procedure(
                full_name, proc.access, proc.handler, proc.input_model, proc.kind
            )

    def get(self, name: str) -> Procedure:
        try:
            return self.procedures[name]
        except KeyError:
            raise NotFoundError(f'No procedure found on path "{name}"') from None

    def names(self) -> list[str]:
        return sorted(self.procedures)


async def resolve_caller(access: Access, ctx: CallContext) -> Optional[User]:
    """
    Authorization gate.

    PUBLIC: the user is optional, a bad or missing session means anonymous.
    PROTECTED: a valid session is required.
    ADMIN: a valid session with the admin role is required.
    """
    try:
        user = await authenticate(ctx.request, ctx.session, ctx.sessions)
    except UnauthorizedError as exc:
        if access is Access.PUBLIC:
            return None
        raise UnauthorizedError(UNAUTHED_ERR_MSG) from exc
    except (StorageUnavailableError, OperationalError) as exc:
        # Public reads still degrade when the user store is unreachable
        if access is not Access.PUBLIC:
            if isinstance(exc, OperationalError):
                raise StorageUnavailableError() from exc
            raise
        logger.warning("caller_lookup_failed", error=str(exc))
        if ctx.session is not None:
            await ctx.session.rollback()
        return None

    if access is Access.ADMIN and not user.is_admin:
        raise ForbiddenError(NOT_ADMIN_ERR_MSG)
    return user


def _format_validation_error(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "input"
        parts.append(f"{location}: {error.get('msg', 'invalid value')}")
    return "; ".join(parts)


def parse_input(procedure: Procedure, raw_input: Any) -> Any:
    if procedure.input_model is None:
        return None
    try:
        return procedure.input_model.model_validate(raw_input if raw_input is not None else {})
    except ValidationError as exc:
        raise BadRequestError(_format_validation_error(exc)) from exc


async def dispatch(
    router: ProcedureRouter,
    name: str,
    raw_input: Any,
    ctx: CallContext,
    *,
    method: str = "POST",
) -> Any:
    """
    Run one procedure call.

    Raises:
        HttpError: tagged with the procedure name; anything unexpected is
            logged and turned into InternalError
    """
    try:
        procedure = router.get(name)
        if method == "GET" and procedure.kind != "query":
            raise MethodNotAllowedError(f'Procedure "{name}" is a mutation; use POST')

        ctx.user = await resolve_caller(procedure.access, ctx)
        payload = parse_input(procedure, raw_input)
        return await procedure.handler(ctx, payload)
    except HttpError as exc:
        exc.procedure = name
        log = logger.error if exc.status_code >= 500 else logger.warning
        log("rpc_call_failed", procedure=name, code=exc.code, error=exc.message)
        raise
    except Exception as exc:
        logger.exception("rpc_call_crashed", procedure=name, error=str(exc))
        error = InternalError("Internal server error")
        error.procedure = name
        raise error from exc
