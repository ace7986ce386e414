"""Session procedures: who am I, and log out."""

from orpheus_web.rpc import Access, CallContext, ProcedureRouter
from orpheus_web.services.sessions import session_cookie_options

router = ProcedureRouter()


@router.query("me", Access.PUBLIC)
async def me(ctx: CallContext, _input=None):
    return ctx.user.to_dict() if ctx.user is not None else None


@router.mutation("logout", Access.PUBLIC)
async def logout(ctx: CallContext, _input=None):
    options = session_cookie_options(ctx.request, ctx.settings.is_production)
    ctx.response.delete_cookie(ctx.sessions.cookie_name, **options)
    return {"success": True}
