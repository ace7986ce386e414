"""Site-wide search procedure."""

from orpheus_web.rpc import Access, CallContext, ProcedureRouter
from orpheus_web.schemas import SearchInput
from orpheus_web.services.content import search_content

router = ProcedureRouter()


@router.query("query", Access.PUBLIC, input=SearchInput)
async def query(ctx: CallContext, payload: SearchInput):
    return await search_content(ctx.session, payload.q, payload.type)
