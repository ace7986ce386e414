"""Photo, essay, paper and background procedures."""

from orpheus_web.rpc import Access, CallContext, ProcedureRouter
from orpheus_web.schemas import (
    BackgroundCreate,
    BackgroundListInput,
    BackgroundUpdate,
    EssayCreate,
    EssayUpdate,
    IdInput,
    PaperCreate,
    PaperUpdate,
    PhotoCreate,
    PhotoListInput,
    PhotoUpdate,
    PublishableListInput,
    RpcInput,
)
from orpheus_web.services.content import (
    BackgroundRepository,
    ContentRepository,
    EssayRepository,
    PaperRepository,
    PhotoRepository,
)


def register_crud(
    router: ProcedureRouter,
    repository: type[ContentRepository],
    create_model: type[RpcInput],
    update_model: type[RpcInput],
    get_access: Access = Access.PUBLIC,
) -> None:
    """Add get/create/update/delete procedures backed by one repository."""

    @router.query("get", get_access, input=IdInput)
    async def get_item(ctx: CallContext, payload: IdInput):
        return await repository(ctx.session).get(payload.id)

    @router.mutation("create", Access.ADMIN, input=create_model)
    async def create_item(ctx: CallContext, payload: RpcInput):
        return await repository(ctx.session).create(payload.provided())

    @router.mutation("update", Access.ADMIN, input=update_model)
    async def update_item(ctx: CallContext, payload: RpcInput):
        return await repository(ctx.session).update(payload.id, payload.provided(exclude={"id"}))

    @router.mutation("delete", Access.ADMIN, input=IdInput)
    async def delete_item(ctx: CallContext, payload: IdInput):
        return await repository(ctx.session).delete(payload.id)


photos = ProcedureRouter()


@photos.query("list", Access.PUBLIC, input=PhotoListInput)
async def list_photos(ctx: CallContext, payload: PhotoListInput):
    return await PhotoRepository(ctx.session).list(**payload.provided())


register_crud(photos, PhotoRepository, PhotoCreate, PhotoUpdate)


essays = ProcedureRouter()


@essays.query("list", Access.PUBLIC, input=PublishableListInput)
async def list_published_essays(ctx: CallContext, payload: PublishableListInput):
    filters = payload.provided()
    filters["published"] = True
    return await EssayRepository(ctx.session).list(**filters)


@essays.query("listAll", Access.ADMIN, input=PublishableListInput)
async def list_all_essays(ctx: CallContext, payload: PublishableListInput):
    return await EssayRepository(ctx.session).list(**payload.provided())


register_crud(essays, EssayRepository, EssayCreate, EssayUpdate)


papers = ProcedureRouter()


@papers.query("list", Access.PUBLIC, input=PublishableListInput)
async def list_published_papers(ctx: CallContext, payload: PublishableListInput):
    filters = payload.provided()
    filters["published"] = True
    return await PaperRepository(ctx.session).list(**filters)


@papers.query("listAll", Access.ADMIN, input=PublishableListInput)
async def list_all_papers(ctx: CallContext, payload: PublishableListInput):
    return await PaperRepository(ctx.session).list(**payload.provided())


register_crud(papers, PaperRepository, PaperCreate, PaperUpdate)


backgrounds = ProcedureRouter()


@backgrounds.query("list", Access.PUBLIC, input=BackgroundListInput)
async def list_active_backgrounds(ctx: CallContext, payload: BackgroundListInput):
    filters = payload.provided()
    filters["active"] = True
    return await BackgroundRepository(ctx.session).list(**filters)


@backgrounds.query("listAll", Access.ADMIN, input=BackgroundListInput)
async def list_all_backgrounds(ctx: CallContext, payload: BackgroundListInput):
    return await BackgroundRepository(ctx.session).list(**payload.provided())


register_crud(backgrounds, BackgroundRepository, BackgroundCreate, BackgroundUpdate, get_access=Access.ADMIN)
