"""Admin asset upload procedures."""

from orpheus_web.rpc import Access, CallContext, ProcedureRouter
from orpheus_web.schemas import ImageUploadInput, PdfUploadInput
from orpheus_web.services import uploads

router = ProcedureRouter()


@router.mutation("image", Access.ADMIN, input=ImageUploadInput)
async def upload_image(ctx: CallContext, payload: ImageUploadInput):
    return await uploads.upload_image(
        ctx.storage,
        ctx.settings.storage,
        filename=payload.filename,
        content_type=payload.content_type,
        base64_data=payload.base64_data,
    )


@router.mutation("pdf", Access.ADMIN, input=PdfUploadInput)
async def upload_pdf(ctx: CallContext, payload: PdfUploadInput):
    return await uploads.upload_pdf(
        ctx.storage,
        ctx.settings.storage,
        filename=payload.filename,
        base64_data=payload.base64_data,
        content_type=payload.content_type,
    )
