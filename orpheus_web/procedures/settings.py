"""Site settings procedures."""

from orpheus_web.rpc import Access, CallContext, ProcedureRouter
from orpheus_web.schemas import SettingKeyInput, SettingSetInput
from orpheus_web.services.site_settings import SettingsRepository

router = ProcedureRouter()


@router.query("get", Access.PUBLIC, input=SettingKeyInput)
async def get_setting(ctx: CallContext, payload: SettingKeyInput):
    return await SettingsRepository(ctx.session).get(payload.key)


@router.query("all", Access.PUBLIC)
async def all_settings(ctx: CallContext, _input=None):
    return await SettingsRepository(ctx.session).all()


@router.mutation("set", Access.ADMIN, input=SettingSetInput)
async def set_setting(ctx: CallContext, payload: SettingSetInput):
    return await SettingsRepository(ctx.session).set(payload.key, payload.value)
