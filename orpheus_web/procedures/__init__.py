"""
RPC procedures grouped by entity.

`build_router()` mounts every group under its prefix, e.g. `photos.list`.
"""

from orpheus_web.procedures import auth, content, search, settings, system, upload
from orpheus_web.rpc import ProcedureRouter


def build_router() -> ProcedureRouter:
    router = ProcedureRouter()
    router.include("system", system.router)
    router.include("auth", auth.router)
    router.include("photos", content.photos)
    router.include("essays", content.essays)
    router.include("papers", content.papers)
    router.include("backgrounds", content.backgrounds)
    router.include("search", search.router)
    router.include("upload", upload.router)
    router.include("settings", settings.router)
    return router


app_router = build_router()

__all__ = ["app_router", "build_router"]
