from fastapi import APIRouter, Depends

from sikshasetu.core.auth_deps import get_services, get_session_context
from sikshasetu.core.deps import current_page
from sikshasetu.core.errors import AppError
from sikshasetu.core.http_errors import to_http
from sikshasetu.core.types import PageType
from sikshasetu.services.auth_service import SessionContext
from sikshasetu.services.container import AppServices

router = APIRouter()


@router.get("/pages")
def render_page(
    page: PageType = Depends(current_page),
    ctx: SessionContext = Depends(get_session_context),
    services: AppServices = Depends(get_services),
):
    try:
        return services.pages.render(page, ctx)
    except AppError as e:
        raise to_http(e)
