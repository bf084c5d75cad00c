import io
from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import StreamingResponse
from starlette import status
from schemas.dashboard_schemas import QuickAction
from schemas.notification_schemas import ActionResponse
from services.quick_actions import QuickActions
from utils.deps import admin_dependency, repository_dependency
from middleware.rate_limiter import limiter
from utils.logger import get_logger

# Setup logger
logger = get_logger(__name__)


router = APIRouter(
    prefix="/admin",
    tags=["dashboard"]
)


@router.get("/dashboard/quick-actions", response_model=list[QuickAction])
async def quick_actions(admin: admin_dependency):
    return QuickActions.navigation()


@router.get("/reports/orders.csv", responses={200: {"content": {"text/csv": {}}}})
@limiter.limit("10/minute")
async def orders_report(request: Request, admin: admin_dependency, repository: repository_dependency):
    """
    Download every order as CSV.

    With no orders there is no file: the response is the "No Data" notice.
    """
    actions = QuickActions(repository)
    try:
        report = actions.generate_report()

        if actions.last_error:
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=actions.last_error)

        if report is None:
            return ActionResponse(success=False, notifications=actions.notifier.drain())

        logger.info(
            "Orders report downloaded",
            extra={"admin_id": admin.get("user_id"), "bytes": len(report.content)}
        )

        return StreamingResponse(
            io.BytesIO(report.content),
            media_type=report.media_type,
            headers={"Content-Disposition": f'attachment; filename="{report.filename}"'},
        )
    finally:
        actions.unmount()
