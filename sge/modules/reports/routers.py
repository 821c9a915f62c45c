# sge/modules/reports/routers.py
from fastapi import APIRouter, Depends, Path
from fastapi.responses import Response

from sge.core.security import CurrentUser
from .services import ReportService, get_report_service

reports_router = APIRouter()


@reports_router.get("/{resource}.csv", summary="Export a resource as CSV", tags=["Reports"])
async def export_csv(
    current_user: CurrentUser,
    resource: str = Path(..., description="clients, financial, people, kpis, alerts ou items"),
    report_service: ReportService = Depends(get_report_service),
) -> Response:
    filename, content = await report_service.export_csv(current_user.company_id, resource)
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
