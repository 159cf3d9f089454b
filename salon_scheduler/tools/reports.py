from fastapi import APIRouter, Depends

from salon_scheduler.context import RequestContext
from salon_scheduler.dependencies.services import get_commission_report_service, get_request_context
from salon_scheduler.schemas.reports import CommissionReportRequest, CommissionReportResponse
from salon_scheduler.services import CommissionReportService
from salon_scheduler.services.exceptions import ServiceError
from salon_scheduler.tools.errors import to_http_exception

router = APIRouter()


@router.post("/commissions", response_model=CommissionReportResponse)
async def commission_report(
    req: CommissionReportRequest,
    service: CommissionReportService = Depends(get_commission_report_service),
    context: RequestContext = Depends(get_request_context),
):
    try:
        return await service.monthly(req, context)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
