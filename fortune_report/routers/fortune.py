from fastapi import APIRouter, Depends, Request

from ..core.errors import UnexpectedError
from ..schemas.fortune import ErrorResponse, FortuneResponse
from ..services.fortune import FortuneReportService

router = APIRouter()

# CORS 预检请求由中间件在路由之前处理
OTHER_METHODS = ["GET", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


def get_report_service(request: Request) -> FortuneReportService:
    service = getattr(request.app.state, "report_service", None)
    if service is None:
        raise UnexpectedError("Report service is not initialized")
    return service


@router.post(
    "/fortune",
    response_model=FortuneResponse,
    summary="Generate a 2026 Auspicious Year Report",
    responses={
        400: {"model": ErrorResponse},
        405: {"model": ErrorResponse},
        410: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def generate_fortune(request: Request, service: FortuneReportService = Depends(get_report_service)):
    """
    POST JSON ``{"dob": "08DEC1977", "language": "en" | "zh"}``.

    The raw body is parsed by the service itself so malformed JSON and a bad
    ``dob`` map to the report error envelope rather than FastAPI's 422.
    """
    html = await service.handle(request.method, await request.body())
    return FortuneResponse(html=html)


@router.api_route("/fortune", methods=OTHER_METHODS, include_in_schema=False)
async def fortune_wrong_method(request: Request, service: FortuneReportService = Depends(get_report_service)):
    # 走同一入口，由服务层返回 405
    html = await service.handle(request.method, None)
    return FortuneResponse(html=html)
