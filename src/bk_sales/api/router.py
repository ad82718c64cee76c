"""bk_sales REST API: all endpoints require JWT authentication.

POST  /sales                    create a sale (clients)
GET   /sales                    list sales; clients only ever see their own
GET   /sales/statistics         aggregate figures (staff)
GET   /sales/{sale_id}          one sale; clients only their own
PATCH /sales/{sale_id}/status   payment status / order progress (staff)
"""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_common.database import get_db_session
from src.bk_common.response import ApiResponse, success_response
from src.bk_gateway.auth.dependencies import get_current_user, require_staff
from src.bk_gateway.user.db_models import UserModel
from src.bk_sales.application.schemas import CreateSaleRequest, UpdateSaleStatusRequest
from src.bk_sales.application.service import SalesApplicationService

router = APIRouter(prefix="/sales", tags=["sales"])

_service = SalesApplicationService()


# Declared before /{sale_id} so "statistics" is not captured as an id
@router.get("/statistics")
async def get_statistics(
    request: Request,
    current_user: Annotated[UserModel, Depends(require_staff)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.get_statistics(db)
    return success_response(data.model_dump(), request)


@router.post("", status_code=201)
async def create_sale(
    body: CreateSaleRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.create_sale(db, str(current_user.id), body)
    resp = success_response(data.model_dump(), request)
    resp.message = "Sale created"
    return resp


@router.get("")
async def list_sales(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    user_id: str | None = Query(None, description="Only sales of this buyer (staff)"),
    start_date: date | None = Query(None, description="Inclusive, YYYY-MM-DD"),
    end_date: date | None = Query(None, description="Inclusive, YYYY-MM-DD"),
) -> ApiResponse:
    if not current_user.is_staff:
        user_id = str(current_user.id)
    data = await _service.list_sales(db, user_id, start_date, end_date)
    return success_response(data.model_dump(), request)


@router.get("/{sale_id}")
async def get_sale(
    sale_id: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    owner_id = None if current_user.is_staff else str(current_user.id)
    data = await _service.get_sale(db, sale_id, owner_id)
    return success_response(data.model_dump(), request)


@router.patch("/{sale_id}/status")
async def update_sale_status(
    sale_id: str,
    body: UpdateSaleStatusRequest,
    request: Request,
    background: BackgroundTasks,
    current_user: Annotated[UserModel, Depends(require_staff)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.update_sale_status(db, sale_id, body, background)
    resp = success_response(data.model_dump(), request)
    resp.message = "Sale updated"
    return resp
