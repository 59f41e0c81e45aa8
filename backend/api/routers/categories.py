"""
Category API endpoints.

Routes:
- GET /categories - List categories
- POST /categories - Create category (global admins)
- PATCH /categories/{id} - Rename or describe category (global admins)

Dependencies: backend.application.services, backend.models
System role: Category HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends

from backend.api.deps.dependencies import get_category_service, get_current_user
from backend.api.routers.router_utils import handle_domain_errors
from backend.application.services.activity_type_service import CategoryService
from backend.boundary.db.models.user_model import UserModel
from backend.models.challenge import CategoryRequest, CategoryResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=list[CategoryResponse])
@handle_domain_errors
async def list_categories(
    current_user: UserModel = Depends(get_current_user),
    category_service: CategoryService = Depends(get_category_service),
) -> list[CategoryResponse]:
    categories = await category_service.list_categories()
    return [CategoryResponse(**c) for c in categories]


@router.post("", response_model=CategoryResponse, status_code=201)
@handle_domain_errors
async def create_category(
    request: CategoryRequest,
    current_user: UserModel = Depends(get_current_user),
    category_service: CategoryService = Depends(get_category_service),
) -> CategoryResponse:
    category = await category_service.create_category(
        current_user, name=request.name or "", description=request.description
    )
    return CategoryResponse(**category)


@router.patch("/{category_id}", response_model=CategoryResponse)
@handle_domain_errors
async def update_category(
    category_id: UUID,
    request: CategoryRequest,
    current_user: UserModel = Depends(get_current_user),
    category_service: CategoryService = Depends(get_category_service),
) -> CategoryResponse:
    category = await category_service.update_category(
        current_user, category_id, name=request.name, description=request.description
    )
    return CategoryResponse(**category)
