"""
Department Routes

Department lifecycle (admins), lookups (authenticated users) and the
staff-only agents/tickets/stats sub-resources.
"""
import logging
from uuid import UUID

from fastapi import APIRouter, HTTPException, Depends

from ..errors import ApiResponse
from ..models.user import UserRole
from ..schemas import (
    CreateDepartmentRequest,
    UpdateDepartmentRequest,
    PaginationParams,
    pagination_meta,
)
from ..services.engine_service import get_engine_service
from .auth import get_current_user, require_admin, require_agent

logger = logging.getLogger("helpdesk.routes.departments")
router = APIRouter(prefix="/departments", tags=["departments"])


# ============================================
# Helpers
# ============================================

def _check_department_access(current_user: dict, department_id: UUID, detail: str):
    """Agents are confined to their own department"""
    if current_user["role"] == UserRole.AGENT and current_user["department_id"] != department_id:
        raise HTTPException(status_code=403, detail=detail)


async def _get_department_or_404(department_id: UUID):
    engine = get_engine_service()
    department = await engine.department_service.get_department(department_id)
    if not department:
        raise HTTPException(status_code=404, detail="Department not found")
    return department


# ============================================
# Routes
# ============================================

@router.post("", status_code=201)
@router.post("/", status_code=201)
async def create_department(
    request: CreateDepartmentRequest,
    current_user: dict = Depends(require_admin),
):
    """Create a new department (admin only)"""
    engine = get_engine_service()

    try:
        department = await engine.department_service.create_department(
            name=request.name,
            keywords=request.keywords,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(f"Department {department.name} created by {current_user['user_id']}")
    return ApiResponse.success("Department created successfully", department.to_dict())


@router.get("")
@router.get("/")
async def list_departments(pagination: PaginationParams = Depends()):
    """List departments (no authentication required)"""
    engine = get_engine_service()
    departments, total = await engine.department_service.list_departments(
        pagination.offset, pagination.limit
    )
    return ApiResponse.success("Departments retrieved successfully", {
        "departments": [d.to_dict() for d in departments],
        "pagination": pagination_meta(pagination.page, pagination.limit, total),
    })


@router.get("/{department_id}")
async def get_department(
    department_id: UUID,
    current_user: dict = Depends(get_current_user),
):
    """Get department by ID with its members"""
    _check_department_access(
        current_user, department_id, "You can only access your own department"
    )
    department = await _get_department_or_404(department_id)

    engine = get_engine_service()
    members = await engine.department_service.get_members(department_id)
    users = [u.to_member() for u in members]
    return ApiResponse.success(
        "Department retrieved successfully", department.to_dict(users=users)
    )


@router.put("/{department_id}")
async def update_department(
    department_id: UUID,
    request: UpdateDepartmentRequest,
    current_user: dict = Depends(require_admin),
):
    """Update department (admin only)"""
    engine = get_engine_service()

    try:
        department = await engine.department_service.update_department(
            department_id,
            name=request.name,
            keywords=request.keywords,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not department:
        raise HTTPException(status_code=404, detail="Department not found")

    return ApiResponse.success("Department updated successfully", department.to_dict())


@router.delete("/{department_id}")
async def delete_department(
    department_id: UUID,
    current_user: dict = Depends(require_admin),
):
    """Delete an empty department (admin only)"""
    engine = get_engine_service()

    try:
        deleted = await engine.department_service.delete_department(department_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not deleted:
        raise HTTPException(status_code=404, detail="Department not found")

    return ApiResponse.success("Department deleted successfully")


@router.get("/{department_id}/agents")
async def get_department_agents(
    department_id: UUID,
    current_user: dict = Depends(require_agent),
    pagination: PaginationParams = Depends(),
):
    """Agents and admins of a department"""
    _check_department_access(
        current_user, department_id, "You can only access agents from your own department"
    )
    department = await _get_department_or_404(department_id)

    engine = get_engine_service()
    agents, total = await engine.department_service.list_agents(
        department_id, pagination.offset, pagination.limit
    )
    return ApiResponse.success("Department agents retrieved successfully", {
        "department": department.to_brief(),
        "agents": [a.to_dict() for a in agents],
        "pagination": pagination_meta(pagination.page, pagination.limit, total),
    })


@router.get("/{department_id}/tickets")
async def get_department_tickets(
    department_id: UUID,
    current_user: dict = Depends(require_agent),
    pagination: PaginationParams = Depends(),
):
    """Tickets of a department, newest first"""
    _check_department_access(
        current_user, department_id, "You can only access tickets from your own department"
    )
    department = await _get_department_or_404(department_id)

    engine = get_engine_service()
    tickets, total = await engine.department_service.list_tickets(
        department_id, pagination.offset, pagination.limit
    )
    return ApiResponse.success("Department tickets retrieved successfully", {
        "department": department.to_brief(),
        "tickets": [t.to_dict() for t in tickets],
        "pagination": pagination_meta(pagination.page, pagination.limit, total),
    })


@router.get("/{department_id}/stats")
async def get_department_stats(
    department_id: UUID,
    current_user: dict = Depends(require_agent),
):
    """Ticket and staffing statistics"""
    _check_department_access(
        current_user, department_id, "You can only access stats from your own department"
    )
    department = await _get_department_or_404(department_id)

    engine = get_engine_service()
    stats = await engine.department_service.get_statistics(department)
    return ApiResponse.success("Department statistics retrieved successfully", stats)
