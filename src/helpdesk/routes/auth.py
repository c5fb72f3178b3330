"""
Authentication and Authorization

JWT helpers plus the dependencies every protected route chains through:
get_current_user (authenticate) and the role gates built by require_role.
"""
import jwt
import logging
from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

from fastapi import HTTPException, Depends, Header

from ..config import Config
from ..models.user import User, UserRole
from ..services.engine_service import get_engine_service

logger = logging.getLogger("helpdesk.routes.auth")


# ============================================
# Helpers
# ============================================

def create_token(user: User, expires_in: Optional[timedelta] = None) -> str:
    """Create JWT token for user"""
    expiration = datetime.utcnow() + (expires_in or timedelta(hours=Config.JWT_EXPIRATION_HOURS))
    payload = {
        "user_id": str(user.id),
        "email": user.email,
        "role": user.role.value,
        "exp": expiration,
        "iss": Config.JWT_ISSUER,
        "aud": Config.JWT_AUDIENCE,
    }
    return jwt.encode(payload, Config.JWT_SECRET, algorithm=Config.JWT_ALGORITHM)


def verify_token(token: str) -> Optional[dict]:
    """Verify and decode JWT token"""
    try:
        return jwt.decode(
            token,
            Config.JWT_SECRET,
            algorithms=[Config.JWT_ALGORITHM],
            issuer=Config.JWT_ISSUER,
            audience=Config.JWT_AUDIENCE,
        )
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired token")
        return None
    except jwt.InvalidTokenError:
        return None


# ============================================
# Dependencies
# ============================================

async def get_current_user(authorization: str = Header(None)) -> dict:
    """Dependency to get current authenticated user"""
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Access token required")

    token = authorization[len("Bearer "):].strip()
    if not token:
        raise HTTPException(status_code=401, detail="Access token required")

    payload = verify_token(token)
    if not payload or "user_id" not in payload:
        raise HTTPException(status_code=401, detail="Invalid token")

    try:
        user_id = UUID(payload["user_id"])
    except (ValueError, TypeError):
        raise HTTPException(status_code=401, detail="Invalid token")

    # Re-read the user so deleted accounts and role changes take effect immediately
    engine = get_engine_service()
    user = await engine.users_service.get_user(user_id)
    if not user:
        logger.warning(f"Token for unknown user {user_id}")
        raise HTTPException(status_code=401, detail="Invalid token - user not found")

    return {
        "user_id": user.id,
        "email": user.email,
        "role": user.role,
        "department_id": user.department_id,
        "name": user.name,
    }


def require_role(*allowed_roles: UserRole):
    """Build a dependency admitting only the given roles"""
    allowed = frozenset(allowed_roles)

    async def dependency(current_user: dict = Depends(get_current_user)) -> dict:
        if current_user["role"] not in allowed:
            logger.info(
                f"User {current_user['user_id']} ({current_user['role'].value}) "
                f"denied, requires one of {sorted(r.value for r in allowed)}"
            )
            raise HTTPException(
                status_code=403,
                detail="Insufficient permissions to access this resource",
            )
        return current_user

    return dependency


require_admin = require_role(UserRole.ADMIN)
require_agent = require_role(UserRole.AGENT, UserRole.ADMIN)
require_employee = require_role(UserRole.EMPLOYEE, UserRole.AGENT, UserRole.ADMIN)
