"""
Users Service

User lookup for authentication and account creation for seeding.
"""
import logging
import re
import bcrypt
from typing import Optional
from uuid import UUID

from ..config import Config
from ..models.user import User, UserRole
from ..storage.user_storage import UserStorage

logger = logging.getLogger("helpdesk.services.users")


class UsersService:
    """Service for user management"""

    def __init__(self, user_storage: UserStorage):
        self.user_storage = user_storage

    async def create_user(
        self,
        email: str,
        name: str,
        password: str,
        role: UserRole = UserRole.EMPLOYEE,
        department_id: Optional[UUID] = None,
        avatar_url: Optional[str] = None
    ) -> User:
        """
        Create a new user.

        Raises:
            ValueError: If the email is malformed or already registered
        """
        email = email.lower().strip()

        if not self._is_valid_email(email):
            raise ValueError(f"Invalid email format: {email}")

        if await self.user_storage.exists_by_email(email):
            raise ValueError(f"User with email '{email}' already exists")

        user = User(
            email=email,
            name=name.strip(),
            password_hash=self.hash_password(password),
            role=role,
            department_id=department_id,
            avatar_url=avatar_url,
        )

        created_user = await self.user_storage.create(user)
        logger.info(f"Created user: {created_user.name} <{created_user.email}> as {created_user.role.value}")
        return created_user

    async def get_user(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        return await self.user_storage.get_by_id(user_id)

    @staticmethod
    def hash_password(password: str) -> str:
        """Hash password using bcrypt"""
        salt = bcrypt.gensalt(rounds=Config.PASSWORD_SALT_ROUNDS)
        return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')

    def _is_valid_email(self, email: str) -> bool:
        """Validate email format"""
        pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
        return bool(re.match(pattern, email))
