"""
Shared fixtures: in-memory storages standing in for PostgreSQL, an engine
wired to them, users per role and an HTTP client for the app.
"""
from dataclasses import replace
from datetime import datetime
from typing import Optional

import pytest
from fastapi.testclient import TestClient

from helpdesk.app import app
from helpdesk.models import Department, Notification, Ticket, User, UserRole
from helpdesk.routes.auth import create_token
from helpdesk.services.engine_service import EngineService, set_engine_service


class FakeDatabase:
    """Tables shared by the fake storages"""

    def __init__(self):
        self.users = {}
        self.departments = {}
        self.tickets = {}
        self.notifications = {}


class FakeStorage:
    def __init__(self, db: FakeDatabase):
        self.db = db

    async def init(self):
        pass

    async def close(self):
        pass


class FakeUserStorage(FakeStorage):

    async def create(self, user: User) -> User:
        self.db.users[user.id] = replace(user)
        return replace(user)

    async def get_by_id(self, user_id):
        user = self.db.users.get(user_id)
        return replace(user) if user else None

    async def exists_by_email(self, email):
        return any(u.email == email.lower() for u in self.db.users.values())

    async def list_by_department(self, department_id):
        users = [u for u in self.db.users.values() if u.department_id == department_id]
        return [replace(u) for u in sorted(users, key=lambda u: u.name)]

    async def list_staff_by_department(self, department_id, roles, offset=0, limit=10):
        users = [
            u for u in self.db.users.values()
            if u.department_id == department_id and u.role in roles
        ]
        page = sorted(users, key=lambda u: u.name)[offset:offset + limit]
        return [
            replace(u, assigned_ticket_count=sum(
                1 for t in self.db.tickets.values() if t.assigned_to_id == u.id
            ))
            for u in page
        ]

    async def count_by_department(self, department_id, roles=None):
        return sum(
            1 for u in self.db.users.values()
            if u.department_id == department_id and (not roles or u.role in roles)
        )

    async def list_ids_by_role(self, role, department_id=None):
        users = [
            u for u in self.db.users.values()
            if u.role == role and (department_id is None or u.department_id == department_id)
        ]
        return [u.id for u in sorted(users, key=lambda u: u.name)]


class FakeDepartmentStorage(FakeStorage):

    def _load(self, department: Department) -> Department:
        return replace(
            department,
            keywords=list(department.keywords),
            user_count=sum(
                1 for u in self.db.users.values() if u.department_id == department.id
            ),
            ticket_count=sum(
                1 for t in self.db.tickets.values() if t.department_id == department.id
            ),
        )

    async def create(self, department: Department) -> Department:
        self.db.departments[department.id] = replace(department)
        return self._load(department)

    async def get_by_id(self, department_id):
        department = self.db.departments.get(department_id)
        return self._load(department) if department else None

    async def get_by_name(self, name):
        for department in self.db.departments.values():
            if department.name == name:
                return self._load(department)
        return None

    async def list_page(self, offset=0, limit=10):
        departments = sorted(self.db.departments.values(), key=lambda d: d.name)
        return [self._load(d) for d in departments[offset:offset + limit]]

    async def count(self):
        return len(self.db.departments)

    async def update(self, department: Department) -> Department:
        self.db.departments[department.id] = replace(
            department, updated_at=datetime.utcnow()
        )
        return self._load(self.db.departments[department.id])

    async def delete(self, department_id):
        return self.db.departments.pop(department_id, None) is not None


class FakeTicketStorage(FakeStorage):

    def _in_department(self, department_id):
        return [t for t in self.db.tickets.values() if t.department_id == department_id]

    async def list_by_department(self, department_id, offset=0, limit=10):
        tickets = sorted(
            self._in_department(department_id), key=lambda t: t.created_at, reverse=True
        )
        result = []
        for ticket in tickets[offset:offset + limit]:
            creator = self.db.users[ticket.created_by_id]
            assignee = self.db.users.get(ticket.assigned_to_id)
            result.append(replace(
                ticket,
                created_by=creator.to_brief(),
                assigned_to=assignee.to_brief() if assignee else None,
                response_count=0,
            ))
        return result

    async def count_by_department(self, department_id):
        return len(self._in_department(department_id))

    async def count_by_status(self, department_id):
        counts = {}
        for ticket in self._in_department(department_id):
            counts[ticket.status] = counts.get(ticket.status, 0) + 1
        return counts

    async def count_by_priority(self, department_id):
        counts = {}
        for ticket in self._in_department(department_id):
            counts[ticket.priority] = counts.get(ticket.priority, 0) + 1
        return counts

    async def count_created_since(self, department_id, since):
        return sum(1 for t in self._in_department(department_id) if t.created_at >= since)


class FakeNotificationStorage(FakeStorage):

    def _matching(self, user_id, type=None, read=None, ticket_id=None):
        return [
            n for n in self.db.notifications.values()
            if n.target_user_id == user_id
            and (type is None or n.type == type)
            and (read is None or n.read == read)
            and (ticket_id is None or n.ticket_id == ticket_id)
        ]

    async def create(self, notification: Notification) -> Notification:
        self.db.notifications[notification.id] = replace(notification)
        return replace(notification)

    async def create_many(self, notifications):
        for notification in notifications:
            self.db.notifications[notification.id] = replace(notification)
        return [replace(n) for n in notifications]

    async def get_for_user(self, notification_id, user_id):
        notification = self.db.notifications.get(notification_id)
        if notification and notification.target_user_id == user_id:
            return replace(notification)
        return None

    async def list_by_user(self, user_id, offset=0, limit=20, type=None, read=None, ticket_id=None):
        notifications = sorted(
            self._matching(user_id, type, read, ticket_id),
            key=lambda n: n.created_at,
            reverse=True,
        )
        return [replace(n) for n in notifications[offset:offset + limit]]

    async def count_by_user(self, user_id, type=None, read=None, ticket_id=None):
        return len(self._matching(user_id, type, read, ticket_id))

    async def count_by_type(self, user_id):
        counts = {}
        for notification in self._matching(user_id):
            counts[notification.type.value] = counts.get(notification.type.value, 0) + 1
        return counts

    async def mark_read(self, notification_id, read_at):
        notification = self.db.notifications.get(notification_id)
        if not notification:
            return None
        notification.read = True
        notification.read_at = read_at
        return replace(notification)

    async def mark_all_read(self, user_id, read_at):
        unread = self._matching(user_id, read=False)
        for notification in unread:
            notification.read = True
            notification.read_at = read_at
        return len(unread)

    async def delete(self, notification_id):
        return self.db.notifications.pop(notification_id, None) is not None


# ============================================
# Fixtures
# ============================================

@pytest.fixture
def db():
    return FakeDatabase()


@pytest.fixture
def engine(db):
    service = EngineService(
        user_storage=FakeUserStorage(db),
        department_storage=FakeDepartmentStorage(db),
        ticket_storage=FakeTicketStorage(db),
        notification_storage=FakeNotificationStorage(db),
    )
    set_engine_service(service)
    yield service
    set_engine_service(None)


@pytest.fixture
def client(engine):
    return TestClient(app)


@pytest.fixture
def make_department(db):
    def _make(name: str = "IT Support", keywords=None) -> Department:
        department = Department(name=name, keywords=keywords or ["laptop", "vpn"])
        db.departments[department.id] = department
        return department
    return _make


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(
        role: UserRole = UserRole.EMPLOYEE,
        department: Optional[Department] = None,
        name: Optional[str] = None,
    ) -> User:
        counter["n"] += 1
        n = counter["n"]
        user = User(
            email=f"user{n}@example.com",
            name=name or f"{role.value.title()} {n}",
            password_hash="not-a-real-hash",
            role=role,
            department_id=department.id if department else None,
        )
        db.users[user.id] = user
        return user
    return _make


@pytest.fixture
def make_ticket(db):
    def _make(department: Department, created_by: User, **fields) -> Ticket:
        ticket = Ticket(
            title=fields.pop("title", "Printer is on fire"),
            department_id=department.id,
            created_by_id=created_by.id,
            **fields,
        )
        db.tickets[ticket.id] = ticket
        return ticket
    return _make


@pytest.fixture
def make_notification(db):
    def _make(user: User, **fields) -> Notification:
        notification = Notification(
            message=fields.pop("message", "Something happened"),
            target_user_id=user.id,
            **fields,
        )
        db.notifications[notification.id] = notification
        return notification
    return _make


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict:
        return {"Authorization": f"Bearer {create_token(user)}"}
    return _headers


@pytest.fixture
def admin(make_user):
    return make_user(UserRole.ADMIN, name="Alice Admin")


@pytest.fixture
def employee(make_user):
    return make_user(UserRole.EMPLOYEE, name="Erin Employee")
