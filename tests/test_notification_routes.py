"""
Tests for the /api/notifications endpoints.
"""
from datetime import datetime, timedelta
from uuid import uuid4

from helpdesk.models import NotificationType, UserRole


def test_list_only_own_notifications(client, employee, admin, auth_headers, make_notification):
    now = datetime.utcnow()
    make_notification(employee, message="first", created_at=now - timedelta(minutes=5))
    make_notification(employee, message="second", created_at=now, read=True)
    make_notification(admin, message="not yours")

    response = client.get("/api/notifications", headers=auth_headers(employee))

    body = response.json()
    assert response.status_code == 200
    assert body["message"] == "Notifications retrieved successfully"
    assert [n["message"] for n in body["data"]["notifications"]] == ["second", "first"]
    assert body["data"]["unread_count"] == 1
    assert body["data"]["pagination"]["total_count"] == 2


def test_list_filters(client, employee, auth_headers, make_notification):
    make_notification(employee, type=NotificationType.SLA_WARNING)
    make_notification(employee, type=NotificationType.SLA_WARNING, read=True)
    make_notification(employee, type=NotificationType.TICKET_CREATED)

    response = client.get(
        "/api/notifications?type=SLA_WARNING&read=false", headers=auth_headers(employee)
    )

    data = response.json()["data"]
    assert len(data["notifications"]) == 1
    assert data["notifications"][0]["type"] == "SLA_WARNING"
    assert data["unread_count"] == 2


def test_list_filters_by_ticket(client, employee, auth_headers, make_notification):
    ticket_id = uuid4()
    make_notification(employee, message="about the ticket", ticket_id=ticket_id)
    make_notification(employee, message="about another ticket", ticket_id=uuid4())
    make_notification(employee, message="no ticket")

    response = client.get(
        f"/api/notifications?ticket_id={ticket_id}", headers=auth_headers(employee)
    )

    data = response.json()["data"]
    assert response.status_code == 200
    assert [n["message"] for n in data["notifications"]] == ["about the ticket"]
    assert data["notifications"][0]["ticket_id"] == str(ticket_id)
    assert data["pagination"]["total_count"] == 1


def test_list_rejects_huge_page(client, employee, auth_headers):
    response = client.get(
        "/api/notifications?page=100000000000000000000", headers=auth_headers(employee)
    )

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "page"


def test_list_default_page_size(client, employee, auth_headers, make_notification):
    for _ in range(25):
        make_notification(employee)

    response = client.get("/api/notifications", headers=auth_headers(employee))

    data = response.json()["data"]
    assert len(data["notifications"]) == 20
    assert data["pagination"]["total_pages"] == 2


def test_list_rejects_unknown_type(client, employee, auth_headers):
    response = client.get("/api/notifications?type=NOPE", headers=auth_headers(employee))

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "type"


def test_stats(client, employee, auth_headers, make_notification):
    make_notification(employee, type=NotificationType.SLA_WARNING)
    make_notification(employee, type=NotificationType.SLA_WARNING, read=True)
    make_notification(employee, type=NotificationType.ASSIGNMENT)

    response = client.get("/api/notifications/stats", headers=auth_headers(employee))

    assert response.json()["data"] == {
        "total_count": 3,
        "unread_count": 2,
        "read_count": 1,
        "type_breakdown": {"SLA_WARNING": 2, "ASSIGNMENT": 1},
    }


def test_mark_read(client, db, employee, auth_headers, make_notification):
    notification = make_notification(employee)

    response = client.patch(
        f"/api/notifications/{notification.id}/read", headers=auth_headers(employee)
    )

    data = response.json()["data"]
    assert response.status_code == 200
    assert response.json()["message"] == "Notification marked as read"
    assert data["read"] is True
    assert data["read_at"] is not None
    assert db.notifications[notification.id].read is True


def test_mark_read_keeps_first_read_time(client, employee, auth_headers, make_notification):
    read_at = datetime(2024, 1, 1, 12, 0)
    notification = make_notification(employee, read=True, read_at=read_at)

    response = client.patch(
        f"/api/notifications/{notification.id}/read", headers=auth_headers(employee)
    )

    assert response.json()["data"]["read_at"] == read_at.isoformat()


def test_mark_read_of_someone_else(client, employee, admin, auth_headers, make_notification):
    notification = make_notification(admin)

    response = client.patch(
        f"/api/notifications/{notification.id}/read", headers=auth_headers(employee)
    )

    assert response.status_code == 404
    assert response.json()["message"] == "Notification not found"


def test_mark_read_rejects_bad_id(client, employee, auth_headers):
    response = client.patch("/api/notifications/123/read", headers=auth_headers(employee))

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "notification_id"


def test_mark_all_read(client, employee, admin, auth_headers, make_notification):
    make_notification(employee)
    make_notification(employee)
    make_notification(employee, read=True)
    make_notification(admin)
    headers = auth_headers(employee)

    response = client.patch("/api/notifications/read-all", headers=headers)

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "2 notifications marked as read",
        "data": {"count": 2},
    }
    assert client.patch("/api/notifications/read-all", headers=headers).json()["data"]["count"] == 0


def test_delete(client, db, employee, auth_headers, make_notification):
    notification = make_notification(employee)

    response = client.delete(f"/api/notifications/{notification.id}", headers=auth_headers(employee))

    assert response.status_code == 200
    assert response.json()["message"] == "Notification deleted successfully"
    assert notification.id not in db.notifications


def test_delete_of_someone_else(client, db, employee, admin, auth_headers, make_notification):
    notification = make_notification(admin)

    response = client.delete(f"/api/notifications/{notification.id}", headers=auth_headers(employee))

    assert response.status_code == 404
    assert notification.id in db.notifications


# ============================================
# Test sender
# ============================================

def test_send_to_user(client, db, admin, employee, auth_headers):
    response = client.post(
        "/api/notifications/test",
        json={"target_user_id": str(employee.id), "message": "Hello"},
        headers=auth_headers(admin),
    )

    body = response.json()
    assert response.status_code == 201
    assert body["message"] == "Test notification sent successfully"
    assert body["data"]["target_user_id"] == str(employee.id)
    assert body["data"]["type"] == "SYSTEM_NOTIFICATION"
    assert len(db.notifications) == 1


def test_send_default_message(client, admin, employee, auth_headers):
    response = client.post(
        "/api/notifications/test",
        json={"target_user_id": str(employee.id)},
        headers=auth_headers(admin),
    )

    assert response.json()["data"]["message"] == "Test notification"


def test_send_to_role_in_department(client, admin, make_user, make_department, auth_headers):
    department = make_department()
    agent = make_user(UserRole.AGENT, department)
    make_user(UserRole.AGENT)
    make_user(UserRole.EMPLOYEE, department)

    response = client.post(
        "/api/notifications/test",
        json={"target_role": "AGENT", "department_id": str(department.id), "type": "ASSIGNMENT"},
        headers=auth_headers(admin),
    )

    data = response.json()["data"]
    assert response.status_code == 201
    assert [n["target_user_id"] for n in data] == [str(agent.id)]
    assert data[0]["type"] == "ASSIGNMENT"


def test_send_without_target(client, admin, auth_headers):
    response = client.post("/api/notifications/test", json={}, headers=auth_headers(admin))

    assert response.status_code == 400
    assert response.json()["message"] == "Target user or role must be specified"


def test_send_to_missing_user(client, admin, auth_headers):
    response = client.post(
        "/api/notifications/test",
        json={"target_user_id": str(uuid4())},
        headers=auth_headers(admin),
    )

    assert response.status_code == 404
    assert response.json()["message"] == "Target user not found"


def test_send_rejects_long_message(client, admin, employee, auth_headers):
    response = client.post(
        "/api/notifications/test",
        json={"target_user_id": str(employee.id), "message": "x" * 501},
        headers=auth_headers(admin),
    )

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "message"
