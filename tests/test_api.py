import inspect
import uuid

import pytest
from fastapi.routing import APIRoute

from booking_core.config.database import get_db

from conftest import MONDAY, ny


def slots_url(business_id):
    return f"/api/v1/public/businesses/{business_id}/availability/slots"


def bookings_url(business_id):
    return f"/api/v1/public/businesses/{business_id}/bookings"


def z(instant):
    return instant.isoformat().replace("+00:00", "Z")


def test_health(client):
    response = client.get("/health/")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_detailed_health_checks_database(client):
    response = client.get("/health/detailed")
    assert response.status_code == 200
    assert response.json()["database"] == "healthy"


def test_list_slots_for_employee(client, salon):
    response = client.get(slots_url(salon.business.id), params={
        "service_id": str(salon.service.id),
        "date": MONDAY.isoformat(),
        "employee_id": str(salon.employee.id),
    })

    assert response.status_code == 200
    data = response.json()["data"]
    assert len(data) == 15
    assert data[0]["start_time"] == z(ny(MONDAY, 9))
    assert data[-1]["end_time"] == z(ny(MONDAY, 17))
    assert data[0]["employee_id"] == str(salon.employee.id)
    assert data[0]["is_available"] is True


@pytest.mark.parametrize("any_employee", ["any", "ANY"])
def test_any_employee_literal_is_accepted(client, salon, any_employee):
    response = client.get(slots_url(salon.business.id), params={
        "service_id": str(salon.service.id),
        "date": MONDAY.isoformat(),
        "employee_id": any_employee,
    })

    assert response.status_code == 200
    first = response.json()["data"][0]
    assert first["employee_id"] is None
    assert first["employee_ids"] == [str(salon.employee.id)]


def test_malformed_employee_id_is_rejected(client, salon):
    response = client.get(slots_url(salon.business.id), params={
        "service_id": str(salon.service.id),
        "date": MONDAY.isoformat(),
        "employee_id": "someone",
    })
    assert response.status_code == 422


def test_invalid_timezone_is_a_client_error(client, salon):
    response = client.get(slots_url(salon.business.id), params={
        "service_id": str(salon.service.id),
        "date": MONDAY.isoformat(),
        "timezone": "Mars/Olympus_Mons",
    })

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "InvalidTimezone"


def test_unknown_business_is_not_found(client):
    response = client.get(slots_url(uuid.uuid4()), params={
        "service_id": str(uuid.uuid4()),
        "date": MONDAY.isoformat(),
    })
    assert response.status_code == 404


def test_book_then_conflict(client, salon):
    payload = {
        "service_id": str(salon.service.id),
        "employee_id": str(salon.employee.id),
        "start_time": z(ny(MONDAY, 10)),
        "customer_name": "Jordan",
        "customer_phone": "+15555550100",
    }

    created = client.post(bookings_url(salon.business.id), json=payload)
    assert created.status_code == 201
    body = created.json()
    assert body["status"] == "pending"
    assert body["employee_id"] == str(salon.employee.id)

    check = client.get(f"/api/v1/public/businesses/{salon.business.id}/availability/check", params={
        "service_id": str(salon.service.id),
        "start_time": z(ny(MONDAY, 10)),
        "employee_id": str(salon.employee.id),
    })
    assert check.json() == {"data": {"is_available": False}}

    conflict = client.post(bookings_url(salon.business.id), json={**payload, "customer_name": "Riley"})
    assert conflict.status_code == 409
    assert conflict.json()["detail"]["code"] == "SlotNoLongerAvailable"


@pytest.mark.parametrize("any_employee", ["any", "ANY", "Any", " any "])
def test_book_with_any_employee(client, salon, any_employee):
    response = client.post(bookings_url(salon.business.id), json={
        "service_id": str(salon.service.id),
        "employee_id": any_employee,
        "start_time": z(ny(MONDAY, 9)),
        "customer_name": "Jordan",
    })
    assert response.status_code == 201
    assert response.json()["employee_id"] == str(salon.employee.id)


def test_naive_start_time_is_rejected(client, salon):
    response = client.post(bookings_url(salon.business.id), json={
        "service_id": str(salon.service.id),
        "start_time": "2030-01-07T09:00:00",
        "customer_name": "Jordan",
    })
    assert response.status_code == 422


def test_booking_read_and_status_endpoints(client, salon):
    created = client.post(bookings_url(salon.business.id), json={
        "service_id": str(salon.service.id),
        "start_time": z(ny(MONDAY, 11)),
        "customer_name": "Jordan",
    }).json()

    fetched = client.get(f"{bookings_url(salon.business.id)}/{created['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["start_time"] == ny(MONDAY, 11).isoformat()

    listed = client.get(bookings_url(salon.business.id), params={"status": "pending"})
    assert listed.json()["total_bookings"] == 1

    cancelled = client.patch(f"{bookings_url(salon.business.id)}/{created['id']}/status", json={"status": "cancelled"})
    assert cancelled.status_code == 200
    assert cancelled.json()["cancelled_at"] is not None

    reopened = client.patch(f"{bookings_url(salon.business.id)}/{created['id']}/status", json={"status": "confirmed"})
    assert reopened.status_code == 400


def test_unknown_booking_is_not_found(client, salon):
    response = client.get(f"{bookings_url(salon.business.id)}/{uuid.uuid4()}")
    assert response.status_code == 404


def test_correlation_id_is_echoed(client):
    response = client.get("/health/", headers={"X-Correlation-ID": "abc-123"})
    assert response.headers["X-Correlation-ID"] == "abc-123"


def _uses_database(dependant):
    return any(dep.call is get_db or _uses_database(dep) for dep in dependant.dependencies)


def test_database_routes_run_in_threadpool(client):
    database_routes = [
        route for route in client.app.routes
        if isinstance(route, APIRoute) and _uses_database(route.dependant)
    ]

    assert {route.name for route in database_routes} >= {
        "list_available_slots", "check_slot", "create_booking", "list_bookings", "get_booking",
        "update_booking_status", "detailed_health_check",
    }
    for route in database_routes:
        assert not inspect.iscoroutinefunction(route.endpoint), route.name
