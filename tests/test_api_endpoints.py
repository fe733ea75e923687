from fastapi.testclient import TestClient

from celebration_api.core.logger import logger
from celebration_api.main import app
from celebration_api.core.exceptions import QueryError, ServiceUnavailableError
from celebration_api.db.executor import QueryResult

VALID_BODY = {
    "customerName": "Asha Rao",
    "contactNumber": "9876543210",
    "eventDate": "2025-03-10",
    "eventTime": "18:30",
    "branch": "Andheri",
    "selectedPackage": "Gold",
    "amount": 15000,
    "celebrationType": "Birthday",
}


def test_smoke_route(client):
    response = client.get("/api/test")
    assert response.status_code == 200
    assert response.json()["message"] == "Server running"
    assert "timestamp" in response.json()


def test_health_ok(client, executor):
    executor.ping.return_value = True

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "OK"
    assert response.json()["uptime"] >= 0


def test_health_reports_db_failure(client, executor):
    executor.ping.side_effect = QueryError("Can't connect to MySQL server")

    response = client.get("/health")

    assert response.status_code == 500
    assert response.json()["status"] == "ERROR"


def test_list_bookings_renders_rows(client, executor, make_row):
    executor.execute.return_value = [make_row()]

    response = client.get("/api/bookings")

    assert response.status_code == 200
    assert response.json() == [{
        "id": 42,
        "uniqueId": "00042",
        "customerName": "Asha Rao",
        "contactNumber": "9876543210",
        "eventDate": "10-03-2025",
        "eventTime": "18:30",
        "branch": "Andheri",
        "selectedPackage": "Gold",
        "amount": 15000.0,
        "celebrationType": "Birthday",
    }]


def test_list_bookings_db_unavailable(client, executor):
    executor.execute.side_effect = ServiceUnavailableError("Database unavailable after 3 attempts: closed state")

    response = client.get("/api/bookings")

    assert response.status_code == 503
    assert response.json()["error"].startswith("Error fetching bookings: Database unavailable")


def test_filter_by_date_ignores_month_and_year(client, executor, make_row):
    executor.execute.return_value = [make_row()]

    response = client.get("/api/bookings/filter", params={"date": "2025-03-10", "month": "4", "year": "2024"})

    assert response.status_code == 200
    statement, params = executor.execute.call_args.args
    assert statement.endswith("WHERE eventDate = %s")
    assert params == ["2025-03-10"]


def test_filter_branch_all_is_unfiltered(client, executor, make_row):
    executor.execute.return_value = [make_row(), make_row(id=43, branch="Bandra")]

    response = client.get("/api/bookings/filter", params={"branch": "All"})

    assert response.status_code == 200
    assert len(response.json()) == 2
    statement, params = executor.execute.call_args.args
    assert statement.endswith("WHERE 1=1")
    assert params == []


def test_filter_invalid_date_is_rejected_before_query(client, executor):
    response = client.get("/api/bookings/filter", params={"date": "10-03-2025"})

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid date format: Use YYYY-MM-DD"}
    executor.execute.assert_not_awaited()


def test_filter_invalid_month(client, executor):
    response = client.get("/api/bookings/filter", params={"month": "13", "year": "2025"})

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid month or year"}
    executor.execute.assert_not_awaited()


def test_filter_without_matches_is_404(client, executor):
    executor.execute.return_value = []

    response = client.get("/api/bookings/filter", params={"branch": "Bandra"})

    assert response.status_code == 404
    assert response.json() == {"error": "No bookings found for the selected filters"}


def test_get_booking(client, executor, make_row):
    executor.execute.return_value = [make_row()]

    response = client.get("/api/bookings/42")

    assert response.status_code == 200
    assert response.json()["uniqueId"] == "00042"
    assert executor.execute.call_args.args[1] == [42]


def test_get_booking_not_found(client, executor):
    executor.execute.return_value = []

    response = client.get("/api/bookings/999")

    assert response.status_code == 404
    assert response.json() == {"error": "Booking not found"}


def test_get_booking_non_numeric_id(client, executor):
    response = client.get("/api/bookings/abc")

    assert response.status_code == 400
    executor.execute.assert_not_awaited()


def test_create_booking(client, executor):
    executor.tx.execute.side_effect = [QueryResult(1, 42), QueryResult(1, 42)]

    response = client.post("/api/bookings", json=VALID_BODY)

    assert response.status_code == 201
    assert response.json() == {"message": "Booking created", "bookingId": "00042"}
    insert_call, stamp_call = executor.tx.execute.call_args_list
    assert insert_call.args[0].startswith("INSERT INTO bookings")
    assert stamp_call.args == ("UPDATE bookings SET uniqueId = %s WHERE id = %s", ["00042", 42])


def test_create_booking_missing_fields(client, executor):
    body = dict(VALID_BODY, celebrationType="")

    response = client.post("/api/bookings", json=body)

    assert response.status_code == 400
    assert response.json()["error"].startswith("All fields required")
    executor.transaction.assert_not_awaited()


def test_create_booking_invalid_contact_writes_nothing(client, executor):
    response = client.post("/api/bookings", json=dict(VALID_BODY, contactNumber="12345"))

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid contact number: Must be 10 digits"}
    executor.transaction.assert_not_awaited()
    executor.tx.execute.assert_not_awaited()


def test_create_booking_db_error(client, executor):
    executor.transaction.side_effect = QueryError("(1406, \"Data too long for column 'branch'\")")

    response = client.post("/api/bookings", json=VALID_BODY)

    assert response.status_code == 500
    assert response.json()["error"].startswith("Error creating booking: (1406")


def test_update_booking_normalizes_time(client, executor):
    executor.execute.return_value = QueryResult(1, None)

    response = client.put("/api/bookings/42", json=dict(VALID_BODY, eventTime="19:45:00"))

    assert response.status_code == 200
    assert response.json() == {"message": "Booking updated"}
    statement, params = executor.execute.call_args.args
    assert statement.startswith("UPDATE bookings SET customerName = %s")
    assert params[3] == "19:45"
    assert params[-1] == 42


def test_update_booking_invalid_date(client, executor):
    response = client.put("/api/bookings/42", json=dict(VALID_BODY, eventDate="10/03/2025"))

    assert response.status_code == 400
    executor.execute.assert_not_awaited()


def test_update_booking_not_found(client, executor):
    executor.execute.return_value = QueryResult(0, None)

    response = client.put("/api/bookings/999", json=VALID_BODY)

    assert response.status_code == 404


def test_delete_booking(client, executor):
    executor.execute.return_value = QueryResult(1, None)

    response = client.delete("/api/bookings/42")

    assert response.status_code == 200
    assert response.json() == {"message": "Booking deleted"}


def test_delete_missing_booking_is_404_not_500(client, executor):
    executor.execute.return_value = QueryResult(0, None)

    response = client.delete("/api/bookings/999")

    assert response.status_code == 404
    assert response.json() == {"error": "Booking not found"}


def test_unknown_route(client):
    response = client.get("/api/unknown")

    assert response.status_code == 404
    assert response.json() == {"error": "Route not found: GET /api/unknown"}


def test_unsupported_method_is_route_not_found(client):
    response = client.patch("/api/bookings/42", json=VALID_BODY)

    assert response.status_code == 404
    assert response.json()["error"] == "Route not found: PATCH /api/bookings/42"


def test_cors_allows_any_origin(client):
    response = client.get("/api/test", headers={"Origin": "https://celebrationhouse.example"})

    assert response.headers["access-control-allow-origin"] == "*"


def test_malformed_row_is_json_500_with_logged_traceback(client, executor):
    # pydantic errors carry braces in their text (input_value={...})
    executor.execute.return_value = [{"id": 1}]
    records = []
    sink_id = logger.add(lambda message: records.append(message.record), level="ERROR")
    try:
        response = TestClient(app, raise_server_exceptions=False).get("/api/bookings")
    finally:
        logger.remove(sink_id)

    assert response.status_code == 500
    assert response.json() == {"error": "Internal Server Error"}
    unhandled = [r for r in records if "UNHANDLED ERROR" in r["message"]]
    assert unhandled[0]["exception"] is not None
    assert "GET /api/bookings" in unhandled[0]["message"]
