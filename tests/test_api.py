from __future__ import annotations

import pytest

from src.payroll_system.payroll_system.main import create_app


@pytest.fixture()
def client(tmp_path):
    app = create_app(
        "config.testing",
        DB_BACKEND="sqlite",
        SQLITE_PATH=str(tmp_path / "api.db"),
        AUTO_INIT_DB=True,
        AUTO_SEED_DB=True,
    )
    return app.test_client()


def _employee_id(client, code="EMP001") -> int:
    return client.get(f"/api/employees/{code}").get_json()["id"]


def test_health_and_seeded_employees(client):
    assert client.get("/health").get_json()["status"] == "ok"

    employees = client.get("/api/employees").get_json()
    assert [e["code"] for e in employees] == ["EMP001", "EMP003", "EMP002"]


def test_employee_errors_are_json(client):
    res = client.post("/api/employees", json={"code": "EMP001", "name": "X", "basicSalary": 100})
    assert res.status_code == 409
    assert res.get_json()["error"] == "Conflict"

    res = client.post("/api/employees", json={"code": "EMP010", "name": "X", "basicSalary": -5})
    assert res.status_code == 400

    assert client.get("/api/employees/NOPE").status_code == 404
    assert client.get("/api/unknown").status_code == 404


def test_create_and_update_employee(client):
    res = client.post(
        "/api/employees",
        json={"code": "EMP010", "name": "Sara Ali", "jobTitle": "HR", "basicSalary": 5200, "monthlyIncentives": 300},
    )
    assert res.status_code == 201
    emp = res.get_json()

    res = client.put(f"/api/employees/{emp['id']}", json={"workDays": 26})
    assert res.status_code == 200
    assert res.get_json()["workDays"] == 26
    assert res.get_json()["monthlyIncentives"] == 300


def test_generate_report_amortizes_advances_once(client):
    emp_id = _employee_id(client)
    assert client.post("/api/advances", json={"employeeId": emp_id, "amount": 300, "date": "2025-01-01"}).status_code == 201
    res = client.post("/api/advances", json={"employeeCode": "EMP001", "amount": 400, "date": "2025-02-01"})
    assert res.status_code == 201
    second_id = res.get_json()["id"]

    over_limit = client.post("/api/advances", json={"employeeId": emp_id, "amount": 2700, "date": "2025-02-10"})
    assert over_limit.status_code == 400

    payload = {
        "employeeCode": "EMP001",
        "month": "2025-03",
        "workDays": 30,
        "dailyWorkHours": 8,
        "overtimeHours": 10,
        "absenceDays": 2,
        "deductionsPurchases": 100,
        "advancesDeduction": 500,
    }
    res = client.post("/api/salary-reports", json=payload)
    assert res.status_code == 201
    report = res.get_json()
    assert report["netSalary"] == 5375
    assert report["grossSalary"] == 6375
    assert report["deductions"]["absenceDeductions"] == 400
    assert report["amortization"]["applied"] == 500

    assert client.post("/api/salary-reports", json=payload).status_code == 409
    assert client.post(f"/api/salary-reports/report/{report['id']}/amortize").status_code == 409

    summary = client.get(f"/api/advances/{emp_id}/summary?month=2025-02").get_json()
    assert summary["outstandingAmount"] == 200
    pending = client.get("/api/advances/pending").get_json()
    assert [a["id"] for a in pending] == [second_id]

    assert client.get(f"/api/salary-reports/report/{report['id']}").get_json()["employeeCode"] == "EMP001"
    assert client.get("/api/salary-reports/report/999").status_code == 404
    assert len(client.get(f"/api/employees/{emp_id}/salary-reports").get_json()) == 1


def test_sub_cent_advance_deduction_settles_the_advance(client):
    emp_id = _employee_id(client)
    advance = client.post("/api/advances", json={"employeeId": emp_id, "amount": 300, "date": "2025-01-01"}).get_json()

    res = client.post("/api/salary-reports", json={"employeeCode": "EMP001", "month": "2025-03", "advancesDeduction": "299.999"})
    assert res.status_code == 201
    assert res.get_json()["deductions"]["advances"] == 300

    (stored,) = client.get(f"/api/advances/{emp_id}").get_json()
    assert (stored["id"], stored["remainingAmount"], stored["isPaid"]) == (advance["id"], 0, True)
    assert client.get("/api/advances/pending").get_json() == []


def test_mark_paid_and_bulk_paid(client):
    emp_id = _employee_id(client, "EMP002")
    a = client.post("/api/advances", json={"employeeId": emp_id, "amount": 100, "date": "2025-01-01"}).get_json()
    b = client.post("/api/advances", json={"employeeId": emp_id, "amount": 100, "date": "2025-01-02"}).get_json()

    assert client.put(f"/api/advances/{a['id']}", json={"isPaid": True}).get_json()["isPaid"] is True
    assert client.put(f"/api/advances/{a['id']}", json={"isPaid": True}).status_code == 400
    assert client.put("/api/advances/999", json={"isPaid": True}).status_code == 404

    res = client.put("/api/advances/bulk/paid", json={"advanceIds": [b["id"], a["id"]]})
    assert res.status_code == 207
    body = res.get_json()
    assert [s["id"] for s in body["success"]] == [b["id"]]
    assert [e["id"] for e in body["errors"]] == [a["id"]]

    assert client.put("/api/advances/bulk/paid", json={"advanceIds": "nope"}).status_code == 400


def test_time_entries_feed_report_overtime(client):
    emp_id = _employee_id(client)
    res = client.post(
        "/api/time-entries",
        json={"employeeId": emp_id, "date": "2025-05-05", "overtimeHours": 2, "status": "completed"},
    )
    assert res.status_code == 201
    entry_id = res.get_json()["id"]

    res = client.post(
        "/api/time-entries/bulk",
        json={"entries": [{"employeeId": emp_id, "date": "2025-05-06", "overtimeHours": 2}, {"employeeId": emp_id, "hoursWorked": 99}]},
    )
    assert res.status_code == 207
    assert len(res.get_json()["success"]) == 1 and len(res.get_json()["errors"]) == 1

    entries = client.get(f"/api/time-entries/{emp_id}?startDate=2025-05-01&endDate=2025-05-31").get_json()
    assert len(entries) == 2

    res = client.post("/api/salary-reports", json={"employeeCode": "EMP001", "month": "2025-05"})
    assert res.get_json()["overtimeHours"] == 4
    assert res.get_json()["overtimeAmount"] == 150

    assert client.put(f"/api/time-entries/{entry_id}", json={"status": "in-progress"}).get_json()["status"] == "in-progress"
    assert client.delete(f"/api/time-entries/{entry_id}").status_code == 200
    assert client.delete(f"/api/time-entries/{entry_id}").status_code == 404


def test_preview_bulk_summary_and_export(client):
    preview = client.post("/api/salary/preview", json={"basicSalary": 6000, "overtimeHours": 10})
    assert preview.status_code == 200
    assert preview.get_json()["netSalary"] == 6375

    assert client.post("/api/salary/preview", json={"basicSalary": 6000, "workDays": 0}).status_code == 400

    res = client.post("/api/salary-reports/bulk", json={"month": "2025-06", "employeeCodes": ["EMP001", "EMP002", "GHOST"]})
    assert res.status_code == 207
    assert len(res.get_json()["success"]) == 2
    assert res.get_json()["errors"][0]["employeeCode"] == "GHOST"

    summary = client.get("/api/salary-reports/summary/2025-06").get_json()
    assert summary["reportCount"] == 2
    assert summary["totalBasicSalary"] == 10500

    res = client.get("/api/salary-reports/export/2025-06.csv")
    assert res.status_code == 200
    assert res.mimetype == "text/csv"
    text = res.data.decode("utf-8-sig")
    assert text.splitlines()[0].startswith("employee_code,employee_name,month")
    assert "EMP001" in text and "EMP002" in text

    assert client.get("/api/salary-reports/summary/2025-13").status_code == 400
