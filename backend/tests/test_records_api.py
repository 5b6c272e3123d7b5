"""
Medical Records API tests

End-to-end through the HTTP layer against a temporary SQLite database:
- POST /api/records    - Transactional insert
- GET  /api/search     - Aggregated search
- POST /api/addRecord  - Single-kind child update
- GET/PUT /api/patients/{id}
"""

import copy

import pytest


def _visit(date, hospital="General", reason="checkup", doctor="Dr. X"):
    return {"date": date, "reason": reason, "doctorName": doctor, "hospital": hospital}


def _treatment(date, hospital="General", treatment="rest", outcome="ok"):
    return {"date": date, "treatment": treatment, "outcome": outcome, "hospital": hospital}


def _diagnostic(date, hospital="General", diagnosis="flu", specialist="GP"):
    return {"date": date, "diagnosis": diagnosis, "specialist": specialist, "hospital": hospital}


def _record(patient_id, name="Ann", age=30, visits=(), treatments=(), diagnostics=()):
    return {
        "patient": {"id": patient_id, "name": name, "age": age},
        "visitRecords": list(visits),
        "treatmentRecords": list(treatments),
        "diagnosticRecords": list(diagnostics),
    }


class TestCreateRecord:
    """Tests for POST /api/records"""

    def test_insert_echoes_record(self, client, ann_record):
        response = client.post("/api/records", json=ann_record)

        assert response.status_code == 201
        assert response.json() == ann_record

    def test_missing_child_lists_default_to_empty(self, client):
        response = client.post("/api/records", json={"patient": {"id": "p2", "name": "Ben", "age": 5}})

        assert response.status_code == 201
        assert response.json()["visitRecords"] == []

    def test_malformed_body_is_400(self, client):
        response = client.post("/api/records", json={"patient": {"id": "p1", "name": "Ann"}})

        assert response.status_code == 400

    def test_negative_age_is_400(self, client):
        response = client.post("/api/records", json=_record("p1", age=-1))

        assert response.status_code == 400

    @pytest.mark.parametrize("age", ["30", True, 30.0])
    def test_mistyped_age_is_400(self, client, age):
        payload = _record("p1")
        payload["patient"]["age"] = age

        response = client.post("/api/records", json=payload)

        assert response.status_code == 400
        assert client.get("/api/patients/p1").status_code == 404

    def test_duplicate_patient_is_500_and_rolled_back(self, client, ann_record):
        assert client.post("/api/records", json=ann_record).status_code == 201

        duplicate = copy.deepcopy(ann_record)
        duplicate["visitRecords"].append(_visit("2024-06-06"))
        response = client.post("/api/records", json=duplicate)

        assert response.status_code == 500
        assert response.json()["detail"].startswith("Failed to insert new patient")

        [record] = client.get("/api/search", params={"patientId": "p1"}).json()
        assert len(record["visitRecords"]) == 1


class TestSearch:
    """Tests for GET /api/search"""

    def test_example_search_by_hospital(self, client, ann_record):
        client.post("/api/records", json=ann_record)

        response = client.get("/api/search", params={"hospital": "General"})

        assert response.status_code == 200
        [record] = response.json()
        assert record["patient"]["id"] == "p1"
        assert record["visitRecords"] == ann_record["visitRecords"]

    def test_round_trip_preserves_counts_and_order(self, client):
        visits = [_visit("2024-01-01"), _visit("2024-01-02", reason="fever"), _visit("2024-01-03")]
        treatments = [_treatment("2024-02-01"), _treatment("2024-02-02", outcome="improved")]
        diagnostics = [_diagnostic("2024-03-01"), _diagnostic("2024-03-02"), _diagnostic("2024-03-03"),
                       _diagnostic("2024-03-04")]
        client.post("/api/records", json=_record("p1", visits=visits, treatments=treatments,
                                                 diagnostics=diagnostics))

        response = client.get("/api/search", params={"patientId": "p1"})

        assert response.status_code == 200
        [record] = response.json()
        assert record["visitRecords"] == visits
        assert record["treatmentRecords"] == treatments
        assert record["diagnosticRecords"] == diagnostics

    def test_one_record_per_patient(self, client):
        client.post("/api/records", json=_record("p1", visits=[_visit("2024-01-01"), _visit("2024-01-02")]))
        client.post("/api/records", json=_record("p2", name="Ben", treatments=[_treatment("2024-01-05")]))
        client.post("/api/records", json=_record("p3", name="Cy", visits=[_visit("2024-01-01", "Elsewhere")]))

        records = client.get("/api/search", params={"hospital": "General"}).json()

        assert sorted(r["patient"]["id"] for r in records) == ["p1", "p2"]

    def test_hospital_match_on_diagnostic_only(self, client):
        client.post("/api/records", json=_record("p4", diagnostics=[_diagnostic("2024-04-04", "Northside")]))

        response = client.get("/api/search", params={"hospital": "Northside"})

        assert response.status_code == 200
        [record] = response.json()
        assert record["patient"]["id"] == "p4"
        assert record["visitRecords"] == []
        assert record["treatmentRecords"] == []
        assert record["diagnosticRecords"] == [_diagnostic("2024-04-04", "Northside")]

    def test_both_filters(self, client):
        client.post("/api/records", json=_record("p1", visits=[_visit("2024-01-01")]))
        client.post("/api/records", json=_record("p2", visits=[_visit("2024-01-01")]))

        records = client.get("/api/search", params={"patientId": "p2", "hospital": "General"}).json()

        assert [r["patient"]["id"] for r in records] == ["p2"]

    def test_patient_without_children(self, client):
        client.post("/api/records", json=_record("p5"))

        [record] = client.get("/api/search", params={"patientId": "p5"}).json()

        assert record["visitRecords"] == []
        assert record["treatmentRecords"] == []
        assert record["diagnosticRecords"] == []

    def test_empty_date_child_never_returned(self, client):
        client.post("/api/records", json=_record("p6", visits=[_visit(""), _visit("2024-01-01")]))

        [record] = client.get("/api/search", params={"patientId": "p6"}).json()

        assert [v["date"] for v in record["visitRecords"]] == ["2024-01-01"]

    def test_no_filters_is_400(self, client):
        response = client.get("/api/search")

        assert response.status_code == 400
        assert "patientId or hospital" in response.json()["detail"]

    def test_unknown_hospital_is_404(self, client, ann_record):
        client.post("/api/records", json=ann_record)

        response = client.get("/api/search", params={"hospital": "Nowhere"})

        assert response.status_code == 404
        assert response.json() == {"detail": "No records found"}


class TestAddRecord:
    """Tests for POST /api/addRecord"""

    def test_updates_matching_visit(self, client, ann_record):
        client.post("/api/records", json=ann_record)
        updated = _visit("2024-01-01", hospital="St. Mary", reason="follow-up", doctor="Dr. Y")

        response = client.post("/api/addRecord", json={"patientId": "p1", "type": "visit", "record": updated})

        assert response.status_code == 200
        assert response.text == "Record updated successfully"
        [record] = client.get("/api/search", params={"patientId": "p1"}).json()
        assert record["visitRecords"] == [updated]

    def test_updates_treatment_and_diagnostic(self, client):
        client.post("/api/records", json=_record(
            "p1", treatments=[_treatment("2024-02-01")], diagnostics=[_diagnostic("2024-03-01")],
        ))

        client.post("/api/addRecord", json={
            "patientId": "p1", "type": "treatment", "record": _treatment("2024-02-01", outcome="resolved"),
        })
        client.post("/api/addRecord", json={
            "patientId": "p1", "type": "diagnostic", "record": _diagnostic("2024-03-01", diagnosis="asthma"),
        })

        [record] = client.get("/api/search", params={"patientId": "p1"}).json()
        assert record["treatmentRecords"][0]["outcome"] == "resolved"
        assert record["diagnosticRecords"][0]["diagnosis"] == "asthma"

    def test_nonexistent_entry_still_reports_success(self, client, ann_record):
        client.post("/api/records", json=ann_record)

        response = client.post("/api/addRecord", json={
            "patientId": "p1", "type": "visit", "record": _visit("1999-12-31", reason="never happened"),
        })

        assert response.status_code == 200
        [record] = client.get("/api/search", params={"patientId": "p1"}).json()
        assert record["visitRecords"] == ann_record["visitRecords"]

    def test_unknown_type_is_400(self, client):
        response = client.post("/api/addRecord", json={
            "patientId": "p1", "type": "surgery", "record": _visit("2024-01-01"),
        })

        assert response.status_code == 400

    def test_missing_field_is_400(self, client):
        record = _treatment("2024-02-01")
        del record["outcome"]

        response = client.post("/api/addRecord", json={"patientId": "p1", "type": "treatment", "record": record})

        assert response.status_code == 400

    def test_payload_for_wrong_kind_is_400(self, client):
        response = client.post("/api/addRecord", json={
            "patientId": "p1", "type": "diagnostic", "record": _visit("2024-01-01"),
        })

        assert response.status_code == 400


class TestPatients:
    """Tests for GET/PUT /api/patients/{id}"""

    def test_get_patient(self, client, ann_record):
        client.post("/api/records", json=ann_record)

        response = client.get("/api/patients/p1")

        assert response.status_code == 200
        assert response.json() == {"id": "p1", "name": "Ann", "age": 30}

    def test_get_unknown_patient_is_404(self, client):
        assert client.get("/api/patients/missing").status_code == 404

    def test_update_patient(self, client, ann_record):
        client.post("/api/records", json=ann_record)

        response = client.put("/api/patients/p1", json={"name": "Ann Smith", "age": 31})

        assert response.status_code == 200
        assert response.text == "Patient information updated successfully"
        assert client.get("/api/patients/p1").json() == {"id": "p1", "name": "Ann Smith", "age": 31}

    def test_update_with_bad_body_is_400(self, client):
        response = client.put("/api/patients/p1", json={"name": "Ann", "age": "old"})

        assert response.status_code == 400

    @pytest.mark.parametrize("age", ["31", True, 31.0])
    def test_update_with_mistyped_age_is_400(self, client, ann_record, age):
        client.post("/api/records", json=ann_record)

        response = client.put("/api/patients/p1", json={"name": "Ann", "age": age})

        assert response.status_code == 400
        assert client.get("/api/patients/p1").json()["age"] == 30

    def test_unsupported_method_is_405(self, client):
        assert client.delete("/api/patients/p1").status_code == 405


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
