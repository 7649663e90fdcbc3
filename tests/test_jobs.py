import pytest

JOB = {
    "title": "Conference ushers",
    "description": "Six ushers for a two-day tech conference",
    "budget": 1200,
    "category": "Conference",
}


def test_client_creates_job(client_session):
    response = client_session.post("/api/jobs", json=JOB)

    assert response.status_code == 201
    body = response.json()
    assert body["title"] == JOB["title"]
    assert body["budget"] == 1200
    assert body["category"] == "Conference"
    assert body["clientId"] == client_session.user["id"]
    assert body["status"] == "open"
    assert body["createdAt"] is not None


def test_client_id_in_body_is_ignored(client_session, other_client_session):
    response = client_session.post(
        "/api/jobs", json={**JOB, "clientId": other_client_session.user["id"]}
    )

    assert response.status_code == 201
    assert response.json()["clientId"] == client_session.user["id"]


def test_vendor_cannot_create_job(vendor_session):
    response = vendor_session.post("/api/jobs", json=JOB)

    assert response.status_code == 403


@pytest.mark.parametrize(
    "overrides",
    [
        {"budget": 0},
        {"budget": -10},
        {"budget": "lots"},
        {"category": "Funeral"},
        {"title": "  "},
        {"description": None},
    ],
)
def test_invalid_job_is_400(client_session, overrides):
    response = client_session.post("/api/jobs", json={**JOB, **overrides})

    assert response.status_code == 400


def test_list_jobs_newest_first(client_session, vendor_session):
    first = client_session.post("/api/jobs", json=JOB).json()
    second = client_session.post("/api/jobs", json={**JOB, "title": "Concert security"}).json()

    response = vendor_session.get("/api/jobs")

    assert response.status_code == 200
    assert [j["id"] for j in response.json()] == [second["id"], first["id"]]


def test_list_jobs_filters(client_session, other_client_session, vendor_session):
    mine = client_session.post("/api/jobs", json=JOB).json()
    other_client_session.post("/api/jobs", json={**JOB, "category": "Concert"})

    by_client = vendor_session.get("/api/jobs", params={"clientId": client_session.user["id"]})
    by_category = vendor_session.get("/api/jobs", params={"category": "Concert"})

    assert [j["id"] for j in by_client.json()] == [mine["id"]]
    assert [j["category"] for j in by_category.json()] == ["Concert"]


def test_get_job(job, vendor_session):
    response = vendor_session.get(f"/api/jobs/{job['id']}")

    assert response.status_code == 200
    assert response.json() == job


def test_get_unknown_job_is_404(vendor_session):
    assert vendor_session.get("/api/jobs/999").status_code == 404


def test_get_job_with_non_numeric_id_is_400(vendor_session):
    assert vendor_session.get("/api/jobs/abc").status_code == 400


@pytest.mark.parametrize("budget", [2**31, 2**63])
def test_budget_beyond_integer_column_is_400(client_session, budget):
    response = client_session.post("/api/jobs", json={**JOB, "budget": budget})

    assert response.status_code == 400


def test_largest_storable_budget_is_accepted(client_session):
    response = client_session.post("/api/jobs", json={**JOB, "budget": 2**31 - 1})

    assert response.status_code == 201
    assert response.json()["budget"] == 2**31 - 1


@pytest.mark.parametrize("job_id", [2**31, 2**63])
def test_get_job_with_out_of_range_id_is_400(vendor_session, job_id):
    assert vendor_session.get(f"/api/jobs/{job_id}").status_code == 400


def test_largest_storable_job_id_is_404(vendor_session):
    assert vendor_session.get(f"/api/jobs/{2**31 - 1}").status_code == 404


def test_client_id_filter_out_of_range_is_400(vendor_session):
    assert vendor_session.get("/api/jobs", params={"clientId": 2**63}).status_code == 400
