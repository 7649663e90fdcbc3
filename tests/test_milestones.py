from decimal import Decimal

import pytest
from fastapi import HTTPException
from sqlalchemy.exc import OperationalError

from eventhub.domain.milestones.repository import MilestoneRepository
from eventhub.domain.milestones.service import MilestoneService
from eventhub.models import EscrowTransaction, Milestone, MilestoneStatus, User


def set_status(session, milestone_id, status):
    return session.patch(f"/api/milestones/{milestone_id}/status", json={"status": status})


def escrow_of(session, milestone_id):
    response = session.get(f"/api/milestones/{milestone_id}/escrow")
    assert response.status_code == 200, response.text
    return response.json()


def test_create_milestone(client_session, job):
    response = client_session.post(
        f"/api/jobs/{job['id']}/milestones",
        json={
            "title": "Final payment",
            "description": "Event delivered",
            "amount": "300.50",
            "dueDate": "2026-12-01T18:00:00",
        },
    )

    assert response.status_code == 201
    body = response.json()
    assert body["jobId"] == job["id"]
    assert Decimal(body["amount"]) == Decimal("300.50")
    assert body["dueDate"].startswith("2026-12-01T18:00:00")
    assert body["status"] == "pending"
    assert body["completedAt"] is None
    assert body["approvedAt"] is None


def test_vendor_cannot_create_milestone(vendor_session, job):
    response = vendor_session.post(
        f"/api/jobs/{job['id']}/milestones",
        json={"title": "T", "description": "D", "amount": 10},
    )

    assert response.status_code == 403


def test_non_owner_cannot_create_milestone(other_client_session, job):
    response = other_client_session.post(
        f"/api/jobs/{job['id']}/milestones",
        json={"title": "T", "description": "D", "amount": 10},
    )

    assert response.status_code == 403


def test_milestone_for_unknown_job_is_404(client_session):
    response = client_session.post(
        "/api/jobs/999/milestones", json={"title": "T", "description": "D", "amount": 10}
    )

    assert response.status_code == 404


@pytest.mark.parametrize("amount", [0, -5, "abc", "1.234"])
def test_invalid_milestone_amount_is_400(client_session, job, amount):
    response = client_session.post(
        f"/api/jobs/{job['id']}/milestones",
        json={"title": "T", "description": "D", "amount": amount},
    )

    assert response.status_code == 400


def test_list_job_milestones(client_session, vendor_session, job, milestone):
    second = client_session.post(
        f"/api/jobs/{job['id']}/milestones",
        json={"title": "Final", "description": "Balance", "amount": 300},
    ).json()

    response = vendor_session.get(f"/api/jobs/{job['id']}/milestones")

    assert response.status_code == 200
    assert [m["id"] for m in response.json()] == [milestone["id"], second["id"]]


def test_list_milestones_for_unknown_job_is_404(vendor_session):
    assert vendor_session.get("/api/jobs/999/milestones").status_code == 404


def test_full_milestone_and_escrow_walkthrough(client_session, vendor_session, milestone):
    milestone_id = milestone["id"]

    completed = set_status(vendor_session, milestone_id, "completed")
    assert completed.status_code == 200
    assert completed.json()["status"] == "completed"
    assert completed.json()["completedAt"] is not None
    assert escrow_of(client_session, milestone_id) == []

    approved = set_status(client_session, milestone_id, "approved")
    assert approved.status_code == 200
    assert approved.json()["status"] == "approved"
    assert approved.json()["approvedAt"] is not None

    escrow = escrow_of(client_session, milestone_id)
    assert len(escrow) == 1
    assert escrow[0]["status"] == "held"
    assert Decimal(escrow[0]["amount"]) == Decimal("200")
    assert escrow[0]["releasedAt"] is None

    released = set_status(client_session, milestone_id, "released")
    assert released.status_code == 200
    assert released.json()["status"] == "released"
    assert released.json()["releasedAt"] is not None

    escrow = escrow_of(vendor_session, milestone_id)
    assert len(escrow) == 1
    assert escrow[0]["status"] == "released"
    assert escrow[0]["releasedAt"] is not None
    assert escrow[0]["refundedAt"] is None


@pytest.mark.parametrize("target", ["approved", "released"])
def test_client_cannot_skip_from_pending(client_session, milestone, target):
    response = set_status(client_session, milestone["id"], target)

    assert response.status_code == 400
    assert escrow_of(client_session, milestone["id"]) == []


def test_cannot_release_before_approval(client_session, vendor_session, milestone):
    set_status(vendor_session, milestone["id"], "completed")

    assert set_status(client_session, milestone["id"], "released").status_code == 400


def test_transitions_do_not_repeat(client_session, vendor_session, milestone):
    assert set_status(vendor_session, milestone["id"], "completed").status_code == 200
    assert set_status(vendor_session, milestone["id"], "completed").status_code == 400

    assert set_status(client_session, milestone["id"], "approved").status_code == 200
    assert set_status(client_session, milestone["id"], "approved").status_code == 400
    assert len(escrow_of(client_session, milestone["id"])) == 1


def test_released_milestone_cannot_go_back(client_session, vendor_session, milestone):
    set_status(vendor_session, milestone["id"], "completed")
    set_status(client_session, milestone["id"], "approved")
    set_status(client_session, milestone["id"], "released")

    assert set_status(vendor_session, milestone["id"], "completed").status_code == 400


def test_only_vendor_marks_completed(client_session, milestone):
    assert set_status(client_session, milestone["id"], "completed").status_code == 403


def test_any_vendor_marks_completed(other_vendor_session, milestone):
    assert set_status(other_vendor_session, milestone["id"], "completed").status_code == 200


@pytest.mark.parametrize("target", ["approved", "released"])
def test_vendor_cannot_approve_or_release(vendor_session, milestone, target):
    set_status(vendor_session, milestone["id"], "completed")

    assert set_status(vendor_session, milestone["id"], target).status_code == 403


def test_other_client_cannot_approve(other_client_session, vendor_session, milestone):
    set_status(vendor_session, milestone["id"], "completed")

    assert set_status(other_client_session, milestone["id"], "approved").status_code == 403


@pytest.mark.parametrize("status", ["pending", "refunded", "done", None])
def test_invalid_status_value_is_400(client_session, milestone, status):
    assert set_status(client_session, milestone["id"], status).status_code == 400


def test_unknown_milestone_is_404(client_session):
    assert set_status(client_session, 999, "approved").status_code == 404
    assert client_session.get("/api/milestones/999/escrow").status_code == 404


def test_other_client_cannot_read_escrow(other_client_session, milestone):
    response = other_client_session.get(f"/api/milestones/{milestone['id']}/escrow")

    assert response.status_code == 403


def test_release_without_escrow_still_succeeds(client_session, milestone, db_session):
    # Legacy row approved before escrow bookkeeping existed
    row = db_session.get(Milestone, milestone["id"])
    row.status = MilestoneStatus.APPROVED.value
    db_session.commit()

    response = set_status(client_session, milestone["id"], "released")

    assert response.status_code == 200
    assert response.json()["status"] == "released"
    assert escrow_of(client_session, milestone["id"]) == []


def test_failed_commit_leaves_no_escrow_and_no_approval(
    client_session, vendor_session, milestone, db_session, monkeypatch
):
    set_status(vendor_session, milestone["id"], "completed")
    owner = db_session.query(User).filter(User.username == "carla").one()

    def failing_commit():
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db_session, "commit", failing_commit)
    service = MilestoneService(db_session)

    with pytest.raises(HTTPException) as exc_info:
        service.update_status(milestone["id"], MilestoneStatus.APPROVED, owner)

    assert exc_info.value.status_code == 500
    monkeypatch.undo()
    db_session.expire_all()
    assert db_session.get(Milestone, milestone["id"]).status == "completed"
    assert db_session.query(EscrowTransaction).count() == 0


def test_due_date_with_offset_is_stored_as_utc(client_session, job):
    response = client_session.post(
        f"/api/jobs/{job['id']}/milestones",
        json={
            "title": "Setup crew",
            "description": "Stage and lighting",
            "amount": 150,
            "dueDate": "2026-12-01T18:00:00+05:00",
        },
    )

    assert response.status_code == 201
    assert response.json()["dueDate"].startswith("2026-12-01T13:00:00")

    listed = client_session.get(f"/api/jobs/{job['id']}/milestones").json()
    assert listed[0]["dueDate"].startswith("2026-12-01T13:00:00")


@pytest.mark.parametrize(
    "method, path",
    [
        ("post", "/api/jobs/{id}/milestones"),
        ("get", "/api/jobs/{id}/milestones"),
        ("patch", "/api/milestones/{id}/status"),
        ("get", "/api/milestones/{id}/escrow"),
    ],
)
def test_out_of_range_ids_are_400(client_session, method, path):
    payload = {"title": "Deposit", "description": "Booked", "amount": 100, "status": "approved"}
    url = path.format(id=2**63)
    if method == "get":
        response = client_session.get(url)
    else:
        response = getattr(client_session, method)(url, json=payload)

    assert response.status_code == 400


def test_stale_approval_does_not_hold_escrow_twice(
    client_session, vendor_session, milestone, db_session
):
    set_status(vendor_session, milestone["id"], "completed")
    owner = db_session.query(User).filter(User.username == "carla").one()
    # Loaded while still completed; the session keeps this snapshot
    assert db_session.get(Milestone, milestone["id"]).status == "completed"

    assert set_status(client_session, milestone["id"], "approved").status_code == 200

    with pytest.raises(HTTPException) as exc_info:
        MilestoneService(db_session).update_status(milestone["id"], MilestoneStatus.APPROVED, owner)

    assert exc_info.value.status_code == 400
    db_session.expire_all()
    assert db_session.query(EscrowTransaction).count() == 1
    assert db_session.get(Milestone, milestone["id"]).status == "approved"


def test_advance_status_only_moves_from_expected_status(client_session, milestone, db_session):
    repo = MilestoneRepository()

    assert not repo.advance_status(db_session, milestone["id"], "completed", status="approved")
    assert repo.advance_status(db_session, milestone["id"], "pending", status="completed")
    db_session.commit()

    assert db_session.get(Milestone, milestone["id"]).status == "completed"
