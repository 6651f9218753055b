"""
Tests for contracts, comment eligibility and comments.
"""
from datetime import datetime

import pytest
from pydantic import ValidationError as SchemaValidationError

from app.core.enums import ContractStatus
from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.db.models.contract import Contract
from app.schemas.contract import CommentCreate, ContractUpdate
from app.services.comment_service import create_comment, display_name
from app.services.contract_service import update_contract


@pytest.fixture
def pair(make_parent, make_doula):
    return make_parent(first_name="Jennifer", last_name="smith"), make_doula()


def add_contract(db, parent, doula, status="completed"):
    contract = Contract(
        parent_id=parent.user_id,
        doula_id=doula.user_id,
        start_date=datetime(2026, 1, 5, 9, 0),
        status=status,
    )
    db.add(contract)
    db.commit()
    db.refresh(contract)
    return contract


def comment_for(contract, text="Wonderful support"):
    return CommentCreate(
        contract_id=contract.id,
        parent_id=contract.parent_id,
        doula_id=contract.doula_id,
        comment=text,
    )


def test_create_contract_endpoint(client, pair):
    parent, doula = pair

    response = client.post("/contracts", json={
        "parentId": parent.user_id,
        "doulaId": doula.user_id,
        "startDate": "2026-03-01T09:00:00",
    })

    assert response.status_code == 201
    contract_id = response.json()["contractId"]

    body = client.get(f"/contracts/{contract_id}").json()
    assert body["status"] == "active"
    assert body["parentId"] == parent.user_id

    listed = client.get(f"/users/{doula.user_id}/contracts").json()
    assert [c["id"] for c in listed] == [contract_id]


def test_create_contract_rejects_wrong_parties(client, pair):
    parent, doula = pair

    response = client.post("/contracts", json={
        "parentId": doula.user_id,
        "doulaId": doula.user_id,
        "startDate": "2026-03-01T09:00:00",
    })
    assert response.status_code == 400

    response = client.post("/contracts", json={
        "parentId": parent.user_id,
        "doulaId": 999,
        "startDate": "2026-03-01T09:00:00",
    })
    assert response.status_code == 404


def test_contract_status_moves_forward_only(db, pair):
    parent, doula = pair
    contract = add_contract(db, parent, doula, status="active")

    update_contract(db, contract.id, ContractUpdate(status=ContractStatus.COMPLETED))
    # Same status again is a no-op
    update_contract(db, contract.id, ContractUpdate(status=ContractStatus.COMPLETED))

    with pytest.raises(ValidationError):
        update_contract(db, contract.id, ContractUpdate(status=ContractStatus.ACTIVE))

    with pytest.raises(ValidationError):
        update_contract(db, contract.id, ContractUpdate(status=ContractStatus.CANCELLED))

    with pytest.raises(NotFoundError):
        update_contract(db, 999, ContractUpdate(status=ContractStatus.COMPLETED))


def test_contract_update_endpoint(client, db, pair):
    parent, doula = pair
    contract = add_contract(db, parent, doula, status="active")

    response = client.put(f"/contracts/{contract.id}", json={"status": "completed", "endDate": "2026-02-01T17:00:00"})
    assert response.status_code == 200

    response = client.put(f"/contracts/{contract.id}", json={"endDate": "2025-01-01T00:00:00"})
    assert response.status_code == 400


def test_contract_dates_with_utc_suffix(client, db, pair):
    parent, doula = pair

    response = client.post("/contracts", json={
        "parentId": parent.user_id,
        "doulaId": doula.user_id,
        "startDate": "2026-03-01T09:00:00.000Z",
    })
    assert response.status_code == 201
    contract_id = response.json()["contractId"]

    response = client.put(f"/contracts/{contract_id}", json={
        "status": "completed",
        "endDate": "2026-04-01T09:00:00.000Z",
    })
    assert response.status_code == 200

    contract = db.get(Contract, contract_id)
    db.refresh(contract)
    assert contract.end_date == datetime(2026, 4, 1, 9, 0)

    response = client.put(f"/contracts/{contract_id}", json={"endDate": "2026-02-01T09:00:00.000Z"})
    assert response.status_code == 400


def test_contract_create_mixes_offset_and_naive_dates(client, pair):
    parent, doula = pair

    response = client.post("/contracts", json={
        "parentId": parent.user_id,
        "doulaId": doula.user_id,
        "startDate": "2026-03-01T09:00:00+02:00",
        "endDate": "2026-03-01T08:00:00",
    })
    assert response.status_code == 201
    assert client.get(f"/contracts/{response.json()['contractId']}").json()["startDate"] == "2026-03-01T07:00:00"

    response = client.post("/contracts", json={
        "parentId": parent.user_id,
        "doulaId": doula.user_id,
        "startDate": "2026-03-01T09:00:00.000Z",
        "endDate": "2026-03-01T08:00:00",
    })
    assert response.status_code == 400


def test_contract_update_schema_normalizes_to_utc():
    update = ContractUpdate(end_date="2026-04-01T11:00:00+02:00")

    assert update.end_date == datetime(2026, 4, 1, 9, 0)
    assert update.end_date.tzinfo is None


def test_comment_on_completed_contract(db, pair):
    parent, doula = pair
    contract = add_contract(db, parent, doula)

    comment = create_comment(db, comment_for(contract))

    assert comment.parent_name == "Jennifer S."
    db.refresh(doula)
    assert doula.review_count == 1


def test_second_comment_conflicts(db, pair):
    parent, doula = pair
    contract = add_contract(db, parent, doula)
    create_comment(db, comment_for(contract))

    with pytest.raises(ConflictError):
        create_comment(db, comment_for(contract, "Again"))

    db.refresh(doula)
    assert doula.review_count == 1


def test_comment_on_active_contract_fails(db, pair):
    parent, doula = pair
    contract = add_contract(db, parent, doula, status="active")

    with pytest.raises(ValidationError):
        create_comment(db, comment_for(contract))


def test_comment_parties_must_match_contract(db, pair, make_doula):
    parent, doula = pair
    other = make_doula(email="other@example.com")
    contract = add_contract(db, parent, doula)

    data = comment_for(contract)
    data.doula_id = other.user_id

    with pytest.raises(ValidationError):
        create_comment(db, data)


def test_comment_length_limit():
    with pytest.raises(SchemaValidationError):
        CommentCreate(contract_id=1, parent_id=1, doula_id=2, comment="x" * 161)


def test_display_name():
    class Profile:
        first_name = "Emily"
        last_name = "rivera"

    assert display_name(Profile()) == "Emily R."


def test_comment_eligibility(client, db, pair):
    parent, doula = pair
    url = f"/contracts/comment-eligibility?parentId={parent.user_id}&doulaId={doula.user_id}"

    body = client.get(url).json()
    assert body["canComment"] is False
    assert body["hasExistingComment"] is False

    first = add_contract(db, parent, doula)
    body = client.get(url).json()
    assert body == {
        "canComment": True,
        "contractId": first.id,
        "hasExistingComment": False,
        "message": "You can leave a comment for this doula",
    }

    create_comment(db, comment_for(first))
    body = client.get(url).json()
    assert body["canComment"] is False
    assert body["hasExistingComment"] is True

    second = add_contract(db, parent, doula)
    assert client.get(url).json()["contractId"] == second.id


def test_comment_endpoints(client, db, pair):
    parent, doula = pair
    first = add_contract(db, parent, doula)
    second = add_contract(db, parent, doula)

    response = client.post("/comments", json={
        "contractId": first.id,
        "parentId": parent.user_id,
        "doulaId": doula.user_id,
        "comment": "Calm and kind",
    })
    assert response.status_code == 201

    response = client.post("/comments", json={
        "contractId": second.id,
        "parentId": parent.user_id,
        "doulaId": doula.user_id,
        "comment": "Came back for our second",
    })
    assert response.status_code == 201

    duplicate = client.post("/comments", json={
        "contractId": first.id,
        "parentId": parent.user_id,
        "doulaId": doula.user_id,
        "comment": "Once more",
    })
    assert duplicate.status_code == 409

    missing = client.post("/comments", json={
        "contractId": 999,
        "parentId": parent.user_id,
        "doulaId": doula.user_id,
        "comment": "Nobody home",
    })
    assert missing.status_code == 404

    listed = client.get(f"/doulas/{doula.user_id}/comments").json()
    assert [c["comment"] for c in listed] == ["Came back for our second", "Calm and kind"]
    assert listed[0]["parentName"] == "Jennifer S."
