"""
Integration tests for registration and profile endpoints.
"""
from app.db.models.user import User
from app.db.models.parent_profile import ParentProfile
from app.db.models.doula_profile import DoulaProfile


def parent_payload(**overrides):
    payload = {
        "email": "Jane.Doe@Example.com",
        "firstName": "Jane",
        "lastName": "Doe",
        "state": "California",
        "town": "Los Angeles",
        "zipCode": "90001",
        "serviceCategories": ["birth", "birth"],
        "financingType": ["carrot"],
        "preferredLanguages": ["English"],
        "servicePeriodStart": "2026-11-01",
        "servicePeriodEnd": "2027-01-31",
        "desiredDays": ["Monday", "wednesday"],
        "desiredStartTime": "09:00:00",
        "desiredEndTime": "17:00:00",
        "acceptedTerms": True,
    }
    payload.update(overrides)
    return payload


def doula_payload(**overrides):
    payload = {
        "email": "maria@example.com",
        "firstName": "Maria",
        "lastName": "Lopez",
        "state": "California",
        "town": "San Diego",
        "zipCode": "92101",
        "paymentPreferences": ["carrot", "self"],
        "driveDistance": 30,
        "spokenLanguages": ["English", "Spanish"],
        "hourlyRateMin": "40.00",
        "hourlyRateMax": "85.50",
        "serviceCategories": ["birth", "postpartum"],
        "certifications": ["doula_certification", "basic_life_support"],
        "certificationDocuments": ["docs/cert-1.pdf"],
        "referees": [{"firstName": "Ann", "lastName": "Lee", "email": "ann@example.com"}],
        "acceptedTerms": True,
    }
    payload.update(overrides)
    return payload


def test_register_parent(client, db):
    response = client.post("/auth/register-parent", json=parent_payload())

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    user = db.query(User).filter(User.id == body["userId"]).one()
    assert user.email == "jane.doe@example.com"
    assert user.user_type == "parent"

    profile = db.query(ParentProfile).filter(ParentProfile.user_id == user.id).one()
    assert profile.service_categories == ["birth"]
    assert profile.desired_days == ["monday", "wednesday"]
    assert profile.subscription_active is False


def test_register_parent_duplicate_email(client):
    assert client.post("/auth/register-parent", json=parent_payload()).status_code == 201

    response = client.post("/auth/register-parent", json=parent_payload(email="jane.doe@example.com"))

    assert response.status_code == 409
    assert response.json()["code"] == "conflict"


def test_register_parent_validation(client, db):
    cases = [
        parent_payload(serviceCategories=[]),
        parent_payload(financingType=["cash"]),
        parent_payload(servicePeriodStart="2027-02-01", servicePeriodEnd="2027-01-01"),
        parent_payload(desiredStartTime="17:00:00", desiredEndTime="09:00:00"),
        parent_payload(email="nope"),
    ]

    for payload in cases:
        response = client.post("/auth/register-parent", json=payload)
        assert response.status_code == 400, payload
        assert response.json()["code"] == "validation_error"

    assert db.query(User).count() == 0


def test_register_doula(client, db):
    response = client.post("/auth/register-doula", json=doula_payload())

    assert response.status_code == 201
    profile = db.query(DoulaProfile).filter(DoulaProfile.user_id == response.json()["userId"]).one()
    assert profile.drive_distance == 30
    assert profile.rating == 0
    assert profile.review_count == 0
    assert profile.referees == [{"firstName": "Ann", "lastName": "Lee", "email": "ann@example.com"}]


def test_register_doula_validation(client):
    cases = [
        doula_payload(driveDistance=0),
        doula_payload(driveDistance=71),
        doula_payload(hourlyRateMin="90.00", hourlyRateMax="40.00"),
        doula_payload(hourlyRateMin="-1"),
        doula_payload(certifications=[]),
        doula_payload(certificationDocuments=[f"doc-{i}.pdf" for i in range(8)]),
        doula_payload(referees=[{"firstName": "A", "lastName": "B", "email": f"r{i}@example.com"} for i in range(4)]),
    ]

    for payload in cases:
        assert client.post("/auth/register-doula", json=payload).status_code == 400, payload


def test_parent_profile_get_and_update(client):
    user_id = client.post("/auth/register-parent", json=parent_payload()).json()["userId"]

    response = client.get(f"/parents/{user_id}")
    assert response.status_code == 200
    assert response.json()["firstName"] == "Jane"
    assert response.json()["subscriptionActive"] is False

    response = client.put(f"/parents/{user_id}", json={"town": "Pasadena", "preferredLanguages": []})
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Profile updated successfully"}

    body = client.get(f"/parents/{user_id}").json()
    assert body["town"] == "Pasadena"
    assert body["preferredLanguages"] == []
    assert body["lastName"] == "Doe"


def test_parent_update_checks_merged_period(client):
    user_id = client.post("/auth/register-parent", json=parent_payload()).json()["userId"]

    # Stored start is 2026-11-01
    response = client.put(f"/parents/{user_id}", json={"servicePeriodEnd": "2026-10-01"})

    assert response.status_code == 400


def test_doula_profile_update(client):
    user_id = client.post("/auth/register-doula", json=doula_payload()).json()["userId"]

    assert client.put(f"/doulas/{user_id}", json={"hourlyRateMin": "100.00"}).status_code == 400

    response = client.put(f"/doulas/{user_id}", json={"hourlyRateMax": "120.00", "driveDistance": 70})
    assert response.status_code == 200

    body = client.get(f"/doulas/{user_id}").json()
    assert body["driveDistance"] == 70
    assert body["reviewCount"] == 0


def test_profile_not_found(client):
    assert client.get("/parents/999").status_code == 404
    assert client.get("/doulas/999").status_code == 404
    assert client.put("/doulas/999", json={"town": "X"}).status_code == 404
