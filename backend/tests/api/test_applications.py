import pytest
from sqlalchemy import func, select

from app.api.applications import service as application_service
from app.api.applications.lifecycle import ApplicationStatus
from app.api.applications.models import VolunteerApplications
from conftest import auth_headers

APPLICATIONS_URL = "/api/v1/applications"
APPLICATION = {"message": "Happy to help", "skills": "First aid"}


async def apply(client, user, event_id, payload=APPLICATION):
    return await client.post(
        f"{APPLICATIONS_URL}/apply",
        params={"event_id": event_id},
        json=payload,
        headers=auth_headers(user),
    )


async def count_applications(session_factory) -> int:
    async with session_factory() as session:
        return await session.scalar(select(func.count(VolunteerApplications.id)))


async def test_volunteer_applies(client, factory):
    volunteer = await factory.volunteer()
    _, profile = await factory.ngo()
    event = await factory.event(profile.id)

    response = await apply(client, volunteer, event.id)

    assert response.status_code == 201
    data = response.json()
    assert data["changed"] is True
    assert data["application"]["status"] == "pending"
    assert data["application"]["user"]["id"] == volunteer.id
    assert data["application"]["event"]["id"] == event.id


async def test_second_application_conflicts(client, factory, session_factory):
    volunteer = await factory.volunteer()
    _, profile = await factory.ngo()
    event = await factory.event(profile.id)
    await factory.application(event.id, volunteer.id, ApplicationStatus.cancelled)

    response = await apply(client, volunteer, event.id)

    assert response.status_code == 409
    assert response.json()["error_code"] == "ALREADY_APPLIED"
    assert await count_applications(session_factory) == 1


async def test_full_event_refuses_applications(client, factory, session_factory):
    _, profile = await factory.ngo()
    event = await factory.event(profile.id, capacity=1)
    first = await factory.volunteer()
    await factory.application(event.id, first.id, ApplicationStatus.approved)
    late = await factory.volunteer()

    response = await apply(client, late, event.id)

    assert response.status_code == 409
    assert response.json()["error_code"] == "EVENT_FULL"
    assert await count_applications(session_factory) == 1


async def test_pending_applications_do_not_fill_an_event(client, factory):
    _, profile = await factory.ngo()
    event = await factory.event(profile.id, capacity=1)
    await factory.application(event.id, (await factory.volunteer()).id)

    response = await apply(client, await factory.volunteer(), event.id)

    assert response.status_code == 201


async def test_hidden_event_cannot_be_applied_to(client, factory):
    volunteer = await factory.volunteer()
    _, profile = await factory.ngo()
    event = await factory.event(profile.id, is_public=False)

    response = await apply(client, volunteer, event.id)

    assert response.status_code == 404


async def test_only_volunteers_apply(client, factory):
    user, profile = await factory.ngo()
    event = await factory.event(profile.id)

    response = await apply(client, user, event.id)

    assert response.status_code == 403


async def test_approval_fills_the_last_slot(client, factory):
    """Two applicants for one slot: the second approval is refused."""
    owner, profile = await factory.ngo()
    event = await factory.event(profile.id, capacity=1)
    first = await factory.application(event.id, (await factory.volunteer()).id)
    second = await factory.application(event.id, (await factory.volunteer()).id)
    first_id, second_id = first.id, second.id

    approved = await client.post(
        f"{APPLICATIONS_URL}/approve/{first_id}",
        json={"response_message": "See you there"},
        headers=auth_headers(owner),
    )
    refused = await client.post(
        f"{APPLICATIONS_URL}/approve/{second_id}", headers=auth_headers(owner)
    )

    assert approved.status_code == 200
    application = approved.json()["application"]
    assert application["status"] == "approved"
    assert application["response_message"] == "See you there"
    assert application["responded_by_id"] == owner.id
    assert application["responded_at"] is not None

    assert refused.status_code == 409
    assert refused.json()["error_code"] == "EVENT_FULL"

    info = await client.get(
        f"{APPLICATIONS_URL}/info/{second_id}", headers=auth_headers(owner)
    )
    assert info.json()["status"] == "pending"

    event_info = await client.get(f"/api/v1/events/info/{event.id}")
    assert event_info.json()["is_full"] is True
    assert event_info.json()["approved_count"] == 1


async def test_approving_twice_is_a_noop(client, factory):
    owner, profile = await factory.ngo()
    event = await factory.event(profile.id, capacity=1)
    application = await factory.application(
        event.id, (await factory.volunteer()).id, ApplicationStatus.approved
    )

    response = await client.post(
        f"{APPLICATIONS_URL}/approve/{application.id}", headers=auth_headers(owner)
    )

    assert response.status_code == 200
    assert response.json()["changed"] is False
    assert response.json()["application"]["status"] == "approved"


async def test_rejected_application_cannot_be_approved(client, factory):
    owner, profile = await factory.ngo()
    event = await factory.event(profile.id)
    application = await factory.application(event.id, (await factory.volunteer()).id)

    rejected = await client.post(
        f"{APPLICATIONS_URL}/reject/{application.id}", headers=auth_headers(owner)
    )
    approved = await client.post(
        f"{APPLICATIONS_URL}/approve/{application.id}", headers=auth_headers(owner)
    )

    assert rejected.status_code == 200
    assert rejected.json()["application"]["status"] == "rejected"
    assert approved.status_code == 409
    assert approved.json()["error_code"] == "INVALID_TRANSITION"


@pytest.mark.parametrize(
    "status", [ApplicationStatus.approved, ApplicationStatus.cancelled]
)
async def test_closed_application_cannot_be_rejected(
    client, factory, session_factory, status
):
    owner, profile = await factory.ngo()
    event = await factory.event(profile.id)
    application = await factory.application(
        event.id, (await factory.volunteer()).id, status
    )

    response = await client.post(
        f"{APPLICATIONS_URL}/reject/{application.id}", headers=auth_headers(owner)
    )

    assert response.status_code == 409
    assert response.json()["error_code"] == "INVALID_TRANSITION"
    async with session_factory() as session:
        stored = await session.get(VolunteerApplications, application.id)
    assert stored.status is status
    assert stored.responded_by_id is None


async def test_approval_rereads_status_changed_meanwhile(
    client, factory, session_factory, monkeypatch
):
    """The applicant cancels between the permission check and the approval."""
    owner, profile = await factory.ngo()
    event = await factory.event(profile.id)
    application = await factory.application(event.id, (await factory.volunteer()).id)
    lock_event = application_service.lock_event

    async def cancel_then_lock(session, event_id):
        async with session_factory() as other:
            stored = await other.get(VolunteerApplications, application.id)
            stored.status = ApplicationStatus.cancelled
            await other.commit()
        return await lock_event(session, event_id)

    monkeypatch.setattr(application_service, "lock_event", cancel_then_lock)

    response = await client.post(
        f"{APPLICATIONS_URL}/approve/{application.id}", headers=auth_headers(owner)
    )

    assert response.status_code == 409
    assert response.json()["error_code"] == "INVALID_TRANSITION"
    async with session_factory() as session:
        stored = await session.get(VolunteerApplications, application.id)
    assert stored.status is ApplicationStatus.cancelled
    assert stored.responded_at is None


async def test_other_ngo_cannot_decide(client, factory):
    _, profile = await factory.ngo()
    intruder, _ = await factory.ngo()
    event = await factory.event(profile.id)
    application = await factory.application(event.id, (await factory.volunteer()).id)

    response = await client.post(
        f"{APPLICATIONS_URL}/approve/{application.id}", headers=auth_headers(intruder)
    )

    assert response.status_code == 403


async def test_volunteer_cannot_decide(client, factory):
    _, profile = await factory.ngo()
    event = await factory.event(profile.id)
    volunteer = await factory.volunteer()
    application = await factory.application(event.id, volunteer.id)

    response = await client.post(
        f"{APPLICATIONS_URL}/approve/{application.id}", headers=auth_headers(volunteer)
    )

    assert response.status_code == 403


async def test_superuser_decides_for_any_ngo(client, factory):
    admin = await factory.superuser()
    _, profile = await factory.ngo()
    event = await factory.event(profile.id)
    application = await factory.application(event.id, (await factory.volunteer()).id)

    response = await client.post(
        f"{APPLICATIONS_URL}/reject/{application.id}", headers=auth_headers(admin)
    )

    assert response.status_code == 200
    assert response.json()["application"]["responded_by_id"] == admin.id


async def test_applicant_cancels_pending_application(client, factory):
    volunteer = await factory.volunteer()
    _, profile = await factory.ngo()
    event = await factory.event(profile.id)
    application = await factory.application(event.id, volunteer.id)

    response = await client.post(
        f"{APPLICATIONS_URL}/cancel/{application.id}", headers=auth_headers(volunteer)
    )

    assert response.status_code == 200
    assert response.json()["changed"] is True
    assert response.json()["application"]["status"] == "cancelled"


async def test_cancel_after_decision_changes_nothing(client, factory):
    volunteer = await factory.volunteer()
    _, profile = await factory.ngo()
    event = await factory.event(profile.id)
    application = await factory.application(
        event.id, volunteer.id, ApplicationStatus.rejected
    )

    response = await client.post(
        f"{APPLICATIONS_URL}/cancel/{application.id}", headers=auth_headers(volunteer)
    )

    assert response.status_code == 200
    data = response.json()
    assert data["changed"] is False
    assert data["message"] == "Cannot cancel application. Status is not pending."
    assert data["application"]["status"] == "rejected"


async def test_only_the_applicant_cancels(client, factory):
    volunteer = await factory.volunteer()
    other = await factory.volunteer()
    _, profile = await factory.ngo()
    event = await factory.event(profile.id)
    application = await factory.application(event.id, volunteer.id)

    response = await client.post(
        f"{APPLICATIONS_URL}/cancel/{application.id}", headers=auth_headers(other)
    )

    assert response.status_code == 403


async def test_application_info_is_private(client, factory):
    volunteer = await factory.volunteer()
    stranger = await factory.volunteer()
    owner, profile = await factory.ngo()
    event = await factory.event(profile.id)
    application = await factory.application(event.id, volunteer.id)

    own = await client.get(
        f"{APPLICATIONS_URL}/info/{application.id}", headers=auth_headers(volunteer)
    )
    organiser = await client.get(
        f"{APPLICATIONS_URL}/info/{application.id}", headers=auth_headers(owner)
    )
    hidden = await client.get(
        f"{APPLICATIONS_URL}/info/{application.id}", headers=auth_headers(stranger)
    )

    assert own.status_code == 200
    assert organiser.status_code == 200
    assert hidden.status_code == 404


async def test_my_applications(client, factory):
    volunteer = await factory.volunteer()
    _, profile = await factory.ngo()
    for _ in range(3):
        event = await factory.event(profile.id)
        await factory.application(event.id, volunteer.id)
    other_event = await factory.event(profile.id)
    await factory.application(other_event.id, (await factory.volunteer()).id)

    response = await client.get(
        f"{APPLICATIONS_URL}/mine", headers=auth_headers(volunteer)
    )

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 3
    assert {item["user_id"] for item in data["items"]} == {volunteer.id}


async def test_event_applications_for_owner_only(client, factory):
    owner, profile = await factory.ngo()
    intruder, _ = await factory.ngo()
    event = await factory.event(profile.id)
    await factory.application(event.id, (await factory.volunteer()).id)

    response = await client.get(
        f"{APPLICATIONS_URL}/manage/{event.id}", headers=auth_headers(owner)
    )
    denied = await client.get(
        f"{APPLICATIONS_URL}/manage/{event.id}", headers=auth_headers(intruder)
    )

    assert response.status_code == 200
    assert response.json()["event"]["id"] == event.id
    assert len(response.json()["applications"]) == 1
    assert denied.status_code == 404


async def test_manage_all_counts_by_status(client, factory):
    owner, profile = await factory.ngo()
    _, other = await factory.ngo()
    event = await factory.event(profile.id, capacity=10)
    for status in (
        ApplicationStatus.pending,
        ApplicationStatus.pending,
        ApplicationStatus.approved,
        ApplicationStatus.rejected,
    ):
        await factory.application(event.id, (await factory.volunteer()).id, status)
    elsewhere = await factory.event(other.id)
    await factory.application(elsewhere.id, (await factory.volunteer()).id)

    response = await client.get(
        f"{APPLICATIONS_URL}/manage-all", headers=auth_headers(owner)
    )

    assert response.status_code == 200
    data = response.json()
    assert data["stats"] == {
        "total": 4,
        "pending": 2,
        "approved": 1,
        "rejected": 1,
        "cancelled": 0,
    }
    assert len(data["applications"]) == 4
