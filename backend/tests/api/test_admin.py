from sqlalchemy import func, select

from app.api.applications.lifecycle import ApplicationStatus
from app.api.applications.models import VolunteerApplications
from app.api.events.models import Events
from app.api.ngos.models import NGOProfiles
from app.api.users.models import Users
from conftest import auth_headers

ADMIN_URL = "/api/v1/admin"


async def count(session_factory, model) -> int:
    async with session_factory() as session:
        return await session.scalar(select(func.count(model.id)))


async def test_admin_routes_need_superuser(client, factory):
    volunteer = await factory.volunteer()
    ngo_user, _ = await factory.ngo()

    for user in (volunteer, ngo_user):
        response = await client.get(f"{ADMIN_URL}/volunteers", headers=auth_headers(user))
        assert response.status_code == 403


async def test_list_volunteers_with_counts(client, factory):
    admin = await factory.superuser()
    _, profile = await factory.ngo()
    event = await factory.event(profile.id)
    busy = await factory.volunteer()
    idle = await factory.volunteer()
    await factory.application(event.id, busy.id)

    response = await client.get(f"{ADMIN_URL}/volunteers", headers=auth_headers(admin))

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 2
    counts = {item["id"]: item["application_count"] for item in data["items"]}
    assert counts == {busy.id: 1, idle.id: 0}


async def test_volunteer_details(client, factory):
    admin = await factory.superuser()
    _, profile = await factory.ngo()
    event = await factory.event(profile.id)
    volunteer = await factory.volunteer()
    await factory.application(event.id, volunteer.id)

    response = await client.get(
        f"{ADMIN_URL}/volunteers/{volunteer.id}", headers=auth_headers(admin)
    )

    assert response.status_code == 200
    assert response.json()["application_count"] == 1
    assert response.json()["applications"][0]["event_id"] == event.id


async def test_volunteer_details_ignores_other_roles(client, factory):
    admin = await factory.superuser()
    ngo_user, _ = await factory.ngo()

    response = await client.get(
        f"{ADMIN_URL}/volunteers/{ngo_user.id}", headers=auth_headers(admin)
    )

    assert response.status_code == 404


async def test_delete_volunteer_removes_applications(client, factory, session_factory):
    admin = await factory.superuser()
    _, profile = await factory.ngo()
    event = await factory.event(profile.id)
    volunteer = await factory.volunteer()
    await factory.application(event.id, volunteer.id)
    await factory.application(event.id, (await factory.volunteer()).id)

    response = await client.post(
        f"{ADMIN_URL}/volunteers/delete/{volunteer.id}", headers=auth_headers(admin)
    )

    assert response.status_code == 200
    assert response.json()["deleted"] == {"applications": 1, "users": 1}
    assert await count(session_factory, VolunteerApplications) == 1
    async with session_factory() as session:
        assert await session.get(Users, volunteer.id) is None


async def test_list_ngos_with_event_counts(client, factory):
    admin = await factory.superuser()
    owner, profile = await factory.ngo(name="Alpha Aid")
    await factory.ngo(name="Beta Care")
    await factory.event(profile.id)
    await factory.event(profile.id, is_active=False)

    response = await client.get(f"{ADMIN_URL}/ngos", headers=auth_headers(admin))

    assert response.status_code == 200
    items = response.json()["items"]
    assert [item["name"] for item in items] == ["Alpha Aid", "Beta Care"]
    assert items[0]["event_count"] == 2
    assert items[0]["owner"]["id"] == owner.id


async def test_ngo_details_lists_events(client, factory):
    admin = await factory.superuser()
    _, profile = await factory.ngo()
    event = await factory.event(profile.id)

    response = await client.get(
        f"{ADMIN_URL}/ngos/{profile.id}", headers=auth_headers(admin)
    )

    assert response.status_code == 200
    assert [item["id"] for item in response.json()["events"]] == [event.id]


async def test_delete_ngo_removes_everything_it_owns(client, factory, session_factory):
    admin = await factory.superuser()
    owner, profile = await factory.ngo()
    _, other = await factory.ngo()
    event = await factory.event(profile.id)
    kept_event = await factory.event(other.id)
    volunteer = await factory.volunteer()
    await factory.application(event.id, volunteer.id)
    await factory.application(kept_event.id, volunteer.id)

    response = await client.post(
        f"{ADMIN_URL}/ngos/delete/{profile.id}", headers=auth_headers(admin)
    )

    assert response.status_code == 200
    assert response.json()["deleted"] == {
        "applications": 1,
        "events": 1,
        "ngo_profiles": 1,
        "users": 1,
    }
    assert await count(session_factory, VolunteerApplications) == 1
    assert await count(session_factory, Events) == 1
    assert await count(session_factory, NGOProfiles) == 1
    async with session_factory() as session:
        assert await session.get(Users, owner.id) is None


async def test_delete_ngo_refused_while_responder_elsewhere(
    client, factory, session_factory
):
    admin = await factory.superuser()
    owner, profile = await factory.ngo()
    own_event = await factory.event(profile.id)
    await factory.application(own_event.id, (await factory.volunteer()).id)
    _, other = await factory.ngo()
    event = await factory.event(other.id)
    application = await factory.application(
        event.id, (await factory.volunteer()).id, ApplicationStatus.rejected
    )
    async with session_factory() as session:
        stored = await session.get(VolunteerApplications, application.id)
        stored.responded_by_id = owner.id
        await session.commit()

    response = await client.post(
        f"{ADMIN_URL}/ngos/delete/{profile.id}", headers=auth_headers(admin)
    )

    assert response.status_code == 409
    assert response.json()["error_code"] == "RESPONDER_REFERENCED"
    async with session_factory() as session:
        assert await session.get(Users, owner.id) is not None
        assert await session.get(NGOProfiles, profile.id) is not None
        assert await session.get(Events, own_event.id) is not None
        stored = await session.get(VolunteerApplications, application.id)
    assert stored.responded_by_id == owner.id
    assert await count(session_factory, VolunteerApplications) == 2


async def test_delete_unknown_ngo(client, factory):
    admin = await factory.superuser()

    response = await client.post(f"{ADMIN_URL}/ngos/delete/999", headers=auth_headers(admin))

    assert response.status_code == 404
