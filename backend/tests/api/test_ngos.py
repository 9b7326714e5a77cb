import io

from PIL import Image
from sqlalchemy import select

from app.api.events.models import Events
from app.api.users.models import UserRoles
from conftest import auth_headers

NGOS_URL = "/api/v1/ngos"


def profile_form(**overrides) -> dict:
    form = {
        "name": "River Keepers",
        "mission": "Keep the river clean",
        "contact_email": "contact@riverkeepers.org",
        "contact_phone": "9876543210",
        "address": "1 River Road",
    }
    form.update(overrides)
    return form


def png_bytes(size=(300, 300)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color=(20, 120, 200)).save(buffer, format="PNG")
    return buffer.getvalue()


async def test_create_profile_with_logo(client, factory):
    user = await factory.user(UserRoles.ngo)

    response = await client.post(
        f"{NGOS_URL}/create",
        data=profile_form(),
        files={"logo": ("logo.png", png_bytes(), "image/png")},
        headers=auth_headers(user),
    )

    assert response.status_code == 200
    data = response.json()
    assert data["user_id"] == user.id
    assert data["name"] == "River Keepers"
    assert set(data["logo"]) == {"original", "thumbnail", "medium"}
    assert data["logo"]["original"].startswith("/media/ngos/logos/")


async def test_logo_must_be_an_image(client, factory):
    user = await factory.user(UserRoles.ngo)

    response = await client.post(
        f"{NGOS_URL}/create",
        data=profile_form(),
        files={"logo": ("logo.png", b"not an image", "image/png")},
        headers=auth_headers(user),
    )

    assert response.status_code == 400
    assert response.json()["errors"]["logo"] == "Invalid image file"


async def test_second_profile_conflicts(client, factory):
    user, _ = await factory.ngo()

    response = await client.post(
        f"{NGOS_URL}/create", data=profile_form(), headers=auth_headers(user)
    )

    assert response.status_code == 409


async def test_volunteer_cannot_create_profile(client, factory):
    volunteer = await factory.volunteer()

    response = await client.post(
        f"{NGOS_URL}/create", data=profile_form(), headers=auth_headers(volunteer)
    )

    assert response.status_code == 403


async def test_profile_info_visible_to_owner_and_superuser(client, factory):
    owner, profile = await factory.ngo()
    other, _ = await factory.ngo()
    admin = await factory.superuser()

    own = await client.get(f"{NGOS_URL}/info/{profile.id}", headers=auth_headers(owner))
    by_admin = await client.get(
        f"{NGOS_URL}/info/{profile.id}", headers=auth_headers(admin)
    )
    by_other = await client.get(
        f"{NGOS_URL}/info/{profile.id}", headers=auth_headers(other)
    )

    assert own.status_code == 200
    assert by_admin.status_code == 200
    assert by_other.status_code == 404


async def test_owner_edits_profile(client, factory):
    owner, profile = await factory.ngo()

    response = await client.post(
        f"{NGOS_URL}/edit/{profile.id}",
        data=profile_form(name="River Keepers Trust"),
        headers=auth_headers(owner),
    )

    assert response.status_code == 200
    assert response.json()["name"] == "River Keepers Trust"
    assert response.json()["logo"] is None


async def test_edit_replaces_logo(client, factory):
    owner, profile = await factory.ngo()
    first = await client.post(
        f"{NGOS_URL}/edit/{profile.id}",
        data=profile_form(),
        files={"logo": ("a.png", png_bytes(), "image/png")},
        headers=auth_headers(owner),
    )

    second = await client.post(
        f"{NGOS_URL}/edit/{profile.id}",
        data=profile_form(),
        files={"logo": ("b.png", png_bytes((64, 64)), "image/png")},
        headers=auth_headers(owner),
    )

    assert second.status_code == 200
    assert second.json()["logo"]["original"] != first.json()["logo"]["original"]


async def test_other_ngo_cannot_edit_profile(client, factory):
    _, profile = await factory.ngo()
    intruder, _ = await factory.ngo()

    response = await client.post(
        f"{NGOS_URL}/edit/{profile.id}",
        data=profile_form(name="Taken over"),
        headers=auth_headers(intruder),
    )

    assert response.status_code == 403


async def test_deactivating_profile_hides_its_events(client, factory, session_factory):
    admin = await factory.superuser()
    _, profile = await factory.ngo()
    event = await factory.event(profile.id)
    profile_id, event_id = profile.id, event.id

    response = await client.post(
        f"{NGOS_URL}/delete/{profile_id}", headers=auth_headers(admin)
    )

    assert response.status_code == 200
    assert response.json()["is_active"] is False
    async with session_factory() as session:
        stored = await session.scalar(select(Events).where(Events.id == event_id))
    assert stored.is_active is False
    assert (await client.get(f"/api/v1/events/info/{event_id}")).status_code == 404


async def test_only_superuser_deactivates_profiles(client, factory):
    owner, profile = await factory.ngo()

    response = await client.post(
        f"{NGOS_URL}/delete/{profile.id}", headers=auth_headers(owner)
    )

    assert response.status_code == 403
