import pytest

from tourisma_api.app.core.exceptions import ConflictError, PermissionDeniedError, ValidationFailedError
from tourisma_api.app.schemas.experience import ExperienceCreate, ExperienceUpdate
from tourisma_api.app.schemas.partner import PartnerApplication, PartnerStatus, PartnerUpdate
from tourisma_api.app.services.experience_service import ExperienceService
from tourisma_api.app.services.partner_service import PartnerService


def test_suspending_partner_hides_but_keeps_experiences(store):
    PartnerService(store).update_partner_status("p1", PartnerStatus.SUSPENDED)
    listed = {e.id for e in ExperienceService(store).list_active_experiences()}
    assert listed == {"e2", "e4", "e5"}
    assert {"e1", "e3", "e6"} <= {e.id for e in store.experiences}

    PartnerService(store).update_partner_status("p1", PartnerStatus.ACTIVE)
    assert "e1" in {e.id for e in ExperienceService(store).list_active_experiences()}


def test_support_partner_cannot_be_restatused(store):
    with pytest.raises(ValidationFailedError):
        PartnerService(store).update_partner_status("p0", PartnerStatus.SUSPENDED)


def test_moderation_list_hides_support_and_filters(store):
    service = PartnerService(store)
    assert [p.id for p in service.list_partners()] == ["p1", "p2", "p3", "p4"]
    assert [p.id for p in service.list_partners("surf")] == ["p3"]


def test_update_partner_changes_only_given_fields(store):
    partner = PartnerService(store).update_partner("p2", PartnerUpdate(city="Marrakech"))
    assert partner.city == "Marrakech"
    assert partner.company_name == "Agafay Luxury Camp"


def test_only_owner_or_admin_can_manage(store):
    service = PartnerService(store)
    users = {u.id: u for u in store.users}
    assert service.ensure_can_manage(users["u2"], "p1").id == "p1"
    assert service.ensure_can_manage(users["u3"], "p1").id == "p1"
    with pytest.raises(PermissionDeniedError):
        service.ensure_can_manage(users["u4"], "p1")


def test_application_creates_pending_partner(store):
    service = PartnerService(store)
    application = PartnerApplication(
        name="Salma", email="Salma@Dunes.ma", company_name="Merzouga Dunes", city="Merzouga", phone="+212 655"
    )
    partner = service.apply(application)
    assert partner.status == PartnerStatus.PENDING
    assert partner.id == "p5"
    owner = next(u for u in store.users if u.id == partner.user_id)
    assert owner.role.value == "PARTNER" and owner.email == "salma@dunes.ma"
    with pytest.raises(ConflictError):
        service.apply(application)


def test_new_experience_defaults(store):
    experience = ExperienceService(store).add_experience(
        "p3",
        ExperienceCreate(title="Kitesurf", price=700, location="Essaouira", images=["https://img/1.jpg"]),
    )
    assert experience.id == "e7"
    assert (experience.rating, experience.reviews_count, experience.views) == (5.0, 0, 0)
    assert experience.max_guests == 10 and experience.is_active


@pytest.mark.parametrize("images", [[], ["  "], ["ftp://img/1.jpg"], ["/local.png"]])
def test_experience_images_are_validated(images):
    with pytest.raises(ValueError):
        ExperienceCreate(title="x", price=1, location="Fès", images=images)


def test_update_experience_is_partial(store):
    service = ExperienceService(store)
    experience = service.update_experience("e4", ExperienceUpdate(price=380))
    assert experience.price == 380
    assert experience.title.startswith("Cours de Surf")
    with pytest.raises(ValueError):
        ExperienceUpdate(images=[])


def test_search_filters(store):
    service = ExperienceService(store)
    assert {e.id for e in service.search(city="marrakech")} == {"e1"}
    assert {e.id for e in service.search(category="Culture")} == {"e5", "e6"}
    assert {e.id for e in service.search(max_price=400)} == {"e4", "e5"}
    assert len(service.search(category="all", city="all")) == 6


def test_marrakech_search_includes_ourika(store):
    service = ExperienceService(store)
    service.add_experience(
        "p1",
        ExperienceCreate(title="Ourika", price=300, location="Ourika", images=["https://img/o.jpg"]),
    )
    assert {e.location for e in service.search(city="Marrakech")} == {"Marrakech", "Ourika"}


def test_record_view_increments(store):
    service = ExperienceService(store)
    service.record_view("e2")
    assert service.record_view("e2").views == 2
