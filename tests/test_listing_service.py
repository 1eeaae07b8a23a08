"""Tests for listing create/update/delete orchestration."""

import pytest

from app.exceptions import NotFound, QueryFailure, StorageFailure, ValidationFailure
from app.models import Property
from app.schemas.property import PropertyFilter, PropertyUpdate
from app.services.image_store import ImageStore
from app.services.listing_service import ImageUpload, ListingService


class FailingImageStore(ImageStore):
    """Image store that fails on the n-th upload."""

    def __init__(self, upload_dir, placeholder_path, fail_on: int):
        super().__init__(upload_dir, placeholder_path)
        self.fail_on = fail_on
        self.calls = 0

    def store(self, listing_id, content, original_name):
        self.calls += 1
        if self.calls == self.fail_on:
            raise StorageFailure("disk full")
        return super().store(listing_id, content, original_name)


@pytest.fixture
def service(db, image_store) -> ListingService:
    return ListingService(db, image_store)


class TestCreate:
    def test_scenario_test_villa(self, service, listing_form):
        created = service.create_listing(listing_form)

        assert created.id
        assert created.status == "PENDING"
        assert created.property_type == "HOUSE"
        assert created.bedrooms == 3
        assert created.bathrooms == 2
        assert created.agent_id == "a1"
        assert created.image_urls == []

    def test_images_are_stored_and_persisted_in_order(self, service, listing_form, image_store):
        images = [
            ImageUpload(filename="front.jpg", content=b"front"),
            ImageUpload(filename="kitchen.png", content=b"kitchen"),
        ]

        created = service.create_listing(listing_form, images)

        assert created.image_urls == [f"{created.id}-1.jpg", f"{created.id}-2.png"]
        assert service.get_listing(created.id).image_urls == created.image_urls
        assert image_store.retrieve(created.image_urls[1]).content == b"kitchen"

    def test_form_booleans_and_floor_plans(self, service, listing_form):
        listing_form.update({
            "hasGarage": "true",
            "hasPool": "false",
            "parkingSpaces": "2",
            "heatingType": "SOLAR",
            "floorPlans": '["https://example.com/p1.png", "https://example.com/p2.png"]',
            "latitude": "",
        })

        created = service.create_listing(listing_form)

        assert created.has_garage is True
        assert created.has_pool is False
        assert created.parking_spaces == 2
        assert created.heating_type == "SOLAR"
        assert created.floor_plans == ["https://example.com/p1.png", "https://example.com/p2.png"]
        assert created.latitude is None

    def test_validation_failure_writes_nothing(self, service, listing_form, db):
        del listing_form["title"]
        listing_form["price"] = "-5"

        with pytest.raises(ValidationFailure) as exc_info:
            service.create_listing(listing_form, [ImageUpload(filename="a.jpg", content=b"x")])

        fields = {error.field for error in exc_info.value.errors}
        assert {"title", "price"} <= fields
        assert db.query(Property).count() == 0

    def test_image_failure_rolls_back_row_and_files(self, db, tmp_path, placeholder_path, listing_form):
        store = FailingImageStore(tmp_path / "uploads", placeholder_path, fail_on=2)
        service = ListingService(db, store)
        images = [
            ImageUpload(filename="a.jpg", content=b"a"),
            ImageUpload(filename="b.jpg", content=b"b"),
        ]

        with pytest.raises(StorageFailure):
            service.create_listing(listing_form, images)

        assert db.query(Property).count() == 0
        assert list(store.upload_dir.iterdir()) == []


class TestReadUpdateDelete:
    def test_list_uses_filters(self, service, listing_form):
        service.create_listing(listing_form)
        service.create_listing({**listing_form, "city": "Kumasi"})

        page = service.list_listings(PropertyFilter(city_contains="ACCRA"), page=1, page_size=10)

        assert page.total == 1
        assert page.items[0].city == "Accra"

    def test_update_appends_new_images(self, service, listing_form):
        created = service.create_listing(listing_form, [ImageUpload(filename="a.jpg", content=b"a")])

        updated = service.update_listing(
            created.id, {"price": "120000"}, [ImageUpload(filename="b.webp", content=b"b")]
        )

        assert updated.price == 120000
        assert updated.image_urls == [f"{created.id}-1.jpg", f"{created.id}-2.webp"]

    def test_update_rejects_out_of_range_value(self, service, listing_form):
        created = service.create_listing(listing_form)

        with pytest.raises(ValidationFailure):
            service.update_listing(created.id, {"bedrooms": "-1"})

    def test_update_missing_listing(self, service):
        with pytest.raises(NotFound):
            service.update_listing("missing", {"price": "1"})

    def test_delete_removes_row_and_images(self, service, listing_form, image_store):
        created = service.create_listing(listing_form, [ImageUpload(filename="a.jpg", content=b"a")])

        service.delete_listing(created.id)

        with pytest.raises(NotFound):
            service.get_listing(created.id)
        assert not (image_store.upload_dir / created.image_urls[0]).exists()
        with pytest.raises(NotFound):
            service.delete_listing(created.id)

    def test_update_discards_new_images_when_write_fails(self, service, listing_form, image_store, monkeypatch):
        created = service.create_listing(listing_form, [ImageUpload(filename="a.jpg", content=b"a")])

        def failing_update(listing_id, patch):
            raise QueryFailure("Failed to update property")

        monkeypatch.setattr(service.repository, "update", failing_update)

        with pytest.raises(QueryFailure):
            service.update_listing(created.id, {"price": "1"}, [ImageUpload(filename="b.jpg", content=b"b")])

        names = sorted(p.name for p in image_store.upload_dir.iterdir())
        assert names == [f"{created.id}-1.jpg"]


class TestImageOwnership:
    def test_form_cannot_set_image_references(self, service, listing_form):
        owner = service.create_listing(listing_form, [ImageUpload(filename="a.jpg", content=b"a")])
        reference = owner.image_urls[0]

        created = service.create_listing({**listing_form, "imageUrls": f'["{reference}"]'})
        updated = service.update_listing(created.id, {"imageUrls": f'["{reference}"]'})

        assert created.image_urls == []
        assert updated.image_urls == []

    @pytest.mark.parametrize("foreign", ["{ref}", "https://cdn.example.com/{ref}", "/uploads/properties/{ref}"])
    def test_delete_leaves_other_listings_images(self, service, repository, listing_form, image_store, foreign):
        owner = service.create_listing(listing_form, [ImageUpload(filename="a.jpg", content=b"a")])
        reference = owner.image_urls[0]
        other = service.create_listing(listing_form, [ImageUpload(filename="b.jpg", content=b"b")])
        # Ссылки, записанные напрямую в обход формы
        repository.update(
            other.id, PropertyUpdate(image_urls=other.image_urls + [foreign.format(ref=reference)])
        )

        service.delete_listing(other.id)

        assert (image_store.upload_dir / reference).read_bytes() == b"a"
        assert not (image_store.upload_dir / other.image_urls[0]).exists()
        assert service.get_listing(owner.id).image_urls == [reference]
