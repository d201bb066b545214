"""
Unit tests for ContractorService over the in-memory repository.
"""
from uuid import uuid4

from fepro.models.contractor import (
    ContractorDraft,
    ContractorSortField,
    ContractorStatus,
    Coordinates,
    SortDirection,
)

MOSCOW = Coordinates(lat=55.7558, lng=37.6173)
KAZAN = Coordinates(lat=55.7961, lng=49.1064)


class TestCreate:

    def test_defaults_status_to_active(self, service):
        created = service.create(ContractorDraft(name="ACME", inn="123"))
        assert created.status is ContractorStatus.ACTIVE

    def test_keeps_given_status(self, service):
        created = service.create(ContractorDraft(name="ACME", status=ContractorStatus.PENDING))
        assert created.status is ContractorStatus.PENDING

    def test_assigns_fresh_ids(self, service):
        ids = {service.create(ContractorDraft(name=f"C{i}")).id for i in range(20)}
        assert len(ids) == 20

    def test_timestamps_equal_at_creation(self, service):
        created = service.create(ContractorDraft(name="ACME"))
        assert created.created_at == created.updated_at
        assert created.created_at.tzinfo is not None

    def test_single_insert_in_one_transaction(self, service, repository, transactions):
        service.create(ContractorDraft(name="ACME"))
        assert repository.writes == ["insert"]
        assert transactions.opened == 1


class TestUpdate:

    def test_missing_id_returns_none_without_writing(self, service, repository):
        assert service.update(uuid4(), ContractorDraft(name="Ghost")) is None
        assert repository.writes == []
        assert repository.rows == {}

    def test_replaces_every_editable_field(self, service, clock):
        original = service.create(
            ContractorDraft(
                name="ACME",
                legal_name="ACME LLC",
                inn="123",
                kpp="456",
                email="acme@example.com",
                phone="+7 000",
                address="Moscow",
                coordinates=MOSCOW,
                status=ContractorStatus.ACTIVE,
            )
        )
        clock.tick()
        updated = service.update(
            original.id, ContractorDraft(name="ACME Corp", status=ContractorStatus.BLOCKED)
        )
        assert updated.name == "ACME Corp"
        assert updated.status is ContractorStatus.BLOCKED
        # Omitted values overwrite with None
        assert updated.legal_name is None
        assert updated.inn is None
        assert updated.kpp is None
        assert updated.email is None
        assert updated.phone is None
        assert updated.address is None
        assert updated.coordinates is None
        assert updated.coordinates_text is None

    def test_moved_point_is_stored_as_new_text(self, service):
        original = service.create(ContractorDraft(name="ACME", coordinates=MOSCOW))
        assert original.coordinates_text == "SRID=4326;POINT(37.6173 55.7558)"
        moved = service.update(original.id, ContractorDraft(name="ACME", coordinates=KAZAN))
        assert moved.coordinates_text == "SRID=4326;POINT(49.1064 55.7961)"

    def test_keeps_id_and_created_at(self, service, clock):
        original = service.create(ContractorDraft(name="ACME"))
        clock.tick()
        updated = service.update(original.id, ContractorDraft(name="ACME 2"))
        assert updated.id == original.id
        assert updated.created_at == original.created_at

    def test_updated_at_strictly_increases(self, service, clock):
        original = service.create(ContractorDraft(name="ACME"))
        first = service.update(original.id, ContractorDraft(name="A"))
        second = service.update(original.id, ContractorDraft(name="B"))
        # Clock never moved, timestamps still advance
        assert original.updated_at < first.updated_at < second.updated_at

    def test_lookup_and_write_share_a_transaction(self, service, transactions):
        original = service.create(ContractorDraft(name="ACME"))
        service.update(original.id, ContractorDraft(name="B"))
        assert transactions.opened == 2


class TestDelete:

    def test_delete_existing(self, service):
        created = service.create(ContractorDraft(name="ACME"))
        assert service.delete(created.id) == 1
        assert service.get_by_id(created.id) is None

    def test_delete_missing_is_not_an_error(self, service):
        assert service.delete(uuid4()) == 0


class TestReads:

    def test_search_is_case_insensitive_newest_first(self, service, clock):
        service.create(ContractorDraft(name="ACME Corp"))
        clock.tick()
        service.create(ContractorDraft(name="Globex"))
        clock.tick()
        service.create(ContractorDraft(name="acme"))
        clock.tick()
        service.create(ContractorDraft(name="New Acme Ltd"))

        names = [c.name for c in service.search_by_name("acme")]
        assert names == ["New Acme Ltd", "acme", "ACME Corp"]

    def test_exists_by_inn(self, service):
        service.create(ContractorDraft(name="ACME", inn="7701234567"))
        assert service.exists_by_inn("7701234567") is True
        assert service.exists_by_inn("0000000000") is False

    def test_exists_by_email(self, service):
        service.create(ContractorDraft(name="ACME", email="acme@example.com"))
        assert service.exists_by_email("acme@example.com") is True
        assert service.exists_by_email("other@example.com") is False

    def test_get_by_inn_and_email(self, service):
        created = service.create(ContractorDraft(name="ACME", inn="1", email="a@b.ru"))
        assert service.get_by_inn("1").id == created.id
        assert service.get_by_email("a@b.ru").id == created.id
        assert service.get_by_inn("2") is None

    def test_list_by_status_and_active(self, service):
        service.create(ContractorDraft(name="Zeta"))
        service.create(ContractorDraft(name="Alpha"))
        service.create(ContractorDraft(name="Blocked", status=ContractorStatus.BLOCKED))

        assert [c.name for c in service.list_by_status(ContractorStatus.BLOCKED)] == ["Blocked"]
        assert [c.name for c in service.list_active()] == ["Alpha", "Zeta"]
        assert len(service.list_all()) == 3
        assert service.count() == 3


class TestNearby:

    def test_zero_radius_matches_exact_point_only(self, service):
        here = service.create(ContractorDraft(name="Here", coordinates=MOSCOW))
        service.create(ContractorDraft(name="Close", coordinates=Coordinates(lat=55.7559, lng=37.6173)))
        service.create(ContractorDraft(name="Nowhere"))

        found = service.nearby(MOSCOW.lat, MOSCOW.lng, 0)
        assert [c.id for c in found] == [here.id]

    def test_large_radius_returns_every_located_contractor(self, service):
        service.create(ContractorDraft(name="Moscow", coordinates=MOSCOW))
        service.create(ContractorDraft(name="Kazan", coordinates=KAZAN))
        service.create(ContractorDraft(name="Nowhere"))

        found = service.nearby(0, 0, 1000)
        assert sorted(c.name for c in found) == ["Kazan", "Moscow"]


class TestListPage:

    def test_page_and_has_next(self, service):
        for name in ["Delta", "Alpha", "Charlie", "Bravo"]:
            service.create(ContractorDraft(name=name))

        first = service.list_page(ContractorSortField.NAME, SortDirection.ASC, limit=3, offset=0)
        assert [c.name for c in first.items] == ["Alpha", "Bravo", "Charlie"]
        assert first.total == 4
        assert first.has_next_page is True

        last = service.list_page(ContractorSortField.NAME, SortDirection.ASC, limit=3, offset=3)
        assert [c.name for c in last.items] == ["Delta"]
        assert last.has_next_page is False

    def test_page_bounds_are_clamped(self, service):
        service.create(ContractorDraft(name="Only"))
        page = service.list_page(limit=0, offset=-10)
        assert page.limit == 1
        assert page.offset == 0
        assert len(page.items) == 1


def test_end_to_end_lifecycle(service, clock):
    """create -> read -> update -> read -> delete -> read."""
    a = service.create(ContractorDraft(name="ACME", inn="123"))
    assert service.get_by_id(a.id).status is ContractorStatus.ACTIVE

    clock.tick(5)
    service.update(a.id, ContractorDraft(name="ACME Corp", status=ContractorStatus.BLOCKED))
    fetched = service.get_by_id(a.id)
    assert fetched.name == "ACME Corp"
    assert fetched.status is ContractorStatus.BLOCKED
    assert fetched.updated_at > fetched.created_at

    service.delete(a.id)
    assert service.get_by_id(a.id) is None
