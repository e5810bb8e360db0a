import pytest

from blogit.core.entity import BaseEntity
from blogit.core.queryset import Criteria
from blogit.exceptions import NotFoundError, NotSupportedError, ValidationError
from blogit.fields import String


class Person(BaseEntity):
    first_name = String(max_length=50, required=True)
    last_name = String(max_length=50)
    city = String(max_length=50, referenced_as="town")


@pytest.fixture
def dao(blog):
    return blog.get_provider().get_dao(Person)


@pytest.fixture
def people(dao):
    return [
        dao.save(Person(first_name="John", last_name="Doe", city="Austin")),
        dao.save(Person(first_name="Jane", last_name="Doe", city="Boston")),
        dao.save(Person(first_name="Baby", last_name="Doe", city="Austin")),
        dao.save(Person(first_name="Greg", last_name="Smith", city="Chicago")),
        dao.save(Person(first_name="Anna", last_name=None, city="Boston")),
    ]


def names(results):
    return [person.first_name for person in results]


class TestPersistence:
    def test_save_assigns_sequential_identifiers(self, people):
        assert [person.id for person in people] == [1, 2, 3, 4, 5]

    def test_counters_are_kept_per_schema(self, blog, people, create_post):
        assert create_post().id == 1

    def test_get(self, dao, people):
        assert dao.get(2).first_name == "Jane"

    def test_get_missing(self, dao):
        with pytest.raises(NotFoundError):
            dao.get(99)

    def test_update(self, dao, people):
        people[0].city = "Denver"
        dao.save(people[0])

        assert dao.get(1).city == "Denver"
        assert dao.query.all().total == 5

    def test_duplicate_identifiers_are_rejected(self, dao, people):
        with pytest.raises(ValidationError) as exc:
            dao.save(Person(id=1, first_name="Jim"))

        assert "_entity" in exc.value.messages

    def test_update_of_a_missing_record(self, dao, people):
        dao.delete(people[0])
        people[0].state_.mark_saved()

        with pytest.raises(NotFoundError):
            dao._update(dao.from_entity(people[0]))

    def test_delete(self, dao, people):
        dao.delete(people[1])

        assert people[1].state_.is_destroyed is True
        with pytest.raises(NotFoundError):
            dao.get(2)

    def test_delete_all(self, dao, people):
        assert dao.delete_all(Criteria().including(last_name="Doe")) == 3
        assert dao.query.all().total == 2

        assert dao.delete_all() == 2
        assert dao.query.all().total == 0

    def test_stored_records_are_copies(self, dao, people):
        person = dao.get(1)
        person.city = "Denver"

        assert dao.get(1).city == "Austin"

    def test_records_use_storage_attribute_names(self, dao, people):
        assert dao.from_entity(people[0])["town"] == "Austin"


class TestLookups:
    @pytest.mark.parametrize(
        "filters, expected",
        [
            ({"first_name": "John"}, ["John"]),
            ({"first_name__exact": "John"}, ["John"]),
            ({"first_name__in": ["Greg", "Anna"]}, ["Greg", "Anna"]),
            ({"first_name__in": "Greg"}, ["Greg"]),
            ({"last_name": "Doe", "city": "Austin"}, ["John", "Baby"]),
            ({"city": "Boston"}, ["Jane", "Anna"]),
        ],
    )
    def test_lookups(self, dao, people, filters, expected):
        assert names(dao.query.filter(**filters)) == expected

    def test_records_without_values_never_match(self, dao, people):
        assert names(dao.query.filter(last_name__in=["Doe", None])) == ["John", "Jane", "Baby"]

    def test_unknown_lookup(self, dao, people):
        with pytest.raises(NotSupportedError):
            dao.query.filter(first_name__icontains="j").all()


class TestCriteria:
    def test_parse(self):
        assert Criteria.parse(state__in=["published"], id=1) == (
            ("state", "in", ["published"]),
            ("id", "exact", 1),
        )

    def test_criteria_are_immutable(self):
        base = Criteria()
        filtered = base.including(state="published")

        assert not base
        assert filtered.included == (("state", "exact", "published"),)

    def test_empty_exclusions_are_ignored(self):
        assert Criteria().excluding() == Criteria()

    def test_exclude(self, dao, people):
        assert names(dao.query.exclude(last_name="Doe")) == ["Greg", "Anna"]

    def test_exclude_drops_only_records_matching_all_conditions(self, dao, people):
        assert names(dao.query.exclude(last_name="Doe", city="Austin")) == [
            "Jane",
            "Greg",
            "Anna",
        ]

    def test_successive_exclusions_all_apply(self, dao, people):
        results = dao.query.exclude(city="Austin").exclude(first_name="Anna")
        assert names(results) == ["Jane", "Greg"]

    def test_filter_and_exclude_combined(self, dao, people):
        results = dao.query.filter(city__in=["Boston", "Chicago"]).exclude(last_name="Doe")
        assert names(results) == ["Greg", "Anna"]


class TestOrdering:
    def test_ascending(self, dao, people):
        assert names(dao.query.order_by("first_name")) == [
            "Anna",
            "Baby",
            "Greg",
            "Jane",
            "John",
        ]

    def test_descending_keeps_ties_in_insertion_order(self, dao, people):
        assert names(dao.query.order_by("-city")) == ["Greg", "Jane", "Anna", "John", "Baby"]

    def test_first_key_takes_precedence(self, dao, people):
        results = dao.query.order_by(["city", "-first_name"])
        assert names(results) == ["John", "Baby", "Jane", "Anna", "Greg"]

    def test_missing_values_sort_last_when_ascending(self, dao, people):
        assert names(dao.query.order_by("last_name"))[-1] == "Anna"

    def test_missing_values_sort_first_when_descending(self, dao, people):
        assert names(dao.query.order_by("-last_name"))[0] == "Anna"
