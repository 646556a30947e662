"""
Contacts API — List-Query Pipeline Unit Tests
===============================================

What:  Tests for filter_records, sort_records, paginate and run_list_query.
How:   Pure functions over SimpleNamespace / dict records; no database.

What we test:
    ✅ eq / gte filtering, identity without a filter, unknown field
    ✅ Unsupported operator always raises InvalidFilterOperatorError
    ✅ Stable ascending and descending sort; default sort = lname asc
    ✅ Page sizes, page concatenation, out-of-range and empty input
"""

import math
from datetime import date

import pytest

from contacts_api.exceptions import InvalidFilterOperatorError, PageOutOfRangeError
from contacts_api.services.list_query import (
    FilterSpec,
    ListQuery,
    PageSpec,
    SortSpec,
    filter_records,
    paginate,
    parse_date,
    run_list_query,
    sort_records,
)


@pytest.fixture
def people(make_contact):
    return [
        make_contact("Grace", "Hopper", birthday=date(1906, 12, 9)),
        make_contact("Ada", "Lovelace", birthday=date(1815, 12, 10)),
        make_contact("Alan", "Turing", birthday=date(1912, 6, 23)),
        make_contact("Barbara", "Liskov", birthday=date(1939, 11, 7)),
        make_contact("Edsger", "Dijkstra", birthday=date(1930, 5, 11)),
    ]


class TestFilterRecords:
    """Tests for the filter stage."""

    def test_no_filter_is_identity(self, people):
        result = filter_records(people)
        assert result == people
        assert result is not people

    def test_partial_filter_parameters_are_ignored(self, people):
        assert filter_records(people, "fname", None, "Ada") == people
        assert filter_records(people, None, "eq", "Ada") == people

    def test_eq_on_string_field(self, people):
        result = filter_records(people, "fname", "eq", "Alan")
        assert [c.lname for c in result] == ["Turing"]

    def test_eq_is_case_sensitive(self, people):
        assert filter_records(people, "fname", "eq", "alan") == []

    def test_eq_on_date_field(self, people):
        result = filter_records(people, "birthday", "eq", "1939-11-07")
        assert [c.fname for c in result] == ["Barbara"]

    def test_eq_on_date_field_accepts_iso_datetime(self, people):
        result = filter_records(people, "birthday", "eq", "1939-11-07T00:00:00Z")
        assert [c.fname for c in result] == ["Barbara"]

    def test_gte_on_date_field_keeps_input_order(self, people):
        result = filter_records(people, "birthday", "gte", "1910-01-01")
        assert [c.fname for c in result] == ["Alan", "Barbara", "Edsger"]

    def test_gte_boundary_is_inclusive(self, people):
        result = filter_records(people, "birthday", "gte", "1939-11-07")
        assert [c.fname for c in result] == ["Barbara"]

    def test_gte_on_string_field_matches_nothing(self, people):
        assert filter_records(people, "fname", "gte", "1900-01-01") == []

    def test_gte_with_unparseable_date_matches_nothing(self, people):
        assert filter_records(people, "birthday", "gte", "not-a-date") == []

    def test_operator_is_case_insensitive(self, people):
        result = filter_records(people, "fname", " EQ ", "Ada")
        assert [c.lname for c in result] == ["Lovelace"]

    def test_unknown_field_matches_nothing(self, people):
        assert filter_records(people, "nickname", "eq", "Ada") == []

    def test_none_field_values_never_match(self, make_contact):
        records = [make_contact("A", "B", phone=None), make_contact("C", "D", phone="555")]
        assert [c.fname for c in filter_records(records, "phone", "eq", "555")] == ["C"]

    def test_eq_on_id_compares_string_form(self, people):
        target = people[2]
        result = filter_records(people, "id", "eq", str(target.id))
        assert result == [target]

    def test_dict_records_are_supported(self):
        records = [{"fname": "Ada", "lname": "Lovelace"}, {"fname": "Alan", "lname": "Turing"}]
        assert filter_records(records, "lname", "eq", "Turing") == [records[1]]

    @pytest.mark.parametrize("operator", ["lt", "neq", "contains", "gt"])
    def test_unsupported_operator_raises(self, people, operator):
        with pytest.raises(InvalidFilterOperatorError) as exc_info:
            filter_records(people, "fname", operator, "Ada")
        assert exc_info.value.operator == operator
        assert exc_info.value.context["supported"] == ["eq", "gte"]

    def test_unsupported_operator_raises_even_for_empty_input(self):
        with pytest.raises(InvalidFilterOperatorError):
            filter_records([], "fname", "like", "A")


class TestSortRecords:
    """Tests for the sort stage."""

    def test_default_sort_equals_lname_ascending(self, people):
        assert sort_records(people) == sort_records(people, "lname", "asc")
        assert [c.lname for c in sort_records(people)] == [
            "Dijkstra", "Hopper", "Liskov", "Lovelace", "Turing",
        ]

    def test_descending(self, people):
        result = sort_records(people, "fname", "desc")
        assert [c.fname for c in result] == ["Grace", "Edsger", "Barbara", "Alan", "Ada"]

    @pytest.mark.parametrize("direction", [None, "", "sideways", "ASC"])
    def test_unrecognized_direction_means_ascending(self, people, direction):
        result = sort_records(people, "fname", direction)
        assert [c.fname for c in result] == ["Ada", "Alan", "Barbara", "Edsger", "Grace"]

    def test_direction_is_case_insensitive(self, people):
        assert sort_records(people, "fname", "DESC") == sort_records(people, "fname", "desc")

    def test_sort_by_date_is_chronological(self, people):
        result = sort_records(people, "birthday")
        assert [c.fname for c in result] == ["Ada", "Grace", "Alan", "Edsger", "Barbara"]

    def test_does_not_mutate_input(self, people):
        before = list(people)
        sort_records(people, "fname", "desc")
        assert people == before

    def test_stable_for_equal_keys_ascending(self, make_contact):
        records = [
            make_contact("Zed", "Smith"),
            make_contact("Amy", "Jones"),
            make_contact("Bob", "Smith"),
            make_contact("Cat", "Jones"),
            make_contact("Dan", "Smith"),
        ]
        result = sort_records(records, "lname", "asc")
        assert [c.fname for c in result] == ["Amy", "Cat", "Zed", "Bob", "Dan"]

    def test_stable_for_equal_keys_descending(self, make_contact):
        records = [
            make_contact("Zed", "Smith"),
            make_contact("Amy", "Jones"),
            make_contact("Bob", "Smith"),
            make_contact("Cat", "Jones"),
            make_contact("Dan", "Smith"),
        ]
        result = sort_records(records, "lname", "desc")
        assert [c.fname for c in result] == ["Zed", "Bob", "Dan", "Amy", "Cat"]

    def test_none_values_sort_last_ascending(self, make_contact):
        records = [
            make_contact("A", "X", phone=None),
            make_contact("B", "X", phone="555-0002"),
            make_contact("C", "X", phone="555-0001"),
        ]
        result = sort_records(records, "phone")
        assert [c.fname for c in result] == ["C", "B", "A"]

    def test_none_values_sort_first_descending(self, make_contact):
        records = [
            make_contact("A", "X", phone="555-0001"),
            make_contact("B", "X", phone=None),
            make_contact("C", "X", phone="555-0002"),
            make_contact("D", "X", phone=None),
        ]
        result = sort_records(records, "phone", "desc")
        assert [c.fname for c in result] == ["B", "D", "C", "A"]

    def test_unknown_field_keeps_input_order(self, people):
        assert sort_records(people, "nickname", "desc") == people


class TestPaginate:
    """Tests for the pager stage."""

    def test_page_lengths(self):
        records = list(range(25))
        for page in range(1, 4):
            result = paginate(records, page, 10)
            expected = min(10, 25 - (page - 1) * 10)
            assert len(result.results) == expected

    def test_pages_concatenate_to_full_sequence(self):
        records = list(range(23))
        size = 4
        total = math.ceil(len(records) / size)
        pages = [paginate(records, p, size).results for p in range(1, total + 1)]
        assert [x for page in pages for x in page] == records

    def test_total_is_ceiling(self):
        assert paginate(list(range(20)), 1, 10).total == 2
        assert paginate(list(range(21)), 1, 10).total == 3
        assert paginate(list(range(1)), 1, 10).total == 1

    def test_navigation_metadata(self):
        records = list(range(25))

        first = paginate(records, 1, 10)
        assert (first.prev_page, first.next_page) == (None, 2)
        assert first.has_next and not first.has_prev

        middle = paginate(records, 2, 10)
        assert (middle.prev_page, middle.next_page) == (1, 3)

        last = paginate(records, 3, 10)
        assert (last.prev_page, last.next_page) == (2, None)
        assert last.results == [20, 21, 22, 23, 24]

    def test_count_is_collection_size(self):
        assert paginate(list(range(7)), 2, 5).count == 7

    @pytest.mark.parametrize("page", [0, -1, 4, 99])
    def test_out_of_range_raises(self, page):
        with pytest.raises(PageOutOfRangeError) as exc_info:
            paginate(list(range(25)), page, 10)
        assert exc_info.value.total == 3
        assert "Any value of 1 through 3 is allowed" in exc_info.value.message

    @pytest.mark.parametrize("page", [1, 5, 0])
    def test_empty_input_is_never_out_of_range(self, page):
        result = paginate([], page, 10)
        assert result.results == []
        assert result.total == 0
        assert result.next_page is None and result.prev_page is None

    def test_size_must_be_positive(self):
        with pytest.raises(ValueError):
            paginate([1, 2, 3], 1, 0)


class TestRunListQuery:
    """Tests for the composed pipeline."""

    def test_filter_then_sort_then_page(self, people):
        query = ListQuery(
            filter=FilterSpec("birthday", "gte", "1900-01-01"),
            sort=SortSpec("fname", "desc"),
            page=PageSpec(page=1, size=2),
        )
        result = run_list_query(people, query)
        assert [c.fname for c in result.results] == ["Grace", "Edsger"]
        assert result.count == 4
        assert result.total == 2

    def test_defaults(self, people):
        result = run_list_query(people, ListQuery())
        assert [c.lname for c in result.results] == [
            "Dijkstra", "Hopper", "Liskov", "Lovelace", "Turing",
        ]
        assert result.total == 1

    def test_invalid_operator_stops_the_pipeline(self, people):
        query = ListQuery(filter=FilterSpec("fname", "between", "A"))
        with pytest.raises(InvalidFilterOperatorError):
            run_list_query(people, query)

    def test_filter_to_nothing_is_an_empty_page(self, people):
        query = ListQuery(
            filter=FilterSpec("fname", "eq", "Nobody"),
            page=PageSpec(page=3, size=10),
        )
        result = run_list_query(people, query)
        assert result.results == [] and result.total == 0


class TestFilterSpecFromHeaders:

    def test_all_headers_present(self):
        spec = FilterSpec.from_headers(" birthday ", "gte", "1990-01-01")
        assert spec == FilterSpec("birthday", "gte", "1990-01-01")

    @pytest.mark.parametrize(
        "headers",
        [
            (None, "eq", "x"),
            ("fname", None, "x"),
            ("fname", "eq", None),
            ("", "eq", "x"),
            ("fname", "bogus", "   "),
            ("  ", "eq", "x"),
        ],
    )
    def test_any_missing_header_means_no_filter(self, headers):
        assert FilterSpec.from_headers(*headers) is None


def test_parse_date():
    assert parse_date("2024-02-29") == date(2024, 2, 29)
    assert parse_date("2024-02-29T13:45:00") == date(2024, 2, 29)
    assert parse_date("2024-02-30") is None
    assert parse_date("yesterday") is None
