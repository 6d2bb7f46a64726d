"""
tests.test_listing
~~~~~~~~~~~~~~~~~~
Unit tests for the children list layer.  No database access.

Covers:
- extract_list / typed lookup options
- FilterState
- present_active_filters
- compute_page_statistics
- build_empty_state
- build_children_screen
"""
from __future__ import annotations

from types import SimpleNamespace

import pytest
from django.http import QueryDict

from apps.listing.empty_state import build_empty_state
from apps.listing.filters import FilterState, RefFilter, RefKind, SponsorshipStatus
from apps.listing.normalizer import extract_list, proxies_from, schools_from, sponsors_from
from apps.listing.presenters import present_active_filters
from apps.listing.screen import build_children_screen
from apps.listing.statistics import PaginationInfo, compute_page_statistics


# ===========================================================================
# Shared lookup data
# ===========================================================================

SCHOOLS = [
    {"id": 1, "name": "Kampala Primary School", "location": "Kampala"},
    {"id": 2, "name": "Gulu High School", "location": "Gulu"},
]

PROXIES = [
    {"id": 4, "full_name": "Father Michael Ochieng", "role": "Priest"},
    {"id": 5, "full_name": "Sister Agnes Namalwa", "role": "Nun"},
]

SPONSORS = [
    {"id": 7, "full_name": "Anna Keller", "proxy": PROXIES[0]},
    {"id": 8, "full_name": "Felix Braun", "proxy": None},
]


def child(ident: int, sponsored: bool, school: str) -> dict:
    return {"id": ident, "is_sponsored": sponsored, "school": {"name": school}}


def chip_labels(chips) -> dict:
    return {chip.dimension: chip.label for chip in chips}


# ===========================================================================
# TestResponseNormalizer
# ===========================================================================

class TestResponseNormalizer:
    """extract_list precedence and fallbacks."""

    def test_none_yields_empty_list(self):
        assert extract_list(None) == []

    def test_none_yields_supplied_default(self):
        default = [{"id": 1}]
        assert extract_list(None, default) is default

    def test_list_returned_unchanged(self):
        records = [{"id": 1}, {"id": 2}]
        assert extract_list(records) is records

    @pytest.mark.parametrize("key", ["data", "results", "items"])
    def test_envelope_unwrapped(self, key):
        records = [{"id": 3}]
        assert extract_list({key: records}) is records

    def test_data_wins_over_results_and_items(self):
        payload = {"items": [3], "results": [2], "data": [1]}
        assert extract_list(payload) == [1]

    def test_results_wins_over_items(self):
        assert extract_list({"items": [3], "results": [2]}) == [2]

    def test_non_list_envelope_value_skipped(self):
        assert extract_list({"data": {"nested": True}, "items": [9]}) == [9]

    def test_unrecognised_shape_degrades_to_default(self):
        assert extract_list({"error": "boom"}) == []
        assert extract_list("not a list") == []
        assert extract_list(42) == []

    def test_attribute_envelope(self):
        payload = SimpleNamespace(results=[{"id": 1}])
        assert extract_list(payload) == [{"id": 1}]

    def test_lookup_records_coerced_to_integer_ids(self):
        schools = schools_from({"data": [{"id": "3", "name": "A", "location": "B"}, {"id": "x"}]})
        assert [s.id for s in schools] == [3]

    def test_sponsor_options_carry_proxy(self):
        sponsors = sponsors_from(SPONSORS)
        assert sponsors[0].proxy.full_name == "Father Michael Ochieng"
        assert sponsors[1].proxy is None

    def test_proxies_from_drops_records_without_id(self):
        proxies = proxies_from({"items": [{"full_name": "No Id"}, PROXIES[1]]})
        assert [p.id for p in proxies] == [5]


# ===========================================================================
# TestFilterState
# ===========================================================================

class TestFilterState:
    """has_active_filters, parsing and query-string round trip."""

    def test_defaults_are_inactive(self):
        state = FilterState()
        assert state.has_active_filters is False
        assert state.active_filter_count == 0

    def test_all_sentinels_are_inactive(self):
        state = FilterState.from_params({
            "search": "",
            "sponsored": "all",
            "gender": "all",
            "school": "all",
            "sponsor": "all",
            "proxy": "all",
        })
        assert state.has_active_filters is False

    def test_gender_keeps_chosen_case(self):
        assert FilterState.from_params({"gender": " Female "}).gender == "Female"
        assert FilterState.from_params({"gender": "ALL"}).gender is None

    def test_whitespace_search_is_inactive(self):
        assert FilterState.from_params({"search": "   "}).has_active_filters is False

    def test_search_text_is_active(self):
        assert FilterState.from_params({"search": "mo"}).has_active_filters is True

    def test_sponsorship_status_is_active(self):
        state = FilterState.from_params({"sponsored": "sponsored"})
        assert state.sponsorship is SponsorshipStatus.SPONSORED
        assert state.has_active_filters is True

    @pytest.mark.parametrize(
        "params",
        [
            {"gender": "female"},
            {"school": "1"},
            {"sponsor": "none"},
            {"sponsor": "7"},
            {"proxy": "direct"},
            {"proxy": "none"},
            {"proxy": "4"},
        ],
    )
    def test_each_dimension_activates(self, params):
        assert FilterState.from_params(params).has_active_filters is True

    def test_reference_tokens_parse_to_tagged_values(self):
        state = FilterState.from_params({"school": "12", "sponsor": "none", "proxy": "direct"})
        assert state.school == RefFilter(RefKind.BY_ID, 12)
        assert state.sponsor.kind is RefKind.NONE
        assert state.proxy.kind is RefKind.DIRECT

    def test_disallowed_tokens_parse_to_any(self):
        state = FilterState.from_params({"school": "none", "sponsor": "direct", "proxy": "abc"})
        assert state.has_active_filters is False

    def test_unknown_sponsorship_value_is_inactive(self):
        assert FilterState.from_params({"sponsored": "maybe"}).sponsorship is SponsorshipStatus.ALL

    def test_accepts_query_dict(self):
        state = FilterState.from_params(QueryDict("search=grace&proxy=4"))
        assert state.active_dimensions == ["search", "proxy"]

    def test_active_filter_count(self):
        state = FilterState.from_params({"search": "a", "gender": "male", "proxy": "none"})
        assert state.active_filter_count == 3

    def test_cleared_resets_everything(self):
        state = FilterState.from_params({"search": "a", "school": "2"})
        assert state.cleared() == FilterState()

    def test_without_resets_one_dimension(self):
        state = FilterState.from_params({"search": "a", "school": "2"})
        narrowed = state.without("school")
        assert narrowed.school.is_active is False
        assert narrowed.search == "a"

    def test_without_unknown_dimension_raises(self):
        with pytest.raises(KeyError):
            FilterState().without("colour")

    def test_to_params_round_trip(self):
        params = {"search": "grace", "sponsored": "unsponsored", "school": "2", "proxy": "direct"}
        state = FilterState.from_params(params)
        assert state.to_params() == params
        assert FilterState.from_params(state.to_params()) == state

    def test_querystring_appends_extra_params(self):
        qs = FilterState.from_params({"gender": "male"}).querystring(page=2)
        assert qs == "gender=male&page=2"


# ===========================================================================
# TestActiveFilterPresenter
# ===========================================================================

class TestActiveFilterPresenter:
    """Chip labels and id fallbacks."""

    def present(self, **params):
        return present_active_filters(FilterState.from_params(params), SCHOOLS, SPONSORS, PROXIES)

    def test_no_chips_without_active_filters(self):
        assert present_active_filters(FilterState(), SCHOOLS, SPONSORS, PROXIES) == []

    def test_search_label_quotes_text_as_typed(self):
        assert chip_labels(self.present(search="grace"))["search"] == '"grace"'
        assert chip_labels(self.present(search=" ann "))["search"] == '" ann "'

    def test_sponsorship_labels(self):
        assert chip_labels(self.present(sponsored="sponsored"))["sponsorship"] == "Sponsored"
        assert chip_labels(self.present(sponsored="unsponsored"))["sponsorship"] == "Needs Sponsor"

    def test_gender_label_is_literal(self):
        assert chip_labels(self.present(gender="female"))["gender"] == "female"

    def test_gender_label_keeps_chosen_case(self):
        chips = present_active_filters(FilterState.from_params({"gender": "Female"}))
        assert chips[0].label == "Female"

    def test_school_resolved_to_name_and_location(self):
        labels = chip_labels(self.present(school="1"))
        assert labels["school"] == "Kampala Primary School - Kampala"

    def test_missing_school_falls_back_to_id(self):
        assert chip_labels(self.present(school="99"))["school"] == "School ID: 99"

    def test_sponsor_labels(self):
        assert chip_labels(self.present(sponsor="none"))["sponsor"] == "No Sponsor"
        assert chip_labels(self.present(sponsor="8"))["sponsor"] == "Felix Braun"
        assert chip_labels(self.present(sponsor="404"))["sponsor"] == "Sponsor ID: 404"

    def test_proxy_sentinels_ignore_lookup_list(self):
        state = FilterState.from_params({"proxy": "none"})
        assert chip_labels(present_active_filters(state, proxies=[]))["proxy"] == "No Proxy"
        state = FilterState.from_params({"proxy": "direct"})
        assert chip_labels(present_active_filters(state, proxies=None))["proxy"] == "Direct Contact"

    def test_proxy_resolved_with_role(self):
        assert chip_labels(self.present(proxy="4"))["proxy"] == "Father Michael Ochieng (Priest)"

    def test_missing_proxy_falls_back_to_id(self):
        assert chip_labels(self.present(proxy="77"))["proxy"] == "Proxy ID: 77"

    def test_lookups_accept_envelopes(self):
        chips = present_active_filters(
            FilterState.from_params({"school": "2", "proxy": "5"}),
            schools={"results": SCHOOLS},
            proxies={"data": PROXIES, "pagination": {"total_count": 2}},
        )
        labels = chip_labels(chips)
        assert labels["school"] == "Gulu High School - Gulu"
        assert labels["proxy"] == "Sister Agnes Namalwa (Nun)"

    def test_chips_follow_dimension_order(self):
        chips = self.present(proxy="4", search="a", school="1", gender="male")
        assert [c.dimension for c in chips] == ["search", "gender", "school", "proxy"]
        assert [c.title for c in chips] == ["Search", "Gender", "School", "Proxy"]

    def test_remove_query_drops_only_that_dimension(self):
        chips = self.present(search="a", school="1")
        remove_school = next(c for c in chips if c.dimension == "school")
        assert remove_school.remove_query == "search=a"


# ===========================================================================
# TestPageStatistics
# ===========================================================================

class TestPageStatistics:
    """Page-local counts next to untouched server totals."""

    PAGE = [
        child(1, True, "Kampala Primary School"),
        child(2, True, "Gulu High School"),
        child(3, True, "Kampala Primary School"),
        child(4, False, "Gulu High School"),
        child(5, False, "Kampala Primary School"),
    ]

    def test_page_counts(self):
        stats = compute_page_statistics(self.PAGE)
        assert stats.page.records == 5
        assert stats.page.sponsored == 3
        assert stats.page.unsponsored == 2
        assert stats.page.unique_schools == 2

    def test_totals_passed_through(self):
        pagination = {"current_page": 2, "total_pages": 9, "total_count": 87}
        stats = compute_page_statistics(self.PAGE, pagination)
        assert stats.totals == PaginationInfo(current_page=2, total_pages=9, total_count=87)
        # Page-local figures never borrow from the totals.
        assert stats.page.sponsored + stats.page.unsponsored == 5

    def test_envelope_supplies_its_own_pagination(self):
        envelope = {"data": self.PAGE, "pagination": {"current_page": 1, "total_pages": 1, "total_count": 5}}
        stats = compute_page_statistics(envelope)
        assert stats.page.records == 5
        assert stats.totals.total_count == 5

    def test_empty_page(self):
        stats = compute_page_statistics([], {"current_page": 3, "total_pages": 2, "total_count": 30})
        assert stats.page.records == 0
        assert stats.page.unique_schools == 0
        assert stats.totals.total_count == 30

    def test_model_like_records(self):
        records = [SimpleNamespace(is_sponsored=True, school=SimpleNamespace(name="A"))]
        assert compute_page_statistics(records).page.sponsored == 1

    def test_child_without_school_is_not_counted_as_a_school(self):
        records = [{"is_sponsored": False, "school": None}, child(2, False, "A")]
        assert compute_page_statistics(records).page.unique_schools == 1


# ===========================================================================
# TestEmptyState
# ===========================================================================

class TestEmptyState:

    def test_filtered_variant_offers_clear_and_add(self):
        state = build_empty_state(True, clear_url="/children/", add_url="/register-child")
        assert state.filtered is True
        assert [a.label for a in state.actions] == ["Clear Filters", "Add New Child"]
        assert state.actions[0].url == "/children/"

    def test_first_run_variant_offers_only_add(self):
        state = build_empty_state(False, clear_url="/children/", add_url="/register-child")
        assert state.filtered is False
        assert [a.label for a in state.actions] == ["Add First Child"]
        assert state.actions[0].url == "/register-child"

    def test_messages_differ_per_variant(self):
        filtered = build_empty_state(True, clear_url="/", add_url="/add")
        first_run = build_empty_state(False, clear_url="/", add_url="/add")
        assert filtered.title == first_run.title == "No children found"
        assert filtered.message != first_run.message


# ===========================================================================
# TestChildrenScreen
# ===========================================================================

class TestChildrenScreen:

    def build(self, state, records):
        envelope = {
            "data": records,
            "pagination": {"current_page": 1, "total_pages": 1, "total_count": len(records)},
        }
        return build_children_screen(
            state,
            envelope,
            schools=SCHOOLS,
            sponsors={"data": SPONSORS},
            proxies={"data": PROXIES},
            base_url="/children/",
            add_url="/register-child",
        )

    def test_empty_page_gets_empty_state(self):
        screen = self.build(FilterState.from_params({"gender": "male"}), [])
        assert screen.empty_state.filtered is True
        assert screen.as_dict()["empty_state"]["actions"][0]["label"] == "Clear Filters"

    def test_non_empty_page_has_no_empty_state(self):
        screen = self.build(FilterState(), [child(1, True, "Gulu High School")])
        assert screen.empty_state is None
        assert screen.as_dict()["statistics"]["page"]["sponsored"] == 1

    def test_select_options_include_sentinels(self):
        screen = self.build(FilterState(), [])
        assert [o.value for o in screen.proxy_options[:3]] == ["all", "none", "direct"]
        assert screen.sponsor_options[2].sublabel == "via Father Michael Ochieng"
        assert screen.school_options[1].sublabel == "Kampala"
