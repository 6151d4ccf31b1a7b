from __future__ import annotations

from eligibility_engine.defaults import SCHENGEN_COUNTRIES, default_rule_table_document
from eligibility_engine.loader import load_rule_set
from eligibility_engine.models import Classification, GrantRule, PassportHolding, VisaHolding
from eligibility_engine.resolver import EligibilityResolver


def _resolver() -> EligibilityResolver:
    return EligibilityResolver(rule_set=load_rule_set(default_rule_table_document()))


def _classify(holdings, destination: str):
    results = _resolver().resolve(holdings, [destination])
    assert len(results) == 1
    return results[0]


def test_home_passport_wins() -> None:
    result = _classify([PassportHolding(country_code="DE")], "DE")
    assert result.classification is Classification.HOME
    assert result.reason.rule is GrantRule.HOME_PASSPORT
    assert result.reason.source == "DE"


def test_every_passport_is_home() -> None:
    holdings = [PassportHolding(country_code="US"), PassportHolding(country_code="it")]
    results = {result.destination: result for result in _resolver().resolve(holdings, ["US", "IT"])}
    assert results["US"].classification is Classification.HOME
    assert results["IT"].classification is Classification.HOME


def test_schengen_passport_to_schengen_destination_is_bloc_free() -> None:
    result = _classify([PassportHolding(country_code="DE")], "FR")
    assert result.classification is Classification.BLOC_FREE
    assert result.reason.source == "SCHENGEN"


def test_direct_visa_free_outside_bloc() -> None:
    result = _classify([PassportHolding(country_code="DE")], "JP")
    assert result.classification is Classification.VISA_FREE_DIRECT
    assert result.reason.rule is GrantRule.DIRECT


def test_us_visa_unlocks_mexico_without_passport_data() -> None:
    result = _classify([PassportHolding(country_code="XX"), VisaHolding(visa_class_id="US_VISA")], "MX")
    assert result.classification is Classification.SUBSTITUTION_FREE
    assert result.reason.group == "US_VISA"


def test_inactive_group_gives_unknown_not_requires_visa() -> None:
    result = _classify([PassportHolding(country_code="XX")], "QA")
    assert result.classification is Classification.UNKNOWN
    assert result.reason.rule is GrantRule.NO_DATA


def test_on_arrival_substitution_beats_visa_required() -> None:
    holdings = [PassportHolding(country_code="IN"), VisaHolding(visa_class_id="SCHENGEN_VISA")]
    assert _classify(holdings[:1], "QA").classification is Classification.REQUIRES_VISA
    result = _classify(holdings, "QA")
    assert result.classification is Classification.SUBSTITUTION_VOA
    assert result.reason.source == "SCHENGEN_VISA"


def test_held_visa_covers_issuing_country() -> None:
    holdings = [PassportHolding(country_code="IN"), VisaHolding(visa_class_id="SCHENGEN_VISA")]
    results = _resolver().resolve(holdings, SCHENGEN_COUNTRIES)
    assert {result.classification for result in results} == {Classification.VISA_HELD}


def test_direct_on_arrival_and_e_visa() -> None:
    holdings = [PassportHolding(country_code="IN")]
    assert _classify(holdings, "TH").classification is Classification.VISA_ON_ARRIVAL_DIRECT
    assert _classify(holdings, "VN").classification is Classification.E_VISA_DIRECT
    assert _classify(holdings, "FJ").classification is Classification.VISA_FREE_DIRECT


def test_equal_grants_break_ties_by_group_id() -> None:
    holdings = [VisaHolding(visa_class_id="US_VISA"), VisaHolding(visa_class_id="UK_VISA")]
    result = _classify(holdings, "MX")
    assert result.classification is Classification.SUBSTITUTION_FREE
    assert result.reason.source == "UK_VISA"


def test_destination_filtering_and_order() -> None:
    results = _resolver().resolve([PassportHolding(country_code="DE")], ["mx", "ZZ", "FR", " MX ", "", "fr"])
    assert [result.destination for result in results] == ["MX", "FR"]


def test_default_destinations_cover_registry_once() -> None:
    resolver = _resolver()
    results = resolver.resolve([PassportHolding(country_code="GB")])
    destinations = [result.destination for result in results]
    assert destinations == list(resolver.rule_set.registry.codes())
    assert len(destinations) == len(set(destinations))


def test_duplicate_and_conflicting_passports_do_not_raise() -> None:
    holdings = [
        PassportHolding(country_code="DE"),
        PassportHolding(country_code="DE"),
        PassportHolding(country_code="RU"),
        PassportHolding(country_code="??"),
    ]
    results = _resolver().resolve(holdings, ["RU", "DE", "AT", "KZ", "CN"])
    by_code = {result.destination: result.classification for result in results}
    assert by_code == {
        "RU": Classification.HOME,
        "DE": Classification.HOME,
        "AT": Classification.BLOC_FREE,
        "KZ": Classification.VISA_FREE_DIRECT,
        "CN": Classification.REQUIRES_VISA,
    }


def test_explain_lists_every_grant_best_first() -> None:
    holdings = [PassportHolding(country_code="IN"), VisaHolding(visa_class_id="US_VISA"), VisaHolding(visa_class_id="UK_VISA")]
    grants = _resolver().explain(holdings, "mx")
    assert [grant.classification for grant in grants] == [
        Classification.SUBSTITUTION_FREE,
        Classification.SUBSTITUTION_FREE,
        Classification.REQUIRES_VISA,
    ]
    assert [grant.reason.source for grant in grants] == ["UK_VISA", "US_VISA", "IN"]
    assert _resolver().explain(holdings, "ZZ") == []


def test_monotonic_when_adding_holdings() -> None:
    resolver = _resolver()
    baseline = [PassportHolding(country_code="IN")]
    extras = [
        VisaHolding(visa_class_id="US_VISA"),
        VisaHolding(visa_class_id="SCHENGEN_VISA"),
        PassportHolding(country_code="DE"),
        VisaHolding(visa_class_id="AUSTRALIA_VISA"),
    ]
    before = {result.destination: result.classification for result in resolver.resolve(baseline)}
    for extra in extras:
        after = {result.destination: result.classification for result in resolver.resolve(baseline + [extra])}
        for code, classification in after.items():
            assert classification.priority <= before[code].priority, (extra, code)


def test_empty_holdings_are_all_unknown() -> None:
    results = _resolver().resolve([])
    assert {result.classification for result in results} == {Classification.UNKNOWN}


def _eta_resolver() -> EligibilityResolver:
    document = {
        "version": "eta-1",
        "countries": [
            {"code": "PP", "name": "Passportia", "continent": "Europe"},
            {"code": "QQ", "name": "Quarterland", "continent": "Europe"},
            {"code": "EE", "name": "Etaland", "continent": "Oceania"},
            {"code": "SS", "name": "Sponsoria", "continent": "Americas"},
        ],
        "visa_classes": [
            {
                "visa_class_id": "SS_VISA",
                "label": "Sponsoria",
                "issuers": ["SS"],
                "substitutions": [{"country_code": "EE", "access": "on_arrival"}],
            }
        ],
        "direct_requirements": {"PP": {"EE": "eta"}, "QQ": {"EE": "e_visa"}},
    }
    return EligibilityResolver(rule_set=load_rule_set(document))


def test_direct_eta_ranks_between_substitution_on_arrival_and_e_visa() -> None:
    resolver = _eta_resolver()
    result = resolver.resolve([PassportHolding(country_code="PP"), PassportHolding(country_code="QQ")], ["EE"])[0]
    assert result.classification is Classification.ETA_DIRECT
    assert result.reason.source == "PP"
    assert result.classification.grants_entry

    sponsored = resolver.resolve([PassportHolding(country_code="PP"), VisaHolding(visa_class_id="SS_VISA")], ["EE"])[0]
    assert sponsored.classification is Classification.SUBSTITUTION_VOA
    assert Classification.SUBSTITUTION_VOA.outranks(Classification.ETA_DIRECT)
    assert Classification.ETA_DIRECT.outranks(Classification.E_VISA_DIRECT)


def test_summary_counts_cover_registry() -> None:
    resolver = _resolver()
    summary = resolver.summarize([PassportHolding(country_code="DE"), VisaHolding(visa_class_id="US_VISA")])
    assert sum(summary.counts.values()) == len(resolver.rule_set.registry)
    assert summary.counts[Classification.HOME] == 1
    assert summary.counts[Classification.BLOC_FREE] == len(SCHENGEN_COUNTRIES) - 1
    assert summary.accessible_count == len(summary.accessible)
    assert list(summary.accessible) == sorted(summary.accessible)
    assert "MX" in summary.accessible
    assert "CN" not in summary.accessible
    assert summary.passports_without_data == ()
    assert summary.rule_table_version == resolver.rule_set.version


def test_summary_reports_passports_without_direct_data() -> None:
    summary = _resolver().summarize([PassportHolding(country_code="FR"), PassportHolding(country_code="IN")])
    assert summary.passports_without_data == ("FR",)
    assert _resolver().summarize([]).accessible == ()


def test_accessible_set_grows_with_holdings() -> None:
    resolver = _resolver()
    holdings = [PassportHolding(country_code="IN")]
    previous = set(resolver.summarize(holdings).accessible)
    for extra in [
        VisaHolding(visa_class_id="CANADA_VISA"),
        VisaHolding(visa_class_id="US_VISA"),
        PassportHolding(country_code="JP"),
        VisaHolding(visa_class_id="SCHENGEN_VISA"),
        PassportHolding(country_code="DE"),
    ]:
        holdings.append(extra)
        current = set(resolver.summarize(holdings).accessible)
        assert previous <= current, extra
        assert len(current) >= len(previous)
        previous = current
