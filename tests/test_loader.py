from __future__ import annotations

from typing import Any

import pytest

from eligibility_engine.defaults import DEFAULT_RULE_TABLE_VERSION, _direct_requirements, default_rule_table_document
from eligibility_engine.exceptions import RuleTableConflictError, RuleTableError, RuleTableReferenceError
from eligibility_engine.loader import RuleTableDocument, load_rule_set, load_rule_set_file
from eligibility_engine.models import AccessLevel, DirectRequirement


def _document(**overrides: Any) -> dict[str, Any]:
    document: dict[str, Any] = {
        "version": "test-1",
        "countries": [
            {"code": "AA", "name": "Alphaland", "continent": "Europe"},
            {"code": "BB", "name": "Betaland", "continent": "Europe"},
            {"code": "CC", "name": "Gammaland", "continent": "Asia"},
        ],
        "blocs": [{"bloc_id": "AB", "name": "Alpha-Beta Union", "members": ["AA", "bb"], "mutual_open": True}],
        "visa_classes": [
            {
                "visa_class_id": "AA_VISA",
                "label": "Alphaland",
                "issuers": ["AA"],
                "substitutions": [{"country_code": "CC", "access": "on_arrival"}],
            }
        ],
        "direct_requirements": {"cc": {"AA": "visa_required", "BB": "e_visa"}},
    }
    document.update(overrides)
    return document


def test_load_valid_document_normalizes_codes() -> None:
    rule_set = load_rule_set(_document())
    assert rule_set.version == "test-1"
    assert rule_set.rules.bloc_members("AB") == frozenset({"AA", "BB"})
    assert rule_set.registry.lookup("BB").blocs == frozenset({"AB"})
    assert rule_set.registry.lookup("CC").flag == "🇨🇨"
    assert rule_set.rules.substitution_entries("AA_VISA") == {"CC": AccessLevel.ON_ARRIVAL}
    assert rule_set.rules.direct_requirement("CC", "BB") is DirectRequirement.E_VISA
    assert len(rule_set.checksum) == 64


def test_dangling_references_reject_whole_table() -> None:
    document = _document(
        blocs=[{"bloc_id": "AB", "name": "Union", "members": ["AA", "ZZ"], "mutual_open": True, "substitutes_for": "NOPE"}],
        direct_requirements={"QQ": {"AA": "visa_free"}},
    )
    with pytest.raises(RuleTableReferenceError) as excinfo:
        load_rule_set(document)
    problems = excinfo.value.problems
    assert any("ZZ" in problem for problem in problems)
    assert any("NOPE" in problem for problem in problems)
    assert any("QQ" in problem for problem in problems)


def test_substitution_to_unknown_country_rejected() -> None:
    visa = {"visa_class_id": "AA_VISA", "label": "A", "substitutions": [{"country_code": "XX"}]}
    try:
        load_rule_set(_document(visa_classes=[visa]))
        assert False, "RuleTableReferenceError must be raised"
    except RuleTableReferenceError as exc:
        assert exc.problems == ["visa class AA_VISA substitution XX"]


def test_duplicate_identities_are_conflicts() -> None:
    countries = _document()["countries"] + [{"code": "aa", "name": "Again", "continent": "Europe"}]
    with pytest.raises(RuleTableConflictError):
        load_rule_set(_document(countries=countries))

    visa = {
        "visa_class_id": "AA_VISA",
        "label": "A",
        "substitutions": [{"country_code": "CC"}, {"country_code": "cc", "access": "on_arrival"}],
    }
    with pytest.raises(RuleTableConflictError):
        load_rule_set(_document(visa_classes=[visa]))

    with pytest.raises(RuleTableConflictError):
        load_rule_set(_document(blocs=[{"bloc_id": "AA_VISA", "name": "Clash", "members": ["AA"]}]))


def test_malformed_document_wrapped() -> None:
    with pytest.raises(RuleTableError):
        load_rule_set({"version": "x", "countries": [{"code": "AAA", "name": "Bad", "continent": "Europe"}]})
    with pytest.raises(RuleTableError):
        load_rule_set(_document(unexpected=True))


def test_load_from_json_file(tmp_path) -> None:
    path = tmp_path / "rules.json"
    path.write_text(RuleTableDocument.model_validate(_document()).model_dump_json(), encoding="utf-8")
    rule_set = load_rule_set_file(path)
    assert rule_set.version == "test-1"
    assert rule_set.rules.visa_class_for_issuer("AA") == "AA_VISA"

    broken = tmp_path / "broken.json"
    broken.write_text('{"version": ""}', encoding="utf-8")
    with pytest.raises(RuleTableError):
        load_rule_set_file(broken)


def test_default_document_loads_and_checksum_is_stable() -> None:
    first = load_rule_set(default_rule_table_document())
    second = load_rule_set(default_rule_table_document())
    assert first.version == DEFAULT_RULE_TABLE_VERSION
    assert first.checksum == second.checksum
    assert set(first.rules.visa_classes) == {"US_VISA", "SCHENGEN_VISA", "UK_VISA", "CANADA_VISA", "AUSTRALIA_VISA"}


def test_eta_requirement_loads() -> None:
    rule_set = load_rule_set(_document(direct_requirements={"CC": {"AA": "eta", "BB": "visa_free"}}))
    assert rule_set.rules.direct_requirement("CC", "AA") is DirectRequirement.ETA


def test_issuer_claimed_by_two_visa_classes_is_conflict() -> None:
    visa_classes = [
        {"visa_class_id": "AA_VISA", "label": "Alphaland", "issuers": ["AA"]},
        {"visa_class_id": "ALT_VISA", "label": "Alphaland again", "issuers": ["aa", "BB"]},
    ]
    with pytest.raises(RuleTableConflictError) as excinfo:
        load_rule_set(_document(visa_classes=visa_classes))
    assert excinfo.value.problems == ["issuer AA claimed by AA_VISA, ALT_VISA"]


def test_conflicting_default_rows_raise_conflict_error() -> None:
    try:
        _direct_requirements({"AA": ("BB CC", "BB", "", "CC")})
        assert False, "RuleTableConflictError must be raised"
    except RuleTableConflictError as exc:
        assert exc.problems == [
            "AA->BB listed as both visa_free and on_arrival",
            "AA->CC listed as both visa_free and visa_required",
        ]
    assert _direct_requirements({"AA": ("BB", "CC", "", "")}) == {
        "AA": {"BB": DirectRequirement.VISA_FREE, "CC": DirectRequirement.ON_ARRIVAL}
    }
