from __future__ import annotations

from collections import Counter
from collections.abc import Mapping
from hashlib import sha256
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import RuleTableConflictError, RuleTableError, RuleTableReferenceError
from .models import AccessLevel, Bloc, Country, DirectRequirement, SubstitutionEntry, VisaClass, flag_for
from .registry import CountryRegistry
from .rules import RuleSet, VisaRuleTable


class DocumentBaseModel(BaseModel):
    """Rule table documents come from JSON files, so enum values arrive as plain strings."""

    model_config = ConfigDict(extra="forbid")


class CountryDocument(DocumentBaseModel):
    code: str = Field(min_length=2, max_length=2)
    name: str
    continent: str
    flag: str | None = None


class BlocDocument(DocumentBaseModel):
    bloc_id: str = Field(min_length=1)
    name: str
    members: list[str]
    mutual_open: bool = False
    substitutes_for: str | None = None


class SubstitutionDocument(DocumentBaseModel):
    country_code: str = Field(min_length=2, max_length=2)
    access: AccessLevel = AccessLevel.VISA_FREE


class VisaClassDocument(DocumentBaseModel):
    visa_class_id: str = Field(min_length=1)
    label: str
    flag: str = ""
    description: str = ""
    issuers: list[str] = Field(default_factory=list)
    substitutions: list[SubstitutionDocument] = Field(default_factory=list)


class RuleTableDocument(DocumentBaseModel):
    version: str = Field(min_length=1)
    countries: list[CountryDocument]
    blocs: list[BlocDocument] = Field(default_factory=list)
    visa_classes: list[VisaClassDocument] = Field(default_factory=list)
    direct_requirements: dict[str, dict[str, DirectRequirement]] = Field(default_factory=dict)

    def checksum(self) -> str:
        return sha256(self.model_dump_json().encode()).hexdigest()


def _upper(code: str) -> str:
    return code.strip().upper()


def _duplicates(values: list[str]) -> list[str]:
    return sorted(value for value, count in Counter(values).items() if count > 1)


def load_rule_set(document: RuleTableDocument | Mapping[str, Any]) -> RuleSet:
    """Validate a rule table document and build an immutable RuleSet.

    Every reference is checked before anything is built; one dangling code
    rejects the whole document.
    """
    if not isinstance(document, RuleTableDocument):
        try:
            document = RuleTableDocument.model_validate(document)
        except ValidationError as exc:
            raise RuleTableError(f"Malformed rule table document: {exc}") from exc

    country_codes = [_upper(country.code) for country in document.countries]
    bloc_ids = [bloc.bloc_id.strip() for bloc in document.blocs]
    visa_ids = [visa_class.visa_class_id.strip() for visa_class in document.visa_classes]

    conflicts: list[str] = []
    conflicts += [f"duplicate country code {code}" for code in _duplicates(country_codes)]
    conflicts += [f"duplicate bloc id {bloc_id}" for bloc_id in _duplicates(bloc_ids)]
    conflicts += [f"duplicate visa class id {visa_id}" for visa_id in _duplicates(visa_ids)]
    conflicts += [f"group id {group_id} is both a bloc and a visa class" for group_id in sorted(set(bloc_ids) & set(visa_ids))]
    for visa_class in document.visa_classes:
        entry_codes = [_upper(entry.country_code) for entry in visa_class.substitutions]
        conflicts += [f"{visa_class.visa_class_id} lists {code} more than once" for code in _duplicates(entry_codes)]
    claimed: dict[str, list[str]] = {}
    for visa_class in document.visa_classes:
        for code in dict.fromkeys(_upper(issuer) for issuer in visa_class.issuers):
            claimed.setdefault(code, []).append(visa_class.visa_class_id.strip())
    conflicts += [f"issuer {code} claimed by {', '.join(owners)}" for code, owners in sorted(claimed.items()) if len(owners) > 1]
    direct_passports = [_upper(passport) for passport in document.direct_requirements]
    conflicts += [f"direct requirements for {code} declared more than once" for code in _duplicates(direct_passports)]
    for passport, rows in document.direct_requirements.items():
        destinations = [_upper(destination) for destination in rows]
        conflicts += [f"direct requirement {_upper(passport)}->{code} declared more than once" for code in _duplicates(destinations)]
    if conflicts:
        raise RuleTableConflictError(conflicts)

    known = set(country_codes)
    known_visas = set(visa_ids)
    problems: list[str] = []
    for bloc in document.blocs:
        problems += [f"bloc {bloc.bloc_id} member {_upper(code)}" for code in bloc.members if _upper(code) not in known]
        if bloc.substitutes_for is not None and bloc.substitutes_for.strip() not in known_visas:
            problems.append(f"bloc {bloc.bloc_id} substitutes for unknown visa class {bloc.substitutes_for}")
    for visa_class in document.visa_classes:
        problems += [f"visa class {visa_class.visa_class_id} issuer {_upper(code)}" for code in visa_class.issuers if _upper(code) not in known]
        problems += [
            f"visa class {visa_class.visa_class_id} substitution {_upper(entry.country_code)}"
            for entry in visa_class.substitutions
            if _upper(entry.country_code) not in known
        ]
    for passport, rows in document.direct_requirements.items():
        if _upper(passport) not in known:
            problems.append(f"direct requirements passport {_upper(passport)}")
        problems += [f"direct requirement {_upper(passport)}->{_upper(code)}" for code in rows if _upper(code) not in known]
    if problems:
        raise RuleTableReferenceError(problems)

    blocs = [
        Bloc(
            bloc_id=bloc.bloc_id.strip(),
            name=bloc.name,
            members=frozenset(_upper(code) for code in bloc.members),
            mutual_open=bloc.mutual_open,
            substitutes_for=bloc.substitutes_for.strip() if bloc.substitutes_for is not None else None,
        )
        for bloc in document.blocs
    ]
    memberships: dict[str, set[str]] = {}
    for bloc in blocs:
        for member in bloc.members:
            memberships.setdefault(member, set()).add(bloc.bloc_id)

    countries = [
        Country(
            code=_upper(country.code),
            name=country.name,
            continent=country.continent,
            flag=country.flag if country.flag is not None else flag_for(_upper(country.code)),
            blocs=frozenset(memberships.get(_upper(country.code), ())),
        )
        for country in document.countries
    ]
    visa_classes = [
        VisaClass(
            visa_class_id=visa_class.visa_class_id.strip(),
            label=visa_class.label,
            flag=visa_class.flag,
            description=visa_class.description,
            issuers=frozenset(_upper(code) for code in visa_class.issuers),
            substitutions=tuple(
                SubstitutionEntry(country_code=_upper(entry.country_code), access=entry.access)
                for entry in visa_class.substitutions
            ),
        )
        for visa_class in document.visa_classes
    ]
    direct = {
        _upper(passport): {_upper(destination): requirement for destination, requirement in rows.items()}
        for passport, rows in document.direct_requirements.items()
    }

    return RuleSet(
        version=document.version,
        registry=CountryRegistry.build(countries),
        rules=VisaRuleTable.build(blocs=blocs, visa_classes=visa_classes, direct=direct),
        checksum=document.checksum(),
    )


def load_rule_set_file(path: str | Path) -> RuleSet:
    raw = Path(path).read_text(encoding="utf-8")
    try:
        document = RuleTableDocument.model_validate_json(raw)
    except ValidationError as exc:
        raise RuleTableError(f"Malformed rule table file {path}: {exc}") from exc
    return load_rule_set(document)
