from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from .models import AccessLevel, Bloc, DirectRequirement, VisaClass
from .registry import CountryRegistry, normalize_code

_EMPTY: Mapping[str, AccessLevel] = MappingProxyType({})


@dataclass(frozen=True)
class VisaRuleTable:
    """Substitution lists, bloc memberships and direct passport requirements.

    Built once by the loader; instances are never mutated. A new table replaces
    the old one as a whole.
    """

    blocs: Mapping[str, Bloc]
    visa_classes: Mapping[str, VisaClass]
    direct: Mapping[str, Mapping[str, DirectRequirement]]
    _groups: Mapping[str, Mapping[str, AccessLevel]] = field(repr=False)
    _issuers: Mapping[str, str] = field(repr=False)
    _country_blocs: Mapping[str, frozenset[str]] = field(repr=False)

    @classmethod
    def build(
        cls,
        *,
        blocs: Iterable[Bloc],
        visa_classes: Iterable[VisaClass],
        direct: Mapping[str, Mapping[str, DirectRequirement]],
    ) -> VisaRuleTable:
        blocs_by_id = {bloc.bloc_id: bloc for bloc in sorted(blocs, key=lambda bloc: bloc.bloc_id)}
        classes_by_id = {
            visa_class.visa_class_id: visa_class
            for visa_class in sorted(visa_classes, key=lambda visa_class: visa_class.visa_class_id)
        }

        groups: dict[str, Mapping[str, AccessLevel]] = {}
        for visa_id, visa_class in classes_by_id.items():
            groups[visa_id] = MappingProxyType({entry.country_code: entry.access for entry in visa_class.substitutions})
        for bloc_id, bloc in blocs_by_id.items():
            if bloc.mutual_open and bloc_id not in groups:
                groups[bloc_id] = MappingProxyType({member: AccessLevel.VISA_FREE for member in sorted(bloc.members)})

        issuers: dict[str, str] = {}
        for visa_id, visa_class in classes_by_id.items():
            for code in visa_class.issuers:
                issuers.setdefault(code, visa_id)

        country_blocs: dict[str, set[str]] = {}
        for bloc_id, bloc in blocs_by_id.items():
            for member in bloc.members:
                country_blocs.setdefault(member, set()).add(bloc_id)

        return cls(
            blocs=MappingProxyType(blocs_by_id),
            visa_classes=MappingProxyType(classes_by_id),
            direct=MappingProxyType({passport: MappingProxyType(dict(rows)) for passport, rows in direct.items()}),
            _groups=MappingProxyType(groups),
            _issuers=MappingProxyType(issuers),
            _country_blocs=MappingProxyType({code: frozenset(ids) for code, ids in country_blocs.items()}),
        )

    def visa_class(self, visa_class_id: str) -> VisaClass | None:
        return self.visa_classes.get(visa_class_id)

    def substitution_set_for(self, visa_class_id: str) -> frozenset[str]:
        visa_class = self.visa_classes.get(visa_class_id)
        if visa_class is None:
            return frozenset()
        return visa_class.substitution_set()

    def substitution_entries(self, group_id: str) -> Mapping[str, AccessLevel]:
        """Destinations a power group unlocks; unknown groups unlock nothing."""
        return self._groups.get(group_id, _EMPTY)

    def bloc_members(self, bloc_id: str) -> frozenset[str]:
        bloc = self.blocs.get(bloc_id)
        return bloc.members if bloc is not None else frozenset()

    def blocs_of(self, code: str) -> frozenset[str]:
        normalized = normalize_code(code)
        if normalized is None:
            return frozenset()
        return self._country_blocs.get(normalized, frozenset())

    def bloc_of(self, code: str) -> str | None:
        memberships = self.blocs_of(code)
        return min(memberships) if memberships else None

    def visa_class_for_issuer(self, code: str) -> str | None:
        normalized = normalize_code(code)
        if normalized is None:
            return None
        return self._issuers.get(normalized)

    def direct_requirement(self, passport: str, destination: str) -> DirectRequirement | None:
        rows = self.direct.get(passport)
        if rows is None:
            return None
        return rows.get(destination)

    def has_direct_data(self, passport: str) -> bool:
        return passport in self.direct


@dataclass(frozen=True)
class RuleSet:
    """One published, versioned snapshot of all reference data."""

    version: str
    registry: CountryRegistry
    rules: VisaRuleTable
    checksum: str = ""
