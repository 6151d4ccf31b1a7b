from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import structlog

from .holdings import HoldingsNormalizer, NormalizedHoldings
from .models import (
    AccessLevel,
    AccessSummary,
    Classification,
    DirectRequirement,
    EligibilityResult,
    GrantReason,
    GrantRule,
    Holding,
)
from .power_groups import PowerGroupIndex
from .registry import normalize_code
from .rules import RuleSet

_DIRECT_CLASSIFICATION = {
    DirectRequirement.VISA_FREE: Classification.VISA_FREE_DIRECT,
    DirectRequirement.ON_ARRIVAL: Classification.VISA_ON_ARRIVAL_DIRECT,
    DirectRequirement.ETA: Classification.ETA_DIRECT,
    DirectRequirement.E_VISA: Classification.E_VISA_DIRECT,
    DirectRequirement.VISA_REQUIRED: Classification.REQUIRES_VISA,
}

_SUBSTITUTION_CLASSIFICATION = {
    AccessLevel.VISA_FREE: Classification.SUBSTITUTION_FREE,
    AccessLevel.ON_ARRIVAL: Classification.SUBSTITUTION_VOA,
}


@dataclass(frozen=True)
class EligibilityResolver:
    """Classifies destinations for one traveler against a single RuleSet snapshot.

    Every rule that applies to a destination produces a candidate grant; the
    candidate with the highest-priority classification wins. Candidates of
    equal classification keep their enumeration order, which walks passports,
    blocs and groups by ascending id.
    """

    rule_set: RuleSet
    logger: structlog.stdlib.BoundLogger | None = None

    def resolve(self, holdings: Iterable[Holding], destinations: Iterable[str] | None = None) -> list[EligibilityResult]:
        normalized = self.normalizer().normalize(holdings)
        groups = PowerGroupIndex(self.rule_set.rules).active_groups(normalized)
        return [self._candidates(normalized, groups, code)[0] for code in self._destinations(destinations)]

    def explain(self, holdings: Iterable[Holding], destination: str) -> list[EligibilityResult]:
        """All grants that apply to one destination, best first; empty for unknown codes."""
        country = self.rule_set.registry.lookup(destination)
        if country is None:
            return []
        normalized = self.normalizer().normalize(holdings)
        groups = PowerGroupIndex(self.rule_set.rules).active_groups(normalized)
        return self._candidates(normalized, groups, country.code)

    def summarize(self, holdings: Iterable[Holding]) -> AccessSummary:
        """Counts classifications across the whole registry and lists the destinations that grant entry.

        Held passports missing from the direct table are reported, since their
        destinations fall back to substitution data or UNKNOWN.
        """
        rules = self.rule_set.rules
        normalized = self.normalizer().normalize(holdings)
        groups = PowerGroupIndex(rules).active_groups(normalized)
        counts = dict.fromkeys(Classification, 0)
        accessible: list[str] = []
        for code in self.rule_set.registry.codes():
            best = self._candidates(normalized, groups, code)[0]
            counts[best.classification] += 1
            if best.classification.grants_entry:
                accessible.append(code)
        return AccessSummary(
            rule_table_version=self.rule_set.version,
            counts=counts,
            accessible=tuple(accessible),
            accessible_count=len(accessible),
            passports_without_data=tuple(p for p in sorted(normalized.passports) if not rules.has_direct_data(p)),
        )

    def normalizer(self) -> HoldingsNormalizer:
        return HoldingsNormalizer(rule_set=self.rule_set, logger=self.logger)

    def _destinations(self, destinations: Iterable[str] | None) -> list[str]:
        registry = self.rule_set.registry
        if destinations is None:
            return list(registry.codes())
        seen: dict[str, None] = {}
        for raw in destinations:
            code = normalize_code(raw)
            if code is None or code not in registry.countries:
                self._warn("destination_dropped", value=raw, reason="unknown_country")
                continue
            seen.setdefault(code, None)
        return list(seen)

    def _candidates(self, holdings: NormalizedHoldings, groups: frozenset[str], destination: str) -> list[EligibilityResult]:
        rules = self.rule_set.rules
        passports = sorted(holdings.passports)
        grants: list[EligibilityResult] = []

        for passport in passports:
            if passport == destination:
                grants.append(_grant(destination, Classification.HOME, GrantRule.HOME_PASSPORT, passport))

        for bloc_id in sorted(holdings.blocs):
            bloc = rules.blocs.get(bloc_id)
            if bloc is not None and bloc.mutual_open and destination in bloc.members:
                grants.append(_grant(destination, Classification.BLOC_FREE, GrantRule.BLOC, bloc_id))

        for passport in passports:
            requirement = rules.direct_requirement(passport, destination)
            if requirement is not None:
                grants.append(_grant(destination, _DIRECT_CLASSIFICATION[requirement], GrantRule.DIRECT, passport))

        for visa_id in sorted(holdings.visa_classes):
            visa_class = rules.visa_class(visa_id)
            if visa_class is not None and destination in visa_class.issuers:
                grants.append(_grant(destination, Classification.VISA_HELD, GrantRule.VISA_HELD, visa_id))

        for group_id in sorted(groups):
            access = rules.substitution_entries(group_id).get(destination)
            if access is not None:
                grants.append(
                    _grant(destination, _SUBSTITUTION_CLASSIFICATION[access], GrantRule.SUBSTITUTION, group_id, group=group_id)
                )

        if not grants:
            return [_grant(destination, Classification.UNKNOWN, GrantRule.NO_DATA, None)]
        grants.sort(key=lambda result: result.classification.priority)
        return grants

    def _warn(self, event: str, **fields: Any) -> None:
        if self.logger is not None:
            self.logger.warning(event, **fields)


def _grant(
    destination: str,
    classification: Classification,
    rule: GrantRule,
    source: str | None,
    *,
    group: str | None = None,
) -> EligibilityResult:
    return EligibilityResult(
        destination=destination,
        classification=classification,
        reason=GrantReason(rule=rule, source=source, group=group),
    )
