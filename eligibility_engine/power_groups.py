from __future__ import annotations

from dataclasses import dataclass

from .holdings import NormalizedHoldings
from .rules import VisaRuleTable


@dataclass(frozen=True)
class PowerGroupIndex:
    """Maps a traveler's credentials to the substitution groups they activate."""

    rules: VisaRuleTable

    def active_groups(self, holdings: NormalizedHoldings) -> frozenset[str]:
        groups: set[str] = set(holdings.visa_classes)
        for bloc_id in holdings.blocs:
            bloc = self.rules.blocs.get(bloc_id)
            if bloc is None or not bloc.mutual_open:
                continue
            groups.add(bloc_id)
            if bloc.substitutes_for is not None:
                groups.add(bloc.substitutes_for)
        return frozenset(groups)
