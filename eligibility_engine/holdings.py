from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

import structlog
from pydantic import TypeAdapter, ValidationError

from .models import Holding, PassportHolding, VisaHolding
from .registry import normalize_code
from .rules import RuleSet

_HOLDING_ADAPTER: TypeAdapter[Holding] = TypeAdapter(Holding)


@dataclass(frozen=True)
class NormalizedHoldings:
    """Canonical credentials of one traveler for one resolution call."""

    passports: frozenset[str]
    visa_classes: frozenset[str]
    blocs: frozenset[str]
    dropped: tuple[Holding, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.passports and not self.visa_classes


@dataclass
class HoldingsNormalizer:
    rule_set: RuleSet
    logger: structlog.stdlib.BoundLogger | None = None

    def normalize(self, holdings: Iterable[Holding]) -> NormalizedHoldings:
        passports: set[str] = set()
        visa_classes: set[str] = set()
        dropped: list[Holding] = []

        unique: list[Holding] = []
        for holding in holdings:
            if holding not in unique:
                unique.append(holding)

        for holding in unique:
            if isinstance(holding, PassportHolding):
                code = self._passport_code(holding)
                if code is None:
                    dropped.append(holding)
                    self._warn("holding_dropped", kind="passport", value=holding.country_code, reason="unknown_country")
                    continue
                passports.add(code)
            elif isinstance(holding, VisaHolding):
                visa_id = self._visa_class_id(holding)
                if visa_id is None:
                    dropped.append(holding)
                    self._warn("holding_dropped", kind="visa", value=holding.visa_class_id, reason="unknown_visa_class")
                    continue
                visa_classes.add(visa_id)
            else:
                dropped.append(holding)
                self._warn("holding_dropped", kind=type(holding).__name__, reason="unsupported_holding")

        blocs: set[str] = set()
        for code in passports:
            blocs |= self.rule_set.rules.blocs_of(code)

        return NormalizedHoldings(
            passports=frozenset(passports),
            visa_classes=frozenset(visa_classes),
            blocs=frozenset(blocs),
            dropped=tuple(dropped),
        )

    def from_records(self, records: Iterable[Mapping[str, Any]]) -> list[Holding]:
        """Parse raw passport store records, skipping the malformed ones."""
        holdings: list[Holding] = []
        for index, record in enumerate(records):
            try:
                holdings.append(_HOLDING_ADAPTER.validate_python(record))
            except ValidationError as exc:
                self._warn("holding_record_invalid", index=index, errors=exc.error_count())
        return holdings

    def _passport_code(self, holding: PassportHolding) -> str | None:
        country = self.rule_set.registry.lookup(holding.country_code)
        return country.code if country is not None else None

    def _visa_class_id(self, holding: VisaHolding) -> str | None:
        rules = self.rule_set.rules
        raw = holding.visa_class_id.strip()
        if rules.visa_class(raw) is not None:
            return raw
        upper = normalize_code(raw)
        if upper is not None and rules.visa_class(upper) is not None:
            return upper
        # Legacy records store the issuing country instead of the class id.
        if upper is not None:
            return rules.visa_class_for_issuer(upper)
        return None

    def _warn(self, event: str, **fields: Any) -> None:
        if self.logger is not None:
            self.logger.warning(event, **fields)
