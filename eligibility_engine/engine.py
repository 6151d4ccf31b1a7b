from __future__ import annotations

import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
from pydantic_settings import BaseSettings, SettingsConfigDict

from .audit import InMemoryAuditSink, RuleTableAuditLogger
from .defaults import default_rule_table_document
from .loader import RuleTableDocument, load_rule_set, load_rule_set_file
from .logging import get_logger
from .models import AccessSummary, EligibilityResult, Holding
from .power_groups import PowerGroupIndex
from .resolver import EligibilityResolver
from .rules import RuleSet


class EligibilityEngineSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="ELIGIBILITY_", env_file=".env", extra="ignore")

    rule_table_path: Path | None = None
    log_input_anomalies: bool = True
    audit_reloads: bool = True


@dataclass
class EligibilityEngine:
    """Entry point used by the app: resolves eligibility against the published rule set.

    Each call reads ``rule_set`` once and works on that snapshot. ``reload``
    validates the replacement completely and then swaps the reference, so a
    call never sees parts of two tables.
    """

    rule_set: RuleSet
    settings: EligibilityEngineSettings = field(default_factory=EligibilityEngineSettings)
    audit_logger: RuleTableAuditLogger | None = None
    logger: structlog.stdlib.BoundLogger = field(default_factory=lambda: get_logger("eligibility_engine"))
    _reload_lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def compute_eligibility(
        self,
        holdings: Iterable[Holding],
        destinations: Iterable[str] | None = None,
    ) -> list[EligibilityResult]:
        return self._resolver(self.rule_set).resolve(holdings, destinations)

    def active_power_groups(self, holdings: Iterable[Holding]) -> frozenset[str]:
        snapshot = self.rule_set
        normalized = self._resolver(snapshot).normalizer().normalize(holdings)
        return PowerGroupIndex(snapshot.rules).active_groups(normalized)

    def explain(self, holdings: Iterable[Holding], destination: str) -> list[EligibilityResult]:
        return self._resolver(self.rule_set).explain(holdings, destination)

    def summarize(self, holdings: Iterable[Holding]) -> AccessSummary:
        return self._resolver(self.rule_set).summarize(holdings)

    def holdings_from_records(self, records: Iterable[Mapping[str, Any]]) -> list[Holding]:
        return self._resolver(self.rule_set).normalizer().from_records(records)

    def reload(self, document: RuleTableDocument | Mapping[str, Any]) -> RuleSet:
        return self.publish(load_rule_set(document))

    def reload_from_file(self, path: str | Path) -> RuleSet:
        return self.publish(load_rule_set_file(path))

    def publish(self, rule_set: RuleSet) -> RuleSet:
        with self._reload_lock:
            previous = self.rule_set
            self.rule_set = rule_set
            if self.audit_logger is not None and self.settings.audit_reloads:
                self.audit_logger.record_publish(rule_set=rule_set, previous=previous)
        return rule_set

    def _resolver(self, snapshot: RuleSet) -> EligibilityResolver:
        logger = self.logger if self.settings.log_input_anomalies else None
        return EligibilityResolver(rule_set=snapshot, logger=logger)


def build_default_engine(
    settings: EligibilityEngineSettings | None = None,
    audit_logger: RuleTableAuditLogger | None = None,
) -> EligibilityEngine:
    settings = settings or EligibilityEngineSettings()
    logger = get_logger("eligibility_engine")
    if audit_logger is None:
        audit_logger = RuleTableAuditLogger(sink=InMemoryAuditSink(records={}), logger=logger)
    if settings.rule_table_path is not None:
        rule_set = load_rule_set_file(settings.rule_table_path)
    else:
        rule_set = load_rule_set(default_rule_table_document())
    engine = EligibilityEngine(rule_set=rule_set, settings=settings, audit_logger=audit_logger, logger=logger)
    if settings.audit_reloads:
        audit_logger.record_publish(rule_set=rule_set, previous=None)
    return engine
