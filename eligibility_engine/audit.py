from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from hashlib import sha256
from typing import Protocol

import structlog
from pydantic import ConfigDict
from pydantic.dataclasses import dataclass as pydantic_dataclass

from .rules import RuleSet


@pydantic_dataclass(config=ConfigDict(extra="forbid", strict=True))
class RuleTableAuditRecord:
    version: str
    previous_version: str | None
    checksum: str
    country_count: int
    bloc_count: int
    visa_class_count: int
    direct_passport_count: int
    timestamp: datetime


class AuditSink(Protocol):
    """Append-only sink for rule table publication records."""

    def append(self, record: RuleTableAuditRecord) -> str:
        ...


@dataclass
class InMemoryAuditSink:
    records: dict[str, RuleTableAuditRecord]
    sequence: int = 0

    def append(self, record: RuleTableAuditRecord) -> str:
        self.sequence += 1
        audit_id = sha256(f"{self.sequence}:{record.version}:{record.checksum}:{record.timestamp.isoformat()}".encode()).hexdigest()
        self.records[audit_id] = record
        return audit_id


@dataclass
class RuleTableAuditLogger:
    sink: AuditSink
    logger: structlog.stdlib.BoundLogger

    def record_publish(self, *, rule_set: RuleSet, previous: RuleSet | None) -> str:
        rules = rule_set.rules
        record = RuleTableAuditRecord(
            version=rule_set.version,
            previous_version=previous.version if previous is not None else None,
            checksum=rule_set.checksum,
            country_count=len(rule_set.registry),
            bloc_count=len(rules.blocs),
            visa_class_count=len(rules.visa_classes),
            direct_passport_count=len(rules.direct),
            timestamp=datetime.now(timezone.utc),
        )
        audit_id = self.sink.append(record)
        self.logger.info(
            "rule_table_published",
            audit_id=audit_id,
            version=record.version,
            previous_version=record.previous_version,
            checksum=record.checksum[:12],
            countries=record.country_count,
            blocs=record.bloc_count,
            visa_classes=record.visa_class_count,
            timestamp=record.timestamp.isoformat(),
        )
        return audit_id
