from .audit import InMemoryAuditSink, RuleTableAuditLogger, RuleTableAuditRecord
from .defaults import DEFAULT_RULE_TABLE_VERSION, SCHENGEN_COUNTRIES, default_rule_table_document
from .engine import EligibilityEngine, EligibilityEngineSettings, build_default_engine
from .exceptions import RuleTableConflictError, RuleTableError, RuleTableReferenceError
from .holdings import HoldingsNormalizer, NormalizedHoldings
from .loader import RuleTableDocument, load_rule_set, load_rule_set_file
from .models import (
    AccessLevel,
    AccessSummary,
    Bloc,
    Classification,
    Country,
    DirectRequirement,
    EligibilityResult,
    GrantReason,
    GrantRule,
    Holding,
    PassportHolding,
    SubstitutionEntry,
    VisaClass,
    VisaHolding,
)
from .power_groups import PowerGroupIndex
from .registry import CountryRegistry
from .resolver import EligibilityResolver
from .rules import RuleSet, VisaRuleTable

__all__ = [
    "InMemoryAuditSink",
    "RuleTableAuditLogger",
    "RuleTableAuditRecord",
    "DEFAULT_RULE_TABLE_VERSION",
    "SCHENGEN_COUNTRIES",
    "default_rule_table_document",
    "EligibilityEngine",
    "EligibilityEngineSettings",
    "build_default_engine",
    "RuleTableConflictError",
    "RuleTableError",
    "RuleTableReferenceError",
    "HoldingsNormalizer",
    "NormalizedHoldings",
    "RuleTableDocument",
    "load_rule_set",
    "load_rule_set_file",
    "AccessLevel",
    "AccessSummary",
    "Bloc",
    "Classification",
    "Country",
    "DirectRequirement",
    "EligibilityResult",
    "GrantReason",
    "GrantRule",
    "Holding",
    "PassportHolding",
    "SubstitutionEntry",
    "VisaClass",
    "VisaHolding",
    "PowerGroupIndex",
    "CountryRegistry",
    "EligibilityResolver",
    "RuleSet",
    "VisaRuleTable",
]
