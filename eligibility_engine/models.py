from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class EngineBaseModel(BaseModel):
    """Base model with strict validation, forbidden unknown fields and immutable instances."""

    model_config = ConfigDict(extra="forbid", strict=True, frozen=True)


class AccessLevel(str, Enum):
    """How a substitution group lets its holder in."""

    VISA_FREE = "visa_free"
    ON_ARRIVAL = "on_arrival"


class DirectRequirement(str, Enum):
    VISA_FREE = "visa_free"
    ON_ARRIVAL = "on_arrival"
    ETA = "eta"
    E_VISA = "e_visa"
    VISA_REQUIRED = "visa_required"


class Classification(str, Enum):
    HOME = "home"
    BLOC_FREE = "bloc_free"
    VISA_FREE_DIRECT = "visa_free_direct"
    VISA_HELD = "visa_held"
    SUBSTITUTION_FREE = "substitution_free"
    VISA_ON_ARRIVAL_DIRECT = "visa_on_arrival_direct"
    SUBSTITUTION_VOA = "substitution_voa"
    ETA_DIRECT = "eta_direct"
    E_VISA_DIRECT = "e_visa_direct"
    REQUIRES_VISA = "requires_visa"
    UNKNOWN = "unknown"

    @property
    def priority(self) -> int:
        """Lower value wins when several rules grant access to the same destination."""
        return CLASSIFICATION_PRIORITY.index(self)

    def outranks(self, other: Classification) -> bool:
        return self.priority < other.priority

    @property
    def grants_entry(self) -> bool:
        """True for every classification that lets the traveler in without a full visa application."""
        return self.priority < CLASSIFICATION_PRIORITY.index(Classification.REQUIRES_VISA)


CLASSIFICATION_PRIORITY: tuple[Classification, ...] = tuple(Classification)


class GrantRule(str, Enum):
    HOME_PASSPORT = "home_passport"
    BLOC = "bloc"
    DIRECT = "direct"
    VISA_HELD = "visa_held"
    SUBSTITUTION = "substitution"
    NO_DATA = "no_data"


def flag_for(code: str) -> str:
    """Regional indicator glyph for a two-letter country code."""
    if len(code) != 2 or not code.isascii() or not code.isalpha():
        return ""
    return "".join(chr(0x1F1E6 + ord(letter) - ord("A")) for letter in code.upper())


class Country(EngineBaseModel):
    code: str = Field(min_length=2, max_length=2)
    name: str
    continent: str
    flag: str = ""
    blocs: frozenset[str] = frozenset()


class Bloc(EngineBaseModel):
    bloc_id: str
    name: str
    members: frozenset[str]
    mutual_open: bool = False
    substitutes_for: str | None = None


class SubstitutionEntry(EngineBaseModel):
    country_code: str = Field(min_length=2, max_length=2)
    access: AccessLevel = AccessLevel.VISA_FREE


class VisaClass(EngineBaseModel):
    visa_class_id: str
    label: str
    flag: str = ""
    description: str = ""
    issuers: frozenset[str] = frozenset()
    substitutions: tuple[SubstitutionEntry, ...] = ()

    def substitution_set(self) -> frozenset[str]:
        return frozenset(entry.country_code for entry in self.substitutions)


class HoldingBaseModel(BaseModel):
    """Holdings arrive from the passport store as plain records."""

    model_config = ConfigDict(extra="forbid", frozen=True)


class PassportHolding(HoldingBaseModel):
    kind: Literal["passport"] = "passport"
    country_code: str = Field(min_length=1)


class VisaHolding(HoldingBaseModel):
    kind: Literal["visa"] = "visa"
    visa_class_id: str = Field(min_length=1)


Holding = Annotated[Union[PassportHolding, VisaHolding], Field(discriminator="kind")]


class GrantReason(EngineBaseModel):
    rule: GrantRule
    source: str | None = None
    group: str | None = None


class EligibilityResult(EngineBaseModel):
    destination: str
    classification: Classification
    reason: GrantReason


class AccessSummary(EngineBaseModel):
    """Traveler-wide totals over every country in one rule table."""

    rule_table_version: str
    counts: dict[Classification, int]
    accessible: tuple[str, ...]
    accessible_count: int = Field(ge=0)
    passports_without_data: tuple[str, ...] = ()
