from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from .models import Country


def normalize_code(code: object) -> str | None:
    """Uppercase and strip a country-like code; non-strings and blanks give None."""
    if not isinstance(code, str):
        return None
    cleaned = code.strip().upper()
    return cleaned or None


@dataclass(frozen=True)
class CountryRegistry:
    """Read-only lookup over the known countries, keyed by ISO alpha-2 code."""

    countries: Mapping[str, Country] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def build(cls, countries: Iterable[Country]) -> CountryRegistry:
        ordered = sorted(countries, key=lambda country: country.code)
        return cls(countries=MappingProxyType({country.code: country for country in ordered}))

    def lookup(self, code: object) -> Country | None:
        normalized = normalize_code(code)
        if normalized is None:
            return None
        return self.countries.get(normalized)

    def all(self) -> tuple[Country, ...]:
        return tuple(self.countries.values())

    def codes(self) -> tuple[str, ...]:
        return tuple(self.countries.keys())

    def by_continent(self, continent: str) -> tuple[Country, ...]:
        wanted = continent.strip().lower()
        return tuple(country for country in self.countries.values() if country.continent.lower() == wanted)

    def __contains__(self, code: object) -> bool:
        return self.lookup(code) is not None

    def __len__(self) -> int:
        return len(self.countries)
