from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from pydantic import BaseModel, ConfigDict, TypeAdapter

from collector.errors import CountriesError, DecodingFailureError


class Currency(BaseModel):
    model_config = ConfigDict(frozen=True, strict=True)

    code: str
    name: str
    symbol: str


class Language(BaseModel):
    model_config = ConfigDict(frozen=True, strict=True)

    code: str
    name: str


class Country(BaseModel):
    model_config = ConfigDict(frozen=True, strict=True)

    name: str
    capital: str
    code: str
    region: str
    flag: str
    currency: Currency
    language: Language

    @property
    def name_and_region(self) -> str:
        return f"{self.name}, {self.region}"


_COUNTRY_LIST = TypeAdapter(list[Country])


@dataclass(frozen=True)
class ParseResult:
    countries: list[Country] | None = None
    error: CountriesError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, countries: list[Country] | None) -> ParseResult:
        return cls(countries=countries)

    @classmethod
    def failure(cls, error: CountriesError | None = None) -> ParseResult:
        return cls(error=error or DecodingFailureError())


class Parser(Protocol):
    def parse(self, payload: bytes | str | None) -> ParseResult: ...


class CountriesParser:
    """
    JSON payload -> list[Country]

    - None payload is not an error: success with countries=None
    - Any malformed JSON / shape / type mismatch fails the whole payload
      (no skip-invalid-record behaviour)
    """

    def parse(self, payload: bytes | str | None) -> ParseResult:
        if payload is None:
            return ParseResult.success(None)

        try:
            countries = _COUNTRY_LIST.validate_json(payload)
        except ValueError:
            # ValidationError (bad JSON, shape or types) is a ValueError subclass
            return ParseResult.failure()
        return ParseResult.success(countries)


_default_parser = CountriesParser()


def parse_countries(payload: bytes | str | None) -> ParseResult:
    return _default_parser.parse(payload)


def filter_countries(countries: list[Country], search_text: str | None) -> list[Country]:
    """
    Case-insensitive substring match on name or capital.
    Empty search text keeps the full list.
    """
    if not search_text:
        return list(countries)

    needle = search_text.lower()
    return [c for c in countries if needle in c.name.lower() or needle in c.capital.lower()]
