"""
Identifier resolution against one level of the hierarchy.

Callers name a country, state or city with one of the variants below:

  - ById(1001)            exact match on the record id
  - ByName("california")  case-insensitive match on the name
  - ByCode("ca")          case-insensitive match on the level's codes
                          (iso2/iso3 for countries, state_code for states;
                          cities have no codes, so this never matches one)
  - ByNameOrCode("CA")    name or any code, the loose textual form

Raw ints and strings are accepted everywhere a variant is and are mapped by
`as_identifier`. Any other type resolves to nothing rather than raising.
When several records match, the first in collection order wins.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, TypeVar, Union

from geo_gazetteer.models import City, Country, State


@dataclass(frozen=True)
class ById:
    value: int


@dataclass(frozen=True)
class ByName:
    value: str


@dataclass(frozen=True)
class ByCode:
    value: str


@dataclass(frozen=True)
class ByNameOrCode:
    value: str


Identifier = Union[ById, ByName, ByCode, ByNameOrCode]
IdentifierLike = Union[Identifier, int, str]

_VARIANTS = (ById, ByName, ByCode, ByNameOrCode)

# Code attributes searched per level
COUNTRY_CODES = ("iso2", "iso3")
STATE_CODES = ("state_code",)
CITY_CODES: tuple[str, ...] = ()

T = TypeVar("T", Country, State, City)


def as_identifier(raw: object) -> Optional[Identifier]:
    """
    Map a loosely-typed identifier to a variant.
    int -> ById, str -> ByNameOrCode, variants pass through.
    Anything else (bool, None, floats, ...) yields None, which matches nothing.
    """
    if isinstance(raw, _VARIANTS):
        return raw
    # bool is an int subclass; True is not a record id
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return ById(raw)
    if isinstance(raw, str):
        return ByNameOrCode(raw)
    return None


def parse_identifier(text: str) -> Identifier:
    """Identifier from user-typed text (CLI, URL path): digits are ids."""
    text = text.strip()
    if text.isdecimal() and text.isascii():
        return ById(int(text))
    return ByNameOrCode(text)


def _norm(value: Optional[str]) -> Optional[str]:
    return value.casefold() if isinstance(value, str) else None


def matches(record: Union[Country, State, City], ident: Identifier, code_fields: Sequence[str]) -> bool:
    if isinstance(ident, ById):
        return record.id == ident.value

    wanted = _norm(ident.value)
    if wanted is None:
        return False

    if isinstance(ident, (ByName, ByNameOrCode)) and _norm(record.name) == wanted:
        return True
    if isinstance(ident, (ByCode, ByNameOrCode)):
        return any(_norm(getattr(record, f, None)) == wanted for f in code_fields)
    return False


def resolve(records: Sequence[T], raw: object, code_fields: Sequence[str]) -> Optional[T]:
    """Return the first record matching the identifier, or None."""
    ident = as_identifier(raw)
    if ident is None:
        return None
    for record in records:
        if matches(record, ident, code_fields):
            return record
    return None


def resolve_country(countries: Sequence[Country], raw: object) -> Optional[Country]:
    return resolve(countries, raw, COUNTRY_CODES)


def resolve_state(states: Sequence[State], raw: object) -> Optional[State]:
    return resolve(states, raw, STATE_CODES)


def resolve_city(cities: Sequence[City], raw: object) -> Optional[City]:
    return resolve(cities, raw, CITY_CODES)
