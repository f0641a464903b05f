"""Country name to ISO 3166-1 alpha-2 lookup backed by pycountry."""

from __future__ import annotations

from functools import lru_cache
from typing import Final

import pycountry


CODE_SUFFIX: Final[str] = "Code"
COUNTRY_FIELD_SUFFIXES: Final[tuple[str, ...]] = ("Country", "State")


@lru_cache(maxsize=512)
def country_code(name: str) -> str | None:
    """Return the alpha-2 code for a country name, or None if unknown.

    Matching is case-insensitive over names, official names, common names
    and alpha-3 codes.
    """
    if not name.strip():
        return None
    try:
        country = pycountry.countries.lookup(name.strip())
    except LookupError:
        return None
    return country.alpha_2


def is_country_field(wire_name: str) -> bool:
    """Wire fields whose text values have a ``<name>Code`` counterpart."""
    return wire_name.endswith(COUNTRY_FIELD_SUFFIXES)
