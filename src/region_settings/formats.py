"""Display pattern sources.

Date, time and number patterns are read live from a formatting primitive
rather than a static table. The default source uses the CLDR data shipped
with Babel, which is what the host platforms' own formatters expose.

Patterns use CLDR/LDML syntax (``M/d/yy``, ``h:mm a``, ``#,##0.00``).
Number patterns are produced by formatting a sample value and rewriting
every digit to ``#``.
"""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from decimal import Decimal

from babel import Locale

from region_settings.types import FormatCategory


NUMBER_SAMPLE = Decimal("1111111.11")
PLACEHOLDER = "#"

TIERS: dict[FormatCategory, tuple[str, ...]] = {
    FormatCategory.DATE: ("short", "medium", "long"),
    FormatCategory.TIME: ("short", "medium", "long"),
    FormatCategory.NUMBER: ("0", "2"),
}

DEFAULT_PATTERNS: dict[FormatCategory, tuple[str, ...]] = {
    FormatCategory.DATE: ("yyyy-MM-dd", "dd MMM yyyy", "dd MMMM yyyy"),
    FormatCategory.TIME: ("HH:mm", "HH:mm:ss", "HH:mm:ss z"),
    FormatCategory.NUMBER: ("#,###,###", "#,###,###.##"),
}


def to_number_pattern(sample: str) -> str:
    """Rewrite every digit of a formatted sample to the ``#`` placeholder.

    Example:
        to_number_pattern("1.111.111,11")  # "#.###.###,##"
    """
    return "".join(PLACEHOLDER if ch.isdigit() else ch for ch in sample)


class FormatPatternSource(ABC):
    """Formatting primitive that yields patterns for a locale.

    Methods raise ``babel.UnknownLocaleError`` or ``ValueError`` when the
    locale has no data.
    """

    @abstractmethod
    def date_pattern(self, locale_id: str, tier: str) -> str:
        pass

    @abstractmethod
    def time_pattern(self, locale_id: str, tier: str) -> str:
        pass

    @abstractmethod
    def number_sample(self, locale_id: str, fraction_digits: int) -> str:
        """Format NUMBER_SAMPLE with exactly ``fraction_digits`` decimals."""
        pass

    def patterns(self, category: FormatCategory, locale_id: str) -> tuple[str, ...]:
        """Get every tier of a category, in tier order."""
        if category is FormatCategory.DATE:
            return tuple(self.date_pattern(locale_id, tier) for tier in TIERS[category])
        if category is FormatCategory.TIME:
            return tuple(self.time_pattern(locale_id, tier) for tier in TIERS[category])
        return tuple(
            to_number_pattern(self.number_sample(locale_id, int(tier)))
            for tier in TIERS[category]
        )


class BabelPatternSource(FormatPatternSource):
    """Pattern source backed by Babel's CLDR locale data."""

    def _locale(self, locale_id: str) -> Locale:
        return Locale.parse(locale_id)

    def date_pattern(self, locale_id: str, tier: str) -> str:
        return self._locale(locale_id).date_formats[tier].pattern

    def time_pattern(self, locale_id: str, tier: str) -> str:
        return self._locale(locale_id).time_formats[tier].pattern

    def number_sample(self, locale_id: str, fraction_digits: int) -> str:
        babel_locale = self._locale(locale_id)
        pattern = copy.copy(babel_locale.decimal_formats[None])
        pattern.frac_prec = (fraction_digits, fraction_digits)
        return pattern.apply(NUMBER_SAMPLE, babel_locale)
