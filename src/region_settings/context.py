"""Locale context readers.

A reader answers two questions about the host: which locale (and so which
region) is active for a category, and whether the user set an explicit
preference that should override region inference.

Readers:
    LocaleContextReader (abstract)
         |
         +---> SystemLocaleReader    (POSIX environment + locale keywords)
         +---> StaticLocaleReader    (fixed locale, embedding and tests)
         +---> OverrideLocaleReader  (configured overrides over another reader)

Explicit preferences are carried on a locale identifier as Unicode ``-u-``
extension keywords, e.g. ``en-US-u-fw-mon-mu-celsius``:

    fw  first day of week     (sun, mon, fri, sat)
    mu  temperature unit      (celsius, fahrenhe)
    ms  measurement system    (metric, ussystem, uksystem)
    rg  regional override     (gbzzzz -> preferences of GB)
"""

from __future__ import annotations

import locale
import logging
import os
import re
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum

from region_settings.errors import InvalidPreferenceError
from region_settings.types import (
    FormatCategory,
    PreferenceCategory,
    PreferenceValue,
    normalize_region_code,
)

logger = logging.getLogger(__name__)

LocaleCategory = PreferenceCategory | FormatCategory | None


# =============================================================================
# Locale Tags
# =============================================================================


_LANGUAGE_RE = re.compile(r"^[A-Za-z]{2,8}$")
_SCRIPT_RE = re.compile(r"^[A-Za-z]{4}$")
_REGION_RE = re.compile(r"^(?:[A-Za-z]{2}|[0-9]{3})$")
_KEY_RE = re.compile(r"^[A-Za-z0-9][A-Za-z]$")

_NO_LOCALE = frozenset({"c", "posix"})

PREFERENCE_KEYWORDS: dict[PreferenceCategory, str] = {
    PreferenceCategory.TEMPERATURE_UNIT: "mu",
    PreferenceCategory.MEASUREMENT_SYSTEM: "ms",
    PreferenceCategory.FIRST_DAY_OF_WEEK: "fw",
}


@dataclass(frozen=True)
class LocaleTag:
    """Parsed locale identifier.

    Attributes:
        language: Lowercase language subtag.
        script: Title-case script subtag, if any.
        region: Uppercase region subtag, if any (may be a UN M.49 number).
        keywords: Unicode extension keywords as (key, value) pairs.
    """

    language: str
    script: str | None = None
    region: str | None = None
    keywords: tuple[tuple[str, str], ...] = ()

    @classmethod
    def parse(cls, value: str) -> "LocaleTag | None":
        """Parse a POSIX or BCP-47 locale identifier.

        ``en_US.UTF-8@euro``, ``en-us`` and ``en-US-u-fw-sun`` are all
        accepted. Returns None for empty input and the C/POSIX locales.

        Raises:
            ValueError: If the language subtag is malformed.
        """
        value = value.strip()
        # POSIX codeset and modifier
        value = value.split(".", 1)[0].split("@", 1)[0]
        if not value or value.lower() in _NO_LOCALE:
            return None

        subtags = value.replace("_", "-").split("-")
        language = subtags.pop(0)
        if not _LANGUAGE_RE.match(language):
            raise ValueError(f"Invalid locale identifier: {value!r}")

        script = None
        region = None
        if subtags and _SCRIPT_RE.match(subtags[0]):
            script = subtags.pop(0).title()
        if subtags and _REGION_RE.match(subtags[0]):
            region = subtags.pop(0).upper()

        return cls(
            language=language.lower(),
            script=script,
            region=region,
            keywords=_parse_unicode_keywords(subtags),
        )

    @property
    def region_code(self) -> str | None:
        """Region used for regional preferences.

        An ``rg`` keyword overrides the region subtag, so ``en-US-u-rg-gbzzzz``
        follows GB conventions.
        """
        override = self.keyword("rg")
        if override:
            code = normalize_region_code(override[:2])
            if code:
                return code
        return normalize_region_code(self.region)

    def keyword(self, key: str) -> str | None:
        for name, value in self.keywords:
            if name == key:
                return value
        return None

    @property
    def identifier(self) -> str:
        """Underscore-joined identifier without keywords (``zh_Hant_TW``)."""
        return "_".join(part for part in (self.language, self.script, self.region) if part)

    def __str__(self) -> str:
        tag = "-".join(part for part in (self.language, self.script, self.region) if part)
        if self.keywords:
            tag += "-u-" + "-".join(f"{k}-{v}" for k, v in self.keywords)
        return tag


def _parse_unicode_keywords(subtags: list[str]) -> tuple[tuple[str, str], ...]:
    """Extract keywords from the ``-u-`` extension of the remaining subtags."""
    keywords: dict[str, str] = {}
    in_unicode = False
    key: str | None = None
    values: list[str] = []

    def flush() -> None:
        if key is not None:
            keywords[key] = "-".join(values) or "true"

    for raw in subtags:
        part = raw.lower()
        if len(part) == 1:
            flush()
            key, values = None, []
            if part == "x":
                break
            in_unicode = part == "u"
        elif in_unicode and _KEY_RE.match(part):
            flush()
            key, values = part, []
        elif in_unicode and key is not None:
            values.append(part)
    flush()
    return tuple(sorted(keywords.items()))


def parse_preference(category: PreferenceCategory, value: str) -> PreferenceValue:
    """Parse a raw explicit preference string.

    Raises:
        InvalidPreferenceError: If the value is not valid for the category.
    """
    try:
        return category.parse(value)
    except ValueError as e:
        raise InvalidPreferenceError(category.value, value) from e


# =============================================================================
# Readers
# =============================================================================


class LocaleContextReader(ABC):
    """Read-only view of the host's locale and explicit preferences.

    Subclasses supply the active locale and declare which preference
    categories the host can report directly. Absence of a locale or a
    preference is a normal outcome and never raises.
    """

    @abstractmethod
    def current_locale(self, category: LocaleCategory = None) -> LocaleTag | None:
        """Get the active locale for a category (None for the default)."""
        pass

    def current_region_code(self, category: LocaleCategory = None) -> str | None:
        tag = self.current_locale(category)
        return tag.region_code if tag else None

    def supports(self, category: PreferenceCategory) -> bool:
        """Capability probe: can this host report an explicit preference."""
        return False

    def explicit_preference(self, category: PreferenceCategory) -> PreferenceValue | None:
        """Get the user's explicit preference for a category.

        Returns:
            The preference, or None if the host lacks the capability or the
            user has not set one.
        """
        if not self.supports(category):
            return None
        return self._read_preference(category)

    def _read_preference(self, category: PreferenceCategory) -> PreferenceValue | None:
        return None


def keyword_preference(
    tag: LocaleTag | None,
    category: PreferenceCategory,
) -> PreferenceValue | None:
    """Read an explicit preference from a locale tag's keywords."""
    if tag is None:
        return None
    raw = tag.keyword(PREFERENCE_KEYWORDS[category])
    if raw is None:
        return None
    try:
        return parse_preference(category, raw)
    except InvalidPreferenceError as e:
        logger.debug("Ignoring locale keyword: %s", e)
        return None


class SystemLocaleReader(LocaleContextReader):
    """Reader over the POSIX locale environment.

    The locale for a category follows POSIX precedence: ``LC_ALL``, then
    the category variable, then ``LANG``. When none is set the process
    locale from ``locale.getlocale()`` is used.
    """

    CATEGORY_VARIABLES: dict[LocaleCategory, str] = {
        PreferenceCategory.TEMPERATURE_UNIT: "LC_MEASUREMENT",
        PreferenceCategory.MEASUREMENT_SYSTEM: "LC_MEASUREMENT",
        PreferenceCategory.FIRST_DAY_OF_WEEK: "LC_TIME",
        FormatCategory.DATE: "LC_TIME",
        FormatCategory.TIME: "LC_TIME",
        FormatCategory.NUMBER: "LC_NUMERIC",
    }

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        """Initialize the reader.

        Args:
            environ: Environment to read (default: ``os.environ``).
        """
        self._environ = os.environ if environ is None else environ

    def raw_locale(self, category: LocaleCategory = None) -> str | None:
        """Get the unparsed locale string for a category."""
        for var in ("LC_ALL", self.CATEGORY_VARIABLES.get(category), "LANG"):
            if var and self._environ.get(var):
                return self._environ[var]
        try:
            return locale.getlocale()[0]
        except ValueError:
            return None

    def current_locale(self, category: LocaleCategory = None) -> LocaleTag | None:
        raw = self.raw_locale(category)
        if not raw:
            return None
        try:
            return LocaleTag.parse(raw)
        except ValueError:
            logger.warning("Unparseable system locale %r", raw)
            return None

    def supports(self, category: PreferenceCategory) -> bool:
        return category in PREFERENCE_KEYWORDS

    def _read_preference(self, category: PreferenceCategory) -> PreferenceValue | None:
        return keyword_preference(self.current_locale(category), category)


class StaticLocaleReader(LocaleContextReader):
    """Reader over a fixed locale.

    Example:
        reader = StaticLocaleReader(
            "en_US",
            preferences={PreferenceCategory.FIRST_DAY_OF_WEEK: "mon"},
        )
    """

    def __init__(
        self,
        locale_id: str | LocaleTag | None,
        preferences: Mapping[PreferenceCategory, PreferenceValue | str] | None = None,
        capabilities: Iterable[PreferenceCategory] | None = None,
    ) -> None:
        """Initialize the reader.

        Args:
            locale_id: Locale identifier or parsed tag; None for no locale.
            preferences: Explicit preferences the host reports.
            capabilities: Categories the host can report. Defaults to all;
                pass an empty list to emulate a host without a preferences
                API.
        """
        if isinstance(locale_id, str):
            locale_id = LocaleTag.parse(locale_id)
        self._tag = locale_id
        self._preferences = {
            category: value if isinstance(value, Enum) else parse_preference(category, value)
            for category, value in (preferences or {}).items()
        }
        self._capabilities = (
            frozenset(PreferenceCategory) if capabilities is None else frozenset(capabilities)
        )

    def current_locale(self, category: LocaleCategory = None) -> LocaleTag | None:
        return self._tag

    def supports(self, category: PreferenceCategory) -> bool:
        return category in self._capabilities

    def _read_preference(self, category: PreferenceCategory) -> PreferenceValue | None:
        if category in self._preferences:
            return self._preferences[category]
        return keyword_preference(self._tag, category)


class OverrideLocaleReader(LocaleContextReader):
    """Layer explicit overrides over another reader.

    The wrapped reader still provides the locale; configured overrides take
    precedence over any preference it reports.
    """

    def __init__(
        self,
        base: LocaleContextReader,
        overrides: Mapping[PreferenceCategory, PreferenceValue],
    ) -> None:
        self._base = base
        self._overrides = dict(overrides)

    @property
    def base(self) -> LocaleContextReader:
        return self._base

    def current_locale(self, category: LocaleCategory = None) -> LocaleTag | None:
        return self._base.current_locale(category)

    def current_region_code(self, category: LocaleCategory = None) -> str | None:
        return self._base.current_region_code(category)

    def supports(self, category: PreferenceCategory) -> bool:
        return category in self._overrides or self._base.supports(category)

    def _read_preference(self, category: PreferenceCategory) -> PreferenceValue | None:
        if category in self._overrides:
            return self._overrides[category]
        return self._base.explicit_preference(category)
