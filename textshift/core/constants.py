"""Application-wide enums and fixed tables."""

from enum import Enum


class Language(str, Enum):
    """The fixed language pair the pipeline translates between."""

    EN = "en"
    ZH = "zh"

    @property
    def counterpart(self) -> "Language":
        """Source language for a given target."""
        return Language.ZH if self is Language.EN else Language.EN


class ProviderName(str, Enum):
    """Translation backends."""

    GOOGLE_ADVANCED = "GoogleAdvanced"
    GOOGLE_BASIC = "GoogleBasic"
    GOOGLE_FREE = "GoogleFree"
    BAIDU = "Baidu"

    @property
    def is_google(self) -> bool:
        return self.value.startswith("Google")


POLISH_PROVIDER = "Coze"


class Platform(str, Enum):
    DESKTOP = "desktop"
    MOBILE = "mobile"


class SwitchMode(str, Enum):
    ON = "on"
    OFF = "off"


class NotifyLevel(str, Enum):
    """Severity of a user-facing notification."""

    INFO = "info"
    POSITIVE = "positive"
    WARNING = "warning"
    NEGATIVE = "negative"


# Strings that are never sent to a translation provider
SKIP_TRANSLATE_TOKENS = frozenset(
    [
        "CNY",
        "USD",
        "AED",
        "EUR",
        "GBP",
        "JPY",
        "CHF",
        "HKD",
        "SGD",
        "RUB",
        "INR",
        "Hi Travel",
    ]
)

HOUR = 3600
TRANSLATION_TTL_SECONDS = 24 * HOUR
POLISH_TTL_SECONDS = 48 * HOUR
