"""
Typographic formatter.

Pure functions that normalize translated copy for the design system:
English dates and times are abbreviated, title-like nodes are title-cased,
Chinese dates are spaced consistently, HTML entities are decoded and
currency symbols follow the target language.

``format_content`` returns ``""`` to mean "nothing to apply".
"""

import logging
import re

from ...core.constants import Language, Platform
from .typography import find_style

logger = logging.getLogger(__name__)

SKIP_FORMAT = frozenset(["*"])

MONTH_ABBR = {
    "January": "Jan",
    "February": "Feb",
    "March": "Mar",
    "April": "Apr",
    "May": "May",
    "June": "Jun",
    "July": "Jul",
    "August": "Aug",
    "September": "Sep",
    "October": "Oct",
    "November": "Nov",
    "December": "Dec",
}
DAY_ABBR = {
    "Sunday": "Sun",
    "Monday": "Mon",
    "Tuesday": "Tue",
    "Wednesday": "Wed",
    "Thursday": "Thu",
    "Friday": "Fri",
    "Saturday": "Sat",
}
MONTH_NUM_ABBR = {f"{i:02d}": abbr for i, abbr in enumerate(MONTH_ABBR.values(), 1)}

TITLE_CASE_NODE_NAMES = frozenset(
    [
        "我是标题",
        "二级标题",
        "副标题",
        "Tab-title",
        "_Avatar-title",
        "Dialog-title",
        "Button-text",
        "Menu__brand-name",
        "MenuItem-label",
        "TabPane-text-selected",
        "TabPane-text",
        "Menu-title",
        "标题文本",
        "ModalView_title",
        "Tag-text",
        "H1",
        "H2",
        "Title",
        "title",
    ]
)

TITLE_CASE_PARENT_NODE_NAMES = frozenset(
    [
        "[D] Tag_Avatar_Person",
        "[M] Tag_Avatar_Person",
        "🌞DS Desktop Button",
        "🌞DS Desktop Tab Primary Large",
    ]
)

TITLE_CASE_SKIP_WORDS = frozenset(
    "and or but the a an in on at for to with by of as is are was were".split()
)

HTML_ENTITIES = {
    "&#39;": "'",
    "&quot;": '"',
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&nbsp;": " ",
}

_MONTHS_LONG = "|".join(MONTH_ABBR)
_MONTHS = f"(?:{_MONTHS_LONG}|Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)"
_WEEKDAYS = f"(?:{'|'.join(DAY_ABBR)}|Sun|Mon|Tue|Wed|Thu|Fri|Sat)"

EN_DT_TEXT_RE = re.compile(
    rf"(?:({_WEEKDAYS})[,\s]+)?({_MONTHS})\s+(\d{{1,2}})(?:[,\s]+(\d{{4}}))?(?:[,\s]+(\d{{1,2}}:\d{{2}}))",
    re.ASCII,
)
EN_DT_NUM_RE = re.compile(
    r"(\d{4})[/\-.](\d{1,2})[/\-.](\d{1,2})(?:[,\s]+(\d{1,2}:\d{2}))\b", re.ASCII
)
DATE_SLASH_RE = re.compile(
    r"(\d{4})/(\d{2})/(\d{2})(?:-(\d{4})/(\d{2})/(\d{2}))?", re.ASCII
)
DAY_BEFORE_DATE_RE = re.compile(
    rf"\b({'|'.join(DAY_ABBR)}), ({_MONTHS} \d{{1,2}})\b", re.ASCII
)
LONG_MONTH_DAY_RE = re.compile(rf"({_MONTHS_LONG}) (\d{{1,2}})", re.ASCII)
HTML_ENTITY_RE = re.compile("|".join(re.escape(e) for e in HTML_ENTITIES))

# (pattern, replacement) pairs applied in order to Chinese copy
ZH_DATE_RULES: tuple[tuple[re.Pattern, str], ...] = tuple(
    (re.compile(pattern), repl)
    for pattern, repl in (
        (r"(\d{1,4})\s*年\s*(\d{1,2})\s*月\s*(\d{1,2})\s*日", r"\1年\2月\3日"),
        (r"(\d{1,4})\s*年\s*(\d{1,2})\s*月", r"\1年\2月"),
        (r"(\d{1,2})\s*月\s*(\d{1,2})\s*日", r"\1月\2日"),
        (r"(\d{1,4})\s*年", r"\1年"),
    )
)
ZH_WEEKDAY_RE = re.compile(r"(\d{1,4}年)?(\d{1,2}月\d{1,2}日)，\s*(周[一二三四五六日])")
ZH_SPACING_RULES: tuple[tuple[re.Pattern, str], ...] = tuple(
    (re.compile(pattern), r"\1 \2")
    for pattern in (
        r"([^\s0-9])(\d{1,4}年\d{1,2}月\d{1,2}日)",
        r"([^\s0-9])(\d{1,4}年\d{1,2}月)",
        r"([^\s0-9年])(\d{1,2}月\d{1,2}日)",
        r"([^\s0-9])(\d{1,4}年)(?!\d{1,2}月)",
        r"(\d{1,4}年\d{1,2}月\d{1,2}日)([^\s])",
        r"(\d{1,4}年\d{1,2}月)(?!\d{1,2}日)([^\s])",
        r"(\d{1,2}月\d{1,2}日)([^\s])",
        r"(\d{1,4}年)(?!\d{1,2}月)([^\s])",
        r"([^\s0-9])(\d{1,2}:\d{2}(?::\d{2})?)",
        r"(\d{1,2}:\d{2}(?::\d{2})?)([^\s])",
    )
)


def capitalize(word: str) -> str:
    return word[:1].upper() + word[1:]


# =============================================================================
# ENGLISH RULES
# =============================================================================


def format_date_time(content: str) -> str:
    """Abbreviate dates that carry a time part."""

    def text_dt(m: re.Match) -> str:
        weekday, month, day, year, clock = m.groups()
        month = MONTH_ABBR.get(month, month)
        date_part = f"{month} {int(day)}" + (f", {year}" if year else "")
        if weekday:
            return f"{DAY_ABBR.get(weekday, weekday)}, {date_part}, {clock}"
        return f"{date_part}, {clock}"

    def numeric_dt(m: re.Match) -> str:
        year, month, day, clock = m.groups()
        return f"{MONTH_NUM_ABBR[month.zfill(2)]} {int(day)}, {year}, {clock}"

    content = EN_DT_TEXT_RE.sub(text_dt, content)
    return EN_DT_NUM_RE.sub(numeric_dt, content)


def format_slash_date(content: str) -> str:
    """``YYYY/MM/DD[-YYYY/MM/DD]`` -> ``Mon D, YYYY[ - Mon D, YYYY]``."""

    def single(year: str, month: str, day: str) -> str:
        return f"{MONTH_NUM_ABBR.get(month, month)} {int(day)}, {year}"

    def repl(m: re.Match) -> str:
        y1, m1, d1, y2, m2, d2 = m.groups()
        first = single(y1, m1, d1)
        if y2 and m2 and d2:
            return f"{first} - {single(y2, m2, d2)}"
        return first

    return DATE_SLASH_RE.sub(repl, content)


def abbreviate_day(content: str) -> str:
    return DAY_BEFORE_DATE_RE.sub(lambda m: f"{DAY_ABBR[m[1]]}, {m[2]}", content)


def abbreviate_month(content: str) -> str:
    return LONG_MONTH_DAY_RE.sub(lambda m: f"{MONTH_ABBR[m[1]]} {m[2]}", content)


def title_case(content: str, skip_words: frozenset[str] = TITLE_CASE_SKIP_WORDS) -> str:
    words = content.split(" ")
    return " ".join(
        capitalize(word) if i == 0 or word.lower() not in skip_words else word
        for i, word in enumerate(words)
    )


def sentence_case_short(content: str) -> str:
    """One word: capitalize. Two words: capitalize first, lowercase second."""
    words = content.split(" ")
    if len(words) == 1:
        return capitalize(words[0])
    if len(words) == 2:
        return f"{capitalize(words[0])} {words[1].lower()}"
    return content


def apply_case(content: str, node_name: str, parent_node_name: str) -> str:
    if node_name in TITLE_CASE_NODE_NAMES or parent_node_name in TITLE_CASE_PARENT_NODE_NAMES:
        return title_case(content)
    return sentence_case_short(content)


def remove_terminal_period(content: str) -> str:
    """Drop a lone trailing period from a single comma-free sentence."""
    stripped = content.rstrip()
    if not stripped.endswith(".") or stripped.endswith("..."):
        return content
    if "," in stripped:
        return content
    before = stripped[: stripped.rfind(".")]
    if any(mark in before for mark in ".!?"):
        return content
    return re.sub(r"\.\Z", "", content)


def format_english(content: str, node_name: str, parent_node_name: str) -> str:
    content = format_date_time(content)
    content = format_slash_date(content)
    content = abbreviate_day(content)
    content = abbreviate_month(content)
    content = apply_case(content, node_name, parent_node_name)
    return remove_terminal_period(content)


# =============================================================================
# CHINESE RULES
# =============================================================================


def format_chinese(content: str) -> str:
    for pattern, repl in ZH_DATE_RULES:
        content = pattern.sub(repl, content)
    content = ZH_WEEKDAY_RE.sub(
        lambda m: f"{m[1] or ''}{m[2]} {m[3]}", content
    )
    for pattern, repl in ZH_SPACING_RULES:
        content = pattern.sub(repl, content)
    return content


# =============================================================================
# SHARED RULES
# =============================================================================


def decode_html_entities(content: str) -> str:
    return HTML_ENTITY_RE.sub(lambda m: HTML_ENTITIES[m[0]], content)


def convert_currency(content: str, target: Language) -> str:
    if target is Language.EN:
        return content.replace("¥", "$").replace("CNY", "USD")
    return content.replace("$", "¥").replace("USD", "CNY")


def format_content(
    content: str,
    target: Language | str,
    node_name: str = "",
    parent_node_name: str = "",
) -> str:
    """Formatted copy for ``target``, or ``""`` when there is nothing to apply."""
    if not content or content in SKIP_FORMAT:
        return ""
    target = Language(target)
    if target is Language.EN:
        content = format_english(content, node_name or "", parent_node_name or "")
    else:
        content = format_chinese(content)
    content = decode_html_entities(content)
    return convert_currency(content, target)


def formatted_style_key(
    font_style: str | None,
    font_size: float | None,
    language: Language | str | None,
    platform: Platform | str | None,
) -> str:
    """Shared style key for the font, or ``""`` if the table has no match."""
    if not font_style or not font_size or font_size <= 0 or not language or not platform:
        return ""
    try:
        language, platform = Language(language), Platform(platform)
    except ValueError:
        logger.debug(f"[Format] unknown language/platform: {language}/{platform}")
        return ""
    style = find_style(font_style, font_size, language, platform)
    return style.style_key if style else ""
