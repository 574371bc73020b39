"""Tests for the translation / polish predicates and the glossary."""

import pytest

from textshift.core.constants import Language
from textshift.services.glossary import Glossary, GlossaryEntry, default_glossary
from textshift.services.polish.polisher import count_polish_tokens, needs_polishing
from textshift.services.translate.orchestrator import needs_translation


class TestNeedsTranslation:
    @pytest.mark.parametrize(
        "content,target,expected",
        [
            ("你好", Language.EN, True),
            ("Hello 你好", Language.EN, True),
            ("Hello", Language.EN, False),
            ("Hello", Language.ZH, True),
            ("你好", Language.ZH, False),
            ("123", Language.ZH, False),
            ("A", Language.ZH, False),
            ("AB", Language.ZH, True),
        ],
    )
    def test_script_detection(self, content, target, expected):
        assert needs_translation(content, target) is expected

    @pytest.mark.parametrize("token", ["CNY", "USD", "Hi Travel"])
    def test_skip_tokens(self, token):
        assert needs_translation(token, Language.ZH) is False

    def test_accepts_string_target(self):
        assert needs_translation("你好", "en") is True


class TestNeedsPolishing:
    def test_counts_words_and_characters(self):
        assert count_polish_tokens("hello world") == 2
        assert count_polish_tokens("你好世界") == 4
        assert count_polish_tokens("hello 你好, 2024") == 3

    def test_threshold_is_exclusive(self):
        ten = " ".join(["word"] * 10)
        eleven = " ".join(["word"] * 11)

        assert needs_polishing(ten) is False
        assert needs_polishing(eleven) is True

    def test_chinese_threshold(self):
        assert needs_polishing("这是一个很长的中文句子需要润色") is True
        assert needs_polishing("短句") is False

    def test_empty(self):
        assert needs_polishing("") is False
        assert needs_polishing(None) is False


class TestGlossary:
    def test_zh_to_en(self):
        assert default_glossary.lookup("确定", Language.ZH, Language.EN) == "Confirm"

    def test_en_to_zh(self):
        assert default_glossary.lookup("Cancel", Language.EN, Language.ZH) == "取消"

    def test_lookup_trims(self):
        assert default_glossary.lookup("  保存 ", Language.ZH, Language.EN) == "Save"

    def test_miss(self):
        assert default_glossary.lookup("你好", Language.ZH, Language.EN) is None
        assert default_glossary.lookup("", Language.ZH, Language.EN) is None
        assert default_glossary.lookup(None, Language.ZH, Language.EN) is None

    def test_same_language_is_never_a_hit(self):
        assert default_glossary.lookup("确定", Language.ZH, Language.ZH) is None

    def test_unknown_language_is_never_a_hit(self):
        assert default_glossary.lookup("确定", "fr", "en") is None
        assert default_glossary.lookup("Cancel", "en", "ja") is None

    def test_first_entry_wins(self):
        glossary = Glossary((GlossaryEntry("好", "Good"), GlossaryEntry("好", "Fine")))

        assert glossary.lookup("好", Language.ZH, Language.EN) == "Good"
        assert len(glossary) == 1
