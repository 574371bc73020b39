"""Static bilingual glossary for common UI vocabulary."""

import logging
from typing import NamedTuple

from ..core.constants import Language

logger = logging.getLogger(__name__)


class GlossaryEntry(NamedTuple):
    zh: str
    en: str


GLOSSARY: tuple[GlossaryEntry, ...] = (
    GlossaryEntry("确定", "Confirm"),
    GlossaryEntry("取消", "Cancel"),
    GlossaryEntry("保存", "Save"),
    GlossaryEntry("提交", "Submit"),
    GlossaryEntry("编辑", "Edit"),
    GlossaryEntry("删除", "Delete"),
    GlossaryEntry("上传", "Upload"),
    GlossaryEntry("下载", "Download"),
    GlossaryEntry("添加", "Add"),
    GlossaryEntry("返回", "Back"),
    GlossaryEntry("首页", "Home"),
    GlossaryEntry("详情", "Details"),
    GlossaryEntry("请搜索", "Please search"),
    GlossaryEntry("请输入", "Please enter"),
    GlossaryEntry("请选择", "Please select"),
    GlossaryEntry("启用", "Enable"),
    GlossaryEntry("禁用", "Disable"),
    GlossaryEntry("已启用", "Enabled"),
    GlossaryEntry("已禁用", "Disabled"),
    GlossaryEntry("导入", "Import"),
    GlossaryEntry("导出", "Export"),
)


class Glossary:
    """Exact-match lookup in both directions of the zh/en pair."""

    def __init__(self, entries: tuple[GlossaryEntry, ...] = GLOSSARY):
        # First entry wins on duplicate source text
        self._zh_to_en: dict[str, str] = {}
        self._en_to_zh: dict[str, str] = {}
        for entry in entries:
            self._zh_to_en.setdefault(entry.zh, entry.en)
            self._en_to_zh.setdefault(entry.en, entry.zh)

    def __len__(self) -> int:
        return len(self._zh_to_en)

    def lookup(
        self, text: str | None, source: Language | str, target: Language | str
    ) -> str | None:
        """Return the mapped term, or None when there is no exact hit."""
        key = (text or "").strip()
        if not key:
            return None
        try:
            source, target = Language(source), Language(target)
        except ValueError:
            return None
        if source is Language.ZH and target is Language.EN:
            return self._zh_to_en.get(key)
        if source is Language.EN and target is Language.ZH:
            return self._en_to_zh.get(key)
        return None


default_glossary = Glossary()
