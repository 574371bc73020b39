"""
Design-system typography table.

Each row maps (font style, size, language, platform) to a shared text style
key. Lookups are exact; when two rows share a lookup key the first row wins.
"""

from typing import NamedTuple

from ...core.constants import Language, Platform


class TypographyStyle(NamedTuple):
    name: str
    family: str
    style: str
    size: int
    line_height: int
    language: Language
    platform: Platform
    style_key: str

    @property
    def lookup_key(self) -> tuple[str, int, Language, Platform]:
        return (self.style, self.size, self.language, self.platform)


# fmt: off
TYPOGRAPHY: tuple[TypographyStyle, ...] = (
    TypographyStyle("特大标题_Desktop_ZH", "PingFang SC", "Semibold", 30, 46, Language.ZH, Platform.DESKTOP, "bb7500b30fed51ed976517f2fd65f263d1145d66"),
    TypographyStyle("一级标题_Desktop_ZH", "PingFang SC", "Semibold", 24, 36, Language.ZH, Platform.DESKTOP, "220be5c405c5b808bc8231e7ea05f33231eb1242"),
    TypographyStyle("二级标题_Desktop_ZH", "PingFang SC", "Medium", 20, 30, Language.ZH, Platform.DESKTOP, "08bb5f5da607b2bdb4969be6cc6bf0d5a197ba8f"),
    TypographyStyle("三级标题_Desktop_ZH", "PingFang SC", "Medium", 18, 28, Language.ZH, Platform.DESKTOP, "93f289fa230ecc35b45cd8fe5f41b155cf3bb768"),
    TypographyStyle("四级标题_Desktop_ZH", "PingFang SC", "Medium", 16, 24, Language.ZH, Platform.DESKTOP, "a57f240e66b420744d4f7ec85d890e5641829312"),
    TypographyStyle("五级标题_Desktop_ZH", "PingFang SC", "Regular", 16, 24, Language.ZH, Platform.DESKTOP, "efa77a01fe18c71a508b610a9c5674aa95c4fd2c"),
    TypographyStyle("辅助标题_Desktop_ZH", "PingFang SC", "Medium", 14, 22, Language.ZH, Platform.DESKTOP, "60b3b4ad8906cb69682eae4f4095693128a5e900"),
    TypographyStyle("正文_Desktop_ZH", "PingFang SC", "Regular", 14, 22, Language.ZH, Platform.DESKTOP, "10f4b615066ae8e6456961e593dca76768302bce"),
    TypographyStyle("正文辅助_Desktop_ZH", "PingFang SC", "Regular", 12, 20, Language.ZH, Platform.DESKTOP, "c376b786aede4dbf8ca98b63498ebebbc5ce7e06"),
    TypographyStyle("辅助_Desktop_ZH", "PingFang SC", "Medium", 12, 20, Language.ZH, Platform.DESKTOP, "f4039cc49a63b49e2bdeb17c73f573116d0330b9"),
    TypographyStyle("小辅助_Desktop_ZH", "PingFang SC", "Medium", 10, 16, Language.EN, Platform.DESKTOP, "435a78769cf4fca9fa83819947af4c6cde58c167"),
    TypographyStyle("最小辅助_Desktop_ZH", "PingFang SC", "Regular", 10, 16, Language.EN, Platform.DESKTOP, "8b58b2f36e7fb7908be628ae59167c7d748f442e"),
    TypographyStyle("Title-0_Desktop_EN", "SF Pro Text", "Semibold", 30, 46, Language.EN, Platform.DESKTOP, "001b1341efd53cd832dd322a929abcecfe164011"),
    TypographyStyle("Title-1_Desktop_EN", "SF Pro Text", "Semibold", 24, 36, Language.EN, Platform.DESKTOP, "db59a74c4063c9b1c19f0cbf98168762ff679074"),
    TypographyStyle("Title-2_Desktop_EN", "SF Pro Text", "Medium", 20, 30, Language.EN, Platform.DESKTOP, "f9ef6f8980675286ade38ceda42e2ab478677ebc"),
    TypographyStyle("Title-3_Desktop_EN", "SF Pro Text", "Medium", 18, 28, Language.EN, Platform.DESKTOP, "32268b86bddba13108e6e639b0ed19c596fc0911"),
    TypographyStyle("Title-4_Desktop_EN", "SF Pro Text", "Medium", 16, 24, Language.EN, Platform.DESKTOP, "31dbe7076ad0a5c8f0e1bc0119bed7bfb328746f"),
    TypographyStyle("Title-5_Desktop_EN", "SF Pro Text", "Regular", 16, 24, Language.EN, Platform.DESKTOP, "2bea416b34e7527bdcd03e7a389ca7e081f32c1b"),
    TypographyStyle("Headline_Desktop_EN", "SF Pro Text", "Medium", 14, 22, Language.EN, Platform.DESKTOP, "79ea3d768e7c168125eadf7677a6594f67f1715a"),
    TypographyStyle("Body-0_Desktop_EN", "SF Pro Text", "Regular", 14, 22, Language.EN, Platform.DESKTOP, "31ecf056f58ea611c0ae256dd94d2e4c0dc55f9d"),
    TypographyStyle("Body-2_Desktop_EN", "SF Pro Text", "Regular", 12, 20, Language.EN, Platform.DESKTOP, "ef2b901d720e847a9be44a4814c01282ecada982"),
    TypographyStyle("Caption-0_Desktop_EN", "SF Pro Text", "Medium", 12, 20, Language.EN, Platform.DESKTOP, "dbed45afb5da6f5568a5458b95d5e2f1848c3d3f"),
    TypographyStyle("Caption-1_Desktop_EN", "SF Pro Text", "Medium", 10, 16, Language.EN, Platform.DESKTOP, "7fdbe6f0a3685f5aac25a3087accb2f605c02a95"),
    TypographyStyle("Caption-3_Desktop_EN", "SF Pro Text", "Regular", 10, 16, Language.EN, Platform.DESKTOP, "b55e01884f5be5c4a74fdac766643fdbfbd2eaeb"),
    TypographyStyle("特大标题_Mobile_ZH", "PingFang SC", "Semibold", 26, 40, Language.ZH, Platform.MOBILE, "11669e746cc3a9f41e9f856549bc58326d092cee"),
    TypographyStyle("一级标题_Mobile_ZH", "PingFang SC", "Semibold", 24, 36, Language.ZH, Platform.MOBILE, "4c147a2f02dee3b542e0495f943c28b677674633"),
    TypographyStyle("二级标题_Mobile_ZH", "PingFang SC", "Medium", 20, 30, Language.ZH, Platform.MOBILE, "fe745d3290b9b009817381940d6ab9137e646398"),
    TypographyStyle("三级标题_Mobile_ZH", "PingFang SC", "Medium", 17, 26, Language.ZH, Platform.MOBILE, "e36c1dcff68ea37d9b584e2212534f0ac1a509e1"),
    TypographyStyle("四级标题_Mobile_ZH", "PingFang SC", "Regular", 17, 26, Language.ZH, Platform.MOBILE, "82cb627ed551a871fb6e99ae5f69351134eea8d0"),
    TypographyStyle("辅助标题_Mobile_ZH", "PingFang SC", "Medium", 16, 24, Language.ZH, Platform.MOBILE, "9e77a5fc64d6f1822a1e7664e3c25fdc34974097"),
    TypographyStyle("正文_Mobile_ZH", "PingFang SC", "Regular", 16, 24, Language.ZH, Platform.MOBILE, "2403fbfb07379ae8a8f0295acf34e24f646a0fa7"),
    TypographyStyle("正文大辅助_Mobile_ZH", "PingFang SC", "Medium", 14, 22, Language.ZH, Platform.MOBILE, "0b6946cbd0a36740a4118dbb7afda49453fade92"),
    TypographyStyle("正文辅助_Mobile_ZH", "PingFang SC", "Regular", 14, 22, Language.ZH, Platform.MOBILE, "2b29e93880bcf9b080cba3054d56148166eaa55b"),
    TypographyStyle("辅助_Mobile_ZH", "PingFang SC", "Medium", 12, 20, Language.ZH, Platform.MOBILE, "6bc0f647777e4b21779223dbc8052f723a0fd228"),
    TypographyStyle("小辅助_Mobile_ZH", "PingFang SC", "Regular", 12, 20, Language.ZH, Platform.MOBILE, "bba4b582bc37ff8ccb8d251defb9fc3047469265"),
    TypographyStyle("次小辅助_Mobile_ZH", "PingFang SC", "Medium", 10, 16, Language.ZH, Platform.MOBILE, "cfb6b9fb454941d5af0a56b9821186d7a0df4d63"),
    TypographyStyle("最小辅助_Mobile_ZH", "PingFang SC", "Regular", 10, 16, Language.ZH, Platform.MOBILE, "4e4c30c33da9251704e946e412cac5410218000b"),
    TypographyStyle("Title-0_Mobile_EN", "SF Pro Text", "Semibold", 26, 40, Language.EN, Platform.MOBILE, "54af45c2fe434928c7b77cb5b50466ddcca1ae2a"),
    TypographyStyle("Title-1_Mobile_EN", "SF Pro Text", "Semibold", 24, 36, Language.EN, Platform.MOBILE, "738bd450de0ba09df881b6848efd290e6f723d2c"),
    TypographyStyle("Title-2_Mobile_EN", "SF Pro Text", "Medium", 20, 30, Language.EN, Platform.MOBILE, "b09669fa4780e7dfa56025f344ad704fec756fb7"),
    TypographyStyle("Title-3_Mobile_EN", "SF Pro Text", "Medium", 17, 26, Language.EN, Platform.MOBILE, "cab6659953b6006232ffe374f1cf5ab260f2a904"),
    TypographyStyle("Title-4_Mobile_EN", "SF Pro Text", "Regular", 17, 26, Language.EN, Platform.MOBILE, "5756b32ce2a1d62ae08034cdcef7696a6adfddbc"),
    TypographyStyle("Headline_Mobile_EN", "SF Pro Text", "Medium", 16, 24, Language.EN, Platform.MOBILE, "07b471f10b3faced04b3a5a41c3e09ca8a491971"),
    TypographyStyle("Body-0_Mobile_EN", "SF Pro Text", "Regular", 16, 24, Language.EN, Platform.MOBILE, "f3356134a4300806bc4fbf38145308f34fc2db70"),
    TypographyStyle("Body-1_Mobile_EN", "SF Pro Text", "Medium", 14, 22, Language.EN, Platform.MOBILE, "e789456cd7962dce0161e3510915b9a7dc57dd27"),
    TypographyStyle("Body-2_Mobile_EN", "SF Pro Text", "Regular", 14, 22, Language.EN, Platform.MOBILE, "e2b8d2fee8a61347ed94d8e11dff4a176e4b553d"),
    TypographyStyle("Caption-0_Mobile_EN", "SF Pro Text", "Medium", 12, 20, Language.EN, Platform.MOBILE, "a6765109001d3c6f2d82e2292a1e043aecc29589"),
    TypographyStyle("Caption-1_Mobile_EN", "SF Pro Text", "Regular", 12, 20, Language.EN, Platform.MOBILE, "f2d412a976bbf7e40bcc4615c47578d8bbc64dab"),
    TypographyStyle("Caption-2_Mobile_EN", "SF Pro Text", "Medium", 10, 16, Language.EN, Platform.MOBILE, "e1b82f6ba4048bc09932b646587bea04d47c7cc6"),
    TypographyStyle("Caption-3_Mobile_EN", "SF Pro Text", "Regular", 10, 16, Language.EN, Platform.MOBILE, "0b211cb702dec992c1df5dbaaf7297e0ae180f30"),
)
# fmt: on


def _build_index(
    rows: tuple[TypographyStyle, ...],
) -> dict[tuple[str, int, Language, Platform], TypographyStyle]:
    index: dict[tuple[str, int, Language, Platform], TypographyStyle] = {}
    for row in rows:
        index.setdefault(row.lookup_key, row)
    return index


TYPOGRAPHY_INDEX = _build_index(TYPOGRAPHY)


def find_style(
    font_style: str, font_size: float, language: Language, platform: Platform
) -> TypographyStyle | None:
    return TYPOGRAPHY_INDEX.get((font_style, font_size, language, platform))
