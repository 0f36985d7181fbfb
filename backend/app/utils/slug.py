"""slug 生成"""
import re
import unicodedata

_NON_WORD = re.compile(r"[^\w\s-]", re.UNICODE)
_SEPARATORS = re.compile(r"[-\s_]+", re.UNICODE)


def slugify(text: str, fallback: str = "item") -> str:
    """
    生成 URL 友好的 slug，保留中文等非拉丁字符

    >>> slugify("  Tênis de Corrida  ")
    'tenis-de-corrida'
    """
    value = unicodedata.normalize("NFKD", text or "")
    # 去掉组合重音符号，保留基础字符
    value = "".join(c for c in value if not unicodedata.combining(c))
    value = _NON_WORD.sub("", value).strip().lower()
    value = _SEPARATORS.sub("-", value).strip("-")
    return value or fallback
