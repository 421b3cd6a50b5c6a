"""
元件命名 — 將 Material Symbols 的 snake_case 圖層名轉成 Title Case 元件名

例：arrow_back → Arrow Back
"""

WORD_DELIMITER = "_"


def _capitalize_word(word: str) -> str:
    return word[:1].upper() + word[1:].lower()


def format_component_name(name: str) -> str:
    """依 `_` 切字，每個字首大寫其餘小寫，以單一空白串接。對任何字串都有定義."""
    return " ".join(_capitalize_word(w) for w in name.split(WORD_DELIMITER))
