# tamagochi/utils/text_utils.py
import re
import unicodedata

DEFAULT_HANDLE = "pixel-tamagochi"


def slugify_name(value: str) -> str:
    """
    이름을 커뮤니티 핸들로 변환합니다. (예: 'Render Róka' -> 'render-roka')
    악센트를 제거하고 영숫자가 아닌 문자는 '-' 하나로 합칩니다.
    """
    normalised = unicodedata.normalize('NFD', value.strip().lower())
    without_marks = ''.join(ch for ch in normalised if not unicodedata.combining(ch))
    slug = re.sub(r'[^a-z0-9]+', '-', without_marks).strip('-')
    return slug or DEFAULT_HANDLE


def initials_from_name(name: str) -> str:
    """한 단어면 앞 두 글자, 여러 단어면 첫 단어와 마지막 단어의 첫 글자."""
    words = name.split()
    if not words:
        return "TG"
    if len(words) == 1:
        return words[0][:2].upper()
    return f"{words[0][0]}{words[-1][0]}".upper()
