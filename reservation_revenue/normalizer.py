"""
入力値の正規化

フォーム入力途中の下書き予約でも計算できるよう、数値として解釈できない値は
例外にせず 0（金額）または既定値（厚生費率）に倒す。
"""
import math
from typing import Any, Optional

from .constants import MIN_WELFARE_RATE, MAX_WELFARE_RATE


def to_number(value: Any) -> Optional[float]:
    """有限の数値として解釈できれば float を、できなければ None を返す"""
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        # int・Decimal・numpy のスカラー等。float に収まらない巨大な int や
        # signaling NaN の Decimal も解釈不能として扱う
        try:
            number = float(value)
        except (OverflowError, TypeError, ValueError):
            return None

    if not math.isfinite(number):
        return None
    return number


def clamp(value: float, minimum: float, maximum: float) -> float:
    if value < minimum:
        return minimum
    if value > maximum:
        return maximum
    return value


def round_yen(value: float) -> int:
    """円単位に四捨五入（0.5は切り上げ）"""
    return int(math.floor(value + 0.5))


def normalize_amount(value: Any) -> int:
    """金額を0以上の整数円に正規化"""
    number = to_number(value)
    if number is None:
        return 0
    return max(round_yen(number), 0)


def normalize_share(value: Any) -> Optional[int]:
    """取り分を正規化（未指定・解釈不能は None のまま残す）"""
    number = to_number(value)
    if number is None:
        return None
    return max(round_yen(number), 0)


def normalize_rate(value: Any, default: float) -> float:
    """厚生費率を 0〜100 に収める（未指定・解釈不能は既定値）"""
    number = to_number(value)
    if number is None:
        number = float(default)
    return clamp(number, MIN_WELFARE_RATE, MAX_WELFARE_RATE)
