"""
取り分の解決

コース・各オプション・指名料に共通するルール。どの経路でも store + cast == price を保つ。
"""
from typing import Any

from .constants import DEFAULT_STORE_RATIO
from .data_models import ShareSplit
from .normalizer import clamp, normalize_amount, normalize_share, round_yen


def resolve_share(price: Any, store_share: Any = None, cast_share: Any = None,
                  store_ratio: float = DEFAULT_STORE_RATIO) -> ShareSplit:
    """料金を店舗取り分とキャスト取り分に分ける

    - どちらも未指定: 店舗が price * store_ratio（四捨五入）、キャストが残り
    - 片方のみ指定: 指定側を [0, price] に収め、もう片方は残り
    - 両方指定: それぞれ [0, price] に収め、合計が合わなければ店舗側を正としてキャストを再計算
    """
    safe_price = normalize_amount(price)
    store = normalize_share(store_share)
    cast = normalize_share(cast_share)

    if store is None and cast is None:
        store = clamp(round_yen(safe_price * store_ratio), 0, safe_price)
        cast = safe_price - store
    elif store is None:
        cast = clamp(cast, 0, safe_price)
        store = safe_price - cast
    elif cast is None:
        store = clamp(store, 0, safe_price)
        cast = safe_price - store
    else:
        store = clamp(store, 0, safe_price)
        cast = clamp(cast, 0, safe_price)
        if store + cast != safe_price:
            cast = safe_price - store

    return ShareSplit(store=int(store), cast=int(cast))
