"""
予約売上の配分計算

予約作成・更新時のAPIと、確定前の料金プレビューの両方から呼ばれる。
入出力を持たない純粋関数で、同じ入力には常に同じ結果を返す。
"""
import math
from typing import Any, Mapping, Optional, Union

from .constants import DEFAULT_STORE_RATIO, DEFAULT_WELFARE_RATE
from .data_models import ReservationRevenueInput, ReservationRevenueResult, ShareSplit
from .normalizer import normalize_amount, normalize_rate, round_yen
from .share_resolver import resolve_share


def calculate_reservation_revenue(
    revenue_input: Union[ReservationRevenueInput, Mapping[str, Any]],
    *,
    default_welfare_rate: float = DEFAULT_WELFARE_RATE,
    default_store_ratio: float = DEFAULT_STORE_RATIO,
) -> ReservationRevenueResult:
    """予約1件の料金を店舗売上・キャスト売上・厚生費に配分する

    Args:
        revenue_input: 料金構成。辞書の場合は camelCase / snake_case のキーを受け付ける
        default_welfare_rate: 厚生費率が未指定のときに使う率（%）
        default_store_ratio: 取り分が未指定の項目での店舗側比率

    Returns:
        ReservationRevenueResult: すべて0以上の整数円の内訳

    不正な数値は例外にせず 0 として扱う。store_revenue は厚生費を下回らないよう
    下限を設けているため、大きな割引がある場合 store_revenue + staff_revenue が
    total を超えることがある。
    """
    if not isinstance(revenue_input, ReservationRevenueInput):
        revenue_input = ReservationRevenueInput.from_dict(revenue_input)

    base_price = normalize_amount(revenue_input.base_price)
    welfare_rate = normalize_rate(revenue_input.welfare_rate, default_welfare_rate)
    welfare_expense = max(round_yen(base_price * (welfare_rate / 100)), 0)

    # コースは厚生費分を店舗、残りをキャストに配分
    course = resolve_share(base_price, welfare_expense, base_price - welfare_expense,
                           store_ratio=default_store_ratio)

    options_total = 0
    option_store_share = 0
    option_cast_share = 0
    for option in revenue_input.options or []:
        price = normalize_amount(option.price)
        options_total += price
        split = resolve_share(price, option.store_share, option.cast_share,
                              store_ratio=default_store_ratio)
        option_store_share += split.store
        option_cast_share += split.cast

    designation = revenue_input.designation
    if designation is not None:
        designation_amount = normalize_amount(designation.amount)
        designation_split = resolve_share(designation_amount, designation.store_share,
                                          designation.cast_share, store_ratio=default_store_ratio)
    else:
        designation_amount = 0
        designation_split = ShareSplit(store=0, cast=0)

    transportation_fee = normalize_amount(revenue_input.transportation_fee)
    additional_fee = normalize_amount(revenue_input.additional_fee)
    discount_amount = normalize_amount(revenue_input.discount_amount)

    total = (
        base_price
        + options_total
        + designation_amount
        + transportation_fee
        + additional_fee
        - discount_amount
    )

    # 交通費・追加料金・割引はすべて店舗側で精算する
    store_revenue = max(
        course.store
        + option_store_share
        + designation_split.store
        + transportation_fee
        + additional_fee
        - discount_amount,
        welfare_expense,
    )
    staff_revenue = max(course.cast + option_cast_share + designation_split.cast, 0)

    return ReservationRevenueResult(
        total=max(total, 0),
        welfare_expense=welfare_expense,
        welfare_rate=welfare_rate,
        course_store_share=course.store,
        course_cast_share=course.cast,
        options_total=options_total,
        option_store_share=option_store_share,
        option_cast_share=option_cast_share,
        designation_amount=designation_amount,
        designation_store_share=designation_split.store,
        designation_cast_share=designation_split.cast,
        transportation_fee=transportation_fee,
        additional_fee=additional_fee,
        discount_amount=discount_amount,
        store_revenue=store_revenue,
        staff_revenue=staff_revenue,
    )


def derive_recorded_revenue(total_payment: Any, store_revenue: Optional[Any] = None,
                            staff_revenue: Optional[Any] = None,
                            store_ratio: float = DEFAULT_STORE_RATIO) -> ShareSplit:
    """配分が保存されていない過去の予約について、支払総額から売上配分を補完する

    店舗売上は保存値、なければ総額 * store_ratio の切り捨て。
    キャスト売上は保存値、なければ総額から店舗売上を引いた残り。
    """
    total = normalize_amount(total_payment)

    if store_revenue is not None:
        store = normalize_amount(store_revenue)
    else:
        store = int(math.floor(total * store_ratio))

    if staff_revenue is not None:
        staff = normalize_amount(staff_revenue)
    else:
        staff = max(total - store, 0)

    return ShareSplit(store=store, cast=staff)
