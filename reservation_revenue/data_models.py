"""
データモデル定義

予約1件分の料金構成（入力）と、店舗・キャストへの配分結果（出力）を定義します。
入力側の数値は文字列や欠損を含み得るため Any で受け、正規化は計算側で行います。
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional


def pick_value(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """camelCase / snake_case のどちらのキーでも値を取り出す"""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


@dataclass(frozen=True)
class OptionShare:
    """オプション1件の料金と取り分"""
    price: Any
    store_share: Any = None
    cast_share: Any = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'OptionShare':
        return cls(
            price=pick_value(data, 'price', 'optionPrice', 'option_price', default=0),
            store_share=pick_value(data, 'storeShare', 'store_share'),
            cast_share=pick_value(data, 'castShare', 'cast_share'),
        )


@dataclass(frozen=True)
class DesignationShare:
    """指名料の金額と取り分"""
    amount: Any
    store_share: Any = None
    cast_share: Any = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'DesignationShare':
        return cls(
            amount=pick_value(data, 'amount', default=0),
            store_share=pick_value(data, 'storeShare', 'store_share'),
            cast_share=pick_value(data, 'castShare', 'cast_share'),
        )


@dataclass(frozen=True)
class ReservationRevenueInput:
    """売上計算の入力"""
    base_price: Any = 0
    options: List[OptionShare] = field(default_factory=list)
    designation: Optional[DesignationShare] = None
    transportation_fee: Any = 0
    additional_fee: Any = 0
    discount_amount: Any = 0
    welfare_rate: Any = None

    def __post_init__(self):
        # オプション・指名料は辞書のままでも受け付ける
        options = [
            option if isinstance(option, OptionShare) else OptionShare.from_dict(option)
            for option in self.options or []
        ]
        object.__setattr__(self, 'options', options)

        if isinstance(self.designation, Mapping):
            object.__setattr__(self, 'designation', DesignationShare.from_dict(self.designation))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'ReservationRevenueInput':
        """APIペイロードやJSONの辞書から生成"""
        return cls(
            base_price=pick_value(data, 'basePrice', 'base_price', default=0),
            options=pick_value(data, 'options', default=[]),
            designation=pick_value(data, 'designation'),
            transportation_fee=pick_value(data, 'transportationFee', 'transportation_fee', default=0),
            additional_fee=pick_value(data, 'additionalFee', 'additional_fee', default=0),
            discount_amount=pick_value(data, 'discountAmount', 'discount_amount', default=0),
            welfare_rate=pick_value(data, 'welfareRate', 'welfare_rate'),
        )


@dataclass(frozen=True)
class ShareSplit:
    """1つの料金項目の店舗取り分とキャスト取り分"""
    store: int
    cast: int


@dataclass(frozen=True)
class ReservationRevenueResult:
    """売上計算の結果（金額はすべて0以上の整数円）"""
    total: int
    welfare_expense: int
    welfare_rate: float
    course_store_share: int
    course_cast_share: int
    options_total: int
    option_store_share: int
    option_cast_share: int
    designation_amount: int
    designation_store_share: int
    designation_cast_share: int
    transportation_fee: int
    additional_fee: int
    discount_amount: int
    store_revenue: int
    staff_revenue: int

    def to_dict(self) -> Dict[str, Any]:
        """辞書形式で出力"""
        return asdict(self)

    def to_camel_dict(self) -> Dict[str, Any]:
        """予約レコードへ保存する際のキー名（storeRevenue 等）で出力"""
        result = {}
        for key, value in asdict(self).items():
            head, *rest = key.split('_')
            result[head + ''.join(part.capitalize() for part in rest)] = value
        return result


@dataclass
class ReservationRecord:
    """精算集計対象の予約1件"""
    reservation_id: str
    cast_id: str
    start_time: datetime
    revenue_input: ReservationRevenueInput
    cast_name: str = ''
    store_id: str = ''
    status: str = 'pending'
    checked_out: bool = False
    price: Optional[int] = None
    store_revenue: Optional[int] = None
    staff_revenue: Optional[int] = None
    welfare_expense: Optional[int] = None

    @property
    def has_recorded_revenue(self) -> bool:
        """保存済みの売上配分を持っているか"""
        return self.store_revenue is not None or self.staff_revenue is not None


@dataclass
class SettlementSummary:
    """精算集計のサマリー"""
    period: str = ''
    reservation_count: int = 0
    total_revenue: int = 0
    store_revenue: int = 0
    staff_revenue: int = 0
    welfare_expense: int = 0
    completed_count: int = 0
    pending_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """辞書形式で出力"""
        return asdict(self)
