"""
予約売上配分パッケージ

予約1件の料金を店舗売上・キャスト売上・厚生費に配分し、精算レポートを作成します。
"""

from .calculator import calculate_reservation_revenue, derive_recorded_revenue
from .constants import DEFAULT_STORE_RATIO, DEFAULT_WELFARE_RATE
from .data_models import (
    DesignationShare,
    OptionShare,
    ReservationRecord,
    ReservationRevenueInput,
    ReservationRevenueResult,
    SettlementSummary,
    ShareSplit
)
from .normalizer import normalize_amount, normalize_rate, normalize_share, round_yen, to_number
from .share_resolver import resolve_share

__all__ = [
    'calculate_reservation_revenue',
    'derive_recorded_revenue',
    'resolve_share',
    'normalize_amount',
    'normalize_rate',
    'normalize_share',
    'round_yen',
    'to_number',
    'DEFAULT_STORE_RATIO',
    'DEFAULT_WELFARE_RATE',
    'DesignationShare',
    'OptionShare',
    'ReservationRecord',
    'ReservationRevenueInput',
    'ReservationRevenueResult',
    'SettlementSummary',
    'ShareSplit'
]
