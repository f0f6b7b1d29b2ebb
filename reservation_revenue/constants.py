"""
定数定義モジュール
"""

from typing import List

# 売上配分の既定値
DEFAULT_WELFARE_RATE = 10      # 厚生費率（コース料金に対する%）
DEFAULT_STORE_RATIO = 0.6      # 店舗取り分の既定比率（店舗60% / キャスト40%）
DEFAULT_TIME_ZONE = 'Asia/Tokyo'

MIN_WELFARE_RATE = 0
MAX_WELFARE_RATE = 100


class ReservationStatus:
    """予約ステータス"""
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'
    NO_SHOW = 'no_show'


class CsvColumns:
    """予約CSVの列名"""
    RESERVATION_ID = 'reservation_id'
    CAST_ID = 'cast_id'
    CAST_NAME = 'cast_name'
    STORE_ID = 'store_id'
    START_TIME = 'start_time'
    STATUS = 'status'
    CHECKED_OUT = 'checked_out'
    BASE_PRICE = 'base_price'
    OPTIONS = 'options'
    DESIGNATION_AMOUNT = 'designation_amount'
    DESIGNATION_STORE_SHARE = 'designation_store_share'
    DESIGNATION_CAST_SHARE = 'designation_cast_share'
    TRANSPORTATION_FEE = 'transportation_fee'
    ADDITIONAL_FEE = 'additional_fee'
    DISCOUNT_AMOUNT = 'discount_amount'
    WELFARE_RATE = 'welfare_rate'
    PRICE = 'price'
    STORE_REVENUE = 'store_revenue'
    STAFF_REVENUE = 'staff_revenue'
    WELFARE_EXPENSE = 'welfare_expense'

    REQUIRED: List[str] = [RESERVATION_ID, CAST_ID, START_TIME, BASE_PRICE]


# 計算結果の金額列（レポートの円書式対象）
MONEY_COLUMNS: List[str] = [
    'total',
    'welfare_expense',
    'course_store_share',
    'course_cast_share',
    'options_total',
    'option_store_share',
    'option_cast_share',
    'designation_amount',
    'designation_store_share',
    'designation_cast_share',
    'transportation_fee',
    'additional_fee',
    'discount_amount',
    'store_revenue',
    'staff_revenue',
    'total_revenue',
    'payout',
    'pending_payout',
]


class ReportSheets:
    """レポートのシート名"""
    DETAILS = '明細'
    DAILY = '日別集計'
    CAST = 'キャスト別集計'
    SUMMARY = 'サマリー'


REPORT_FILE_FORMAT = 'revenue_report_{period}.xlsx'
DETAIL_CSV_FORMAT = 'revenue_details_{period}.csv'
