"""
精算集計モジュール

予約ごとの売上配分を DataFrame にまとめ、月次サマリー・日別集計・キャスト別集計を作成します。
"""

import logging
from dataclasses import fields
from datetime import datetime
from typing import Iterable

import pandas as pd
from dateutil.relativedelta import relativedelta
from dateutil import tz

from .calculator import calculate_reservation_revenue, derive_recorded_revenue
from .constants import DEFAULT_STORE_RATIO, DEFAULT_TIME_ZONE, DEFAULT_WELFARE_RATE, ReservationStatus
from .data_models import ReservationRecord, ReservationRevenueResult, SettlementSummary


IDENTITY_COLUMNS = [
    'reservation_id', 'cast_id', 'cast_name', 'store_id', 'start_time', 'status', 'checked_out', 'revenue_source'
]
RESULT_COLUMNS = [f.name for f in fields(ReservationRevenueResult)]
BREAKDOWN_COLUMNS = IDENTITY_COLUMNS + RESULT_COLUMNS

TOTAL_COLUMNS = ['total_revenue', 'store_revenue', 'staff_revenue', 'welfare_expense']
DAILY_COLUMNS = ['date', 'reservation_count'] + TOTAL_COLUMNS
CAST_COLUMNS = ['cast_id', 'cast_name', 'reservation_count', 'completed_count'] + TOTAL_COLUMNS + [
    'payout', 'pending_payout'
]


def _recorded_breakdown(record: ReservationRecord, result: ReservationRevenueResult,
                        store_ratio: float) -> dict:
    """保存済みの配分を優先した内訳（計算結果の明細列はそのまま残す）"""
    total = record.price if record.price is not None else result.total
    split = derive_recorded_revenue(total, record.store_revenue, record.staff_revenue, store_ratio)
    breakdown = result.to_dict()
    breakdown.update({
        'total': total,
        'store_revenue': split.store,
        'staff_revenue': split.cast,
        'welfare_expense': record.welfare_expense if record.welfare_expense is not None else result.welfare_expense,
    })
    return breakdown


def calculate_breakdowns(records: Iterable[ReservationRecord], recompute: bool = True,
                         welfare_rate: float = DEFAULT_WELFARE_RATE,
                         store_ratio: float = DEFAULT_STORE_RATIO,
                         logger=None) -> pd.DataFrame:
    """予約ごとの売上配分を1行1予約の DataFrame にする

    recompute=False の場合、売上配分が保存済みの予約はその値を使う。
    """
    rows = []
    for record in records:
        result = calculate_reservation_revenue(
            record.revenue_input,
            default_welfare_rate=welfare_rate,
            default_store_ratio=store_ratio,
        )

        if not recompute and (record.has_recorded_revenue or record.price is not None):
            breakdown = _recorded_breakdown(record, result, store_ratio)
            source = 'recorded'
        else:
            breakdown = result.to_dict()
            source = 'calculated'

        if logger is not None and hasattr(logger, 'log_revenue_breakdown'):
            logger.log_revenue_breakdown(record.reservation_id, breakdown)

        rows.append({
            'reservation_id': record.reservation_id,
            'cast_id': record.cast_id,
            'cast_name': record.cast_name,
            'store_id': record.store_id,
            'start_time': record.start_time,
            'status': record.status,
            'checked_out': record.checked_out,
            'revenue_source': source,
            **breakdown,
        })

    if not rows:
        return pd.DataFrame(columns=BREAKDOWN_COLUMNS)

    df = pd.DataFrame(rows, columns=BREAKDOWN_COLUMNS)
    df['start_time'] = pd.to_datetime(df['start_time'], utc=True)
    return df.sort_values('start_time', kind='stable').reset_index(drop=True)


class SettlementAggregator:
    """精算集計クラス"""

    def __init__(self, logger=None, time_zone: str = DEFAULT_TIME_ZONE):
        self.logger = logger or logging.getLogger(__name__)
        self.time_zone = time_zone
        self.tzinfo = tz.gettz(time_zone)

    def _local_start(self, df: pd.DataFrame) -> pd.Series:
        return pd.to_datetime(df['start_time'], utc=True).dt.tz_convert(self.time_zone)

    def month_bounds(self, year: int, month: int):
        """対象月の開始（含む）と翌月開始（含まない）を店舗タイムゾーンで返す"""
        start = datetime(int(year), int(month), 1, tzinfo=self.tzinfo)
        return start, start + relativedelta(months=1)

    def filter_month(self, df: pd.DataFrame, year: int, month: int) -> pd.DataFrame:
        """開始日時（店舗タイムゾーン）が対象月に入る予約だけを残す"""
        if df.empty:
            return df.copy()

        start, end = self.month_bounds(year, month)
        utc_start = pd.to_datetime(df['start_time'], utc=True)
        mask = (utc_start >= pd.Timestamp(start).tz_convert('UTC')) & (utc_start < pd.Timestamp(end).tz_convert('UTC'))
        filtered = df.loc[mask].reset_index(drop=True)
        self.logger.info(f"{int(year)}年{int(month)}月の予約を抽出: {len(filtered)}/{len(df)}件")
        return filtered

    @staticmethod
    def _completed_mask(df: pd.DataFrame) -> pd.Series:
        return (df['status'] == ReservationStatus.COMPLETED) & df['checked_out'].astype(bool)

    def summarize(self, df: pd.DataFrame, period: str = '') -> SettlementSummary:
        """期間全体のサマリー"""
        if df.empty:
            return SettlementSummary(period=period)

        completed = int(self._completed_mask(df).sum())
        return SettlementSummary(
            period=period,
            reservation_count=len(df),
            total_revenue=int(df['total'].sum()),
            store_revenue=int(df['store_revenue'].sum()),
            staff_revenue=int(df['staff_revenue'].sum()),
            welfare_expense=int(df['welfare_expense'].sum()),
            completed_count=completed,
            pending_count=len(df) - completed,
        )

    def daily_summary(self, df: pd.DataFrame) -> pd.DataFrame:
        """店舗タイムゾーンの日付ごとの集計（新しい日付が先頭）"""
        if df.empty:
            return pd.DataFrame(columns=DAILY_COLUMNS)

        work = df.assign(date=self._local_start(df).dt.strftime('%Y-%m-%d'))
        daily = work.groupby('date', as_index=False).agg(
            reservation_count=('reservation_id', 'count'),
            total_revenue=('total', 'sum'),
            store_revenue=('store_revenue', 'sum'),
            staff_revenue=('staff_revenue', 'sum'),
            welfare_expense=('welfare_expense', 'sum'),
        )
        return daily.sort_values('date', ascending=False).reset_index(drop=True)[DAILY_COLUMNS]

    def cast_summary(self, df: pd.DataFrame) -> pd.DataFrame:
        """キャスト別の集計。payout は完了済み予約のキャスト売上、pending_payout はそれ以外"""
        if df.empty:
            return pd.DataFrame(columns=CAST_COLUMNS)

        completed = self._completed_mask(df)
        work = df.assign(
            completed=completed.astype(int),
            payout=df['staff_revenue'].where(completed, 0),
            pending_payout=df['staff_revenue'].where(~completed, 0),
            cast_name=df['cast_name'].fillna(''),
        )
        cast = work.groupby('cast_id', as_index=False, sort=True).agg(
            cast_name=('cast_name', 'first'),
            reservation_count=('reservation_id', 'count'),
            completed_count=('completed', 'sum'),
            total_revenue=('total', 'sum'),
            store_revenue=('store_revenue', 'sum'),
            staff_revenue=('staff_revenue', 'sum'),
            welfare_expense=('welfare_expense', 'sum'),
            payout=('payout', 'sum'),
            pending_payout=('pending_payout', 'sum'),
        )
        return cast[CAST_COLUMNS]

    def log_summary(self, summary: SettlementSummary) -> None:
        if hasattr(self.logger, 'log_settlement_totals'):
            self.logger.log_settlement_totals(summary.period or '全期間', summary.to_dict())
        else:
            self.logger.info(f"精算サマリー: {summary.to_dict()}")
