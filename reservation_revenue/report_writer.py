"""
レポート出力モジュール

明細・日別集計・キャスト別集計・サマリーをExcelブック1つにまとめ、明細はCSVでも出力します。
"""

import logging
from pathlib import Path
from typing import Optional

import pandas as pd

from common import CSVHandler, ExcelHandler
from .constants import DEFAULT_TIME_ZONE, MONEY_COLUMNS, ReportSheets
from .data_models import SettlementSummary


SUMMARY_LABELS = {
    'period': '対象期間',
    'reservation_count': '予約件数',
    'total_revenue': '売上合計',
    'store_revenue': '店舗売上',
    'staff_revenue': 'キャスト売上',
    'welfare_expense': '厚生費',
    'completed_count': '精算済み件数',
    'pending_count': '未精算件数',
}


class RevenueReportWriter:
    """売上配分レポート出力クラス"""

    def __init__(self, logger=None, excel_handler: Optional[ExcelHandler] = None,
                 csv_handler: Optional[CSVHandler] = None, time_zone: str = DEFAULT_TIME_ZONE):
        self.logger = logger or logging.getLogger(__name__)
        self.excel_handler = excel_handler or ExcelHandler(self.logger)
        self.csv_handler = csv_handler or CSVHandler(self.logger)
        self.time_zone = time_zone

    def _for_output(self, df: pd.DataFrame) -> pd.DataFrame:
        """Excelはタイムゾーン付き日時を書けないため、店舗タイムゾーンのISO形式文字列に変換"""
        if 'start_time' not in df.columns:
            return df
        output = df.copy()
        local_start = pd.to_datetime(output['start_time'], utc=True).dt.tz_convert(self.time_zone)
        output['start_time'] = local_start.map(lambda ts: ts.isoformat())
        return output

    @staticmethod
    def summary_frame(summary: SettlementSummary) -> pd.DataFrame:
        """サマリーを「項目 / 値」の2列表にする"""
        rows = [
            {'項目': SUMMARY_LABELS.get(key, key), '値': value}
            for key, value in summary.to_dict().items()
        ]
        return pd.DataFrame(rows, columns=['項目', '値'])

    def export_to_csv(self, df: pd.DataFrame, output_path: Path) -> Path:
        """明細をCSV（BOM付きUTF-8）で出力"""
        return self.csv_handler.write_csv(self._for_output(df), Path(output_path))

    def export_to_excel(self, output_path: Path, breakdown_df: pd.DataFrame, daily_df: pd.DataFrame,
                        cast_df: pd.DataFrame, summary: SettlementSummary) -> Path:
        """レポートブックを出力"""
        sheets = {
            ReportSheets.SUMMARY: self.summary_frame(summary),
            ReportSheets.DETAILS: self._for_output(breakdown_df),
            ReportSheets.DAILY: daily_df,
            ReportSheets.CAST: cast_df,
        }
        path = self.excel_handler.write_sheets(Path(output_path), sheets, money_columns=MONEY_COLUMNS)
        self.logger.info(f"売上レポート出力: {path.name} (明細{len(breakdown_df)}件)")
        return path
