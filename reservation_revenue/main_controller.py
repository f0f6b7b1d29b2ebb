"""
メインコントローラーモジュール

設定読み込み → 予約読み込み → 売上配分計算 → 精算集計 → レポート出力 の流れを管理します。
"""

import time
from pathlib import Path
from typing import Optional

from common import ConfigManager, ErrorHandler, UnifiedLogger
from .constants import DETAIL_CSV_FORMAT, REPORT_FILE_FORMAT
from .data_models import SettlementSummary
from .report_writer import RevenueReportWriter
from .reservation_loader import ReservationLoader
from .settlement import SettlementAggregator, calculate_breakdowns


class RevenueReportController:
    """売上配分レポート生成のメインコントローラー"""

    def __init__(self, config_path: Optional[Path] = None, log_level: Optional[str] = None):
        bootstrap = UnifiedLogger('reservation_revenue', log_level or 'INFO')
        self.config = ConfigManager(config_path, bootstrap.logger)

        logging_settings = self.config.get_logging_settings()
        self.system_logger = UnifiedLogger(
            'reservation_revenue',
            log_level or logging_settings['log_level'],
            logging_settings['log_file'],
        )
        self.logger = self.system_logger.logger
        self.error_handler = ErrorHandler(self.logger)

        self.revenue_settings = self.config.get_revenue_settings()
        self.loader = ReservationLoader(self.logger, self.error_handler, self.config)
        self.aggregator = SettlementAggregator(self.system_logger, self.revenue_settings['time_zone'])
        self.writer = RevenueReportWriter(self.logger, time_zone=self.revenue_settings['time_zone'])

        self.output_files = []

    def run(self, input_path: Path, output_dir: Optional[Path] = None, year: Optional[int] = None,
            month: Optional[int] = None, recompute: bool = True) -> SettlementSummary:
        """レポート生成を実行してサマリーを返す"""
        started = time.time()
        input_path = Path(input_path)
        output_dir = Path(output_dir) if output_dir else self.config.get_processing_settings()['output_dir']

        self.system_logger.log_configuration_info({
            'input': input_path,
            'output_dir': output_dir,
            'recompute': recompute,
            **self.revenue_settings,
        })

        try:
            records = self.loader.load(input_path)
            breakdown_df = calculate_breakdowns(
                records,
                recompute=recompute,
                welfare_rate=self.revenue_settings['welfare_rate'],
                store_ratio=self.revenue_settings['store_ratio'],
                logger=self.system_logger,
            )

            period = 'all'
            if year and month:
                breakdown_df = self.aggregator.filter_month(breakdown_df, year, month)
                period = f"{int(year):04d}-{int(month):02d}"

            summary = self.aggregator.summarize(breakdown_df, period)
            daily_df = self.aggregator.daily_summary(breakdown_df)
            cast_df = self.aggregator.cast_summary(breakdown_df)
            self.aggregator.log_summary(summary)

            self.output_files = [
                self.writer.export_to_excel(
                    output_dir / REPORT_FILE_FORMAT.format(period=period),
                    breakdown_df, daily_df, cast_df, summary,
                ),
                self.writer.export_to_csv(breakdown_df, output_dir / DETAIL_CSV_FORMAT.format(period=period)),
            ]
            for output_file in self.output_files:
                self.system_logger.log_file_operation('出力', output_file, output_file.exists())
        except Exception as e:
            self.error_handler.log_and_raise(e, f"売上レポート生成 ({input_path.name})")

        skipped = self.loader.skipped_rows
        self.system_logger.log_processing_summary(
            processed_count=len(records) + skipped,
            success_count=len(records),
            error_count=skipped,
            duration_seconds=time.time() - started,
        )
        return summary
