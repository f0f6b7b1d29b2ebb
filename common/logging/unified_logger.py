"""
統一ロギングシステム
"""
import logging
from pathlib import Path
from typing import Dict, Any, Optional


MONEY_KEYWORDS = ('revenue', 'expense', 'fee', 'amount', 'total', 'share', 'price', 'payout', '売上', '料')


class UnifiedLogger:
    """統一ロギングシステムクラス"""

    LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

    def __init__(self, name: str = __name__, level: str = "INFO", log_file: Optional[Path] = None):
        self.logger = self.setup_logger(name, level, log_file)

    def setup_logger(self, name: str, level: str = "INFO", log_file: Optional[Path] = None) -> logging.Logger:
        """ロガーをセットアップ"""
        logger = logging.getLogger(name)
        logger.setLevel(getattr(logging, level.upper(), logging.INFO))

        # 二重出力防止
        logger.handlers.clear()

        formatter = logging.Formatter(self.LOG_FORMAT, datefmt=self.DATE_FORMAT)

        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        if log_file:
            log_file = Path(log_file)
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

        return logger

    @staticmethod
    def format_yen(value: Any) -> str:
        """金額を ¥1,234 形式に整形"""
        try:
            return f"¥{float(value):,.0f}"
        except (TypeError, ValueError):
            return str(value)

    def log_file_operation(self, operation: str, file_path: Path, success: bool) -> None:
        """ファイル操作のログ出力"""
        status = "成功" if success else "失敗"
        message = f"ファイル操作 [{operation}] {status}: {Path(file_path).name}"

        if success:
            self.logger.info(message)
        else:
            self.logger.error(message)

    def log_processing_progress(self, current: int, total: int, item: str) -> None:
        """処理進捗のログ出力"""
        percentage = (current / total) * 100 if total > 0 else 0
        self.logger.info(f"処理進捗: {current}/{total} ({percentage:.1f}%) - {item}")

    def log_revenue_breakdown(self, reservation_id: str, breakdown: Dict[str, Any]) -> None:
        """予約1件分の売上内訳をデバッグ出力"""
        if not self.logger.isEnabledFor(logging.DEBUG):
            return
        parts = []
        for key, value in breakdown.items():
            if isinstance(value, (int, float)) and any(k in key.lower() for k in MONEY_KEYWORDS):
                parts.append(f"{key}={self.format_yen(value)}")
            else:
                parts.append(f"{key}={value}")
        self.logger.debug(f"売上内訳 [{reservation_id}]: " + ", ".join(parts))

    def log_processing_summary(self, processed_count: int, success_count: int, error_count: int,
                               duration_seconds: float) -> None:
        """処理結果サマリーのログ出力"""
        success_rate = (success_count / processed_count) * 100 if processed_count > 0 else 0

        self.logger.info("=" * 50)
        self.logger.info("処理結果サマリー")
        self.logger.info(f"処理対象数: {processed_count}")
        self.logger.info(f"成功数: {success_count}")
        self.logger.info(f"エラー数: {error_count}")
        self.logger.info(f"成功率: {success_rate:.1f}%")
        self.logger.info(f"処理時間: {duration_seconds:.2f}秒")
        self.logger.info("=" * 50)

    def log_configuration_info(self, config: Dict[str, Any]) -> None:
        """設定情報のログ出力"""
        self.logger.info("設定情報:")
        for key, value in config.items():
            # パスワードや秘密情報をマスク
            if any(secret in key.lower() for secret in ['password', 'secret', 'key', 'token']):
                value = '*' * len(str(value)) if value else 'None'
            self.logger.info(f"  {key}: {value}")

    def log_settlement_totals(self, label: str, totals: Dict[str, Any]) -> None:
        """精算集計結果のログ出力"""
        self.logger.info(f"[{label}] 集計結果:")
        for key, value in totals.items():
            if isinstance(value, (int, float)) and any(k in key.lower() for k in MONEY_KEYWORDS):
                self.logger.info(f"  {key}: {self.format_yen(value)}")
            else:
                self.logger.info(f"  {key}: {value}")

    def info(self, message: str) -> None:
        self.logger.info(message)

    def warning(self, message: str) -> None:
        self.logger.warning(message)

    def error(self, message: str) -> None:
        self.logger.error(message)

    def debug(self, message: str) -> None:
        self.logger.debug(message)
