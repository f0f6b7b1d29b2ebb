"""
統一エラーハンドリングシステム
"""
import logging
import traceback
from pathlib import Path
from typing import Dict, Any, List, Optional


class ErrorHandler:
    """エラーハンドリングの統一クラス

    処理を継続できるエラー（不正な予約行など）は記録して継続し、
    継続できないエラー（ファイル読み込み失敗、設定不備）はログ出力後に再送出する。
    """

    def __init__(self, logger=None):
        self.logger = logger or logging.getLogger(__name__)
        self.errors: List[Exception] = []

    def handle_file_processing_error(self, error: Exception, file_path: Optional[Path]) -> None:
        """ファイル処理エラーを記録"""
        error_context = {
            'error_type': type(error).__name__,
            'file_name': file_path.name if file_path else 'Unknown',
            'error_message': str(error)
        }
        self.errors.append(error)
        self.log_error_with_context(error, error_context)

    def handle_data_validation_error(self, error: Exception, data_context: str) -> None:
        """予約データ検証エラーを記録（処理は継続）"""
        error_context = {
            'error_type': type(error).__name__,
            'data_context': data_context,
            'error_message': str(error)
        }
        self.errors.append(error)
        self.log_error_with_context(error, error_context)

    def log_and_continue(self, error: Exception, context: str) -> None:
        """エラーをログ出力して処理を継続"""
        self.errors.append(error)
        self.logger.error(f"処理継続エラー [{context}]: {str(error)}")
        self.logger.debug(f"エラー詳細: {traceback.format_exc()}")

    def log_and_raise(self, error: Exception, context: str) -> None:
        """エラーをログ出力して例外を再発生"""
        self.errors.append(error)
        self.logger.error(f"致命的エラー [{context}]: {str(error)}")
        self.logger.debug(f"エラー詳細: {traceback.format_exc()}")
        raise error

    def log_error_with_context(self, error: Exception, context: Dict[str, Any]) -> None:
        """コンテキスト情報付きでエラーをログ出力"""
        context_str = ", ".join([f"{k}={v}" for k, v in context.items()])
        self.logger.error(f"エラー詳細: {context_str}")
        self.logger.debug(f"スタックトレース: {traceback.format_exc()}")

    def create_error_summary(self, errors: Optional[list] = None) -> Dict[str, Any]:
        """エラーリストから統計情報を作成"""
        if errors is None:
            errors = self.errors

        if not errors:
            return {'total_errors': 0, 'error_types': {}}

        error_types = {}
        for error in errors:
            error_type = type(error).__name__
            error_types[error_type] = error_types.get(error_type, 0) + 1

        return {
            'total_errors': len(errors),
            'error_types': error_types,
            'first_error': str(errors[0]),
            'last_error': str(errors[-1])
        }
