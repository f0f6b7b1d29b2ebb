"""
統一CSVハンドラー
"""
import pandas as pd
from pathlib import Path
from typing import List, Optional
from ..utils.encoding_detector import EncodingDetector
from ..error_handling.exceptions import FileProcessingError, EncodingDetectionError


class CSVHandler:
    """CSVファイルの統一処理クラス"""

    def __init__(self, logger=None, error_handler=None):
        self.logger = logger
        self.error_handler = error_handler
        self.encoding_detector = EncodingDetector(logger)

    def read_csv_with_encoding_detection(self, file_path: Path, **kwargs) -> pd.DataFrame:
        """エンコーディング自動検出でCSVファイルを読み込み"""
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileProcessingError(f"CSVファイルが見つかりません: {file_path}")

        try:
            encoding = self.encoding_detector.detect_encoding(file_path)
        except EncodingDetectionError as e:
            raise FileProcessingError(f"CSVのエンコーディングを判定できません: {file_path.name} - {str(e)}")

        df = self._read_csv_with_encoding(file_path, encoding, **kwargs)
        if self.logger:
            self.logger.info(f"CSV読み込み成功: {file_path.name} ({encoding}, {len(df)}行)")
        return df

    def _read_csv_with_encoding(self, file_path: Path, encoding: str, **kwargs) -> pd.DataFrame:
        """指定されたエンコーディングでCSVを読み込み"""
        try:
            return pd.read_csv(file_path, encoding=encoding, **kwargs)
        except pd.errors.EmptyDataError:
            return pd.DataFrame()
        except (ValueError, pd.errors.ParserError, UnicodeDecodeError) as e:
            raise FileProcessingError(f"CSV読み込みエラー: {file_path.name} ({encoding}) - {str(e)}")

    def validate_csv_structure(self, df: pd.DataFrame,
                               required_column_names: Optional[List[str]] = None) -> List[str]:
        """必須列の不足を返す（不足なしなら空リスト）"""
        missing_columns = [col for col in (required_column_names or []) if col not in df.columns]
        if missing_columns and self.logger:
            self.logger.error(f"必須列が不足: {missing_columns}")
        return missing_columns

    def read_csv_safe(self, file_path: Path, **kwargs) -> Optional[pd.DataFrame]:
        """安全なCSV読み込み（エラー時はNoneを返す）"""
        try:
            return self.read_csv_with_encoding_detection(file_path, **kwargs)
        except FileProcessingError as e:
            if self.error_handler:
                self.error_handler.handle_file_processing_error(e, Path(file_path))
            elif self.logger:
                self.logger.error(f"CSV読み込みエラー: {Path(file_path).name} - {str(e)}")
            return None

    def write_csv(self, df: pd.DataFrame, file_path: Path) -> Path:
        """Excelで文字化けしないようBOM付きUTF-8で出力"""
        file_path = Path(file_path)
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            df.to_csv(file_path, index=False, encoding='utf-8-sig')
        except OSError as e:
            raise FileProcessingError(f"CSV書き込みエラー: {file_path.name} - {str(e)}")

        if self.logger:
            self.logger.info(f"CSV出力完了: {file_path}")
        return file_path
