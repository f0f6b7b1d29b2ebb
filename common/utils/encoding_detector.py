"""
エンコーディング検出ユーティリティ

予約管理画面からのCSVエクスポートはUTF-8（BOM付きを含む）とShift_JIS系が混在する。
"""
import chardet
from pathlib import Path
from typing import List, Optional
from ..error_handling.exceptions import EncodingDetectionError


class EncodingDetector:
    """CSVファイルのエンコーディングを判定するクラス"""

    CANDIDATE_ENCODINGS = ['utf-8-sig', 'cp932', 'euc-jp']
    SAMPLE_SIZE = 64 * 1024

    # chardetの判定名 → 読み込みに使う上位互換エンコーディング
    ENCODING_ALIASES = {
        'ascii': 'utf-8-sig',
        'utf-8': 'utf-8-sig',
        'utf-8-sig': 'utf-8-sig',
        'shift_jis': 'cp932',
        'cp932': 'cp932',
        'euc-jp': 'euc-jp',
    }

    def __init__(self, logger=None):
        self.logger = logger

    def detect_encoding(self, file_path: Path) -> str:
        """先頭サンプルからエンコーディングを判定し、全体が読めることを確認して返す"""
        file_path = Path(file_path)
        try:
            with open(file_path, 'rb') as f:
                sample = f.read(self.SAMPLE_SIZE)
        except OSError as e:
            raise EncodingDetectionError(f"エンコーディング検出に失敗: {file_path} - {str(e)}")

        result = chardet.detect(sample)
        detected = (result.get('encoding') or '').lower()
        encoding = self.ENCODING_ALIASES.get(detected)

        # 日本語系以外の判定結果（短いShift_JISがwindows-1252になる等）は信用しない
        if encoding and self.validate_encoding(file_path, encoding):
            if self.logger:
                self.logger.info(
                    f"エンコーディング検出: {file_path.name} -> {encoding} "
                    f"(信頼度: {result.get('confidence') or 0.0:.2f})"
                )
            return encoding

        if self.logger:
            self.logger.debug(f"判定結果を採用せず候補を試行: {file_path.name} ({detected or '不明'})")
        return self.try_encodings(file_path)

    def try_encodings(self, file_path: Path, encodings: Optional[List[str]] = None) -> str:
        """候補エンコーディングで順に全体を読み、最初に成功したものを返す"""
        for encoding in encodings or self.CANDIDATE_ENCODINGS:
            if self.validate_encoding(file_path, encoding):
                if self.logger:
                    self.logger.info(f"エンコーディング試行成功: {Path(file_path).name} -> {encoding}")
                return encoding

        raise EncodingDetectionError(f"すべてのエンコーディングで読み込みに失敗: {Path(file_path).name}")

    def validate_encoding(self, file_path: Path, encoding: str) -> bool:
        """指定されたエンコーディングでファイルが読み込み可能かチェック"""
        try:
            with open(file_path, 'r', encoding=encoding) as f:
                f.read()
            return True
        except (UnicodeDecodeError, UnicodeError, LookupError):
            return False
