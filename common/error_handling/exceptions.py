"""
統一例外クラス定義

売上計算そのものは例外を出さない。ファイル入出力・設定・データ検証の層でのみ使用する。
"""


class FileProcessingError(Exception):
    """予約ファイル・レポートファイルの読み書きエラー"""
    pass


class DataValidationError(Exception):
    """予約データの検証エラー（必須列の欠落、日時の解析失敗など）"""
    pass


class ConfigurationError(Exception):
    """設定ファイルの読み込み・検証エラー"""
    pass


class EncodingDetectionError(Exception):
    """CSVのエンコーディング判定エラー"""
    pass
