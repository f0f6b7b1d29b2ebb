"""
予約データ読み込みモジュール

管理画面からエクスポートした予約CSV / JSONを ReservationRecord のリストに変換します。
不正な行はログに記録してスキップし、残りの行の読み込みを継続します。
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from dateutil import parser as date_parser
from dateutil import tz

from common import CSVHandler, ConfigManager, DataValidationError, ErrorHandler, FileProcessingError
from .constants import CsvColumns, DEFAULT_TIME_ZONE, ReservationStatus
from .data_models import ReservationRecord, ReservationRevenueInput, pick_value
from .normalizer import normalize_share


TRUE_VALUES = {'1', 'true', 'yes', 'y', '済', '○'}


class ReservationLoader:
    """予約データ読み込みクラス"""

    def __init__(self, logger=None, error_handler: Optional[ErrorHandler] = None,
                 config: Optional[ConfigManager] = None):
        self.logger = logger or logging.getLogger(__name__)
        self.error_handler = error_handler or ErrorHandler(self.logger)
        self.csv_handler = CSVHandler(self.logger, self.error_handler)

        time_zone = config.get('time_zone', DEFAULT_TIME_ZONE) if config else DEFAULT_TIME_ZONE
        self.time_zone = tz.gettz(time_zone)
        if self.time_zone is None:
            raise DataValidationError(f"不明なタイムゾーンです: {time_zone}")

        self.skipped_rows = 0

    def load(self, file_path: Path) -> List[ReservationRecord]:
        """拡張子に応じてCSV / JSONを読み込む"""
        file_path = Path(file_path)
        suffix = file_path.suffix.lower()
        if suffix == '.csv':
            return self.load_csv(file_path)
        if suffix == '.json':
            return self.load_json(file_path)
        raise FileProcessingError(f"未対応のファイル形式です: {file_path.name}")

    def load_csv(self, file_path: Path) -> List[ReservationRecord]:
        """予約CSVを読み込み"""
        file_path = Path(file_path)
        df = self.csv_handler.read_csv_with_encoding_detection(file_path, dtype=str)

        if df.empty and len(df.columns) == 0:
            self.logger.warning(f"予約CSVが空です: {file_path.name}")
            return []

        missing = self.csv_handler.validate_csv_structure(df, CsvColumns.REQUIRED)
        if missing:
            raise DataValidationError(f"予約CSVに必須列がありません: {missing} ({file_path.name})")

        records = []
        self.skipped_rows = 0
        for index, row in enumerate(df.to_dict(orient='records')):
            # ヘッダーが1行目なのでデータは2行目から
            context = f"{file_path.name} {index + 2}行目"
            try:
                records.append(self._build_record(self._csv_row_to_dict(row)))
            except DataValidationError as e:
                self.skipped_rows += 1
                self.error_handler.handle_data_validation_error(e, context)

        self.logger.info(f"予約読み込み完了: {file_path.name} ({len(records)}件, スキップ{self.skipped_rows}件)")
        return records

    def load_json(self, file_path: Path) -> List[ReservationRecord]:
        """予約JSON（オブジェクトの配列）を読み込み"""
        file_path = Path(file_path)
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                payload = json.load(f)
        except FileNotFoundError:
            raise FileProcessingError(f"予約ファイルが見つかりません: {file_path}")
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise FileProcessingError(f"予約JSONの形式が無効です: {file_path.name} - {str(e)}")

        if isinstance(payload, dict):
            payload = payload.get('reservations', [])
        if not isinstance(payload, list):
            raise DataValidationError(f"予約JSONは配列である必要があります: {file_path.name}")

        records = []
        self.skipped_rows = 0
        for index, item in enumerate(payload):
            context = f"{file_path.name} [{index}]"
            try:
                if not isinstance(item, Mapping):
                    raise DataValidationError(f"予約データがオブジェクトではありません: {item!r}")
                records.append(self._build_record(item))
            except DataValidationError as e:
                self.skipped_rows += 1
                self.error_handler.handle_data_validation_error(e, context)

        self.logger.info(f"予約読み込み完了: {file_path.name} ({len(records)}件, スキップ{self.skipped_rows}件)")
        return records

    def _csv_row_to_dict(self, row: Dict[str, Any]) -> Dict[str, Any]:
        """CSVの1行を予約の辞書表現へ"""
        data = {key: value for key, value in row.items() if not self._is_blank(value)}

        options_text = data.pop(CsvColumns.OPTIONS, None)
        if options_text:
            try:
                options = json.loads(options_text)
            except json.JSONDecodeError as e:
                raise DataValidationError(f"options列のJSONが不正です: {str(e)}")
            if not isinstance(options, list):
                raise DataValidationError("options列はJSON配列で指定してください")
            data['options'] = options

        amount = data.pop(CsvColumns.DESIGNATION_AMOUNT, None)
        store_share = data.pop(CsvColumns.DESIGNATION_STORE_SHARE, None)
        cast_share = data.pop(CsvColumns.DESIGNATION_CAST_SHARE, None)
        if amount is not None:
            data['designation'] = {'amount': amount, 'store_share': store_share, 'cast_share': cast_share}

        return data

    def _build_record(self, data: Mapping[str, Any]) -> ReservationRecord:
        """辞書から ReservationRecord を生成"""
        reservation_id = pick_value(data, 'reservation_id', 'reservationId', 'id')
        cast_id = pick_value(data, 'cast_id', 'castId')
        if self._is_blank(reservation_id):
            raise DataValidationError("予約IDがありません")
        if self._is_blank(cast_id):
            raise DataValidationError(f"キャストIDがありません: {reservation_id}")

        options = pick_value(data, 'options', default=[])
        if not isinstance(options, list) or not all(isinstance(o, Mapping) for o in options):
            raise DataValidationError(f"optionsの形式が不正です: {reservation_id}")

        designation = pick_value(data, 'designation')
        if designation is not None and not isinstance(designation, Mapping):
            raise DataValidationError(f"designationの形式が不正です: {reservation_id}")

        return ReservationRecord(
            reservation_id=str(reservation_id),
            cast_id=str(cast_id),
            start_time=self._parse_start_time(pick_value(data, 'start_time', 'startTime'), reservation_id),
            revenue_input=ReservationRevenueInput.from_dict(data),
            cast_name=str(pick_value(data, 'cast_name', 'castName', default='')),
            store_id=str(pick_value(data, 'store_id', 'storeId', default='')),
            status=str(pick_value(data, 'status', default=ReservationStatus.PENDING)).strip().lower(),
            checked_out=self._parse_checked_out(data),
            price=normalize_share(pick_value(data, 'price')),
            store_revenue=normalize_share(pick_value(data, 'store_revenue', 'storeRevenue')),
            staff_revenue=normalize_share(pick_value(data, 'staff_revenue', 'staffRevenue')),
            welfare_expense=normalize_share(pick_value(data, 'welfare_expense', 'welfareExpense')),
        )

    def _parse_start_time(self, value: Any, reservation_id: Any) -> datetime:
        """開始日時を解析（タイムゾーンなしは店舗のタイムゾーンとみなす）"""
        if isinstance(value, datetime):
            parsed = value
        else:
            if self._is_blank(value):
                raise DataValidationError(f"開始日時がありません: {reservation_id}")
            try:
                parsed = date_parser.parse(str(value))
            except (ValueError, OverflowError) as e:
                raise DataValidationError(f"開始日時を解析できません: {reservation_id} ({value}) - {str(e)}")

        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=self.time_zone)
        return parsed

    def _parse_checked_out(self, data: Mapping[str, Any]) -> bool:
        """退勤（チェックアウト）済みか。フラグ列がなければ退勤時刻の有無で判定"""
        flag = pick_value(data, 'checked_out', 'checkedOut')
        if flag is not None:
            if isinstance(flag, bool):
                return flag
            return str(flag).strip().lower() in TRUE_VALUES
        return not self._is_blank(pick_value(data, 'cast_checked_out_at', 'castCheckedOutAt'))

    @staticmethod
    def _is_blank(value: Any) -> bool:
        if value is None:
            return True
        if isinstance(value, float) and value != value:
            return True
        return isinstance(value, str) and not value.strip()
