"""
共通コンポーネントのテスト
"""
import json
import os
import shutil
import sys
import tempfile
import unittest
from pathlib import Path

import openpyxl
import pandas as pd

# プロジェクトルートをパスに追加
sys.path.insert(0, str(Path(__file__).parent.parent))

from common import (
    CSVHandler,
    ConfigManager,
    ConfigurationError,
    DataValidationError,
    EncodingDetector,
    ErrorHandler,
    ExcelHandler,
    FileProcessingError,
    UnifiedLogger
)


class TestConfigManager(unittest.TestCase):
    """ConfigManagerのテスト"""

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        self.original_cwd = os.getcwd()
        os.chdir(self.temp_dir)

    def tearDown(self):
        os.chdir(self.original_cwd)
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _write_config(self, name: str, data) -> Path:
        path = self.temp_dir / name
        with open(path, 'w', encoding='utf-8') as f:
            if isinstance(data, str):
                f.write(data)
            else:
                json.dump(data, f)
        return path

    def test_defaults_without_config_file(self):
        config_manager = ConfigManager()

        settings = config_manager.get_revenue_settings()
        self.assertEqual(settings['welfare_rate'], 10)
        self.assertEqual(settings['store_ratio'], 0.6)
        self.assertEqual(settings['time_zone'], 'Asia/Tokyo')
        self.assertIsNone(config_manager.get_logging_settings()['log_file'])

    def test_default_file_name_is_discovered(self):
        self._write_config('revenue_config.json', {'welfare_rate': 12})

        config_manager = ConfigManager()

        self.assertEqual(config_manager.config_path, Path('revenue_config.json'))
        self.assertEqual(config_manager.get_revenue_settings()['welfare_rate'], 12)
        # 未指定の項目はデフォルトで補完される
        self.assertEqual(config_manager.get('store_ratio'), 0.6)

    def test_explicit_config_path(self):
        path = self._write_config('custom.json', {'store_ratio': 0.5, 'output_dir': 'reports'})

        config_manager = ConfigManager(path)

        self.assertEqual(config_manager.get_revenue_settings()['store_ratio'], 0.5)
        self.assertEqual(config_manager.get_processing_settings()['output_dir'], Path('reports'))

    def test_invalid_json_raises(self):
        path = self._write_config('broken.json', '{"welfare_rate": ')

        with self.assertRaises(ConfigurationError):
            ConfigManager(path)

    def test_missing_explicit_file_raises(self):
        with self.assertRaises(ConfigurationError):
            ConfigManager(self.temp_dir / 'missing.json')

    def test_out_of_range_settings_raise(self):
        with self.assertRaises(ConfigurationError):
            ConfigManager(self._write_config('a.json', {'welfare_rate': 150})).get_revenue_settings()
        with self.assertRaises(ConfigurationError):
            ConfigManager(self._write_config('b.json', {'store_ratio': 1.5})).get_revenue_settings()
        with self.assertRaises(ConfigurationError):
            ConfigManager(self._write_config('c.json', {'welfare_rate': 'ten'})).get_revenue_settings()

    def test_save_and_update(self):
        config_manager = ConfigManager()
        config_manager.update_config({'welfare_rate': 8})
        output = self.temp_dir / 'saved.json'
        config_manager.save_config(output)

        reloaded = ConfigManager(output)
        self.assertEqual(reloaded.get('welfare_rate'), 8)


class TestErrorHandler(unittest.TestCase):
    """ErrorHandlerのテスト"""

    def setUp(self):
        self.logger = UnifiedLogger("test_error_handler")
        self.error_handler = ErrorHandler(self.logger.logger)

    def test_collects_errors_and_summarizes(self):
        self.error_handler.handle_data_validation_error(DataValidationError("開始日時なし"), "reservations.csv 2行目")
        self.error_handler.handle_file_processing_error(FileProcessingError("読めない"), Path("a.csv"))
        self.error_handler.log_and_continue(DataValidationError("ID なし"), "reservations.csv 3行目")

        summary = self.error_handler.create_error_summary()
        self.assertEqual(summary['total_errors'], 3)
        self.assertEqual(summary['error_types'], {'DataValidationError': 2, 'FileProcessingError': 1})
        self.assertEqual(summary['first_error'], "開始日時なし")

    def test_empty_summary(self):
        self.assertEqual(self.error_handler.create_error_summary(), {'total_errors': 0, 'error_types': {}})

    def test_log_and_raise_reraises(self):
        with self.assertRaises(FileProcessingError):
            self.error_handler.log_and_raise(FileProcessingError("致命的"), "テスト")


class TestUnifiedLogger(unittest.TestCase):
    """UnifiedLoggerのテスト"""

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_format_yen(self):
        self.assertEqual(UnifiedLogger.format_yen(1234567), "¥1,234,567")
        self.assertEqual(UnifiedLogger.format_yen('n/a'), 'n/a')

    def test_writes_log_file(self):
        log_file = self.temp_dir / 'logs' / 'revenue.log'
        logger = UnifiedLogger("test_log_file", "DEBUG", log_file)

        logger.info("情報メッセージ")
        logger.log_revenue_breakdown("R001", {'store_revenue': 1800, 'status': 'completed'})
        logger.log_settlement_totals("2025-06", {'staff_revenue': 14200, 'reservation_count': 1})
        logger.log_configuration_info({'api_token': 'secret', 'welfare_rate': 10})
        for handler in logger.logger.handlers:
            handler.flush()

        content = log_file.read_text(encoding='utf-8')
        self.assertIn("情報メッセージ", content)
        self.assertIn("store_revenue=¥1,800", content)
        self.assertIn("staff_revenue: ¥14,200", content)
        self.assertNotIn("secret", content)

        for handler in list(logger.logger.handlers):
            handler.close()
            logger.logger.removeHandler(handler)

    def test_breakdown_is_not_logged_above_debug(self):
        log_file = self.temp_dir / 'info.log'
        logger = UnifiedLogger("test_info_level", "INFO", log_file)

        logger.log_revenue_breakdown("R001", {'store_revenue': 1800})
        logger.log_file_operation("出力", self.temp_dir / 'report.xlsx', True)
        logger.log_file_operation("出力", self.temp_dir / 'details.csv', False)
        for handler in logger.logger.handlers:
            handler.flush()

        content = log_file.read_text(encoding='utf-8')
        self.assertNotIn("売上内訳", content)
        self.assertIn("ファイル操作 [出力] 成功: report.xlsx", content)
        self.assertIn("ERROR - ファイル操作 [出力] 失敗: details.csv", content)

        for handler in list(logger.logger.handlers):
            handler.close()
            logger.logger.removeHandler(handler)


class TestFileHandlers(unittest.TestCase):
    """CSV / Excel / エンコーディング判定のテスト"""

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        self.logger = UnifiedLogger("test_file_handlers")
        self.error_handler = ErrorHandler(self.logger.logger)
        self.csv_handler = CSVHandler(self.logger.logger, self.error_handler)
        self.excel_handler = ExcelHandler(self.logger.logger, self.error_handler)
        self.encoding_detector = EncodingDetector(self.logger.logger)

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _cast_frame(self) -> pd.DataFrame:
        return pd.DataFrame({
            'キャスト名': ['さくら', 'ゆり', 'あおい', 'ひまわり', 'すみれ'] * 4,
            '店舗': ['渋谷本店', '新宿店', '池袋店', '横浜店', '大宮店'] * 4,
            '売上': [10000, 14000, 12000, 8000, 9000] * 4,
        })

    def test_read_utf8_csv(self):
        csv_file = self.temp_dir / "utf8.csv"
        self._cast_frame().to_csv(csv_file, index=False, encoding='utf-8')

        df = self.csv_handler.read_csv_with_encoding_detection(csv_file)

        self.assertEqual(len(df), 20)
        self.assertIn('さくら', df['キャスト名'].values)

    def test_read_shift_jis_csv(self):
        csv_file = self.temp_dir / "sjis.csv"
        self._cast_frame().to_csv(csv_file, index=False, encoding='shift_jis')

        df = self.csv_handler.read_csv_with_encoding_detection(csv_file)

        self.assertIn('さくら', df['キャスト名'].values)
        self.assertIn('渋谷本店', df['店舗'].values)

    def test_encoding_detector_utf8(self):
        text_file = self.temp_dir / "utf8.txt"
        text_file.write_text("予約番号,キャスト名\nR001,さくら\nR002,ゆり\n", encoding='utf-8')

        self.assertEqual(self.encoding_detector.detect_encoding(text_file), 'utf-8-sig')
        self.assertTrue(self.encoding_detector.validate_encoding(text_file, 'utf-8'))

    def test_missing_csv_raises_and_safe_read_returns_none(self):
        missing = self.temp_dir / "missing.csv"

        with self.assertRaises(FileProcessingError):
            self.csv_handler.read_csv_with_encoding_detection(missing)
        self.assertIsNone(self.csv_handler.read_csv_safe(missing))

    def test_empty_csv_returns_empty_frame(self):
        empty = self.temp_dir / "empty.csv"
        empty.write_bytes(b'')

        df = self.csv_handler.read_csv_with_encoding_detection(empty)
        self.assertTrue(df.empty)

    def test_validate_csv_structure(self):
        df = pd.DataFrame({'reservation_id': ['R001']})

        self.assertEqual(self.csv_handler.validate_csv_structure(df, ['reservation_id', 'cast_id']), ['cast_id'])
        self.assertEqual(self.csv_handler.validate_csv_structure(df, ['reservation_id']), [])

    def test_write_csv_with_bom(self):
        output = self.temp_dir / 'out' / 'details.csv'

        self.csv_handler.write_csv(self._cast_frame(), output)

        self.assertTrue(output.read_bytes().startswith(b'\xef\xbb\xbf'))

    def test_excel_write_sheets_and_format(self):
        output = self.temp_dir / 'report.xlsx'
        sheets = {
            '明細': pd.DataFrame({'reservation_id': ['R001', 'R002'], 'store_revenue': [1800, 1000]}),
            'サマリー': pd.DataFrame({'項目': ['予約件数'], '値': [2]}),
        }

        self.excel_handler.write_sheets(output, sheets, money_columns=['store_revenue'])

        self.assertEqual(self.excel_handler.get_sheet_names(output), ['明細', 'サマリー'])
        df = self.excel_handler.read_sheet(output, '明細')
        self.assertEqual(list(df['store_revenue']), [1800, 1000])

        workbook = openpyxl.load_workbook(output)
        try:
            worksheet = workbook['明細']
            self.assertTrue(worksheet['A1'].font.bold)
            self.assertEqual(worksheet['B2'].number_format, ExcelHandler.YEN_FORMAT)
            self.assertEqual(worksheet.freeze_panes, 'A2')
        finally:
            workbook.close()

    def test_excel_illegal_character_raises_file_processing_error(self):
        output = self.temp_dir / 'broken.xlsx'
        sheets = {'明細': pd.DataFrame({'cast_name': ['a\x01b']})}

        with self.assertRaises(FileProcessingError):
            self.excel_handler.write_sheets(output, sheets)


if __name__ == '__main__':
    unittest.main()
