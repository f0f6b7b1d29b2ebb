"""
レポート生成の統合テスト
"""
import json
import shutil
import sys
import tempfile
import unittest
from pathlib import Path

import pandas as pd

# プロジェクトルートをパスに追加
sys.path.insert(0, str(Path(__file__).parent.parent))

from common import ExcelHandler, FileProcessingError
from reservation_revenue.constants import ReportSheets
from reservation_revenue.main_controller import RevenueReportController
import run_revenue_report


class TestRevenueReportController(unittest.TestCase):
    """RevenueReportControllerの統合テスト"""

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        self.output_dir = self.temp_dir / 'output'
        self.config_path = self.temp_dir / 'revenue_config.json'
        self.config_path.write_text(json.dumps({
            'welfare_rate': 10,
            'store_ratio': 0.6,
            'time_zone': 'Asia/Tokyo',
            'output_dir': str(self.output_dir),
            'log_level': 'WARNING',
        }), encoding='utf-8')

        options = json.dumps([{'price': 3000}])
        self.input_csv = self.temp_dir / 'reservations.csv'
        pd.DataFrame([
            {'reservation_id': 'R001', 'cast_id': 'c1', 'cast_name': 'さくら',
             'start_time': '2025-06-01 10:00', 'status': 'completed', 'checked_out': 'true',
             'base_price': 10000, 'options': ''},
            {'reservation_id': 'R002', 'cast_id': 'c2', 'cast_name': 'ゆり',
             'start_time': '2025-06-15 20:00', 'status': 'pending', 'checked_out': '',
             'base_price': 12000, 'options': options},
            {'reservation_id': 'R003', 'cast_id': 'c2', 'cast_name': 'ゆり',
             'start_time': '2025-07-01 00:30', 'status': 'completed', 'checked_out': 'true',
             'base_price': 8000, 'options': ''},
            {'reservation_id': '', 'cast_id': 'c2', 'cast_name': 'ゆり',
             'start_time': '2025-06-20 12:00', 'status': 'pending', 'checked_out': '',
             'base_price': 5000, 'options': ''},
        ]).to_csv(self.input_csv, index=False, encoding='cp932')

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_monthly_report(self):
        controller = RevenueReportController(self.config_path)
        summary = controller.run(self.input_csv, year=2025, month=6)

        self.assertEqual(summary.period, '2025-06')
        self.assertEqual(summary.reservation_count, 2)
        self.assertEqual(summary.total_revenue, 25000)
        self.assertEqual(summary.store_revenue, 1000 + 1200 + 1800)
        self.assertEqual(summary.staff_revenue, 9000 + 10800 + 1200)
        self.assertEqual(summary.welfare_expense, 2200)
        self.assertEqual(summary.completed_count, 1)
        self.assertEqual(controller.loader.skipped_rows, 1)

        report_path = self.output_dir / 'revenue_report_2025-06.xlsx'
        csv_path = self.output_dir / 'revenue_details_2025-06.csv'
        self.assertEqual(controller.output_files, [report_path, csv_path])

        excel_handler = ExcelHandler()
        self.assertEqual(
            sorted(excel_handler.get_sheet_names(report_path)),
            sorted([ReportSheets.SUMMARY, ReportSheets.DETAILS, ReportSheets.DAILY, ReportSheets.CAST]),
        )
        details = excel_handler.read_sheet(report_path, ReportSheets.DETAILS)
        self.assertEqual(list(details['reservation_id']), ['R001', 'R002'])
        self.assertEqual(details.loc[0, 'start_time'], '2025-06-01T10:00:00+09:00')

        summary_sheet = excel_handler.read_sheet(report_path, ReportSheets.SUMMARY)
        self.assertIn('売上合計', list(summary_sheet['項目']))

        detail_csv = pd.read_csv(csv_path, encoding='utf-8-sig')
        self.assertEqual(list(detail_csv['staff_revenue']), [9000, 12000])

    def test_full_period_report(self):
        controller = RevenueReportController(self.config_path)
        summary = controller.run(self.input_csv, output_dir=self.temp_dir / 'all')

        self.assertEqual(summary.period, 'all')
        self.assertEqual(summary.reservation_count, 3)
        self.assertTrue((self.temp_dir / 'all' / 'revenue_report_all.xlsx').exists())

    def test_missing_input_is_reraised(self):
        controller = RevenueReportController(self.config_path)

        with self.assertRaises(FileProcessingError):
            controller.run(self.temp_dir / 'missing.csv')
        self.assertEqual(controller.error_handler.create_error_summary()['total_errors'], 1)


class TestCommandLine(unittest.TestCase):
    """run_revenue_report.py のテスト"""

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        self.config_path = self.temp_dir / 'revenue_config.json'
        self.config_path.write_text(json.dumps({'log_level': 'WARNING'}), encoding='utf-8')
        self.input_json = self.temp_dir / 'reservations.json'
        self.input_json.write_text(json.dumps([
            {'id': 'R001', 'castId': 'c1', 'startTime': '2025-06-01T01:00:00Z', 'basePrice': 10000,
             'price': 10000, 'storeRevenue': 4000, 'status': 'completed', 'checkedOut': True},
        ]), encoding='utf-8')

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_main_success(self):
        exit_code = run_revenue_report.main([
            str(self.input_json), '--output-dir', str(self.temp_dir / 'out'),
            '--config', str(self.config_path), '--year', '2025', '--month', '6', '--use-stored',
        ])

        self.assertEqual(exit_code, 0)
        detail_csv = pd.read_csv(self.temp_dir / 'out' / 'revenue_details_2025-06.csv', encoding='utf-8-sig')
        self.assertEqual(detail_csv.loc[0, 'store_revenue'], 4000)
        self.assertEqual(detail_csv.loc[0, 'staff_revenue'], 6000)
        self.assertEqual(detail_csv.loc[0, 'revenue_source'], 'recorded')

    def test_main_failure_returns_one(self):
        exit_code = run_revenue_report.main([
            str(self.temp_dir / 'missing.json'), '--config', str(self.config_path),
            '--output-dir', str(self.temp_dir / 'out'),
        ])
        self.assertEqual(exit_code, 1)

    def test_year_without_month_is_rejected(self):
        with self.assertRaises(SystemExit):
            run_revenue_report.parse_arguments(['reservations.csv', '--year', '2025'])


if __name__ == '__main__':
    unittest.main()
