#!/usr/bin/env python3
"""
予約売上配分レポート メイン実行スクリプト

使用方法:
    python run_revenue_report.py reservations.csv
    python run_revenue_report.py reservations.csv --year 2025 --month 6
    python run_revenue_report.py reservations.json --output-dir reports --use-stored
"""

import argparse
import sys
from pathlib import Path

from reservation_revenue.main_controller import RevenueReportController


def parse_arguments(argv=None):
    """コマンドライン引数を解析"""
    parser = argparse.ArgumentParser(
        description="予約売上配分（店舗売上・キャスト売上・厚生費）レポート生成",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
使用例:
  %(prog)s reservations.csv                          # 全期間のレポートを出力
  %(prog)s reservations.csv --year 2025 --month 6    # 2025年6月分のみ
  %(prog)s reservations.json --use-stored            # 保存済みの売上配分を優先
  %(prog)s reservations.csv --log-level DEBUG        # 予約ごとの内訳もログ出力
        """
    )

    parser.add_argument('input', type=Path, help='予約データ（.csv または .json）')
    parser.add_argument('--output-dir', type=Path, help='出力先フォルダ（デフォルト: 設定の output_dir）')
    parser.add_argument('--year', type=int, help='集計対象年（--month と併用）')
    parser.add_argument('--month', type=int, choices=range(1, 13), metavar='MONTH', help='集計対象月（1〜12）')
    parser.add_argument('--config', type=Path, help='設定ファイル（JSON）')
    parser.add_argument(
        '--use-stored',
        action='store_true',
        help='予約に保存済みの売上配分がある場合は再計算せずに使用'
    )
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='ログレベル（デフォルト: 設定の log_level）'
    )

    args = parser.parse_args(argv)
    if (args.year is None) != (args.month is None):
        parser.error('--year と --month は同時に指定してください')
    return args


def main(argv=None) -> int:
    args = parse_arguments(argv)

    try:
        controller = RevenueReportController(args.config, args.log_level)
        summary = controller.run(
            args.input,
            output_dir=args.output_dir,
            year=args.year,
            month=args.month,
            recompute=not args.use_stored,
        )
    except Exception as e:
        print(f"エラーが発生しました: {str(e)}", file=sys.stderr)
        return 1

    print("\n=== 処理結果 ===")
    print(f"予約件数: {summary.reservation_count}")
    print(f"売上合計: {summary.total_revenue:,}円")
    print(f"店舗売上: {summary.store_revenue:,}円")
    print(f"キャスト売上: {summary.staff_revenue:,}円")
    print(f"厚生費: {summary.welfare_expense:,}円")
    for path in controller.output_files:
        print(f"出力: {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
