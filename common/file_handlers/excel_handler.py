"""
統一Excelハンドラー
"""
import pandas as pd
import openpyxl
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.utils.exceptions import IllegalCharacterError
from openpyxl.worksheet.worksheet import Worksheet
from pathlib import Path
from typing import Dict, Iterable, List, Optional
from ..error_handling.exceptions import FileProcessingError


class ExcelHandler:
    """Excelファイルの統一処理クラス（pandas + openpyxl）"""

    YEN_FORMAT = '"¥"#,##0'
    HEADER_FILL = PatternFill(start_color='DDEBF7', end_color='DDEBF7', fill_type='solid')
    MAX_COLUMN_WIDTH = 40

    def __init__(self, logger=None, error_handler=None):
        self.logger = logger
        self.error_handler = error_handler

    def write_sheets(self, file_path: Path, sheets: Dict[str, pd.DataFrame],
                     money_columns: Optional[Iterable[str]] = None) -> Path:
        """複数のDataFrameを1つのブックにシート単位で書き込み、書式を整える"""
        file_path = Path(file_path)
        money_columns = set(money_columns or [])

        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            with pd.ExcelWriter(file_path, engine='openpyxl') as writer:
                for sheet_name, df in sheets.items():
                    df.to_excel(writer, sheet_name=sheet_name, index=False)
                    self.format_worksheet(writer.sheets[sheet_name], list(df.columns), money_columns)
        except (OSError, ValueError, IllegalCharacterError) as e:
            if self.error_handler:
                self.error_handler.handle_file_processing_error(e, file_path)
            raise FileProcessingError(f"Excel書き込みエラー: {file_path.name} - {str(e)}")

        if self.logger:
            self.logger.info(f"Excel出力完了: {file_path} ({len(sheets)}シート)")
        return file_path

    def format_worksheet(self, worksheet: Worksheet, columns: List[str], money_columns: set) -> None:
        """見出し行の強調、金額列の円表示、列幅の調整"""
        for cell in worksheet[1]:
            cell.font = Font(bold=True)
            cell.fill = self.HEADER_FILL

        for index, column in enumerate(columns, start=1):
            letter = get_column_letter(index)
            if column in money_columns:
                for row in worksheet.iter_rows(min_row=2, min_col=index, max_col=index):
                    for cell in row:
                        cell.number_format = self.YEN_FORMAT

            width = max(
                [len(str(column))] + [len(str(c.value)) for c in worksheet[letter][1:] if c.value is not None]
            )
            worksheet.column_dimensions[letter].width = min(width + 4, self.MAX_COLUMN_WIDTH)

        worksheet.freeze_panes = 'A2'

    def get_sheet_names(self, file_path: Path) -> List[str]:
        """Excelファイルのシート名一覧を取得"""
        try:
            workbook = openpyxl.load_workbook(file_path, read_only=True)
        except (OSError, KeyError, ValueError) as e:
            raise FileProcessingError(f"Excel読み込みエラー: {Path(file_path).name} - {str(e)}")
        try:
            return workbook.sheetnames
        finally:
            workbook.close()

    def read_sheet(self, file_path: Path, sheet_name: str) -> pd.DataFrame:
        """指定シートをDataFrameとして読み込み"""
        try:
            return pd.read_excel(file_path, sheet_name=sheet_name, engine='openpyxl')
        except (OSError, ValueError, KeyError) as e:
            raise FileProcessingError(f"Excel読み込みエラー: {Path(file_path).name} [{sheet_name}] - {str(e)}")
