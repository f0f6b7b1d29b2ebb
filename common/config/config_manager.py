"""
中央集約設定管理システム
"""
import json
from pathlib import Path
from typing import Dict, Any, Optional
from ..error_handling.exceptions import ConfigurationError


class ConfigManager:
    """設定管理の統一クラス"""

    DEFAULT_CONFIG_FILES = [
        'revenue_config.json',
        'config.json'
    ]

    def __init__(self, config_path: Optional[Path] = None, logger=None):
        self.logger = logger
        self.config_path = Path(config_path) if config_path else None
        self.config_data: Dict[str, Any] = {}
        self.load_config(self.config_path)

    def load_config(self, config_path: Optional[Path] = None) -> Dict[str, Any]:
        """設定ファイルを読み込み（未指定時は既定ファイル名を順に探す）"""
        defaults = self._get_default_config()

        if config_path:
            loaded = self._load_single_config(Path(config_path))
            self.config_data = {**defaults, **loaded}
            return self.config_data

        for config_file in self.DEFAULT_CONFIG_FILES:
            candidate = Path(config_file)
            if not candidate.exists():
                continue
            try:
                loaded = self._load_single_config(candidate)
            except ConfigurationError as e:
                if self.logger:
                    self.logger.debug(f"設定ファイル読み込み失敗: {config_file} - {str(e)}")
                continue
            self.config_data = {**defaults, **loaded}
            self.config_path = candidate
            return self.config_data

        if self.logger:
            self.logger.warning("設定ファイルが見つかりません。デフォルト設定を使用します。")
        self.config_data = defaults
        return self.config_data

    def _load_single_config(self, config_path: Path) -> Dict[str, Any]:
        """単一の設定ファイルを読み込み"""
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config_data = json.load(f)
        except FileNotFoundError:
            raise ConfigurationError(f"設定ファイルが見つかりません: {config_path}")
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"設定ファイルの形式が無効です: {config_path} - {str(e)}")
        except OSError as e:
            raise ConfigurationError(f"設定ファイル読み込みエラー: {config_path} - {str(e)}")

        if not isinstance(config_data, dict):
            raise ConfigurationError(f"設定ファイルの最上位はオブジェクトである必要があります: {config_path}")

        if self.logger:
            self.logger.info(f"設定ファイル読み込み成功: {config_path.name}")

        return config_data

    def _get_default_config(self) -> Dict[str, Any]:
        """デフォルト設定を取得"""
        return {
            'welfare_rate': 10,
            'store_ratio': 0.6,
            'time_zone': 'Asia/Tokyo',
            'encoding': 'utf-8',
            'output_dir': 'output',
            'log_level': 'INFO',
            'log_file': None
        }

    def get(self, key: str, default: Any = None) -> Any:
        """設定値を取得"""
        return self.config_data.get(key, default)

    def get_revenue_settings(self) -> Dict[str, Any]:
        """売上計算関連の設定を検証して取得"""
        try:
            welfare_rate = float(self.get('welfare_rate', 10))
            store_ratio = float(self.get('store_ratio', 0.6))
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"売上計算設定の値が数値ではありません: {str(e)}")

        if not 0 <= welfare_rate <= 100:
            raise ConfigurationError(f"welfare_rateは0〜100の範囲で指定してください: {welfare_rate}")
        if not 0 <= store_ratio <= 1:
            raise ConfigurationError(f"store_ratioは0〜1の範囲で指定してください: {store_ratio}")

        return {
            'welfare_rate': welfare_rate,
            'store_ratio': store_ratio,
            'time_zone': self.get('time_zone', 'Asia/Tokyo')
        }

    def get_processing_settings(self) -> Dict[str, Any]:
        """入出力関連の設定を取得"""
        return {
            'encoding': self.get('encoding', 'utf-8'),
            'output_dir': Path(self.get('output_dir', 'output'))
        }

    def get_logging_settings(self) -> Dict[str, Any]:
        """ログ関連の設定を取得"""
        log_file = self.get('log_file')
        return {
            'log_level': self.get('log_level', 'INFO'),
            'log_file': Path(log_file) if log_file else None
        }

    def save_config(self, config_path: Optional[Path] = None) -> None:
        """設定をファイルに保存"""
        if config_path is None:
            config_path = self.config_path or Path('revenue_config.json')

        try:
            with open(config_path, 'w', encoding='utf-8') as f:
                json.dump(self.config_data, f, ensure_ascii=False, indent=2)
        except OSError as e:
            error_msg = f"設定ファイル保存エラー: {config_path} - {str(e)}"
            if self.logger:
                self.logger.error(error_msg)
            raise ConfigurationError(error_msg)

        if self.logger:
            self.logger.info(f"設定ファイル保存完了: {config_path}")

    def update_config(self, updates: Dict[str, Any]) -> None:
        """設定を更新"""
        self.config_data.update(updates)

        if self.logger:
            self.logger.info(f"設定更新: {list(updates.keys())}")
