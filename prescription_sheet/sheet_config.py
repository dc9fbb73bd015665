"""
処方説明書の設定読み込み
YAML設定ファイル + 環境変数（.env対応）
"""
import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "PRESCRIPTION_SHEET_CONFIG"
LOG_LEVEL_ENV_VAR = "LOG_LEVEL"
DEFAULT_CONFIG_FILE = Path(__file__).parent / "sheet_config.yaml"

DEFAULTS: Dict[str, Any] = {
    "title_template": "{patient_name}様に本日処方する薬の説明書です",
    "patient_name": "",
    "headers": ["名前 形 色", "飲み方", "用法用量", "日数", "効能効果", "注意事項(注意が必要な方)"],
    "notice": "",
    "clinic": {"name": "", "address": "", "tel": ""},
    "genre_order": [],
    "default_count_unit": "日分",
    "count_units": {},
}


def _is_valid_title_template(template: Any) -> bool:
    """{patient_name} 以外のプレースホルダを含まないか"""
    if not isinstance(template, str):
        return False
    try:
        template.format(patient_name="")
    except (KeyError, IndexError, ValueError):
        return False
    return True


def _merge(loaded: Dict[str, Any]) -> Dict[str, Any]:
    config = copy.deepcopy(DEFAULTS)
    for key, value in loaded.items():
        if key not in DEFAULTS:
            logger.warning(f"Unknown sheet config key ignored: {key}")
            continue
        if value is None:
            continue
        if isinstance(DEFAULTS[key], dict):
            if not isinstance(value, dict):
                logger.warning(f"Sheet config key {key} must be a mapping, ignored")
                continue
            config[key].update(value)
        else:
            config[key] = value

    if not _is_valid_title_template(config["title_template"]):
        logger.error(f"Invalid title_template ignored: {config['title_template']!r}")
        config["title_template"] = DEFAULTS["title_template"]

    # IDは数値・文字列どちらでも引けるよう文字列キーに揃える
    config["count_units"] = {str(k): v for k, v in config["count_units"].items()}
    return config


def load_sheet_config(config_file: Optional[str] = None) -> Dict[str, Any]:
    """
    設定ファイルを読み込み、既定値とマージして返す

    優先順: 引数 → PRESCRIPTION_SHEET_CONFIG → 同梱のsheet_config.yaml
    読み込みに失敗した場合は既定値のみで続行する
    """
    path = Path(config_file or os.getenv(CONFIG_ENV_VAR) or DEFAULT_CONFIG_FILE)
    try:
        if not path.exists():
            logger.warning(f"Sheet config file not found: {path}")
            return _merge({})

        with open(path, "r", encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}

        if not isinstance(loaded, dict):
            logger.error(f"Sheet config must be a mapping: {path}")
            return _merge({})

        logger.info(f"Loaded sheet config from {path}")
        return _merge(loaded)

    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Failed to load sheet config {path}: {e}")
        return _merge({})


def resolve_log_level(level_name: Optional[str] = None) -> int:
    """LOG_LEVEL環境変数のログレベル（不正値はINFO）"""
    name = (level_name if level_name is not None else os.getenv(LOG_LEVEL_ENV_VAR, "INFO")).strip().upper()
    level = getattr(logging, name, None)
    if not isinstance(level, int):
        logger.warning(f"Invalid log level {name!r}, using INFO")
        return logging.INFO
    return level
