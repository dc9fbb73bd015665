#!/usr/bin/env python3
"""
処方説明書プレビュースクリプト
選択ファイル（YAML/JSON）から処方説明書を組み立ててJSONで出力する
"""

import argparse
import json
import logging
import os
import sys

import yaml

# プロジェクトルートをパスに追加
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from prescription_sheet.medication_selection import make_selection
from prescription_sheet.prescription_sheet import PrescriptionSheetBuilder
from prescription_sheet.sheet_config import load_sheet_config, resolve_log_level


def main():
    """メイン処理"""
    logging.basicConfig(
        level=resolve_log_level(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    logger = logging.getLogger(__name__)

    parser = argparse.ArgumentParser(description="処方説明書のレイアウトをJSONで出力")
    parser.add_argument("selection_file", help="patient_name と selections を持つYAML/JSONファイル")
    parser.add_argument("--config", help="処方説明書の設定ファイル")
    args = parser.parse_args()

    try:
        with open(args.selection_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        config = load_sheet_config(args.config)
        selections = [
            make_selection(item["medication"], item.get("days", 1), item.get("unit"), config)
            for item in data.get("selections", [])
        ]

        sheet = PrescriptionSheetBuilder(config).build_sheet(selections, data.get("patient_name"))
        print(json.dumps(sheet, ensure_ascii=False, indent=2))

    except (OSError, yaml.YAMLError, KeyError, ValueError) as e:
        logger.error(f"プレビューの作成に失敗しました: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
