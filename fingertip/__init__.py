#!/usr/bin/env python3
"""
Fingertip メインパッケージ

深度マップと手の3D関節位置から指先位置と把持状態を推定します。
ロギングはここで一元設定します（インポート時には設定しない）。
"""

import logging
import sys
from pathlib import Path
from typing import Dict, Optional

# プロジェクト情報
__version__ = "0.1.0"

# ログ書式（--log-level / config.log_format_style から選択）
LOG_FORMATS: Dict[str, str] = {
    "simple": "%(levelname)s: %(message)s",
    "detailed": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    "debug": "%(asctime)s [%(levelname)s] %(name)s:%(funcName)s:%(lineno)d: %(message)s",
}


def _make_handler(handler: logging.Handler, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    format_style: str = "detailed"
) -> logging.Logger:
    """
    デモ・テストからルートロガーを設定

    手ごとの解析失敗は DEBUG、設定の問題は WARNING、
    デモの進行は INFO で出力されるため、通常は INFO で十分。
    再呼び出し時は既存ハンドラーを置き換える。

    Args:
        level: ログレベル名
        log_file: 追加の出力先ファイル
        format_style: LOG_FORMATS のキー（未知の値は "detailed"）

    Returns:
        ルートロガー
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f'Invalid log level: {level}')

    formatter = logging.Formatter(
        LOG_FORMATS.get(format_style, LOG_FORMATS["detailed"]), datefmt='%H:%M:%S'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    root_logger.addHandler(_make_handler(logging.StreamHandler(sys.stdout), numeric_level, formatter))
    if log_file is not None:
        root_logger.addHandler(_make_handler(logging.FileHandler(log_file), numeric_level, formatter))

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """各モジュールで `logger = get_logger(__name__)` として使用"""
    return logging.getLogger(name)
