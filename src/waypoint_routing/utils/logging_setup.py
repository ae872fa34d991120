"""
ログ設定

ライブラリ側は logging.getLogger(__name__) を使うだけでハンドラを設定しません。
実験スクリプトなどの実行側がこの関数を呼び出してルートロガーを設定します。
"""

import logging
from typing import Dict, Optional

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def setup_logging(level: str = "INFO", config: Optional[Dict] = None) -> None:
    """
    ルートロガーを設定

    Args:
        level: ログレベル名（"DEBUG", "INFO", ...）
        config: 設定辞書。loggingセクションがあればlevelより優先
    """
    if config is not None:
        level = config.get("logging", {}).get("level", level)
    logging.basicConfig(level=getattr(logging, str(level).upper(), logging.INFO), format=LOG_FORMAT)
