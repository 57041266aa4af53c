"""
ロギング設定
"""
import logging
from pathlib import Path

from social_coach.config import LOG_FILE


def setup_logging(log_file: Path = LOG_FILE, level: int = logging.INFO) -> Path:
    """
    ファイルへの詳細ログとコンソールへの最小限の出力を設定する

    Args:
        log_file: ログファイルのパス
        level: ファイルに出力するログレベル

    Returns:
        ログファイルのパス
    """
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root_logger: logging.Logger = logging.getLogger()
    # 既存のハンドラをクリア（二重出力防止）
    root_logger.handlers.clear()

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s - %(message)s")
    )

    # コンソールには警告以上のみ
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    root_logger.setLevel(level)
    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    return log_file
