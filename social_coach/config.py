"""
アプリケーション設定
"""
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

# .envファイルの読み込み（カレントディレクトリから探す）
load_dotenv()


def get_app_data_dir() -> Path:
    """
    アプリケーションのデータディレクトリを取得

    SOCIAL_COACH_DATA_DIR環境変数が設定されている場合はそちらを優先する

    Returns:
        アプリケーションデータディレクトリのパス
    """
    override: str | None = os.getenv("SOCIAL_COACH_DATA_DIR")
    if override:
        return Path(override)
    if sys.platform == "win32":
        # Windowsの場合、AppData\Local\SocialSkillCoachを使用
        app_data: str | None = os.getenv("LOCALAPPDATA")
        if app_data:
            return Path(app_data) / "SocialSkillCoach"
    elif sys.platform == "darwin":
        # macOSの場合、~/Library/Application Support/SocialSkillCoachを使用
        return Path.home() / "Library" / "Application Support" / "SocialSkillCoach"
    # その他のOSまたはフォールバック
    return Path.home() / ".social_skill_coach"


def get_log_file() -> Path:
    """
    ログファイルのパスを取得

    Returns:
        ログファイルのパス
    """
    return get_app_data_dir() / "app.log"


def _env_float(name: str, default: float) -> float:
    """環境変数を浮動小数点数として読む（不正な値はデフォルト）"""
    value: str | None = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    """環境変数を整数として読む（不正な値はデフォルト）"""
    value: str | None = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


# アプリケーションデータディレクトリ
APP_DATA_DIR = get_app_data_dir()

# ログファイル
LOG_FILE = get_log_file()

# 進捗データを保存するスロットのキー（固定）
PROGRESS_STORAGE_KEY = "neuroCoachProgress"

# 進捗データファイル
PROGRESS_FILE = APP_DATA_DIR / f"{PROGRESS_STORAGE_KEY}.json"

# 推論サービス（OpenAI互換API）の設定
DEFAULT_MODEL = "gpt-4o-mini"
REASONING_TIMEOUT_SECONDS: float = _env_float("REASONING_TIMEOUT_SECONDS", 30.0)
REASONING_MAX_RETRIES: int = _env_int("REASONING_MAX_RETRIES", 2)
