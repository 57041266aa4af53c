"""
設定とロギングのテスト
"""
import logging
import os
import shutil
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from social_coach import config
from social_coach.utils.logging_utils import setup_logging


class TestConfig:
    """設定のテストクラス"""

    @patch.dict(os.environ, {"SOCIAL_COACH_DATA_DIR": "/tmp/coach-data"})
    def test_data_dir_override(self):
        """環境変数でデータディレクトリを指定できる"""
        assert config.get_app_data_dir() == Path("/tmp/coach-data")
        assert config.get_log_file() == Path("/tmp/coach-data") / "app.log"

    @patch.dict(os.environ, {}, clear=True)
    @patch("social_coach.config.sys.platform", "linux")
    def test_data_dir_default_linux(self):
        """その他のOSではホームディレクトリ配下"""
        assert config.get_app_data_dir() == Path.home() / ".social_skill_coach"

    @patch.dict(os.environ, {"REASONING_TIMEOUT_SECONDS": "abc", "REASONING_MAX_RETRIES": "5"})
    def test_env_numbers(self):
        """数値の環境変数（不正な値はデフォルト）"""
        assert config._env_float("REASONING_TIMEOUT_SECONDS", 30.0) == 30.0
        assert config._env_int("REASONING_MAX_RETRIES", 2) == 5
        assert config._env_int("MISSING_VALUE", 2) == 2

    def test_progress_file_uses_storage_key(self):
        """進捗ファイル名は固定キー"""
        assert config.PROGRESS_FILE.name == "neuroCoachProgress.json"


class TestSetupLogging:
    """ロギング設定のテストクラス"""

    @pytest.fixture
    def temp_data_dir(self):
        """一時的なデータディレクトリを作成"""
        temp_dir = Path(tempfile.mkdtemp())
        yield temp_dir
        shutil.rmtree(temp_dir)

    def test_setup_logging_writes_file(self, temp_data_dir):
        """ログファイルに出力される"""
        log_file = temp_data_dir / "logs" / "app.log"
        root = logging.getLogger()
        saved_handlers, saved_level = list(root.handlers), root.level

        try:
            result = setup_logging(log_file)
            logging.getLogger("social_coach.test").info("hello log")
            handler_count = len(root.handlers)
        finally:
            for handler in root.handlers:
                handler.close()
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)

        assert result == log_file
        assert handler_count == 2
        assert "hello log" in log_file.read_text(encoding="utf-8")
