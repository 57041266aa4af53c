"""
進捗データ保存サービス
ローカルファイル（1つのキーに対応するスロット）に進捗データを保存する
"""
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from social_coach.config import APP_DATA_DIR, PROGRESS_STORAGE_KEY
from social_coach.errors import ProgressStoreError
from social_coach.models.schemas import Feedback, ProgressData

logger = logging.getLogger(__name__)

# 現在の保存形式のバージョン
CURRENT_VERSION = 1


class JsonFileSlot:
    """1つのキーに対応するJSONファイルを読み書きするクラス"""

    def __init__(self, directory: Path, key: str) -> None:
        self.directory: Path = directory
        self.key: str = key

    @property
    def path(self) -> Path:
        return self.directory / f"{self.key}.json"

    def read(self) -> str | None:
        """保存されている内容を返す（存在しない場合はNone）"""
        if not self.path.exists():
            return None
        with open(self.path, "r", encoding="utf-8") as f:
            return f.read()

    def write(self, text: str) -> None:
        """
        内容を丸ごと置き換える

        一時ファイルに書き込んでから置き換えるため、途中の状態は残らない
        """
        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{self.key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise


class ProgressStore:
    """進捗データの読み込み・追加・リセットを行うサービスクラス

    永続化された進捗データを変更するのはこのクラスのappendとresetだけ
    """

    def __init__(self, slot: JsonFileSlot | None = None) -> None:
        """
        初期化処理

        Args:
            slot: 保存先スロット（省略時はアプリケーションデータディレクトリ）
        """
        self.slot: JsonFileSlot = slot or JsonFileSlot(APP_DATA_DIR, PROGRESS_STORAGE_KEY)
        self._current: ProgressData | None = None

    def load(self) -> ProgressData:
        """
        進捗データを読み込む

        存在しない、または壊れている場合は空の進捗データを返す（例外は送出しない）

        Returns:
            進捗データ
        """
        try:
            text: str | None = self.slot.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("進捗データの読み込みに失敗しました: %s", e)
            text = None

        progress: ProgressData = ProgressData()
        if text is not None:
            progress = self._parse(text) or ProgressData()
        self._current = progress
        return progress

    def _parse(self, text: str) -> ProgressData | None:
        try:
            raw: Any = json.loads(text)
        except ValueError as e:
            logger.warning("進捗データが壊れているため初期化します: %s", e)
            return None
        if isinstance(raw, dict) and raw.get("version", CURRENT_VERSION) != CURRENT_VERSION:
            logger.warning("未対応の進捗データのバージョンです: %s", raw.get("version"))
            return None
        try:
            return ProgressData.model_validate(raw)
        except ValidationError as e:
            logger.warning("進捗データの形式が不正なため初期化します: %s", e)
            return None

    def append(self, feedback: Feedback, user_message_count: int, scenario_id: str) -> ProgressData:
        """
        フィードバックを履歴の先頭に追加し、シナリオの発言数を加算する

        Args:
            feedback: 保存するフィードバック
            user_message_count: 今回のセッションでのユーザー発言数
            scenario_id: シナリオID

        Returns:
            更新後の進捗データ
        """
        if user_message_count < 0:
            raise ValueError(f"user_message_count must be >= 0: {user_message_count}")

        current: ProgressData = self.load()
        interactions = dict(current.interactions)
        interactions[scenario_id] = interactions.get(scenario_id, 0) + user_message_count
        updated = ProgressData(
            interactions=interactions,
            feedback_history=[feedback, *current.feedback_history],
        )
        self._write(updated)
        logger.info(
            "進捗データを更新しました: scenario=%s sessions=%d",
            scenario_id,
            len(updated.feedback_history),
        )
        return updated

    def reset(self) -> ProgressData:
        """
        進捗データを空にする（元に戻せない）

        Returns:
            空の進捗データ
        """
        empty = ProgressData()
        self._write(empty)
        logger.info("進捗データをリセットしました")
        return empty

    def snapshot(self) -> ProgressData:
        """最後に読み書きした進捗データを返す（未読み込みの場合は読み込む）"""
        if self._current is None:
            return self.load()
        return self._current

    def _write(self, progress: ProgressData) -> None:
        try:
            self.slot.write(progress.model_dump_json(indent=2))
        except OSError as e:
            logger.error("進捗データの保存に失敗しました: %s", e)
            raise ProgressStoreError(f"進捗データの保存に失敗しました: {e}") from e
        self._current = progress
