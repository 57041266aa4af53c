"""
推論サービス（OpenAI互換API）クライアント
"""

import logging
import os

import openai
from openai import AsyncOpenAI

from social_coach.config import DEFAULT_MODEL, REASONING_MAX_RETRIES, REASONING_TIMEOUT_SECONDS
from social_coach.errors import ReasoningConnectionError, ReasoningServiceError

logger = logging.getLogger(__name__)


class ReasoningClient:
    """OpenAI APIを使用してJSON形式の判定を取得するクライアントクラス"""

    def __init__(
        self,
        timeout: float = REASONING_TIMEOUT_SECONDS,
        max_retries: int = REASONING_MAX_RETRIES,
    ) -> None:
        """
        初期化処理
        環境変数からAPIキーを取得し、OpenAIクライアントを初期化する

        Args:
            timeout: 1リクエストあたりのタイムアウト（秒）
            max_retries: 接続エラー時の再試行回数
        """
        # OPENAI_API_KEYまたはOPENAI_APIのどちらかをサポート
        api_key: str | None = os.getenv("OPENAI_API_KEY") or os.getenv("OPENAI_API")
        if not api_key:
            raise ValueError(
                "OPENAI_API_KEYまたはOPENAI_API環境変数が設定されていません"
            )
        # OpenAI互換のエンドポイントを使う場合はOPENAI_BASE_URLを設定する
        base_url: str | None = os.getenv("OPENAI_BASE_URL") or None
        self.client: AsyncOpenAI = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=max_retries,
        )
        self.model: str = os.getenv("OPENAI_MODEL", DEFAULT_MODEL)

    async def complete_json(self, system_prompt: str, user_prompt: str) -> str:
        """
        プロンプトを送信し、JSON形式の応答テキストを取得

        Args:
            system_prompt: システムプロンプト
            user_prompt: ユーザープロンプト

        Returns:
            応答テキスト（JSONとして正しいかは検証しない）

        Raises:
            ReasoningConnectionError: 接続できない、またはタイムアウト
            ReasoningServiceError: その他のAPIエラー、または空の応答
        """
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                response_format={"type": "json_object"},  # JSON形式で返すことを強制
            )
        except openai.APIConnectionError as e:
            # APITimeoutErrorもここに含まれる
            raise ReasoningConnectionError(f"推論サービスに接続できません: {e}") from e
        except openai.OpenAIError as e:
            raise ReasoningServiceError(f"推論サービスのエラー: {e}") from e

        content: str | None = response.choices[0].message.content if response.choices else None
        if not content:
            raise ReasoningServiceError("レスポンスが空")
        logger.debug("推論サービスの応答を受信しました (%d文字)", len(content))
        return content
