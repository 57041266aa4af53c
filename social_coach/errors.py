"""
例外定義
"""


class CoachError(Exception):
    """アプリケーション共通の基底例外"""


class ReasoningServiceError(CoachError):
    """推論サービス（LLM）の呼び出しに失敗した"""


class ReasoningConnectionError(ReasoningServiceError):
    """推論サービスに接続できない、またはタイムアウトした"""


class ProgressStoreError(CoachError):
    """進捗データの書き込みに失敗した"""
