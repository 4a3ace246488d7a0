# -*- coding: utf-8 -*-
"""構造化ログモジュール.

テキスト形式または JSON 形式のログ出力を設定します。

特徴:
- JSON 形式出力（ログ分析ツール互換）
- マスキング（認証トークン・パスワードの隠蔽）
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any


DEFAULT_MASK_PATTERNS = ("password", "token", "authorization", "secret")

# LogRecord 標準属性（extra として出力しない）
_RESERVED_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "exc_info",
        "exc_text",
        "thread",
        "threadName",
        "taskName",
        "message",
    }
)


class JSONFormatter(logging.Formatter):
    """JSON 形式フォーマッター."""

    def __init__(self, mask_patterns: tuple[str, ...] | list[str] | None = None) -> None:
        """初期化.

        Args:
            mask_patterns: マスキング対象のキー（部分一致、大文字小文字無視）
        """
        super().__init__()
        patterns = DEFAULT_MASK_PATTERNS if mask_patterns is None else mask_patterns
        self._mask_patterns = [p.lower() for p in patterns]

    def format(self, record: logging.LogRecord) -> str:
        """ログレコードを JSON 形式に変換."""
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = self._mask_value(key, value)

        return json.dumps(log_data, ensure_ascii=False, default=str)

    def _mask_value(self, key: str, value: Any) -> Any:
        """機密情報をマスキング."""
        key_lower = key.lower()
        for pattern in self._mask_patterns:
            if pattern in key_lower:
                return "***MASKED***"
        return value


class TextFormatter(logging.Formatter):
    """テキスト形式フォーマッター."""

    def __init__(self) -> None:
        """初期化."""
        super().__init__(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


def setup_logging(level: str = "INFO", format: str = "text") -> None:
    """ルートロガーを設定.

    Args:
        level: ログレベル（DEBUG/INFO/WARNING/ERROR）
        format: 出力形式（json / text）
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    if format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(TextFormatter())
    root_logger.addHandler(handler)


__all__ = [
    "DEFAULT_MASK_PATTERNS",
    "JSONFormatter",
    "TextFormatter",
    "setup_logging",
]
