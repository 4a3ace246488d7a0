"""遅延実行スケジューラー.

通知の自動消去などの時限処理に使用する。取り消し可能なハンドルを返す。

- AsyncioScheduler: 実行中のイベントループの call_later を使用
- ManualScheduler: 明示的に時間を進めるテスト用スケジューラー
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol


logger = logging.getLogger(__name__)


class ScheduledHandle(Protocol):
    """取り消し可能な予約ハンドル."""

    def cancel(self) -> None:
        """予約を取り消す."""
        ...


class Scheduler(Protocol):
    """スケジューラープロトコル."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledHandle | None:
        """delay 秒後に callback を実行するよう予約."""
        ...


class AsyncioScheduler:
    """asyncio イベントループによるスケジューラー.

    実行中のループがない場合は予約せず None を返す（警告ログを出力）。
    """

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle | None:
        """delay 秒後に callback を実行するよう予約."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(f"No running event loop; callback not scheduled (delay={delay}s)")
            return None
        return loop.call_later(delay, callback)


@dataclass
class ManualHandle:
    """ManualScheduler の予約ハンドル."""

    when: float
    callback: Callable[[], None]
    cancelled: bool = False
    fired: bool = False

    def cancel(self) -> None:
        """予約を取り消す."""
        self.cancelled = True


@dataclass
class ManualScheduler:
    """手動で時間を進めるスケジューラー.

    Example:
        >>> scheduler = ManualScheduler()
        >>> scheduler.call_later(3.0, lambda: print("fired"))
        >>> scheduler.advance(3.0)
        fired
    """

    now: float = 0.0
    handles: list[ManualHandle] = field(default_factory=list)

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualHandle:
        """delay 秒後に callback を実行するよう予約."""
        handle = ManualHandle(when=self.now + delay, callback=callback)
        self.handles.append(handle)
        return handle

    def advance(self, seconds: float) -> int:
        """時間を進め、期限到来した予約を期限順に実行.

        Args:
            seconds: 進める秒数

        Returns:
            実行した予約の数
        """
        target = self.now + seconds
        fired = 0
        while True:
            due = [
                h for h in self.handles
                if not h.cancelled and not h.fired and h.when <= target
            ]
            if not due:
                break
            handle = min(due, key=lambda h: h.when)
            self.now = handle.when
            handle.fired = True
            handle.callback()
            fired += 1
        self.now = target
        return fired

    @property
    def pending(self) -> int:
        """未実行の予約数."""
        return sum(1 for h in self.handles if not h.cancelled and not h.fired)
