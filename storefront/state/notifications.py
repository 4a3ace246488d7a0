"""通知キュー.

単一スロットの一時通知。新しい通知は現在の通知を置き換え、
各呼び出しは自分自身の消去タイマーを予約する。

タイマーは無条件にスロットを消去する（後勝ち）。先に予約されたタイマーが
後から表示された通知を早めに消す場合があるが、これは既定の挙動として維持する。
correlated_clear=True の場合のみ、タイマーは自分の通知だけを消去する。
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable

from storefront.state.models import Notification, NotificationType
from storefront.state.scheduler import AsyncioScheduler, ScheduledHandle, Scheduler


logger = logging.getLogger(__name__)

DEFAULT_DURATION = 3.0


class NotificationQueue:
    """単一スロット通知キュー.

    Example:
        >>> queue = NotificationQueue(on_change=print)
        >>> queue.notify("Saved!")
        >>> queue.current.message
        'Saved!'
    """

    def __init__(
        self,
        on_change: Callable[[Notification | None], None] | None = None,
        scheduler: Scheduler | None = None,
        duration: float = DEFAULT_DURATION,
        correlated_clear: bool = False,
    ) -> None:
        """初期化.

        Args:
            on_change: スロットが変化したときのコールバック
            scheduler: 消去タイマーのスケジューラー
            duration: 表示時間（秒）
            correlated_clear: タイマーが自分の通知のみ消去するか
        """
        self._on_change = on_change
        self._scheduler = scheduler or AsyncioScheduler()
        self._duration = duration
        self._correlated_clear = correlated_clear
        self._current: Notification | None = None
        self._handles: dict[int, ScheduledHandle] = {}
        self._sequence = itertools.count()

    @property
    def current(self) -> Notification | None:
        """現在表示中の通知."""
        return self._current

    @property
    def duration(self) -> float:
        """表示時間（秒）."""
        return self._duration

    def notify(
        self,
        message: str,
        severity: NotificationType | str = NotificationType.SUCCESS,
    ) -> Notification:
        """通知を表示し、消去を予約.

        Args:
            message: メッセージ
            severity: 重要度（success / error / info）

        Returns:
            表示した通知
        """
        notification = Notification(message=message, type=NotificationType(severity))
        self._set(notification)

        seq = next(self._sequence)
        handle = self._scheduler.call_later(
            self._duration, lambda: self._expire(seq, notification)
        )
        if handle is not None:
            self._handles[seq] = handle
        return notification

    def clear(self) -> None:
        """スロットを即座に空にする."""
        self._set(None)

    def close(self) -> None:
        """未実行の消去タイマーを全て取り消す."""
        for handle in self._handles.values():
            handle.cancel()
        self._handles.clear()

    @property
    def pending_timers(self) -> int:
        """未実行の消去タイマー数."""
        return len(self._handles)

    def _expire(self, seq: int, notification: Notification) -> None:
        self._handles.pop(seq, None)
        if self._correlated_clear and self._current is not notification:
            return
        self._set(None)

    def _set(self, notification: Notification | None) -> None:
        if notification is None and self._current is None:
            return
        self._current = notification
        if notification is not None:
            logger.debug(f"notification [{notification.type.value}]: {notification.message}")
        if self._on_change is not None:
            self._on_change(notification)
