"""Collects transient notices raised by page controllers."""

import logging
from idrhub.models.notice import Notice, NoticeLevel

logger = logging.getLogger(__name__)


class Notifier:
    def __init__(self):
        self.notices: list[Notice] = []

    def _push(self, level: NoticeLevel, message: str) -> Notice:
        notice = Notice(level=level, message=message)
        self.notices.append(notice)
        logger.debug(f"Notice: {level.value}: {message}")
        return notice

    def success(self, message: str) -> Notice:
        return self._push(NoticeLevel.SUCCESS, message)

    def info(self, message: str) -> Notice:
        return self._push(NoticeLevel.INFO, message)

    def error(self, message: str) -> Notice:
        return self._push(NoticeLevel.ERROR, message)

    def clear(self) -> None:
        self.notices.clear()
