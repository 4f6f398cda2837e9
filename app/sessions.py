from enum import Enum

from app.order_parser import PendingOrder


class ChatState(str, Enum):
    IDLE = "idle"
    AWAITING_IMEI = "awaiting_imei"


class SessionStore:
    """Pending orders per chat, kept in memory for the lifetime of the process.

    At most one order per chat; a newer order replaces the older one.
    Nothing expires.
    """

    def __init__(self) -> None:
        self._pending: dict[int, PendingOrder] = {}

    def get(self, chat_id: int) -> PendingOrder | None:
        return self._pending.get(chat_id)

    def put(self, chat_id: int, order: PendingOrder) -> None:
        self._pending[chat_id] = order

    def pop(self, chat_id: int) -> PendingOrder | None:
        return self._pending.pop(chat_id, None)

    def state(self, chat_id: int) -> ChatState:
        if chat_id in self._pending:
            return ChatState.AWAITING_IMEI
        return ChatState.IDLE

    def __len__(self) -> int:
        return len(self._pending)
