"""Messages page - conversation list plus composer."""

from typing import Optional
from idrhub.models.user import Viewer
from idrhub.services.messages import MessagesStore
from idrhub.services.notifier import Notifier
from idrhub.utils.errors import PreconditionError, SupabaseError


class MessagesPage:
    def __init__(self, viewer: Optional[Viewer], store: Optional[MessagesStore] = None):
        self.store = store or MessagesStore(viewer)
        self.notifier = Notifier()
        self.selected_conversation: Optional[str] = None

    async def load(self) -> None:
        await self.store.start()

    async def open_conversation(self, conversation_id: str) -> None:
        self.selected_conversation = conversation_id
        await self.store.fetch_messages(conversation_id)

    async def send(self, recipient_id: str, content: str) -> Optional[str]:
        """Send into the open conversation. Returns its id, or None on failure."""
        try:
            conversation_id = await self.store.send_message(
                recipient_id, content, conversation_id=self.selected_conversation
            )
        except PreconditionError as e:
            self.notifier.error(str(e))
            return None
        except SupabaseError:
            self.notifier.error("Failed to send message")
            return None
        self.selected_conversation = conversation_id
        return conversation_id

    async def close(self) -> None:
        await self.store.close()
