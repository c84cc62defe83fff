"""Messages - conversations between buyers and agents."""

import asyncio
import uuid
from typing import Optional
from idrhub.models.message import Conversation, Message
from idrhub.models.user import Viewer
from idrhub.services.realtime import ChangeFeed, Subscription
from idrhub.services.supabase_client import SupabaseClient
from idrhub.utils.errors import AuthenticationRequired, PreconditionError, SupabaseError
from idrhub.utils.logging import (
    get_structured_logger,
    log_timing,
    mask_user_id,
    sanitize_message_text,
)

logger = get_structured_logger(__name__)

MESSAGE_SELECT = (
    "*, sender:users!messages_sender_id_fkey(*), "
    "recipient:users!messages_recipient_id_fkey(*)"
)


def group_conversations(rows: list[dict], viewer_id: str) -> list[Conversation]:
    """Group messages (newest first) into conversations, newest conversation first."""
    conversations: dict[str, Conversation] = {}
    for row in rows:
        message = Message.model_validate(row)
        conversation = conversations.get(message.conversation_id)
        if conversation is None:
            other = message.recipient if message.sender_id == viewer_id else message.sender
            conversation = Conversation(
                id=message.conversation_id,
                participant=other,
                last_message=message,
                property_id=message.property_id,
            )
            conversations[message.conversation_id] = conversation
        if message.recipient_id == viewer_id and not message.read:
            conversation.unread_count += 1
    return list(conversations.values())


class MessagesStore:
    """Conversation list and the open thread for the signed-in viewer."""

    def __init__(self, viewer: Optional[Viewer], change_feed: Optional[ChangeFeed] = None):
        self.viewer = viewer
        self.conversations: list[Conversation] = []
        self.messages: list[Message] = []
        self.loading = True
        self.error: Optional[str] = None

        self._change_feed = change_feed or ChangeFeed()
        self._subscriptions: list[Subscription] = []
        self._refetch_tasks: set[asyncio.Task] = set()
        self._closed = False

    async def start(self) -> None:
        if self.viewer is None:
            self.loading = False
            return
        await self.fetch_conversations()
        await self._subscribe()

    async def fetch_conversations(self) -> None:
        if self.viewer is None or self._closed:
            return

        viewer_id = self.viewer.id
        self.loading = True
        self.error = None
        try:
            with log_timing("fetch_conversations", logger=logger, user_id=mask_user_id(viewer_id)):
                async with SupabaseClient() as client:
                    result = (
                        client.table("messages")
                        .select(MESSAGE_SELECT)
                        .or_(f"sender_id.eq.{viewer_id},recipient_id.eq.{viewer_id}")
                        .order("created_at", desc=True)
                        .execute()
                    )
            conversations = group_conversations(result.data or [], viewer_id)
        except Exception as e:
            logger.error("Error fetching conversations", user_id=mask_user_id(viewer_id), error=str(e))
            self.error = str(e) or "An error occurred"
            self.loading = False
            return

        if not self._closed:
            self.conversations = conversations
            self.loading = False

    async def fetch_messages(self, conversation_id: str) -> None:
        """Load one thread oldest first and mark the viewer's incoming messages read."""
        if self.viewer is None or self._closed:
            return

        try:
            async with SupabaseClient() as client:
                result = (
                    client.table("messages")
                    .select(MESSAGE_SELECT)
                    .eq("conversation_id", conversation_id)
                    .order("created_at")
                    .execute()
                )
                self.messages = [Message.model_validate(row) for row in result.data or []]

                (
                    client.table("messages")
                    .update({"read": True})
                    .eq("conversation_id", conversation_id)
                    .eq("recipient_id", self.viewer.id)
                    .execute()
                )
        except Exception as e:
            logger.error(
                "Error fetching messages",
                conversation_id=conversation_id,
                error=str(e)
            )
            self.error = str(e) or "An error occurred"

    def _check_can_send(self, content: str) -> Viewer:
        if self.viewer is None:
            raise AuthenticationRequired("Please sign in to send messages")
        if not content or not content.strip():
            raise PreconditionError("Message cannot be empty")
        return self.viewer

    async def _deliver(
        self,
        recipient_id: str,
        content: str,
        conversation_id: str,
        property_id: Optional[str],
        notification_title: str,
        notification_text: str,
    ) -> None:
        viewer = self.viewer
        async with SupabaseClient() as client:
            try:
                client.table("messages").insert({
                    "conversation_id": conversation_id,
                    "sender_id": viewer.id,
                    "recipient_id": recipient_id,
                    "content": content,
                    "property_id": property_id,
                }).execute()

                client.table("notifications").insert({
                    "user_id": recipient_id,
                    "title": notification_title,
                    "message": notification_text,
                    "type": "info",
                    "metadata": {
                        "sender_id": viewer.id,
                        "conversation_id": conversation_id,
                        "property_id": property_id,
                    },
                }).execute()
            except Exception as e:
                logger.error(
                    "Error sending message",
                    conversation_id=conversation_id,
                    recipient_id=mask_user_id(recipient_id),
                    error=str(e)
                )
                raise SupabaseError(f"Failed to send message: {e}")

        logger.info(
            "Message sent",
            conversation_id=conversation_id,
            sender_id=mask_user_id(viewer.id),
            recipient_id=mask_user_id(recipient_id),
            message_preview=sanitize_message_text(content, max_length=100)
        )

    async def send_message(
        self,
        recipient_id: str,
        content: str,
        conversation_id: Optional[str] = None,
        property_id: Optional[str] = None,
    ) -> str:
        """Send a message, starting a new conversation when none is given."""
        viewer = self._check_can_send(content)
        final_conversation_id = conversation_id or str(uuid.uuid4())

        await self._deliver(
            recipient_id,
            content,
            final_conversation_id,
            property_id,
            "New Message",
            f"You have a new message from {viewer.full_name or 'a user'}",
        )

        await self.fetch_conversations()
        if conversation_id:
            await self.fetch_messages(conversation_id)
        return final_conversation_id

    async def send_property_inquiry(self, property_id: str, agent_id: str, message: str) -> str:
        """Open a new conversation with a listing's agent."""
        viewer = self._check_can_send(message)
        conversation_id = str(uuid.uuid4())

        await self._deliver(
            agent_id,
            message,
            conversation_id,
            property_id,
            "Property Inquiry",
            f"{viewer.full_name or 'A user'} is interested in your property",
        )

        await self.fetch_conversations()
        return conversation_id

    def _on_change(self, payload: dict) -> None:
        task = asyncio.create_task(self.fetch_conversations())
        self._refetch_tasks.add(task)
        task.add_done_callback(self._refetch_tasks.discard)

    async def _subscribe(self) -> None:
        # postgres_changes filters take a single column, so one channel per side
        for column in ("sender_id", "recipient_id"):
            try:
                subscription = await self._change_feed.subscribe(
                    f"messages:{column}",
                    "messages",
                    self._on_change,
                    filter=f"{column}=eq.{self.viewer.id}",
                )
            except SupabaseError as e:
                logger.warning("Messages realtime unavailable", error=str(e))
                continue
            self._subscriptions.append(subscription)

    async def close(self) -> None:
        self._closed = True
        for subscription in self._subscriptions:
            await subscription.unsubscribe()
        self._subscriptions = []
        for task in list(self._refetch_tasks):
            task.cancel()
        if self._refetch_tasks:
            await asyncio.gather(*self._refetch_tasks, return_exceptions=True)
