"""
Groups a user's direct messages into conversation summaries.

Pure functions only: the caller fetches the message feed (see
``MessageService.get_feed``) and the counterpart profiles.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional


def counterpart_of(message: Mapping[str, Any], viewer_id: str) -> Optional[str]:
    """Return the other participant of ``message``, or None if the viewer is not in it."""
    sender = str(message["sender"])
    receiver = str(message["receiver"])

    if sender == viewer_id:
        return receiver
    if receiver == viewer_id:
        return sender
    return None


def aggregate_conversations(
    messages: Iterable[Mapping[str, Any]],
    viewer_id: str,
    users: Optional[Mapping[str, Mapping[str, Any]]] = None,
) -> List[Dict[str, Any]]:
    """
    Build one summary per counterpart from a flat message feed.

    Args:
        messages: Message dicts with ``sender``, ``receiver``, ``createdAt``,
            ``isRead`` and optionally ``deletedBy``, in feed order
        viewer_id: The user the conversations are listed for
        users: Optional profiles keyed by user id, attached as ``counterpart``

    Returns:
        Dicts with ``counterpart``, ``lastMessage`` and ``unreadCount``,
        most recent conversation first. When two messages share a timestamp
        the one later in the feed counts as more recent.
    """
    viewer_id = str(viewer_id)
    users = users or {}
    threads: Dict[str, Dict[str, Any]] = {}

    for position, message in enumerate(messages):
        deleted_by = {str(uid) for uid in message.get("deletedBy") or []}
        if viewer_id in deleted_by:
            continue

        other = counterpart_of(message, viewer_id)
        if other is None:
            continue

        thread = threads.get(other)
        if thread is None:
            thread = threads[other] = {
                "last": message,
                "position": position,
                "unread": 0,
            }
        elif message["createdAt"] >= thread["last"]["createdAt"]:
            thread["last"] = message
            thread["position"] = position

        if str(message["receiver"]) == viewer_id and not message.get("isRead", False):
            thread["unread"] += 1

    ordered = sorted(
        threads.items(),
        key=lambda item: (item[1]["last"]["createdAt"], item[1]["position"]),
        reverse=True,
    )

    conversations = []
    for other, thread in ordered:
        profile = users.get(other)
        counterpart = dict(profile) if profile else {}
        counterpart["id"] = other
        conversations.append({
            "counterpart": counterpart,
            "lastMessage": thread["last"],
            "unreadCount": thread["unread"],
        })

    return conversations
