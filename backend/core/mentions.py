"""
Mention extraction for rich-text forum posts.

Forum content is stored as Tiptap editor JSON. Mentions are nodes of
type "mention" whose `attrs.id` holds the mentioned user's id.

Dependencies: json (stdlib)
System role: Finds users to notify when a post is created
"""

import json
from typing import Any


def extract_mentioned_user_ids(content: str) -> list[str]:
    """
    Collect mentioned user ids from Tiptap JSON content.

    Returns an empty list for plain text or malformed JSON. Ids are
    deduplicated in document order.
    """
    if not content.strip().startswith("{"):
        return []
    try:
        document = json.loads(content)
    except json.JSONDecodeError:
        return []

    ids: list[str] = []
    _collect(document, ids)
    return ids


def _collect(node: Any, ids: list[str]) -> None:
    if not isinstance(node, dict):
        return
    if node.get("type") == "mention":
        attrs = node.get("attrs") or {}
        mention_id = attrs.get("id")
        if isinstance(mention_id, str) and mention_id and mention_id not in ids:
            ids.append(mention_id)
    children = node.get("content")
    if isinstance(children, list):
        for child in children:
            _collect(child, ids)
