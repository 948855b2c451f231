# app/services/comment_services.py
from typing import List

from app.core.exceptions import NotFoundError, PermissionDeniedError, ValidationFailedError
from app.models.auth_models import UserRecord
from app.models.comment_models import CommentCreate, CommentNode, CommentRecord, CommentUpdate
from app.models.common import utc_now
from app.services.database.base_store import PromptLibraryStore
from app.services.thread_services import build_thread, subtree_ids


async def get_comment_or_404(store: PromptLibraryStore, comment_id: str) -> CommentRecord:
    comment = await store.get_comment(comment_id)
    if comment is None:
        raise NotFoundError("Comment not found")
    return comment


async def list_comment_threads(store: PromptLibraryStore, prompt_id: str) -> List[CommentNode]:
    if await store.get_prompt(prompt_id) is None:
        raise NotFoundError("Prompt not found")
    return build_thread(await store.list_comments(prompt_id), CommentNode, "parent_id")


async def create_comment(
    store: PromptLibraryStore, prompt_id: str, user: UserRecord, data: CommentCreate
) -> CommentRecord:
    if await store.get_prompt(prompt_id) is None:
        raise NotFoundError("Prompt not found")
    if data.parent_id:
        parent = await store.get_comment(data.parent_id)
        if parent is None or parent.prompt_id != prompt_id:
            raise ValidationFailedError("Parent comment not found for this prompt")

    comment = CommentRecord(
        prompt_id=prompt_id,
        user_id=user.id,
        user_name=user.name,
        content=data.content,
        parent_id=data.parent_id,
    )
    return await store.create_comment(comment)


async def update_comment(
    store: PromptLibraryStore, comment_id: str, user: UserRecord, data: CommentUpdate
) -> CommentRecord:
    comment = await get_comment_or_404(store, comment_id)
    if comment.user_id != user.id:
        raise PermissionDeniedError("You can only edit your own comments")
    return await store.update_comment(comment_id, {"content": data.content, "updated_at": utc_now()})


async def delete_comment(store: PromptLibraryStore, comment_id: str, user: UserRecord) -> int:
    """Deletes the comment and every reply beneath it; returns how many went."""
    comment = await get_comment_or_404(store, comment_id)
    if comment.user_id != user.id:
        raise PermissionDeniedError("You can only delete your own comments")
    thread = await store.list_comments(comment.prompt_id)
    return await store.delete_comments(subtree_ids(thread, comment.id, "parent_id"))
