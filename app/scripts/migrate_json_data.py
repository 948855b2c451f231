# app/scripts/migrate_json_data.py
"""
Import data written by the original flat-file server into the configured store.

    python -m app.scripts.migrate_json_data SOURCE_DIR

Reads users.json, categories.json, prompts.json (reviews embedded per prompt)
and comments.json when present. Records whose id already exists are skipped,
so the import can be re-run.
"""
import argparse
import asyncio
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import ValidationError

from app.core.config import settings
from app.models.auth_models import UserRecord, default_avatar
from app.models.category_models import CategoryRecord
from app.models.comment_models import CommentRecord
from app.models.prompt_models import PromptRecord
from app.models.review_models import ReviewRecord
from app.services.database.base_store import PromptLibraryStore
from app.services.database.store_factory import build_store
from app.services.prompt_text_services import extract_placeholders
from app.services.review_services import recompute_prompt_rating

logger = logging.getLogger(__name__)


@dataclass
class MigrationReport:
    created: Dict[str, int] = field(default_factory=lambda: {
        "users": 0, "categories": 0, "prompts": 0, "reviews": 0, "comments": 0,
    })
    skipped: Dict[str, int] = field(default_factory=lambda: {
        "users": 0, "categories": 0, "prompts": 0, "reviews": 0, "comments": 0,
    })
    errors: List[str] = field(default_factory=list)


def read_collection(source_dir: Path, name: str) -> List[dict]:
    path = source_dir / f"{name}.json"
    if not path.exists():
        logger.info(f"{path.name} not found, skipping")
        return []
    with open(path, "r", encoding="utf-8") as f:
        documents = json.load(f)
    if not isinstance(documents, list):
        raise ValueError(f"{path} does not contain a JSON array")
    logger.info(f"Found {len(documents)} {name}")
    return documents


def user_from_document(document: dict) -> UserRecord:
    document = dict(document)
    password = document.pop("password", None)
    if password and not document.get("passwordHash") and str(password).startswith("$2"):
        document["passwordHash"] = password
    document["email"] = str(document.get("email", "")).strip().lower()
    document.setdefault("name", document["email"].split("@")[0])
    document.setdefault("avatar", default_avatar(document["name"]))
    return UserRecord.model_validate(document)


async def migrate_users(store: PromptLibraryStore, documents: List[dict], report: MigrationReport) -> Dict[str, str]:
    """Returns email -> user id for review attribution."""
    by_email: Dict[str, str] = {}
    for document in documents:
        try:
            user = user_from_document(document)
        except ValidationError as e:
            report.errors.append(f"user {document.get('id')}: {e}")
            continue
        existing = await store.get_user(user.id) or await store.get_user_by_email(user.email)
        if existing:
            report.skipped["users"] += 1
            by_email[existing.email] = existing.id
            continue
        await store.create_user(user)
        by_email[user.email] = user.id
        report.created["users"] += 1
    return by_email


async def migrate_categories(store: PromptLibraryStore, documents: List[dict], report: MigrationReport):
    for document in documents:
        try:
            category = CategoryRecord.model_validate(document)
        except ValidationError as e:
            report.errors.append(f"category {document.get('id')}: {e}")
            continue
        if await store.get_category(category.id) or await store.get_category_by_name(category.name):
            report.skipped["categories"] += 1
            continue
        await store.create_category(category)
        report.created["categories"] += 1


def review_from_document(document: dict, prompt_id: str, users_by_email: Dict[str, str]) -> ReviewRecord:
    document = {**document, "promptId": prompt_id}
    email = str(document.get("userEmail") or "").lower()
    if not document.get("userId") and email in users_by_email:
        document["userId"] = users_by_email[email]
    return ReviewRecord.model_validate(document)


async def migrate_prompts(
    store: PromptLibraryStore,
    documents: List[dict],
    users_by_email: Dict[str, str],
    report: MigrationReport,
):
    for document in documents:
        try:
            prompt = PromptRecord.model_validate(document)
        except ValidationError as e:
            report.errors.append(f"prompt {document.get('id')}: {e}")
            continue

        if await store.get_prompt(prompt.id):
            report.skipped["prompts"] += 1
        else:
            category = await store.get_category_by_name(prompt.category)
            changes = {"category_id": category.id if category else None}
            if not prompt.placeholders:
                changes["placeholders"] = extract_placeholders(prompt.prompt)
            await store.create_prompt(prompt.model_copy(update=changes))
            report.created["prompts"] += 1

        for review_document in document.get("reviews") or []:
            try:
                review = review_from_document(review_document, prompt.id, users_by_email)
            except ValidationError as e:
                report.errors.append(f"review {review_document.get('id')}: {e}")
                continue
            if await store.get_review(review.id):
                report.skipped["reviews"] += 1
                continue
            await store.create_review(review)
            report.created["reviews"] += 1

        await recompute_prompt_rating(store, prompt.id)


async def migrate_comments(store: PromptLibraryStore, documents: List[dict], report: MigrationReport):
    # Parents before replies
    pending = sorted(documents, key=lambda d: str(d.get("createdAt") or ""))
    for document in pending:
        try:
            comment = CommentRecord.model_validate(document)
        except ValidationError as e:
            report.errors.append(f"comment {document.get('id')}: {e}")
            continue
        if await store.get_comment(comment.id) or await store.get_prompt(comment.prompt_id) is None:
            report.skipped["comments"] += 1
            continue
        if comment.parent_id and await store.get_comment(comment.parent_id) is None:
            report.errors.append(f"comment {comment.id}: parent comment {comment.parent_id} not found")
            continue
        await store.create_comment(comment)
        report.created["comments"] += 1


async def migrate(store: PromptLibraryStore, source_dir: Path) -> MigrationReport:
    report = MigrationReport()
    users_by_email = await migrate_users(store, read_collection(source_dir, "users"), report)
    await migrate_categories(store, read_collection(source_dir, "categories"), report)
    await migrate_prompts(store, read_collection(source_dir, "prompts"), users_by_email, report)
    await migrate_comments(store, read_collection(source_dir, "comments"), report)
    return report


async def main(argv: Optional[list] = None) -> MigrationReport:
    parser = argparse.ArgumentParser(description="Import flat-file prompt library data into the configured store.")
    parser.add_argument("source_dir", help="Directory holding users.json, categories.json, prompts.json, comments.json")
    args = parser.parse_args(argv)

    store = build_store(settings)
    await store.connect()
    try:
        report = await migrate(store, Path(args.source_dir))
    finally:
        await store.close()

    for name, count in report.created.items():
        logger.info(f"{name}: {count} imported, {report.skipped[name]} already present")
    for error in report.errors:
        logger.warning(f"Skipped invalid record: {error}")
    return report


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
    asyncio.run(main())
