# app/scripts/retag_prompts.py
"""
Reclassify every prompt against the tag taxonomy and replace its tags.

    python -m app.scripts.retag_prompts [--dry-run] [--backup-dir DIR]

A JSON backup of all prompts is written before anything is changed.
"""
import argparse
import asyncio
import json
import logging
import time
from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from app.core.config import settings
from app.services.database.base_store import PromptLibraryStore
from app.services.database.store_factory import build_store
from app.services.tagging_services import classify_prompt

logger = logging.getLogger(__name__)

PROGRESS_EVERY = 20


@dataclass
class RetagResult:
    processed: int = 0
    updated: int = 0
    backup_path: Optional[Path] = None
    stats: Dict[str, Dict[str, int]] = field(default_factory=dict)


def write_backup(prompts: list, backup_dir: Path) -> Path:
    backup_dir.mkdir(parents=True, exist_ok=True)
    backup_path = backup_dir / f"prompts-backup-{int(time.time() * 1000)}.json"
    with open(backup_path, "w", encoding="utf-8") as f:
        json.dump([prompt.to_document() for prompt in prompts], f, indent=2, ensure_ascii=False)
    return backup_path


async def retag_prompts(store: PromptLibraryStore, backup_dir: Path, dry_run: bool = False) -> RetagResult:
    prompts = await store.list_prompts()
    result = RetagResult()
    logger.info(f"Processing {len(prompts)} prompts...")

    if not dry_run:
        result.backup_path = write_backup(prompts, backup_dir)
        logger.info(f"Backup created: {result.backup_path}")

    stats: Dict[str, Dict[str, int]] = defaultdict(lambda: defaultdict(int))
    for prompt in prompts:
        classification = classify_prompt(prompt)
        for dimension, tag in classification.items():
            stats[dimension][tag] += 1

        new_tags = list(classification.values())
        if not dry_run and new_tags != prompt.tags:
            await store.update_prompt(prompt.id, {"tags": new_tags})
            result.updated += 1

        result.processed += 1
        if result.processed % PROGRESS_EVERY == 0:
            logger.info(f"Processed {result.processed}/{len(prompts)} prompts...")

    result.stats = {dimension: dict(counts) for dimension, counts in stats.items()}
    return result


def log_stats(result: RetagResult):
    for dimension, counts in result.stats.items():
        logger.info(f"{dimension}:")
        for tag, count in sorted(counts.items()):
            logger.info(f"  {tag}: {count} prompts")
    logger.info(f"Total prompts processed: {result.processed}, retagged: {result.updated}")


async def main(argv=None):
    parser = argparse.ArgumentParser(description="Reclassify prompt tags with the keyword taxonomy.")
    parser.add_argument("--dry-run", action="store_true", help="Report the new tags without saving them")
    parser.add_argument("--backup-dir", default=settings.DATA_DIR, help="Where the prompts backup is written")
    args = parser.parse_args(argv)

    store = build_store(settings)
    await store.connect()
    try:
        result = await retag_prompts(store, Path(args.backup_dir), dry_run=args.dry_run)
    finally:
        await store.close()
    log_stats(result)
    return result


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
    asyncio.run(main())
