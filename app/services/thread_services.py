# app/services/thread_services.py
from typing import Dict, List, Type, TypeVar

NodeT = TypeVar("NodeT")


def build_thread(records: list, node_cls: Type[NodeT], parent_attr: str) -> List[NodeT]:
    """
    Nest flat records under their parents, keeping the input order at every level.
    Records whose parent is missing are treated as top-level.
    """
    nodes: Dict[str, NodeT] = {record.id: node_cls(**record.model_dump()) for record in records}
    roots: List[NodeT] = []
    for record in records:
        node = nodes[record.id]
        parent_id = getattr(record, parent_attr)
        parent = nodes.get(parent_id) if parent_id else None
        if parent is None or parent_id == record.id:
            roots.append(node)
        else:
            parent.replies.append(node)
    return roots


def subtree_ids(records: list, root_id: str, parent_attr: str) -> List[str]:
    """root_id followed by the ids of every descendant."""
    children: Dict[str, List[str]] = {}
    for record in records:
        parent_id = getattr(record, parent_attr)
        if parent_id:
            children.setdefault(parent_id, []).append(record.id)

    ids = []
    seen = set()
    pending = [root_id]
    while pending:
        current = pending.pop()
        if current in seen:
            continue
        seen.add(current)
        ids.append(current)
        pending.extend(children.get(current, []))
    return ids
