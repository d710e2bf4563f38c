"""댓글 트리 (Forest)

하나의 대상(subject)에 달린 댓글 트리 모음을 arena 형태로 표현한다.
- records: id → 레코드
- parents: id → 트리상의 실제 부모 id (루트는 None)
- children: id → 자식 id 튜플 (오래된 것 먼저)
- roots: 루트 id 튜플

모든 연산은 순수 함수이며 새 Forest를 반환한다 (입력 불변).
"""

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from vrsa_discussion.models.thread import CommentNode, CommentRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class Forest:
    """불변 댓글 forest (arena)"""

    records: Mapping[str, CommentRecord] = field(default_factory=dict)
    parents: Mapping[str, str | None] = field(default_factory=dict)
    children: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    roots: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # 외부에서 dict를 수정하지 못하도록 읽기 전용 뷰로 감싼다
        for name in ("records", "parents", "children"):
            value = getattr(self, name)
            if not isinstance(value, MappingProxyType):
                object.__setattr__(self, name, MappingProxyType(dict(value)))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Forest):
            return NotImplemented
        return (
            self.roots == other.roots
            and dict(self.records) == dict(other.records)
            and dict(self.parents) == dict(other.parents)
            and dict(self.children) == dict(other.children)
        )

    def __contains__(self, comment_id: object) -> bool:
        return comment_id in self.records

    def __len__(self) -> int:
        return len(self.records)

    def get(self, comment_id: str) -> CommentRecord | None:
        return self.records.get(comment_id)

    def parent_of(self, comment_id: str) -> str | None:
        return self.parents.get(comment_id)

    def children_of(self, comment_id: str) -> tuple[str, ...]:
        return self.children.get(comment_id, ())


EMPTY_FOREST = Forest()


def _sort_key(record: CommentRecord) -> tuple:
    return (record.created_at, record.id)


def build_forest(records: Iterable[CommentRecord]) -> Forest:
    """Flat 레코드 목록을 forest로 변환 (무제한 depth 지원)

    1. id → 레코드 인덱싱 (중복 id는 처음 것 유지)
    2. 부모가 집합 안에 있고 같은 subject면 자식으로, 아니면 루트로 배치
    3. 사이클에 갇혀 루트에서 도달할 수 없는 레코드는 루트로 승격

    루트와 모든 자식 목록은 created_at 오름차순.
    """
    index: dict[str, CommentRecord] = {}
    for record in records:
        if record.id in index:
            logger.debug(f"[build_forest] Duplicate comment id ignored: {record.id}")
            continue
        index[record.id] = record

    ordered = sorted(index.values(), key=_sort_key)

    parents: dict[str, str | None] = {}
    children: dict[str, list[str]] = {record.id: [] for record in ordered}
    roots: list[str] = []

    for record in ordered:
        parent = index.get(record.parent_id) if record.parent_id else None
        if (
            parent is not None
            and parent.id != record.id
            and parent.subject_id == record.subject_id
        ):
            parents[record.id] = parent.id
            children[parent.id].append(record.id)
        else:
            parents[record.id] = None
            roots.append(record.id)

    # 사이클 방어: 도달 불가능한 노드를 루트로 승격
    reachable = set(_walk(roots, children))
    if len(reachable) != len(ordered):
        for record in ordered:
            if record.id in reachable:
                continue
            parent_id = parents[record.id]
            if parent_id is not None:
                children[parent_id].remove(record.id)
            parents[record.id] = None
            roots.append(record.id)
            reachable.update(_walk([record.id], children))
            logger.warning(f"[build_forest] Parent cycle broken at comment={record.id}")

    return Forest(
        records=index,
        parents=parents,
        children={cid: tuple(ids) for cid, ids in children.items()},
        roots=tuple(roots),
    )


def _walk(start: Iterable[str], children: Mapping[str, Iterable[str]]) -> Iterator[str]:
    """깊이 우선(전위) 순회로 id 나열"""
    stack = list(reversed(list(start)))
    while stack:
        comment_id = stack.pop()
        yield comment_id
        stack.extend(reversed(list(children.get(comment_id, ()))))


def _flatten_node(
    node: CommentNode, parent_id: str | None
) -> list[tuple[CommentRecord, str | None, tuple[str, ...]]]:
    """중첩 노드를 (레코드, 부모 id, 자식 id 튜플) 목록으로 평탄화"""
    flat = []
    stack = [(node, parent_id)]
    while stack:
        current, current_parent = stack.pop()
        flat.append(
            (current.record, current_parent, tuple(child.id for child in current.replies))
        )
        stack.extend((child, current.id) for child in reversed(current.replies))
    return flat


def _attach(forest: Forest, parent_id: str | None, node: CommentNode) -> Forest:
    flat = _flatten_node(node, parent_id)
    if any(record.id in forest.records for record, _, _ in flat):
        # 이미 존재하는 id 삽입은 무시 (중복 삽입 멱등성)
        logger.debug(f"[insert_reply] Comment already present: {node.id}")
        return forest

    records = dict(forest.records)
    parents = dict(forest.parents)
    children = dict(forest.children)
    roots = forest.roots

    for record, record_parent, child_ids in flat:
        records[record.id] = record
        parents[record.id] = record_parent
        children[record.id] = child_ids

    if parent_id is None:
        roots = roots + (node.id,)
    else:
        children[parent_id] = children.get(parent_id, ()) + (node.id,)

    return Forest(records=records, parents=parents, children=children, roots=roots)


def insert_reply(forest: Forest, parent_id: str, node: CommentNode) -> Forest:
    """parent_id 노드의 자식 목록 끝에 node(하위 트리 포함)를 추가

    부모가 없으면 입력 forest를 그대로 반환한다 (삭제/답글 경쟁 상황의 no-op).
    """
    if parent_id not in forest.records:
        logger.debug(f"[insert_reply] Parent not found, skipped: parent={parent_id}")
        return forest
    return _attach(forest, parent_id, node)


def insert_root(forest: Forest, node: CommentNode) -> Forest:
    """최상위 댓글로 node 추가"""
    return _attach(forest, None, node)


def remove_node(forest: Forest, node_id: str) -> Forest:
    """node_id 노드를 forest에서 제거

    자손은 재배치하지 않고 함께 가지치기한다.
    없는 id면 입력 forest를 그대로 반환한다.
    """
    if node_id not in forest.records:
        logger.debug(f"[remove_node] Comment not found, skipped: {node_id}")
        return forest

    removed = set(_walk([node_id], forest.children))

    records = {cid: r for cid, r in forest.records.items() if cid not in removed}
    parents = {cid: p for cid, p in forest.parents.items() if cid not in removed}
    children = {cid: c for cid, c in forest.children.items() if cid not in removed}

    parent_id = forest.parents.get(node_id)
    if parent_id is None:
        roots = tuple(cid for cid in forest.roots if cid != node_id)
    else:
        roots = forest.roots
        children[parent_id] = tuple(cid for cid in children[parent_id] if cid != node_id)

    return Forest(records=records, parents=parents, children=children, roots=roots)


def count_nodes(forest: Forest) -> int:
    """모든 depth를 포함한 전체 댓글 수"""
    return sum(1 for _ in _walk(forest.roots, forest.children))


def depth_of(forest: Forest, comment_id: str) -> int | None:
    """노드 depth (루트 = 0). 없는 id면 None

    부모 체인 순회는 노드 수로 상한을 둔다.
    """
    if comment_id not in forest.records:
        return None
    depth = 0
    current = forest.parents.get(comment_id)
    while current is not None and depth < len(forest.records):
        depth += 1
        current = forest.parents.get(current)
    return depth


def iter_records(forest: Forest) -> Iterator[CommentRecord]:
    """깊이 우선(전위) 순서로 레코드 순회"""
    for comment_id in _walk(forest.roots, forest.children):
        yield forest.records[comment_id]


def to_nodes(forest: Forest) -> list[CommentNode]:
    """UI 렌더링용 중첩 CommentNode 목록으로 변환"""

    def build(comment_id: str) -> CommentNode:
        return CommentNode(
            record=forest.records[comment_id],
            replies=[build(child) for child in forest.children_of(comment_id)],
        )

    return [build(root) for root in forest.roots]
