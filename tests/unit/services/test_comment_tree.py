"""댓글 트리(Forest) 테스트

테스트 범위:
1. build_forest: 정렬/부모 연결/루트 fallback/사이클 방어
2. insert_reply / insert_root: no-op 및 멱등성
3. remove_node: 하위 트리 가지치기
4. 렌더링 헬퍼: to_nodes, iter_records, depth_of
"""

import pytest

from vrsa_discussion.models.thread import CommentNode
from vrsa_discussion.services.comment_tree import (
    EMPTY_FOREST,
    build_forest,
    count_nodes,
    depth_of,
    insert_reply,
    insert_root,
    iter_records,
    remove_node,
    to_nodes,
)


@pytest.fixture
def sample_records(make_record):
    """a ─┬─ b ── d
          └─ c
       e
    """
    return [
        make_record("d", parent_id="b", minutes=4),
        make_record("a", minutes=0),
        make_record("c", parent_id="a", minutes=3),
        make_record("b", parent_id="a", minutes=1),
        make_record("e", minutes=2),
    ]


@pytest.fixture
def forest(sample_records):
    return build_forest(sample_records)


class TestBuildForest:
    """build_forest 테스트"""

    def test_structure_and_order(self, forest):
        """루트/자식 목록은 created_at 오름차순"""
        assert forest.roots == ("a", "e")
        assert forest.children_of("a") == ("b", "c")
        assert forest.children_of("b") == ("d",)
        assert forest.children_of("d") == ()
        assert forest.parent_of("d") == "b"
        assert forest.parent_of("a") is None

    def test_count_matches_records(self, forest, sample_records):
        """모든 레코드가 정확히 한 번씩 포함"""
        assert count_nodes(forest) == len(sample_records)
        assert sorted(r.id for r in iter_records(forest)) == sorted(r.id for r in sample_records)

    def test_empty(self):
        """빈 입력"""
        assert build_forest([]) == EMPTY_FOREST
        assert count_nodes(EMPTY_FOREST) == 0

    def test_ties_broken_by_id(self, make_record):
        """같은 시각이면 id 순"""
        forest = build_forest([make_record("y"), make_record("x")])

        assert forest.roots == ("x", "y")

    def test_missing_parent_becomes_root(self, make_record):
        """부모가 집합에 없으면 루트"""
        forest = build_forest([make_record("orphan", parent_id="gone")])

        assert forest.roots == ("orphan",)
        assert forest.parent_of("orphan") is None

    def test_foreign_subject_parent_becomes_root(self, make_record):
        """다른 대상의 댓글을 부모로 가리키면 루트"""
        forest = build_forest(
            [
                make_record("p", subject_id="post-2"),
                make_record("c", parent_id="p", minutes=1),
            ]
        )

        assert set(forest.roots) == {"p", "c"}

    def test_self_parent_becomes_root(self, make_record):
        """자기 자신을 부모로 가리키면 루트"""
        forest = build_forest([make_record("loop", parent_id="loop")])

        assert forest.roots == ("loop",)

    def test_cycle_is_broken(self, make_record):
        """부모 사이클은 루트 승격으로 끊는다 (모든 노드 유지)"""
        records = [
            make_record("x", parent_id="z", minutes=0),
            make_record("y", parent_id="x", minutes=1),
            make_record("z", parent_id="y", minutes=2),
        ]

        forest = build_forest(records)

        assert count_nodes(forest) == 3
        assert forest.roots == ("x",)
        assert forest.children_of("x") == ("y",)
        assert forest.children_of("y") == ("z",)

    def test_duplicate_ids_keep_first(self, make_record):
        """중복 id는 처음 것만 유지"""
        forest = build_forest(
            [make_record("a", content="first"), make_record("a", content="second")]
        )

        assert len(forest) == 1
        assert forest.get("a").content == "first"

    def test_forest_is_read_only(self, forest):
        """내부 매핑은 외부에서 수정 불가"""
        with pytest.raises(TypeError):
            forest.records["new"] = None  # type: ignore[index]


class TestInsert:
    """insert_reply / insert_root 테스트"""

    def test_insert_reply_appends_last(self, forest, make_record):
        """부모의 자식 목록 끝에 추가"""
        node = CommentNode(record=make_record("f", parent_id="a", minutes=10))

        updated = insert_reply(forest, "a", node)

        assert updated.children_of("a") == ("b", "c", "f")
        assert updated.parent_of("f") == "a"
        assert count_nodes(updated) == count_nodes(forest) + 1
        # 입력 forest는 불변
        assert "f" not in forest

    def test_insert_reply_missing_parent_is_noop(self, forest, make_record):
        """부모가 없으면 입력 그대로"""
        node = CommentNode(record=make_record("f", parent_id="ghost"))

        assert insert_reply(forest, "ghost", node) is forest

    def test_insert_reply_is_idempotent(self, forest, make_record):
        """같은 노드 두 번 삽입해도 한 번만 반영"""
        node = CommentNode(record=make_record("f", parent_id="b", minutes=10))

        once = insert_reply(forest, "b", node)
        twice = insert_reply(once, "b", node)

        assert twice == once
        assert once.children_of("b") == ("d", "f")

    def test_insert_subtree(self, forest, make_record):
        """하위 트리를 가진 노드 삽입"""
        child = CommentNode(record=make_record("g", parent_id="f", minutes=11))
        node = CommentNode(record=make_record("f", parent_id="e", minutes=10), replies=[child])

        updated = insert_reply(forest, "e", node)

        assert updated.children_of("e") == ("f",)
        assert updated.children_of("f") == ("g",)
        assert depth_of(updated, "g") == 2

    def test_insert_root(self, forest, make_record):
        """최상위 댓글 추가"""
        updated = insert_root(forest, CommentNode(record=make_record("r", minutes=20)))

        assert updated.roots == ("a", "e", "r")

    def test_insert_into_empty_forest(self, make_record):
        """빈 forest에 루트 추가 후 대댓글"""
        root = make_record("root")
        forest = insert_root(EMPTY_FOREST, CommentNode(record=root))
        forest = insert_reply(
            forest, "root", CommentNode(record=make_record("reply", parent_id="root", minutes=1))
        )

        assert forest == build_forest([root, make_record("reply", parent_id="root", minutes=1)])


class TestRemoveNode:
    """remove_node 테스트"""

    def test_prunes_subtree(self, forest):
        """노드와 자손만 제거, 조상/형제 유지"""
        updated = remove_node(forest, "b")

        assert "b" not in updated
        assert "d" not in updated
        assert updated.children_of("a") == ("c",)
        assert set(updated.records) == {"a", "c", "e"}
        assert count_nodes(updated) == 3

    def test_no_dangling_references(self, forest):
        """제거 후 어떤 목록에도 남지 않음"""
        updated = remove_node(forest, "a")

        referenced = set(updated.roots)
        for child_ids in updated.children.values():
            referenced.update(child_ids)
        assert referenced <= set(updated.records)
        assert updated.roots == ("e",)

    def test_remove_missing_is_noop(self, forest):
        """없는 id 제거는 입력 그대로"""
        assert remove_node(forest, "ghost") is forest

    def test_remove_is_idempotent(self, forest):
        """두 번 제거해도 결과 동일"""
        once = remove_node(forest, "c")

        assert remove_node(once, "c") == once

    @pytest.mark.parametrize("parent_id", ["a", "b", "c", "d", "e"])
    def test_insert_then_remove_round_trip(self, forest, make_record, parent_id):
        """삽입 후 제거하면 원래 forest"""
        node = CommentNode(record=make_record("new", parent_id=parent_id, minutes=30))

        assert remove_node(insert_reply(forest, parent_id, node), "new") == forest


class TestRenderHelpers:
    """to_nodes / iter_records / depth_of 테스트"""

    def test_to_nodes_nested(self, forest):
        """중첩 CommentNode 변환"""
        nodes = to_nodes(forest)

        assert [n.id for n in nodes] == ["a", "e"]
        assert [r.id for r in nodes[0].replies] == ["b", "c"]
        assert [r.id for r in nodes[0].replies[0].replies] == ["d"]
        assert nodes[1].replies == []

    def test_iter_records_preorder(self, forest):
        """전위 순회"""
        assert [r.id for r in iter_records(forest)] == ["a", "b", "d", "c", "e"]

    def test_depth_of(self, forest):
        """루트 depth 0"""
        assert depth_of(forest, "a") == 0
        assert depth_of(forest, "b") == 1
        assert depth_of(forest, "d") == 2
        assert depth_of(forest, "ghost") is None
