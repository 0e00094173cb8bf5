import numpy as np
import pytest

from joint_reassigner import Joint, MalformedHierarchy, ObjectArena, RenderObject
from joint_reassigner.model import NO_HANDLE, collect_object_chains, iter_preorder, world_positions

from .conftest import chain_names


def test_preorder_visits_children_in_stored_order(deep_tree):
    assert [j.name for j in iter_preorder(deep_tree)] == ["J0", "J1", "J2", "J3", "J4", "J5"]


def test_preorder_leaf_root():
    root = Joint("only")
    assert iter_preorder(root) == [root]


def test_preorder_detects_cycle():
    a, b = Joint("a"), Joint("b")
    a.add_child(b)
    b.children.append(a)
    with pytest.raises(MalformedHierarchy):
        iter_preorder(a)


def test_preorder_detects_shared_child():
    root, a, b, shared = Joint("root"), Joint("a"), Joint("b"), Joint("shared")
    root.add_child(a)
    root.add_child(b)
    a.children.append(shared)
    b.children.append(shared)
    with pytest.raises(MalformedHierarchy):
        iter_preorder(root)


def test_append_object_builds_chain():
    joint = Joint("j")
    assert list(joint.iter_objects()) == []
    for name in "xyz":
        joint.append_object(RenderObject(name=name))
    assert chain_names(joint) == ["x", "y", "z"]


def test_object_chain_cycle_is_malformed():
    joint = Joint("j")
    a, b = RenderObject(name="a"), RenderObject(name="b")
    joint.dobj = a
    a.next = b
    b.next = a
    with pytest.raises(MalformedHierarchy):
        list(joint.iter_objects())


def test_shared_tail_is_malformed():
    j0, j1 = Joint("j0"), Joint("j1")
    tail = RenderObject(name="tail")
    head0, head1 = RenderObject(name="h0"), RenderObject(name="h1")
    head0.next = tail
    head1.next = tail
    j0.dobj, j1.dobj = head0, head1
    with pytest.raises(MalformedHierarchy):
        collect_object_chains([j0, j1])


def test_arena_handles_follow_index_order(tree):
    joints = iter_preorder(tree)
    arena = ObjectArena.from_joints(joints)
    assert len(arena) == 3
    assert [o.name for o in arena.objects] == ["A", "B", "C"]
    assert arena.heads.tolist() == [0, 2, NO_HANDLE]
    assert arena.next_handles.tolist() == [1, NO_HANDLE, NO_HANDLE]
    assert arena.chains() == [[0, 1], [2], []]


def test_arena_chain_bound():
    joints = [Joint("j")]
    joints[0].append_object(RenderObject(name="a"))
    joints[0].append_object(RenderObject(name="b"))
    arena = ObjectArena.from_joints(joints)
    arena.next_handles[1] = 0
    with pytest.raises(MalformedHierarchy):
        arena.chain(0)


def test_arena_write_back_rewrites_native_links(tree):
    joints = iter_preorder(tree)
    arena = ObjectArena.from_joints(joints)
    a, b, c = arena.objects
    # J0: [B], J1: [C], J2: [A]
    arena.heads[:] = np.array([1, 2, 0])
    arena.next_handles[:] = NO_HANDLE
    arena.write_back(joints)

    assert chain_names(joints[0]) == ["B"]
    assert chain_names(joints[1]) == ["C"]
    assert chain_names(joints[2]) == ["A"]
    assert a.next is None and b.next is None and c.next is None


def test_world_positions_accumulate(tree):
    positions = world_positions(iter_preorder(tree))
    np.testing.assert_allclose(positions, [[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 2.0, 0.0]])


def test_world_positions_follow_parent_rotation_and_scale():
    root = Joint("root", translation=[1.0, 0.0, 0.0], rotation=[0.0, 0.0, np.pi / 2], scale=[2.0, 2.0, 2.0])
    child = Joint("child", translation=[1.0, 0.0, 0.0])
    root.add_child(child)
    positions = world_positions(iter_preorder(root))
    np.testing.assert_allclose(positions[1], [1.0, 2.0, 0.0], atol=1e-12)


def test_preorder_handles_deep_chain():
    root = Joint("j0")
    node = root
    for i in range(1, 5000):
        child = Joint(f"j{i}")
        node.add_child(child)
        node = child
    order = iter_preorder(root)
    assert len(order) == 5000
    assert order[0] is root and order[-1] is node
    assert world_positions(order).shape == (5000, 3)


def test_joint_rejects_bad_vector():
    with pytest.raises(ValueError):
        Joint("bad", translation=[1.0, 2.0])
