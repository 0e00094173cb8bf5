import pytest

from joint_reassigner import Joint, RenderObject


def make_tree():
    """
    J0 root -> J1, J2
    J0: [A, B], J1: [C], J2: []
    """
    root = Joint("J0")
    j1 = Joint("J1", translation=[1.0, 0.0, 0.0])
    j2 = Joint("J2", translation=[0.0, 2.0, 0.0])
    root.add_child(j1)
    root.add_child(j2)
    for name in ("A", "B"):
        root.append_object(RenderObject({'mesh': name.lower()}, name=name))
    j1.append_object(RenderObject({'mesh': 'c'}, name="C"))
    return root


def chain_names(joint):
    return [obj.name for obj in joint.iter_objects()]


@pytest.fixture
def tree():
    return make_tree()


@pytest.fixture
def deep_tree():
    """
    J0 -> (J1 -> (J2, J3), J4 -> J5)
    J0: [a0], J1: [], J2: [a1, a2, a3], J3: [a4], J4: [], J5: [a5, a6]
    """
    joints = [Joint(f"J{i}") for i in range(6)]
    joints[0].add_child(joints[1])
    joints[1].add_child(joints[2])
    joints[1].add_child(joints[3])
    joints[0].add_child(joints[4])
    joints[4].add_child(joints[5])
    layout = {0: ["a0"], 2: ["a1", "a2", "a3"], 3: ["a4"], 5: ["a5", "a6"]}
    for joint_index, names in layout.items():
        for name in names:
            joints[joint_index].append_object(RenderObject(name=name))
    return joints[0]
