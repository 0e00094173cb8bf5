import json

import pytest

from joint_reassigner import SessionModel
from joint_reassigner.data_io import load_scene, save_scene, scene_to_dict

from .conftest import chain_names

SCENE = {
    "format": "kar-vehicle",
    "root_name": "root",
    "joints": [
        {"name": "root", "parent": None,
         "objects": [{"name": "body", "payload": {"vertices": 120}},
                     {"name": "wheel", "payload": {"vertices": 48}}]},
        {"name": "axle", "parent": "root", "translation": [0.0, 0.5, 0.0],
         "objects": [{"name": "hub", "payload": {}}]},
        {"name": "spoiler", "parent": "root", "rotation": [0.0, 0.0, 1.5707963267948966]},
        {"name": "wheel_fl", "parent": "axle", "scale": [2.0, 2.0, 2.0]},
    ],
}


def write_json(path, data):
    path.write_text(json.dumps(data), encoding='utf-8')
    return str(path)


def test_load_scene_builds_tree_and_chains(tmp_path):
    root, joint_map, extra = load_scene(write_json(tmp_path / "scene.json", SCENE))
    assert root.name == "root"
    assert [c.name for c in root.children] == ["axle", "spoiler"]
    assert [c.name for c in joint_map["axle"].children] == ["wheel_fl"]
    assert chain_names(root) == ["body", "wheel"]
    assert root.dobj.payload == {"vertices": 120}
    assert joint_map["spoiler"].dobj is None
    assert extra == {"format": "kar-vehicle"}


def test_save_after_session_round_trips(tmp_path):
    root, _, extra = load_scene(write_json(tmp_path / "scene.json", SCENE))
    session = SessionModel.open(root)
    session.reassign(0, 1, 3)
    out_path = tmp_path / "out" / "scene_modified.json"
    save_scene(session.close(), str(out_path), extra)

    saved = json.loads(out_path.read_text(encoding='utf-8'))
    assert saved["format"] == "kar-vehicle"
    assert [j["name"] for j in saved["joints"]] == ["root", "axle", "wheel_fl", "spoiler"]
    objects = {j["name"]: [o["name"] for o in j["objects"]] for j in saved["joints"]}
    assert objects == {"root": ["body"], "axle": ["hub"], "wheel_fl": [], "spoiler": ["wheel"]}

    reloaded, joint_map, _ = load_scene(str(out_path))
    assert chain_names(joint_map["spoiler"]) == ["wheel"]
    assert joint_map["spoiler"].dobj.payload == {"vertices": 48}
    assert joint_map["spoiler"].rotation[2] == pytest.approx(1.5707963267948966)


def test_scene_to_dict_defaults(tree):
    data = scene_to_dict(tree)
    assert data["root_name"] == "J0"
    assert data["joints"][0]["scale"] == [1.0, 1.0, 1.0]
    assert data["joints"][1]["parent"] == "J0"


@pytest.mark.parametrize("scene, message", [
    ({"joints": [{"name": "a"}]}, "No root joint"),
    ({"root_name": "a", "joints": []}, "No joints"),
    ({"root_name": "a", "joints": [{"name": "a"}, {"name": "a"}]}, "Duplicate"),
    ({"root_name": "a", "joints": [{"name": "a"}, {"name": "b", "parent": "x"}]}, "Parent 'x'"),
    ({"root_name": "z", "joints": [{"name": "a"}]}, "Root node 'z'"),
    ({"root_name": "a", "joints": [{"name": "a"}, {"name": "b"}]}, "not reachable"),
])
def test_load_scene_errors(tmp_path, scene, message):
    with pytest.raises(ValueError, match=message):
        load_scene(write_json(tmp_path / "bad.json", scene))
