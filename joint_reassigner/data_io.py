"""
数据交换功能实现
场景文件 (scene.json) 与原生关节树之间的加载/写出，作为编辑核心的外部协作者
"""
import json
import os
import numpy as np
from typing import Any, Dict, List, Optional, Tuple

from .model import Joint, RenderObject, iter_preorder

SCENE_KEYS = ('root_name', 'joints')


def load_scene(json_path: str) -> Tuple[Joint, Dict[str, Joint], Dict[str, Any]]:
    """
    从scene.json加载关节树，构建原生 dobj/next 链表

    :param json_path: scene.json文件路径
    :return: (root节点, 关节名称到节点的映射字典, 其余顶层字段)
    """
    with open(json_path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError("Scene file must contain a JSON object")
    if 'joints' not in data or not data['joints']:
        raise ValueError("No joints found in scene file")

    joints_data = data['joints']
    root_name = data.get('root_name')
    if root_name is None:
        raise ValueError("No root joint found in scene file ('root_name' missing)")

    # 创建所有关节对象
    joint_map: Dict[str, Joint] = {}

    for joint_data in joints_data:
        name = joint_data['name']
        if name in joint_map:
            raise ValueError(f"Duplicate joint name: '{name}'")

        joint = Joint(
            name,
            translation=_optional_array(joint_data.get('translation')),
            rotation=_optional_array(joint_data.get('rotation')),
            scale=_optional_array(joint_data.get('scale'))
        )

        # 按文件中的顺序串起对象链表
        for obj_data in joint_data.get('objects') or []:
            joint.append_object(RenderObject(
                payload=obj_data.get('payload', {}),
                name=obj_data.get('name')
            ))

        joint_map[name] = joint

    # 建立父子关系（子节点顺序即文件中出现的顺序）
    for joint_data in joints_data:
        name = joint_data['name']
        parent_name = joint_data.get('parent')

        if parent_name is not None:
            if parent_name not in joint_map:
                raise ValueError(f"Parent '{parent_name}' not found for joint '{name}'")
            joint_map[parent_name].add_child(joint_map[name])

    # 找到根节点
    if root_name not in joint_map:
        raise ValueError(f"Root node '{root_name}' not found")
    root = joint_map[root_name]
    if root.parent is not None:
        raise ValueError(f"Root node '{root_name}' must not have a parent")

    reachable = {id(joint) for joint in iter_preorder(root)}
    orphans = [name for name, joint in joint_map.items() if id(joint) not in reachable]
    if orphans:
        raise ValueError(f"Joints not reachable from root '{root_name}': {', '.join(orphans)}")

    extra = {key: value for key, value in data.items() if key not in SCENE_KEYS}
    return root, joint_map, extra


def _optional_array(value) -> Optional[np.ndarray]:
    if value is None:
        return None
    return np.array(value, dtype=np.float64)


def scene_to_dict(root: Joint, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    将关节树（前序）与各关节的对象链表转换为可序列化的字典
    对象顺序取自原生 dobj/next 链表
    """
    joints_out: List[Dict[str, Any]] = []
    for joint in iter_preorder(root):
        joint_out = {
            'name': joint.name,
            'parent': joint.parent.name if joint.parent is not None else None,
            'translation': [float(v) for v in joint.translation],
            'rotation': [float(v) for v in joint.rotation],
            'scale': [float(v) for v in joint.scale],
            'objects': [
                {'name': obj.name, 'payload': obj.payload}
                for obj in joint.iter_objects()
            ]
        }
        joints_out.append(joint_out)

    output: Dict[str, Any] = dict(extra or {})
    output['root_name'] = root.name
    output['joints'] = joints_out
    return output


def save_scene(root: Joint, output_path: str, extra: Optional[Dict[str, Any]] = None):
    """
    写出场景文件

    :param root: 根关节（会话 close 之后的关节树）
    :param output_path: 输出文件路径
    :param extra: load_scene 返回的其余顶层字段，原样写回
    """
    output = scene_to_dict(root, extra)

    # 确保输出目录存在
    os.makedirs(os.path.dirname(os.path.abspath(output_path)), exist_ok=True)
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(output, f, indent=2, ensure_ascii=False)
