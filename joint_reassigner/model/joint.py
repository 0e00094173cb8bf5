"""
关节与渲染对象的实现
关节树为原生表示：每个关节持有子关节列表与对象链表表头 (dobj)，
每个渲染对象通过 next 指向同一关节下的下一个对象。
"""
import numpy as np
from typing import Any, Dict, Iterator, List, Optional

from ..errors import MalformedHierarchy
from ..utils import as_vec3, srt_to_matrix


class RenderObject:
    """
    渲染对象 (DOBJ)：不透明的网格/材质数据 + 指向下一个对象的单向链接
    核心逻辑从不检查 payload 的内容。
    """

    def __init__(self, payload: Optional[Dict[str, Any]] = None, name: Optional[str] = None):
        """
        :param payload: 不透明的网格/材质数据
        :param name: 仅用于显示的名称
        """
        self.name = name
        self.payload: Dict[str, Any] = payload if payload is not None else {}
        self.next: Optional['RenderObject'] = None

    def __repr__(self):
        return f"<RenderObject: {self.name}>"


class Joint:
    """
    骨骼层级中的节点 (JOBJ)：拥有若干子关节和一条对象链表
    """

    def __init__(self, name: str,
                 translation: Optional[np.ndarray] = None,
                 rotation: Optional[np.ndarray] = None,
                 scale: Optional[np.ndarray] = None):
        """
        初始化关节

        :param name: 外部提供的不透明标识（不是顺序索引）
        :param translation: 相对父级的平移 (Vec3)，默认零
        :param rotation: 相对父级的欧拉角 (Vec3，弧度，XYZ)，默认零
        :param scale: 相对父级的缩放 (Vec3)，默认1
        """
        self.name = name
        self.parent: Optional['Joint'] = None
        self.children: List['Joint'] = []
        self.dobj: Optional[RenderObject] = None  # 对象链表表头
        self.translation = as_vec3(translation if translation is not None else np.zeros(3), "translation")
        self.rotation = as_vec3(rotation if rotation is not None else np.zeros(3), "rotation")
        self.scale = as_vec3(scale if scale is not None else np.ones(3), "scale")

    def add_child(self, child: 'Joint'):
        """添加子节点，子节点顺序即存储顺序"""
        child.parent = self
        self.children.append(child)

    def append_object(self, obj: RenderObject):
        """
        将对象挂到本关节对象链表的末尾（供加载器构建原生链表使用）
        """
        obj.next = None
        if self.dobj is None:
            self.dobj = obj
            return
        tail = self.dobj
        while tail.next is not None:
            tail = tail.next
        tail.next = obj

    def iter_objects(self) -> Iterator[RenderObject]:
        """
        沿 next 链依次产出本关节下的对象
        链表中出现环时抛出 MalformedHierarchy
        """
        seen = set()
        current = self.dobj
        while current is not None:
            if id(current) in seen:
                raise MalformedHierarchy(f"Object chain of joint '{self.name}' contains a cycle")
            seen.add(id(current))
            yield current
            current = current.next

    def __repr__(self):
        return f"<Joint: {self.name}>"


def iter_preorder(root: Joint) -> List[Joint]:
    """
    深度优先前序遍历：先根，再按子节点存储顺序完整访问每棵子树

    :param root: 根关节
    :return: 按遍历顺序排列的关节列表
    """
    if root is None:
        return []

    order: List[Joint] = []
    visited = set()
    # 显式栈，子节点逆序压栈以保持存储顺序出栈
    stack: List[Joint] = [root]
    while stack:
        node = stack.pop()
        if id(node) in visited:
            raise MalformedHierarchy(
                f"Joint '{node.name}' reached twice during traversal (cycle or shared child)"
            )
        visited.add(id(node))
        order.append(node)
        stack.extend(reversed(node.children))
    return order


def world_positions(joints: List[Joint]) -> np.ndarray:
    """
    计算各关节的世界坐标（仅用于显示）

    :param joints: iter_preorder 给出的关节列表（父节点总在子节点之前）
    :return: shape 为 (N, 3) 的数组，与 joints 一一对应
    """
    world: Dict[int, np.ndarray] = {}
    positions = np.zeros((len(joints), 3), dtype=np.float64)
    for i, joint in enumerate(joints):
        local_transform = srt_to_matrix(joint.translation, joint.rotation, joint.scale)
        parent_transform = world.get(id(joint.parent)) if joint.parent is not None else None
        transform = local_transform if parent_transform is None else parent_transform @ local_transform
        world[id(joint)] = transform
        positions[i] = transform[:3, 3]
    return positions


def collect_object_chains(joints: List[Joint]) -> List[List[RenderObject]]:
    """
    按关节顺序收集每个关节的对象链表
    同一个对象被两个关节（或同一链表两次）引用时抛出 MalformedHierarchy

    :param joints: 按索引排列的关节列表
    :return: 与 joints 一一对应的对象列表
    """
    owner: Dict[int, Joint] = {}
    chains: List[List[RenderObject]] = []
    for joint in joints:
        chain: List[RenderObject] = []
        for obj in joint.iter_objects():
            previous = owner.get(id(obj))
            if previous is not None:
                raise MalformedHierarchy(
                    f"Object {obj!r} is linked from both joint '{previous.name}' and joint '{joint.name}'"
                )
            owner[id(obj)] = joint
            chain.append(obj)
        chains.append(chain)
    return chains
