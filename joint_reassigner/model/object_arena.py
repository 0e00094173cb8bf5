"""
对象池 (Arena)
把所有关节的对象链表存放在连续数组中，以整数句柄代替引用：
  - objects[h]     句柄 h 对应的渲染对象
  - next_handles[h] 句柄 h 的后继句柄，NO_HANDLE 表示链尾
  - heads[j]        第 j 个关节的表头句柄，NO_HANDLE 表示空链表
摘除/追加只是句柄改写，不涉及对象的生命周期。
"""
import numpy as np
from typing import List

from ..errors import MalformedHierarchy
from .joint import Joint, RenderObject, collect_object_chains

NO_HANDLE = -1


class ObjectArena:

    def __init__(self, joint_count: int, objects: List[RenderObject]):
        """
        :param joint_count: 关节数量（heads 数组长度）
        :param objects: 句柄顺序排列的对象
        """
        self.objects: List[RenderObject] = list(objects)
        self.next_handles: np.ndarray = np.full(len(self.objects), NO_HANDLE, dtype=np.int64)
        self.heads: np.ndarray = np.full(joint_count, NO_HANDLE, dtype=np.int64)

    @classmethod
    def from_joints(cls, joints: List[Joint]) -> 'ObjectArena':
        """
        从原生 dobj/next 链表构建对象池
        句柄按 关节索引顺序 + 链表内顺序 依次分配
        """
        chains = collect_object_chains(joints)
        objects = [obj for chain in chains for obj in chain]
        arena = cls(len(joints), objects)

        handle = 0
        for joint_index, chain in enumerate(chains):
            if not chain:
                continue
            arena.heads[joint_index] = handle
            for _ in range(len(chain) - 1):
                arena.next_handles[handle] = handle + 1
                handle += 1
            handle += 1  # 链尾保持 NO_HANDLE
        return arena

    @property
    def joint_count(self) -> int:
        return len(self.heads)

    def __len__(self) -> int:
        return len(self.objects)

    def chain(self, joint_index: int) -> List[int]:
        """
        沿 next_handles 走完第 joint_index 个关节的链表
        访问次数超过对象总数视为存在环，抛出 MalformedHierarchy

        :return: 按链表顺序排列的句柄
        """
        handles: List[int] = []
        current = int(self.heads[joint_index])
        while current != NO_HANDLE:
            if len(handles) >= len(self.objects):
                raise MalformedHierarchy(
                    f"Object chain of joint index {joint_index} exceeds the total object count {len(self.objects)}"
                )
            handles.append(current)
            current = int(self.next_handles[current])
        return handles

    def chains(self) -> List[List[int]]:
        """所有关节的句柄链表，按关节索引排列"""
        return [self.chain(j) for j in range(self.joint_count)]

    def write_back(self, joints: List[Joint]):
        """
        将句柄链表写回原生的 dobj/next 引用
        每个关节的表头与每个对象的 next 都会被覆盖

        :param joints: 与构建时相同顺序的关节列表
        """
        if len(joints) != self.joint_count:
            raise ValueError(f"Expected {self.joint_count} joints, got {len(joints)}")

        for joint_index, joint in enumerate(joints):
            handles = self.chain(joint_index)
            joint.dobj = self.objects[handles[0]] if handles else None
            for handle, successor in zip(handles, handles[1:] + [NO_HANDLE]):
                self.objects[handle].next = self.objects[successor] if successor != NO_HANDLE else None
