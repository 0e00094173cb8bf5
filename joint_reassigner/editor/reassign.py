"""
对象重分配引擎
把一个对象从源关节的链表中摘除，并追加到目标关节链表的末尾。
所有索引解析都在任何改写之前完成，失败时不会留下部分修改。
"""
import logging
from typing import Tuple

from ..errors import JointNotFound, ObjectNotFound
from ..model import ObjectArena, NO_HANDLE

logger = logging.getLogger(__name__)


class ReassignmentEngine:

    def __init__(self, arena: ObjectArena):
        """
        :param arena: 会话持有的对象池，引擎直接改写其中的句柄
        """
        self.arena = arena

    def _check_joint(self, joint_index: int, role: str):
        if joint_index < 0 or joint_index >= self.arena.joint_count:
            raise JointNotFound(joint_index, self.arena.joint_count, role)

    def _find(self, joint_index: int, position: int) -> Tuple[int, int]:
        """
        走到源链表的第 position 个元素

        :return: (前驱句柄, 目标句柄)，目标为表头时前驱为 NO_HANDLE
        :raises ObjectNotFound: position 超出链表长度
        """
        handles = self.arena.chain(joint_index)
        if position < 0 or position >= len(handles):
            raise ObjectNotFound(joint_index, position, len(handles))
        prev = handles[position - 1] if position > 0 else NO_HANDLE
        return prev, handles[position]

    def reassign(self, source_joint: int, position: int, target_joint: int) -> int:
        """
        将源关节第 position 个对象移动到目标关节链表末尾

        :param source_joint: 源关节索引
        :param position: 对象在源关节链表中的位置（0起）
        :param target_joint: 目标关节索引
        :return: 对象在目标关节链表中的新位置
        :raises JointNotFound: 源或目标关节索引越界
        :raises ObjectNotFound: position 越界
        """
        # 先完成全部解析，再开始改写
        self._check_joint(source_joint, "from-joint")
        prev, handle = self._find(source_joint, position)
        self._check_joint(target_joint, "to-joint")
        self.arena.chain(target_joint)  # 目标链表不可遍历时同样不做任何改写

        heads = self.arena.heads
        next_handles = self.arena.next_handles

        # 摘除
        successor = next_handles[handle]
        if prev == NO_HANDLE:
            heads[source_joint] = successor
        else:
            next_handles[prev] = successor
        next_handles[handle] = NO_HANDLE

        # 追加到末尾；同一关节时链表已去掉该对象
        target_handles = self.arena.chain(target_joint)
        if target_handles:
            next_handles[target_handles[-1]] = handle
        else:
            heads[target_joint] = handle
        new_position = len(target_handles)

        logger.debug(
            "moved handle %d: J%d/O%d -> J%d/O%d",
            handle, source_joint, position, target_joint, new_position
        )
        return new_position
