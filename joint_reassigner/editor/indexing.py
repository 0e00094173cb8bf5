"""
关节索引与对象定位
索引只在一次 加载-编辑-保存 会话内有效，每次结构变化后都要重新计算，不做增量维护。
"""
import numpy as np
from typing import Any, List, NamedTuple, Sequence, Tuple

from ..errors import IndexOutOfRange, JointNotFound, ObjectNotFound
from ..model import Joint, iter_preorder


def index_joints(root: Joint) -> List[Joint]:
    """
    生成规范的关节枚举顺序：深度优先前序，子节点按存储顺序访问
    列表下标即关节索引。同一树形结构总是得到同样的结果。

    :param root: 根关节
    :return: 按关节索引排列的关节列表
    """
    return iter_preorder(root)


class ObjectEntry(NamedTuple):
    flat_index: int
    joint_index: int
    position: int
    obj: Any


class ObjectLocator:
    """
    扁平对象索引 <-> (关节索引, 链表内位置) 的双向映射
    扁平顺序：按关节索引顺序拼接每个关节的对象链表，链表内保持原有顺序。
    """

    def __init__(self, chains: Sequence[Sequence[Any]]):
        """
        :param chains: 按关节索引排列的对象序列（对象引用或句柄均可）
        """
        self.chains: List[List[Any]] = [list(chain) for chain in chains]
        self.lengths: np.ndarray = np.array([len(chain) for chain in self.chains], dtype=np.int64)
        # cumulative[j] 为前 j+1 个关节的对象总数
        self.cumulative: np.ndarray = np.cumsum(self.lengths, dtype=np.int64)

    @property
    def joint_count(self) -> int:
        return len(self.chains)

    @property
    def object_count(self) -> int:
        return int(self.cumulative[-1]) if len(self.cumulative) else 0

    def flatten(self) -> List[ObjectEntry]:
        """按扁平索引顺序列出所有 (扁平索引, 关节索引, 位置, 对象)"""
        entries: List[ObjectEntry] = []
        for joint_index, chain in enumerate(self.chains):
            for position, obj in enumerate(chain):
                entries.append(ObjectEntry(len(entries), joint_index, position, obj))
        return entries

    def locate(self, flat_index: int) -> Tuple[int, int]:
        """
        扁平索引 -> (关节索引, 位置)
        取第一个累计数量大于 flat_index 的关节，余数即链表内位置。

        :raises IndexOutOfRange: flat_index < 0 或 >= 对象总数
        """
        if flat_index < 0 or flat_index >= self.object_count:
            raise IndexOutOfRange(flat_index, self.object_count)
        joint_index = int(np.searchsorted(self.cumulative, flat_index, side='right'))
        position = flat_index - int(self.cumulative[joint_index] - self.lengths[joint_index])
        return joint_index, position

    def flat_index_of(self, joint_index: int, position: int) -> int:
        """
        (关节索引, 位置) -> 扁平索引

        :raises JointNotFound: 关节索引越界
        :raises ObjectNotFound: 位置越界
        """
        obj_count = self.resolve_length(joint_index)
        if position < 0 or position >= obj_count:
            raise ObjectNotFound(joint_index, position, obj_count)
        return int(self.cumulative[joint_index] - self.lengths[joint_index]) + position

    def resolve(self, joint_index: int, position: int) -> Any:
        """(关节索引, 位置) -> 对象"""
        self.flat_index_of(joint_index, position)
        return self.chains[joint_index][position]

    def resolve_length(self, joint_index: int) -> int:
        """返回关节的对象数量，关节索引越界时抛出 JointNotFound"""
        if joint_index < 0 or joint_index >= self.joint_count:
            raise JointNotFound(joint_index, self.joint_count)
        return int(self.lengths[joint_index])

    def object_at(self, flat_index: int) -> Any:
        joint_index, position = self.locate(flat_index)
        return self.chains[joint_index][position]
