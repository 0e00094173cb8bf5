"""
编辑会话
一次会话：从关节树构建 关节/对象 视图 -> 执行若干次重分配 -> close 时把结果写回原生链表。

状态机: BUILT -> (LISTED <-> BUILT)* -> CLOSED
每次移动之后索引立即重建，旧的扁平索引不能跨移动复用。

注意：重分配只改写会话内的对象池，原生 dobj/next 引用在 close 时才被覆盖。
close 之后关节树被原地修改，本模块不提供撤销；如需回滚，请在 open 之前自行保留一份快照。
"""
import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ..errors import MalformedHierarchy, SessionClosed
from ..model import Joint, ObjectArena, RenderObject, world_positions
from .indexing import ObjectLocator, index_joints
from .reassign import ReassignmentEngine

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """
    会话状态。LISTED 只是记录最近一次操作是查询，不限制后续操作；
    可用性只由 CLOSED 和 INVALID 决定。
    """
    BUILT = "built"
    LISTED = "listed"
    CLOSED = "closed"
    INVALID = "invalid"


class SessionModel:

    def __init__(self, root: Joint):
        """
        构建会话视图（一般通过 SessionModel.open 调用）

        :param root: 外部加载器给出的根关节
        :raises MalformedHierarchy: 关节树或对象链表存在环/共享
        """
        self.root = root
        self.joints: List[Joint] = index_joints(root)
        self.arena = ObjectArena.from_joints(self.joints)
        self.engine = ReassignmentEngine(self.arena)
        self.locator: Optional[ObjectLocator] = None
        self.state = SessionState.BUILT
        self._rebuild()
        logger.debug("session opened: %d joints, %d objects", self.joint_count, self.object_count)

    @classmethod
    def open(cls, root: Joint) -> 'SessionModel':
        return cls(root)

    # ------------------------------------------------------------------
    # 状态与索引
    # ------------------------------------------------------------------

    def _require_usable(self):
        if self.state is SessionState.CLOSED:
            raise SessionClosed("Session is closed; open a new session to edit again")
        if self.state is SessionState.INVALID:
            raise MalformedHierarchy("Session index maps are invalid; open a new session")

    def _rebuild(self):
        """按当前对象池重新计算扁平索引"""
        try:
            chains = self.arena.chains()
        except MalformedHierarchy:
            self.state = SessionState.INVALID
            raise
        self.locator = ObjectLocator(
            [[self.arena.objects[h] for h in chain] for chain in chains]
        )
        self.state = SessionState.BUILT

    @property
    def joint_count(self) -> int:
        return len(self.joints)

    @property
    def object_count(self) -> int:
        return self.locator.object_count

    # ------------------------------------------------------------------
    # 查询
    # ------------------------------------------------------------------

    def list_objects(self) -> List[Tuple[int, int, int]]:
        """
        列出所有对象的 (扁平索引, 关节索引, 链表内位置)，供显示使用
        """
        self._require_usable()
        rows = [(e.flat_index, e.joint_index, e.position) for e in self.locator.flatten()]
        self.state = SessionState.LISTED
        return rows

    def objects_of(self, joint_index: int) -> List[RenderObject]:
        """关节当前挂载的对象（链表顺序）"""
        self._require_usable()
        self.locator.resolve_length(joint_index)
        return list(self.locator.chains[joint_index])

    def locate(self, flat_index: int) -> Tuple[int, int]:
        self._require_usable()
        return self.locator.locate(flat_index)

    def describe(self) -> List[Dict[str, Any]]:
        """
        生成用于显示的表格行，包括空关节（object 相关字段为 None）
        附带关节世界坐标，便于用户挑选目标关节
        """
        self._require_usable()
        positions = world_positions(self.joints)

        rows: List[Dict[str, Any]] = []
        flat_index = 0
        for joint_index, joint in enumerate(self.joints):
            world_pos = [float(v) for v in positions[joint_index]]
            chain = self.locator.chains[joint_index]
            if not chain:
                rows.append({
                    'flat_index': None, 'joint_index': joint_index, 'joint_name': joint.name,
                    'position': None, 'object_name': None, 'world_position': world_pos
                })
                continue
            for position, obj in enumerate(chain):
                rows.append({
                    'flat_index': flat_index, 'joint_index': joint_index, 'joint_name': joint.name,
                    'position': position, 'object_name': obj.name, 'world_position': world_pos
                })
                flat_index += 1
        self.state = SessionState.LISTED
        return rows

    # ------------------------------------------------------------------
    # 编辑
    # ------------------------------------------------------------------

    def reassign(self, from_joint: int, object_index: int, to_joint: int) -> int:
        """
        按 关节+链表位置 寻址的重分配

        :param from_joint: 源关节索引
        :param object_index: 对象在源关节链表中的位置
        :param to_joint: 目标关节索引
        :return: 对象在目标关节链表中的新位置
        """
        self._require_usable()
        try:
            new_position = self.engine.reassign(from_joint, object_index, to_joint)
        except MalformedHierarchy:
            self.state = SessionState.INVALID
            raise
        self._rebuild()
        return new_position

    def move(self, flat_index: int, target_joint: int) -> int:
        """
        按扁平索引寻址的重分配

        :param flat_index: 对象当前的扁平索引
        :param target_joint: 目标关节索引
        :return: 移动后对象的扁平索引（基于重建后的索引）
        """
        self._require_usable()
        source_joint, position = self.locator.locate(flat_index)
        new_position = self.reassign(source_joint, position, target_joint)
        return self.locator.flat_index_of(target_joint, new_position)

    def close(self) -> Joint:
        """
        结束会话：把对象池写回原生 dobj/next 引用，返回交给外部写出器的根关节
        """
        self._require_usable()
        self.arena.write_back(self.joints)
        self.state = SessionState.CLOSED
        logger.debug("session closed: %d objects written back", len(self.arena))
        return self.root
