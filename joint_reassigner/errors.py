"""
错误类型定义
所有编辑核心抛出的异常都派生自 JointReassignError
"""


class JointReassignError(Exception):
    """所有关节/对象重分配错误的基类"""
    pass


class MalformedHierarchy(JointReassignError, RuntimeError):
    """
    遍历超出安全上限（疑似存在环或共享链尾）。
    对当前会话是致命的：索引映射失效，需要重新 open。
    """
    pass


class JointNotFound(JointReassignError, IndexError):
    """关节索引超出当前会话的有效范围"""

    def __init__(self, joint_index: int, joint_count: int, role: str = "joint"):
        self.joint_index = joint_index
        self.joint_count = joint_count
        super().__init__(
            f"{role} index {joint_index} out of range (0..{joint_count - 1})"
        )


class ObjectNotFound(JointReassignError, IndexError):
    """指定关节的对象链表中不存在该位置"""

    def __init__(self, joint_index: int, position: int, list_length: int):
        self.joint_index = joint_index
        self.position = position
        self.list_length = list_length
        super().__init__(
            f"Object index O{position} not found under J{joint_index} "
            f"(J{joint_index} has {list_length} object(s))"
        )


class IndexOutOfRange(JointReassignError, IndexError):
    """扁平对象索引超出对象总数"""

    def __init__(self, flat_index: int, object_count: int):
        self.flat_index = flat_index
        self.object_count = object_count
        super().__init__(
            f"flat object index {flat_index} out of range (0..{object_count - 1})"
        )


class SessionClosed(JointReassignError, RuntimeError):
    """会话已关闭，关节树已交还给外部写出器"""
    pass
