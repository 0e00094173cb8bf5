"""
编辑层 (Editor Layer)
关节索引、对象定位、重分配以及会话编排，纯内存操作，不做任何文件 I/O
"""

from .indexing import (
    index_joints,
    ObjectEntry,
    ObjectLocator
)
from .reassign import ReassignmentEngine
from .session import SessionModel, SessionState

__all__ = [
    'index_joints',
    'ObjectEntry',
    'ObjectLocator',
    'ReassignmentEngine',
    'SessionModel',
    'SessionState'
]
