"""
joint_reassigner
在关节树的各关节之间移动渲染对象 (DOBJ)，保持对象链表与关节树的完整性
"""

from .errors import (
    JointReassignError,
    MalformedHierarchy,
    JointNotFound,
    ObjectNotFound,
    IndexOutOfRange,
    SessionClosed
)
from .model import Joint, RenderObject, ObjectArena
from .editor import (
    index_joints,
    ObjectLocator,
    ReassignmentEngine,
    SessionModel,
    SessionState
)

__version__ = "0.1.0"

__all__ = [
    'JointReassignError',
    'MalformedHierarchy',
    'JointNotFound',
    'ObjectNotFound',
    'IndexOutOfRange',
    'SessionClosed',
    'Joint',
    'RenderObject',
    'ObjectArena',
    'index_joints',
    'ObjectLocator',
    'ReassignmentEngine',
    'SessionModel',
    'SessionState'
]
