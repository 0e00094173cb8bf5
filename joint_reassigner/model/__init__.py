"""
模型层 (Model Layer)
关节树与对象链表的原生表示，以及编辑期使用的句柄对象池

- Joint: 关节节点，拥有子关节列表与对象链表表头
- RenderObject: 渲染对象，不透明数据 + next 链接
- ObjectArena: 以整数句柄存放所有对象链表的对象池
"""

from .joint import (
    Joint,
    RenderObject,
    iter_preorder,
    world_positions,
    collect_object_chains
)
from .object_arena import ObjectArena, NO_HANDLE

__all__ = [
    'Joint',
    'RenderObject',
    'iter_preorder',
    'world_positions',
    'collect_object_chains',
    'ObjectArena',
    'NO_HANDLE'
]
