"""
变换矩阵工具函数
"""
import numpy as np
from scipy.spatial.transform import Rotation as R
from typing import Union, Sequence

Vec3 = Union[np.ndarray, Sequence[float]]


def as_vec3(value: Vec3, name: str = "vector") -> np.ndarray:
    """
    转换为 float64 三维向量

    :param value: 长度为3的序列
    :param name: 出错时用于提示的字段名
    :return: shape 为 (3,) 的 numpy 数组
    """
    vec = np.asarray(value, dtype=np.float64)
    if vec.shape != (3,):
        raise ValueError(f"{name} must be a 3-element array, got shape {vec.shape}")
    return vec


def srt_to_matrix(translation: Vec3, rotation: Vec3, scale: Vec3) -> np.ndarray:
    """
    由 缩放-旋转-平移 (SRT) 构建 4x4 局部变换矩阵: T @ R @ S

    :param translation: 平移 [x, y, z]
    :param rotation: 欧拉角 [x, y, z]（弧度，内旋XYZ顺序）
    :param scale: 缩放 [x, y, z]
    :return: 4x4 局部变换矩阵
    """
    t = as_vec3(translation, "translation")
    r = as_vec3(rotation, "rotation")
    s = as_vec3(scale, "scale")

    transform = np.identity(4, dtype=np.float64)
    rot_mat = R.from_euler('XYZ', r, degrees=False).as_matrix()
    # 列向量乘以对应缩放分量，相当于 R @ diag(s)
    transform[:3, :3] = rot_mat * s
    transform[:3, 3] = t
    return transform
