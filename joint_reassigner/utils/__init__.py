from .transform_utils import as_vec3, srt_to_matrix

__all__ = ['as_vec3', 'srt_to_matrix']
