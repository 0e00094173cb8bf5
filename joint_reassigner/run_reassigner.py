"""
关节对象重分配 (Headless)
加载场景 -> 列出 关节/对象 -> 执行移动 -> 写出场景

用法:
  joint-reassigner <input.json> <output.json> --from-joint 0 --object 2 --to-joint 6
  joint-reassigner <input.json> <output.json> --flat-index 3 --to-joint 6
  joint-reassigner <input.json> --list
  joint-reassigner --config config.json
"""
import argparse
import json
import os
import sys
from typing import Any, Dict, List, Optional

from .data_io import load_scene, save_scene
from .editor import SessionModel
from .errors import JointReassignError


def non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"value must be >= 0, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="joint-reassigner",
        description="Move render objects between joints of a scene file."
    )
    parser.add_argument("input_path", nargs="?", help="Input scene JSON")
    parser.add_argument("output_path", nargs="?", help="Output scene JSON (default: <input>_modified.json)")
    parser.add_argument("--config", help="JSON config file; command-line values override it")
    parser.add_argument("--from-joint", type=non_negative_int, help="Source joint index (J#)")
    parser.add_argument("--object", type=non_negative_int, help="Object index under the source joint (O#)")
    parser.add_argument("--flat-index", type=non_negative_int, help="Flattened object index across all joints")
    parser.add_argument("--to-joint", type=non_negative_int, help="Target joint index (J#)")
    parser.add_argument("--list", action="store_true", help="Only list joints and objects, write nothing")
    return parser


def load_config(config_path: str) -> Dict[str, Any]:
    with open(config_path, 'r', encoding='utf-8') as f:
        return json.load(f)


def config_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    """
    合并配置文件与命令行参数，命令行优先

    :raises ValueError: 移动参数不完整或互相冲突
    """
    config: Dict[str, Any] = load_config(args.config) if args.config else {}

    if args.input_path is not None:
        config['input_path'] = args.input_path
    if args.output_path is not None:
        config['output_path'] = args.output_path
    if args.list:
        config['list_only'] = True

    move_flags = (args.from_joint, args.object, args.flat_index, args.to_joint)
    if any(flag is not None for flag in move_flags):
        if args.to_joint is None:
            raise ValueError("--to-joint must be specified")
        if args.flat_index is not None:
            if args.from_joint is not None or args.object is not None:
                raise ValueError("--flat-index cannot be combined with --from-joint/--object")
            move = {'flat_index': args.flat_index, 'to_joint': args.to_joint}
        else:
            if args.from_joint is None or args.object is None:
                raise ValueError("All of --from-joint, --object and --to-joint must be specified")
            move = {'from_joint': args.from_joint, 'object': args.object, 'to_joint': args.to_joint}
        config['moves'] = [move]

    return config


def default_output_path(input_path: str) -> str:
    stem, ext = os.path.splitext(input_path)
    return f"{stem}_modified{ext or '.json'}"


def print_table(session: SessionModel):
    """打印 关节/对象 表格"""
    print(f"关节数: {session.joint_count}, 对象数: {session.object_count}")
    for row in session.describe():
        pos = ", ".join(f"{v:.3f}" for v in row['world_position'])
        if row['position'] is None:
            print(f"  J{row['joint_index']:<3} {row['joint_name']:<20} ({pos})  -")
        else:
            label = row['object_name'] if row['object_name'] is not None else ""
            print(f"  J{row['joint_index']:<3} {row['joint_name']:<20} ({pos})  "
                  f"O{row['position']} [#{row['flat_index']}] {label}")


def apply_move(session: SessionModel, move: Dict[str, Any]):
    """执行单条移动配置"""
    to_joint = int(move['to_joint'])
    if 'flat_index' in move:
        flat_index = int(move['flat_index'])
        print(f"Moving object #{flat_index} -> J{to_joint}.")
        new_flat_index = session.move(flat_index, to_joint)
        joint_index, position = session.locate(new_flat_index)
        print(f"Successfully moved. New object index under J{joint_index} is O{position} (#{new_flat_index}).")
    else:
        from_joint = int(move['from_joint'])
        object_index = int(move['object'])
        print(f"Moving object O{object_index} from J{from_joint} -> J{to_joint}.")
        new_index = session.reassign(from_joint, object_index, to_joint)
        print(f"Successfully moved. New object index under J{to_joint} is O{new_index}.")


def run_reassigner(config: Dict[str, Any]) -> int:
    """
    :param config: 配置字典（input_path, output_path, moves, list_only）
    :return: 进程退出码
    """
    input_path = config.get('input_path')
    if not input_path:
        print("❌ 未指定输入文件 (input_path)")
        return 1
    if not os.path.exists(input_path):
        print(f"❌ Input file not found: {input_path}")
        return 1

    output_path = config.get('output_path') or default_output_path(input_path)
    moves: List[Dict[str, Any]] = config.get('moves') or []
    if not isinstance(moves, list):
        print(f"❌ moves 必须是列表，得到 {type(moves).__name__}")
        return 1
    list_only = bool(config.get('list_only', False))

    print("----------- Joint Reassigner -----------")
    print(f"正在加载场景: {input_path} ...")
    try:
        root, _, extra = load_scene(input_path)
        session = SessionModel.open(root)
    except (OSError, ValueError, KeyError, TypeError, AttributeError, JointReassignError) as e:
        print(f"❌ 场景加载失败: {e}")
        return 1

    print_table(session)

    if list_only or not moves:
        if not list_only:
            print("没有需要执行的移动。")
        return 0

    for move in moves:
        try:
            apply_move(session, move)
        except KeyError as e:
            print(f"❌ 移动配置缺少字段: {e}")
            return 1
        except (TypeError, ValueError) as e:
            print(f"❌ 移动配置无效: {move!r} ({e})")
            return 1
        except JointReassignError as e:
            print(f"❌ {e}")
            return 1

    root = session.close()
    print(f"正在导出到: {output_path} ...")
    try:
        save_scene(root, output_path, extra)
    except OSError as e:
        print(f"❌ 导出失败: {e}")
        return 1
    print(f"✅ Saved modified file to: {output_path}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = config_from_args(args)
    except (OSError, ValueError) as e:
        print(f"❌ {e}")
        return 1
    return run_reassigner(config)


if __name__ == "__main__":
    sys.exit(main())
