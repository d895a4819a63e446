"""
AniSub Application Entry Point.

Command line front end for the subtitle rename engine and the filename
recognition engine.
"""

import argparse
import logging
import os
import sys
from datetime import datetime
from typing import List, Optional

from anisub.core.exceptions import AniSubError
from anisub.services.rename.rename_planner import SUFFIX_PRESETS, resolve_suffix

logger = logging.getLogger(__name__)


def setup_logging(debug: bool = False) -> None:
    """
    Configure root logging.

    Logs go to stdout and to a dated file under ``LOG_PATH`` (default
    ``logs``).
    """
    log_path = os.getenv('LOG_PATH', 'logs')
    os.makedirs(log_path, exist_ok=True)

    today = datetime.now().strftime('%Y-%m-%d')
    log_file = os.path.join(log_path, f'anisub_{today}.log')

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_file, encoding='utf-8'),
            logging.StreamHandler(sys.stdout)
        ]
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='AniSub - 字幕对齐与重命名工具')
    parser.add_argument('--debug', action='store_true', help='启用debug模式')
    subparsers = parser.add_subparsers(dest='command', help='可用命令')

    # 重命名命令
    rename_parser = subparsers.add_parser('rename', help='按剧集重命名字幕')
    rename_parser.add_argument('directory', help='包含视频和字幕的文件夹')
    rename_parser.add_argument('--suffix', default='', help='自定义后缀，如 chs')
    rename_parser.add_argument('--preset', choices=SUFFIX_PRESETS, help='预设后缀')
    rename_parser.add_argument('--pattern', help='剧集正则或预设名称')
    rename_parser.add_argument('--dry-run', action='store_true', help='仅预览，不重命名')

    # 识别命令
    recognize_parser = subparsers.add_parser('recognize', help='识别文件名并匹配Bangumi条目')
    recognize_parser.add_argument('directory', help='包含视频的文件夹')
    recognize_parser.add_argument('--batch', action='store_true', help='单次请求推断标题')
    recognize_parser.add_argument('--analyze', action='store_true', help='逐个识别所有视频')
    recognize_parser.add_argument('--apply', type=int, metavar='ID', help='应用Bangumi条目')

    # 设置命令
    settings_parser = subparsers.add_parser('settings', help='查看或修改设置')
    settings_parser.add_argument('--episode-regex', help='剧集正则')
    settings_parser.add_argument('--model-url', help='模型地址')
    settings_parser.add_argument('--model-name', help='模型名称')

    return parser


def handle_rename_command(args, container) -> int:
    service = container.rename_service()
    if args.pattern and not service.set_pattern(args.pattern):
        logger.warning(f'⚠️ 正则无效，已使用默认正则: {service.matcher.source}')

    service.import_directory(args.directory)

    missing = service.missing()
    if missing:
        logger.info(f'ℹ️ 已跳过缺失字幕的剧集: {", ".join(missing)}')

    response = service.rename(resolve_suffix(args.suffix, args.preset), dry_run=args.dry_run)
    for name in response.renamed_files:
        print(name)

    if response.success:
        logger.info(f'✅ {response.message}')
        return 0
    logger.error(f'❌ {response.message}')
    return 1


def handle_recognize_command(args, container) -> int:
    filesystem = container.filesystem()
    service = container.recognition_service()
    service.add_files(filesystem.list_directory(args.directory))

    if args.apply is not None:
        service.apply_series(args.apply)
        for path, name in service.preview_names().items():
            print(f'{os.path.basename(path)} -> {name or "-"}')
        return 0

    if args.analyze:
        for result in service.analyze_all():
            if result.info:
                print(f'{result.file.name}: {result.info.title} '
                      f'S{result.info.season:02d}E{result.info.episode:02d}')
            else:
                print(f'{result.file.name}: {result.error}')
        return 0

    inferred, candidates = service.suggest(batch=args.batch)
    print(f'{inferred.title} ({inferred.confidence:.0%})')
    for candidate in candidates:
        print(f'  [{candidate.id}] {candidate.display_name} {candidate.date or ""}'.rstrip())
    return 0


def handle_settings_command(args, container) -> int:
    store = container.settings_store()
    current = store.current

    updates = {
        'episode_regex': args.episode_regex,
        'model_url': args.model_url,
        'model_name': args.model_name,
    }
    changes = {k: v for k, v in updates.items() if v is not None}

    if changes:
        if not store.save(current.model_copy(update=changes)):
            return 1
        current = store.current

    print(current.model_dump_json(indent=2))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """主程序入口"""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.debug)
    if args.debug:
        logger.info('🐛 DEBUG模式已启用')

    if not args.command:
        parser.print_help()
        return 0

    from anisub.container import container

    handlers = {
        'rename': handle_rename_command,
        'recognize': handle_recognize_command,
        'settings': handle_settings_command,
    }

    try:
        return handlers[args.command](args, container)
    except AniSubError as e:
        logger.error(f'❌ {e}')
        return 1


if __name__ == '__main__':
    sys.exit(main())
