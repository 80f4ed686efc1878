"""
taskflow 命令行入口

使用方式:
    python -m taskflow run flow.mmd            # 运行未编码的流程文本
    python -m taskflow run flow.b64 --encoded  # 运行 Base64 编码的脚本
    python -m taskflow validate flow.mmd       # 只校验，不执行
    python -m taskflow encode flow.mmd         # 输出编码后的脚本
    python -m taskflow serve --port 8080       # 启动 HTTP 服务
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from taskflow.config import get_config
from taskflow.core.errors import EngineError
from taskflow.logger import LogFormat, setup_logging

logger = logging.getLogger("taskflow.cli")


def _read_script(args) -> str:
    text = Path(args.file).read_text(encoding="utf-8")
    if args.encoded:
        return text.strip()
    from taskflow.flows import encode_script
    return encode_script(text)


def cmd_run(args) -> int:
    from taskflow.flows import run_workflow

    result = run_workflow(_read_script(args), get_config().engine)
    print(result.to_json())
    if result.is_error():
        logger.error(f"流程执行失败: {result.error.code} {result.error.message}")
        return 1
    return 0


def cmd_validate(args) -> int:
    from taskflow.flows import FlowEngine

    flow = FlowEngine(get_config().engine).load(_read_script(args))
    print(json.dumps(flow.describe(), ensure_ascii=False, indent=2))
    return 0


def cmd_encode(args) -> int:
    from taskflow.flows import encode_script

    print(encode_script(Path(args.file).read_text(encoding="utf-8")))
    return 0


def cmd_serve(args) -> int:
    from taskflow.api import serve

    serve(host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="taskflow",
        description="流程图脚本执行引擎",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="日志级别 (默认: 读取 LOG_LEVEL，未设置时为 INFO)",
    )
    parser.add_argument(
        "--log-format",
        type=str,
        default="simple",
        choices=[f.value for f in LogFormat],
        help="日志格式 (默认: simple)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, handler, help_text in (
        ("run", cmd_run, "运行流程"),
        ("validate", cmd_validate, "校验流程"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("file", help="流程文件")
        sub.add_argument("--encoded", action="store_true", help="文件内容已是 Base64 编码")
        sub.set_defaults(handler=handler)

    encode = subparsers.add_parser("encode", help="编码流程文本")
    encode.add_argument("file", help="流程文件")
    encode.set_defaults(handler=cmd_encode)

    serve = subparsers.add_parser("serve", help="启动 HTTP 服务")
    serve.add_argument("--host", type=str, default=None, help="监听地址")
    serve.add_argument("--port", type=int, default=None, help="监听端口")
    serve.set_defaults(handler=cmd_serve)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    log_settings = get_config().log
    setup_logging(
        level=args.log_level or log_settings.level.value,
        format=LogFormat(args.log_format),
        fmt=log_settings.format,
        date_format=log_settings.date_format,
        file_path=log_settings.file_path,
    )

    try:
        return args.handler(args)
    except EngineError as e:
        logger.error(f"{type(e).__name__}: {e.message}")
        if e.details:
            logger.error(json.dumps(e.details, ensure_ascii=False, default=str))
        return 1


if __name__ == "__main__":
    sys.exit(main())
