"""
obfuscate_ids 命令列介面

用法:
    obfuscate-ids encode 42 --no-padding
    obfuscate-ids decode <token>
    obfuscate-ids encode-numeric 42
    obfuscate-ids decode-numeric 302841629
"""

import argparse
import logging
import sys

from obfuscate_ids.config import config
from obfuscate_ids.keys import get_key_material
from obfuscate_ids.numeric_codec import decrypt_numeric, encrypt_numeric
from obfuscate_ids.string_codec import decode_result, encrypt_id


def setup_logger(loglevel: str) -> logging.Logger:
    numeric_level = getattr(logging, loglevel.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError("Invalid log level: %s" % loglevel)
    logger = logging.getLogger("obfuscate_ids")
    logger.setLevel(numeric_level)
    formatter = logging.Formatter("PID [%(process)d] - %(asctime)s - %(levelname)s - %(message)s")

    if logger.handlers:
        return logger
    sh = logging.StreamHandler(sys.stderr)
    sh.setLevel(numeric_level)
    sh.setFormatter(formatter)
    logger.addHandler(sh)
    return logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="obfuscate-ids", description="加密/解密對外 ID")
    parser.add_argument("--loglevel", default="warning", help="Log level (debug, info, warning, error)")
    sub = parser.add_subparsers(dest="command", required=True)

    enc = sub.add_parser("encode", help="加密為 URL 安全 token")
    enc.add_argument("id")
    enc.add_argument("--no-padding", action="store_true", help="不輸出結尾的 '='")

    dec = sub.add_parser("decode", help="解密 token")
    dec.add_argument("token")

    enc_num = sub.add_parser("encode-numeric", help="加密 30 位元數字 ID")
    enc_num.add_argument("id", type=int)

    dec_num = sub.add_parser("decode-numeric", help="解密 30 位元數字 ID")
    dec_num.add_argument("id", type=int)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logger(args.loglevel)
    config.validate()
    keys = get_key_material()

    if args.command == "encode":
        print(encrypt_id(args.id, padding=not args.no_padding, keys=keys))
    elif args.command == "decode":
        result = decode_result(args.token, keys=keys)
        if not result.ok:
            print(f"無法解密: {result.error}", file=sys.stderr)
            return 1
        print(result.value)
    elif args.command == "encode-numeric":
        try:
            print(encrypt_numeric(args.id, keys=keys))
        except ValueError as e:
            print(e, file=sys.stderr)
            return 2
    elif args.command == "decode-numeric":
        print(decrypt_numeric(args.id, keys=keys))
    return 0


if __name__ == "__main__":
    sys.exit(main())
