from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from guestform.config import get_settings
from guestform.errors import FormFillError
from guestform.render.assembler import build_draw_plan, coerce_record, generate, update
from guestform.render.marks import resolve_category, resolve_payment


def _print_json(payload: dict) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def _load_record(path_arg: str) -> dict[str, Any] | None:
    path = Path(path_arg).expanduser().resolve()
    if not path.exists() or not path.is_file():
        _print_json({'status': 'error', 'message': f'Record not found: {path}'})
        return None
    try:
        payload = json.loads(path.read_text(encoding='utf-8'))
    except json.JSONDecodeError as exc:
        _print_json({'status': 'error', 'message': f'Record is not valid JSON: {exc}'})
        return None
    if not isinstance(payload, dict):
        _print_json({'status': 'error', 'message': 'Record must be a JSON object'})
        return None
    return payload


def _write_output(out_arg: str, content: bytes) -> Path:
    out_path = Path(out_arg).expanduser().resolve()
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_bytes(content)
    return out_path


def cmd_generate(args: argparse.Namespace) -> int:
    record = _load_record(args.record)
    if record is None:
        return 2
    try:
        content = generate(record)
    except FormFillError as exc:
        _print_json({'status': 'error', 'message': str(exc)})
        return 2

    out_path = _write_output(args.out, content)
    _print_json({'status': 'ok', 'output_path': str(out_path), 'bytes': len(content)})
    return 0


def cmd_update(args: argparse.Namespace) -> int:
    record = _load_record(args.record)
    if record is None:
        return 2
    blob = update(record)
    if blob is None:
        _print_json({'status': 'not_updated', 'message': 'Record is incomplete or generation failed.'})
        return 2

    out_path = _write_output(args.out, bytes(blob))
    _print_json(
        {
            'status': 'ok',
            'output_path': str(out_path),
            'bytes': len(blob),
            'media_type': blob.media_type,
        }
    )
    return 0


def cmd_plan(args: argparse.Namespace) -> int:
    raw = _load_record(args.record)
    if raw is None:
        return 2
    try:
        record = coerce_record(raw)
    except ValidationError as exc:
        _print_json({'status': 'error', 'message': f'Invalid record: {exc}'})
        return 2

    selection = resolve_category(record.category)
    payment = resolve_payment(record.payment)
    ops = build_draw_plan(record)
    _print_json(
        {
            'category': {'room_class': selection.room_class, 'tier': selection.tier},
            'payment': {'label': payment.label, 'source': payment.source, 'source_name': payment.source_name},
            'ops': [
                {
                    'field': op.field,
                    'page_index': op.descriptor.page_index,
                    'x': op.descriptor.x,
                    'y': op.descriptor.y,
                    'kind': op.descriptor.kind.value,
                    'value': op.value,
                }
                for op in ops
            ],
        }
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Fill the Guest Room Register Form from a reservation record')
    sub = parser.add_subparsers(dest='command', required=True)

    generate_cmd = sub.add_parser('generate', help='Generate a filled form')
    generate_cmd.add_argument('--record', required=True, help='Path to reservation record JSON')
    generate_cmd.add_argument('--out', required=True, help='Output PDF path')
    generate_cmd.set_defaults(func=cmd_generate)

    update_cmd = sub.add_parser('update', help='Regenerate the form for an edited reservation')
    update_cmd.add_argument('--record', required=True, help='Path to reservation record JSON')
    update_cmd.add_argument('--out', required=True, help='Output PDF path')
    update_cmd.set_defaults(func=cmd_update)

    plan_cmd = sub.add_parser('plan', help='Show what would be drawn, without loading resources')
    plan_cmd.add_argument('--record', required=True, help='Path to reservation record JSON')
    plan_cmd.set_defaults(func=cmd_plan)

    return parser


def main(argv: list[str] | None = None) -> int:
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, str(settings.log_level).upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )
    parser = build_parser()
    args = parser.parse_args(argv)
    return int(args.func(args))


if __name__ == '__main__':
    raise SystemExit(main())
