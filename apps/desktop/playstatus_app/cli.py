"""CLI entrypoints for the status window, one-shot rendering, settings, and diagnostics."""

from __future__ import annotations

import argparse
import json
from dataclasses import replace
from pathlib import Path

from playstatus_core import (
    MAX_LINES,
    Color,
    FontStyle,
    FormatTemplateEngine,
    GlobalConfig,
    JsonSettingsStore,
    StatusController,
    WidgetConfig,
    build_doctor_payload,
    load_config,
    save_config,
)
from playstatus_core.config import normalize
from playstatus_core.diagnostics import config_payload, export_controller_diagnostics
from playstatus_core.logging_setup import configure_logging

from .demo import SimulatedPlayer


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, sort_keys=True, default=str))


def _store(args: argparse.Namespace) -> JsonSettingsStore:
    return JsonSettingsStore(Path(args.settings).expanduser() if args.settings else None)


def cmd_run(args: argparse.Namespace) -> int:
    from .app import run_gui

    return run_gui(settings=Path(args.settings).expanduser() if args.settings else None)


def cmd_render(args: argparse.Namespace) -> int:
    store = _store(args)
    player = SimulatedPlayer()
    player.select(args.track)
    if not args.stopped:
        player.play()

    controller = StatusController(player, FormatTemplateEngine(), store, max_text_len=args.max_len)
    try:
        controller.apply_config(load_config(store), persist=False)
        frame = controller.render_now()
    finally:
        controller.shutdown()

    if args.out:
        from playstatus_render import FramePainter

        out = Path(args.out).expanduser()
        FramePainter(width=args.width).render_image(frame).save(out)

    _print_json(
        {
            "playing": not args.stopped,
            "image": args.out,
            "lines": [
                {
                    "text": line.text,
                    "font": line.style.font.to_descriptor(),
                    "color": line.style.color.to_string(),
                }
                for line in frame
            ],
        }
    )
    return 0


def cmd_config_show(args: argparse.Namespace) -> int:
    _print_json(config_payload(load_config(_store(args))))
    return 0


def cmd_config_set(args: argparse.Namespace) -> int:
    store = _store(args)
    cfg = load_config(store)
    general = GlobalConfig(
        refresh_interval_ms=cfg.general.refresh_interval_ms if args.interval is None else args.interval,
        active_line_count=cfg.general.active_line_count if args.lines is None else args.lines,
    )
    lines = list(cfg.lines)
    if args.line is not None:
        current = lines[args.line]
        lines[args.line] = replace(
            current,
            template=current.template if args.template is None else args.template,
            font=current.font if args.font is None else FontStyle.from_descriptor(args.font),
            color=current.color if args.color is None else Color.from_string(args.color),
        )

    cfg = normalize(WidgetConfig(general=general, lines=lines))
    save_config(store, cfg)
    _print_json(config_payload(cfg))
    return 0


def cmd_doctor(args: argparse.Namespace) -> int:
    store = _store(args)
    controller = StatusController(SimulatedPlayer(), FormatTemplateEngine(), store)
    try:
        rejected = controller.apply_config(load_config(store), persist=False)
        cfg = controller.config
        payload = build_doctor_payload(cfg, live_templates=controller.templates.live_count)
        payload["rejected_lines"] = rejected

        if args.export:
            out_dir = Path(args.out_dir).expanduser().resolve() if args.out_dir else None
            payload["diagnostics_bundle"] = str(export_controller_diagnostics(controller, output_dir=out_dir))
    finally:
        controller.shutdown()

    _print_json(payload)
    return 0


def _line_index(value: str) -> int:
    index = int(value)
    if not 0 <= index < MAX_LINES:
        raise argparse.ArgumentTypeError(f"line index must be in [0, {MAX_LINES - 1}]")
    return index


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="playstatus", description="Live playback status renderer")
    parser.add_argument("--settings", default=None, help="Optional settings JSON path")
    sub = parser.add_subparsers(dest="command", required=True)

    run_cmd = sub.add_parser("run", help="Run the status window with a simulated player")
    run_cmd.set_defaults(func=cmd_run)

    render_cmd = sub.add_parser("render", help="Render one frame and print its lines")
    render_cmd.add_argument("--track", type=int, default=0, help="Playlist index of the simulated track")
    render_cmd.add_argument("--stopped", action="store_true", help="Render the idle view")
    render_cmd.add_argument("--max-len", type=int, default=1024)
    render_cmd.add_argument("--width", type=int, default=300)
    render_cmd.add_argument("--out", default=None, help="Optional PNG output path")
    render_cmd.set_defaults(func=cmd_render)

    config_cmd = sub.add_parser("config", help="Show or change persisted settings")
    config_sub = config_cmd.add_subparsers(dest="config_cmd", required=True)
    show_cmd = config_sub.add_parser("show", help="Print current settings")
    show_cmd.set_defaults(func=cmd_config_show)
    set_cmd = config_sub.add_parser("set", help="Update settings")
    set_cmd.add_argument("--interval", type=int, default=None, help="Refresh interval in ms")
    set_cmd.add_argument("--lines", type=int, default=None, help="Number of active lines")
    set_cmd.add_argument("--line", type=_line_index, default=None, help="Line index to edit")
    set_cmd.add_argument("--template", default=None)
    set_cmd.add_argument("--font", default=None, help='Font descriptor, e.g. "Sans Bold 14"')
    set_cmd.add_argument("--color", default=None, help='16-bit RGB, e.g. "65535 0 0"')
    set_cmd.set_defaults(func=cmd_config_set)

    doctor_cmd = sub.add_parser("doctor", help="Print diagnostics")
    doctor_cmd.add_argument("--export", action="store_true", help="Export offline diagnostics bundle")
    doctor_cmd.add_argument("--out-dir", default=None, help="Optional output directory for diagnostics bundle")
    doctor_cmd.set_defaults(func=cmd_doctor)

    return parser


def main(argv: list[str] | None = None) -> int:
    configure_logging(console=False)
    parser = build_parser()
    args = parser.parse_args(argv)
    if getattr(args, "config_cmd", None) == "set" and args.line is None and (
        args.template is not None or args.font is not None or args.color is not None
    ):
        parser.error("--template/--font/--color require --line")
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
