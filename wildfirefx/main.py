#!/usr/bin/env python
"""
WildfireFX CLI - Particle flame animation driven by fire behavior

Usage:
    wildfirefx [options]

Examples:
    wildfirefx                                   # Preview the default preset
    wildfirefx --preset grass                    # Preview a named preset
    wildfirefx --behavior fire.json              # Flame from a calculation result
    wildfirefx --flame-length 12 --heat 2000     # Flame from raw values
    wildfirefx --preset slash --export out.gif   # Render headless to a GIF
"""

import argparse
import sys


DEFAULT_PRESET = 'chaparral'


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='wildfirefx',
        description="Particle flame animation driven by wildland fire behavior",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Fire behavior sources (first match wins):
  --behavior FILE    JSON calculation result (flat or service document)
  --flame-length FT  Raw values; heat release defaults to 1000 Btu/ft2
  --preset NAME      Named scenario (default: %s)

Examples:
  %%(prog)s --list-presets
  %%(prog)s --preset chaparral --show-config
  %%(prog)s --preset grass --export grass.gif --frames 90
  %%(prog)s --calibration tuning.yaml --wind
        """ % DEFAULT_PRESET
    )

    source = parser.add_argument_group('fire behavior')
    source.add_argument('-p', '--preset', type=str, default=None,
                        help=f'Preset name (default: {DEFAULT_PRESET})')
    source.add_argument('-b', '--behavior', type=str, default=None,
                        help='JSON file with a fire behavior result')
    source.add_argument('--flame-length', type=float, default=None,
                        help='Flame length [ft]')
    source.add_argument('--heat', type=float, default=1000.0,
                        help='Heat release [Btu/ft2] (with --flame-length)')
    source.add_argument('--depth', type=float, default=1.0,
                        help='Fuel bed depth [ft] (with --flame-length)')
    source.add_argument('--wind-speed', type=float, default=0.0,
                        help='Effective wind speed [mph] (with --flame-length)')
    source.add_argument('--presets-dir', type=str, default=None,
                        help='Directory of user preset YAML files')

    look = parser.add_argument_group('appearance')
    look.add_argument('--calibration', type=str, default=None,
                      help='YAML file with emitter coefficient overrides')
    look.add_argument('--start-color', type=str, default=None,
                      help='Color of fresh particles (name, #hex or r,g,b)')
    look.add_argument('--end-color', type=str, default=None,
                      help='Color particles fade toward')
    look.add_argument('--blend', type=str, default=None,
                      choices=['src_over', 'add', 'multiply', 'screen'],
                      help='Particle blend mode')
    look.add_argument('--wind', action='store_true',
                      help='Enable wind drift')
    look.add_argument('--seed', type=int, default=None,
                      help='Random seed for reproducible output')

    output = parser.add_argument_group('output')
    output.add_argument('-o', '--export', type=str, default=None,
                        help='Render headless to a .gif or a directory of PNG frames')
    output.add_argument('-f', '--frames', type=int, default=120,
                        help='Frames to export (default: 120)')
    output.add_argument('--warmup', type=int, default=30,
                        help='Frames simulated before export starts (default: 30)')
    output.add_argument('--size', type=str, default='640x480',
                        help='Canvas size WxH (default: 640x480)')
    output.add_argument('--fps', type=int, default=60,
                        help='Frame rate (default: 60)')

    info = parser.add_argument_group('information')
    info.add_argument('--list-presets', action='store_true',
                      help='List available presets and exit')
    info.add_argument('--show-config', action='store_true',
                      help='Print the derived emitter configuration and exit')
    info.add_argument('-v', '--verbose', action='store_true',
                      help='Show tracebacks on error')

    return parser


def parse_size(text: str):
    try:
        w, h = text.lower().split('x')
        width, height = int(w), int(h)
    except ValueError:
        raise ValueError(f"Invalid size '{text}', expected WxH (e.g. 640x480)") from None
    if width <= 0 or height <= 0:
        raise ValueError(f"Invalid size '{text}', dimensions must be positive")
    return width, height


def resolve_sample(args, presets):
    """Pick the fire behavior source from the arguments"""
    from .fire import load_fire_behavior
    from .fire.calc import sample_from_flame_length

    if args.behavior:
        return load_fire_behavior(args.behavior), None

    if args.flame_length is not None:
        sample = sample_from_flame_length(
            args.flame_length,
            args.heat,
            fuel_bed_depth=args.depth,
            effective_wind_speed=args.wind_speed,
        )
        return sample.validate(), None

    name = args.preset or DEFAULT_PRESET
    preset = presets.get(name)
    if preset is None:
        raise ValueError(f"Unknown preset: {name}. Available: {', '.join(presets.list_all())}")
    return preset.sample(), preset


def list_presets(presets):
    print("\nAvailable presets:\n")
    for name in presets.list_all():
        preset = presets.get(name)
        sample = preset.sample()
        print(f"  {name:<16} {preset.description}")
        print(f"  {'':<16} flame length {sample.flame_length:.1f} ft, "
              f"heat {sample.heat_release:.0f} Btu/ft2, depth {sample.fuel_bed_depth:.1f} ft")
    print()


def show_config(emitter):
    config = emitter.config
    print("\nEmitter configuration:")
    print(f"  Vertical velocity:   {config.y_velocity:.2f}")
    print(f"  Horizontal velocity: {config.x_velocity:.2f}")
    print(f"  X variance:          {config.x_variance:.2f}")
    print(f"  Y variance:          {config.y_variance:.2f}")
    print(f"  Particle radius:     {config.radius:.2f}")
    print(f"  Particles per batch: {config.max_count}")
    print(f"  Expire time:         {config.expire_time:.3f} s")
    print(f"  Wind speed:          {config.wind_speed:.1f} mph")
    print(f"  Colors:              {config.start_color} -> {config.end_color}")
    print(f"  Blend mode:          {config.blend_mode.name}")
    print()


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        from pathlib import Path
        from .core.presets import PresetManager, load_calibration
        from .core.surface import BlendMode
        from .core.utils import ColorUtils
        from .fire import FireEmitter, FireSimulation

        presets = PresetManager(Path(args.presets_dir) if args.presets_dir else None)

        if args.list_presets:
            list_presets(presets)
            return 0

        width, height = parse_size(args.size)
        if args.fps <= 0:
            raise ValueError(f"Invalid frame rate {args.fps}, --fps must be positive")
        calibration = load_calibration(args.calibration) if args.calibration else None
        sample, preset = resolve_sample(args, presets)

        emitter = FireEmitter(calibration=calibration, seed=args.seed, wind_enabled=args.wind)

        start, end = preset.colors() if preset else (None, None)
        if args.start_color:
            start = ColorUtils.parse(args.start_color)
        if args.end_color:
            end = ColorUtils.parse(args.end_color)
        if start is None and end is not None:
            start = emitter.config.start_color
        if start is not None:
            emitter.set_colors(start, end)
        if args.blend:
            emitter.set_blend_mode(BlendMode[args.blend.upper()])

        emitter.configure(sample)

        if args.show_config:
            show_config(emitter)
            return 0

        simulation = FireSimulation(emitter)

        if args.export:
            from .core.exporter import FrameExporter, render_frames

            print(f"Rendering {args.frames} frames at {width}x{height}...")
            frames = render_frames(
                simulation, args.frames, width, height,
                fps=args.fps, warmup=args.warmup
            )
            out = Path(args.export)
            if out.suffix.lower() == '.gif':
                FrameExporter.to_gif(frames, out, duration=int(round(1000 / args.fps)))
            else:
                FrameExporter.to_frames(frames, out)
            print(f"Output: {out}")
            print("Done!")
            return 0

        from .core.preview import check_pygame_available, preview_simulation

        if not check_pygame_available():
            print("Error: Preview requires pygame. Install with: pip install pygame")
            return 1

        print("Opening preview window...")
        print("Controls: SPACE=pause, LEFT/RIGHT=preset, W=wind, H=help, ESC=quit")
        preview_simulation(
            simulation,
            presets=presets,
            preset_name=preset.name if preset else None,
            width=width,
            height=height,
            fps=args.fps,
        )
        return 0

    except Exception as e:
        print(f"Error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == '__main__':
    sys.exit(main())
