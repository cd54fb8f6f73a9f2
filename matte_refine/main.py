#!/usr/bin/env python3
"""
Matte Refine - Command Line Interface

Cleans the alpha channel of a cut-out image produced by a segmentation model:
the mask edge is tightened with an extremum snap filter, then softened with a
box blur. Colour channels are left untouched.
"""

import logging
from pathlib import Path

import click

from matte_refine.api import RefineParams, SmoothParams, process_matte
from matte_refine.config import BORDER_POLICIES, BORDER_POLICY, BOX_RADIUS, REFINE_RADIUS
from matte_refine.matte_io import default_output_path, load_rgba, save_png


@click.command(context_settings=dict(show_default=True))
@click.argument('input_path', type=click.Path(exists=True, dir_okay=False))
@click.argument('output_path', type=click.Path(dir_okay=False), required=False)
@click.option('--refine-radius', '-r', type=click.IntRange(min=0), default=REFINE_RADIUS,
              help='Window radius of the extremum snap filter')
@click.option('--box-radius', '-b', type=click.IntRange(min=0), default=BOX_RADIUS,
              help='Window radius of the box blur')
@click.option('--border', type=click.Choice(BORDER_POLICIES), default=BORDER_POLICY,
              help='Alpha of pixels too close to the edge to blur: keep it or clear it')
@click.option('--debug', '-d', is_flag=True, help='Save intermediate images for debugging')
@click.option('--verbose', '-v', is_flag=True, help='Log stage details')
def main(input_path: str, output_path: str | None, refine_radius: int, box_radius: int,
         border: str, debug: bool, verbose: bool) -> None:
    """Refine and smooth the alpha matte of INPUT_PATH.

    INPUT_PATH is an image whose alpha channel holds a segmentation mask.
    Images without alpha are treated as fully opaque.

    OUTPUT_PATH is where the PNG result is written. Defaults to
    <input name>_nobg.png next to the input.
    """
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    try:
        img = load_rgba(input_path)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)
    click.echo(f"Loaded image with shape {img.shape}")

    out_path = Path(output_path) if output_path else default_output_path(input_path)
    debug_dir = None
    if debug:
        debug_dir = out_path.parent / "debug"
        try:
            debug_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            click.echo(f"Error creating debug directory: {e}", err=True)
            raise SystemExit(1)
        click.echo(f"Debug mode enabled, saving intermediate images to '{debug_dir}'")

    matte = None
    try:
        for result in process_matte(
            img,
            refine_params=RefineParams(radius=refine_radius),
            smooth_params=SmoothParams(box_radius=box_radius, border=border),
            debug=debug
        ):
            if result.is_debug:
                if debug_dir:
                    save_png(result.image, str(debug_dir / f"{result.name}.png"))
            else:
                matte = result.image
            click.echo(f"{result.name}: {result.metadata['stage_s']:.3f}s")
    except (ValueError, OSError) as e:
        click.echo(f"Error processing image: {e}", err=True)
        raise SystemExit(1)

    try:
        save_png(matte, str(out_path))
    except (ValueError, OSError) as e:
        click.echo(f"Error saving matte: {e}", err=True)
        raise SystemExit(1)
    click.echo(f"Matte saved to {out_path.with_suffix('.png')}")


if __name__ == "__main__":
    main()
