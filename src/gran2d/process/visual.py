'''
Render .p4p frames as 2D disc plots coloured by speed
'''
import os
from typing import Optional, Tuple

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.collections import PatchCollection
from matplotlib.patches import Circle

from .p4p import P4PFrame, read_frames

background_color = "#F8FAFC"
cmap_name = "plasma"


def frame_bounds(frame: P4PFrame, margin: float = 0.05) -> Tuple[float, float, float, float]:
    """Bounding box of all discs, padded by <margin> of the larger extent; y starts at the floor."""
    r = frame.radius
    xmin = float(np.min(frame.position[:, 0] - r))
    xmax = float(np.max(frame.position[:, 0] + r))
    ymin = min(0.0, float(np.min(frame.position[:, 1] - r)))
    ymax = float(np.max(frame.position[:, 1] + r))
    pad = margin * max(xmax - xmin, ymax - ymin)
    return xmin - pad, xmax + pad, ymin - pad, ymax + pad


def render_frame(frame: P4PFrame, ax=None, bounds=None, vmax: Optional[float] = None):
    if ax is None:
        _, ax = plt.subplots(figsize=(8, 6))
    if bounds is None:
        bounds = frame_bounds(frame)
    xmin, xmax, ymin, ymax = bounds

    ax.set_facecolor(background_color)
    speed = np.linalg.norm(frame.velocity, axis=1)
    patches = [Circle((x, y), r) for (x, y), r in zip(frame.position, frame.radius)]
    collection = PatchCollection(patches, cmap=cmap_name, edgecolor='white', linewidth=0.3)
    collection.set_array(speed)
    collection.set_clim(0.0, vmax if vmax is not None else max(float(speed.max()), 1e-12))
    ax.add_collection(collection)

    # Floor
    ax.axhline(0.0, color='#181C14', linewidth=2.0, alpha=0.5)

    ax.set_xlim(xmin, xmax)
    ax.set_ylim(ymin, ymax)
    ax.set_aspect('equal')
    ax.set_title(f"t = {frame.time:.4f} s, {frame.num_particles} particles")
    return ax, collection


def render_frames(input_file: str, output_dir: str = "output_frames_2d", dpi: int = 150):
    '''
    Save one PNG per frame, sharing the axes and colour scale of the whole run.
    '''
    frames = read_frames(input_file)
    os.makedirs(output_dir, exist_ok=True)
    if not frames:
        return []

    boxes = np.array([frame_bounds(f) for f in frames])
    bounds = (boxes[:, 0].min(), boxes[:, 1].max(), boxes[:, 2].min(), boxes[:, 3].max())
    vmax = max(float(np.linalg.norm(f.velocity, axis=1).max()) for f in frames)

    paths = []
    for step, frame in enumerate(frames):
        fig, ax = plt.subplots(figsize=(8, 6))
        fig.patch.set_facecolor(background_color)
        _, collection = render_frame(frame, ax=ax, bounds=bounds, vmax=vmax)
        fig.colorbar(collection, ax=ax, label="speed")

        output_path = os.path.join(output_dir, f"frame_{step:04d}.png")
        fig.savefig(output_path, dpi=dpi, bbox_inches='tight', facecolor=fig.get_facecolor())
        plt.close(fig)
        paths.append(output_path)

        if step % 10 == 0:
            print(f"Generated frame {step}/{len(frames)}")
    return paths


if __name__ == "__main__":
    import sys

    input_file = sys.argv[1] if len(sys.argv) > 1 else "output.p4p"
    paths = render_frames(input_file)
    print(f"Rendered {len(paths)} frames from '{input_file}'")
