"""
Visualization Utilities for Paired CT Samples
=============================================
Plotting helpers for inspecting A/B slices produced by the loader.
"""

import numpy as np
import matplotlib.pyplot as plt
from typing import List, Optional, Tuple
import os

from ctslices.preprocessing import denormalize_hu


def plot_sample_pair(
    sample: np.ndarray,
    title: Optional[str] = None,
    hu_range: Optional[Tuple[float, float]] = None,
    save_path: Optional[str] = None,
    figsize: Tuple[int, int] = (9, 3)
) -> None:
    """
    Plot the A and B channels of a sample next to their difference.

    Args:
        sample: Array of shape (2, H, W) with values in [-1, 1]
        title: Optional figure title
        hu_range: (hu_min, hu_max) to display values in HU instead of [-1, 1]
        save_path: Optional path to save the figure
        figsize: Figure size
    """
    if hu_range is not None:
        sample = denormalize_hu(sample, *hu_range)
        vmin, vmax = hu_range
    else:
        vmin, vmax = -1.0, 1.0

    fig, axes = plt.subplots(1, 3, figsize=figsize)

    axes[0].imshow(sample[0], cmap='gray', vmin=vmin, vmax=vmax)
    axes[0].set_title('A')
    axes[1].imshow(sample[1], cmap='gray', vmin=vmin, vmax=vmax)
    axes[1].set_title('B')

    diff = sample[1] - sample[0]
    limit = float(np.abs(diff).max()) or 1.0
    im = axes[2].imshow(diff, cmap='RdBu_r', vmin=-limit, vmax=limit)
    axes[2].set_title('B - A')
    fig.colorbar(im, ax=axes[2], fraction=0.046, pad=0.04)

    for ax in axes:
        ax.axis('off')

    if title:
        fig.suptitle(title, fontsize=10)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        print(f"Saved sample preview to {save_path}")
    else:
        plt.show()

    plt.close()


def plot_intensity_histogram(
    samples: List[np.ndarray],
    save_path: Optional[str] = None,
    bins: int = 100
) -> None:
    """
    Plot the distribution of normalized intensities per channel.

    Useful for checking the HU window: mass piled at -1 or 1 means the
    window clips a large share of the tissue.
    """
    stacked = np.stack(samples, axis=0)

    plt.figure(figsize=(6, 4))
    plt.hist(stacked[:, 0].ravel(), bins=bins, range=(-1, 1), alpha=0.6,
             label='A', color='#2E86AB')
    plt.hist(stacked[:, 1].ravel(), bins=bins, range=(-1, 1), alpha=0.6,
             label='B', color='#E94F37')
    plt.xlabel('Normalized intensity')
    plt.ylabel('Pixel count')
    plt.title('Intensity distribution')
    plt.legend()
    plt.grid(True, alpha=0.3)
    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        print(f"Saved intensity histogram to {save_path}")
    else:
        plt.show()

    plt.close()


def save_sample_previews(
    samples: List[np.ndarray],
    names: List[str],
    save_dir: str,
    hu_range: Optional[Tuple[float, float]] = None,
    num_samples: int = 6
) -> List[str]:
    """
    Save one preview figure per sample.

    Returns:
        List of written file paths
    """
    os.makedirs(save_dir, exist_ok=True)

    written = []
    for i in range(min(num_samples, len(samples))):
        save_path = os.path.join(save_dir, f'sample_{i}.png')
        plot_sample_pair(samples[i], title=names[i], hu_range=hu_range, save_path=save_path)
        written.append(save_path)

    return written
