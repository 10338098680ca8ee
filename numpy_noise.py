#numpy_noise.py

import numpy as np

GRADIENT_VECTORS = np.array([[1, 1], [-1, 1], [1, -1], [-1, -1], [0, 1], [0, -1], [1, 0], [-1, 0]])
PERMUTATION_SIZE = 256

def make_permutation_table(rng):
    """Builds a doubled, shuffled permutation table from the given generator."""
    p = rng.permutation(PERMUTATION_SIZE)
    return np.concatenate([p, p])

def perlin_noise_2d(p, x, y, octaves=1, persistence=0.5, lacunarity=2.0):
    """
    Generate 2D Perlin noise using a pre-computed permutation table.

    Args:
        p: The doubled permutation table from make_permutation_table().
        x, y: 2D numpy arrays of the same shape representing coordinates.
        octaves: Number of layers summed together.
        persistence: Amplitude multiplier between octaves.
        lacunarity: Frequency multiplier between octaves.

    The result is normalized by the summed amplitudes, so it stays roughly in [-1, 1].
    """
    total_noise = np.zeros(x.shape)
    amplitude = 1.0
    max_amplitude = 0.0

    for _ in range(octaves):
        xi = np.floor(x).astype(int)
        yi = np.floor(y).astype(int)
        xf = x - xi
        yf = y - yi
        u = fade(xf)
        v = fade(yf)

        px0 = xi % PERMUTATION_SIZE
        px1 = (px0 + 1) % PERMUTATION_SIZE
        py0 = yi % PERMUTATION_SIZE
        py1 = (py0 + 1) % PERMUTATION_SIZE

        # Gradients at the four lattice corners
        g00 = gradient(p[p[px0] + py0], xf, yf)
        g01 = gradient(p[p[px0] + py1], xf, yf - 1)
        g10 = gradient(p[p[px1] + py0], xf - 1, yf)
        g11 = gradient(p[p[px1] + py1], xf - 1, yf - 1)

        # Interpolation
        x1 = lerp(g00, g10, u)
        x2 = lerp(g01, g11, u)
        total_noise += lerp(x1, x2, v) * amplitude

        max_amplitude += amplitude
        amplitude *= persistence
        x, y = x * lacunarity, y * lacunarity

    return total_noise / max_amplitude

def noise_field(rng, width, height, scale, octaves=1, persistence=0.5, lacunarity=2.0):
    """
    Returns a (height, width) array of noise values for a grid of cells.
    Each call draws its own permutation table and origin from the generator.
    """
    p = make_permutation_table(rng)
    offset_x, offset_y = rng.uniform(0, PERMUTATION_SIZE, size=2)
    xs = (np.arange(width) + offset_x) / scale
    ys = (np.arange(height) + offset_y) / scale
    x_grid, y_grid = np.meshgrid(xs, ys)
    return perlin_noise_2d(p, x_grid, y_grid, octaves=octaves,
                           persistence=persistence, lacunarity=lacunarity)

def lerp(a, b, x):
    "Linear interpolation."
    return a + x * (b - a)

def fade(t):
    "6t^5 - 15t^4 + 10t^3"
    return t * t * t * (t * (t * 6 - 15) + 10)

def gradient(h, x, y):
    """Picks a gradient vector for each hash and returns its dot product with (x, y)."""
    g = GRADIENT_VECTORS[h % len(GRADIENT_VECTORS)]
    return g[..., 0] * x + g[..., 1] * y
