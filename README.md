# imagefeatures

Building blocks for local image features on grayscale images held as NumPy
arrays indexed `[row, column]`: SIFT-style gradient descriptors and their
matching, Gaussian and separable convolution, median and outlier filters,
B-spline prefiltering and interpolation kernels, and small statistics on
one-dimensional signals.

## Installation

```
pip install .
```

For running the tests:

```
pip install .[test]
pytest
```

## Modules

- `imagefeatures.signal` — `gauss` (normalized 1-D Gaussian kernel),
  `mean`, `var`, `median`, `normalize`, `nearest`, `binarize`,
  `max_with_index`, `min_with_index`, `sort_with_companions`, `histogram`
  (by number of bins or by bin width), and the exponential lookup table
  `fill_exp_lut` / `slut`.
- `imagefeatures.splines` — `finvspline` (B-spline coefficients of order
  2 to 11 for an image), the interpolation kernels `keys`, `spline3`,
  `init_splinen` / `splinen`, plus `ipow` and `pixel_value`.
- `imagefeatures.filters` — `gaussian_convolution`, `separable_convolution`,
  `fast_separable_convolution`, `horizontal_convolution`,
  `vertical_convolution`, `buffer_convolution`, `convol` (2-D kernel, zero
  outside the image), `directional_gauss_filter`, `median_filter`,
  `remove_outliers` and `heat`. Boundary handling is chosen with the
  `Boundary` enum (`ZERO` or `SYMMETRIC`).
- `imagefeatures.sift_descriptor` — `SiftParameters` (detector, descriptor
  and matching settings with their usual defaults), `Keypoint` (`x`, `y`,
  `scale`, `angle`, `vec`), and the descriptor functions `key_sample_vec`,
  `place_in_index`, `normalize_vec` and `make_keypoint`.
- `imagefeatures.sift_match` — `dist_squared`, `dist_l1`, `check_for_match`
  and `compute_sift_matches`.

## Describing a point

`make_keypoint` takes a gradient magnitude image and a gradient orientation
image (radians) of the same shape, the octave size, the scale, row and
column of the point within that octave, and the keypoint orientation. It
returns a `Keypoint` whose 128-value descriptor has been normalized,
clipped at `max_index_val`, renormalized and quantized to integers 0..255.

```python
import numpy as np
from imagefeatures.filters import gaussian_convolution
from imagefeatures.sift_descriptor import SiftParameters, make_keypoint

params = SiftParameters()
blurred = gaussian_convolution(image, 1.6)

gy, gx = np.gradient(blurred)
grad = np.hypot(gx, gy)
ori = np.arctan2(-gy, gx)

key = make_keypoint(grad, ori, 1.0, 1.6, 40.0, 52.0, 0.0, params)
print(key.x, key.y, key.scale, key.vec[:8])
```

## Matching

```python
from imagefeatures.sift_match import compute_sift_matches

for first, second in compute_sift_matches(keys1, keys2, params):
    print(first.x, first.y, "->", second.x, second.y)
```

Each keypoint of `keys1` is compared with those of `keys2` by the L1
distance of their descriptors; a pair is kept when the closest distance
divided by the second closest is below `match_ratio` squared. Candidates
farther away than `match_x_radius` / `match_y_radius` are not considered
close.

## Filters

```python
from imagefeatures.filters import Boundary, median_filter, separable_convolution
from imagefeatures.signal import gauss

kernel = gauss(2.0)
smooth = separable_convolution(image, kernel, kernel, Boundary.ZERO)
clean = median_filter(image, 1.0, 2)
```

## What the package does not do

The package does not search an image for keypoints: there is no scale-space
construction, extremum detection or orientation assignment, so the
positions, scales and angles given to `make_keypoint` must come from the
caller. There is no SURF detector or descriptor, no resampling, colour
conversion or drawing helpers, no reading or writing of image files, and no
command-line program.