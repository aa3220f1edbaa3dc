# linetrack

This package provides building blocks for a camera-guided, self-balancing track car. They are written in plain Python and need no dependencies.

## Modules

- `linetrack.image` handles grayscale frames. A frame is a list of rows of 0..255 values.
  - `compress(image, out_height=120, out_width=188)` downscales by nearest-neighbour picking.
  - `otsu_threshold(image)` computes the Otsu threshold over every second row and column.
  - `binarize(image)` returns a 0/1 image: 1 (white) above the threshold, 0 otherwise.
  - `draw_black_border(image)` blackens the two outer columns on each side and the two top rows, in place.
  - `is_out_of_bounds(image)` is true when the bottom-centre 10×3 patch averages below 50.
  - `TrackScanner` finds the left and right track borders in a binary frame with the "double longest white column" method (`sweep`). After a sweep it exposes:
    - the edge lines `left_line` and `right_line`;
    - the per-row lost flags and the lost counts;
    - `search_stop_line`.

    It also has these methods:
    - `error_average(start, end)` gives the mean centre offset over a row range.
    - `error_weighted()` gives the weighted centre offset. It uses per-row `weights` and raises `ValueError` if they sum to zero over the scanned rows.
    - `left_draw_line` and `right_draw_line` patch a border with a straight line.
    - `find_down_points` and `find_up_points` locate the corner points of each border.
- `linetrack.pid` holds the controller and parameter classes.
  - `PidController` has `location` (positional PID) and `d_pre_location` (its derivative term is a measured rate). Both apply integral and output limits. `reset` clears the running state.
  - `TurnParams`, `UserParams` and `ControlParams` hold the whole tuning set. `ControlParams.reset` zeroes every gain and limit.
- `linetrack.storage` stores a `ControlParams` set as a block of 17 little-endian 32-bit floats.
  - `pack_params` and `unpack_params` work on bytes.
  - `save_params` and `load_params` work on a file.
- `linetrack.imu` provides `ComplementaryFilter`. It is a first-order complementary filter: `update(sample)` turns an `ImuSample` into a tilt angle. The gyro reading is corrected by a `GyroBias` and passes through a ±5 dead band.
- `linetrack.menu` provides a key-driven tuning menu: `Menu`, `Key` and a text `Screen`.

## Installation

```
pip install .
```

Install with tests and run them:

```
pip install .[test]
pytest
```

## Example

```python
from linetrack.image import binarize, draw_black_border, TrackScanner

frame = [[200] * 188 for _ in range(120)]  # rows of 0..255 gray values
binary = binarize(frame)
draw_black_border(binary)

scanner = TrackScanner()
scanner.sweep(binary)
steer = scanner.error_average(60, 80)
```

```python
from linetrack.pid import ControlParams, PidController
from linetrack.storage import save_params, load_params

pid = PidController(kp=1.5, ki=0.1, i_limit=50.0, out_limit=100.0)
output = pid.location(setvalue=0.0, actualvalue=3.2)

params = ControlParams(gyro=pid)
save_params(params, "params.bin")
restored = load_params(ControlParams(), "params.bin")
```

## Tuning menu

Run the menu in a terminal:

```
linetrack-menu [--params FILE]
```

- **Input.** Each input line is one key: `up`/`u`/`1`, `down`/`d`/`2`, `select`/`s`/`3` or `back`/`b`/`4`. `q` quits.
- **Main menu.** Up and down move the cursor, and select activates an entry:
  - `car_go` sets a flag and prints `car go`.
  - `gyro_pid` opens the gyro-loop page.
  - `save_param` and `load_param` write and read the parameter file. The default file is `params.bin`.
- **Gyro page.** Select on `gyro_kp` or `gyro_ki` enters edit mode. In edit mode, up and down change the value by 0.1 and back leaves. Select on `back` returns to the main menu.

## What it does not do

- The package drives no hardware. It has no camera capture, motors, encoders, buzzer or real IMU. Frames and IMU samples must come from the caller.
- The `angle_pid`, `speed_pid`, `turn_pppdd` and `parameter` entries have no pages of their own. Selecting one leaves the menu on a blank page that ignores further keys.