import pytest

from linetrack.imu import ComplementaryFilter, GyroBias, ImuSample


def test_zero_period_keeps_angle():
    filt = ComplementaryFilter()
    start = filt.angle
    assert filt.update(ImuSample(gx=100, ay=300)) == start


def test_gyro_deadband_ignores_small_rates():
    filt = ComplementaryFilter(acc_ratio=0, gyro_ratio=1, cycle_t=1.0)
    start = filt.angle
    for rate in (-4, -1, 0, 3, 4):
        assert filt.update(ImuSample(gx=rate)) == start


def test_gyro_integrates_rate():
    filt = ComplementaryFilter(acc_ratio=0, gyro_ratio=1, cycle_t=1.0)
    assert filt.update(ImuSample(gx=25)) == 25
    assert filt.update(ImuSample(gx=-25)) == 0


def test_bias_applied_before_deadband():
    filt = ComplementaryFilter(
        acc_ratio=0, gyro_ratio=1, cycle_t=1.0, bias=GyroBias(gx=7)
    )
    assert filt.update(ImuSample(gx=3)) == 10


def test_sum_wraps_like_int16():
    filt = ComplementaryFilter(
        acc_ratio=0, gyro_ratio=1, cycle_t=1.0, bias=GyroBias(gx=1)
    )
    assert filt.update(ImuSample(gx=32767)) == -32768


def test_accelerometer_full_weight_snaps_to_reading():
    filt = ComplementaryFilter(acc_ratio=1, gyro_ratio=0, cycle_t=1.0)
    assert filt.update(ImuSample(ay=42)) == pytest.approx(42)


def test_accelerometer_converges_monotonically():
    filt = ComplementaryFilter(acc_ratio=4, gyro_ratio=4, cycle_t=0.05)
    target = 80
    previous = filt.angle
    for _ in range(200):
        angle = filt.update(ImuSample(ay=target))
        assert previous <= angle <= target
        previous = angle
    assert filt.angle == pytest.approx(target, abs=1e-3)


def test_other_axes_do_not_affect_angle():
    a = ComplementaryFilter(cycle_t=0.01)
    b = ComplementaryFilter(cycle_t=0.01)
    a.update(ImuSample(gx=50, ay=10))
    b.update(ImuSample(gx=50, gy=900, gz=-900, ax=77, ay=10, az=-77))
    assert a.angle == b.angle