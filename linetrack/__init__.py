"""Frame processing and track edge search, PID control, parameter storage,
IMU filtering and a tuning menu for a track car."""

__version__ = "0.1.0"