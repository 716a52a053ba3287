"""Capture defaults and exit codes."""

DEVICE_INDEX = 0

CAPTURE_WIDTH = 320
CAPTURE_HEIGHT = 240

# Passed to v4l2-ctl; most UVC drivers ignore it.
REQUESTED_FPS = 10
RATE_CMD_TIMEOUT = 2.0

DEFAULT_FORMAT = "jpg"
IMAGE_DIR = "images"
WINDOW_NAME = "Image"

EXIT_OK = 0
EXIT_DEVICE_ERROR = 1
EXIT_WRITE_ERROR = 2
EXIT_USAGE_ERROR = 255
