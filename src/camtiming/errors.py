from camtiming.config import EXIT_DEVICE_ERROR, EXIT_WRITE_ERROR


class CaptureError(RuntimeError):
    exit_code = 1


class DeviceError(CaptureError):
    """Camera could not be opened."""

    exit_code = EXIT_DEVICE_ERROR


class FrameWriteError(CaptureError):
    """A frame could not be encoded or written to disk."""

    exit_code = EXIT_WRITE_ERROR
