"""Capture loop.

Opens the default camera, grabs a fixed number of frames and times them.
Frames can be written to disk and/or shown in a window as they arrive.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
import shutil
import subprocess
import time
from typing import Callable, Optional, Union

import cv2
import numpy as np

from camtiming.config import (
    CAPTURE_HEIGHT,
    CAPTURE_WIDTH,
    DEVICE_INDEX,
    IMAGE_DIR,
    RATE_CMD_TIMEOUT,
    REQUESTED_FPS,
    WINDOW_NAME,
)
from camtiming.errors import DeviceError, FrameWriteError
from camtiming.options import Options

log = logging.getLogger(__name__)


@dataclass
class Frame:
    index: int
    image: Optional[np.ndarray]
    rel_ms: float
    diff_ms: float

    def filename(self, fmt: str) -> str:
        return f"{self.index:05d}.{self.rel_ms:05.0f}.{self.diff_ms:05.0f}.{fmt}"


@dataclass
class RunStats:
    frames: int
    total_delta_ms: float

    @property
    def mean_interval_ms(self) -> float:
        return self.total_delta_ms / self.frames if self.frames > 0 else 0.0

    @property
    def fps(self) -> float:
        mean = self.mean_interval_ms
        return 1000.0 / mean if mean > 0 else 0.0


def open_camera(index: int = DEVICE_INDEX) -> cv2.VideoCapture:
    cap = cv2.VideoCapture(index)
    if not cap.isOpened():
        raise DeviceError(f"Could not open camera {index}")

    cap.set(cv2.CAP_PROP_FRAME_WIDTH, CAPTURE_WIDTH)
    cap.set(cv2.CAP_PROP_FRAME_HEIGHT, CAPTURE_HEIGHT)
    return cap


def request_frame_rate(fps: int = REQUESTED_FPS) -> None:
    """Ask the V4L2 driver for ``fps``. Best effort; the result is never checked."""
    try:
        subprocess.run(
            ["v4l2-ctl", f"-p{fps}"],
            capture_output=True,
            timeout=RATE_CMD_TIMEOUT,
        )
        log.debug("Requested %d FPS via v4l2-ctl", fps)
    except FileNotFoundError:
        log.debug("v4l2-ctl not found")
    except subprocess.TimeoutExpired:
        log.debug("v4l2-ctl timed out setting frame rate")
    except OSError as e:
        log.debug("v4l2-ctl error setting frame rate: %s", e)


def prepare_output_dir(path: Union[str, Path]) -> Path:
    """Create ``path`` if needed and remove everything already inside it.

    Filesystem failures are raised as :class:`FrameWriteError`.
    """
    path = Path(path)
    try:
        path.mkdir(parents=True, exist_ok=True)
        for child in path.iterdir():
            if child.is_dir() and not child.is_symlink():
                shutil.rmtree(child)
            else:
                child.unlink()
    except OSError as e:
        raise FrameWriteError(f"Cannot prepare output directory {path}: {e}") from e
    return path


def write_frame(path: Path, image: Optional[np.ndarray]) -> None:
    if image is None:
        raise FrameWriteError(f"No image data to write to {path}")
    try:
        ok = cv2.imwrite(str(path), image)
    except cv2.error as e:
        raise FrameWriteError(f"Failed to write {path}: {e}") from e
    if not ok:
        raise FrameWriteError(f"Failed to write {path}")


def show_frame(image: Optional[np.ndarray]) -> None:
    if image is None:
        return
    cv2.imshow(WINDOW_NAME, image)
    # Lets HighGUI repaint; no key is waited for.
    cv2.waitKey(1)


def run_capture(
    options: Options,
    image_dir: Union[str, Path] = IMAGE_DIR,
    clock: Callable[[], float] = time.perf_counter,
) -> RunStats:
    """Capture ``options.n_frames`` frames and return their timing statistics.

    Raises :class:`DeviceError` if the camera cannot be opened and
    :class:`FrameWriteError` if a frame cannot be saved. Frames written before
    a failure stay on disk.
    """
    cap = open_camera()
    try:
        request_frame_rate()

        out_dir = prepare_output_dir(image_dir) if options.save else None
        if options.display:
            cv2.namedWindow(WINDOW_NAME)

        start_ms = clock() * 1000.0
        last_ms = start_ms
        total_delta_ms = 0.0

        for i in range(options.n_frames):
            ok, image = cap.read()
            if not ok:
                log.warning("Frame %d: camera returned no image", i)
                image = None

            now_ms = clock() * 1000.0
            frame = Frame(index=i, image=image, rel_ms=now_ms - start_ms, diff_ms=now_ms - last_ms)
            last_ms = now_ms

            log.info("[%4d] Relative: %05.0f\tDiff: %05.0f", i, frame.rel_ms, frame.diff_ms)

            if out_dir is not None:
                write_frame(out_dir / frame.filename(options.fmt), frame.image)

            if options.display:
                show_frame(frame.image)

            total_delta_ms += frame.diff_ms
    finally:
        cap.release()
        if options.display:
            cv2.destroyAllWindows()

    return RunStats(frames=options.n_frames, total_delta_ms=total_delta_ms)
