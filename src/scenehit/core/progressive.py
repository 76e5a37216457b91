"""Progressive accumulation of rendered frames on top of a Scene.

The Scene owns the accumulation state (accumulate flag, frame_index and the
running-sum buffer). This module is the renderer-facing side that sizes the
buffer, folds new frames into it and hands back the running average.

Restart rules:
    - scene.frame_index < 0 (after scene.resize()) reallocates the buffer
      and starts over from frame 0.
    - A buffer whose size does not match width * height * 3 is reallocated
      the same way.
    - With scene.accumulate False every frame replaces the buffer and
      frame_index stays at 1.

Example:
    >>> import numpy as np
    >>> from scenehit.core.progressive import ProgressiveAccumulator
    >>> from scenehit.scene.scene import Scene
    >>>
    >>> scene = Scene.default()
    >>> scene.accumulate = True
    >>> accumulator = ProgressiveAccumulator(scene, 4, 2)
    >>> _ = accumulator.add_frame(np.ones((2, 4, 3), dtype=np.float32))
    >>> image = accumulator.add_frame(np.zeros((2, 4, 3), dtype=np.float32))
    >>> float(image[0, 0, 0]), accumulator.sample_count
    (0.5, 2)
"""

import logging
from collections.abc import Callable, Generator
from typing import Any

import numpy as np
import numpy.typing as npt

from scenehit.scene.scene import Scene

logger = logging.getLogger(__name__)

# Frame source used by render_progressive: receives (scene, width, height)
# and returns an (height, width, 3) float image
FrameSource = Callable[[Scene, int, int], Any]


class ProgressiveAccumulator:
    """Averages successive frames into a Scene's accumulation buffer.

    Attributes:
        scene: The scene whose accumulation state is managed.
        width: Image width in pixels.
        height: Image height in pixels.
    """

    def __init__(self, scene: Scene, width: int, height: int) -> None:
        """Initialize the accumulator.

        The scene is asked to restart accumulation, so the first frame
        allocates a buffer of the right size.

        Args:
            scene: The scene holding the accumulation state.
            width: Image width in pixels.
            height: Image height in pixels.

        Raises:
            ValueError: If width or height is not positive.
        """
        _check_dimensions(width, height)
        self.scene = scene
        self._width = width
        self._height = height
        self.scene.resize()

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._height

    @property
    def sample_count(self) -> int:
        """Get the number of frames in the running sum."""
        return max(self.scene.frame_index, 0)

    def reset(self) -> None:
        """Restart accumulation without changing the image dimensions."""
        self.scene.resize()

    def resize(self, width: int, height: int) -> None:
        """Change the image dimensions and restart accumulation.

        Raises:
            ValueError: If width or height is not positive.
        """
        _check_dimensions(width, height)
        self._width = width
        self._height = height
        self.scene.resize()

    def _ensure_buffer(self) -> None:
        """Reallocate the scene buffer if a restart is pending or the size changed."""
        size = self._width * self._height * 3
        scene = self.scene
        if scene.frame_index < 0 or scene.accumulation.shape[0] != size:
            scene.accumulation = np.zeros(size, dtype=np.float32)
            scene.frame_index = 0
            logger.debug("Accumulation restarted at %dx%d", self._width, self._height)

    def add_frame(self, frame: Any) -> npt.NDArray[np.float32]:
        """Fold one rendered frame into the running average.

        Args:
            frame: Array-like of shape (height, width, 3) with linear RGB.

        Returns:
            The current average as a float32 array of shape (height, width, 3).

        Raises:
            ValueError: If the frame shape does not match the image dimensions.
        """
        samples = np.asarray(frame, dtype=np.float32)
        expected = (self._height, self._width, 3)
        if samples.shape != expected:
            raise ValueError(f"Frame shape {samples.shape} does not match {expected}")

        self._ensure_buffer()
        scene = self.scene

        if scene.accumulate:
            scene.accumulation += samples.reshape(-1)
            scene.frame_index += 1
        else:
            scene.accumulation[:] = samples.reshape(-1)
            scene.frame_index = 1

        return self._average()

    def _average(self) -> npt.NDArray[np.float32]:
        count = max(self.scene.frame_index, 1)
        average = self.scene.accumulation / np.float32(count)
        return average.reshape(self._height, self._width, 3).astype(np.float32)

    def render_progressive(
        self,
        source: FrameSource,
        num_frames: int = 1,
    ) -> Generator[tuple[int, npt.NDArray[np.float32]], None, None]:
        """Render frames from a source and yield the running average after each.

        Args:
            source: Callable producing one (height, width, 3) frame per call.
            num_frames: Number of frames to render.

        Yields:
            Tuple of (sample_count, averaged_image).
        """
        for _ in range(max(num_frames, 0)):
            frame = source(self.scene, self._width, self._height)
            image = self.add_frame(frame)
            yield self.sample_count, image

    def get_image(self, gamma: float = 1.0) -> npt.NDArray[np.float32]:
        """Get the averaged image clamped to [0, 1].

        Args:
            gamma: Gamma correction value. Default 1.0 (linear).
                Use 2.2 for sRGB display.

        Returns:
            NumPy array of shape (height, width, 3) with dtype float32. All
            zeros before the first frame.
        """
        if self.scene.frame_index <= 0 or self.scene.accumulation.shape[0] != (
            self._width * self._height * 3
        ):
            return np.zeros((self._height, self._width, 3), dtype=np.float32)

        image = np.clip(self._average(), 0.0, 1.0)

        if gamma != 1.0:
            image = np.power(image, 1.0 / gamma)

        return image.astype(np.float32)

    def get_image_uint8(self, gamma: float = 2.2) -> npt.NDArray[np.uint8]:
        """Get the averaged image as an 8-bit array, gamma corrected.

        Args:
            gamma: Gamma correction value. Default 2.2 for sRGB.

        Returns:
            NumPy array of shape (height, width, 3) with dtype uint8.
        """
        image = self.get_image(gamma=gamma)
        return (image * 255).astype(np.uint8)

    def save_image(self, filepath: str, gamma: float = 2.2) -> None:
        """Save the averaged image to a file.

        Args:
            filepath: Path to save the image (e.g., "output.png").
            gamma: Gamma correction value. Default 2.2 for sRGB.
        """
        from PIL import Image as PILImage

        PILImage.fromarray(self.get_image_uint8(gamma=gamma)).save(filepath)
        logger.debug("Saved %dx%d image to %s", self._width, self._height, filepath)

    def __repr__(self) -> str:
        """Return a string representation of the accumulator state."""
        return (
            f"ProgressiveAccumulator(width={self.width}, height={self.height}, "
            f"samples={self.sample_count})"
        )


def _check_dimensions(width: int, height: int) -> None:
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
