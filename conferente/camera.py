"""Photo evidence capture using OpenCV."""

from __future__ import annotations

import base64
import logging
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)

DATA_URL_PREFIX = "data:image/jpeg;base64,"


def _import_cv2():
    try:
        import cv2
    except ImportError:
        raise ImportError(
            "opencv-python é necessário: pip install opencv-python"
        ) from None
    return cv2


def decode_attachment(attachment: str) -> bytes:
    """Return the JPEG bytes of a stored attachment."""
    if attachment.startswith(DATA_URL_PREFIX):
        attachment = attachment[len(DATA_URL_PREFIX):]
    return base64.b64decode(attachment)


class PhotoCapture:
    """Produce self-contained JPEG attachments for a weighing.

    Images are downscaled to ``max_width`` and stamped with the capture time
    in the bottom-right corner.
    """

    def __init__(
        self,
        camera_index: int = 0,
        *,
        max_width: int = 1024,
        jpeg_quality: int = 70,
        timestamp_overlay: bool = True,
    ) -> None:
        self._camera_index = camera_index
        self._max_width = max_width
        self._jpeg_quality = jpeg_quality
        self._timestamp_overlay = timestamp_overlay

    def capture(self) -> str | None:
        """Grab one frame from the camera. Returns None if none was read."""
        cv2 = _import_cv2()

        cap = cv2.VideoCapture(self._camera_index)
        if not cap.isOpened():
            logger.warning("Câmera %d indisponível", self._camera_index)
            return None

        try:
            ret, frame = cap.read()
            if not ret or frame is None:
                logger.warning(
                    "Câmera %d não retornou imagem", self._camera_index
                )
                return None
            return self._encode(cv2, frame)
        finally:
            cap.release()

    def encode_file(self, image_path: str | Path) -> str | None:
        """Attach an existing picture (gallery import)."""
        cv2 = _import_cv2()

        frame = cv2.imread(str(image_path))
        if frame is None:
            logger.warning("Imagem ilegível: %s", image_path)
            return None
        return self._encode(cv2, frame)

    def _encode(self, cv2, frame) -> str | None:
        height, width = frame.shape[:2]
        if width > self._max_width:
            scale = self._max_width / width
            frame = cv2.resize(
                frame,
                (self._max_width, int(height * scale)),
                interpolation=cv2.INTER_AREA,
            )
            height, width = frame.shape[:2]

        if self._timestamp_overlay:
            self._stamp(cv2, frame, width, height)

        ok, buf = cv2.imencode(
            ".jpg", frame, [int(cv2.IMWRITE_JPEG_QUALITY), self._jpeg_quality]
        )
        if not ok:
            logger.warning("Falha ao codificar imagem JPEG")
            return None
        return DATA_URL_PREFIX + base64.b64encode(buf.tobytes()).decode("ascii")

    @staticmethod
    def _stamp(cv2, frame, width: int, height: int) -> None:
        text = datetime.now().strftime("%d/%m/%Y %H:%M:%S")
        font = cv2.FONT_HERSHEY_SIMPLEX
        (text_w, text_h), baseline = cv2.getTextSize(text, font, 0.7, 2)

        x = width - text_w - 20
        y = height - 20
        cv2.rectangle(
            frame,
            (x - 10, y - text_h - 10),
            (x + text_w + 10, y + baseline + 5),
            (0, 0, 0),
            -1,
        )
        cv2.putText(frame, text, (x, y), font, 0.7, (255, 255, 255), 2)
