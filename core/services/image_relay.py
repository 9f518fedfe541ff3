# =============================================================================
# core/services/image_relay.py - Image Upload Relay
# =============================================================================
# Accepts an uploaded image, optionally re-encodes it (WebP by default),
# pushes it to the external file server over FTP and returns its public URL.
#
# Flow:
#   validate type + size -> convert -> name {section}_{epoch_ms}.{ext}
#   -> write temp file -> FTP connect/login/STOR -> remove temp -> URL
#
# The temp file is removed on success and failure; a failed removal is
# logged and otherwise ignored.
# =============================================================================

import ftplib
import io
import logging
import mimetypes
import os
import re
import tempfile
import time
from contextlib import contextmanager
from typing import Callable, Iterator

from PIL import Image, UnidentifiedImageError

from app.exceptions import (
    ImageDecodeError,
    ImageRelayError,
    ImageTooLargeError,
    InvalidImageTypeError,
)
from core.models.upload import UploadResult

logger = logging.getLogger(__name__)

DEFAULT_SECTION = "image"

# Pillow format name for each output extension
OUTPUT_FORMATS: dict[str, str] = {
    "webp": "WEBP",
    "png": "PNG",
    "jpeg": "JPEG",
}


def sanitize_section(section: str | None) -> str:
    """Keep [A-Za-z0-9_.-]; anything else becomes '_'. Empty -> 'image'."""
    if not section:
        return DEFAULT_SECTION
    cleaned = re.sub(r"[^A-Za-z0-9_.-]", "_", section.strip())
    return cleaned.strip(".") or DEFAULT_SECTION


def original_extension(filename: str | None, content_type: str | None) -> str:
    """Extension to keep when conversion is off."""
    if filename and "." in filename:
        ext = filename.rsplit(".", 1)[-1].lower()
        if re.fullmatch(r"[a-z0-9]{1,5}", ext):
            return ext
    guessed = mimetypes.guess_extension(content_type or "") or ".bin"
    return guessed.lstrip(".")


# =============================================================================
# FTP Transfer
# =============================================================================

class FtpUploader:
    """
    Stores files on the external file server.

    ftp_factory is injectable so tests can substitute a fake ftplib.FTP.
    """

    def __init__(
        self,
        host: str,
        user: str,
        password: str,
        port: int = 21,
        timeout: float = 30.0,
        ftp_factory: Callable[[], ftplib.FTP] = ftplib.FTP,
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.timeout = timeout
        self._ftp_factory = ftp_factory

    @classmethod
    def from_settings(cls, settings) -> "FtpUploader":
        return cls(
            host=settings.FTP_HOST,
            port=settings.FTP_PORT,
            user=settings.FTP_USER,
            password=settings.FTP_PASS,
            timeout=settings.FTP_TIMEOUT_SECONDS,
        )

    @property
    def configured(self) -> bool:
        return bool(self.host and self.user)

    @contextmanager
    def session(self) -> Iterator[ftplib.FTP]:
        """Connected, logged-in FTP session closed on exit."""
        ftp = self._ftp_factory()
        try:
            ftp.connect(self.host, self.port, timeout=self.timeout)
        except ftplib.all_errors:
            # never connected, so there is no QUIT to send
            ftp.close()
            raise

        try:
            ftp.login(self.user, self.password)
            logger.debug(f"FTP session open: {self.host}:{self.port}")
            yield ftp
        finally:
            try:
                ftp.quit()
            except (*ftplib.all_errors, AttributeError):
                ftp.close()

    def upload(self, local_path: str, remote_dir: str, filename: str) -> None:
        """
        STOR local_path as remote_dir/filename.

        Raises:
            ftplib.all_errors: On any connection or transfer failure
        """
        with self.session() as ftp:
            if remote_dir:
                ftp.cwd(remote_dir)
            with open(local_path, "rb") as fh:
                ftp.storbinary(f"STOR {filename}", fh)
        logger.info(f"Stored {filename} in {remote_dir or '/'} on {self.host}")


# =============================================================================
# Relay
# =============================================================================

class ImageRelay:
    """
    Validates, converts and relays uploaded images.

    Example:
        relay = ImageRelay.from_settings(settings)
        result = relay.relay(data, "logo.png", "image/png", section="footer_logo")
        result.url  # https://cdn.example.com/upload/footer_logo_1718000000000.webp
    """

    def __init__(
        self,
        uploader: FtpUploader,
        remote_dir: str,
        public_base_url: str,
        max_size_bytes: int,
        convert: bool = True,
        output_format: str = "webp",
        quality: int = 80,
        clock: Callable[[], float] = time.time,
    ):
        self.uploader = uploader
        self.remote_dir = remote_dir
        self.public_base_url = public_base_url.rstrip("/")
        self.max_size_bytes = max_size_bytes
        self.convert_enabled = convert
        self.output_format = output_format
        self.quality = quality
        self._clock = clock

    @classmethod
    def from_settings(cls, settings, uploader: FtpUploader | None = None) -> "ImageRelay":
        return cls(
            uploader=uploader or FtpUploader.from_settings(settings),
            remote_dir=settings.FTP_UPLOAD_DIR,
            public_base_url=settings.PUBLIC_IMAGE_BASE_URL,
            max_size_bytes=settings.max_image_size_bytes,
            convert=settings.IMAGE_CONVERSION_ENABLED,
            output_format=settings.IMAGE_OUTPUT_FORMAT,
            quality=settings.IMAGE_QUALITY,
        )

    # -------------------------------------------------------------------------
    # Steps
    # -------------------------------------------------------------------------

    def validate(self, filename: str, content_type: str | None, size: int) -> None:
        """
        Reject non-images and oversize files before any transfer.

        Raises:
            InvalidImageTypeError: If content_type isn't image/*
            ImageTooLargeError: If size exceeds the limit
        """
        if not content_type or not content_type.lower().startswith("image/"):
            raise InvalidImageTypeError(filename, content_type)
        if size > self.max_size_bytes:
            raise ImageTooLargeError(
                size / (1024 * 1024),
                self.max_size_bytes // (1024 * 1024),
            )

    def convert(self, data: bytes, filename: str, content_type: str | None) -> tuple[bytes, str]:
        """
        Re-encode to the output format.

        Returns:
            (encoded bytes, extension)

        Raises:
            ImageDecodeError: If the bytes aren't a decodable image
        """
        if not self.convert_enabled:
            return data, original_extension(filename, content_type)

        try:
            with Image.open(io.BytesIO(data)) as image:
                image.load()
                if self.output_format == "jpeg":
                    image = image.convert("RGB")
                elif image.mode not in ("RGB", "RGBA"):
                    has_alpha = "A" in image.getbands() or "transparency" in image.info
                    image = image.convert("RGBA" if has_alpha else "RGB")

                out = io.BytesIO()
                image.save(out, format=OUTPUT_FORMATS[self.output_format], quality=self.quality)
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
            raise ImageDecodeError(filename, str(e))

        converted = out.getvalue()
        logger.debug(f"Converted {filename}: {len(data)} -> {len(converted)} bytes ({self.output_format})")
        return converted, self.output_format

    def make_filename(self, section: str | None, ext: str) -> str:
        """{section}_{epoch_ms}.{ext}"""
        return f"{sanitize_section(section)}_{int(self._clock() * 1000)}.{ext}"

    def public_url(self, filename: str) -> str:
        return f"{self.public_base_url}/{filename}"

    def _transfer(self, payload: bytes, filename: str) -> None:
        fd, temp_path = tempfile.mkstemp(suffix=f"_{filename}")
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(payload)
            self.uploader.upload(temp_path, self.remote_dir, filename)
        except ftplib.all_errors as e:
            logger.error(f"FTP transfer of {filename} failed: {e}")
            raise ImageRelayError(str(e) or e.__class__.__name__)
        finally:
            try:
                os.remove(temp_path)
            except OSError as e:
                logger.warning(f"Could not remove temp file {temp_path}: {e}")

    # -------------------------------------------------------------------------
    # Entry Point
    # -------------------------------------------------------------------------

    def relay(
        self,
        data: bytes,
        filename: str,
        content_type: str | None,
        section: str | None = None,
    ) -> UploadResult:
        """
        Run the whole relay for one upload.

        Raises:
            InvalidImageTypeError / ImageTooLargeError: Before any transfer
            ImageDecodeError: If conversion can't read the image
            ImageRelayError: If the file server is unset or the transfer fails
        """
        self.validate(filename, content_type, len(data))

        if not self.uploader.configured:
            raise ImageRelayError("file server is not configured")

        payload, ext = self.convert(data, filename, content_type)
        name = self.make_filename(section, ext)

        self._transfer(payload, name)

        url = self.public_url(name)
        logger.info(f"Relayed {filename} as {name}")
        return UploadResult(url=url, filename=name)
