import logging
import os
import shutil
import uuid

import soundfile as sf
from fastapi import UploadFile

from media.chunk_extractor import chunk_name
from samples.models import backup_name
from samples.scanner import SampleScanner

logger = logging.getLogger(__name__)


class SampleUploadError(Exception):
    pass


class SampleUploadService:
    def __init__(self, scanner: SampleScanner, max_upload_bytes: int):
        self.scanner = scanner
        self.max_upload_bytes = int(max_upload_bytes)

    def save_upload(self, file: UploadFile) -> str:
        if not file.filename:
            raise SampleUploadError("Uploaded file must have a filename")

        name = os.path.basename(file.filename.replace("\\", "/")).strip()
        if not name.endswith(self.scanner.extension):
            raise SampleUploadError(f"Voice samples must be {self.scanner.extension} files")
        if not self.scanner.is_eligible_name(name):
            raise SampleUploadError("Filename is reserved for chunk or backup outputs")

        self.scanner.ensure_directory()
        temp_path = self.scanner.path_for(f".upload_{uuid.uuid4().hex}.part")

        try:
            with open(temp_path, "wb") as out:
                shutil.copyfileobj(file.file, out)

            size = os.path.getsize(temp_path)
            if size == 0:
                raise SampleUploadError("Uploaded file is empty")
            if size > self.max_upload_bytes:
                raise SampleUploadError("Uploaded file is too large")

            try:
                info = sf.info(temp_path)
            except RuntimeError as exc:
                raise SampleUploadError(f"Uploaded file is not a readable WAV: {exc}") from exc
            if info.format not in ("WAV", "WAVEX"):
                raise SampleUploadError(f"Uploaded file is {info.format}, expected WAV")

            stored_name = self._unique_name(name)
            os.replace(temp_path, self.scanner.path_for(stored_name))
        finally:
            if os.path.exists(temp_path):
                os.remove(temp_path)

        logger.info("Stored voice sample %s (%d bytes)", stored_name, size)
        return stored_name

    def _unique_name(self, name: str) -> str:
        base, ext = os.path.splitext(name)
        candidate = name
        n = 1
        while self._is_taken(candidate):
            candidate = f"{base}_{n}{ext}"
            n += 1
        return candidate

    def _is_taken(self, name: str) -> bool:
        # A name whose chunk or backup outputs are still present counts as taken.
        return any(
            os.path.exists(self.scanner.path_for(n))
            for n in (name, backup_name(name), chunk_name(name, 1))
        )
