from dataclasses import dataclass, field
from enum import Enum
import os

SAMPLE_EXTENSION = ".wav"
CHUNK_MARKER = "_chunk_"
BACKUP_MARKER = "_original"
BACKUP_SUFFIX = ".bak"

BYTES_PER_MB = 1024 * 1024


def backup_name(name: str) -> str:
    base, ext = os.path.splitext(name)
    return f"{base}{BACKUP_MARKER}{ext}{BACKUP_SUFFIX}"


class SampleState(str, Enum):
    UNPROCESSED = "unprocessed"
    CHUNKED = "chunked"
    BACKED_UP = "backed_up"

    @classmethod
    def from_name(cls, name: str) -> "SampleState":
        if name.endswith(BACKUP_SUFFIX) and BACKUP_MARKER in name:
            return cls.BACKED_UP
        if CHUNK_MARKER in name:
            return cls.CHUNKED
        return cls.UNPROCESSED


@dataclass
class VoiceSampleFile:
    name: str
    size_bytes: int
    duration_seconds: float | None = None

    @property
    def size_mb(self) -> float:
        return self.size_bytes / BYTES_PER_MB

    @property
    def state(self) -> SampleState:
        return SampleState.from_name(self.name)


@dataclass
class ChunkJob:
    source_path: str
    index: int               # 1-based chunk number
    start_seconds: float
    length_seconds: float
    output_path: str


@dataclass(frozen=True)
class ChunkJobResult:
    source_file: str
    original_size_label: str
    duration_label: str
    chunk_count: int
    backup_path: str
    chunk_files: tuple[str, ...] = ()

    @classmethod
    def build(
        cls,
        sample: VoiceSampleFile,
        backup_path: str,
        chunk_files: list[str],
    ) -> "ChunkJobResult":
        return cls(
            source_file=sample.name,
            original_size_label=f"{sample.size_mb:.2f}MB",
            duration_label=f"{(sample.duration_seconds or 0.0):.2f} seconds",
            chunk_count=len(chunk_files),
            backup_path=backup_path,
            chunk_files=tuple(chunk_files),
        )

    def to_dict(self) -> dict:
        return {
            "file": self.source_file,
            "originalSize": self.original_size_label,
            "duration": self.duration_label,
            "chunks": self.chunk_count,
            "backupPath": self.backup_path,
            "chunkFiles": list(self.chunk_files),
        }


@dataclass
class SplitReport:
    success: bool
    processed: list[ChunkJobResult] | None = None
    message: str | None = None
    error: str | None = None
    skipped: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        out: dict = {"success": self.success}
        if self.processed is not None:
            out["processed"] = [r.to_dict() for r in self.processed]
        if self.message is not None:
            out["message"] = self.message
        if self.error is not None:
            out["error"] = self.error
        if self.skipped:
            out["skipped"] = list(self.skipped)
        return out
