from typing import Any

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    code: str
    message: str


class ChunkJobResultItem(BaseModel):
    file: str
    originalSize: str
    duration: str
    chunks: int
    backupPath: str
    chunkFiles: list[str] = []


class SplitSamplesResponse(BaseModel):
    success: bool
    processed: list[ChunkJobResultItem] | None = None
    message: str | None = None
    error: str | None = None
    skipped: list[str] | None = None


class VoiceSamplesResponse(BaseModel):
    success: bool
    samples: list[str]
    directory: str
    error: str | None = None


class UploadSampleResponse(BaseModel):
    success: bool
    file: str
    message: str


class ManifestEntry(BaseModel):
    source_file: str
    state: str
    duration_seconds: float | None
    chunk_count: int | None
    backup_path: str | None
    error: str | None
    updated_at: str


class MessageCreateRequest(BaseModel):
    content: str = Field(min_length=1)
    role: str = "user"
    metadata: dict[str, Any] = Field(default_factory=dict)


class MessageItem(BaseModel):
    id: int
    content: str
    role: str
    metadata: dict[str, Any]
    timestamp: str


class TrainingDataCreateRequest(BaseModel):
    content: str = Field(min_length=1)
    category: str = Field(min_length=1, max_length=100)


class TrainingDataItem(BaseModel):
    id: int
    content: str
    category: str
    timestamp: str


class MemoryUpdateRequest(BaseModel):
    value: Any


class ImageGenerateRequest(BaseModel):
    prompt: str = Field(min_length=1, max_length=2000)


class ImageGenerateResponse(BaseModel):
    success: bool
    imageUrl: str
    description: str
    message: str
