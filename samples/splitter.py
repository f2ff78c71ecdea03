from dataclasses import dataclass
import logging
import math
import os

from media.chunk_extractor import chunk_name
from media.chunk_queue import ChunkQueue
from media.duration_probe import DurationProbe
from media.tool_runner import MediaToolError
from samples.models import ChunkJob, ChunkJobResult, SplitReport, VoiceSampleFile, backup_name
from samples.scanner import SampleScanner
from storage.manifest_store import ManifestStore

logger = logging.getLogger(__name__)

NO_SAMPLES_MESSAGE = "No voice samples found"


@dataclass
class SplitPolicy:
    max_chunk_seconds: float = 30.0
    size_threshold_mb: float = 5.0

    def __post_init__(self) -> None:
        if self.max_chunk_seconds <= 0:
            raise ValueError("max_chunk_seconds must be positive")
        if self.size_threshold_mb <= 0:
            raise ValueError("size_threshold_mb must be positive")

    def needs_split(self, duration_seconds: float, size_mb: float) -> bool:
        return duration_seconds > self.max_chunk_seconds or size_mb > self.size_threshold_mb

    def chunk_count(self, duration_seconds: float) -> int:
        # Oversized but zero-length files still yield one chunk.
        return max(1, math.ceil(duration_seconds / self.max_chunk_seconds))


class SplitOrchestrator:
    def __init__(
        self,
        scanner: SampleScanner,
        probe: DurationProbe,
        queue: ChunkQueue,
        policy: SplitPolicy,
        manifest: ManifestStore | None = None,
    ):
        self.scanner = scanner
        self.probe = probe
        self.queue = queue
        self.policy = policy
        self.manifest = manifest

    def run(self) -> SplitReport:
        logger.info("Starting voice sample processing in %s", self.scanner.directory)

        try:
            names = self.scanner.list_samples()
        except Exception as exc:
            logger.exception("Error scanning voice samples")
            return SplitReport(success=False, error=str(exc))

        if not names:
            logger.info("No voice samples found to process")
            return SplitReport(success=False, message=NO_SAMPLES_MESSAGE)

        logger.info("Found %d voice samples to analyze", len(names))
        report = SplitReport(success=True, processed=[])

        for name in names:
            try:
                result = self._process_file(name)
            except (MediaToolError, OSError) as exc:
                logger.warning("Error processing %s: %s", name, exc)
                report.skipped.append(name)
                self._record(name, "failed", error=str(exc))
                continue

            if result is not None:
                report.processed.append(result)

        logger.info(
            "Processed %d files (%d skipped after errors)",
            len(report.processed),
            len(report.skipped),
        )
        return report

    def _process_file(self, name: str) -> ChunkJobResult | None:
        sample = self.scanner.stat(name)
        logger.info("Analyzing file: %s (%.2fMB)", name, sample.size_mb)

        self._record(name, "probing")
        sample.duration_seconds = self.probe.probe(self.scanner.path_for(name))
        logger.info("File %s duration: %.2f seconds", name, sample.duration_seconds)

        if not self.policy.needs_split(sample.duration_seconds, sample.size_mb):
            logger.info("File %s needs no splitting", name)
            self._record(name, "skipped", duration_seconds=sample.duration_seconds)
            return None

        jobs = self.plan_jobs(sample)
        backup_path = self.scanner.path_for(backup_name(name))
        self._check_outputs_free(name, jobs, backup_path)

        logger.info(
            "Splitting %s into %d chunks of %gs",
            name,
            len(jobs),
            self.policy.max_chunk_seconds,
        )
        self._record(
            name,
            "splitting",
            duration_seconds=sample.duration_seconds,
            chunk_count=len(jobs),
        )

        try:
            outputs = self.queue.run(jobs)
            os.rename(self.scanner.path_for(name), backup_path)
        except Exception:
            self._remove_outputs(jobs)
            raise

        logger.info("Backed up original file to %s", backup_path)

        self._record(
            name,
            "backed_up",
            duration_seconds=sample.duration_seconds,
            chunk_count=len(outputs),
            backup_path=backup_path,
        )

        return ChunkJobResult.build(
            sample=sample,
            backup_path=backup_path,
            chunk_files=[os.path.basename(p) for p in outputs],
        )

    def plan_jobs(self, sample: VoiceSampleFile) -> list[ChunkJob]:
        duration = float(sample.duration_seconds or 0.0)
        length = self.policy.max_chunk_seconds
        source_path = self.scanner.path_for(sample.name)

        return [
            ChunkJob(
                source_path=source_path,
                index=i + 1,
                start_seconds=i * length,
                length_seconds=length,
                output_path=self.scanner.path_for(chunk_name(sample.name, i + 1)),
            )
            for i in range(self.policy.chunk_count(duration))
        ]

    def _check_outputs_free(self, name: str, jobs: list[ChunkJob], backup_path: str) -> None:
        # Outputs of an earlier split of the same name are never overwritten.
        taken = [job.output_path for job in jobs if os.path.exists(job.output_path)]
        if os.path.exists(backup_path):
            taken.append(backup_path)
        if taken:
            names = ", ".join(os.path.basename(p) for p in taken)
            raise MediaToolError(f"Outputs for {name} already exist: {names}", path=self.scanner.path_for(name))

    def _remove_outputs(self, jobs: list[ChunkJob]) -> None:
        for job in jobs:
            if os.path.exists(job.output_path):
                os.remove(job.output_path)

    def _record(self, name: str, state: str, **fields) -> None:
        if self.manifest is not None:
            self.manifest.record(name, state, **fields)
