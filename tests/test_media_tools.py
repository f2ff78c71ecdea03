import os
import subprocess
import tempfile
import unittest
from unittest.mock import patch
from pathlib import Path
import sys

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from media.chunk_extractor import ChunkExtractor, chunk_name
from media.duration_probe import DurationProbe
from media.tool_runner import MediaToolError, run_tool
from samples.models import ChunkJob


def completed(cmd, returncode=0, stdout="", stderr=""):
    return subprocess.CompletedProcess(cmd, returncode, stdout=stdout, stderr=stderr)


class TestRunTool(unittest.TestCase):
    def test_missing_binary(self) -> None:
        with patch("media.tool_runner.subprocess.run", side_effect=FileNotFoundError()):
            with self.assertRaises(MediaToolError) as ctx:
                run_tool(["ffprobe", "x.wav"], timeout=5, path="x.wav")

        self.assertIn("ffprobe not found", str(ctx.exception))
        self.assertEqual(ctx.exception.path, "x.wav")

    def test_timeout_is_reported(self) -> None:
        err = subprocess.TimeoutExpired(cmd=["ffmpeg"], timeout=2)
        with patch("media.tool_runner.subprocess.run", side_effect=err) as run:
            with self.assertRaises(MediaToolError) as ctx:
                run_tool(["ffmpeg", "-i", "x.wav"], timeout=2)

        self.assertIn("timed out", str(ctx.exception))
        self.assertEqual(run.call_args.kwargs["timeout"], 2)

    def test_non_zero_exit_carries_stderr(self) -> None:
        with patch(
            "media.tool_runner.subprocess.run",
            side_effect=lambda cmd, **kw: completed(cmd, returncode=1, stderr="  bad input \n"),
        ):
            with self.assertRaises(MediaToolError) as ctx:
                run_tool(["ffmpeg"], timeout=5)

        self.assertEqual(str(ctx.exception), "bad input")


class TestDurationProbe(unittest.TestCase):
    def test_parse_duration(self) -> None:
        self.assertEqual(DurationProbe.parse_duration("90.500000\n"), 90.5)
        self.assertEqual(DurationProbe.parse_duration("\n  12\n"), 12.0)

    def test_parse_rejects_garbage(self) -> None:
        for raw in ["", "N/A", "nan", "-3", "inf"]:
            with self.assertRaises(MediaToolError):
                DurationProbe.parse_duration(raw, path="a.wav")

    def test_probe_runs_ffprobe(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "sample.wav")
            Path(path).write_bytes(b"RIFF")

            probe = DurationProbe(ffprobe_bin="/opt/ffprobe", timeout=7)
            with patch(
                "media.tool_runner.subprocess.run",
                side_effect=lambda cmd, **kw: completed(cmd, stdout="42.25\n"),
            ) as run:
                duration = probe.probe(path)

        self.assertEqual(duration, 42.25)
        cmd = run.call_args.args[0]
        self.assertEqual(cmd[0], "/opt/ffprobe")
        self.assertIn("format=duration", cmd)
        self.assertEqual(cmd[-1], path)
        self.assertEqual(run.call_args.kwargs["timeout"], 7.0)

    def test_probe_missing_file(self) -> None:
        with self.assertRaises(MediaToolError):
            DurationProbe().probe("/nonexistent/sample.wav")


class TestChunkExtractor(unittest.TestCase):
    def test_chunk_name(self) -> None:
        self.assertEqual(chunk_name("sample.wav", 1), "sample_chunk_1.wav")
        self.assertEqual(chunk_name("my.voice.wav", 12), "my.voice_chunk_12.wav")

    def _job(self, tmp: str, index: int = 2, start: float = 30.0) -> ChunkJob:
        return ChunkJob(
            source_path=os.path.join(tmp, "sample.wav"),
            index=index,
            start_seconds=start,
            length_seconds=30.0,
            output_path=os.path.join(tmp, chunk_name("sample.wav", index)),
        )

    def test_extract_uses_stream_copy(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            job = self._job(tmp)

            def fake_run(cmd, **kw):
                Path(cmd[-1]).write_bytes(b"chunk")
                return completed(cmd)

            with patch("media.tool_runner.subprocess.run", side_effect=fake_run) as run:
                out = ChunkExtractor().extract(job)

            self.assertEqual(out, job.output_path)
            self.assertTrue(os.path.exists(out))

        cmd = run.call_args.args[0]
        self.assertEqual(cmd[cmd.index("-c") + 1], "copy")
        self.assertEqual(cmd[cmd.index("-ss") + 1], "30")
        self.assertEqual(cmd[cmd.index("-t") + 1], "30")
        self.assertEqual(cmd[cmd.index("-i") + 1], job.source_path)

    def test_failed_extract_removes_partial_output(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            job = self._job(tmp)

            def fake_run(cmd, **kw):
                Path(cmd[-1]).write_bytes(b"half")
                return completed(cmd, returncode=1, stderr="Invalid data")

            with patch("media.tool_runner.subprocess.run", side_effect=fake_run):
                with self.assertRaises(MediaToolError):
                    ChunkExtractor().extract(job)

            self.assertFalse(os.path.exists(job.output_path))

    def test_empty_output_is_an_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            job = self._job(tmp)

            def fake_run(cmd, **kw):
                Path(cmd[-1]).write_bytes(b"")
                return completed(cmd)

            with patch("media.tool_runner.subprocess.run", side_effect=fake_run):
                with self.assertRaises(MediaToolError):
                    ChunkExtractor().extract(job)

            self.assertFalse(os.path.exists(job.output_path))


if __name__ == "__main__":
    unittest.main()
