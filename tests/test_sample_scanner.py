import os
import tempfile
import unittest
from pathlib import Path
import sys

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from samples.models import SampleState, VoiceSampleFile, backup_name
from samples.scanner import SampleScanner


class TestSampleScanner(unittest.TestCase):
    def test_creates_missing_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = os.path.join(tmp, "training-data", "voice-samples")
            scanner = SampleScanner(directory=target)

            self.assertEqual(scanner.list_samples(), [])
            self.assertTrue(os.path.isdir(target))

    def test_filters_chunks_and_backups(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            for name in [
                "b.wav",
                "a.wav",
                "a_chunk_1.wav",
                "c_original.wav.bak",
                "notes.txt",
                "clip.mp3",
            ]:
                Path(tmp, name).write_bytes(b"x")
            os.makedirs(os.path.join(tmp, "folder.wav"))

            scanner = SampleScanner(directory=tmp)
            self.assertEqual(scanner.list_samples(), ["a.wav", "b.wav"])

    def test_stat_measures_size(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            Path(tmp, "a.wav").write_bytes(b"\0" * 2048)
            sample = SampleScanner(directory=tmp).stat("a.wav")

        self.assertEqual(sample.size_bytes, 2048)
        self.assertIsNone(sample.duration_seconds)


class TestSampleState(unittest.TestCase):
    def test_state_from_name(self) -> None:
        self.assertEqual(SampleState.from_name("voice.wav"), SampleState.UNPROCESSED)
        self.assertEqual(SampleState.from_name("voice_chunk_3.wav"), SampleState.CHUNKED)
        self.assertEqual(SampleState.from_name("voice_original.wav.bak"), SampleState.BACKED_UP)
        self.assertEqual(VoiceSampleFile("voice_chunk_1.wav", 10).state, SampleState.CHUNKED)

    def test_backup_name(self) -> None:
        self.assertEqual(backup_name("sample.wav"), "sample_original.wav.bak")


if __name__ == "__main__":
    unittest.main()
