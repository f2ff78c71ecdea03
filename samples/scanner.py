import os

from samples.models import BACKUP_MARKER, CHUNK_MARKER, SAMPLE_EXTENSION, VoiceSampleFile


class SampleScanner:
    def __init__(self, directory: str, extension: str = SAMPLE_EXTENSION):
        self.directory = str(directory)
        self.extension = extension

    def ensure_directory(self) -> None:
        os.makedirs(self.directory, exist_ok=True)

    def is_eligible_name(self, name: str) -> bool:
        return (
            name.endswith(self.extension)
            and CHUNK_MARKER not in name
            and BACKUP_MARKER not in name
        )

    def list_samples(self) -> list[str]:
        """
        Names of voice samples that are neither chunk outputs nor backups.
        Creates the directory when it does not exist yet.
        """
        self.ensure_directory()

        names = []
        for name in os.listdir(self.directory):
            if not self.is_eligible_name(name):
                continue
            if not os.path.isfile(self.path_for(name)):
                continue
            names.append(name)

        return sorted(names)

    def path_for(self, name: str) -> str:
        return os.path.join(self.directory, name)

    def stat(self, name: str) -> VoiceSampleFile:
        return VoiceSampleFile(name=name, size_bytes=os.path.getsize(self.path_for(name)))
