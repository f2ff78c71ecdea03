from collections import deque
from concurrent.futures import Future, ThreadPoolExecutor

from media.chunk_extractor import ChunkExtractor
from samples.models import ChunkJob


class ChunkQueue:
    """
    Runs chunk extractions through a bounded worker pool.

    Jobs start in index order and at most `workers` run at once. With a
    single worker (the default) each extraction finishes before the next
    one starts, and nothing new starts after a failure.
    """

    def __init__(self, extractor: ChunkExtractor, workers: int = 1):
        if workers < 1:
            raise ValueError("workers must be at least 1")
        self.extractor = extractor
        self.workers = int(workers)

    def run(self, jobs: list[ChunkJob]) -> list[str]:
        outputs: list[str] = []
        if not jobs:
            return outputs

        pending: deque[Future] = deque()
        with ThreadPoolExecutor(max_workers=self.workers) as pool:
            for job in jobs:
                if len(pending) >= self.workers:
                    outputs.append(pending.popleft().result())
                pending.append(pool.submit(self.extractor.extract, job))

            while pending:
                outputs.append(pending.popleft().result())

        return outputs
