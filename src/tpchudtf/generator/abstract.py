import abc
from typing import Any

import pyarrow as pa


class AbstractTableGenerator(abc.ABC):
    """
    Partitioned row generator for one TPC-H relation.

    A generator is created from (scale_factor, part, num_parts) and produces the
    rows of its relation as an Arrow stream. It is restartable: every call to
    arrow_reader() starts again from the first row.

    scratch is state shared by the generators of one invocation (for dbgen, the
    databases already generated); None means the generator works on its own.
    """

    table_name: str
    columns: tuple[str, ...]

    @abc.abstractmethod
    def __init__(self, scale_factor: float, part: int = 1, num_parts: int = 1, scratch: Any = None):
        raise NotImplementedError

    @abc.abstractmethod
    def arrow_reader(self, batch_size: int) -> pa.RecordBatchReader:
        """Return a reader over all rows of this generator's partition."""
        raise NotImplementedError

    @abc.abstractmethod
    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
