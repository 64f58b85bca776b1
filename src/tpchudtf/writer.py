"""
Parquet file writer for generated tables.
"""

from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq

from tpchudtf.environment_config import EnvironmentConfigManager
from tpchudtf.errors import WriterError
from tpchudtf.logging_utils import get_thread_aware_logger
from tpchudtf.provider import MemTableProvider

logger = get_thread_aware_logger()


class ParquetTableWriter:
    """Writes providers to ``<path>/<name>.parquet``, one file per table."""

    def __init__(self, path: str | Path, compression: str | None = None) -> None:
        self.path = Path(path)
        self.compression = compression or EnvironmentConfigManager.get_writer_config()["compression"]

    def __repr__(self) -> str:
        return f"ParquetTableWriter(path='{self.path}', compression='{self.compression}')"

    def write(self, name: str, provider: MemTableProvider) -> Path:
        """
        Write one table to disk.

        Returns:
            Path: The file that was written

        Raises:
            WriterError: If the directory or the file cannot be written
        """
        target = self.path / f"{name}.parquet"
        try:
            self.path.mkdir(parents=True, exist_ok=True)
            pq.write_table(provider.to_arrow(), target, compression=self.compression)
        except (OSError, pa.ArrowException) as e:
            raise WriterError(f"Writing table '{name}' to {target} failed: {e}") from e
        logger.info(f"Wrote {provider.num_rows} rows of {name} to {target}")
        return target
