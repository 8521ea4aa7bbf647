"""Application level helpers for assembling pipeline dependencies."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .clients import MextClient
from .config import AppConfig
from .database import Storage, create_storage
from .pipeline import DownloadPipeline, ParsePipeline


@dataclass(slots=True)
class PipelineResources:
    """Container bundling a pipeline with the resources it holds open."""

    pipeline: DownloadPipeline | ParsePipeline
    client: MextClient | None = None
    storage: Storage | None = None
    owns_client: bool = True
    owns_storage: bool = True

    def close(self) -> None:
        if self.client is not None and self.owns_client:
            self.client.close()
        if self.storage is not None and self.owns_storage:
            self.storage.dispose()


def create_client(config: AppConfig) -> MextClient:
    return MextClient(
        config.mext.base_url,
        config.mext.index_path,
        timeout=config.mext.timeout,
        max_retries=config.mext.max_retries,
        parser=config.parser.html_parser,
    )


def create_download_pipeline(config: AppConfig, *, client: Optional[MextClient] = None) -> PipelineResources:
    owns_client = client is None
    client = client or create_client(config)
    return PipelineResources(pipeline=DownloadPipeline(client=client), client=client, owns_client=owns_client)


def create_parse_pipeline(config: AppConfig, *, storage: Optional[Storage] = None) -> PipelineResources:
    """Build the parse pipeline; a store is opened only when a database URL is configured."""

    owns_storage = storage is None
    if storage is None and config.storage.database_url:
        storage = create_storage(config.storage.database_url, echo=config.storage.echo_sql)
    pipeline = ParsePipeline(
        parser=config.parser.html_parser,
        csv_encoding=config.export.csv_encoding,
        write_per_file_json=config.export.write_per_file_json,
        storage=storage,
    )
    return PipelineResources(pipeline=pipeline, storage=storage, owns_storage=owns_storage)


__all__ = ["PipelineResources", "create_client", "create_download_pipeline", "create_parse_pipeline"]
