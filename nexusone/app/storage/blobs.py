"""Chunked blob storage for uploaded policy files.

Files are stored as an ordered sequence of fixed-size chunks keyed by
(file_id, sequence_index). Readers must concatenate chunks in
sequence_index order; the stores below only ever yield them that way.
"""

import uuid
from collections.abc import AsyncIterator, Iterable
from typing import Protocol

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from nexusone.app.db.models import PolicyChunk
from nexusone.app.errors import BlobReadError


def split_into_chunks(data: bytes, chunk_size: int) -> list[bytes]:
    """Split a payload into fixed-size chunks (the last one may be shorter).

    Args:
        data: Raw file bytes
        chunk_size: Chunk size in bytes (must be positive)

    Returns:
        Chunks in sequence order; empty list for an empty payload
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")

    return [data[i : i + chunk_size] for i in range(0, len(data), chunk_size)]


def reassemble(chunks: Iterable[bytes]) -> bytes:
    """Concatenate chunks that are already in sequence order."""
    return b"".join(chunks)


class BlobStore(Protocol):
    """Chunked blob store interface."""

    async def put(self, file_id: uuid.UUID, data: bytes, chunk_size: int) -> int:
        """Store a payload as chunks.

        Returns:
            Number of chunks written
        """
        ...

    async def count_chunks(self, file_id: uuid.UUID) -> int:
        """Count stored chunks for a file."""
        ...

    def open_stream(self, file_id: uuid.UUID) -> AsyncIterator[bytes]:
        """Yield chunk payloads in sequence_index order.

        Raises:
            BlobReadError: If the store fails mid-stream
        """
        ...

    async def delete(self, file_id: uuid.UUID) -> None:
        """Remove every chunk of a file."""
        ...


class SqlBlobStore:
    """BlobStore backed by the policy_chunk table."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def put(self, file_id: uuid.UUID, data: bytes, chunk_size: int) -> int:
        """Store a payload as chunks."""
        chunks = split_into_chunks(data, chunk_size)
        for index, payload in enumerate(chunks):
            self._session.add(
                PolicyChunk(
                    chunk_id=uuid.uuid4(),
                    file_id=file_id,
                    sequence_index=index,
                    payload=payload,
                )
            )
        await self._session.flush()
        return len(chunks)

    async def count_chunks(self, file_id: uuid.UUID) -> int:
        """Count stored chunks for a file."""
        try:
            result = await self._session.execute(
                select(func.count()).select_from(PolicyChunk).where(PolicyChunk.file_id == file_id)
            )
        except SQLAlchemyError as e:
            raise BlobReadError(f"Failed to count chunks for file {file_id}", e) from e
        return int(result.scalar_one())

    async def open_stream(self, file_id: uuid.UUID) -> AsyncIterator[bytes]:
        """Yield chunk payloads in sequence_index order."""
        stmt = (
            select(PolicyChunk.payload)
            .where(PolicyChunk.file_id == file_id)
            .order_by(PolicyChunk.sequence_index)
        )
        try:
            result = await self._session.stream_scalars(stmt)
            async for payload in result:
                yield payload
        except SQLAlchemyError as e:
            raise BlobReadError(f"Failed to stream chunks for file {file_id}", e) from e

    async def delete(self, file_id: uuid.UUID) -> None:
        """Remove every chunk of a file."""
        await self._session.execute(delete(PolicyChunk).where(PolicyChunk.file_id == file_id))
