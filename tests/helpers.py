"""
Shared test helpers
"""

from typing import AsyncIterator


def sse(*records: str) -> bytes:
    """Join `event: ...\\ndata: ...` records into one SSE body"""
    return "".join(f"{record}\n\n" for record in records).encode("utf-8")


async def collect(stream: AsyncIterator) -> list:
    return [part async for part in stream]


def types_of(parts: list) -> list[str]:
    return [part.type for part in parts]
