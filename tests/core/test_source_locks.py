"""
Test suite for SourceLockRegistry.
"""

import asyncio

import pytest

from resume_knowledge.core.source_locks import SourceLockRegistry


class TestSourceLockRegistry:
    @pytest.mark.asyncio
    async def test_same_source_is_serialized(self) -> None:
        # Arrange
        registry = SourceLockRegistry()
        events: list[str] = []

        async def writer(name: str) -> None:
            async with registry.hold("page", "page-1"):
                events.append(f"{name}-start")
                await asyncio.sleep(0.01)
                events.append(f"{name}-end")

        # Act
        await asyncio.gather(writer("a"), writer("b"))

        # Assert
        assert events in (
            ["a-start", "a-end", "b-start", "b-end"],
            ["b-start", "b-end", "a-start", "a-end"],
        )

    @pytest.mark.asyncio
    async def test_different_sources_do_not_block_each_other(self) -> None:
        # Arrange
        registry = SourceLockRegistry()
        inside = asyncio.Event()

        async def holder() -> None:
            async with registry.hold("page", "page-1"):
                inside.set()
                await asyncio.sleep(0.05)

        async def other() -> bool:
            await inside.wait()
            async with registry.hold("page", "page-2"):
                return len(registry) == 2

        # Act
        _, overlapped = await asyncio.gather(holder(), other())

        # Assert
        assert overlapped is True

    @pytest.mark.asyncio
    async def test_locks_are_released_after_use(self) -> None:
        registry = SourceLockRegistry()

        async with registry.hold("project", "p-1"):
            assert len(registry) == 1

        assert len(registry) == 0
