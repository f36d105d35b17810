"""Tests for the lazy reveal controller and debouncer."""

import asyncio

import pytest

from storefront.catalog.reveal import Debouncer, LazyReveal


class TestLazyReveal:
    """Tests for LazyReveal."""

    @pytest.mark.asyncio
    async def test_grows_one_page_at_a_time(self) -> None:
        """45 results with a page of 20 reveal 20, 40 and then 45."""
        reveal: LazyReveal[int] = LazyReveal(page_size=20, delay=0)
        reveal.set_total(45)
        items = list(range(45))

        assert len(reveal.visible(items)) == 20
        assert reveal.has_more

        assert await reveal.load_more() is True
        assert len(reveal.visible(items)) == 40

        assert await reveal.load_more() is True
        assert len(reveal.visible(items)) == 45
        assert not reveal.has_more

        assert await reveal.load_more() is False
        assert reveal.visible_count == 45

    @pytest.mark.asyncio
    async def test_ignores_trigger_while_loading(self) -> None:
        """A second trigger during an in-flight load does nothing."""
        reveal: LazyReveal[int] = LazyReveal(page_size=10, delay=0.05, total=100)

        first = asyncio.create_task(reveal.on_sentinel_visible())
        await asyncio.sleep(0)
        assert reveal.is_loading
        assert not reveal.is_armed

        assert await reveal.on_sentinel_visible() is False
        assert await first is True
        assert reveal.visible_count == 20
        assert not reveal.is_loading

    @pytest.mark.asyncio
    async def test_reset_returns_to_first_page(self) -> None:
        reveal: LazyReveal[int] = LazyReveal(page_size=5, delay=0, total=30)
        await reveal.load_more()
        await reveal.load_more()
        assert reveal.visible_count == 15

        reveal.reset(total=8)
        assert reveal.visible_count == 5
        assert reveal.total == 8

    @pytest.mark.asyncio
    async def test_reset_during_load_discards_growth(self) -> None:
        """A load started before a reset leaves the fresh window alone."""
        reveal: LazyReveal[int] = LazyReveal(page_size=20, delay=0.05, total=100)

        pending = asyncio.create_task(reveal.load_more())
        await asyncio.sleep(0)
        reveal.reset(total=100)

        assert await pending is False
        assert reveal.visible_count == 20
        assert not reveal.is_loading
        assert await reveal.load_more() is True
        assert reveal.visible_count == 40

    def test_short_list_is_fully_visible(self) -> None:
        reveal: LazyReveal[str] = LazyReveal(page_size=20, delay=0, total=3)
        assert reveal.visible(["a", "b", "c"]) == ["a", "b", "c"]
        assert reveal.shown_count == 3
        assert not reveal.has_more

    def test_rejects_non_positive_page_size(self) -> None:
        with pytest.raises(ValueError):
            LazyReveal(page_size=0)


class TestDebouncer:
    """Tests for Debouncer."""

    @pytest.mark.asyncio
    async def test_coalesces_burst_into_last_call(self) -> None:
        """Only the last call in a burst runs."""
        calls: list[str] = []

        async def search(query: str) -> None:
            calls.append(query)

        debounced = Debouncer(search, wait=0.02)
        for query in ("l", "la", "lap"):
            debounced(query)
            await asyncio.sleep(0.001)

        assert debounced.pending
        await debounced.flush()
        assert calls == ["lap"]

    @pytest.mark.asyncio
    async def test_cancel_drops_pending_call(self) -> None:
        calls: list[str] = []

        async def search(query: str) -> None:
            calls.append(query)

        debounced = Debouncer(search, wait=0.02)
        debounced("shoes")
        debounced.cancel()
        await asyncio.sleep(0.05)
        assert calls == []
