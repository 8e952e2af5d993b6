"""Tests for the SignalRepository database layer."""

from datetime import datetime, timedelta, timezone

import pytest


def _signals(member, now, **overrides):
    from src.signals.generator import SignalGenerator

    signals = SignalGenerator(clock=lambda: now).generate(member)
    return signals.model_copy(update=overrides)


class TestDatabaseInitialization:
    """Test database initialization."""

    @pytest.mark.asyncio
    async def test_creates_database_file(self, tmp_path):
        """Should create the database file and its parent directory."""
        from src.signals.repository import SignalRepository

        db_path = tmp_path / "data" / "signals.db"

        repo = SignalRepository(db_path)
        await repo.initialize()

        assert db_path.exists()
        await repo.close()

    @pytest.mark.asyncio
    async def test_initialize_twice_is_safe(self, tmp_path):
        from src.signals.repository import SignalRepository

        db_path = tmp_path / "signals.db"
        repo = SignalRepository(db_path)
        await repo.initialize()
        await repo.initialize()

        assert await repo.count() == 0
        await repo.close()

    @pytest.mark.asyncio
    async def test_unusable_path_raises_store_failure(self, tmp_path):
        from src.signals.repository import SignalRepository
        from src.utils.outcome import StoreFailure

        blocker = tmp_path / "not_a_dir"
        blocker.write_text("x")

        repo = SignalRepository(blocker / "signals.db")

        with pytest.raises(StoreFailure):
            await repo.initialize()


class TestUpsert:
    """Test upsert semantics."""

    @pytest.mark.asyncio
    async def test_round_trip(self, tmp_path, investor_member, fixed_now):
        from src.signals.repository import SignalRepository

        repo = SignalRepository(tmp_path / "signals.db")
        await repo.initialize()

        signals = _signals(investor_member, fixed_now)
        stored = await repo.upsert(signals)

        assert stored.embedding_ready_text == signals.embedding_ready_text
        assert stored.supply_tags == signals.supply_tags
        assert stored.geo_tags == signals.geo_tags
        assert stored.recency_weight == fixed_now
        assert stored.trust_signals.verified_links["linkedin"].verified_at == fixed_now
        assert stored.numeric_features.to_dict() == signals.numeric_features.to_dict()
        assert stored.created_at == stored.updated_at
        await repo.close()

    @pytest.mark.asyncio
    async def test_second_write_replaces_and_bumps_updated_at(
        self, tmp_path, investor_member, fixed_now, monkeypatch
    ):
        """Should keep one row per user, preserving created_at."""
        from src.signals import repository as repository_module
        from src.signals.repository import SignalRepository

        times = iter(
            [
                datetime(2025, 3, 14, 10, 0, tzinfo=timezone.utc),
                datetime(2025, 3, 14, 11, 0, tzinfo=timezone.utc),
            ]
        )
        monkeypatch.setattr(repository_module, "_now", lambda: next(times))

        repo = SignalRepository(tmp_path / "signals.db")
        await repo.initialize()

        first = await repo.upsert(_signals(investor_member, fixed_now))
        second = await repo.upsert(
            _signals(
                investor_member,
                fixed_now + timedelta(days=1),
                embedding_ready_text="Grace Hopper | updated",
                supply_tags=["capital"],
            )
        )

        assert await repo.count() == 1
        assert second.embedding_ready_text == "Grace Hopper | updated"
        assert second.supply_tags == ["capital"]
        assert second.created_at == first.created_at
        assert second.updated_at > first.updated_at
        await repo.close()

    @pytest.mark.asyncio
    async def test_upsert_before_initialize_raises_store_failure(
        self, tmp_path, investor_member, fixed_now
    ):
        from src.signals.repository import SignalRepository
        from src.utils.outcome import StoreFailure

        repo = SignalRepository(tmp_path / "signals.db")

        with pytest.raises(StoreFailure) as exc_info:
            await repo.upsert(_signals(investor_member, fixed_now))

        assert exc_info.value.original_error is not None
        await repo.close()


class TestQueries:
    """Lookup and delete."""

    @pytest.mark.asyncio
    async def test_get_missing_user(self, tmp_path):
        from src.signals.repository import SignalRepository

        repo = SignalRepository(tmp_path / "signals.db")
        await repo.initialize()

        assert await repo.get_by_user_id("u_nobody") is None
        await repo.close()

    @pytest.mark.asyncio
    async def test_delete(self, tmp_path, investor_member, fixed_now):
        from src.signals.repository import SignalRepository

        repo = SignalRepository(tmp_path / "signals.db")
        await repo.initialize()
        await repo.upsert(_signals(investor_member, fixed_now))

        assert await repo.delete("u_grace") is True
        assert await repo.delete("u_grace") is False
        assert await repo.count() == 0
        await repo.close()
