"""Tests for the candidate catalog and remote store."""

import os
import tempfile

import pytest

from vote_arena import (
    Candidate,
    Catalog,
    Category,
    ConfigError,
    InMemoryRemoteStore,
    RemoteReadError,
    RemoteWriteError,
    UnknownCandidateError,
    VoteRecord,
    get_remote_store,
    load_bundled_catalog,
)
from vote_arena.models import CandidateChange


class TestCatalog:
    """Tests for Catalog."""

    def test_lookup(self, alpha, beta):
        catalog = Catalog([alpha, beta])
        assert len(catalog) == 2
        assert "alpha" in catalog
        assert catalog.get("beta") is beta
        assert catalog.get("ghost") is None
        with pytest.raises(UnknownCandidateError):
            catalog.require("ghost")

    def test_replace_drops_duplicates(self, alpha, beta):
        catalog = Catalog()
        catalog.replace([alpha, beta, Candidate(id="alpha", name="Other")], source="bundled")
        assert catalog.ids() == ["alpha", "beta"]
        assert catalog.get("alpha").name == "Alpha"
        assert catalog.source == "bundled"

    def test_sorted_by_rating(self, alpha, beta, gamma):
        catalog = Catalog([alpha, beta, gamma])
        assert catalog.by_category(Category.PLANNING)[0].id == "gamma"
        assert catalog.sorted("planning", descending=False)[-1].id == "gamma"

    def test_sorted_by_attribute(self, alpha, beta, gamma):
        catalog = Catalog([alpha, beta, gamma])
        assert [c.id for c in catalog.sorted("cost_credits", descending=False)] == ["gamma", "beta", "alpha"]


class TestBundledCatalog:
    """Tests for load_bundled_catalog."""

    def test_packaged_catalog(self):
        candidates = load_bundled_catalog()
        assert len(candidates) > 1
        assert len({c.id for c in candidates}) == len(candidates)
        assert all(c.ratings.overall == 1000 for c in candidates)

    def test_custom_file_recomputes_overall(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "catalog.yaml")
            with open(path, "w") as f:
                f.write("- id: x\n  ratings:\n    agentic: 1500\n- id: y\n")

            candidates = load_bundled_catalog(path)

            assert [c.id for c in candidates] == ["x", "y"]
            assert candidates[0].ratings.overall == 1100

    def test_missing_file(self):
        with pytest.raises(FileNotFoundError):
            load_bundled_catalog("/nonexistent/catalog.yaml")

    def test_invalid_candidate(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "catalog.yaml")
            with open(path, "w") as f:
                f.write("candidates:\n  - name: no id\n")

            with pytest.raises(ConfigError, match="Invalid candidate"):
                load_bundled_catalog(path)


class TestInMemoryRemoteStore:
    """Tests for the in-memory remote store."""

    def test_factory(self):
        assert isinstance(get_remote_store("memory"), InMemoryRemoteStore)
        with pytest.raises(ValueError, match="Unknown remote store"):
            get_remote_store("postgres")

    @pytest.mark.asyncio
    async def test_fetch_returns_copies(self, remote):
        fetched = await remote.fetch_candidates()
        fetched[0].vote_count = 99
        assert all(c.vote_count == 0 for c in remote.candidates.values())

    @pytest.mark.asyncio
    async def test_insert_duplicate_rejected(self, remote, alpha):
        with pytest.raises(RemoteWriteError):
            await remote.insert_candidates([alpha])

    @pytest.mark.asyncio
    async def test_update_metadata_keeps_ratings(self, remote):
        await remote.update_candidate_metadata("gamma", {"name": "Gamma 2", "speed": 95.0})

        stored = remote.candidates["gamma"]
        assert stored.name == "Gamma 2"
        assert stored.speed == 95.0
        assert stored.ratings.planning == 1100

    @pytest.mark.asyncio
    async def test_update_metadata_rejects_other_fields(self, remote):
        with pytest.raises(RemoteWriteError, match="vote_count"):
            await remote.update_candidate_metadata("gamma", {"vote_count": 50})
        with pytest.raises(RemoteWriteError, match="ghost"):
            await remote.update_candidate_metadata("ghost", {"name": "Ghost"})
        assert remote.candidates["gamma"].vote_count == 0

    @pytest.mark.asyncio
    async def test_vote_records_by_identity(self, remote):
        for voter in ("v1", "v2", "v1"):
            await remote.insert_vote_record(
                VoteRecord(candidate_a="alpha", candidate_b="beta", category="planning", outcome=0, timestamp=1, voter_id=voter)
            )
        assert len(await remote.fetch_vote_records_by_identity("v1")) == 2

    @pytest.mark.asyncio
    async def test_failure_injection(self, remote):
        remote.fail_on.add("fetch_candidates")
        with pytest.raises(RemoteReadError, match="fetch_candidates"):
            await remote.fetch_candidates()

    @pytest.mark.asyncio
    async def test_notifications_are_deferred(self, remote, beta):
        received: list[CandidateChange] = []

        async def on_change(change: CandidateChange) -> None:
            received.append(change)

        unsubscribe = remote.subscribe_to_candidate_changes(on_change)
        await remote.update_candidate_rating("beta", beta.ratings, 3)
        assert received == []

        await remote.drain_notifications()
        assert received == [CandidateChange(event="update", candidate_id="beta")]

        unsubscribe()
        await remote.update_candidate_rating("beta", beta.ratings, 4)
        await remote.drain_notifications()
        assert len(received) == 1
