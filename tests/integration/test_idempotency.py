"""Idempotent persistence of signal runs across retries."""

import pytest

from mgap_app.engine import SignalGenerator
from mgap_app.errors import PersistenceError

from conftest import TARGET_DATE, make_eod, make_premarket


@pytest.fixture
def seeded_store(market_store):
    market_store.upsert_premarket([make_premarket("INFY")])
    market_store.upsert_end_of_day([make_eod("INFY"), make_eod("TCS")])
    return market_store


def make_generator(market_store, run_store):
    return SignalGenerator(market_store.premarket, market_store.end_of_day, run_store)


def without_run_id(signals):
    return [{**s.to_dict(), "run_id": None} for s in signals]


class TestRunIdempotency:
    """A run_id is written at most once."""

    def test_retry_with_same_run_id(self, seeded_store, run_store):
        generator = make_generator(seeded_store, run_store)

        first = generator.generate(TARGET_DATE, run_id="daily-2024-01-15")
        second = generator.generate(TARGET_DATE, run_id="daily-2024-01-15")

        assert first.run_id == second.run_id == "daily-2024-01-15"
        assert [c.symbol for c in first.signals] == [c.symbol for c in second.signals]
        assert run_store.count_signals("daily-2024-01-15") == 2
        assert len(run_store.find_orphan_runs()) == 0

    def test_new_run_ids_create_separate_runs(self, seeded_store, run_store):
        generator = make_generator(seeded_store, run_store)

        first = generator.generate(TARGET_DATE)
        second = generator.generate(TARGET_DATE)

        assert first.run_id != second.run_id
        assert run_store.count_signals(first.run_id) == 2
        assert run_store.count_signals(second.run_id) == 2

    def test_identical_inputs_give_identical_signals(self, seeded_store, run_store):
        generator = make_generator(seeded_store, run_store)

        first = generator.generate(TARGET_DATE)
        second = generator.generate(TARGET_DATE)

        assert without_run_id(run_store.get_signals(first.run_id)) == \
            without_run_id(run_store.get_signals(second.run_id))
        assert (run_store.get_run(first.run_id).params_hash ==
                run_store.get_run(second.run_id).params_hash)


class TestPartialFailureRecovery:
    """A failed signal write leaves an orphan run that a retry completes."""

    def test_retry_completes_orphan_run(self, seeded_store, run_store, monkeypatch):
        generator = make_generator(seeded_store, run_store)
        real_insert = run_store.insert_signals

        def failing_insert(signals):
            raise PersistenceError("database is locked", operation="insert_signals")

        monkeypatch.setattr(run_store, "insert_signals", failing_insert)
        with pytest.raises(PersistenceError):
            generator.generate(TARGET_DATE, run_id="run-retry")

        assert [r.run_id for r in run_store.find_orphan_runs()] == ["run-retry"]

        monkeypatch.setattr(run_store, "insert_signals", real_insert)
        result = generator.generate(TARGET_DATE, run_id="run-retry")

        assert result.signal_count == 2
        assert run_store.count_signals("run-retry") == 2
        assert run_store.find_orphan_runs() == []
