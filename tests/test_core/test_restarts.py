"""
Тесты поиска лучшего из нескольких перезапусков.
"""

import json
import logging
import threading

import numpy as np
import pytest
from lloyd.core.driver import run_clustering, run_clustering_best_of
from lloyd.core.errors import RestartsFailedError
from lloyd.core.restarts import BestResult, RestartRunner
from lloyd.core.result import RunResult, RunStatus


def _result(cost: float) -> RunResult:
    return RunResult(
        centroids=np.zeros((1, 2)),
        labels=np.zeros(3, dtype=np.int64),
        cost=cost,
        inertia=cost,
        n_iters=1,
        status=RunStatus.CONVERGED,
    )


def _failing_run_fn(bad_seeds):
    """run_clustering, который падает на заданных seed'ах."""

    def run_fn(X, k, max_iterations, tolerance, init_policy, seed, **kwargs):
        if seed in bad_seeds:
            raise RuntimeError(f"boom {seed}")
        return run_clustering(X, k, max_iterations, tolerance, init_policy, seed, **kwargs)

    return run_fn


class TestBestResult:
    def test_history_is_running_minimum(self):
        best = BestResult()

        assert best.offer(_result(5.0), 0)
        assert best.offer(_result(3.0), 1)
        assert not best.offer(_result(4.0), 2)

        assert best.history == [5.0, 3.0, 3.0]
        assert best.result.cost == 3.0
        assert best.restart_idx == 1

    def test_tie_prefers_lower_restart_index(self):
        best = BestResult()
        late = _result(1.0)
        early = _result(1.0)

        best.offer(late, 7)
        assert best.offer(early, 2)
        assert not best.offer(_result(1.0), 9)

        assert best.result is early
        assert best.restart_idx == 2

    def test_concurrent_offers(self):
        best = BestResult()
        costs = list(np.random.default_rng(0).uniform(1.0, 100.0, size=400))

        def worker(start):
            for idx in range(start, len(costs), 8):
                best.offer(_result(costs[idx]), idx)

        threads = [threading.Thread(target=worker, args=(s,)) for s in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        history = best.history
        assert len(history) == len(costs)
        assert all(b <= a for a, b in zip(history, history[1:]))
        assert best.result.cost == min(costs)
        assert best.restart_idx == int(np.argmin(costs))


class TestRestartRunner:
    def test_finds_global_optimum_of_separated_pairs(self, four_points):
        summary = run_clustering_best_of(four_points, 2, num_restarts=20, random_seed=0)

        centroids = summary.best.centroids
        centroids = centroids[np.argsort(centroids[:, 0])]
        np.testing.assert_allclose(centroids, [[0.0, 0.5], [10.0, 0.5]])
        assert summary.best.cost == pytest.approx(2.0)
        assert summary.best.inertia == pytest.approx(1.0)
        assert summary.n_restarts == 20
        assert summary.failures == []

    def test_best_cost_history_non_increasing(self, medium_dataset):
        X, _ = medium_dataset
        summary = run_clustering_best_of(X, 4, num_restarts=8, random_seed=3)

        history = summary.best_cost_history
        assert len(history) == 8
        assert all(b <= a for a, b in zip(history, history[1:]))
        assert history[-1] == summary.best.cost == min(summary.costs)

    def test_parallel_restarts_match_sequential(self, small_dataset):
        X, _ = small_dataset
        seq = run_clustering_best_of(X, 3, num_restarts=6, random_seed=5, n_jobs=1)
        par = run_clustering_best_of(X, 3, num_restarts=6, random_seed=5, n_jobs=4)

        np.testing.assert_array_equal(seq.best.centroids, par.best.centroids)
        np.testing.assert_array_equal(seq.best.labels, par.best.labels)
        assert seq.costs == par.costs

    def test_spawn_seeds(self):
        a = RestartRunner.spawn_seeds(42, 5)
        assert a == RestartRunner.spawn_seeds(42, 5)
        assert len(set(a)) == 5
        assert RestartRunner.spawn_seeds(42, 3) == a[:3]

    def test_failed_restart_does_not_abort_others(self, four_points):
        seeds = RestartRunner.spawn_seeds(0, 5)
        runner = RestartRunner(
            four_points, 2, run_fn=_failing_run_fn({seeds[1], seeds[3]})
        )

        summary = runner.run(num_restarts=5, random_seed=0, n_jobs=2)

        assert [f.restart_idx for f in summary.failures] == [1, 3]
        assert len(summary.costs) == 3
        assert summary.n_restarts == 5
        assert "boom" in summary.to_dict()["failures"][0]["error"]

    def test_failed_restart_is_logged_with_prefix(self, four_points, caplog):
        seeds = RestartRunner.spawn_seeds(0, 2)
        logger = logging.getLogger("restarts_test")
        runner = RestartRunner(
            four_points, 2, logger=logger, run_fn=_failing_run_fn({seeds[0]})
        )

        with caplog.at_level(logging.INFO, logger="restarts_test"):
            runner.run(num_restarts=2, random_seed=0)

        errors = [r.getMessage() for r in caplog.records if r.levelno == logging.ERROR]
        assert errors == [f"[N=4 D=2 K=2] [restart 1/2] Failed: boom {seeds[0]}"]

    def test_all_restarts_failed(self, four_points):
        seeds = RestartRunner.spawn_seeds(0, 3)
        runner = RestartRunner(four_points, 2, run_fn=_failing_run_fn(set(seeds)))

        with pytest.raises(RestartsFailedError) as exc_info:
            runner.run(num_restarts=3, random_seed=0)
        assert len(exc_info.value.failures) == 3

    def test_result_sink_receives_every_restart(self, four_points):
        records = []
        summary = run_clustering_best_of(
            four_points,
            2,
            num_restarts=4,
            random_seed=1,
            n_jobs=2,
            result_sink=records.append,
        )

        assert sorted(r["restart_idx"] for r in records) == [0, 1, 2, 3]
        assert all("cost" in r and "seed" in r for r in records)
        json.dumps(records)
        json.dumps(summary.to_dict())

    @pytest.mark.parametrize("num_restarts", [0, -1])
    def test_invalid_num_restarts(self, four_points, num_restarts):
        with pytest.raises(ValueError):
            run_clustering_best_of(four_points, 2, num_restarts=num_restarts)

    def test_summary_stats(self, four_points):
        summary = run_clustering_best_of(four_points, 2, num_restarts=10, random_seed=0)
        stats = summary.stats()

        assert stats["cost_min"] == pytest.approx(summary.best.cost)
        assert stats["cost_min"] <= stats["cost_mean"] <= stats["cost_max"]
