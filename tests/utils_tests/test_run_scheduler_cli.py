# tests/utils_tests/test_run_scheduler_cli.py
# This file is part of Ergon - A Label-Driven Build Scheduler
#
# Test suite for the scheduler command-line replay

"""Test suite for run_scheduler.py."""

import sys

import pytest
import run_scheduler
from core import NodePool
from model.item import ItemState
from utils.scenario_reader import JobSpec, NodeSpec

NODES = "name,labels\nw32,win 32bit\nw64,win 64bit\nl32,linux 32bit\n"
JOBS = (
    "task,label,upstream,after\n"
    "p1,win && 32bit,,\n"
    "p2,win && 32bit,,\n"
    "p3,win,,\n"
    "p4,linux,p1,\n"
    "p5,solaris,,\n"
)


@pytest.fixture
def scenario(tmp_path):
    nodes = tmp_path / "nodes.csv"
    jobs = tmp_path / "jobs.csv"
    nodes.write_text(NODES, encoding="utf-8")
    jobs.write_text(JOBS, encoding="utf-8")
    return str(nodes), str(jobs)


def run_main(monkeypatch, *args):
    monkeypatch.setattr(sys, "argv", ["run_scheduler.py", *args])
    return run_scheduler.main()


class TestRunScenario:
    def test_replay_routes_every_job(self):
        pool = run_scheduler.build_pool(
            [NodeSpec("w32", "win 32bit"), NodeSpec("w64", "win 64bit"), NodeSpec("l32", "linux 32bit")]
        )
        handles = run_scheduler.run_scenario(
            pool,
            [
                JobSpec("p1", "win && 32bit"),
                JobSpec("p2", "win && 32bit"),
                JobSpec("p3", "win"),
                JobSpec("p4", "linux", upstream="p1"),
                JobSpec("p5", "solaris"),
            ],
        )
        by_task = {h.task: h for h in handles}

        assert by_task["p1"].node == "w32"
        assert by_task["p2"].node == "w32"
        assert by_task["p3"].node == "w64"
        assert by_task["p4"].node == "l32"
        assert by_task["p4"].state is ItemState.COMPLETED
        assert by_task["p5"].state is ItemState.PENDING

    def test_validate_job_labels(self):
        pool = NodePool()
        pool.register_node("n1", "linux")
        assert run_scheduler.validate_job_labels(pool, [JobSpec("a", "linux")])
        assert run_scheduler.validate_job_labels(pool, [JobSpec("a", "solaris")])
        assert not run_scheduler.validate_job_labels(pool, [JobSpec("a", "foo bar")])


class TestMain:
    def test_replay(self, monkeypatch, scenario):
        nodes, jobs = scenario
        assert run_main(monkeypatch, "-n", nodes, "-j", jobs) == 0

    def test_validate_only(self, monkeypatch, scenario):
        nodes, jobs = scenario
        assert run_main(monkeypatch, "-n", nodes, "-j", jobs, "--validate-only") == 0

    def test_check_label(self, monkeypatch, scenario):
        nodes, _ = scenario
        assert run_main(monkeypatch, "-n", nodes, "--check-label", "win && 32bit") == 0
        assert run_main(monkeypatch, "-n", nodes, "--check-label", "foo*bar") == 2

    def test_bad_label_in_jobs(self, monkeypatch, tmp_path, scenario):
        nodes, _ = scenario
        jobs = tmp_path / "bad.csv"
        jobs.write_text("task,label\np1,foo bar\n", encoding="utf-8")
        assert run_main(monkeypatch, "-n", nodes, "-j", str(jobs)) == 2

    def test_missing_nodes_file(self, monkeypatch, tmp_path):
        assert run_main(monkeypatch, "-n", str(tmp_path / "none.csv"), "--check-label", "x") == 1

    def test_jobs_required_without_check_label(self, monkeypatch, scenario):
        nodes, _ = scenario
        with pytest.raises(SystemExit):
            run_main(monkeypatch, "-n", nodes)
