# tests/utils_tests/test_scenario_reader.py
# This file is part of Ergon - A Label-Driven Build Scheduler
#
# Test suite for CSV scenario files

"""Test suite for reading nodes and jobs files."""

import pytest
from utils.scenario_reader import (
    JobSpec,
    NodeSpec,
    ScenarioFormatError,
    read_jobs,
    read_nodes,
)


def write(tmp_path, name, content):
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    return str(path)


class TestReadNodes:
    def test_nodes_in_file_order(self, tmp_path):
        path = write(tmp_path, "nodes.csv", "name,labels\nw32,win 32bit\nmaster,\n")
        assert read_nodes(path) == [NodeSpec("w32", "win 32bit"), NodeSpec("master", "")]

    def test_missing_file(self, tmp_path):
        with pytest.raises(ScenarioFormatError, match="not found"):
            read_nodes(str(tmp_path / "missing.csv"))

    def test_missing_header(self, tmp_path):
        path = write(tmp_path, "nodes.csv", "name\nw32\n")
        with pytest.raises(ScenarioFormatError, match="Missing required headers"):
            read_nodes(path)

    def test_duplicate_name(self, tmp_path):
        path = write(tmp_path, "nodes.csv", "name,labels\nw32,win\nw32,linux\n")
        with pytest.raises(ScenarioFormatError, match="duplicate node name"):
            read_nodes(path)

    def test_empty_name(self, tmp_path):
        path = write(tmp_path, "nodes.csv", "name,labels\n,win\n")
        with pytest.raises(ScenarioFormatError, match="Row 2"):
            read_nodes(path)


class TestReadJobs:
    def test_jobs_with_optional_columns(self, tmp_path):
        path = write(
            tmp_path,
            "jobs.csv",
            "task,label,upstream,after\n"
            "p1,win && 32bit,,\n"
            "p2,,p1,\n"
            "p3,win,,p1#1\n",
        )
        assert read_jobs(path) == [
            JobSpec("p1", "win && 32bit"),
            JobSpec("p2", "", upstream="p1"),
            JobSpec("p3", "win", after="p1#1"),
        ]

    def test_optional_columns_may_be_absent(self, tmp_path):
        path = write(tmp_path, "jobs.csv", "task,label\np1,linux\n")
        assert read_jobs(path) == [JobSpec("p1", "linux")]

    def test_invalid_run_id(self, tmp_path):
        path = write(tmp_path, "jobs.csv", "task,label,after\np1,linux,p0\n")
        with pytest.raises(ScenarioFormatError, match="Row 2"):
            read_jobs(path)

    def test_hash_in_task_name(self, tmp_path):
        path = write(tmp_path, "jobs.csv", "task,label\np#1,linux\n")
        with pytest.raises(ScenarioFormatError):
            read_jobs(path)
