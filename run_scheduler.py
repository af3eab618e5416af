#!/usr/bin/env python3
# run_scheduler.py
# This file is part of Ergon - A Label-Driven Build Scheduler
#
# Command-line interface replaying job submissions against a node pool

import sys
import argparse
from pathlib import Path
from typing import List

from core import (
    BlockWhileRunBuilding,
    BlockWhileUpstreamBuilding,
    BuildQueue,
    CheckKind,
    NodePool,
    SchedulerError,
    check_label,
)
from labels import ParseError
from model.item import ItemHandle, ItemState
from utils.logger import LogLevel, get_logger
from utils.scenario_reader import (
    JobSpec,
    NodeSpec,
    ScenarioFormatError,
    read_jobs,
    read_nodes,
)


def configure_logging_for_scheduler(verbose: bool = False, debug: bool = False) -> None:
    """Configure logging levels for the scheduler.

    Args:
        verbose: Enable INFO level logging
        debug: Enable DEBUG level logging (overrides verbose)
    """
    logger = get_logger()

    if debug:
        logger.set_level(LogLevel.DEBUG)
    elif verbose:
        logger.set_level(LogLevel.INFO)
    else:
        logger.set_level(LogLevel.WARNING)


def build_pool(nodes: List[NodeSpec]) -> NodePool:
    pool = NodePool()
    for spec in nodes:
        pool.register_node(spec.name, spec.labels)
    return pool


def validate_job_labels(pool: NodePool, jobs: List[JobSpec]) -> bool:
    """Check every job label against the pool.

    Returns:
        False if any label fails to parse; unmatched labels only warn
    """
    logger = get_logger()
    all_valid = True

    for job in jobs:
        result = check_label(job.label, pool)
        if result.kind is CheckKind.ERROR:
            logger.error(f"Job '{job.task}': {result.message}")
            all_valid = False
        elif result.kind is CheckKind.WARNING:
            logger.warning(f"⚠️  Job '{job.task}': {result.message}")
        else:
            logger.info(f"Job '{job.task}': {result.message}")

    return all_valid


def run_scenario(pool: NodePool, jobs: List[JobSpec]) -> List[ItemHandle]:
    """Submit every job, then complete running work in assignment order.

    Each completion frees a node and triggers a match pass, so the replay
    ends when nothing is building; jobs whose labels never match stay
    pending.

    Returns:
        Handles in submission order
    """
    queue = BuildQueue(pool)
    handles = []

    for job in jobs:
        blockers = []
        if job.upstream:
            blockers.append(BlockWhileUpstreamBuilding(job.upstream))
        if job.after:
            blockers.append(BlockWhileRunBuilding.from_run_id(job.after))
        handles.append(queue.submit(job.label, task=job.task, blockers=blockers))

    while True:
        building = queue.building()
        if not building:
            break
        queue.on_completed(building[0])

    for handle in queue.pending():
        get_logger().warning(f"⏳ {handle.item} still pending: {queue.why_pending(handle)}")

    return handles


def print_summary(handles: List[ItemHandle]) -> None:
    """Print where every submitted job ran.

    Args:
        handles: Handles returned by ``run_scenario``
    """
    logger = get_logger()

    logger.info(f"\n📊 Jobs submitted: {len(handles)}")
    for handle in handles:
        if handle.state is ItemState.COMPLETED:
            logger.info(f"  {handle.task}: ✅ {handle.run} on {handle.node}")
        else:
            logger.info(f"  {handle.task}: ⏳ {handle.state}")


def create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure argument parser for command line interface.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        description="Ergon label-driven build scheduler",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_scheduler.py -n nodes.csv -j jobs.csv
  python run_scheduler.py -n nodes.csv -j jobs.csv -v
  python run_scheduler.py -n nodes.csv -j jobs.csv --validate-only
  python run_scheduler.py -n nodes.csv --check-label "win && 32bit"

File formats:
  nodes.csv:
    name,labels
    w32,win 32bit
    w64,win 64bit

  jobs.csv:
    task,label,upstream,after
    p1,win && 32bit,,
    p3,win,,p1#1
        """,
    )

    parser.add_argument(
        "-n", "--nodes", required=True, type=Path, help="Path to CSV nodes file"
    )

    parser.add_argument("-j", "--jobs", type=Path, help="Path to CSV jobs file")

    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose output"
    )

    parser.add_argument(
        "--debug", action="store_true", help="Enable debug output (overrides --verbose)"
    )

    parser.add_argument(
        "--validate-only",
        action="store_true",
        help="Only validate scenario files and job labels",
    )

    parser.add_argument(
        "--check-label",
        metavar="EXPR",
        help="Check a label expression against the nodes and exit",
    )

    return parser


def main() -> int:
    """Main entry point for the scheduler replay.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    parser = create_argument_parser()
    args = parser.parse_args()

    configure_logging_for_scheduler(verbose=args.verbose, debug=args.debug)
    logger = get_logger()

    try:
        pool = build_pool(read_nodes(str(args.nodes)))
        logger.info(f"🖥️  {len(pool)} node(s) registered")

        if args.check_label is not None:
            result = check_label(args.check_label, pool)
            print(result)
            return 2 if result.kind is CheckKind.ERROR else 0

        if args.jobs is None:
            parser.error("--jobs is required unless --check-label is given")

        jobs = read_jobs(str(args.jobs))

        if not validate_job_labels(pool, jobs):
            return 2

        if args.validate_only:
            logger.info("✅ Scenario validation successful. Exiting.")
            return 0

        handles = run_scenario(pool, jobs)
        print_summary(handles)
        return 0

    except ScenarioFormatError as e:
        logger.error(f"Scenario file error: {e}")
        return 1

    except ParseError as e:
        logger.error(f"Label parsing error: {e}")
        return 2

    except FileNotFoundError as e:
        logger.error(f"File error: {e}")
        return 3

    except KeyboardInterrupt:
        logger.error("Scheduling interrupted by user")
        return 4

    except SchedulerError as e:
        logger.error(f"Scheduler error: {e}")
        return 5

    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        import traceback

        traceback.print_exc()
        return 6


if __name__ == "__main__":
    sys.exit(main())
