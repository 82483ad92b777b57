"""Sample point generation for the demo client."""

import logging
import random
import threading
import time

from influxtcp.batch import BatchPoints
from influxtcp.client import TCPClient
from influxtcp.errors import TransportError
from influxtcp.point import Point
from influxtcp.precision import parse_precision

logger = logging.getLogger(__name__)

SAMPLE_HOSTS = ["web-01", "web-02", "db-01", "cache-01"]
SAMPLE_REGIONS = ["us-east", "us-west", "eu-central"]


def make_sample_point(measurement: str, rng: random.Random, time_ns: int | None) -> Point:
    """Build one random point for *measurement* stamped with *time_ns*."""
    return Point(
        measurement,
        tags={
            "host": rng.choice(SAMPLE_HOSTS),
            "region": rng.choice(SAMPLE_REGIONS),
        },
        fields={
            "value": round(rng.uniform(0.0, 100.0), 3),
            "count": rng.randint(0, 1000),
            "ok": rng.random() > 0.1,
        },
        time=time_ns,
    )


def publish_samples(
    client: TCPClient,
    measurement: str,
    precision: str,
    points_per_second: int,
    run_time: int,
    shutdown_event: threading.Event,
    rng: random.Random | None = None,
) -> int:
    """Write one batch of *points_per_second* points per second for *run_time* seconds.

    Returns the number of points handed to the client.
    """
    rng = rng or random.Random()
    # points in a batch sit one precision unit apart
    step = parse_precision(precision or "ns")
    written = 0

    for _ in range(run_time):
        if shutdown_event.is_set():
            break

        second_start = time.monotonic()

        bp = BatchPoints(precision=precision)
        now_ns = time.time_ns()
        for i in range(points_per_second):
            bp.add_point(make_sample_point(measurement, rng, now_ns + i * step))

        try:
            client.write(bp)
        except TransportError as exc:
            logger.error("Batch of %d points failed: %s", len(bp), exc)
        written += len(bp)

        # Sleep until the next second boundary
        elapsed = time.monotonic() - second_start
        remaining = 1.0 - elapsed
        if remaining > 0 and not shutdown_event.is_set():
            shutdown_event.wait(timeout=remaining)

    logger.info("Client metrics: %s", client.metrics.snapshot())
    return written
