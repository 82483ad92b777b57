"""Client entry point: publishes sample points to an InfluxDB TCP listener."""

import logging
import signal
import sys
import threading

from influxtcp.client import new_tcp_client
from influxtcp.config import load_client_config
from influxtcp.errors import AddressResolutionError, ConnectError
from influxtcp.sample import publish_samples


def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logger = logging.getLogger(__name__)

    config = load_client_config()
    shutdown_event = threading.Event()

    def handle_signal(signum, frame):
        logger.info("Received signal %d, shutting down...", signum)
        shutdown_event.set()

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    try:
        client = new_tcp_client(config.to_tcp_config())
    except (AddressResolutionError, ConnectError) as exc:
        logger.error("Cannot start client: %s", exc)
        sys.exit(1)

    logger.info(
        "Starting sample publisher: addr=%s, payload_size=%d, points_per_second=%d, precision=%s",
        config.addr,
        client.payload_size,
        config.points_per_second,
        config.precision,
    )

    try:
        publish_samples(
            client,
            config.measurement,
            config.precision,
            config.points_per_second,
            config.run_time,
            shutdown_event,
        )
    except KeyboardInterrupt:
        logger.info("Interrupted")
    finally:
        client.close()


if __name__ == "__main__":
    main()
