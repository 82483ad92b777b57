"""Server entry point for the line-protocol sink."""

import logging
import signal
import threading

from influxtcp.config import load_server_config
from influxtcp.server import LineProtocolServer


def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logger = logging.getLogger(__name__)

    config = load_server_config()
    shutdown_event = threading.Event()

    def handle_signal(signum, frame):
        logger.info("Received signal %d, shutting down...", signum)
        shutdown_event.set()

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    server = LineProtocolServer(config, shutdown_event)
    logger.info("Starting line protocol sink on %s:%d", config.host, config.port)

    try:
        server.start()
    except KeyboardInterrupt:
        logger.info("Interrupted")
    finally:
        server.stop()


if __name__ == "__main__":
    main()
