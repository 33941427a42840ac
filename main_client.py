#!/usr/bin/env python3
"""
Main entry point for the APRS-IS client application.

This script connects to an APRS-IS server, logs in and prints every line
the server sends until interrupted. Configuration is loaded from
environment variables.
"""

import asyncio
import signal
import sys
import os
from typing import Optional

from config.settings import Config
from client.is_socket import Connector, ISSocket
from protocol.events import SessionEvent
from utils.logging import setup_logging, get_logger
from utils.exceptions import ConfigurationError

logger = get_logger(__name__)


class ClientApplication:
    """Main application class for the APRS-IS client."""

    def __init__(self, connector: Optional[Connector] = None):
        """
        Initialize application.

        Args:
            connector: Transport connector passed to the session
        """
        self.config = Config()
        self.connector = connector
        self.session: ISSocket = None
        self.shutdown_event = asyncio.Event()

    def on_packet(self, line: str) -> None:
        """Log a line received from the server."""
        logger.info(f"Packet: {line}")

    async def run(self) -> int:
        """
        Run the client application.

        Loads configuration, connects and logs in, and handles graceful
        shutdown.

        Returns:
            Process exit code
        """
        try:
            # Load configuration
            logger.info("Loading configuration...")
            client_config = self.config.load_client_config()

            logger.info(
                f"Configuration loaded: "
                f"server={client_config.host}:{client_config.port}, "
                f"callsign={client_config.callsign}, "
                f"filter={client_config.filter}"
            )
        except ConfigurationError as e:
            logger.error(f"Configuration error: {e}")
            logger.error(
                "Please check your environment variables. "
                "See .env.example for required configuration."
            )
            return 1

        self.session = ISSocket(client_config, connector=self.connector)
        self.session.on(SessionEvent.PACKET, self.on_packet)
        # Stop when the server drops us
        self.session.on(SessionEvent.DISCONNECT, self.shutdown_event.set)

        connect_task = self.session.connect(on_ready=self.session.send_login)
        shutdown_task = asyncio.ensure_future(self.shutdown_event.wait())

        # Ctrl+C must still stop a connect that never completes
        done, _ = await asyncio.wait(
            {connect_task, shutdown_task},
            return_when=asyncio.FIRST_COMPLETED,
        )

        if connect_task not in done:
            logger.info("Shutdown signal received while connecting, stopping...")
            self.session.destroy()
            return 0

        try:
            connect_task.result()
        except OSError as e:
            logger.error(f"Failed to connect: {e}")
            shutdown_task.cancel()
            return 1

        logger.info("Client application started successfully")
        logger.info("Press Ctrl+C to stop")

        # Wait for shutdown signal
        await shutdown_task

        logger.info("Shutdown signal received, stopping...")
        await self.session.disconnect()

        logger.info("Client application stopped successfully")
        return 0

    def handle_shutdown(self, signum, frame):
        """
        Handle shutdown signals.

        Args:
            signum: Signal number
            frame: Current stack frame
        """
        logger.info(f"Received signal {signum}")
        self.shutdown_event.set()


async def main() -> int:
    """Main entry point."""
    # Get log level from environment
    log_level = os.getenv('LOG_LEVEL', 'INFO')

    # Setup logging
    setup_logging(log_level)

    logger.info("Starting APRS-IS client...")

    # Create application
    app = ClientApplication()

    # Setup signal handlers for graceful shutdown
    loop = asyncio.get_running_loop()

    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(
            sig,
            lambda s=sig: app.handle_shutdown(s, None)
        )

    # Run application
    return await app.run()


def run() -> None:
    """Console script entry point."""
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        print("\nShutdown complete")
        sys.exit(0)


if __name__ == '__main__':
    run()
