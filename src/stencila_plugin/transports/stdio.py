"""Line-delimited transport over standard I/O.

One request per input line, one response per output line, in the order the
requests arrive. The channel is trusted so there is no authentication.
"""

import asyncio
import logging
import sys
from typing import Protocol, TextIO

from stencila_plugin.rpc.protocol import ErrorCode, encode_failure

logger = logging.getLogger(__name__)

# Large enough for a kernelExecute carrying a whole notebook
LINE_LIMIT = 64 * 1024 * 1024


class RequestHandler(Protocol):
    """Anything that turns one raw request into one raw response."""

    async def handle(self, raw: str | bytes) -> str: ...


async def open_stdin_reader() -> asyncio.StreamReader:
    """Connect an asyncio reader to the process's standard input."""
    loop = asyncio.get_running_loop()
    reader = asyncio.StreamReader(limit=LINE_LIMIT)
    protocol = asyncio.StreamReaderProtocol(reader)
    await loop.connect_read_pipe(lambda: protocol, sys.stdin)
    return reader


async def read_line(reader: asyncio.StreamReader) -> bytes | None:
    """Read the next line.

    Returns:
        The line (empty at end of input), or None if it exceeded the
        reader's limit. An oversized line is discarded up to and including
        its newline, however long it takes to arrive.
    """
    try:
        return await reader.readuntil(b"\n")
    except asyncio.IncompleteReadError as e:
        return e.partial
    except asyncio.LimitOverrunError as e:
        consumed = e.consumed

    while True:
        await reader.readexactly(consumed)
        try:
            await reader.readuntil(b"\n")
            return None
        except asyncio.IncompleteReadError:
            return None
        except asyncio.LimitOverrunError as e:
            consumed = e.consumed


class StdioTransport:
    """Serve requests read line by line from a stream."""

    def __init__(
        self,
        dispatcher: RequestHandler,
        reader: asyncio.StreamReader | None = None,
        output: TextIO | None = None,
    ) -> None:
        """Initialize transport.

        Args:
            dispatcher: Handles each request line.
            reader: Input stream. Defaults to standard input.
            output: Output stream. Defaults to standard output.
        """
        self._dispatcher = dispatcher
        self._reader = reader
        self._output = output

    async def serve(self) -> int:
        """Serve until end of input.

        Returns:
            Number of request lines handled.
        """
        reader = self._reader or await open_stdin_reader()
        output = self._output or sys.stdout
        handled = 0

        logger.info("stdio_transport_started")

        while True:
            line = await read_line(reader)
            if line is None:
                logger.warning("stdio_line_too_long", extra={"limit": LINE_LIMIT})
                response = encode_failure(
                    None, ErrorCode.PARSE_ERROR, "Parse error: line too long"
                )
            else:
                if not line:
                    break
                raw = line.rstrip(b"\r\n")
                if not raw.strip():
                    continue
                response = await self._dispatcher.handle(raw)

            output.write(response + "\n")
            output.flush()
            handled += 1

        logger.info("stdio_transport_stopped", extra={"handled": handled})
        return handled
