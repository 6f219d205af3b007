import asyncio
import gc
import socket
import ssl
import sys
import time
import weakref
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from src.custom_data_structures.Trie.AutoCompleteTrie import (
    AutoCompleteDictionaryTrie,
)

from .client_handler import handle_request
from .config import load_config_file
from .logger import (
    log,
    setup_logging_queue,
    setup_producer_logging,
    start_logging_listener,
    stop_logging_listener,
)
from .ssl_utils import generate_certificate_and_key

# Longest accepted request line, not counting its newline
MAX_REQUEST_SIZE = 1024
REQUEST_TOO_LONG = "ERROR: Request exceeds maximum allowed size."
INVALID_ENCODING = "ERROR: Request is not valid UTF-8."


class RequestTooLongError(Exception):
    """Raised when a request line is longer than MAX_REQUEST_SIZE."""


async def read_request(reader: asyncio.StreamReader) -> Optional[bytes]:
    """Read one newline terminated request from the stream.

    A final request that the client sent without a newline before
    closing its side is still returned. An over-long line is consumed
    up to and including its newline, so the next read starts at the
    following request.

    Args:
        reader (asyncio.StreamReader): The client stream. Its limit must
        be MAX_REQUEST_SIZE.

    Raises:
        RequestTooLongError: If the line does not fit in the limit.

    Returns:
        bytes | None: The request without its line ending, or None once
        the client has disconnected.

    """
    try:
        line = await reader.readuntil(b"\n")
    except asyncio.IncompleteReadError as e:
        return e.partial or None
    except asyncio.LimitOverrunError as e:
        await _discard_line(reader, e.consumed)
        raise RequestTooLongError from e
    return line.rstrip(b"\r\n")


async def _discard_line(reader: asyncio.StreamReader, consumed: int) -> None:
    """Drop buffered bytes until the end of the current line."""
    while True:
        try:
            await reader.readexactly(consumed)
            await reader.readuntil(b"\n")
            return
        except asyncio.IncompleteReadError:
            return
        except asyncio.LimitOverrunError as e:
            consumed = e.consumed


class Server:
    """Asyncio TCP server answering dictionary and completion queries.

    Every request is answered on the event loop thread, which makes the
    loop the single writer of the dictionary.
    """

    def __init__(
        self,
        ip: str,
        config_file_path: Path,
        dictionary: AutoCompleteDictionaryTrie,
    ):
        self.ip = ip
        self.configuration_settings = load_config_file(config_file_path)
        self.dictionary = dictionary
        self.is_running = True
        self.ssl_context: Union[ssl.SSLContext, None] = None
        self.server_instance: Union[asyncio.Server, None] = None
        self.log_details: bool = False
        self._active_connections: weakref.WeakSet[asyncio.StreamWriter] = (
            weakref.WeakSet()
        )

    async def _setup_ssl_context(
        self,
        cert_path: Path,
        key_path: Path,
        gen_path: Path,
    ) -> None:
        """Load (and generate if needed) the server certificate.

        The server falls back to plain TCP when the certificate cannot
        be loaded.

        Args:
            cert_path (Path): The certificate file name.
            key_path (Path): The key file name.
            gen_path (Path): The directory holding both files.

        """
        self.ssl_context = None
        if not self.configuration_settings.use_ssl:
            print("[SERVER] SSL is disabled by configuration.")
            return

        generate_certificate_and_key(gen_path, cert_path.name, key_path.name)
        context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
        try:
            context.load_cert_chain(
                certfile=str(gen_path / cert_path),
                keyfile=str(gen_path / key_path),
            )
        except (OSError, ssl.SSLError) as e:
            print(
                f"[SERVER ERROR] Failed to load SSL cert/key: {e}. "
                "Running without SSL.",
                file=sys.stderr,
            )
            return

        self.ssl_context = context
        print(f"[SERVER] SSL context loaded from {cert_path} and {key_path}")

    def _answer(self, request: bytes) -> str:
        """Decode a request and run it against the dictionary."""
        try:
            query_string = request.decode("utf-8").strip()
        except UnicodeDecodeError:
            return INVALID_ENCODING
        return handle_request(
            self.dictionary,
            self.configuration_settings,
            query_string.replace("\x00", ""),
        )

    async def _handle_client(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
    ) -> None:
        """Answer newline terminated requests until the client leaves.

        Args:
            reader (asyncio.StreamReader): The client's request stream.
            writer (asyncio.StreamWriter): The client's response stream.

        """
        peername = writer.get_extra_info("peername")
        client_ip = peername[0] if peername else "N/A"
        client_address = f"{client_ip}:{peername[1]}" if peername else "UNKNOWN"
        print(f"[SERVER] Accepted connection from {client_address}")
        self._active_connections.add(writer)

        try:
            while self.is_running:
                started = time.perf_counter()
                try:
                    request = await read_request(reader)
                except RequestTooLongError:
                    request, response = b"<oversized request>", REQUEST_TOO_LONG
                else:
                    if request is None:
                        print(f"[SERVER] Client {client_address} disconnected.")
                        break
                    response = self._answer(request)

                writer.write(response.encode("utf-8") + b"\n")
                await writer.drain()

                elapsed_ms = (time.perf_counter() - started) * 1000
                shown = request.decode("utf-8", errors="replace")
                if self.log_details:
                    log(
                        datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
                        client_ip,
                        shown,
                        elapsed_ms,
                    )
                print(
                    f"[SERVER] {client_address} '{shown[:50]}' -> "
                    f"'{response[:50]}' in {elapsed_ms:.2f} ms",
                )

        except (ConnectionResetError, BrokenPipeError):
            print(f"[SERVER] Client {client_address} dropped the connection.")
        finally:
            self._active_connections.discard(writer)
            writer.close()
            try:
                await writer.wait_closed()
            except (ConnectionError, OSError) as e:
                print(f"[SERVER] Error closing {client_address}: {e}")
            print(f"[SERVER] Connection with {client_address} closed.")

    async def start(
        self,
        generation_path: Path,
        certfile_path: Path,
        key_file_path: Path,
        log_details: bool,
    ) -> None:
        """Serve until cancelled, then shut down.

        Args:
            generation_path (Path): Directory of the SSL certificate and key.
            certfile_path (Path): The certificate file name.
            key_file_path (Path): The key file name.
            log_details (bool): Whether every query goes to the log file.

        """
        self.log_details = log_details

        try:
            setup_logging_queue()
            start_logging_listener()
            setup_producer_logging()

            print(
                "[SERVER] Serving a dictionary of "
                f"{self.dictionary.size()} words.",
            )

            if self.configuration_settings.use_ssl:
                await self._setup_ssl_context(
                    certfile_path,
                    key_file_path,
                    generation_path,
                )

            listening_socket = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
            listening_socket.setsockopt(
                socket.SOL_SOCKET,
                socket.SO_REUSEADDR,
                1,
            )
            listening_socket.bind((self.ip, self.configuration_settings.port))

            self.server_instance = await asyncio.start_server(
                self._handle_client,
                sock=listening_socket,
                ssl=self.ssl_context,
                limit=MAX_REQUEST_SIZE,
            )
            print(
                f"[SERVER] Listening on {self.ip}:"
                f"{self.configuration_settings.port} "
                f"({'SSL' if self.ssl_context else 'no SSL'}).",
            )

            await self.server_instance.serve_forever()

        except asyncio.CancelledError:
            print("[SERVER] Server task cancelled.")
        except OSError as e:
            print(
                f"[SERVER ERROR] Could not start the server: {e}",
                file=sys.stderr,
            )
        finally:
            await self.stop()

    async def stop(self) -> None:
        """Close client connections, the listener and the log thread."""
        print("[SERVER] Initiating graceful shutdown...")
        self.is_running = False

        for writer in list(self._active_connections):
            writer.close()
        self._active_connections.clear()

        stop_logging_listener()

        if self.server_instance is not None:
            server_instance, self.server_instance = self.server_instance, None
            server_instance.close()
            await server_instance.wait_closed()

        self.ssl_context = None
        gc.collect()

        print("[SERVER] Server shutdown complete.")
