"""Asynchronous client for the autocomplete dictionary server."""

import asyncio
import json
import time
from typing import Any, Optional, Union

# Longest response line the client buffers, not counting its newline
MAX_RESPONSE_SIZE = 1024 * 1024


class Client:
    """Asynchronous Client for connecting to a TCP server."""

    def __init__(self, ip: str, port: int):
        """Initialize a new asynchronous client instance.

        Args:
            ip (str): The IP address of the server to connect to.
            port (int): The port number of the server to connect to.

        """
        self.ip = ip
        self.port = port
        self.reader: Optional[asyncio.StreamReader] = None
        self.writer: Optional[asyncio.StreamWriter] = None
        self.last_elapsed_ms: Optional[float] = None

    def _connection_kwargs(self) -> dict[str, Any]:
        """Extra keyword arguments for asyncio.open_connection."""
        return {}

    async def connect(self) -> None:
        """Establish the asynchronous connection to the server.

        This method must be called and awaited before sending any messages.

        Raises:
            ConnectionRefusedError: If the server actively
            refuses the connection.
            OSError: For other connection-related errors.

        """
        try:
            self.reader, self.writer = await asyncio.open_connection(
                self.ip,
                self.port,
                limit=MAX_RESPONSE_SIZE,
                **self._connection_kwargs(),
            )
            peername = self.writer.get_extra_info("peername")
            print(f"Connected to server at {peername[0]}:{peername[1]}")

        except ConnectionRefusedError:
            print(
                f"Connection refused by the server at {self.ip}:{self.port}.",
            )
            raise

        except OSError as e:
            print(f"Error connecting to server at {self.ip}:{self.port}: {e}")
            raise

    async def send_message(self, query_string: str) -> Union[str, None]:
        """Send a request line and wait for the server's response.

        Requests and responses are single lines. The roundtrip time is
        kept in `last_elapsed_ms`.

        Args:
            query_string (str): The request sent to the server.

        Returns:
            str: The response, without the trailing newline.
            None: If the client is not connected or the server closed
            the connection without answering.

        """
        if self.writer is None or self.reader is None:
            print("Client not connected. Call .connect() first.")
            return None

        try:
            start = time.perf_counter()

            self.writer.write(query_string.encode("utf-8") + b"\n")
            await self.writer.drain()

            data = await self.reader.readline()
            if not data.endswith(b"\n"):
                print(
                    "Server closed the connection unexpectedly or sent "
                    "no data.",
                )
                return None

            response = data.decode("utf-8").strip()

            self.last_elapsed_ms = (time.perf_counter() - start) * 1000

            print(f"Time: {self.last_elapsed_ms:.2f} ms")
            print("Response from server:", response)

            return response

        except (ConnectionResetError, BrokenPipeError):
            print("Server closed the connection unexpectedly or sent no data.")
            raise
        except OSError as e:
            print(f"OS Error during send: {e}")
            raise

    async def is_word(self, word: str) -> bool:
        """Ask the server whether `word` is in its dictionary."""
        return await self.send_message(f"ISWORD {word}") == "WORD EXISTS"

    async def predict_completions(
        self,
        prefix: str,
        num_completions: int,
    ) -> list[str]:
        """Ask the server for up to `num_completions` completions.

        Args:
            prefix (str): The stem to complete.
            num_completions (int): The maximum number of words wanted.

        Raises:
            ValueError: If the server answered with an error.

        Returns:
            list[str]: The completions in the order the server sent them.

        """
        response = await self.send_message(
            f"COMPLETE {num_completions} {prefix}",
        )
        if response is None:
            return []
        if not response.startswith("COMPLETIONS "):
            raise ValueError(f"Unexpected response from server: {response}")
        return list(json.loads(response[len("COMPLETIONS ") :]))

    async def add_word(self, word: str) -> bool:
        """Ask the server to add `word`; True if it was new."""
        response = await self.send_message(f"ADD {word}")
        if response is not None and response.startswith("ERROR"):
            raise ValueError(response)
        return response == "WORD ADDED"

    async def size(self) -> int:
        """Return the number of words the server's dictionary holds."""
        response = await self.send_message("SIZE")
        if response is None or not response.startswith("SIZE "):
            raise ValueError(f"Unexpected response from server: {response}")
        return int(response.split(" ", 1)[1])

    async def close(self) -> None:
        """Close the asynchronous connection to the server.

        This method must be called and awaited after sending a message.
        """
        print("Closing connection...")
        if self.writer and not self.writer.is_closing():
            try:
                self.writer.close()
                await self.writer.wait_closed()
                print("Connection closed.")
            except (ConnectionResetError, BrokenPipeError, OSError) as e:
                print(f"Error during close cleanup: {e}")
                raise
            finally:
                self.reader = None
                self.writer = None
        elif self.writer and self.writer.is_closing():
            try:
                await self.writer.wait_closed()
                print("Connection already closing, waited for it.")
            except (ConnectionResetError, BrokenPipeError, OSError) as e:
                print(f"Error during close cleanup (already closing): {e}")
                raise
        else:
            print("No active connection to close.")
        self.reader = None
        self.writer = None
