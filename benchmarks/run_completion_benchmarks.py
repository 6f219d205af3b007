"""Benchmark completion latency of the dictionary server under
concurrent load.
"""

import asyncio
import gc
import json
import random
import sys
from pathlib import Path
from typing import Optional

import matplotlib.pyplot as plt
import psutil

from src.client.client import Client

ROOT = Path(__file__).resolve().parent.parent
CONFIG_PATH = ROOT / "config.txt"
RESULTS_DIR = ROOT / "static" / "benchmarks" / "completion_results"
HOST = "127.0.0.1"
PORT = 5050
NUMBER_OF_CLIENTS_IN_EACH_BENCHMARK = [1, 10, 100, 500]
COMPLETION_LIMITS = [1, 5, 10]
PREFIXES = ["a", "ca", "do", "ste", "he", "hel", "x", ""]


async def initialize_server(
    config_path: Path,
) -> Optional[asyncio.subprocess.Process]:
    """Start the server as a subprocess.

    Args:
        config_path (Path): The path to the configuration file.

    Returns:
        Optional[asyncio.subprocess.Process]: The server process, or None
        if it could not be started.

    """
    try:
        return await asyncio.create_subprocess_exec(
            sys.executable,
            "run_server.py",
            "--ip",
            "local",
            "--config_path",
            str(config_path),
            stdout=asyncio.subprocess.DEVNULL,
            stderr=sys.stderr,
            cwd=str(ROOT),
        )
    except OSError as e:
        print(f"[Server Error] {e}")
        return None


async def cleanup_server(server_process: asyncio.subprocess.Process) -> None:
    """Terminate the server process and anything it spawned.

    Args:
        server_process (asyncio.subprocess.Process): The server process.

    """
    try:
        parent = psutil.Process(server_process.pid)
    except psutil.NoSuchProcess:
        return

    children = parent.children(recursive=True)
    for process in [*children, parent]:
        try:
            process.terminate()
        except psutil.NoSuchProcess:
            pass

    _gone, alive = psutil.wait_procs([parent, *children], timeout=3)
    for process in alive:
        try:
            process.kill()
        except psutil.NoSuchProcess:
            pass


async def single_client(limit: int) -> Optional[float]:
    """Open a connection, request one completion list and close.

    Args:
        limit (int): The number of completions requested.

    Returns:
        Optional[float]: The roundtrip time in milliseconds, or None
        if the request failed.

    """
    client = Client(HOST, PORT)
    try:
        await client.connect()
        await client.predict_completions(random.choice(PREFIXES), limit)
        return client.last_elapsed_ms
    except (OSError, ValueError) as e:
        print(f"Error in client: {e}")
        return None
    finally:
        await client.close()


async def run_load(limit: int) -> dict[int, dict[str, float]]:
    """Measure the average latency for each client count.

    Args:
        limit (int): The number of completions each client requests.

    Returns:
        dict[int, dict[str, float]]: Average latency and success count
        per number of concurrent clients.

    """
    results: dict[int, dict[str, float]] = {}
    for number_of_clients in NUMBER_OF_CLIENTS_IN_EACH_BENCHMARK:
        timings = await asyncio.gather(
            *(single_client(limit) for _ in range(number_of_clients)),
        )
        successes = [t for t in timings if t is not None]
        average = sum(successes) / len(successes) if successes else 0.0
        results[number_of_clients] = {
            "average_execution_time": average,
            "success_count": len(successes),
        }
        print(
            f"limit={limit}, {number_of_clients} clients => "
            f"{average:.2f} ms",
        )
    return results


def plot_results(results: dict[int, dict[int, dict[str, float]]]) -> Path:
    """Save a line plot of latency per client count for every limit.

    Args:
        results (dict): Results of run_load keyed by completion limit.

    Returns:
        Path: The saved figure.

    """
    RESULTS_DIR.mkdir(parents=True, exist_ok=True)
    figure_path = RESULTS_DIR / "completion_latency.png"
    try:
        plt.figure(figsize=(8, 5))
        for limit, per_clients in results.items():
            plt.plot(
                [str(clients) for clients in per_clients],
                [v["average_execution_time"] for v in per_clients.values()],
                marker="o",
                label=f"limit={limit}",
            )
        plt.xlabel("Clients")
        plt.ylabel("Execution Time (ms)")
        plt.title("Completion latency per client count")
        plt.legend()
        plt.tight_layout()
        plt.savefig(figure_path)
    finally:
        plt.close("all")
    return figure_path


async def main() -> None:
    """Main function."""
    server_process = await initialize_server(CONFIG_PATH)
    if server_process is None:
        return

    try:
        await asyncio.sleep(2)
        results = {limit: await run_load(limit) for limit in COMPLETION_LIMITS}
        memory_usage = psutil.Process(server_process.pid).memory_info().rss
    finally:
        await cleanup_server(server_process)
        gc.collect()

    RESULTS_DIR.mkdir(parents=True, exist_ok=True)
    with open(RESULTS_DIR / "results.json", "w", encoding="utf-8") as f:
        json.dump(
            {"results": results, "server_memory_rss": memory_usage},
            f,
            indent=4,
        )
    print(f"Plot saved to {plot_results(results)}")


if __name__ == "__main__":
    asyncio.run(main())
