"""Mock data access with simulated latency and failures."""

import asyncio
import random
from typing import Any

LATENCY_SECONDS = 0.3
EXTERNAL_LATENCY_SECONDS = 0.4
EXTERNAL_FAILURE_RATE = 0.5


async def _delay(seconds: float | None = None) -> None:
    await asyncio.sleep(LATENCY_SECONDS if seconds is None else seconds)


async def get_user(user_id: str) -> dict[str, Any]:
    await _delay()
    raise RuntimeError(f"Database read failed for user ID: {user_id}")


async def create_user(data: dict[str, Any]) -> dict[str, Any]:
    await _delay()
    raise RuntimeError("Database write failed, user not created.")


async def delete_user(user_id: str) -> dict[str, Any]:
    await _delay()
    raise RuntimeError(f"Database delete failed for user ID: {user_id}")


async def fetch_external_data() -> dict[str, Any]:
    await _delay(EXTERNAL_LATENCY_SECONDS)
    if random.random() < EXTERNAL_FAILURE_RATE:
        raise TimeoutError("External API timeout, simulated failure.")
    return {
        "source": "mock-api",
        "data": {"temperature": 26, "humidity": 78},
        "message": "Fetched successfully (simulated)",
    }
