"""Shared fixtures: the isolate under test and a second, foreign isolate."""

from pathlib import Path

import pytest_asyncio

from actor_harness import ActorSystem, WorkerOptions, create_system, set_system

FIXTURES = Path(__file__).parent / "fixtures"


def main_options(**overrides) -> WorkerOptions:
    options = WorkerOptions(
        main="counter_worker.py",
        root=str(FIXTURES),
        actors={
            "COUNTER": "Counter",
            "STARTER": "SlowStarter",
            "FAILING": "FailingStarter",
            "SILENT": "Silent",
            "FAULTY": "Faulty",
            "SOCKET": "Socket",
            "MISSING": "DoesNotExist",
            "NOT_A_CLASS": "NotAnActor",
        },
    )
    for key, value in overrides.items():
        setattr(options, key, value)
    return options


@pytest_asyncio.fixture
async def system():
    system = await create_system(node_id="main", options=main_options())
    yield system
    await system.shutdown()
    set_system(None)


@pytest_asyncio.fixture
async def other_system(system):
    other = ActorSystem(
        node_id="other",
        options=WorkerOptions(main="other_worker.py", root=str(FIXTURES), actors={"OTHER": "OtherActor"}),
    )
    await other.start()
    system.bind("OTHER", other.env["OTHER"])
    yield other
    await other.shutdown()
