"""Shared test fixtures."""

import pytest
import pytest_asyncio

from config.settings import Settings
from src.mm_asset.application.service import AssetRegistryService
from src.mm_chain.application.orchestrator import LedgerCallOrchestrator, OrchestratorConfig
from src.mm_marketplace.application.service import MarketplaceService
from src.mm_network.registry import NETWORK_TABLE, NetworkRegistry
from src.mm_session.application.service import AccountSession
from tests.fakes import (
    ASSET_ADDRESS,
    MARKETPLACE_ADDRESS,
    FakeLedger,
    FakeLedgerPool,
    FakeSigner,
)

SEPOLIA = 11155111
POLYGON = 137


@pytest.fixture
def registry() -> NetworkRegistry:
    """The production table with the test contract addresses on every chain."""
    table = tuple(
        {**row, "asset_contract": ASSET_ADDRESS, "marketplace_contract": MARKETPLACE_ADDRESS}
        for row in NETWORK_TABLE
    )
    return NetworkRegistry(table)


@pytest.fixture
def ledger() -> FakeLedger:
    return FakeLedger(chain_id=SEPOLIA)


@pytest.fixture
def polygon_ledger() -> FakeLedger:
    return FakeLedger(chain_id=POLYGON)


@pytest.fixture
def pool(ledger: FakeLedger, polygon_ledger: FakeLedger) -> FakeLedgerPool:
    return FakeLedgerPool(ledger, polygon_ledger)


@pytest.fixture
def signer(pool: FakeLedgerPool) -> FakeSigner:
    return FakeSigner(pool, chain_id=SEPOLIA)


@pytest.fixture
def session(signer: FakeSigner, registry: NetworkRegistry) -> AccountSession:
    return AccountSession(signer, registry)


@pytest.fixture
def orchestrator(session: AccountSession, pool: FakeLedgerPool) -> LedgerCallOrchestrator:
    config = OrchestratorConfig(poll_interval=0, min_confirmations=1, confirmation_timeout=5.0)
    return LedgerCallOrchestrator(session, pool, config)


@pytest_asyncio.fixture
async def connected(session: AccountSession) -> AccountSession:
    await session.connect()
    return session


@pytest.fixture
def marketplace(orchestrator: LedgerCallOrchestrator, session: AccountSession) -> MarketplaceService:
    return MarketplaceService(orchestrator, session)


@pytest.fixture
def assets(orchestrator: LedgerCallOrchestrator, session: AccountSession) -> AssetRegistryService:
    return AssetRegistryService(orchestrator, session, Settings().DEFAULT_ROYALTY_BPS)
