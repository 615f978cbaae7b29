"""Composition root: wires settings, registry, session and services.

Usage:
    client = build_client(signer)
    await client.session.connect()
    listing_id = await client.marketplace.create_listing(token_id, asset, "0.5")
    ...
    await client.aclose()
"""

from dataclasses import dataclass

from config.settings import Settings, settings
from src.mm_asset.application.service import AssetRegistryService
from src.mm_chain.application.orchestrator import LedgerCallOrchestrator, OrchestratorConfig
from src.mm_chain.domain.repository import LedgerResolverProtocol
from src.mm_chain.infrastructure.rpc_client import LedgerPool
from src.mm_common.logging_setup import configure_logging
from src.mm_marketplace.application.service import MarketplaceService
from src.mm_network.registry import NetworkRegistry
from src.mm_pinning.domain.repository import PinningProtocol
from src.mm_pinning.infrastructure.pinata_client import PinataClient
from src.mm_session.application.service import AccountSession
from src.mm_session.domain.signer import SignerProtocol


@dataclass
class MintMarketClient:
    registry: NetworkRegistry
    ledgers: LedgerResolverProtocol
    session: AccountSession
    orchestrator: LedgerCallOrchestrator
    marketplace: MarketplaceService
    assets: AssetRegistryService
    pinning: PinningProtocol | None = None

    async def aclose(self) -> None:
        await self.session.disconnect()
        for resource in (self.ledgers, self.pinning):
            aclose = getattr(resource, "aclose", None)
            if aclose is not None:
                await aclose()


def build_client(
    signer: SignerProtocol | None,
    config: Settings = settings,
    ledgers: LedgerResolverProtocol | None = None,
    pinning: PinningProtocol | None = None,
    registry: NetworkRegistry | None = None,
) -> MintMarketClient:
    """Build a client; ``ledgers`` / ``pinning`` default to the HTTP implementations."""
    configure_logging(config.LOG_LEVEL)
    registry = registry or NetworkRegistry(rpc_overrides=config.RPC_URL_OVERRIDES)
    if ledgers is None:
        ledgers = LedgerPool(registry, timeout=config.RPC_REQUEST_TIMEOUT_SECONDS)
    if pinning is None and config.PINATA_API_KEY:
        pinning = PinataClient.from_settings(config)

    session = AccountSession(signer, registry, event_queue_size=config.SESSION_EVENT_QUEUE_SIZE)
    orchestrator = LedgerCallOrchestrator(
        session, ledgers, OrchestratorConfig.from_settings(config)
    )
    return MintMarketClient(
        registry=registry,
        ledgers=ledgers,
        session=session,
        orchestrator=orchestrator,
        marketplace=MarketplaceService(orchestrator, session),
        assets=AssetRegistryService(orchestrator, session, config.DEFAULT_ROYALTY_BPS),
        pinning=pinning,
    )
