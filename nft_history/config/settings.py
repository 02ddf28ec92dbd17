"""
Application settings.

Typed, frozen snapshot of the environment (see config.env) used to build
the marketplace client, the name resolver and the API server.
"""

from __future__ import annotations

from dataclasses import dataclass

from nft_history.config import env


@dataclass(frozen=True)
class Settings:
    network: str
    opensea_api_key: str
    opensea_api_url_template: str
    eth_rpc_url: str
    ens_registry_nft_address: str
    reverse_records_address: str
    request_timeout_sec: float
    max_retries: int
    events_limit: int
    api_host: str
    api_port: int

    @property
    def network_prefix(self) -> str:
        return env.network_prefix(self.network)

    @property
    def opensea_base_url(self) -> str:
        return self.opensea_api_url_template.format(prefix=self.network_prefix)


def get_settings() -> Settings:
    """Return the current application settings, read fresh from the environment."""
    return Settings(
        network=env.get_network(),
        opensea_api_key=env.get_opensea_api_key(),
        opensea_api_url_template=env.get_opensea_api_url_template(),
        eth_rpc_url=env.get_eth_rpc_url(),
        ens_registry_nft_address=env.get_ens_registry_nft_address(),
        reverse_records_address=env.get_reverse_records_address(),
        request_timeout_sec=env.get_request_timeout_sec(),
        max_retries=env.get_max_retries(),
        events_limit=env.get_events_limit(),
        api_host=env.get_api_host(),
        api_port=env.get_api_port(),
    )
