"""
Gateways - Contracts for the engine's external collaborators.

The closed set of collaborators:
- APIGateway: remote catalog and authentication
- CacheGateway: local product persistence
- ConnectivitySource: live online/offline signal

Every call returns Ok/Err; nothing is raised across the boundary.
"""

from .errors import ErrorKind, GatewayError
from .records import ProductRecord, decode_products, encode_product
from .api import APIGateway, InMemoryAPIGateway
from .cache import CacheGateway, InMemoryCacheGateway, JSONFileCacheGateway
from .connectivity import ConnectivitySource, ManualConnectivitySource

__all__ = [
    "ErrorKind",
    "GatewayError",
    "ProductRecord",
    "decode_products",
    "encode_product",
    "APIGateway",
    "InMemoryAPIGateway",
    "CacheGateway",
    "InMemoryCacheGateway",
    "JSONFileCacheGateway",
    "ConnectivitySource",
    "ManualConnectivitySource",
]
