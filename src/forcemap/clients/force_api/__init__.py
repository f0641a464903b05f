"""Force.com REST API client package."""

from forcemap.clients.force_api.client import ForceApiClient
from forcemap.clients.force_api.models import SObjectMetadata, SObjectResponse


__all__ = [
    "ForceApiClient",
    "SObjectMetadata",
    "SObjectResponse",
]
