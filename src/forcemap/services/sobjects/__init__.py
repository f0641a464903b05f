"""SObject CRUD service."""

from forcemap.services.sobjects.service import SObjectService


__all__ = ["SObjectService"]
