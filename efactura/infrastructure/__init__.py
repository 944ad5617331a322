"""Infrastructure layer implementations."""

from efactura.infrastructure import pdf, xml

__all__ = ["pdf", "xml"]
