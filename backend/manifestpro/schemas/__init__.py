from manifestpro.schemas.manifest import ManifestLineItem, NormalizeMetadata, NormalizeResponse

__all__ = ["ManifestLineItem", "NormalizeMetadata", "NormalizeResponse"]
