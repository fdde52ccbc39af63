from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

SYSTEM_FIELDS = frozenset({"_id", "_type", "_rev", "_createdAt", "_updatedAt"})


def document_id_field(document: Any) -> str:
    """Name of the field holding the identifier: ``_id`` unless only ``id`` is set."""
    if isinstance(document, Mapping) or getattr(document, "_id", None) is not None:
        return "_id"
    return "id"


def get_document_id(document: Any) -> Optional[str]:
    """
    Return the identifier of a document, or None if it has none.

    Accepts mappings with an ``_id`` key, and objects exposing ``_id`` or ``id``.
    Empty strings count as missing.
    """
    if document is None:
        return None
    field_name = document_id_field(document)
    if isinstance(document, Mapping):
        doc_id = document.get(field_name)
    else:
        doc_id = getattr(document, field_name, None)
    if doc_id is None or doc_id == "":
        return None
    return str(doc_id)


def document_type_name(doc_type: type) -> str:
    """
    Remote ``_type`` for a Python class.

    ``__sanity_type__`` declared on the class itself wins (it is not inherited);
    otherwise the class name in lower camel case.
    """
    explicit = vars(doc_type).get("__sanity_type__")
    if explicit:
        return explicit
    name = doc_type.__name__
    return name[:1].lower() + name[1:]


@dataclass
class SanityReference:
    _ref: str
    _type: str = "reference"
    _key: Optional[str] = None
    _weak: Optional[bool] = None


@dataclass
class SanityDocument:
    __sanity_type__ = "document"

    _id: Optional[str] = None
    _type: Optional[str] = None
    _rev: Optional[str] = None
    _createdAt: Optional[str] = None
    _updatedAt: Optional[str] = None


@dataclass
class SanityImageAsset(SanityDocument):
    __sanity_type__ = "sanity.imageAsset"

    _type: Optional[str] = "sanity.imageAsset"
    asset_id: Optional[str] = None
    path: Optional[str] = None
    url: Optional[str] = None
    original_filename: Optional[str] = None
    extension: Optional[str] = None
    mime_type: Optional[str] = None
    size: Optional[int] = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class SanityFileAsset(SanityDocument):
    __sanity_type__ = "sanity.fileAsset"

    _type: Optional[str] = "sanity.fileAsset"
    asset_id: Optional[str] = None
    path: Optional[str] = None
    url: Optional[str] = None
    original_filename: Optional[str] = None
    extension: Optional[str] = None
    mime_type: Optional[str] = None
    size: Optional[int] = None


@dataclass
class SanityImageCrop:
    top: float = 0.0
    bottom: float = 0.0
    left: float = 0.0
    right: float = 0.0
    _type: str = "sanity.imageCrop"


@dataclass
class SanityImageHotspot:
    x: float = 0.5
    y: float = 0.5
    height: float = 1.0
    width: float = 1.0
    _type: str = "sanity.imageHotspot"


@dataclass
class SanityImage:
    asset: Optional[SanityReference] = None
    crop: Optional[SanityImageCrop] = None
    hotspot: Optional[SanityImageHotspot] = None
    _type: str = "image"
