"""
Composite Airtable value types exposed by every generated schema.

Collaborator and attachment cells are JSON objects rather than scalars. Each
gets an output type and an input counterpart (the input side has no ``id``;
Airtable assigns it on write).
"""

from typing import Optional
import strawberry


@strawberry.type(name="airtable_collaborator")
class AirtableCollaborator:
    id: strawberry.ID
    email: str
    name: Optional[str] = None


@strawberry.input(name="airtable_input_collaborator")
class AirtableInputCollaborator:
    email: str
    name: Optional[str] = strawberry.UNSET


@strawberry.type(name="airtable_attachment_thumbnail")
class AirtableThumbnail:
    url: Optional[str] = None
    height: Optional[int] = None
    width: Optional[int] = None


@strawberry.input(name="airtable_input_attachment_thumbnail")
class AirtableInputThumbnail:
    url: Optional[str] = strawberry.UNSET
    height: Optional[int] = strawberry.UNSET
    width: Optional[int] = strawberry.UNSET


@strawberry.type(name="airtable_attachment_thumbnail_group")
class AirtableThumbnailGroup:
    small: Optional[AirtableThumbnail] = None
    large: Optional[AirtableThumbnail] = None


@strawberry.input(name="airtable_input_attachment_thumbnail_group")
class AirtableInputThumbnailGroup:
    small: Optional[AirtableInputThumbnail] = strawberry.UNSET
    large: Optional[AirtableInputThumbnail] = strawberry.UNSET


@strawberry.type(name="airtable_attachment")
class AirtableAttachment:
    id: strawberry.ID
    size: Optional[int] = None
    url: Optional[str] = None
    type: Optional[str] = None
    filename: Optional[str] = None
    thumbnails: Optional[AirtableThumbnailGroup] = None


@strawberry.input(name="airtable_input_attachment")
class AirtableInputAttachment:
    size: Optional[int] = strawberry.UNSET
    url: Optional[str] = strawberry.UNSET
    type: Optional[str] = strawberry.UNSET
    filename: Optional[str] = strawberry.UNSET
    thumbnails: Optional[AirtableInputThumbnailGroup] = strawberry.UNSET


# composite name -> (output type, input type)
COMPOSITES = {
    'collaborator': (AirtableCollaborator, AirtableInputCollaborator),
    'attachment': (AirtableAttachment, AirtableInputAttachment),
}

# GraphQL output type name -> field names, in declaration order. The resolver
# synthesizer emits plain getters for these.
COMPOSITE_OUTPUT_FIELDS = {
    'airtable_attachment_thumbnail': ('url', 'height', 'width'),
    'airtable_attachment_thumbnail_group': ('small', 'large'),
    'airtable_attachment': ('id', 'size', 'url', 'type', 'filename', 'thumbnails'),
    'airtable_collaborator': ('id', 'email', 'name'),
}


__all__ = [
    'AirtableCollaborator',
    'AirtableInputCollaborator',
    'AirtableThumbnail',
    'AirtableInputThumbnail',
    'AirtableThumbnailGroup',
    'AirtableInputThumbnailGroup',
    'AirtableAttachment',
    'AirtableInputAttachment',
    'COMPOSITES',
    'COMPOSITE_OUTPUT_FIELDS',
]
