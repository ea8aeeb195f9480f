from mimetree.models.header import Header
from mimetree.models.part import Part, PartTree

__all__ = [
    "Header",
    "Part",
    "PartTree",
]
