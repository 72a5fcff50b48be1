"""Built-in reference formats.

Importing this package registers them in
:data:`chanlist.plugins.serializer_registry`.  They double as worked
examples of the serializer contract: a flat text file saved through
``atomic_output`` and a zipped XML file driven through archive staging.
"""
from __future__ import annotations

from chanlist.formats.reference_csv import ReferenceCsvSerializer
from chanlist.formats.zip_xml import ZipXmlSerializer
from chanlist.plugins.registry import serializer_registry

BUILTIN_FORMATS = {
    "zip-xml": ZipXmlSerializer,
    "reference-csv": ReferenceCsvSerializer,
}

for _name, _cls in BUILTIN_FORMATS.items():
    if _name not in serializer_registry:
        serializer_registry.register_class(_name, _cls)

__all__ = ["BUILTIN_FORMATS", "ReferenceCsvSerializer", "ZipXmlSerializer"]
