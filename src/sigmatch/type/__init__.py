from . import iface
from ._descriptor import Kind, TypeDescriptor

__all__ = ["Kind", "TypeDescriptor", "iface"]
