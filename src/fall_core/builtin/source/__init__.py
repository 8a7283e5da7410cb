from .list import list_source

__all__ = ["list_source"]
