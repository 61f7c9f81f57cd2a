from .sender import DisplayClient, publish_documents

__all__ = ["DisplayClient", "publish_documents"]
