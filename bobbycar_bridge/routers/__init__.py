from .ingest import router as ingest_router

__all__ = ["ingest_router"]
