from gazetteer_lite.store.sqlite_store import SQLiteNameStore

__all__ = ["SQLiteNameStore"]
