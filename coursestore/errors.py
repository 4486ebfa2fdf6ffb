"""Store errors. Not-found is never an error here: store lookups return None."""


class StoreError(Exception):
    pass


class StorageFullError(StoreError):
    """Write would push the storage past its quota."""

    def __init__(self, key: str, needed: int, quota: int):
        self.key = key
        self.needed = needed
        self.quota = quota
        super().__init__(f"Storage quota exceeded writing {key!r}: {needed} > {quota} bytes")


class StorageWriteError(StoreError):
    """A store write was aborted. Previously persisted state is unchanged."""


class DuplicateEntityError(StoreError):
    pass


class InvalidTransitionError(StoreError):
    pass
