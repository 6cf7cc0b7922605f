class StoreError(Exception):
    """Base class for everything a CollectionStore raises."""


class StoreUnavailable(StoreError):
    """The backing JSON file could not be read, parsed or written."""


class RecordNotFound(StoreError):
    def __init__(self, store_name: str, record_id: str):
        super().__init__(f"{store_name}: no record with id {record_id!r}")
        self.store_name = store_name
        self.record_id = record_id


class DuplicateRecord(StoreError):
    def __init__(self, store_name: str, record_id: str):
        super().__init__(f"{store_name}: a record with id {record_id!r} already exists")
        self.store_name = store_name
        self.record_id = record_id
