from lounge.store.records import RecordStore, InMemoryRecordStore, KeyValueRecordStore

__all__ = ["RecordStore", "InMemoryRecordStore", "KeyValueRecordStore"]
