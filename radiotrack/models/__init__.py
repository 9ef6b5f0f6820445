from radiotrack.models.record_collection import RecordCollection

__all__ = ["RecordCollection"]
