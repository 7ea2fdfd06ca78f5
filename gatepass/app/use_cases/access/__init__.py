from .dtos import AccessLogPageResponse, AccessLogResponse, ManualEntryCommand
from .list_access_logs_use_case import ListAccessLogsUseCase
from .record_manual_entry_use_case import RecordManualEntryUseCase

__all__ = [
    "ListAccessLogsUseCase",
    "RecordManualEntryUseCase",
    "AccessLogPageResponse",
    "AccessLogResponse",
    "ManualEntryCommand",
]
