"""Model modules."""
from taskpwa.models.local_task import LocalTaskRecord
